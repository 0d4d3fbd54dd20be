"""User domain models.

The club distinguishes four roles. Admins and board members manage the
booking calendar and may book the halls, standard members book the
remaining resources, observers only look at the calendar.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, UserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(UserManager):
    """Superusers manage the whole calendar, so they start out as admins."""

    def create_superuser(self, username: str, email: str | None = None, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Club member with a role."""

    class RoleChoices(models.TextChoices):
        ADMIN = "admin", _("Admin")
        BOARD_MEMBER = "board_member", _("Vorstand")
        STANDARD = "standard", _("Standard")
        OBSERVER = "observer", _("Beobachter")

    role = models.CharField(
        _("Rolle"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.STANDARD,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = _("Benutzer")
        verbose_name_plural = _("Benutzer")
        ordering = ["username"]

    def __str__(self) -> str:
        return f"{self.username} ({self.get_role_display()})"

    def is_club_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN

    def is_board_member(self) -> bool:
        return self.role == self.RoleChoices.BOARD_MEMBER

    def is_observer(self) -> bool:
        return self.role == self.RoleChoices.OBSERVER


User = CustomUser
