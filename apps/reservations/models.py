"""Reservation persistence models."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import MINUTES_PER_DAY, format_clock

from .catalog import get_resource, group_choices, resource_choices


class Reservation(models.Model):
    """Buchung einer Vereinsressource für ein Zeitfenster an einem Tag."""

    resource = models.CharField(_("Ressource"), max_length=64, choices=resource_choices())
    group = models.CharField(_("Gruppe"), max_length=32, choices=group_choices())
    date = models.DateField(_("Datum"))
    start_time = models.PositiveSmallIntegerField(
        _("Startzeit"),
        help_text=_("Minuten seit Mitternacht."),
    )
    end_time = models.PositiveSmallIntegerField(
        _("Endzeit"),
        help_text=_("Minuten seit Mitternacht, exklusiv."),
    )
    bus_destination = models.CharField(_("Ziel der Fahrt"), max_length=255, blank=True)
    purpose = models.CharField(_("Verwendungszweck"), max_length=255, blank=True)
    user = models.CharField(_("Benutzer-ID"), max_length=64)
    username = models.CharField(_("Angemeldet von"), max_length=150)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Reservierung")
        verbose_name_plural = _("Reservierungen")
        ordering = ["date", "start_time", "resource"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(start_time__lt=models.F("end_time")),
                name="reservation_valid_window",
            ),
            models.CheckConstraint(
                condition=models.Q(end_time__lte=MINUTES_PER_DAY),
                name="reservation_within_day",
            ),
        ]
        indexes = [
            models.Index(fields=["resource", "date"], name="reservation_resource_day"),
        ]

    def __str__(self) -> str:
        return f"{self.resource} {self.date} {self.start_clock}-{self.end_clock}"

    @property
    def start_clock(self) -> str:
        return format_clock(self.start_time)

    @property
    def end_clock(self) -> str:
        return format_clock(self.end_time)

    @property
    def category(self):
        resource = get_resource(self.resource)
        return resource.category if resource else None


class ResourceDay(models.Model):
    """
    Lock anchor for one (resource, day) key.

    Writers take SELECT ... FOR UPDATE on this row before re-checking
    conflicts and inserting, which serializes them across processes.
    """

    resource = models.CharField(max_length=64)
    date = models.DateField()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["resource", "date"], name="unique_resource_day"),
        ]

    def __str__(self) -> str:
        return f"{self.resource} @ {self.date}"
