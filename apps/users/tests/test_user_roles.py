"""Tests for club roles and token authentication against the API."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.reservations.domain.entities import ActingUser
from apps.users.models import User


class UserRoleTests(APITestCase):
    def test_new_users_are_standard_members(self) -> None:
        user = User.objects.create_user(username="max", password="StrongPass123")

        self.assertEqual(user.role, User.RoleChoices.STANDARD)
        self.assertFalse(user.is_club_admin())
        self.assertFalse(user.is_board_member())
        self.assertFalse(user.is_observer())

    def test_role_helpers(self) -> None:
        admin = User.objects.create_user(username="chef", password="x", role=User.RoleChoices.ADMIN)
        board = User.objects.create_user(username="vorstand", password="x", role=User.RoleChoices.BOARD_MEMBER)
        observer = User.objects.create_user(username="gast", password="x", role=User.RoleChoices.OBSERVER)

        self.assertTrue(admin.is_club_admin())
        self.assertTrue(board.is_board_member())
        self.assertTrue(observer.is_observer())
        self.assertEqual(str(board), "vorstand (Vorstand)")

    def test_superusers_start_out_as_admins(self) -> None:
        superuser = User.objects.create_superuser(username="root", email="root@example.com", password="StrongPass123")
        explicit = User.objects.create_superuser(username="kassierer", password="StrongPass123", role=User.RoleChoices.BOARD_MEMBER)

        self.assertTrue(superuser.is_superuser)
        self.assertTrue(superuser.is_club_admin())
        self.assertEqual(explicit.role, User.RoleChoices.BOARD_MEMBER)

    def test_acting_user_is_built_from_stored_user(self) -> None:
        User.objects.create_user(username="lena", password="x", role=User.RoleChoices.BOARD_MEMBER)
        user = User.objects.get(username="lena")

        acting = ActingUser.from_user(user)

        self.assertEqual(acting.id, user.pk)
        self.assertEqual(acting.username, "lena")
        self.assertEqual(acting.role, "board_member")

    def test_bearer_token_authenticates_reservation_requests(self) -> None:
        user = User.objects.create_user(username="tom", password="StrongPass123")
        token = RefreshToken.for_user(user).access_token

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get(reverse("reservation-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_invalid_token_is_rejected(self) -> None:
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

        response = self.client.get(reverse("reservation-list"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
