"""Admin registration for reservations.

Reservations are read-only here: every write goes through the booking
service.
"""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "resource",
        "date",
        "start_clock",
        "end_clock",
        "group",
        "username",
        "created_at",
    )
    list_filter = ("resource", "group", "date")
    search_fields = ("resource", "username", "purpose", "bus_destination")
    readonly_fields = (
        "resource",
        "group",
        "date",
        "start_time",
        "end_time",
        "bus_destination",
        "purpose",
        "user",
        "username",
        "created_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
