"""Filters for reservation listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .catalog import group_choices, resource_choices
from .models import Reservation


class ReservationFilter(django_filters.FilterSet):
    resource = django_filters.ChoiceFilter(choices=resource_choices())
    group = django_filters.ChoiceFilter(choices=group_choices())
    date = django_filters.DateFilter()
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    username = django_filters.CharFilter()

    class Meta:
        model = Reservation
        fields = ["resource", "group", "date", "date_from", "date_to", "username"]
