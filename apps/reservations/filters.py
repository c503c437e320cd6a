"""FilterSet for the administrators' reservation list."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Reservation


class ReservationFilterSet(django_filters.FilterSet):
    processed = django_filters.BooleanFilter(field_name="processed")
    room = django_filters.NumberFilter(field_name="room_id", lookup_expr="exact")
    start_from = django_filters.DateFilter(field_name="start_date", lookup_expr="gte")
    end_until = django_filters.DateFilter(field_name="end_date", lookup_expr="lte")

    class Meta:
        model = Reservation
        fields = ["processed", "room"]
