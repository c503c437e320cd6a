"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "room",
        "first_name",
        "last_name",
        "email",
        "start_date",
        "end_date",
        "processed",
        "created_at",
    )
    list_filter = ("processed", "room", "start_date")
    search_fields = ("first_name", "last_name", "email", "phone")
    # Reservations are created and cancelled through the booking engine only.
    readonly_fields = ("room", "start_date", "end_date", "created_at", "updated_at")

    def has_add_permission(self, request) -> bool:  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None) -> bool:  # type: ignore
        return False
