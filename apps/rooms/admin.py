"""Admin registrations for the rooms domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Room, RoomRestriction


class RoomRestrictionInline(admin.TabularInline):
    model = RoomRestriction
    extra = 0
    fields = ("start_date", "end_date", "kind", "reservation", "reason")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None) -> bool:  # type: ignore
        return False


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "created_at")
    search_fields = ("name",)
    inlines = [RoomRestrictionInline]


@admin.register(RoomRestriction)
class RoomRestrictionAdmin(admin.ModelAdmin):
    """Read-only: restrictions are written by the booking engine."""

    list_display = ("room", "kind", "start_date", "end_date", "reservation", "reason")
    list_filter = ("kind", "room")
    date_hierarchy = "start_date"

    def has_add_permission(self, request) -> bool:  # type: ignore
        return False

    def has_change_permission(self, request, obj=None) -> bool:  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None) -> bool:  # type: ignore
        return False
