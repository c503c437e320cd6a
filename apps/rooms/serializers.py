"""Serializers for the room catalog and the restriction calendar."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    class Meta:
        model = Room
        fields = ["id", "name"]
        read_only_fields = fields


class OwnerBlockWriteSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class CalendarQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1900, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)


def restriction_payload(restriction) -> dict:
    return {
        "id": restriction.id,
        "room_id": restriction.room_id,
        "start_date": restriction.start_date.isoformat(),
        "end_date": restriction.end_date.isoformat(),
        "kind": restriction.kind.value,
        "reservation_id": restriction.reservation_id,
        "reason": restriction.reason,
    }
