"""Serializers for the reservation endpoints.

They play the form-validation role: parse dates and ids, require the
contact fields and check their shape. Date ordering and room existence
are checked again by the engine.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.entities import ContactDetails
from .models import Reservation


class DateRangeSerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()


class RoomAvailabilitySerializer(DateRangeSerializer):
    room_id = serializers.IntegerField(min_value=1)


class BookRoomQuerySerializer(serializers.Serializer):
    """Query string of the book-room link: ?id=<room>&s=<start>&e=<end>."""

    id = serializers.IntegerField(min_value=1)
    s = serializers.DateField()
    e = serializers.DateField()


class ContactDetailsSerializer(serializers.Serializer):
    first_name = serializers.CharField(min_length=3, max_length=255)
    last_name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=64)

    def to_contact(self) -> ContactDetails:
        data = self.validated_data
        return ContactDetails(
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            phone=data["phone"],
        )


class ReservationSerializer(serializers.ModelSerializer):
    """Read-only view of a committed reservation for administrators."""

    room_name = serializers.ReadOnlyField(source="room.name")
    restriction_id = serializers.ReadOnlyField(source="restriction.id")

    class Meta:
        model = Reservation
        fields = [
            "id",
            "first_name",
            "last_name",
            "email",
            "phone",
            "room",
            "room_name",
            "start_date",
            "end_date",
            "processed",
            "restriction_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
