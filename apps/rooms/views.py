"""API views for rooms, the administrators' calendar and owner blocks."""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from django.utils import timezone  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.reservations.domain import errors
from apps.reservations.engine import get_repository, get_transaction_manager
from apps.reservations.responses import error_response
from shared.domain.value_objects import DateRange

from .models import Room
from .serializers import (
    CalendarQuerySerializer,
    OwnerBlockWriteSerializer,
    RoomSerializer,
    restriction_payload,
)


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    """Public room catalog."""

    queryset = Room.objects.order_by("id")
    serializer_class = RoomSerializer
    permission_classes = [permissions.AllowAny]
    lookup_value_regex = r"\d+"


class RoomCalendarView(APIView):
    """
    Month view of every room's restrictions.

    Without ?year=&month= the current month is shown. Each room lists the
    restrictions overlapping the month and, per day, the id of the
    restriction occupying it.
    """

    permission_classes = [permissions.IsAdminUser]

    def get(self, request):  # type: ignore
        today = timezone.localdate()
        serializer = CalendarQuerySerializer(
            data={
                "year": request.query_params.get("year", today.year),
                "month": request.query_params.get("month", today.month),
            }
        )
        serializer.is_valid(raise_exception=True)
        year = serializer.validated_data["year"]
        month = serializer.validated_data["month"]

        first_day = date(year, month, 1)
        days_in_month = calendar.monthrange(year, month)[1]
        period = DateRange(first_day, first_day + timedelta(days=days_in_month))

        repository = get_repository()
        try:
            rooms = repository.list_rooms()
            restrictions = repository.restrictions_in_period(period)
        except errors.ReservationError as exc:
            return error_response(exc)

        by_room: dict[int, list] = {room.id: [] for room in rooms}
        for restriction in restrictions:
            by_room.setdefault(restriction.room_id, []).append(restriction)

        payload = []
        for room in rooms:
            occupied: dict[str, int] = {}
            for restriction in by_room[room.id]:
                for day in restriction.dates.days():
                    if period.contains(day):
                        occupied[day.isoformat()] = restriction.id
            payload.append(
                {
                    "id": room.id,
                    "name": room.name,
                    "restrictions": [restriction_payload(r) for r in by_room[room.id]],
                    "occupied_days": occupied,
                }
            )

        return Response(
            {
                "year": year,
                "month": month,
                "start_date": period.start_date.isoformat(),
                "end_date": period.end_date.isoformat(),
                "rooms": payload,
            }
        )


class OwnerBlockCreateView(APIView):
    """Block a room for a period without a reservation."""

    permission_classes = [permissions.IsAdminUser]

    def post(self, request, room_id: int):  # type: ignore
        serializer = OwnerBlockWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            restriction = get_transaction_manager().commit_owner_block(
                room_id,
                data["start_date"],
                data["end_date"],
                reason=data["reason"],
            )
        except errors.ReservationError as exc:
            return error_response(exc)
        return Response(restriction_payload(restriction), status=status.HTTP_201_CREATED)


class OwnerBlockDetailView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def delete(self, request, pk: int):  # type: ignore
        try:
            get_transaction_manager().release_owner_block(pk)
        except errors.ReservationError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
