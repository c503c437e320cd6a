"""API views for guest reservations and their administration."""

from __future__ import annotations

from dataclasses import asdict

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .domain import errors
from .domain.entities import StagingState
from .engine import get_availability_service, get_staging_workflow, get_transaction_manager
from .filters import ReservationFilterSet
from .models import Reservation
from .responses import error_response
from .serializers import (
    BookRoomQuerySerializer,
    ContactDetailsSerializer,
    DateRangeSerializer,
    ReservationSerializer,
    RoomAvailabilitySerializer,
)
from .staging import DjangoSessionStore


def _staged_payload(staged) -> dict:
    payload = staged.to_dict()
    payload["state"] = staged.state.value
    return payload


class GuestFlowView(APIView):
    """Base for the staging endpoints: anonymous guests, session-backed."""

    permission_classes = [permissions.AllowAny]

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        self.workflow = get_staging_workflow()
        self.session = DjangoSessionStore(request.session)


class SearchAvailabilityView(GuestFlowView):
    """Free rooms for a date range; stages the dates in the session."""

    def post(self, request):  # type: ignore
        serializer = DateRangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        start = serializer.validated_data["start"]
        end = serializer.validated_data["end"]
        try:
            rooms = self.workflow.search(self.session, start, end)
        except errors.ReservationError as exc:
            return error_response(exc)
        return Response(
            {
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "rooms": [asdict(room) for room in rooms],
            }
        )


class RoomAvailabilityJSONView(APIView):
    """Single-room check used by the room pages; always answers with ok true/false."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = RoomAvailabilitySerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"ok": False, "message": "Invalid request", "errors": serializer.errors})

        data = serializer.validated_data
        payload = {
            "room_id": data["room_id"],
            "start_date": data["start"].isoformat(),
            "end_date": data["end"].isoformat(),
        }
        try:
            ok = get_availability_service().is_room_free(data["room_id"], data["start"], data["end"])
        except errors.ReservationError as exc:
            return Response({"ok": False, "message": str(exc), **payload})
        return Response({"ok": ok, "message": "" if ok else "Room is not available", **payload})


class ChooseRoomView(GuestFlowView):
    def post(self, request, room_id: int):  # type: ignore
        try:
            staged = self.workflow.choose_room(self.session, room_id)
        except errors.ReservationError as exc:
            return error_response(exc)
        return Response(_staged_payload(staged))


class BookRoomView(GuestFlowView):
    """Link from a room page: /book-room/?id=1&s=2050-01-01&e=2050-01-02."""

    def get(self, request):  # type: ignore
        serializer = BookRoomQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            staged = self.workflow.book_room(self.session, data["id"], data["s"], data["e"])
        except errors.ReservationError as exc:
            return error_response(exc)
        return Response(_staged_payload(staged))


class MakeReservationView(GuestFlowView):
    def get(self, request):  # type: ignore
        staged = self.workflow.current(self.session)
        if staged is None or staged.state != StagingState.ROOM_CHOSEN:
            return error_response(errors.NoStagedReservationError("Can't get reservation from session"))
        return Response(_staged_payload(staged))

    def post(self, request):  # type: ignore
        serializer = ContactDetailsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            reservation = self.workflow.confirm(self.session, serializer.to_contact())
        except errors.ReservationError as exc:
            return error_response(exc)
        return Response(
            {
                "id": reservation.id,
                "room_id": reservation.room_id,
                "start_date": reservation.start_date.isoformat(),
                "end_date": reservation.end_date.isoformat(),
            },
            status=status.HTTP_201_CREATED,
        )


class ReservationSummaryView(GuestFlowView):
    def get(self, request):  # type: ignore
        summary = self.workflow.pop_summary(self.session)
        if summary is None:
            return error_response(errors.NotFoundError("Can't get reservation from session"))
        return Response(summary)


class StartOverView(GuestFlowView):
    def post(self, request):  # type: ignore
        self.workflow.reset(self.session)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ReservationAdminViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Reservations for administrators: list, show, mark processed, cancel."""

    queryset = Reservation.objects.select_related("room", "restriction").all()
    serializer_class = ReservationSerializer
    permission_classes = [permissions.IsAdminUser]
    filterset_class = ReservationFilterSet

    def destroy(self, request, *args, **kwargs):  # type: ignore
        reservation: Reservation = self.get_object()
        try:
            get_transaction_manager().cancel_reservation(reservation.pk)
        except errors.ReservationError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def process(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()
        try:
            get_transaction_manager().mark_processed(reservation.pk)
        except errors.ReservationError as exc:
            return error_response(exc)
        reservation.refresh_from_db()
        return Response(self.get_serializer(reservation).data)
