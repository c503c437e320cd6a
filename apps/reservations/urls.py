"""URL routing for the reservation domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    BookRoomView,
    ChooseRoomView,
    MakeReservationView,
    ReservationAdminViewSet,
    ReservationSummaryView,
    RoomAvailabilityJSONView,
    SearchAvailabilityView,
    StartOverView,
)

router = DefaultRouter()
router.register(r"admin/reservations", ReservationAdminViewSet, basename="reservation-admin")

urlpatterns = [
    path("search-availability/", SearchAvailabilityView.as_view(), name="search-availability"),
    path(
        "search-availability-json/",
        RoomAvailabilityJSONView.as_view(),
        name="search-availability-json",
    ),
    path("choose-room/<int:room_id>/", ChooseRoomView.as_view(), name="choose-room"),
    path("book-room/", BookRoomView.as_view(), name="book-room"),
    path("make-reservation/", MakeReservationView.as_view(), name="make-reservation"),
    path("reservation-summary/", ReservationSummaryView.as_view(), name="reservation-summary"),
    path("start-over/", StartOverView.as_view(), name="start-over"),
    path("", include(router.urls)),
]
