"""URL routing for the rooms domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import OwnerBlockCreateView, OwnerBlockDetailView, RoomCalendarView, RoomViewSet

router = SimpleRouter()
router.register(r"", RoomViewSet, basename="room")

urlpatterns = [
    path("calendar/", RoomCalendarView.as_view(), name="room-calendar"),
    path("<int:room_id>/blocks/", OwnerBlockCreateView.as_view(), name="room-block-create"),
    path("blocks/<int:pk>/", OwnerBlockDetailView.as_view(), name="room-block-detail"),
    path("", include(router.urls)),
]
