"""Reservation model."""

from __future__ import annotations

from django.core.exceptions import ValidationError  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Reservation(models.Model):
    """A committed reservation. Drafts never reach the database."""

    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=64)
    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    processed = models.BooleanField(
        default=False,
        help_text=_("Set once an administrator has reviewed the reservation."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["start_date", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="reservation_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "start_date", "end_date"], name="reservation_room_dates_idx"),
            models.Index(fields=["processed"], name="reservation_processed_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation #{self.pk} for room {self.room_id}"

    def clean(self) -> None:
        if self.start_date >= self.end_date:
            raise ValidationError(_("End date must be after start date."))
