"""Room catalog and restriction calendar models."""

from __future__ import annotations

from django.core.exceptions import ValidationError  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

# Name of the PostgreSQL exclusion constraint added by migration 0003.
NO_OVERLAP_CONSTRAINT = "room_restriction_no_overlap"


class Room(models.Model):
    """A bookable room. Reference data, provisioned by administrators."""

    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name


class RoomRestriction(models.Model):
    """An interval [start_date, end_date) for which a room is unavailable."""

    class Kind(models.TextChoices):
        RESERVATION = "reservation", _("Reservation")
        OWNER_BLOCK = "owner_block", _("Owner block")

    room = models.ForeignKey(
        Room,
        on_delete=models.PROTECT,
        related_name="restrictions",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    kind = models.CharField(max_length=20, choices=Kind.choices)
    # Lookup only: the reservation row cannot be deleted while this exists.
    reservation = models.OneToOneField(
        "reservations.Reservation",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="restriction",
    )
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room restriction")
        verbose_name_plural = _("Room restrictions")
        ordering = ["room_id", "start_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="restriction_valid_dates",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(kind="reservation", reservation__isnull=False)
                    | models.Q(kind="owner_block", reservation__isnull=True)
                ),
                name="restriction_kind_matches_reservation",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "start_date", "end_date"], name="restriction_room_dates_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.get_kind_display()} {self.room_id}: {self.start_date} - {self.end_date}"

    def clean(self) -> None:
        if self.start_date >= self.end_date:
            raise ValidationError(_("End date must be after start date."))
