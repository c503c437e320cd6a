import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("rooms", "0001_initial"),
        ("reservations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="RoomRestriction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                (
                    "kind",
                    models.CharField(
                        choices=[("reservation", "Reservation"), ("owner_block", "Owner block")],
                        max_length=20,
                    ),
                ),
                ("reason", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "reservation",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="restriction",
                        to="reservations.reservation",
                    ),
                ),
                (
                    "room",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="restrictions",
                        to="rooms.room",
                    ),
                ),
            ],
            options={
                "verbose_name": "Room restriction",
                "verbose_name_plural": "Room restrictions",
                "ordering": ["room_id", "start_date"],
                "indexes": [
                    models.Index(fields=["room", "start_date", "end_date"], name="restriction_room_dates_idx"),
                ],
                "constraints": [
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
                ],
            },
        ),
    ]
