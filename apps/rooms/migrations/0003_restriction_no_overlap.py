"""
Reject overlapping restrictions for the same room at the database level.

PostgreSQL only: an exclusion constraint over daterange(start_date, end_date,
'[)') needs btree_gist for the equality part on room_id. Other backends rely
on the row lock taken by the booking engine.
"""

from django.db import migrations

CONSTRAINT = "room_restriction_no_overlap"


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    table = schema_editor.quote_name(apps.get_model("rooms", "RoomRestriction")._meta.db_table)
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    schema_editor.execute(
        f"ALTER TABLE {table} ADD CONSTRAINT {CONSTRAINT} "
        "EXCLUDE USING gist (room_id WITH =, daterange(start_date, end_date, '[)') WITH &&)"
    )


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    table = schema_editor.quote_name(apps.get_model("rooms", "RoomRestriction")._meta.db_table)
    schema_editor.execute(f"ALTER TABLE {table} DROP CONSTRAINT IF EXISTS {CONSTRAINT}")


class Migration(migrations.Migration):

    dependencies = [
        ("rooms", "0002_roomrestriction"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
