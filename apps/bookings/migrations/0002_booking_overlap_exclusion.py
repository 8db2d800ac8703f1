"""Exclusion constraint: no two confirmed bookings of a slot may overlap.

This is the actual guarantee against double booking under concurrent
requests. It needs PostgreSQL (btree_gist + range types); on other
databases the migration is a no-op and only the application-level overlap
check applies.
"""

from django.db import migrations

OVERLAP_CONSTRAINT_NAME = "booking_no_overlap_per_slot"

TABLE = "bookings_booking"


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    schema_editor.execute(
        f"ALTER TABLE {TABLE} ADD CONSTRAINT {OVERLAP_CONSTRAINT_NAME} "
        f"EXCLUDE USING gist (slot_id WITH =, tstzrange(start_time, end_time, '[)') WITH &&) "
        f"WHERE (status = 'confirmed')"
    )


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(f"ALTER TABLE {TABLE} DROP CONSTRAINT IF EXISTS {OVERLAP_CONSTRAINT_NAME}")


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
