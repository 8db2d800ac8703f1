import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Slot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("slot_number", models.CharField(max_length=20, unique=True, verbose_name="Slot number")),
                (
                    "slot_type",
                    models.CharField(
                        choices=[("covered", "Covered"), ("uncovered", "Uncovered"), ("visitor", "Visitor")],
                        default="uncovered",
                        max_length=9,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("available", "Available"), ("maintenance", "Maintenance"), ("reserved", "Reserved")],
                        default="available",
                        max_length=11,
                    ),
                ),
                ("description", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty means the slot is shared by all residents.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="owned_slots",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Parking slot",
                "verbose_name_plural": "Parking slots",
                "ordering": ["slot_number"],
                "indexes": [
                    models.Index(fields=["status"], name="parking_slot_status_idx"),
                    models.Index(fields=["owner"], name="parking_slot_owner_idx"),
                ],
            },
        ),
    ]
