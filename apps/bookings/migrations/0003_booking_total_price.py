from decimal import ROUND_HALF_UP, Decimal

from django.db import migrations, models


def price_existing_bookings(apps, schema_editor):
    Booking = apps.get_model("bookings", "Booking")
    Slot = apps.get_model("parking", "Slot")
    for booking in Booking.objects.all().iterator():
        rate = Slot.objects.filter(pk=booking.slot_id).values_list("price_per_hour", flat=True).first()
        hours = Decimal(int((booking.end_time - booking.start_time).total_seconds())) / Decimal(3600)
        booking.total_price = (rate * hours).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        booking.save(update_fields=["total_price"])


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0002_booking_overlap_exclusion"),
        ("parking", "0002_slot_price_per_hour"),
    ]

    operations = [
        migrations.AddField(
            model_name="booking",
            name="total_price",
            field=models.DecimalField(decimal_places=2, default=Decimal("0.01"), editable=False, max_digits=10),
            preserve_default=False,
        ),
        migrations.RunPython(price_existing_bookings, migrations.RunPython.noop),
        migrations.AddConstraint(
            model_name="booking",
            constraint=models.CheckConstraint(
                condition=models.Q(total_price__gt=0),
                name="booking_price_positive",
            ),
        ),
    ]
