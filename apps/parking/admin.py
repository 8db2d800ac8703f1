"""Admin registration for parking slots."""

from __future__ import annotations

from django.contrib import admin

from .models import Slot


@admin.register(Slot)
class SlotAdmin(admin.ModelAdmin):
    list_display = ("slot_number", "slot_type", "status", "price_per_hour", "owner", "updated_at")
    list_filter = ("slot_type", "status")
    search_fields = ("slot_number", "owner__email", "owner__unit_number")
    raw_id_fields = ("owner",)
    readonly_fields = ("created_at", "updated_at")
