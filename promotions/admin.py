from django.contrib import admin
from unfold.admin import ModelAdmin

from .models import Coupon


@admin.register(Coupon)
class CouponAdmin(ModelAdmin):
    list_display = ("code", "type", "value", "used_count", "usage_limit", "expires_at", "is_active")
    list_filter = ("type", "is_active")
    search_fields = ("code",)
    readonly_fields = ("used_count",)
