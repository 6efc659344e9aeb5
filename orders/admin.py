from django.contrib import admin
from django.utils.html import format_html
from unfold.admin import ModelAdmin, TabularInline
from unfold.decorators import display

from .models import Order, OrderItem, OrderStatusHistory

STATUS_COLOURS = {
    'pending':    ('#fef3c7', '#92400e'),
    'processing': ('#dbeafe', '#1e40af'),
    'completed':  ('#dcfce7', '#166534'),
    'cancelled':  ('#fee2e2', '#991b1b'),
    'refunded':   ('#f3f4f6', '#374151'),
}


class OrderItemInline(TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "quantity", "unit_price", "total_price")

    def has_add_permission(self, request, obj=None):
        return False


class OrderStatusHistoryInline(TabularInline):
    model = OrderStatusHistory
    extra = 0
    can_delete = False
    readonly_fields = ("from_status", "to_status", "notes", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(ModelAdmin):
    list_display = ["id", "user", "final_amount", "status_display", "payment_status", "created_at"]
    list_filter = ["status", "payment_status"]
    search_fields = ["user__email"]
    readonly_fields = ["user", "total_amount", "discount_amount", "final_amount", "coupon", "status"]
    inlines = [OrderItemInline, OrderStatusHistoryInline]

    # Orders are placed and cancelled through the order workflow only
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @display(description="Status", ordering="status")
    def status_display(self, obj):
        background, colour = STATUS_COLOURS.get(obj.status, ('#f3f4f6', '#374151'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 4px 12px; border-radius: 12px; font-size: 12px; font-weight: 500;">{}</span>',
            background, colour, obj.get_status_display()
        )
