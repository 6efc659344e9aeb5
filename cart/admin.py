from django.contrib import admin
from unfold.admin import ModelAdmin

from .models import CartItem


@admin.register(CartItem)
class CartItemAdmin(ModelAdmin):
    list_display = ("user", "product", "quantity", "updated_at")
    search_fields = ("user__email", "product__name")
    list_select_related = ("user", "product")
