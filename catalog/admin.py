from django.contrib import admin
from django.utils.html import format_html
from unfold.admin import ModelAdmin
from unfold.decorators import display

from .models import Category, Product


@admin.register(Category)
class CategoryAdmin(ModelAdmin):
    list_display = ("name", "slug", "is_active")
    prepopulated_fields = {"slug": ("name",)}
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(Product)
class ProductAdmin(ModelAdmin):
    list_display = [
        "name",
        "category_display",
        "type",
        "price",
        "stock_display",
        "is_active",
    ]
    list_filter = ["category", "type", "is_active"]
    search_fields = ["name", "description"]

    @display(description="Category", ordering="category__name")
    def category_display(self, obj):
        return format_html(
            '<span style="background: #dbeafe; color: #1e40af; padding: 4px 12px; border-radius: 12px; font-size: 12px; font-weight: 500;">{}</span>',
            obj.category.name
        )

    @display(description="Stock", ordering="stock_quantity")
    def stock_display(self, obj):
        if obj.stock_quantity is None:
            return "Not tracked"
        return obj.stock_quantity
