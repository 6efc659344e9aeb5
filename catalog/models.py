# catalog/models.py
from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator


class Category(models.Model):
    """Product categories"""
    name = models.CharField(max_length=100)
    slug = models.SlugField(unique=True, db_index=True)
    description = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'catalog_categories'
        verbose_name_plural = 'Categories'
        ordering = ['name']
        indexes = [
            models.Index(fields=['slug']),
            models.Index(fields=['is_active']),
        ]

    def __str__(self):
        return self.name


class Product(models.Model):
    """Digital product or bookable service"""
    TYPE_DIGITAL_PRODUCT = 'digital_product'
    TYPE_SERVICE = 'service'
    PRODUCT_TYPES = [
        (TYPE_DIGITAL_PRODUCT, 'Digital Product'),
        (TYPE_SERVICE, 'Service'),
    ]

    name = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)

    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    type = models.CharField(max_length=20, choices=PRODUCT_TYPES, db_index=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')

    image_url = models.URLField(max_length=500, null=True, blank=True)
    download_url = models.URLField(max_length=500, null=True, blank=True)

    # Null means the product is not stock-tracked
    stock_quantity = models.PositiveIntegerField(null=True, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'catalog_products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category', 'is_active']),
            models.Index(fields=['type', 'is_active']),
            models.Index(fields=['-created_at']),
        ]

    def __str__(self):
        return self.name

    @property
    def is_stock_tracked(self):
        return self.stock_quantity is not None
