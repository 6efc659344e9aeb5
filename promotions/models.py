# promotions/models.py
from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator


class Coupon(models.Model):
    """Discount coupons"""
    TYPE_PERCENTAGE = 'percentage'
    TYPE_FIXED_AMOUNT = 'fixed_amount'
    DISCOUNT_TYPES = [
        (TYPE_PERCENTAGE, 'Percentage'),
        (TYPE_FIXED_AMOUNT, 'Fixed Amount'),
    ]

    code = models.CharField(max_length=50, unique=True, db_index=True)

    type = models.CharField(max_length=20, choices=DISCOUNT_TYPES)
    value = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])

    # Conditions
    minimum_order_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    # Limitations
    usage_limit = models.PositiveIntegerField(null=True, blank=True)  # Null means unlimited
    used_count = models.PositiveIntegerField(default=0)

    # Validity
    expires_at = models.DateTimeField(null=True, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'coupons'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['code']),
            models.Index(fields=['is_active', 'expires_at']),
        ]

    def __str__(self):
        return self.code

    def is_expired(self, now):
        return self.expires_at is not None and self.expires_at < now

    @property
    def is_exhausted(self):
        return self.usage_limit is not None and self.used_count >= self.usage_limit
