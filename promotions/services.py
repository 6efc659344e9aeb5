# promotions/services.py
"""
Coupon ledger.

``check_coupon`` is the single source of the redemption rules; order
creation and the pre-checkout ``validate_coupon`` both go through it.
"""
import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from core.exceptions import (
    Conflict, NotFound, ValidationFailure,
    InvalidCoupon, CouponExpired, CouponExhausted, MinimumOrderNotMet,
)
from core.money import to_money
from .models import Coupon

logger = logging.getLogger(__name__)

HUNDRED = Decimal('100')


def calculate_discount(coupon, order_amount):
    """Discount for ``order_amount``, clamped to it and rounded to cents."""
    if coupon.type == Coupon.TYPE_PERCENTAGE:
        discount = order_amount * coupon.value / HUNDRED
    else:
        discount = coupon.value
    return to_money(min(discount, order_amount))


def check_coupon(coupon, order_amount, now=None):
    """
    Run the redemption checks in order and return the discount.

    Raises the matching ``ValidationFailure`` subclass on the first check
    that fails: unknown or inactive, expired, exhausted, below minimum.
    """
    now = now or timezone.now()

    if coupon is None or not coupon.is_active:
        raise InvalidCoupon("Invalid coupon code")
    if coupon.is_expired(now):
        raise CouponExpired("Coupon has expired")
    if coupon.is_exhausted:
        raise CouponExhausted("Coupon usage limit reached")
    if coupon.minimum_order_amount is not None and order_amount < coupon.minimum_order_amount:
        raise MinimumOrderNotMet(f"Minimum order amount of {to_money(coupon.minimum_order_amount)} required")

    return calculate_discount(coupon, order_amount)


def redeem_coupon(coupon):
    """Count one use, refusing to step past ``usage_limit``."""
    updated = (
        Coupon.objects
        .filter(pk=coupon.pk)
        .filter(Q(usage_limit__isnull=True) | Q(used_count__lt=F('usage_limit')))
        .update(used_count=F('used_count') + 1, updated_at=timezone.now())
    )
    if not updated:
        raise CouponExhausted("Coupon usage limit reached")
    coupon.refresh_from_db(fields=['used_count', 'updated_at'])
    return coupon


def validate_coupon(code, order_amount):
    """Structured result for pre-checkout UIs; business failures are not raised."""
    coupon = Coupon.objects.filter(code=code).first()
    try:
        discount = check_coupon(coupon, to_money(order_amount))
    except ValidationFailure as e:
        return {'valid': False, 'error': e.message}
    return {'valid': True, 'coupon': coupon, 'discount': discount}


# ==================== CRUD ====================

def create_coupon(code, type, value, minimum_order_amount=None, usage_limit=None, expires_at=None):
    if Coupon.objects.filter(code=code).exists():
        raise Conflict(f"Coupon with code {code} already exists")

    try:
        with transaction.atomic():
            coupon = Coupon.objects.create(
                code=code,
                type=type,
                value=value,
                minimum_order_amount=minimum_order_amount,
                usage_limit=usage_limit,
                expires_at=expires_at,
            )
    except IntegrityError:
        raise Conflict(f"Coupon with code {code} already exists")

    logger.info(f"Coupon created: {coupon.code} ({coupon.type} {coupon.value})")
    return coupon


def list_coupons():
    return Coupon.objects.all().order_by('-created_at', '-id')


def get_coupon_by_code(code):
    """The coupon only while it is redeemable right now."""
    coupon = Coupon.objects.filter(code=code, is_active=True).first()
    if coupon is None or coupon.is_expired(timezone.now()) or coupon.is_exhausted:
        return None
    return coupon


def update_coupon(coupon_id, **changes):
    coupon = Coupon.objects.filter(pk=coupon_id).first()
    if coupon is None:
        raise NotFound("Coupon not found")

    for field in ('is_active', 'usage_limit', 'expires_at'):
        if field in changes:
            setattr(coupon, field, changes[field])
    coupon.save()
    logger.info(f"Coupon {coupon.code} updated: {', '.join(sorted(changes))}")
    return coupon


def delete_coupon(coupon_id):
    coupon = Coupon.objects.filter(pk=coupon_id).first()
    if coupon is None:
        raise NotFound("Coupon not found")
    if coupon.orders.exists():
        raise Conflict("Cannot delete coupon that has been used in orders")

    coupon.delete()
    logger.info(f"Coupon {coupon_id} deleted")
    return {'success': True}
