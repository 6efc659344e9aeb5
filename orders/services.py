# orders/services.py
"""
Order workflow and lifecycle.

Creation and every status change run in one transaction. Product, coupon and
order rows are locked with ``select_for_update`` before they are checked, and
stock and coupon counters move through conditional ``UPDATE``s, so a failure
at any step leaves no partial order behind.
"""
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from catalog.models import Product
from core.exceptions import NotFound, PriceMismatch, InsufficientStock, InvalidTransition, ValidationFailure
from core.money import to_money, ZERO, MAX_AMOUNT
from promotions.models import Coupon
from promotions.services import check_coupon, redeem_coupon
from users.models import User
from .models import Order, OrderItem, OrderStatusHistory
from .signals import order_created

logger = logging.getLogger(__name__)


# ==================== CREATION ====================

def _lock_products(items):
    product_ids = sorted({line['product_id'] for line in items})
    locked = Product.objects.select_for_update().filter(pk__in=product_ids).order_by('pk')
    return {product.pk: product for product in locked}


def _price_lines(items, products):
    """
    Validate each line against the locked catalog rows, in input order.

    Returns ``(priced_lines, total_amount)``; quantities for a product that
    appears on several lines are checked against stock together.
    """
    tolerance = settings.STORE_PRICE_TOLERANCE
    requested = {}
    priced = []
    total = ZERO

    for line in items:
        product_id = line['product_id']
        quantity = line['quantity']
        product = products.get(product_id)

        if product is None or not product.is_active:
            raise NotFound(f"Product with id {product_id} not found")

        if abs(product.price - line['price']) > tolerance:
            raise PriceMismatch(f"Price mismatch for product {product_id}")

        requested[product_id] = requested.get(product_id, 0) + quantity
        if product.stock_quantity is not None and product.stock_quantity < requested[product_id]:
            raise InsufficientStock(f"Insufficient stock for product {product_id}")

        line_total = to_money(product.price * quantity)
        if line_total > MAX_AMOUNT:
            raise ValidationFailure(f"Line total for product {product_id} exceeds {MAX_AMOUNT}")
        priced.append((product, quantity, product.price, line_total))
        total += line_total

    if total > MAX_AMOUNT:
        raise ValidationFailure(f"Order total exceeds {MAX_AMOUNT}")
    return priced, to_money(total)


def _decrement_stock(priced_lines):
    demand = {}
    for product, quantity, _, _ in priced_lines:
        if product.stock_quantity is not None:
            demand[product.pk] = demand.get(product.pk, 0) + quantity

    for product_id, quantity in demand.items():
        updated = (
            Product.objects
            .filter(pk=product_id, stock_quantity__gte=quantity)
            .update(stock_quantity=F('stock_quantity') - quantity, updated_at=timezone.now())
        )
        if not updated:
            raise InsufficientStock(f"Insufficient stock for product {product_id}")


@transaction.atomic
def create_order(user_id, items, coupon_code=None):
    """
    Place an order for ``items`` (``product_id``, ``quantity``, ``price``).

    Checks run fail-fast: user, then every line, then the coupon. Only when
    all pass is anything written; header, lines, coupon use and stock
    decrements commit or roll back together.
    """
    if not User.objects.filter(pk=user_id).exists():
        raise NotFound("User not found")

    products = _lock_products(items)
    priced_lines, total_amount = _price_lines(items, products)

    coupon = None
    discount_amount = ZERO
    if coupon_code:
        coupon = Coupon.objects.select_for_update().filter(code=coupon_code).first()
        discount_amount = check_coupon(coupon, total_amount, timezone.now())

    order = Order.objects.create(
        user_id=user_id,
        total_amount=total_amount,
        discount_amount=discount_amount,
        final_amount=to_money(total_amount - discount_amount),
        coupon=coupon,
        status=Order.STATUS_PENDING,
        payment_status=Order.PAYMENT_PENDING,
    )

    OrderItem.objects.bulk_create([
        OrderItem(
            order=order,
            product=product,
            quantity=quantity,
            unit_price=unit_price,
            total_price=line_total,
        )
        for product, quantity, unit_price, line_total in priced_lines
    ])

    OrderStatusHistory.objects.create(
        order=order,
        from_status='',
        to_status=Order.STATUS_PENDING,
        notes='Order placed',
    )

    if coupon is not None:
        redeem_coupon(coupon)

    _decrement_stock(priced_lines)

    order_created.send(sender=Order, order=order)

    logger.info(
        f"Order {order.pk} created for user {user_id}: total={order.total_amount} "
        f"discount={order.discount_amount} final={order.final_amount}"
        f"{f' coupon={coupon.code}' if coupon else ''}"
    )
    return order


# ==================== LIFECYCLE ====================

def _lock_order(order_id, user_id=None):
    orders = Order.objects.select_for_update().filter(pk=order_id)
    if user_id is not None:
        orders = orders.filter(user_id=user_id)
    order = orders.first()
    if order is None:
        raise NotFound("Order not found")
    return order


def _record_status(order, to_status, notes=''):
    from_status = order.status
    order.status = to_status
    order.save(update_fields=['status', 'updated_at'])
    OrderStatusHistory.objects.create(
        order=order,
        from_status=from_status,
        to_status=to_status,
        notes=notes,
    )
    logger.info(f"Order {order.pk} status {from_status} -> {to_status}")


def _cancel_locked(order, notes):
    if order.status in (Order.STATUS_COMPLETED, Order.STATUS_REFUNDED):
        raise InvalidTransition("Cannot cancel completed or refunded orders")
    if order.status == Order.STATUS_CANCELLED:
        raise InvalidTransition("Order is already cancelled")

    _record_status(order, Order.STATUS_CANCELLED, notes)

    restocked = {}
    for item in order.items.all():
        restocked[item.product_id] = restocked.get(item.product_id, 0) + item.quantity

    # Products without stock tracking keep a null stock_quantity
    for product_id, quantity in restocked.items():
        Product.objects.filter(pk=product_id, stock_quantity__isnull=False).update(
            stock_quantity=F('stock_quantity') + quantity,
            updated_at=timezone.now(),
        )
    return order


@transaction.atomic
def cancel_order(order_id, user_id=None):
    """Cancel a pending or processing order and put its stock back.

    With ``user_id`` the order must belong to that user; a foreign order is
    reported exactly like a missing one.
    """
    order = _lock_order(order_id, user_id)
    notes = 'Cancelled by customer' if user_id is not None else 'Cancelled'
    return _cancel_locked(order, notes)


@transaction.atomic
def update_order_status(order_id, status):
    order = _lock_order(order_id)

    if status == Order.STATUS_CANCELLED:
        return _cancel_locked(order, 'Cancelled via status update')

    if status == order.status:
        raise InvalidTransition(f"Order is already {status}")
    if not order.can_transition_to(status):
        raise InvalidTransition(f"Cannot change order status from {order.status} to {status}")

    _record_status(order, status)
    return order


@transaction.atomic
def update_payment_status(order_id, payment_status):
    order = _lock_order(order_id)
    previous = order.payment_status
    order.payment_status = payment_status
    order.save(update_fields=['payment_status', 'updated_at'])
    logger.info(f"Order {order.pk} payment status {previous} -> {payment_status}")
    return order


# ==================== QUERIES ====================

def list_orders(user_id=None, status=None, payment_status=None, limit=None, offset=None):
    orders = Order.objects.all().order_by('-created_at', '-id')

    if user_id is not None:
        orders = orders.filter(user_id=user_id)
    if status:
        orders = orders.filter(status=status)
    if payment_status:
        orders = orders.filter(payment_status=payment_status)

    offset = offset or 0
    if limit is not None:
        return orders[offset:offset + limit]
    return orders[offset:]


def get_user_orders(user_id):
    return (
        Order.objects.filter(user_id=user_id)
        .prefetch_related('items__product')
        .order_by('-created_at', '-id')
    )


def get_order(order_id):
    return (
        Order.objects.select_related('user', 'coupon')
        .prefetch_related('items__product')
        .filter(pk=order_id)
        .first()
    )
