# cart/services.py
import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from catalog.models import Product
from core.exceptions import NotFound
from core.money import to_money, ZERO
from users.models import User
from .models import CartItem

logger = logging.getLogger(__name__)


@transaction.atomic
def add_to_cart(user_id, product_id, quantity):
    """Add ``quantity`` of a product; an existing line for it is topped up."""
    if not User.objects.filter(pk=user_id).exists():
        raise NotFound(f"User with id {user_id} not found")
    if not Product.objects.filter(pk=product_id).exists():
        raise NotFound(f"Product with id {product_id} not found")

    item, created = CartItem.objects.select_for_update().get_or_create(
        user_id=user_id,
        product_id=product_id,
        defaults={'quantity': quantity},
    )
    if not created:
        CartItem.objects.filter(pk=item.pk).update(
            quantity=F('quantity') + quantity,
            updated_at=timezone.now(),
        )
        item.refresh_from_db()
    return item


def get_cart_items(user_id):
    return CartItem.objects.filter(user_id=user_id).select_related('product')


def update_cart_item(item_id, quantity):
    item = CartItem.objects.filter(pk=item_id).first()
    if item is None:
        raise NotFound(f"Cart item with id {item_id} not found")

    item.quantity = quantity
    item.save(update_fields=['quantity', 'updated_at'])
    return item


def remove_from_cart(item_id, user_id):
    deleted, _ = CartItem.objects.filter(pk=item_id, user_id=user_id).delete()
    if not deleted:
        raise NotFound(f"Cart item with id {item_id} not found or does not belong to user {user_id}")
    return {'success': True}


def clear_cart(user_id):
    deleted, _ = CartItem.objects.filter(user_id=user_id).delete()
    if deleted:
        logger.info(f"Cleared {deleted} cart item(s) for user {user_id}")
    return {'success': True}


def get_cart_summary(user_id):
    items = []
    total_items = 0
    total_amount = ZERO

    for item in get_cart_items(user_id):
        line_total = to_money(item.line_total)
        items.append({
            'id':       item.pk,
            'name':     item.product.name,
            'quantity': item.quantity,
            'price':    item.product.price,
            'total':    line_total,
        })
        total_items += item.quantity
        total_amount += line_total

    return {
        'totalItems':  total_items,
        'totalAmount': to_money(total_amount),
        'items':       items,
    }
