# cart/signals.py
import logging

from django.dispatch import receiver

from orders.signals import order_created
from .models import CartItem

logger = logging.getLogger(__name__)


@receiver(order_created)
def remove_ordered_items(sender, order, **kwargs):
    """
    Drop the cart lines a freshly placed order covered
    """
    product_ids = list(order.items.values_list('product_id', flat=True))
    deleted, _ = CartItem.objects.filter(user_id=order.user_id, product_id__in=product_ids).delete()
    if deleted:
        logger.info(f"Removed {deleted} ordered item(s) from cart of user {order.user_id}")
