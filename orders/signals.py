# orders/signals.py
from django.dispatch import Signal

# Sent with ``order`` once its header, lines and side effects are written
order_created = Signal()
