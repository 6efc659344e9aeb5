# adminpanel/dashboard.py
from datetime import date, timedelta
from decimal import Decimal

from django.db.models import Count, Sum, Q
from django.db.models.functions import TruncMonth
from django.utils import timezone

from catalog.models import Category, Product
from core.models import DailyVisit
from core.money import to_money, ZERO
from orders.models import Order, OrderItem
from users.models import User


def completed_orders():
    """Revenue everywhere counts only completed orders."""
    return Order.objects.filter(status=Order.STATUS_COMPLETED)


def revenue_of(orders):
    return to_money(orders.aggregate(total=Sum('final_amount'))['total'] or ZERO)


def percentage(part, whole):
    if not whole:
        return Decimal('0.00')
    return to_money(Decimal(part) * 100 / Decimal(whole))


def month_keys(today, months):
    """``(year, month)`` pairs for the last ``months`` months, oldest first."""
    year, month = today.year, today.month
    keys = []
    for _ in range(months):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


# ==================== DASHBOARD ====================

def get_dashboard_stats():
    return {
        'total_categories': Category.objects.count(),
        'total_products':   Product.objects.count(),
        'total_customers':  User.objects.filter(role=User.ROLE_CUSTOMER).count(),
        'total_orders':     Order.objects.count(),
        'total_revenue':    revenue_of(completed_orders()),
        'pending_orders':   Order.objects.filter(status=Order.STATUS_PENDING).count(),
        'completed_orders': completed_orders().count(),
    }


def get_daily_visitors(days=30):
    today = timezone.localdate()
    first_day = today - timedelta(days=days - 1)

    counts = dict(
        DailyVisit.objects.filter(date__gte=first_day, date__lte=today).values_list('date', 'visitors')
    )
    return [
        {'date': day.isoformat(), 'visitors': counts.get(day, 0)}
        for day in (first_day + timedelta(days=offset) for offset in range(days))
    ]


def get_revenue_by_month(months=12):
    keys = month_keys(timezone.localdate(), months)
    first_year, first_month = keys[0]

    rows = (
        completed_orders()
        .filter(created_at__date__gte=date(first_year, first_month, 1))
        .annotate(month=TruncMonth('created_at'))
        .values('month')
        .annotate(revenue=Sum('final_amount'), orders=Count('id'))
        .order_by('month')
    )
    by_month = {(row['month'].year, row['month'].month): row for row in rows}

    result = []
    for year, month in keys:
        row = by_month.get((year, month))
        result.append({
            'month':   f"{year:04d}-{month:02d}",
            'revenue': to_money(row['revenue']) if row else ZERO,
            'orders':  row['orders'] if row else 0,
        })
    return result


def get_top_products(limit=10):
    rows = (
        OrderItem.objects.filter(order__status=Order.STATUS_COMPLETED)
        .values('product_id', 'product__name')
        .annotate(
            total_sales=Sum('quantity'),
            revenue=Sum('total_price'),
            order_count=Count('order', distinct=True),
        )
        .order_by('-total_sales', '-revenue', 'product_id')[:limit]
    )
    return [
        {
            'id':          row['product_id'],
            'name':        row['product__name'],
            'total_sales': row['total_sales'],
            'revenue':     to_money(row['revenue']),
            'order_count': row['order_count'],
        }
        for row in rows
    ]


def get_recent_orders(limit=10):
    orders = Order.objects.select_related('user').order_by('-created_at', '-id')[:limit]
    return [
        {
            'id':             order.pk,
            'user_name':      order.user.full_name or order.user.email,
            'final_amount':   order.final_amount,
            'status':         order.status,
            'payment_status': order.payment_status,
            'created_at':     order.created_at,
        }
        for order in orders
    ]


def get_customer_stats():
    first_day_of_month = timezone.localdate().replace(day=1)
    customers = User.objects.filter(role=User.ROLE_CUSTOMER)

    with_orders = customers.annotate(order_count=Count('orders')).filter(order_count__gt=0)
    ordering_customers = with_orders.count()
    repeat_customers = with_orders.filter(order_count__gt=1).count()

    return {
        'total_customers':          customers.count(),
        'new_customers_this_month': customers.filter(created_at__date__gte=first_day_of_month).count(),
        'repeat_customers':         repeat_customers,
        'customer_retention_rate':  percentage(repeat_customers, ordering_customers),
    }


def get_product_stats():
    return Product.objects.aggregate(
        total_products=Count('id'),
        digital_products=Count('id', filter=Q(type=Product.TYPE_DIGITAL_PRODUCT)),
        services=Count('id', filter=Q(type=Product.TYPE_SERVICE)),
        active_products=Count('id', filter=Q(is_active=True)),
        out_of_stock=Count('id', filter=Q(stock_quantity=0)),
    )
