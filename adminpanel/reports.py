# adminpanel/reports.py
import csv
import io

from django.conf import settings
from django.db.models import Avg, Count, F, Sum, Q
from django.db.models.functions import TruncDay, TruncWeek, TruncMonth

from catalog.models import Product
from core.money import to_money, ZERO
from orders.models import Order, OrderItem
from promotions.models import Coupon
from reviews.models import Review
from users.models import User
from .dashboard import percentage

PERIOD_TRUNCATORS = {
    'day':   (TruncDay, '%Y-%m-%d'),
    'week':  (TruncWeek, '%Y-%m-%d'),
    'month': (TruncMonth, '%Y-%m'),
}

SALES_CSV_COLUMNS = ['date', 'orders', 'revenue']


def orders_between(start_date, end_date):
    """Orders placed on any day from ``start_date`` to ``end_date`` inclusive."""
    return Order.objects.filter(created_at__date__gte=start_date, created_at__date__lte=end_date)


def average(amount, count):
    return to_money(amount / count) if count else ZERO


# ==================== SALES ====================

def generate_sales_report(start_date, end_date):
    orders = orders_between(start_date, end_date)
    completed = orders.filter(status=Order.STATUS_COMPLETED)

    totals = completed.aggregate(revenue=Sum('final_amount'), count=Count('id'))
    total_revenue = to_money(totals['revenue'] or ZERO)

    orders_by_status = {status: 0 for status, _ in Order.ORDER_STATUS}
    for row in orders.order_by().values('status').annotate(count=Count('id')):
        orders_by_status[row['status']] = row['count']

    daily_rows = (
        orders.annotate(day=TruncDay('created_at'))
        .values('day')
        .annotate(
            orders=Count('id'),
            revenue=Sum('final_amount', filter=Q(status=Order.STATUS_COMPLETED)),
        )
        .order_by('day')
    )

    return {
        'total_orders':        orders.count(),
        'total_revenue':       total_revenue,
        'average_order_value': average(total_revenue, totals['count']),
        'orders_by_status':    orders_by_status,
        'daily_sales': [
            {
                'date':    row['day'].strftime('%Y-%m-%d'),
                'orders':  row['orders'],
                'revenue': to_money(row['revenue'] or ZERO),
            }
            for row in daily_rows
        ],
    }


def sales_report_csv(report):
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=SALES_CSV_COLUMNS, lineterminator='\n')
    writer.writeheader()
    for row in report['daily_sales']:
        writer.writerow(row)
    return buffer.getvalue()


# ==================== PRODUCTS ====================

def generate_product_report(category_id=None, product_type=None):
    products = Product.objects.select_related('category').order_by('name', 'id')
    if category_id is not None:
        products = products.filter(category_id=category_id)
    if product_type:
        products = products.filter(type=product_type)

    sales = {
        row['product_id']: row
        for row in (
            OrderItem.objects.filter(order__status=Order.STATUS_COMPLETED)
            .values('product_id')
            .annotate(total_sales=Sum('quantity'), revenue=Sum('total_price'))
        )
    }
    ratings = dict(
        Review.objects.filter(is_approved=True)
        .values('product_id')
        .annotate(avg=Avg('rating'))
        .values_list('product_id', 'avg')
    )

    report = []
    for product in products:
        sold = sales.get(product.pk, {})
        report.append({
            'id':             product.pk,
            'name':           product.name,
            'category':       product.category.name,
            'type':           product.type,
            'total_sales':    sold.get('total_sales') or 0,
            'revenue':        to_money(sold.get('revenue') or ZERO),
            'average_rating': to_money(ratings.get(product.pk)),
            'stock_quantity': product.stock_quantity,
        })
    return report


# ==================== CUSTOMERS ====================

def generate_customer_report(start_date, end_date):
    customers = User.objects.filter(role=User.ROLE_CUSTOMER)
    in_range = Q(orders__created_at__date__gte=start_date, orders__created_at__date__lte=end_date)

    buyers = customers.filter(in_range).distinct()
    returning = buyers.filter(orders__created_at__date__lt=start_date).distinct()

    top = (
        customers
        .annotate(
            total_orders=Count('orders', filter=in_range),
            total_spent=Sum('orders__final_amount', filter=in_range & Q(orders__status=Order.STATUS_COMPLETED)),
        )
        .filter(total_orders__gt=0)
        .order_by(F('total_spent').desc(nulls_last=True), '-total_orders', 'id')[:10]
    )

    return {
        'total_customers':     customers.count(),
        'new_customers':       customers.filter(created_at__date__gte=start_date, created_at__date__lte=end_date).count(),
        'returning_customers': returning.count(),
        'top_customers': [
            {
                'id':           customer.pk,
                'name':         customer.full_name,
                'email':        customer.email,
                'total_orders': customer.total_orders,
                'total_spent':  to_money(customer.total_spent or ZERO),
            }
            for customer in top
        ],
    }


# ==================== INVENTORY ====================

def stock_status(stock_quantity):
    if stock_quantity is None:
        return 'digital'
    if stock_quantity == 0:
        return 'out_of_stock'
    if stock_quantity <= settings.STORE_LOW_STOCK_THRESHOLD:
        return 'low_stock'
    return 'in_stock'


def generate_inventory_report():
    products = Product.objects.filter(is_active=True).select_related('category').order_by('name', 'id')
    report = []
    for product in products:
        status = stock_status(product.stock_quantity)
        report.append({
            'id':             product.pk,
            'name':           product.name,
            'category':       product.category.name,
            'stock_quantity': product.stock_quantity,
            'status':         status,
            'reorder_needed': status in ('low_stock', 'out_of_stock'),
        })
    return report


# ==================== REVENUE ====================

def generate_revenue_report(start_date, end_date, group_by):
    truncate, label = PERIOD_TRUNCATORS[group_by]
    rows = (
        orders_between(start_date, end_date)
        .filter(status=Order.STATUS_COMPLETED)
        .annotate(period=truncate('created_at'))
        .values('period')
        .annotate(revenue=Sum('final_amount'), orders=Count('id'))
        .order_by('period')
    )
    return [
        {
            'period':              row['period'].strftime(label),
            'revenue':             to_money(row['revenue']),
            'orders':              row['orders'],
            'average_order_value': average(to_money(row['revenue']), row['orders']),
        }
        for row in rows
    ]


# ==================== COUPONS ====================

def generate_coupon_report():
    not_cancelled = Q(orders__status__in=[
        status for status, _ in Order.ORDER_STATUS if status != Order.STATUS_CANCELLED
    ])
    completed = Q(orders__status=Order.STATUS_COMPLETED)

    coupons = Coupon.objects.annotate(
        order_count=Count('orders'),
        completed_count=Count('orders', filter=completed),
        discount_given=Sum('orders__discount_amount', filter=not_cancelled),
        revenue=Sum('orders__final_amount', filter=completed),
    ).order_by('code')

    return [
        {
            'id':                   coupon.pk,
            'code':                 coupon.code,
            'type':                 coupon.type,
            'value':                coupon.value,
            'used_count':           coupon.used_count,
            'total_discount_given': to_money(coupon.discount_given or ZERO),
            'revenue_impact':       to_money(coupon.revenue or ZERO),
            'conversion_rate':      percentage(coupon.completed_count, coupon.order_count),
        }
        for coupon in coupons
    ]
