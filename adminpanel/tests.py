from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from adminpanel.dashboard import (
    get_dashboard_stats, get_daily_visitors, get_revenue_by_month, get_top_products,
    get_recent_orders, get_customer_stats, get_product_stats, month_keys,
)
from adminpanel.reports import (
    generate_sales_report, sales_report_csv, generate_product_report, generate_customer_report,
    generate_inventory_report, generate_revenue_report, generate_coupon_report,
)
from core.models import DailyVisit
from orders.models import Order
from orders.services import create_order, update_order_status, cancel_order
from reviews.models import Review

pytestmark = pytest.mark.django_db


def place(user, product, quantity=1, coupon_code=None):
    return create_order(
        user.pk,
        [{'product_id': product.pk, 'quantity': quantity, 'price': product.price}],
        coupon_code,
    )


def complete(order):
    return update_order_status(order.pk, Order.STATUS_COMPLETED)


@pytest.fixture
def sales(user, other_user, product, second_product, coupon):
    """Two completed orders, one pending and one cancelled."""
    first = complete(place(user, product, 2))
    second = complete(place(other_user, second_product, 1, 'SAVE10'))
    place(user, product, 1)
    cancel_order(place(other_user, product, 1).pk)
    return first, second


# ==================== DASHBOARD ====================

def test_stats_count_revenue_from_completed_orders_only(sales, admin_user):
    stats = get_dashboard_stats()

    assert stats['total_orders'] == 4
    assert stats['completed_orders'] == 2
    assert stats['pending_orders'] == 1
    assert stats['total_customers'] == 2
    assert stats['total_revenue'] == Decimal('95.96')


def test_daily_visitors_are_zero_filled():
    today = timezone.localdate()
    DailyVisit.objects.create(date=today, visitors=7)

    rows = get_daily_visitors(3)

    assert [row['date'] for row in rows] == [
        (today - timedelta(days=offset)).isoformat() for offset in (2, 1, 0)
    ]
    assert [row['visitors'] for row in rows] == [0, 0, 7]


def test_month_keys_cross_year_boundary():
    assert month_keys(date(2024, 2, 10), 3) == [(2023, 12), (2024, 1), (2024, 2)]


def test_revenue_by_month_ends_with_current_month(sales):
    rows = get_revenue_by_month(3)

    assert len(rows) == 3
    assert rows[-1]['month'] == timezone.localdate().strftime('%Y-%m')
    assert rows[-1]['revenue'] == Decimal('95.96')
    assert rows[-1]['orders'] == 2
    assert rows[0]['revenue'] == Decimal('0.00')


def test_top_products(sales, product, second_product):
    rows = get_top_products()

    assert [(row['id'], row['total_sales']) for row in rows] == [(product.pk, 2), (second_product.pk, 1)]
    assert rows[0]['revenue'] == Decimal('59.98')


def test_recent_orders_newest_first(sales):
    rows = get_recent_orders(2)

    assert len(rows) == 2
    assert rows[0]['id'] > rows[1]['id']
    assert rows[0]['user_name'] == 'John Roe'


def test_customer_stats(sales):
    stats = get_customer_stats()

    assert stats['total_customers'] == 2
    assert stats['repeat_customers'] == 2
    assert stats['customer_retention_rate'] == Decimal('100.00')


def test_product_stats(product, service):
    product.stock_quantity = 0
    product.save()

    assert get_product_stats() == {
        'total_products': 2,
        'digital_products': 1,
        'services': 1,
        'active_products': 2,
        'out_of_stock': 1,
    }


# ==================== REPORTS ====================

def test_sales_report(sales):
    today = timezone.localdate()

    report = generate_sales_report(today, today)

    assert report['total_orders'] == 4
    assert report['total_revenue'] == Decimal('95.96')
    assert report['average_order_value'] == Decimal('47.98')
    assert report['orders_by_status'] == {
        'pending': 1, 'processing': 0, 'completed': 2, 'cancelled': 1, 'refunded': 0,
    }
    assert report['daily_sales'] == [
        {'date': today.isoformat(), 'orders': 4, 'revenue': Decimal('95.96')},
    ]


def test_sales_report_csv(sales):
    today = timezone.localdate()

    text = sales_report_csv(generate_sales_report(today, today))

    assert text == f'date,orders,revenue\n{today.isoformat()},4,95.96\n'


def test_sales_report_outside_range_is_empty(sales):
    long_ago = timezone.localdate() - timedelta(days=400)

    report = generate_sales_report(long_ago, long_ago)

    assert report['total_orders'] == 0
    assert report['average_order_value'] == Decimal('0.00')
    assert report['daily_sales'] == []


def test_product_report(sales, user, product, service):
    Review.objects.create(product=product, user=user, rating=4, is_approved=True)

    rows = {row['id']: row for row in generate_product_report()}

    assert rows[product.pk]['total_sales'] == 2
    assert rows[product.pk]['revenue'] == Decimal('59.98')
    assert rows[product.pk]['average_rating'] == Decimal('4.00')
    assert rows[service.pk]['total_sales'] == 0
    assert [row['id'] for row in generate_product_report(product_type='service')] == [service.pk]


def test_customer_report(sales, user):
    today = timezone.localdate()

    report = generate_customer_report(today, today)

    assert report['total_customers'] == 2
    assert report['new_customers'] == 2
    assert report['returning_customers'] == 0
    assert report['top_customers'][0]['email'] == 'jane@example.com'
    assert report['top_customers'][0]['total_spent'] == Decimal('59.98')


def test_inventory_report(product, second_product, service):
    second_product.stock_quantity = 0
    second_product.save()

    status = {row['id']: (row['status'], row['reorder_needed']) for row in generate_inventory_report()}

    assert status == {
        product.pk: ('in_stock', False),
        second_product.pk: ('out_of_stock', True),
        service.pk: ('digital', False),
    }


def test_inventory_low_stock(product):
    product.stock_quantity = 5
    product.save()

    assert generate_inventory_report()[0]['status'] == 'low_stock'


def test_revenue_report_by_day(sales):
    today = timezone.localdate()

    rows = generate_revenue_report(today, today, 'day')

    assert rows == [{
        'period': today.isoformat(),
        'revenue': Decimal('95.96'),
        'orders': 2,
        'average_order_value': Decimal('47.98'),
    }]


def test_coupon_report(sales, coupon):
    row = generate_coupon_report()[0]

    assert row['code'] == 'SAVE10'
    assert row['used_count'] == 1
    assert row['total_discount_given'] == Decimal('4.00')
    assert row['revenue_impact'] == Decimal('35.98')
    assert row['conversion_rate'] == Decimal('100.00')


# ==================== PROCEDURES ====================

def test_sales_procedure_csv(rpc, sales):
    today = timezone.localdate().isoformat()

    status, body = rpc.get('reports.sales', {'start_date': today, 'end_date': today, 'format': 'csv'})

    assert status == 200
    assert body['data'].startswith('date,orders,revenue\n')


def test_report_rejects_inverted_range(rpc):
    status, body = rpc.get('reports.customers', {'start_date': '2024-02-01', 'end_date': '2024-01-01'})

    assert status == 400
    assert 'end_date' in body['details']


def test_revenue_procedure_requires_known_grouping(rpc):
    status, body = rpc.get('reports.revenue', {
        'start_date': '2024-01-01', 'end_date': '2024-01-31', 'group_by': 'year',
    })

    assert status == 400
    assert 'group_by' in body['details']


def test_dashboard_stats_procedure(rpc, sales):
    status, body = rpc.get('dashboard.stats')

    assert status == 200
    assert body['data']['total_revenue'] == '95.96'
