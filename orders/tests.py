from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib import admin as django_admin
from django.utils import timezone

from cart.models import CartItem
from catalog.models import Product
from core.exceptions import (
    NotFound, PriceMismatch, InsufficientStock, InvalidTransition,
    InvalidCoupon, CouponExpired, CouponExhausted, MinimumOrderNotMet, ValidationFailure,
)
from promotions.models import Coupon
from orders.models import Order, OrderItem, OrderStatusHistory
from orders.services import (
    create_order, cancel_order, update_order_status, update_payment_status, list_orders,
)
from orders.signals import order_created

pytestmark = pytest.mark.django_db


def line(product, quantity=1, price=None):
    return {'product_id': product.pk, 'quantity': quantity, 'price': price or product.price}


def assert_nothing_persisted(product, stock):
    assert Order.objects.count() == 0
    assert OrderItem.objects.count() == 0
    product.refresh_from_db()
    assert product.stock_quantity == stock


# ==================== CREATION ====================

def test_single_line_order_decrements_stock(user, product):
    order = create_order(user.pk, [line(product)])

    assert order.total_amount == Decimal('29.99')
    assert order.discount_amount == Decimal('0.00')
    assert order.final_amount == order.total_amount
    assert order.status == Order.STATUS_PENDING
    assert order.payment_status == Order.PAYMENT_PENDING

    product.refresh_from_db()
    assert product.stock_quantity == 9


def test_order_items_snapshot_catalog_price(user, product, second_product):
    order = create_order(user.pk, [line(product, 2), line(second_product, 1)])

    items = list(order.items.order_by('id'))
    assert [(i.product_id, i.quantity, i.unit_price, i.total_price) for i in items] == [
        (product.pk, 2, Decimal('29.99'), Decimal('59.98')),
        (second_product.pk, 1, Decimal('39.98'), Decimal('39.98')),
    ]
    assert order.total_amount == Decimal('99.96')


def test_price_within_tolerance_uses_catalog_price(user, product):
    order = create_order(user.pk, [line(product, 1, Decimal('30.00'))])

    assert order.items.get().unit_price == Decimal('29.99')
    assert order.total_amount == Decimal('29.99')


def test_price_mismatch_persists_nothing(user, product):
    with pytest.raises(PriceMismatch, match=f'Price mismatch for product {product.pk}'):
        create_order(user.pk, [line(product, 1, Decimal('99.99'))])

    assert_nothing_persisted(product, 10)


def test_insufficient_stock_persists_nothing(user, product):
    with pytest.raises(InsufficientStock, match=f'Insufficient stock for product {product.pk}'):
        create_order(user.pk, [line(product, 15)])

    assert_nothing_persisted(product, 10)


def test_repeated_product_lines_are_checked_together(user, product):
    with pytest.raises(InsufficientStock):
        create_order(user.pk, [line(product, 6), line(product, 6)])

    assert_nothing_persisted(product, 10)


def test_stock_can_be_fully_consumed(user, product):
    create_order(user.pk, [line(product, 10)])

    product.refresh_from_db()
    assert product.stock_quantity == 0


def test_untracked_stock_is_left_alone(user, service):
    order = create_order(user.pk, [line(service, 100)])

    assert order.total_amount == Decimal('5000.00')
    service.refresh_from_db()
    assert service.stock_quantity is None


def test_unknown_user(product):
    with pytest.raises(NotFound, match='User not found'):
        create_order(999, [line(product)])


def test_unknown_product(user, product):
    with pytest.raises(NotFound, match='Product with id 999 not found'):
        create_order(user.pk, [line(product), {'product_id': 999, 'quantity': 1, 'price': Decimal('1.00')}])

    assert_nothing_persisted(product, 10)


def test_inactive_product_is_not_orderable(user, product):
    Product.objects.filter(pk=product.pk).update(is_active=False)

    with pytest.raises(NotFound):
        create_order(user.pk, [line(product)])


def test_first_failing_line_wins(user, product, second_product):
    with pytest.raises(PriceMismatch, match=str(product.pk)):
        create_order(user.pk, [line(product, 1, Decimal('1.00')), line(second_product, 50)])


def test_order_total_over_column_limit_persists_nothing(user, product, service):
    # 2,000,000 x 50.00 does not fit a 10-digit amount column
    with pytest.raises(ValidationFailure, match='Line total'):
        create_order(user.pk, [line(service, quantity=2_000_000)])

    with pytest.raises(ValidationFailure, match='Order total'):
        create_order(user.pk, [line(service, quantity=1_500_000), line(service, quantity=1_500_000)])

    assert_nothing_persisted(product, 10)


def test_history_records_placement(user, product):
    order = create_order(user.pk, [line(product)])

    entry = order.status_history.get()
    assert (entry.from_status, entry.to_status) == ('', Order.STATUS_PENDING)


def test_ordered_products_leave_the_cart(user, product, second_product):
    CartItem.objects.create(user=user, product=product, quantity=1)
    CartItem.objects.create(user=user, product=second_product, quantity=1)

    create_order(user.pk, [line(product)])

    assert list(CartItem.objects.filter(user=user).values_list('product_id', flat=True)) == [second_product.pk]


# ==================== COUPONS ====================

def test_percentage_coupon_scenario(user, product, second_product, coupon):
    order = create_order(user.pk, [line(product), line(second_product)], coupon_code='SAVE10')

    assert order.total_amount == Decimal('69.97')
    assert order.discount_amount == Decimal('7.00')
    assert order.final_amount == Decimal('62.97')
    assert order.coupon_id == coupon.pk

    coupon.refresh_from_db()
    assert coupon.used_count == 1


def test_minimum_order_not_met(user, category, coupon):
    cheap = Product.objects.create(
        name='Icon Set', price=Decimal('19.99'), type=Product.TYPE_DIGITAL_PRODUCT,
        category=category, stock_quantity=3,
    )

    with pytest.raises(MinimumOrderNotMet, match='Minimum order amount of 20.00 required'):
        create_order(user.pk, [line(cheap)], coupon_code='SAVE10')

    assert_nothing_persisted(cheap, 3)
    coupon.refresh_from_db()
    assert coupon.used_count == 0


def test_fixed_amount_discount_is_clamped_to_total(user, product):
    Coupon.objects.create(code='BIG', type=Coupon.TYPE_FIXED_AMOUNT, value=Decimal('100.00'))

    order = create_order(user.pk, [line(product)], coupon_code='BIG')

    assert order.discount_amount == Decimal('29.99')
    assert order.final_amount == Decimal('0.00')


def test_fixed_amount_discount(user, product):
    Coupon.objects.create(code='FIVE', type=Coupon.TYPE_FIXED_AMOUNT, value=Decimal('5.00'))

    order = create_order(user.pk, [line(product, 2)], coupon_code='FIVE')

    assert order.discount_amount == Decimal('5.00')
    assert order.final_amount == Decimal('54.98')


@pytest.mark.parametrize('coupon_kwargs, error', [
    ({'code': 'OTHER'}, InvalidCoupon),
    ({'is_active': False}, InvalidCoupon),
    ({'expires_at': timezone.now() - timedelta(days=1)}, CouponExpired),
    ({'usage_limit': 1, 'used_count': 1}, CouponExhausted),
])
def test_unusable_coupon_aborts_order(user, product, coupon_kwargs, error):
    fields = {'code': 'SAVE10', 'type': Coupon.TYPE_PERCENTAGE, 'value': Decimal('10')}
    fields.update(coupon_kwargs)
    Coupon.objects.create(**fields)

    with pytest.raises(error):
        create_order(user.pk, [line(product)], coupon_code='SAVE10')

    assert_nothing_persisted(product, 10)


def test_coupon_usage_never_exceeds_limit(user, product):
    coupon = Coupon.objects.create(
        code='ONCE', type=Coupon.TYPE_PERCENTAGE, value=Decimal('10'), usage_limit=1,
    )

    create_order(user.pk, [line(product)], coupon_code='ONCE')
    with pytest.raises(CouponExhausted):
        create_order(user.pk, [line(product)], coupon_code='ONCE')

    coupon.refresh_from_db()
    assert coupon.used_count == 1
    assert Order.objects.count() == 1


def test_failure_after_header_is_written_rolls_back(monkeypatch, user, product):
    coupon = Coupon.objects.create(
        code='SPENT', type=Coupon.TYPE_PERCENTAGE, value=Decimal('10'), usage_limit=1, used_count=1,
    )
    # Let the spent coupon through so redemption fails after the order rows exist
    monkeypatch.setattr('orders.services.check_coupon', lambda coupon, amount, now=None: Decimal('0.00'))

    with pytest.raises(CouponExhausted):
        create_order(user.pk, [line(product, quantity=2)], coupon_code='SPENT')

    assert_nothing_persisted(product, 10)
    assert OrderStatusHistory.objects.count() == 0
    coupon.refresh_from_db()
    assert coupon.used_count == 1


def test_failure_after_stock_decrement_rolls_back(user, product, coupon):
    CartItem.objects.create(user=user, product=product, quantity=1)

    def explode(sender, order, **kwargs):
        raise RuntimeError('downstream failure')

    order_created.connect(explode)
    try:
        with pytest.raises(RuntimeError):
            create_order(user.pk, [line(product, quantity=3)], coupon_code='SAVE10')
    finally:
        order_created.disconnect(explode)

    assert_nothing_persisted(product, 10)
    assert OrderStatusHistory.objects.count() == 0
    assert CartItem.objects.filter(user=user).count() == 1
    coupon.refresh_from_db()
    assert coupon.used_count == 0


# ==================== CANCELLATION ====================

def test_cancel_restores_stock(user, product, service):
    order = create_order(user.pk, [line(product, 3), line(service, 2)])

    cancelled = cancel_order(order.pk)

    assert cancelled.status == Order.STATUS_CANCELLED
    product.refresh_from_db()
    service.refresh_from_db()
    assert product.stock_quantity == 10
    assert service.stock_quantity is None


def test_cancel_twice_fails(user, product):
    order = create_order(user.pk, [line(product, 3)])
    cancel_order(order.pk)

    with pytest.raises(InvalidTransition, match='Order is already cancelled'):
        cancel_order(order.pk)

    product.refresh_from_db()
    assert product.stock_quantity == 10


@pytest.mark.parametrize('status', [Order.STATUS_COMPLETED, Order.STATUS_REFUNDED])
def test_cancel_terminal_order_fails(user, product, status):
    order = create_order(user.pk, [line(product)])
    Order.objects.filter(pk=order.pk).update(status=status)

    with pytest.raises(InvalidTransition, match='Cannot cancel completed or refunded orders'):
        cancel_order(order.pk)


def test_cancel_foreign_order_looks_missing(user, other_user, product):
    order = create_order(user.pk, [line(product)])

    with pytest.raises(NotFound, match='Order not found'):
        cancel_order(order.pk, user_id=other_user.pk)

    assert cancel_order(order.pk, user_id=user.pk).status == Order.STATUS_CANCELLED


def test_cancel_missing_order():
    with pytest.raises(NotFound):
        cancel_order(12345)


# ==================== STATUS ====================

def test_status_walks_forward(user, product):
    order = create_order(user.pk, [line(product)])

    update_order_status(order.pk, Order.STATUS_PROCESSING)
    order = update_order_status(order.pk, Order.STATUS_COMPLETED)

    assert order.status == Order.STATUS_COMPLETED
    assert list(
        OrderStatusHistory.objects.filter(order=order).order_by('id').values_list('to_status', flat=True)
    ) == [Order.STATUS_PENDING, Order.STATUS_PROCESSING, Order.STATUS_COMPLETED]


def test_cancelled_order_cannot_be_reopened(user, product):
    order = create_order(user.pk, [line(product)])
    cancel_order(order.pk)

    with pytest.raises(InvalidTransition, match='Cannot change order status from cancelled to pending'):
        update_order_status(order.pk, Order.STATUS_PENDING)


def test_pending_cannot_be_refunded(user, product):
    order = create_order(user.pk, [line(product)])

    with pytest.raises(InvalidTransition):
        update_order_status(order.pk, Order.STATUS_REFUNDED)


def test_same_status_is_rejected(user, product):
    order = create_order(user.pk, [line(product)])

    with pytest.raises(InvalidTransition, match='Order is already pending'):
        update_order_status(order.pk, Order.STATUS_PENDING)


def test_status_cancel_restores_stock(user, product):
    order = create_order(user.pk, [line(product, 4)])

    update_order_status(order.pk, Order.STATUS_CANCELLED)

    product.refresh_from_db()
    assert product.stock_quantity == 10


def test_payment_status_is_unconditional(user, product):
    order = create_order(user.pk, [line(product)])
    cancel_order(order.pk)

    order = update_payment_status(order.pk, Order.PAYMENT_REFUNDED)

    assert order.payment_status == Order.PAYMENT_REFUNDED


def test_status_update_missing_order():
    with pytest.raises(NotFound):
        update_order_status(777, Order.STATUS_PROCESSING)
    with pytest.raises(NotFound):
        update_payment_status(777, Order.PAYMENT_COMPLETED)


# ==================== QUERIES ====================

def test_list_orders_filters_and_pages(user, other_user, product):
    first = create_order(user.pk, [line(product)])
    second = create_order(user.pk, [line(product)])
    create_order(other_user.pk, [line(product)])
    update_order_status(first.pk, Order.STATUS_PROCESSING)

    assert [o.pk for o in list_orders(user_id=user.pk)] == [second.pk, first.pk]
    assert [o.pk for o in list_orders(status=Order.STATUS_PROCESSING)] == [first.pk]
    assert [o.pk for o in list_orders(user_id=user.pk, limit=1, offset=1)] == [first.pk]


# ==================== PROCEDURES ====================

def test_create_procedure(rpc, user, product, second_product, coupon):
    status, body = rpc.post('orders.create', {
        'user_id': user.pk,
        'items': [
            {'product_id': product.pk, 'quantity': 1, 'price': '29.99'},
            {'product_id': second_product.pk, 'quantity': 1, 'price': 39.98},
        ],
        'coupon_code': 'SAVE10',
    })

    assert status == 200
    assert body['success'] is True
    assert body['data']['final_amount'] == '62.97'
    assert body['data']['status'] == 'pending'


def test_create_procedure_requires_items(rpc, user):
    status, body = rpc.post('orders.create', {'user_id': user.pk, 'items': []})

    assert status == 400
    assert body['code'] == 'BAD_REQUEST'
    assert 'items' in body['details']


def test_create_procedure_rejects_oversized_lines(rpc, user, service):
    for entry in (
        {'product_id': service.pk, 'quantity': 10**9, 'price': '50.00'},
        {'product_id': service.pk, 'quantity': 1, 'price': '1000000000.00'},
    ):
        status, body = rpc.post('orders.create', {'user_id': user.pk, 'items': [entry]})

        assert status == 400
        assert body['code'] == 'BAD_REQUEST'
        assert 'items' in body['details']
    assert Order.objects.count() == 0


def test_create_procedure_reports_business_error(rpc, user, product):
    status, body = rpc.post('orders.create', {
        'user_id': user.pk,
        'items': [{'product_id': product.pk, 'quantity': 15, 'price': '29.99'}],
    })

    assert status == 400
    assert body == {
        'success': False,
        'error': f'Insufficient stock for product {product.pk}',
        'code': 'INSUFFICIENT_STOCK',
    }


def test_get_by_id_procedure(rpc, user, product, coupon):
    order = create_order(user.pk, [line(product)], coupon_code='SAVE10')

    status, body = rpc.get('orders.getById', {'id': order.pk})

    assert status == 200
    data = body['data']
    assert data['user'] == {'first_name': 'Jane', 'last_name': 'Doe', 'email': 'jane@example.com'}
    assert data['orderItems'][0]['product'] == {'name': 'Photo Editor', 'type': 'digital_product'}
    assert data['coupon'] == {'code': 'SAVE10', 'type': 'percentage', 'value': '10.00'}


def test_get_by_id_missing_is_null(rpc):
    status, body = rpc.get('orders.getById', {'id': 404})

    assert status == 200
    assert body == {'success': True, 'data': None}


def test_cancel_procedure_with_owner(rpc, user, other_user, product):
    order = create_order(user.pk, [line(product)])

    status, body = rpc.post('orders.cancel', {'id': order.pk, 'user_id': other_user.pk})
    assert status == 404

    status, body = rpc.post('orders.cancel', {'id': order.pk, 'user_id': user.pk})
    assert status == 200
    assert body['data']['status'] == 'cancelled'


def test_update_status_procedure_rejects_bad_transition(rpc, user, product):
    order = create_order(user.pk, [line(product)])
    cancel_order(order.pk)

    status, body = rpc.post('orders.updateStatus', {'id': order.pk, 'status': 'processing'})

    assert status == 409
    assert body['code'] == 'INVALID_TRANSITION'


# ==================== ADMIN ====================

def test_admin_cannot_add_or_delete_orders(rf, admin_user, user, product):
    order = create_order(user.pk, [line(product)])
    request = rf.get('/admin/orders/order/')
    request.user = admin_user
    model_admin = django_admin.site._registry[Order]

    assert model_admin.has_add_permission(request) is False
    assert model_admin.has_delete_permission(request) is False
    assert model_admin.has_delete_permission(request, order) is False
    inlines = model_admin.get_inline_instances(request, order)
    assert len(inlines) == 2
    for inline in inlines:
        assert inline.has_add_permission(request, order) is False
