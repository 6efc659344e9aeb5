from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from core.exceptions import Conflict, CouponExhausted, CouponExpired, NotFound
from orders.services import create_order
from promotions.models import Coupon
from promotions.services import (
    calculate_discount, check_coupon, redeem_coupon, validate_coupon,
    create_coupon, get_coupon_by_code, update_coupon, delete_coupon,
)

pytestmark = pytest.mark.django_db


def make_coupon(**kwargs):
    fields = {'code': 'TEST', 'type': Coupon.TYPE_PERCENTAGE, 'value': Decimal('10')}
    fields.update(kwargs)
    return Coupon.objects.create(**fields)


def test_percentage_discount_rounds_half_up():
    coupon = Coupon(type=Coupon.TYPE_PERCENTAGE, value=Decimal('10'))

    assert calculate_discount(coupon, Decimal('69.97')) == Decimal('7.00')
    assert calculate_discount(coupon, Decimal('0.05')) == Decimal('0.01')


def test_fixed_discount_never_exceeds_total():
    coupon = Coupon(type=Coupon.TYPE_FIXED_AMOUNT, value=Decimal('15.00'))

    assert calculate_discount(coupon, Decimal('40.00')) == Decimal('15.00')
    assert calculate_discount(coupon, Decimal('9.50')) == Decimal('9.50')


def test_check_coupon_order_of_checks():
    now = timezone.now()
    coupon = make_coupon(
        expires_at=now - timedelta(hours=1),
        usage_limit=1,
        used_count=1,
        minimum_order_amount=Decimal('100'),
    )

    # Expiry is reported before exhaustion and minimum amount
    with pytest.raises(CouponExpired, match='Coupon has expired'):
        check_coupon(coupon, Decimal('10'), now)


def test_redeem_stops_at_limit():
    coupon = make_coupon(usage_limit=2, used_count=1)

    redeem_coupon(coupon)
    assert coupon.used_count == 2

    with pytest.raises(CouponExhausted):
        redeem_coupon(coupon)
    coupon.refresh_from_db()
    assert coupon.used_count == 2


def test_redeem_unlimited():
    coupon = make_coupon(used_count=41)

    redeem_coupon(coupon)

    assert coupon.used_count == 42


def test_validate_returns_result_instead_of_raising():
    make_coupon(code='MIN50', minimum_order_amount=Decimal('50'))

    assert validate_coupon('NOPE', Decimal('10')) == {'valid': False, 'error': 'Invalid coupon code'}
    assert validate_coupon('MIN50', Decimal('10')) == {
        'valid': False,
        'error': 'Minimum order amount of 50.00 required',
    }

    result = validate_coupon('MIN50', Decimal('80'))
    assert result['valid'] is True
    assert result['discount'] == Decimal('8.00')
    assert result['coupon'].code == 'MIN50'


def test_create_duplicate_code():
    create_coupon(code='DUP', type=Coupon.TYPE_FIXED_AMOUNT, value=Decimal('5'))

    with pytest.raises(Conflict):
        create_coupon(code='DUP', type=Coupon.TYPE_FIXED_AMOUNT, value=Decimal('5'))


def test_get_by_code_only_when_redeemable():
    make_coupon(code='LIVE')
    make_coupon(code='OFF', is_active=False)
    make_coupon(code='OLD', expires_at=timezone.now() - timedelta(days=1))
    make_coupon(code='USED', usage_limit=3, used_count=3)

    assert get_coupon_by_code('LIVE').code == 'LIVE'
    assert get_coupon_by_code('OFF') is None
    assert get_coupon_by_code('OLD') is None
    assert get_coupon_by_code('USED') is None


def test_update_coupon():
    coupon = make_coupon()

    updated = update_coupon(coupon.pk, is_active=False, usage_limit=5)

    assert (updated.is_active, updated.usage_limit) == (False, 5)
    with pytest.raises(NotFound):
        update_coupon(999, is_active=True)


def test_delete_refused_once_used(user, product):
    coupon = make_coupon()
    create_order(user.pk, [{'product_id': product.pk, 'quantity': 1, 'price': product.price}], 'TEST')

    with pytest.raises(Conflict):
        delete_coupon(coupon.pk)

    unused = make_coupon(code='FRESH')
    assert delete_coupon(unused.pk) == {'success': True}
    assert not Coupon.objects.filter(pk=unused.pk).exists()


# ==================== PROCEDURES ====================

def test_validate_procedure(rpc):
    make_coupon(code='SAVE10')

    status, body = rpc.get('coupons.validate', {'code': 'SAVE10', 'orderAmount': '69.97'})

    assert status == 200
    assert body['data']['valid'] is True
    assert body['data']['discount'] == '7.00'
    assert body['data']['coupon']['code'] == 'SAVE10'


def test_create_procedure_rejects_percentage_over_hundred(rpc):
    status, body = rpc.post('coupons.create', {'code': 'HUGE', 'type': 'percentage', 'value': '150'})

    assert status == 400
    assert 'value' in body['details']


def test_create_is_a_mutation(rpc):
    status, body = rpc.get('coupons.create', {'code': 'X', 'type': 'percentage', 'value': '5'})

    assert status == 405
    assert body['code'] == 'METHOD_NOT_SUPPORTED'
