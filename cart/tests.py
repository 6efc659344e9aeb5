from decimal import Decimal

import pytest

from cart.models import CartItem
from cart.services import (
    add_to_cart, update_cart_item, remove_from_cart, clear_cart, get_cart_summary,
)
from core.exceptions import NotFound

pytestmark = pytest.mark.django_db


def test_add_tops_up_existing_line(user, product):
    add_to_cart(user.pk, product.pk, 1)
    item = add_to_cart(user.pk, product.pk, 2)

    assert item.quantity == 3
    assert CartItem.objects.filter(user=user).count() == 1


def test_add_requires_user_and_product(user, product):
    with pytest.raises(NotFound, match='User with id 999 not found'):
        add_to_cart(999, product.pk, 1)
    with pytest.raises(NotFound, match='Product with id 999 not found'):
        add_to_cart(user.pk, 999, 1)


def test_update_missing_item():
    with pytest.raises(NotFound):
        update_cart_item(999, 2)


def test_remove_checks_owner(user, other_user, product):
    item = add_to_cart(user.pk, product.pk, 1)

    with pytest.raises(NotFound, match=f'does not belong to user {other_user.pk}'):
        remove_from_cart(item.pk, other_user.pk)

    assert remove_from_cart(item.pk, user.pk) == {'success': True}
    assert not CartItem.objects.exists()


def test_clear_only_touches_one_user(user, other_user, product):
    add_to_cart(user.pk, product.pk, 1)
    add_to_cart(other_user.pk, product.pk, 1)

    clear_cart(user.pk)

    assert list(CartItem.objects.values_list('user_id', flat=True)) == [other_user.pk]


def test_summary_uses_decimal_totals(user, product, second_product):
    add_to_cart(user.pk, product.pk, 3)
    add_to_cart(user.pk, second_product.pk, 1)

    summary = get_cart_summary(user.pk)

    assert summary['totalItems'] == 4
    assert summary['totalAmount'] == Decimal('129.95')
    assert sorted(row['total'] for row in summary['items']) == [Decimal('39.98'), Decimal('89.97')]


def test_summary_of_empty_cart(user):
    assert get_cart_summary(user.pk) == {'totalItems': 0, 'totalAmount': Decimal('0.00'), 'items': []}


def test_list_procedure_embeds_product(rpc, user, product):
    add_to_cart(user.pk, product.pk, 2)

    status, body = rpc.get('cart.list', {'userId': user.pk})

    assert status == 200
    assert body['data'][0]['quantity'] == 2
    assert body['data'][0]['product']['name'] == 'Photo Editor'
    assert body['data'][0]['product']['price'] == '29.99'


def test_add_procedure_caps_quantity(rpc, user, service):
    status, body = rpc.post('cart.add', {'user_id': user.pk, 'product_id': service.pk, 'quantity': 10**9})

    assert status == 400
    assert 'quantity' in body['details']
    assert not CartItem.objects.exists()
