from decimal import Decimal

import pytest

from catalog.models import Category, Product
from catalog.services import (
    create_category, update_category, delete_category,
    create_product, list_products, get_product_with_details, update_product,
    delete_product, search_products,
)
from core.exceptions import Conflict, NotFound
from reviews.models import Review
from users.models import User

pytestmark = pytest.mark.django_db


# ==================== CATEGORIES ====================

def test_create_category_duplicate_slug(category):
    with pytest.raises(Conflict):
        create_category('Other Software', 'software')


def test_update_missing_category():
    with pytest.raises(NotFound, match='Category not found'):
        update_category(999, name='Ghost')


def test_update_category_partial(category):
    updated = update_category(category.pk, description='Apps and tools')

    assert updated.name == 'Software'
    assert updated.description == 'Apps and tools'


def test_delete_category_with_products_is_refused(product):
    with pytest.raises(Conflict, match='Cannot delete category that has products'):
        delete_category(product.category_id)


def test_delete_category_is_soft():
    category = create_category('Empty', 'empty')

    assert delete_category(category.pk) == {'success': True}
    category.refresh_from_db()
    assert category.is_active is False


# ==================== PRODUCTS ====================

def test_create_product_requires_category():
    with pytest.raises(NotFound, match='Category with id 42 not found'):
        create_product('Orphan', Decimal('1.00'), Product.TYPE_SERVICE, 42)


def test_list_products_filters(product, service):
    assert [p.pk for p in list_products(type=Product.TYPE_SERVICE)] == [service.pk]

    Product.objects.filter(pk=service.pk).update(is_active=False)
    assert [p.pk for p in list_products(is_active=True)] == [product.pk]
    assert len(list_products(limit=1)) == 1


def test_update_product_rechecks_category(product):
    with pytest.raises(NotFound):
        update_product(product.pk, category_id=999)

    other = Category.objects.create(name='Courses', slug='courses')
    updated = update_product(product.pk, category_id=other.pk, price=Decimal('24.99'))
    assert (updated.category_id, updated.price) == (other.pk, Decimal('24.99'))


def test_delete_product_is_soft(product):
    delete_product(product.pk)

    product.refresh_from_db()
    assert product.is_active is False
    with pytest.raises(NotFound):
        delete_product(999)


def test_search_is_case_insensitive_and_active_only(product, service):
    Product.objects.filter(pk=service.pk).update(description='Photo workflow setup', is_active=False)

    assert [p.pk for p in search_products('PHOTO')] == [product.pk]
    assert list(search_products('editing')) == [product]


def test_details_include_approved_reviews_only(product, user, other_user):
    Review.objects.create(product=product, user=user, rating=5, comment='Great', is_approved=True)
    Review.objects.create(product=product, user=other_user, rating=4, is_approved=True)
    lurker = User.objects.create_user(email='lurker@example.com', password='secret123')
    Review.objects.create(product=product, user=lurker, rating=1)

    details = get_product_with_details(product.pk)

    assert details['category'] == {'name': 'Software', 'slug': 'software'}
    assert len(details['reviews']) == 2
    assert details['average_rating'] == Decimal('4.50')
    assert get_product_with_details(999) is None


# ==================== PROCEDURES ====================

def test_product_procedures(rpc, category):
    status, body = rpc.post('products.create', {
        'name': 'Course Bundle',
        'price': '49.50',
        'type': 'digital_product',
        'category_id': category.pk,
    })
    assert status == 200
    product_id = body['data']['id']
    assert body['data']['stock_quantity'] is None

    status, body = rpc.post('products.update', {'id': product_id, 'stock_quantity': 3})
    assert body['data']['stock_quantity'] == 3
    assert body['data']['price'] == '49.50'

    status, body = rpc.get('products.search', {'query': 'bundle'})
    assert [p['id'] for p in body['data']] == [product_id]


def test_product_update_rejects_null_price(rpc, product):
    status, body = rpc.post('products.update', {'id': product.pk, 'price': None})

    assert status == 400
    assert 'price' in body['details']
