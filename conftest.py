import json
from decimal import Decimal

import pytest

from catalog.models import Category, Product
from promotions.models import Coupon
from users.models import User


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='jane@example.com',
        password='secret123',
        first_name='Jane',
        last_name='Doe',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email='john@example.com',
        password='secret123',
        first_name='John',
        last_name='Roe',
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_superuser(
        email='admin@example.com',
        password='secret123',
        first_name='Ada',
        last_name='Admin',
    )


@pytest.fixture
def category(db):
    return Category.objects.create(name='Software', slug='software')


@pytest.fixture
def product(category):
    return Product.objects.create(
        name='Photo Editor',
        description='Desktop photo editing suite',
        price=Decimal('29.99'),
        type=Product.TYPE_DIGITAL_PRODUCT,
        category=category,
        stock_quantity=10,
    )


@pytest.fixture
def second_product(category):
    return Product.objects.create(
        name='Font Pack',
        price=Decimal('39.98'),
        type=Product.TYPE_DIGITAL_PRODUCT,
        category=category,
        stock_quantity=5,
    )


@pytest.fixture
def service(category):
    """Not stock tracked"""
    return Product.objects.create(
        name='Setup Consultation',
        price=Decimal('50.00'),
        type=Product.TYPE_SERVICE,
        category=category,
        stock_quantity=None,
    )


@pytest.fixture
def coupon(db):
    return Coupon.objects.create(
        code='SAVE10',
        type=Coupon.TYPE_PERCENTAGE,
        value=Decimal('10'),
        minimum_order_amount=Decimal('20'),
    )


class RPCClient:
    """Calls ``/rpc/<name>`` and returns ``(status_code, decoded body)``."""

    def __init__(self, client):
        self.client = client

    def post(self, name, payload=None, **extra):
        response = self.client.post(
            f'/rpc/{name}',
            data=json.dumps(payload or {}),
            content_type='application/json',
            **extra,
        )
        return response.status_code, response.json()

    def get(self, name, payload=None, **extra):
        params = {'input': json.dumps(payload)} if payload is not None else {}
        response = self.client.get(f'/rpc/{name}', params, **extra)
        return response.status_code, response.json()


@pytest.fixture
def rpc(client):
    return RPCClient(client)
