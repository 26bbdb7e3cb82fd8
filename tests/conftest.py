"""Pytest fixtures for the storefront tests."""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.catalog.models import Product
from apps.stores.models import Seller, Store

from .helpers import authenticate, create_address, create_payment_method, create_user, next_id


@pytest.fixture
def api_client():
    """Anonymous API client."""
    return APIClient()


@pytest.fixture
def customer(db):
    return create_user(User.CUSTOMER, email='customer@example.com')


@pytest.fixture
def other_customer(db):
    return create_user(User.CUSTOMER, email='other@example.com')


@pytest.fixture
def admin_user(db):
    return create_user(User.ADMIN, email='admin@example.com')


@pytest.fixture
def seller_user(db):
    """A SELLER user with a seller profile."""
    user = create_user(User.SELLER, email='seller@example.com')
    Seller.objects.create(user=user, name='Acme Goods', email=user.email)
    return user


@pytest.fixture
def customer_client(customer):
    return authenticate(APIClient(), customer)


@pytest.fixture
def other_client(other_customer):
    return authenticate(APIClient(), other_customer)


@pytest.fixture
def admin_client(admin_user):
    return authenticate(APIClient(), admin_user)


@pytest.fixture
def seller_client(seller_user):
    return authenticate(APIClient(), seller_user)


@pytest.fixture
def make_product(db):
    """Factory for products; unique slug and SKU per call."""
    def factory(price='10.00', stock=10, **extra):
        n = next_id()
        return Product.objects.create(
            title=extra.pop('title', f"Product {n}"),
            slug=f"product-{n}",
            description='A product used in tests',
            price=Decimal(str(price)),
            sku=f"SKU-{n}",
            brand=extra.pop('brand', 'Acme'),
            stock_quantity=stock,
            in_stock=extra.pop('in_stock', stock > 0),
            **extra,
        )
    return factory


@pytest.fixture
def product(make_product):
    return make_product(price='10.00', stock=10)


@pytest.fixture
def make_store(db):
    """Factory for stores owned by a seller profile."""
    def factory(seller, status=Store.APPROVED, is_active=None, **extra):
        n = next_id()
        return Store.objects.create(
            seller=seller,
            name=extra.pop('name', f"Store {n}"),
            slug=f"store-{n}",
            description='A store used in tests',
            category=extra.pop('category', 'Electronics'),
            address='1 Main St',
            city=extra.pop('city', 'Springfield'),
            state='IL',
            zip_code='62701',
            status=status,
            is_active=(status == Store.APPROVED) if is_active is None else is_active,
            **extra,
        )
    return factory


@pytest.fixture
def address(customer):
    return create_address(customer)


@pytest.fixture
def payment_method(customer):
    return create_payment_method(customer, is_default=True)


@pytest.fixture
def checkout(address, payment_method):
    """Reference ids for a valid order body."""
    return {
        'shipping_address_id': str(address.id),
        'billing_address_id': str(address.id),
        'payment_method_id': str(payment_method.id),
    }
