"""Tests for the product catalog."""

import pytest

from apps.catalog.models import Category, Product
from apps.reviews.models import Review
from apps.stores.models import Seller, Store

from .helpers import create_user

pytestmark = pytest.mark.django_db

PRODUCTS_URL = '/api/v1/products/'

NEW_PRODUCT = {
    'title': 'Desk Lamp',
    'description': 'Adjustable LED desk lamp',
    'price': '24.99',
    'sku': 'LAMP-001',
    'brand': 'Lumen',
    'stock_quantity': 40,
    'images': [{'url': 'https://cdn.example.com/lamp-1.jpg'}, {'url': 'https://cdn.example.com/lamp-2.jpg'}],
}


class TestProductListing:
    def test_public_and_paginated(self, api_client, make_product):
        for _ in range(3):
            make_product()

        response = api_client.get(PRODUCTS_URL, {'limit': 2})

        body = response.json()
        assert response.status_code == 200
        assert len(body['data']['products']) == 2
        assert body['meta']['total'] == 3
        assert body['meta']['has_next'] is True

    def test_hides_products_of_unapproved_stores_and_inactive_products(self, api_client, seller_user, make_store, make_product):
        seller = seller_user.seller_profile
        visible = make_product(store=make_store(seller))
        make_product(store=make_store(seller, status=Store.PENDING))
        make_product(status=Product.DRAFT)

        products = api_client.get(PRODUCTS_URL).json()['data']['products']

        assert [p['id'] for p in products] == [str(visible.id)]

    def test_filters(self, api_client, make_product):
        cheap = make_product(price='5.00', brand='Acme')
        make_product(price='50.00', brand='Globex')
        make_product(price='7.00', brand='Acme', stock=0)

        by_price = api_client.get(PRODUCTS_URL, {'max_price': '10', 'in_stock': 'true'}).json()['data']['products']
        by_brand = api_client.get(PRODUCTS_URL, {'brand': 'glob'}).json()['data']['products']

        assert [p['id'] for p in by_price] == [str(cheap.id)]
        assert [p['brand'] for p in by_brand] == ['Globex']

    def test_search_matches_title_description_and_brand(self, api_client, make_product):
        make_product(title='Walnut Chess Set')
        make_product(brand='Walnut & Co')
        make_product(title='Plain Mug')

        products = api_client.get(PRODUCTS_URL, {'search': 'walnut'}).json()['data']['products']

        assert len(products) == 2

    def test_sort_by_price_ascending(self, api_client, make_product):
        make_product(price='30.00')
        make_product(price='10.00')
        make_product(price='20.00')

        products = api_client.get(PRODUCTS_URL, {'sort_by': 'price', 'sort_order': 'asc'}).json()['data']['products']

        assert [p['price'] for p in products] == [10.0, 20.0, 30.0]

    def test_rating_annotation_and_min_rating(self, api_client, customer, other_customer, make_product):
        rated = make_product()
        make_product()
        for user, rating in ((customer, 5), (other_customer, 4)):
            Review.objects.create(user=user, product=rated, rating=rating, title='t', content='long enough text')

        products = api_client.get(PRODUCTS_URL, {'min_rating': 4}).json()['data']['products']

        assert [p['id'] for p in products] == [str(rated.id)]
        assert products[0]['rating'] == 4.5
        assert products[0]['review_count'] == 2

    def test_limit_is_capped(self, api_client):
        response = api_client.get(PRODUCTS_URL, {'limit': 101})

        assert response.status_code == 400
        assert response.json()['errors'][0]['field'] == 'limit'


class TestProductDetail:
    def test_includes_latest_reviews(self, api_client, customer, product):
        Review.objects.create(user=customer, product=product, rating=3, title='Okay', content='Does the job fine.')

        response = api_client.get(f"{PRODUCTS_URL}{product.id}/")

        data = response.json()['data']['product']
        assert response.status_code == 200
        assert data['rating'] == 3.0
        assert [r['title'] for r in data['reviews']] == ['Okay']

    def test_unknown_product(self, api_client):
        response = api_client.get(f"{PRODUCTS_URL}00000000-0000-0000-0000-000000000000/")

        assert response.status_code == 404
        assert response.json() == {'success': False, 'message': 'Product not found'}


class TestProductWrites:
    def test_seller_creates_product_with_images(self, seller_client, seller_user):
        response = seller_client.post(PRODUCTS_URL, NEW_PRODUCT, format='json')

        assert response.status_code == 201
        product = response.json()['data']['product']
        assert product['slug'].startswith('desk-lamp-')
        assert product['seller']['id'] == str(seller_user.seller_profile.id)
        assert [image['sort_order'] for image in product['images']] == [0, 1]

    def test_seller_cannot_create_for_another_seller(self, seller_client):
        other = Seller.objects.create(name='Other', email='other-seller@example.com')

        response = seller_client.post(PRODUCTS_URL, {**NEW_PRODUCT, 'seller_id': str(other.id)}, format='json')

        assert response.status_code == 403

    def test_admin_creates_unowned_product_in_category(self, admin_client):
        category = Category.objects.create(name='Lighting', slug='lighting')

        response = admin_client.post(PRODUCTS_URL, {**NEW_PRODUCT, 'category_id': str(category.id)}, format='json')

        assert response.status_code == 201
        assert response.json()['data']['product']['category']['slug'] == 'lighting'

    def test_unknown_category(self, admin_client):
        body = {**NEW_PRODUCT, 'category_id': '00000000-0000-0000-0000-000000000000'}

        response = admin_client.post(PRODUCTS_URL, body, format='json')

        assert response.status_code == 400
        assert response.json()['errors'] == [{'field': 'category_id', 'message': 'Category not found'}]

    def test_customer_is_forbidden(self, customer_client):
        response = customer_client.post(PRODUCTS_URL, NEW_PRODUCT, format='json')

        assert response.status_code == 403

    def test_anonymous_is_unauthorized(self, api_client):
        response = api_client.post(PRODUCTS_URL, NEW_PRODUCT, format='json')

        assert response.status_code == 401

    def test_duplicate_sku_conflicts(self, admin_client):
        Product.objects.create(
            title='Existing', slug='existing', description='x', price='1.00', sku='LAMP-001', brand='B',
        )

        response = admin_client.post(PRODUCTS_URL, NEW_PRODUCT, format='json')

        assert response.status_code == 409
        assert response.json()['message'] == 'Resource already exists'

    def test_owner_updates_but_other_seller_cannot(self, seller_client, seller_user, make_product):
        mine = make_product(seller=seller_user.seller_profile)
        rival_user = create_user(role='SELLER', email='rival@example.com')
        theirs = make_product(seller=Seller.objects.create(user=rival_user, name='Rival', email=rival_user.email))

        ok = seller_client.put(f"{PRODUCTS_URL}{mine.id}/", {'price': '12.00'}, format='json')
        denied = seller_client.put(f"{PRODUCTS_URL}{theirs.id}/", {'price': '1.00'}, format='json')

        assert ok.status_code == 200
        assert ok.json()['data']['product']['price'] == 12.0
        assert denied.status_code == 403
        assert denied.json()['message'] == 'Sellers can only update their own products'

    def test_delete(self, admin_client, product):
        response = admin_client.delete(f"{PRODUCTS_URL}{product.id}/")

        assert response.status_code == 200
        assert not Product.objects.filter(id=product.id).exists()
