"""Tests for seller stores: discovery, enrollment, approval and store reviews."""

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.orders.models import Order
from apps.orders.services import OrderLine, place_order, update_order_status
from apps.stores.models import Seller, Store, StoreReview

from .helpers import create_user

pytestmark = pytest.mark.django_db

STORES_URL = '/api/v1/stores/'

ENROLLMENT = {
    'name': 'Corner Books',
    'description': 'Used and rare books',
    'category': 'Books',
    'address': '12 High St',
    'city': 'Portland',
    'state': 'OR',
    'zip_code': '97201',
}


@pytest.fixture
def seller(seller_user):
    return seller_user.seller_profile


class TestStoreDiscovery:
    def test_lists_only_approved_active_stores(self, api_client, seller, make_store):
        visible = make_store(seller)
        make_store(seller, status=Store.PENDING)
        make_store(seller, status=Store.APPROVED, is_active=False)
        make_store(seller, status=Store.SUSPENDED)

        response = api_client.get(STORES_URL)

        assert response.status_code == 200
        assert [s['id'] for s in response.json()['data']['stores']] == [str(visible.id)]

    def test_filters_by_city_and_search(self, api_client, seller, make_store):
        make_store(seller, name='Bean There', city='Seattle', category='Coffee')
        make_store(seller, name='Gadget Hut', city='Austin')

        by_city = api_client.get(STORES_URL, {'city': 'seat'}).json()['data']['stores']
        by_search = api_client.get(STORES_URL, {'search': 'gadget'}).json()['data']['stores']

        assert [s['name'] for s in by_city] == ['Bean There']
        assert [s['name'] for s in by_search] == ['Gadget Hut']

    def test_sort_by_name_ascending(self, api_client, seller, make_store):
        make_store(seller, name='Zed')
        make_store(seller, name='Alpha')

        stores = api_client.get(STORES_URL, {'sort_by': 'name', 'sort_order': 'asc'}).json()['data']['stores']

        assert [s['name'] for s in stores] == ['Alpha', 'Zed']

    def test_detail_includes_products_and_counts(self, api_client, seller, make_store, make_product):
        store = make_store(seller)
        make_product(store=store, seller=seller)
        make_product(store=store, seller=seller, status='DRAFT')

        response = api_client.get(f"{STORES_URL}{store.id}/")

        store_data = response.json()['data']['store']
        assert response.status_code == 200
        assert len(store_data['featured_products']) == 1
        assert store_data['product_count'] == 2
        assert store_data['latest_reviews'] == []

    def test_detail_caps_featured_products_and_reviews(self, api_client, seller, make_store, make_product):
        store = make_store(seller)
        for _ in range(13):
            make_product(store=store, seller=seller)
        now = timezone.now()
        for n in range(6):
            review = StoreReview.objects.create(
                store=store, user=create_user(), rating=4, title=f"Visit {n}", content='Friendly staff.',
            )
            StoreReview.objects.filter(id=review.id).update(created_at=now - timedelta(days=6 - n))

        store_data = api_client.get(f"{STORES_URL}{store.id}/").json()['data']['store']

        assert len(store_data['featured_products']) == 12
        assert store_data['product_count'] == 13
        assert [r['title'] for r in store_data['latest_reviews']] == [f"Visit {n}" for n in range(5, 0, -1)]

    def test_pending_store_detail_is_hidden(self, api_client, seller, make_store):
        store = make_store(seller, status=Store.PENDING)

        response = api_client.get(f"{STORES_URL}{store.id}/")

        assert response.status_code == 404
        assert response.json()['message'] == 'Store not available'


class TestEnrollment:
    def test_customer_enrolls_and_becomes_seller(self, customer_client, customer):
        response = customer_client.post(f"{STORES_URL}enroll/", ENROLLMENT, format='json')

        assert response.status_code == 201
        store = response.json()['data']['store']
        assert store['status'] == Store.PENDING
        assert store['is_active'] is False
        assert store['slug'] == 'corner-books'
        assert store['country'] == 'United States'
        assert Seller.objects.filter(user=customer).count() == 1

    def test_duplicate_names_get_distinct_slugs(self, customer_client):
        customer_client.post(f"{STORES_URL}enroll/", ENROLLMENT, format='json')
        response = customer_client.post(f"{STORES_URL}enroll/", ENROLLMENT, format='json')

        assert response.json()['data']['store']['slug'] == 'corner-books-1'
        assert Seller.objects.count() == 1

    def test_description_required(self, customer_client):
        body = {key: value for key, value in ENROLLMENT.items() if key != 'description'}

        response = customer_client.post(f"{STORES_URL}enroll/", body, format='json')

        assert response.status_code == 400
        assert response.json()['errors'][0]['field'] == 'description'

    def test_status_cannot_be_set_by_seller(self, customer_client):
        response = customer_client.post(f"{STORES_URL}enroll/", {**ENROLLMENT, 'status': 'APPROVED'}, format='json')

        assert response.json()['data']['store']['status'] == Store.PENDING

    def test_my_stores(self, seller_client, seller, make_store):
        make_store(seller, status=Store.PENDING)
        make_store(seller)

        stores = seller_client.get(f"{STORES_URL}seller/my-stores/").json()['data']['stores']

        assert len(stores) == 2


class TestStoreManagement:
    def test_owner_updates(self, seller_client, seller, make_store):
        store = make_store(seller)

        response = seller_client.put(f"{STORES_URL}{store.id}/", {'phone': '555-0100'}, format='json')

        assert response.status_code == 200
        store.refresh_from_db()
        assert store.phone == '555-0100'

    def test_non_owner_cannot_update(self, customer_client, customer, seller, make_store):
        Seller.objects.create(user=customer, name='Other', email=customer.email)
        store = make_store(seller)

        response = customer_client.put(f"{STORES_URL}{store.id}/", {'phone': '555-0100'}, format='json')

        assert response.status_code == 404
        assert response.json()['message'] == 'Store not found or access denied'

    def test_user_without_seller_profile_is_forbidden(self, customer_client, seller, make_store):
        store = make_store(seller)

        response = customer_client.get(f"{STORES_URL}{store.id}/analytics/")

        assert response.status_code == 403

    def test_analytics(self, seller_client, seller, make_store, make_product, customer, checkout):
        store = make_store(seller)
        item = make_product(price='15.00', stock=10, store=store, seller=seller)
        place_order(customer, [OrderLine(item.id, 2)], **checkout)

        response = seller_client.get(f"{STORES_URL}{store.id}/analytics/", {'period': '7d'})

        data = response.json()['data']
        assert data['period'] == '7d'
        assert data['analytics']['total_orders'] == 1
        assert data['analytics']['total_revenue'] == pytest.approx(15.0)
        assert data['analytics']['total_products'] == 1


class TestAdminApproval:
    def test_pending_queue(self, admin_client, seller, make_store):
        pending = make_store(seller, status=Store.PENDING)
        make_store(seller)

        stores = admin_client.get(f"{STORES_URL}admin/pending/").json()['data']['stores']

        assert [s['id'] for s in stores] == [str(pending.id)]

    @pytest.mark.parametrize("decision,active", [('APPROVED', True), ('REJECTED', False), ('SUSPENDED', False)])
    def test_decision_sets_is_active(self, admin_client, seller, make_store, decision, active):
        store = make_store(seller, status=Store.PENDING)

        response = admin_client.patch(
            f"{STORES_URL}admin/{store.id}/status/", {'status': decision, 'reason': 'checked'}, format='json'
        )

        assert response.status_code == 200
        assert response.json()['message'] == f"Store {decision.lower()} successfully"
        store.refresh_from_db()
        assert store.status == decision
        assert store.is_active is active

    def test_pending_is_not_a_decision(self, admin_client, seller, make_store):
        store = make_store(seller, status=Store.APPROVED)

        response = admin_client.patch(f"{STORES_URL}admin/{store.id}/status/", {'status': 'PENDING'}, format='json')

        assert response.status_code == 400

    def test_seller_cannot_approve(self, seller_client, seller, make_store):
        store = make_store(seller, status=Store.PENDING)

        response = seller_client.patch(f"{STORES_URL}admin/{store.id}/status/", {'status': 'APPROVED'}, format='json')

        assert response.status_code == 403


class TestStoreReviews:
    BODY = {'rating': 4, 'title': 'Friendly', 'content': 'Quick shipping and helpful staff.'}

    def test_review_updates_store_rating(self, customer_client, other_client, seller, make_store):
        store = make_store(seller)

        customer_client.post(f"{STORES_URL}{store.id}/reviews/", self.BODY, format='json')
        response = other_client.post(f"{STORES_URL}{store.id}/reviews/", {**self.BODY, 'rating': 5}, format='json')

        assert response.status_code == 201
        store.refresh_from_db()
        assert float(store.rating) == 4.5
        assert store.total_reviews == 2

    def test_verified_with_delivered_order_from_store(self, customer_client, customer, checkout, seller, make_store, make_product):
        store = make_store(seller)
        item = make_product(store=store, seller=seller)
        order = place_order(customer, [OrderLine(item.id, 1)], **checkout)
        update_order_status(order.id, Order.DELIVERED)

        response = customer_client.post(f"{STORES_URL}{store.id}/reviews/", self.BODY, format='json')

        assert response.json()['data']['review']['is_verified'] is True

    def test_one_review_per_store(self, customer_client, customer, seller, make_store):
        store = make_store(seller)
        customer_client.post(f"{STORES_URL}{store.id}/reviews/", self.BODY, format='json')

        response = customer_client.post(f"{STORES_URL}{store.id}/reviews/", self.BODY, format='json')

        assert response.status_code == 400
        assert StoreReview.objects.filter(store=store, user=customer).count() == 1

    def test_hidden_store_cannot_be_reviewed(self, customer_client, seller, make_store):
        store = make_store(seller, status=Store.PENDING)

        response = customer_client.post(f"{STORES_URL}{store.id}/reviews/", self.BODY, format='json')

        assert response.status_code == 404
