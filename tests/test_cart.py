"""Tests for the shopping cart endpoints."""

import pytest

from apps.cart.models import CartItem

pytestmark = pytest.mark.django_db

CART_URL = '/api/v1/cart/'


class TestAddToCart:
    def test_adds_new_line(self, customer_client, customer, product):
        response = customer_client.post(f"{CART_URL}add/", {'product_id': str(product.id), 'quantity': 2}, format='json')

        assert response.status_code == 201
        item = response.json()['data']['item']
        assert item['quantity'] == 2
        assert item['product']['id'] == str(product.id)
        assert item['line_total'] == pytest.approx(20.0)
        assert CartItem.objects.filter(user=customer).count() == 1

    def test_merges_existing_line(self, customer_client, customer, product):
        customer_client.post(f"{CART_URL}add/", {'product_id': str(product.id), 'quantity': 1}, format='json')
        response = customer_client.post(f"{CART_URL}add/", {'product_id': str(product.id), 'quantity': 3}, format='json')

        assert response.json()['data']['item']['quantity'] == 4
        assert CartItem.objects.filter(user=customer).count() == 1

    def test_quantity_defaults_to_one(self, customer_client, product):
        response = customer_client.post(f"{CART_URL}add/", {'product_id': str(product.id)}, format='json')

        assert response.json()['data']['item']['quantity'] == 1

    def test_insufficient_stock(self, customer_client, make_product):
        item = make_product(stock=2)

        response = customer_client.post(f"{CART_URL}add/", {'product_id': str(item.id), 'quantity': 3}, format='json')

        assert response.status_code == 400
        assert response.json()['errors'] == [{'field': 'quantity', 'message': 'Insufficient stock available'}]

    def test_unknown_product(self, customer_client):
        response = customer_client.post(
            f"{CART_URL}add/",
            {'product_id': '00000000-0000-0000-0000-000000000000', 'quantity': 1},
            format='json',
        )

        assert response.status_code == 404
        assert response.json() == {'success': False, 'message': 'Product not found'}

    def test_requires_authentication(self, api_client, product):
        response = api_client.post(f"{CART_URL}add/", {'product_id': str(product.id)}, format='json')

        assert response.status_code == 401
        assert response.json()['success'] is False


class TestGetCart:
    def test_totals_use_current_prices(self, customer_client, customer, make_product):
        item = make_product(price='10.00', stock=10)
        CartItem.objects.create(user=customer, product=item, quantity=2)
        item.price = '12.00'
        item.save()

        response = customer_client.get(CART_URL)

        data = response.json()['data']
        assert response.status_code == 200
        assert data['item_count'] == 2
        assert data['totals'] == {
            'subtotal': pytest.approx(24.0),
            'tax': pytest.approx(1.92),
            'shipping': pytest.approx(5.99),
            'total': pytest.approx(31.91),
        }

    def test_free_shipping_above_threshold(self, customer_client, customer, make_product):
        CartItem.objects.create(user=customer, product=make_product(price='199.99'), quantity=1)

        totals = customer_client.get(CART_URL).json()['data']['totals']

        assert totals['shipping'] == 0
        assert totals['tax'] == pytest.approx(16.0)
        assert totals['total'] == pytest.approx(215.99)

    def test_only_own_items(self, customer_client, other_customer, product):
        CartItem.objects.create(user=other_customer, product=product, quantity=1)

        data = customer_client.get(CART_URL).json()['data']

        assert data['items'] == []
        assert data['item_count'] == 0


class TestUpdateCartItem:
    def test_sets_quantity(self, customer_client, customer, product):
        line = CartItem.objects.create(user=customer, product=product, quantity=1)

        response = customer_client.put(f"{CART_URL}{line.id}/", {'quantity': 5}, format='json')

        assert response.status_code == 200
        assert response.json()['data']['item']['quantity'] == 5

    def test_zero_removes_line(self, customer_client, customer, product):
        line = CartItem.objects.create(user=customer, product=product, quantity=1)

        response = customer_client.put(f"{CART_URL}{line.id}/", {'quantity': 0}, format='json')

        assert response.status_code == 200
        assert response.json()['message'] == 'Item removed from cart'
        assert not CartItem.objects.filter(id=line.id).exists()

    def test_over_stock_rejected(self, customer_client, customer, make_product):
        line = CartItem.objects.create(user=customer, product=make_product(stock=3), quantity=1)

        response = customer_client.put(f"{CART_URL}{line.id}/", {'quantity': 4}, format='json')

        assert response.status_code == 400

    def test_negative_quantity_rejected(self, customer_client, customer, product):
        line = CartItem.objects.create(user=customer, product=product, quantity=1)

        response = customer_client.put(f"{CART_URL}{line.id}/", {'quantity': -1}, format='json')

        assert response.status_code == 400
        assert response.json()['errors'][0]['field'] == 'quantity'

    def test_someone_elses_line_is_not_found(self, other_client, customer, product):
        line = CartItem.objects.create(user=customer, product=product, quantity=1)

        response = other_client.put(f"{CART_URL}{line.id}/", {'quantity': 2}, format='json')

        assert response.status_code == 404
        line.refresh_from_db()
        assert line.quantity == 1


class TestRemoveAndClear:
    def test_remove_line(self, customer_client, customer, product):
        line = CartItem.objects.create(user=customer, product=product, quantity=1)

        response = customer_client.delete(f"{CART_URL}{line.id}/")

        assert response.status_code == 200
        assert not CartItem.objects.filter(id=line.id).exists()

    def test_remove_missing_line(self, customer_client):
        response = customer_client.delete(f"{CART_URL}00000000-0000-0000-0000-000000000000/")

        assert response.status_code == 404
        assert response.json()['message'] == 'Cart item not found'

    def test_clear(self, customer_client, customer, other_customer, make_product):
        CartItem.objects.create(user=customer, product=make_product(), quantity=1)
        CartItem.objects.create(user=customer, product=make_product(), quantity=2)
        CartItem.objects.create(user=other_customer, product=make_product(), quantity=1)

        response = customer_client.delete(CART_URL)

        assert response.status_code == 200
        assert not CartItem.objects.filter(user=customer).exists()
        assert CartItem.objects.filter(user=other_customer).count() == 1

    def test_count_sums_quantities(self, customer_client, customer, make_product):
        CartItem.objects.create(user=customer, product=make_product(), quantity=2)
        CartItem.objects.create(user=customer, product=make_product(), quantity=3)

        response = customer_client.get(f"{CART_URL}count/")

        assert response.json()['data'] == {'count': 5}
