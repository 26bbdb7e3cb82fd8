"""
Tests for order placement, cancellation and admin status updates.

Stock is decremented with a conditional UPDATE (stock_quantity >= quantity)
and the affected row count is checked inside the placement transaction.
This intentionally differs from a plain read-then-decrement: a checkout that
loses the race for the last unit fails with the insufficient-stock error
instead of driving stock negative.
"""

from decimal import Decimal
from unittest import mock

import pytest
from django.db.models import F

from apps.cart.models import CartItem
from apps.catalog.models import Product
from apps.core.exceptions import NotFoundException, ValidationException
from apps.orders import services
from apps.orders.models import Order, OrderTracking
from apps.orders.services import OrderLine, cancel_order, place_order, update_order_status

from .helpers import create_address, create_payment_method

pytestmark = pytest.mark.django_db

ORDERS_URL = '/api/v1/orders/'


def order_body(checkout, *lines):
    return {
        'items': [{'product_id': str(product.id), 'quantity': quantity} for product, quantity in lines],
        **checkout,
    }


class TestPlaceOrder:
    def test_places_order_with_totals_tracking_stock_and_cart(self, customer_client, customer, checkout, make_product):
        monitor = make_product(price='199.99', stock=5)
        cable = make_product(price='10.00', stock=10)
        CartItem.objects.create(user=customer, product=monitor, quantity=1)

        response = customer_client.post(ORDERS_URL, order_body(checkout, (monitor, 1), (cable, 2)), format='json')

        assert response.status_code == 201
        body = response.json()
        assert body['success'] is True
        order = body['data']['order']
        # subtotal 219.99, tax 17.60, free shipping
        assert Decimal(str(order['subtotal'])) == Decimal('219.99')
        assert Decimal(str(order['tax'])) == Decimal('17.60')
        assert Decimal(str(order['shipping'])) == Decimal('0')
        assert Decimal(str(order['total'])) == Decimal('237.59')
        assert order['status'] == Order.PENDING
        assert order['order_number'].startswith('AMZ')
        assert [event['status'] for event in order['tracking']] == ['Order Placed']
        assert len(order['items']) == 2

        monitor.refresh_from_db()
        cable.refresh_from_db()
        assert monitor.stock_quantity == 4
        assert cable.stock_quantity == 8
        assert not CartItem.objects.filter(user=customer).exists()

    def test_small_order_pays_shipping(self, customer, checkout, make_product):
        item = make_product(price='10.00', stock=5)

        order = place_order(customer, [OrderLine(item.id, 2)], **checkout)

        assert order.subtotal == Decimal('20.00')
        assert order.tax == Decimal('1.60')
        assert order.shipping == Decimal('5.99')
        assert order.total == Decimal('27.59')
        assert OrderTracking.objects.filter(order=order, status='Order Placed').count() == 1

    def test_uses_current_product_price(self, customer_client, checkout, make_product):
        item = make_product(price='12.50', stock=5)
        body = order_body(checkout, (item, 1))
        body['items'][0]['price'] = '0.01'

        response = customer_client.post(ORDERS_URL, body, format='json')

        assert response.status_code == 201
        assert Decimal(str(response.json()['data']['order']['items'][0]['price'])) == Decimal('12.50')

    def test_estimated_delivery_is_a_week_out(self, customer, checkout, product):
        order = place_order(customer, [OrderLine(product.id, 1)], **checkout)

        assert (order.estimated_delivery - order.created_at).days in (6, 7)

    def test_insufficient_stock_writes_nothing(self, customer_client, customer, checkout, make_product):
        plenty = make_product(price='5.00', stock=10)
        scarce = make_product(title='Last Lamp', price='20.00', stock=1)
        CartItem.objects.create(user=customer, product=scarce, quantity=1)

        response = customer_client.post(ORDERS_URL, order_body(checkout, (plenty, 1), (scarce, 2)), format='json')

        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['errors'] == [{'field': 'items', 'message': 'Insufficient stock for product: Last Lamp'}]
        assert Order.objects.count() == 0
        assert CartItem.objects.filter(user=customer).count() == 1
        plenty.refresh_from_db()
        scarce.refresh_from_db()
        assert plenty.stock_quantity == 10
        assert scarce.stock_quantity == 1

    def test_out_of_stock_flag_rejects(self, customer, checkout, make_product):
        item = make_product(stock=5, in_stock=False)

        with pytest.raises(ValidationException):
            place_order(customer, [OrderLine(item.id, 1)], **checkout)

    def test_unknown_product_is_not_found(self, customer_client, checkout):
        body = {
            'items': [{'product_id': '00000000-0000-0000-0000-000000000000', 'quantity': 1}],
            **checkout,
        }

        response = customer_client.post(ORDERS_URL, body, format='json')

        assert response.status_code == 404
        assert response.json()['message'] == 'One or more products not found'

    def test_other_users_address_is_not_found(self, customer, other_customer, payment_method, product):
        foreign = create_address(other_customer)

        with pytest.raises(NotFoundException, match='Address not found'):
            place_order(
                customer,
                [OrderLine(product.id, 1)],
                shipping_address_id=foreign.id,
                billing_address_id=foreign.id,
                payment_method_id=payment_method.id,
            )

    def test_other_users_payment_method_is_not_found(self, customer, other_customer, address, product):
        foreign = create_payment_method(other_customer)

        with pytest.raises(NotFoundException, match='Payment method not found'):
            place_order(
                customer,
                [OrderLine(product.id, 1)],
                shipping_address_id=address.id,
                billing_address_id=address.id,
                payment_method_id=foreign.id,
            )

    def test_lost_stock_race_rolls_back(self, customer, checkout, make_product):
        """
        Simulates a concurrent checkout taking the last unit between the
        stock check and the decrement: the conditional update matches no row,
        so placement fails and every write is rolled back.
        """
        item = make_product(price='10.00', stock=1)
        CartItem.objects.create(user=customer, product=item, quantity=1)
        original_create = OrderTracking.objects.create

        def steal_last_unit(**kwargs):
            Product.objects.filter(id=item.id).update(stock_quantity=F('stock_quantity') - 1)
            return original_create(**kwargs)

        with mock.patch.object(OrderTracking.objects, 'create', side_effect=steal_last_unit):
            with pytest.raises(ValidationException):
                place_order(customer, [OrderLine(item.id, 1)], **checkout)

        assert Order.objects.count() == 0
        assert CartItem.objects.filter(user=customer).count() == 1
        item.refresh_from_db()
        # The simulated competitor wrote inside the same transaction, so it is undone too
        assert item.stock_quantity == 1

    def test_empty_items_rejected(self, customer_client, checkout):
        response = customer_client.post(ORDERS_URL, {'items': [], **checkout}, format='json')

        assert response.status_code == 400
        assert response.json()['message'] == 'Validation failed'

    def test_requires_authentication(self, api_client, checkout, product):
        response = api_client.post(ORDERS_URL, order_body(checkout, (product, 1)), format='json')

        assert response.status_code == 401


class TestOrderNumber:
    def test_format(self):
        number = services.generate_order_number()

        assert number.startswith('AMZ')
        assert number[3:].isdigit()
        assert len(number) == 3 + 13 + 3


class TestListOrders:
    def test_lists_only_own_orders_paginated(self, customer_client, customer, other_customer, checkout, make_product):
        item = make_product(stock=50)
        for _ in range(3):
            place_order(customer, [OrderLine(item.id, 1)], **checkout)
        place_order(
            other_customer,
            [OrderLine(item.id, 1)],
            shipping_address_id=create_address(other_customer).id,
            billing_address_id=create_address(other_customer).id,
            payment_method_id=create_payment_method(other_customer).id,
        )

        response = customer_client.get(ORDERS_URL, {'page': 1, 'limit': 2})

        body = response.json()
        assert response.status_code == 200
        assert len(body['data']['orders']) == 2
        assert body['meta'] == {
            'page': 1,
            'limit': 2,
            'total': 3,
            'total_pages': 2,
            'has_next': True,
            'has_prev': False,
        }

    def test_status_filter(self, customer_client, customer, checkout, product):
        order = place_order(customer, [OrderLine(product.id, 1)], **checkout)
        place_order(customer, [OrderLine(product.id, 1)], **checkout)
        update_order_status(order.id, Order.SHIPPED)

        response = customer_client.get(ORDERS_URL, {'status': 'SHIPPED'})

        orders = response.json()['data']['orders']
        assert [o['id'] for o in orders] == [str(order.id)]

    def test_other_users_order_is_not_found(self, other_client, customer, checkout, product):
        order = place_order(customer, [OrderLine(product.id, 1)], **checkout)

        response = other_client.get(f"{ORDERS_URL}{order.id}/")

        assert response.status_code == 404


class TestCancelOrder:
    @pytest.mark.parametrize("status", [Order.PENDING, Order.CONFIRMED])
    def test_cancel_restores_stock(self, customer_client, customer, checkout, make_product, status):
        item = make_product(stock=5)
        order = place_order(customer, [OrderLine(item.id, 3)], **checkout)
        Order.objects.filter(id=order.id).update(status=status)

        response = customer_client.patch(f"{ORDERS_URL}{order.id}/cancel/")

        assert response.status_code == 200
        assert response.json()['data']['order']['status'] == Order.CANCELLED
        item.refresh_from_db()
        assert item.stock_quantity == 5
        assert OrderTracking.objects.filter(order=order, status='Cancelled').count() == 1

    @pytest.mark.parametrize("status", [Order.PROCESSING, Order.SHIPPED, Order.DELIVERED, Order.CANCELLED, Order.RETURNED])
    def test_cancel_rejected_from_other_statuses(self, customer, checkout, make_product, status):
        item = make_product(stock=5)
        order = place_order(customer, [OrderLine(item.id, 2)], **checkout)
        Order.objects.filter(id=order.id).update(status=status)

        with pytest.raises(ValidationException) as exc_info:
            cancel_order(customer, order.id)

        assert exc_info.value.errors == [{'field': 'status', 'message': 'Order cannot be cancelled in current status'}]
        order.refresh_from_db()
        item.refresh_from_db()
        assert order.status == status
        assert item.stock_quantity == 3

    def test_second_cancel_does_not_restore_twice(self, customer, checkout, make_product):
        item = make_product(stock=5)
        order = place_order(customer, [OrderLine(item.id, 2)], **checkout)

        cancel_order(customer, order.id)
        with pytest.raises(ValidationException):
            cancel_order(customer, order.id)

        item.refresh_from_db()
        assert item.stock_quantity == 5

    def test_cannot_cancel_someone_elses_order(self, other_client, customer, checkout, product):
        order = place_order(customer, [OrderLine(product.id, 1)], **checkout)

        response = other_client.patch(f"{ORDERS_URL}{order.id}/cancel/")

        assert response.status_code == 404


class TestAdminStatus:
    def test_admin_sets_status_with_tracking(self, admin_client, customer, checkout, product):
        order = place_order(customer, [OrderLine(product.id, 1)], **checkout)

        response = admin_client.patch(
            f"{ORDERS_URL}admin/{order.id}/status/",
            {'status': 'SHIPPED', 'tracking_number': '1Z999', 'carrier': 'UPS'},
            format='json',
        )

        assert response.status_code == 200
        data = response.json()['data']['order']
        assert data['status'] == 'SHIPPED'
        assert data['tracking_number'] == '1Z999'
        assert data['carrier'] == 'UPS'
        assert data['tracking'][-1]['status'] == 'SHIPPED'
        assert data['tracking'][-1]['description'] == 'Order has been shipped'

    def test_delivered_stamps_delivered_at(self, customer, checkout, product):
        order = place_order(customer, [OrderLine(product.id, 1)], **checkout)

        updated = update_order_status(order.id, Order.DELIVERED)

        assert updated.delivered_at is not None

    def test_any_transition_is_accepted(self, customer, checkout, product):
        order = place_order(customer, [OrderLine(product.id, 1)], **checkout)
        update_order_status(order.id, Order.DELIVERED)

        updated = update_order_status(order.id, Order.PENDING)

        assert updated.status == Order.PENDING

    def test_customer_is_forbidden(self, customer_client, customer, checkout, product):
        order = place_order(customer, [OrderLine(product.id, 1)], **checkout)

        response = customer_client.patch(
            f"{ORDERS_URL}admin/{order.id}/status/", {'status': 'SHIPPED'}, format='json'
        )

        assert response.status_code == 403
        assert response.json() == {'success': False, 'message': 'Insufficient permissions'}

    def test_invalid_status_rejected(self, admin_client, customer, checkout, product):
        order = place_order(customer, [OrderLine(product.id, 1)], **checkout)

        response = admin_client.patch(
            f"{ORDERS_URL}admin/{order.id}/status/", {'status': 'LOST'}, format='json'
        )

        assert response.status_code == 400
        assert response.json()['errors'][0]['field'] == 'status'


class TestAdminViews:
    def test_all_orders_filters_by_user(self, admin_client, customer, other_customer, checkout, make_product):
        item = make_product(stock=10)
        mine = place_order(customer, [OrderLine(item.id, 1)], **checkout)
        place_order(
            other_customer,
            [OrderLine(item.id, 1)],
            shipping_address_id=create_address(other_customer).id,
            billing_address_id=create_address(other_customer).id,
            payment_method_id=create_payment_method(other_customer).id,
        )

        response = admin_client.get(f"{ORDERS_URL}admin/all/", {'user_id': str(customer.id)})

        orders = response.json()['data']['orders']
        assert [o['id'] for o in orders] == [str(mine.id)]
        assert orders[0]['user']['email'] == customer.email

    def test_analytics(self, admin_client, customer, checkout, make_product):
        item = make_product(price='10.00', stock=10)
        place_order(customer, [OrderLine(item.id, 2)], **checkout)
        cancelled = place_order(customer, [OrderLine(item.id, 1)], **checkout)
        cancel_order(customer, cancelled.id)

        response = admin_client.get(f"{ORDERS_URL}admin/analytics/")

        analytics = response.json()['data']['analytics']
        assert analytics['total_orders'] == 2
        assert analytics['orders_today'] == 2
        assert analytics['orders_by_status'] == {'PENDING': 1, 'CANCELLED': 1}
        assert analytics['total_revenue'] == pytest.approx(27.59 + 16.79)
        assert len(analytics['recent_orders']) == 2
