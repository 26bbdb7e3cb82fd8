"""
Order endpoints: checkout, history, cancellation and admin fulfilment
"""
import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdmin
from apps.core.exceptions import NotFoundException
from apps.core.utils import paginate
from apps.orders import services
from ..serializers.orders import (
    AdminOrderQuerySerializer,
    AdminOrderSerializer,
    CreateOrderSerializer,
    OrderAnalyticsSerializer,
    OrderQuerySerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)
from .base import success, validate

logger = logging.getLogger(__name__)


class OrderListCreateView(APIView):
    """
    Order history and checkout for the signed-in customer.
    """

    @extend_schema(parameters=[OrderQuerySerializer], responses={200: OrderSerializer(many=True)})
    def get(self, request):
        """
        List the caller's orders, newest first, optionally filtered by status.
        """
        query = validate(OrderQuerySerializer, request.query_params)
        orders = services.order_detail_queryset().filter(user=request.user)
        if query.get('status'):
            orders = orders.filter(status=query['status'])

        page, meta = paginate(orders.order_by('-created_at'), query['page'], query['limit'])
        return success('Orders retrieved successfully', {'orders': OrderSerializer(page, many=True).data}, meta)

    @extend_schema(request=CreateOrderSerializer, responses={201: OrderSerializer})
    def post(self, request):
        """
        Place an order. Prices and stock come from the catalog, never the request body.
        """
        data = validate(CreateOrderSerializer, request.data)
        order = services.place_order(
            request.user,
            [services.OrderLine(**line) for line in data['items']],
            shipping_address_id=data['shipping_address_id'],
            billing_address_id=data['billing_address_id'],
            payment_method_id=data['payment_method_id'],
        )
        return success(
            'Order created successfully',
            {'order': OrderSerializer(order).data},
            status_code=status.HTTP_201_CREATED,
        )


class OrderDetailView(APIView):
    """
    A single order owned by the caller.
    """

    @extend_schema(responses={200: OrderSerializer})
    def get(self, request, order_id):
        order = services.order_detail_queryset().filter(id=order_id, user=request.user).first()
        if order is None:
            raise NotFoundException('Order not found')
        return success('Order retrieved successfully', {'order': OrderSerializer(order).data})


class OrderCancelView(APIView):
    """
    Customer cancellation of a PENDING or CONFIRMED order.
    """

    @extend_schema(request=None, responses={200: OrderSerializer})
    def patch(self, request, order_id):
        """
        Cancel the order and put its quantities back into stock.
        """
        order = services.cancel_order(request.user, order_id)
        return success('Order cancelled successfully', {'order': OrderSerializer(order).data})


class AdminOrderListView(APIView):
    """
    All orders across customers, for administrators.
    """
    permission_classes = [IsAdmin]

    @extend_schema(parameters=[AdminOrderQuerySerializer], responses={200: AdminOrderSerializer(many=True)})
    def get(self, request):
        query = validate(AdminOrderQuerySerializer, request.query_params)
        orders = services.order_detail_queryset()
        if query.get('status'):
            orders = orders.filter(status=query['status'])
        if query.get('user_id'):
            orders = orders.filter(user_id=query['user_id'])

        page, meta = paginate(orders.order_by('-created_at'), query['page'], query['limit'])
        return success('Orders retrieved successfully', {'orders': AdminOrderSerializer(page, many=True).data}, meta)


class AdminOrderStatusView(APIView):
    """
    Fulfilment status changes made by administrators.
    """
    permission_classes = [IsAdmin]

    @extend_schema(request=UpdateOrderStatusSerializer, responses={200: OrderSerializer})
    def patch(self, request, order_id):
        """
        Set the status, record a tracking entry and stamp delivery time on DELIVERED.
        """
        data = validate(UpdateOrderStatusSerializer, request.data)
        order = services.update_order_status(
            order_id,
            data['status'],
            tracking_number=data.get('tracking_number') or None,
            carrier=data.get('carrier') or None,
        )
        logger.info(f"Admin {request.user.id} set order {order.id} to {order.status}")
        return success('Order status updated successfully', {'order': OrderSerializer(order).data})


class AdminOrderAnalyticsView(APIView):
    """
    Order counts and revenue totals.
    """
    permission_classes = [IsAdmin]

    @extend_schema(responses={200: OrderAnalyticsSerializer})
    def get(self, request):
        analytics = services.order_analytics()
        return success('Order analytics retrieved successfully', {'analytics': OrderAnalyticsSerializer(analytics).data})
