"""
Order serializers
"""
from rest_framework import serializers

from apps.orders.models import Order, OrderItem, OrderTracking
from .accounts import AddressSerializer, PaymentMethodSerializer, UserSummarySerializer
from .catalog import ProductSummarySerializer
from .common import page_query


class OrderLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    selected_variants = serializers.DictField(required=False, allow_null=True)


class CreateOrderSerializer(serializers.Serializer):
    """
    Checkout request. Prices are never accepted from the client.
    """
    items = OrderLineSerializer(many=True, allow_empty=False)
    shipping_address_id = serializers.UUIDField()
    billing_address_id = serializers.UUIDField()
    payment_method_id = serializers.UUIDField()


class OrderItemSerializer(serializers.ModelSerializer):
    product = ProductSummarySerializer(read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'product', 'quantity', 'price', 'selected_variants']
        read_only_fields = fields


class OrderTrackingSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderTracking
        fields = ['id', 'status', 'description', 'location', 'created_at']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """
    Fully joined order: items with product images, addresses, payment method and tracking.
    """
    items = OrderItemSerializer(many=True, read_only=True)
    tracking = OrderTrackingSerializer(many=True, read_only=True)
    shipping_address = AddressSerializer(read_only=True)
    billing_address = AddressSerializer(read_only=True)
    payment_method = PaymentMethodSerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'user_id', 'status', 'subtotal', 'tax', 'shipping', 'total',
            'shipping_address', 'billing_address', 'payment_method', 'stripe_payment_intent_id',
            'tracking_number', 'carrier', 'estimated_delivery', 'delivered_at',
            'items', 'tracking', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class AdminOrderSerializer(OrderSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['user']
        read_only_fields = fields


class RecentOrderSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = Order
        fields = ['id', 'order_number', 'status', 'total', 'user', 'created_at']
        read_only_fields = fields


class OrderQuerySerializer(page_query(max_limit=50, default_limit=10)):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, required=False)


class AdminOrderQuerySerializer(page_query(max_limit=100, default_limit=20)):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, required=False)
    user_id = serializers.UUIDField(required=False)


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
    tracking_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    carrier = serializers.CharField(max_length=100, required=False, allow_blank=True)


class OrderAnalyticsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    total_revenue = serializers.FloatField()
    orders_today = serializers.IntegerField()
    revenue_today = serializers.FloatField()
    orders_by_status = serializers.DictField(child=serializers.IntegerField())
    recent_orders = RecentOrderSerializer(many=True)
