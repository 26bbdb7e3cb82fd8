"""
Cart serializers
"""
from rest_framework import serializers

from apps.cart.models import CartItem
from .catalog import ProductSummarySerializer


class CartItemSerializer(serializers.ModelSerializer):
    product = ProductSummarySerializer(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = ['id', 'product', 'quantity', 'selected_variants', 'line_total', 'created_at']
        read_only_fields = fields


class AddToCartSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    selected_variants = serializers.DictField(required=False, allow_null=True)


class UpdateCartItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)


def cart_payload(summary) -> dict:
    return {
        'items': CartItemSerializer(summary.items, many=True).data,
        'totals': summary.totals.as_dict(),
        'item_count': summary.item_count,
    }
