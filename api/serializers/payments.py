"""
Payment serializers
"""
from decimal import Decimal

from rest_framework import serializers


class CreatePaymentIntentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.50'))
    currency = serializers.ChoiceField(choices=['usd', 'eur', 'gbp'], default='usd')
    order_id = serializers.UUIDField(required=False, allow_null=True)
    payment_method_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    use_default_payment_method = serializers.BooleanField(default=False)


class ConfirmPaymentIntentSerializer(serializers.Serializer):
    payment_method_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class SavePaymentMethodSerializer(serializers.Serializer):
    payment_method_id = serializers.CharField()
    is_default = serializers.BooleanField(default=False)


class RefundSerializer(serializers.Serializer):
    payment_intent_id = serializers.CharField()
    amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.50'), required=False, allow_null=True
    )
    reason = serializers.ChoiceField(
        choices=['duplicate', 'fraudulent', 'requested_by_customer'],
        default='requested_by_customer',
    )
