"""
Account serializers: registration, login, tokens and profile
"""
from rest_framework import serializers

from apps.accounts.models import Address, PaymentMethod, User


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, max_length=128, write_only=True)
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=20, required=False, allow_null=True, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class RefreshTokenSerializer(serializers.Serializer):
    refresh_token = serializers.CharField()


class LogoutSerializer(serializers.Serializer):
    refresh_token = serializers.CharField(required=False, allow_blank=True)


class UserSerializer(serializers.ModelSerializer):
    """
    Public profile of the authenticated user.
    """
    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'phone', 'avatar',
            'role', 'is_email_verified', 'created_at',
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name', 'email']
        read_only_fields = fields


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = [
            'id', 'address_type', 'first_name', 'last_name', 'company', 'street',
            'apartment', 'city', 'state', 'zip_code', 'country', 'phone', 'is_default',
        ]
        read_only_fields = fields


class PaymentMethodSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentMethod
        fields = [
            'id', 'method_type', 'last4', 'brand', 'expiry_month', 'expiry_year',
            'is_default', 'stripe_payment_method_id', 'created_at',
        ]
        read_only_fields = fields


def auth_payload(user, tokens) -> dict:
    return {
        'user': UserSerializer(user).data,
        'tokens': {
            'access_token': tokens.access_token,
            'refresh_token': tokens.refresh_token,
        },
    }
