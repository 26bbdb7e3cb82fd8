"""
Payment endpoints and the Stripe webhook
"""
import logging

import stripe
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.payments import services
from apps.payments.gateway import StripeGateway
from apps.payments.webhooks import dispatch_event
from ..serializers.accounts import PaymentMethodSerializer
from ..serializers.payments import (
    ConfirmPaymentIntentSerializer,
    CreatePaymentIntentSerializer,
    RefundSerializer,
    SavePaymentMethodSerializer,
)
from .base import success, validate

logger = logging.getLogger(__name__)


class CreatePaymentIntentView(APIView):
    """
    Create a Stripe PaymentIntent for the signed-in customer.
    """

    @extend_schema(request=CreatePaymentIntentSerializer)
    def post(self, request):
        """
        Amounts arrive in dollars and are sent to Stripe in cents.
        """
        data = validate(CreatePaymentIntentSerializer, request.data)
        intent = services.create_payment_intent(
            request.user,
            data['amount'],
            currency=data['currency'],
            order_id=data.get('order_id'),
            payment_method_id=data.get('payment_method_id') or None,
            use_default_payment_method=data['use_default_payment_method'],
        )
        return success('Payment intent created successfully', intent)


class ConfirmPaymentIntentView(APIView):
    """
    Confirm an existing PaymentIntent, optionally with a new payment method.
    """

    @extend_schema(request=ConfirmPaymentIntentSerializer)
    def post(self, request, intent_id):
        data = validate(ConfirmPaymentIntentSerializer, request.data)
        intent = services.confirm_payment_intent(intent_id, data.get('payment_method_id') or None)
        return success('Payment confirmed successfully', {'payment_intent': intent})


class SavePaymentMethodView(APIView):
    """
    Attach a Stripe card to the customer and store its display details.
    """

    @extend_schema(request=SavePaymentMethodSerializer, responses={201: PaymentMethodSerializer})
    def post(self, request):
        data = validate(SavePaymentMethodSerializer, request.data)
        method = services.save_payment_method(request.user, data['payment_method_id'], data['is_default'])
        return success(
            'Payment method saved successfully',
            {'payment_method': PaymentMethodSerializer(method).data},
            status_code=status.HTTP_201_CREATED,
        )


class PaymentMethodListView(APIView):
    """
    Saved cards, default first.
    """

    @extend_schema(responses={200: PaymentMethodSerializer(many=True)})
    def get(self, request):
        methods = services.list_payment_methods(request.user)
        return success(
            'Payment methods retrieved successfully',
            {'payment_methods': PaymentMethodSerializer(methods, many=True).data},
        )


class PaymentMethodDetailView(APIView):
    """
    Remove a saved card.
    """

    def delete(self, request, method_id):
        """
        Detach the card from Stripe and delete the local record.
        """
        services.delete_payment_method(request.user, method_id)
        return success('Payment method deleted successfully')


class RefundView(APIView):
    """
    Refund the latest charge of a PaymentIntent, for administrators.
    """

    @extend_schema(request=RefundSerializer)
    def post(self, request):
        """
        Refund in full, or partially when an amount is given.
        """
        data = validate(RefundSerializer, request.data)
        refund = services.refund_payment(data['payment_intent_id'], data.get('amount'), data['reason'])
        return success('Refund processed successfully', {'refund': refund})


class StripeWebhookView(APIView):
    """
    Stripe webhook receiver.

    The raw body is verified against the Stripe-Signature header before any
    of it is trusted. Handler failures answer 500 so Stripe redelivers.
    """
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = []

    @extend_schema(request=None, responses={200: None})
    def post(self, request):
        payload = request.body
        signature = request.META.get('HTTP_STRIPE_SIGNATURE', '')

        try:
            event = StripeGateway().parse_webhook(payload, signature)
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            return Response({'success': False, 'message': 'Webhook signature verification failed'}, status=status.HTTP_400_BAD_REQUEST)
        except ValueError as e:
            logger.warning(f"Webhook payload could not be parsed: {e}")
            return Response({'success': False, 'message': 'Invalid payload'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            dispatch_event(event)
        except Exception as e:
            logger.exception(f"Webhook handler failed for event {event.get('id')}: {e}")
            return Response({'success': False, 'message': 'Webhook handler failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({'received': True}, status=status.HTTP_200_OK)
