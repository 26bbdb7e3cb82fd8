"""
Payment workflows: PaymentIntents, saved cards and refunds
"""
import logging
from typing import Dict, Optional

import stripe
from django.db import transaction

from apps.accounts.models import PaymentMethod
from apps.core.exceptions import NotFoundException, PaymentGatewayException, ValidationException
from .gateway import StripeGateway, to_cents

logger = logging.getLogger(__name__)


def create_payment_intent(
    user,
    amount,
    currency: str = 'usd',
    order_id: Optional[str] = None,
    payment_method_id: Optional[str] = None,
    use_default_payment_method: bool = False,
    gateway: StripeGateway = None,
) -> Dict:
    gateway = gateway or StripeGateway()

    # A Stripe customer per intent; customer ids are not persisted yet
    customer = gateway.create_customer(
        email=user.email,
        name=user.full_name,
        metadata={'user_id': str(user.id)},
    )

    metadata = {'user_id': str(user.id)}
    if order_id:
        metadata['order_id'] = str(order_id)

    stripe_payment_method = payment_method_id
    if not stripe_payment_method and use_default_payment_method:
        default = PaymentMethod.objects.filter(user=user, is_default=True).first()
        if default is not None and default.stripe_payment_method_id:
            stripe_payment_method = default.stripe_payment_method_id

    try:
        intent = gateway.create_payment_intent(
            amount_cents=to_cents(amount),
            currency=currency,
            customer_id=customer['id'],
            metadata=metadata,
            payment_method=stripe_payment_method,
        )
    except stripe.StripeError as e:
        logger.error(f"Payment intent creation failed for user {user.id}: {e}")
        raise PaymentGatewayException('Payment intent creation failed', 'payment', e.user_message or str(e))

    return {
        'client_secret': intent['client_secret'],
        'payment_intent_id': intent['id'],
        'customer_id': customer['id'],
        'amount': intent['amount'],
        'currency': intent['currency'],
    }


def confirm_payment_intent(intent_id: str, payment_method_id: Optional[str] = None, gateway: StripeGateway = None) -> Dict:
    gateway = gateway or StripeGateway()
    try:
        intent = gateway.confirm_payment_intent(intent_id, payment_method_id)
    except stripe.StripeError as e:
        logger.error(f"Payment confirmation failed for {intent_id}: {e}")
        raise PaymentGatewayException(
            'Payment confirmation failed', 'payment', e.user_message or 'Payment could not be processed'
        )

    return {
        'id': intent['id'],
        'status': intent['status'],
        'amount': intent['amount'],
        'currency': intent['currency'],
    }


def save_payment_method(user, payment_method_id: str, is_default: bool = False, gateway: StripeGateway = None) -> PaymentMethod:
    """
    Store a Stripe card PaymentMethod on the user's account.
    """
    gateway = gateway or StripeGateway()
    try:
        stripe_method = gateway.retrieve_payment_method(payment_method_id)
    except stripe.InvalidRequestError as e:
        logger.error(f"Failed to retrieve payment method {payment_method_id}: {e}")
        raise ValidationException.for_field('payment_method_id', 'Invalid payment method ID')

    card = stripe_method.get('card')
    if not card:
        raise ValidationException.for_field('payment_method_id', 'Only card payment methods are supported')

    with transaction.atomic():
        if is_default:
            PaymentMethod.objects.filter(user=user, is_default=True).update(is_default=False)

        method = PaymentMethod.objects.create(
            user=user,
            method_type='CREDIT' if card['funding'] == 'credit' else 'DEBIT',
            last4=card['last4'],
            brand=card['brand'].upper(),
            expiry_month=card['exp_month'],
            expiry_year=card['exp_year'],
            is_default=is_default,
            stripe_payment_method_id=payment_method_id,
        )
    return method


def list_payment_methods(user):
    return PaymentMethod.objects.filter(user=user).order_by('-is_default', '-created_at')


def delete_payment_method(user, method_id, gateway: StripeGateway = None):
    method = PaymentMethod.objects.filter(id=method_id, user=user).first()
    if method is None:
        raise NotFoundException('Payment method not found')

    if method.stripe_payment_method_id:
        gateway = gateway or StripeGateway()
        try:
            gateway.detach_payment_method(method.stripe_payment_method_id)
        except stripe.StripeError as e:
            # The local row still goes; Stripe keeps an orphaned method
            logger.warning(f"Failed to detach payment method {method.stripe_payment_method_id} from Stripe: {e}")

    method.delete()


def refund_payment(payment_intent_id: str, amount=None, reason: str = 'requested_by_customer', gateway: StripeGateway = None) -> Dict:
    """
    Refund the latest charge of a PaymentIntent, fully or partially.
    """
    gateway = gateway or StripeGateway()
    try:
        intent = gateway.retrieve_payment_intent(payment_intent_id)
        charge_id = intent.get('latest_charge')
        if not charge_id:
            raise ValidationException.for_field('payment_intent_id', 'No charges found for this payment intent')

        refund = gateway.create_refund(
            charge_id=charge_id if isinstance(charge_id, str) else charge_id['id'],
            reason=reason,
            amount_cents=to_cents(amount) if amount else None,
        )
    except stripe.StripeError as e:
        logger.error(f"Refund failed for {payment_intent_id}: {e}")
        raise PaymentGatewayException('Refund failed', 'refund', e.user_message or 'Refund could not be processed')

    logger.info(f"Refund {refund['id']} created for {payment_intent_id}")
    return {
        'id': refund['id'],
        'amount': refund['amount'],
        'currency': refund['currency'],
        'status': refund['status'],
        'reason': refund['reason'],
    }
