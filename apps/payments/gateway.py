"""
Stripe gateway.

Thin wrapper around the Stripe SDK so the rest of the code base (and the
tests) deal with one object configured from settings.
"""
import logging
from typing import Any, Dict, Optional

import stripe
from django.conf import settings

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE_SECONDS = 300


def to_cents(amount) -> int:
    return int(round(float(amount) * 100))


class StripeGateway:
    """
    Stripe API access using per-request credentials from settings.
    """

    def __init__(self, api_key: str = None, webhook_secret: str = None, api_version: str = None):
        self.api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self.webhook_secret = webhook_secret if webhook_secret is not None else settings.STRIPE_WEBHOOK_SECRET
        self.api_version = api_version or settings.STRIPE_API_VERSION

    @property
    def _options(self) -> Dict[str, Any]:
        return {'api_key': self.api_key, 'stripe_version': self.api_version}

    def create_customer(self, email: str, name: str, metadata: Dict[str, str]):
        return stripe.Customer.create(email=email, name=name, metadata=metadata, **self._options)

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        customer_id: str,
        metadata: Dict[str, str],
        payment_method: Optional[str] = None,
    ):
        params = {
            'amount': amount_cents,
            'currency': currency,
            'customer': customer_id,
            'metadata': metadata,
            'automatic_payment_methods': {'enabled': True},
        }
        if payment_method:
            params['payment_method'] = payment_method
            params['confirm'] = True
            params['automatic_payment_methods'] = {'enabled': True, 'allow_redirects': 'never'}
        return stripe.PaymentIntent.create(**params, **self._options)

    def confirm_payment_intent(self, intent_id: str, payment_method: Optional[str] = None):
        params = {'payment_method': payment_method} if payment_method else {}
        return stripe.PaymentIntent.confirm(intent_id, **params, **self._options)

    def retrieve_payment_intent(self, intent_id: str):
        return stripe.PaymentIntent.retrieve(intent_id, **self._options)

    def retrieve_payment_method(self, payment_method_id: str):
        return stripe.PaymentMethod.retrieve(payment_method_id, **self._options)

    def detach_payment_method(self, payment_method_id: str):
        return stripe.PaymentMethod.detach(payment_method_id, **self._options)

    def create_refund(self, charge_id: str, reason: str, amount_cents: Optional[int] = None):
        params = {'charge': charge_id, 'reason': reason}
        if amount_cents is not None:
            params['amount'] = amount_cents
        return stripe.Refund.create(**params, **self._options)

    def parse_webhook(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """
        Verify the Stripe-Signature header and return the decoded event.

        Raises stripe.SignatureVerificationError for a bad or missing
        signature and ValueError for a payload that is not JSON.
        """
        event = stripe.Webhook.construct_event(
            payload,
            signature or '',
            self.webhook_secret,
            tolerance=WEBHOOK_TOLERANCE_SECONDS,
            api_key=self.api_key,
        )
        return event.to_dict()
