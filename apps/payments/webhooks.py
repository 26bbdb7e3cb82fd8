"""
Stripe webhook reconciliation.

Stripe retries deliveries that do not get a 2xx, so handlers must be safe
to run more than once for the same event.
"""
import logging
import uuid
from typing import Any, Callable, Dict

from django.db import transaction

from apps.orders.models import Order, OrderTracking
from apps.orders.services import cancel_and_restock

logger = logging.getLogger(__name__)


def _order_for(intent: Dict[str, Any]):
    order_id = (intent.get('metadata') or {}).get('order_id')
    if not order_id:
        return None
    try:
        order_uuid = uuid.UUID(str(order_id))
    except ValueError:
        logger.warning(f"Webhook carries malformed order id {order_id!r} (intent {intent.get('id')})")
        return None
    order = Order.objects.prefetch_related('items').filter(id=order_uuid).first()
    if order is None:
        logger.warning(f"Webhook references unknown order {order_id} (intent {intent.get('id')})")
    return order


def handle_payment_succeeded(intent: Dict[str, Any]):
    order = _order_for(intent)
    if order is None:
        return

    with transaction.atomic():
        order.status = Order.CONFIRMED
        order.stripe_payment_intent_id = intent.get('id')
        order.save(update_fields=['status', 'stripe_payment_intent_id', 'updated_at'])
        OrderTracking.objects.create(
            order=order,
            status='Payment Confirmed',
            description='Payment has been successfully processed',
        )
    logger.info(f"Order payment confirmed: order {order.id}, intent {intent.get('id')}")


def handle_payment_failed(intent: Dict[str, Any]):
    order = _order_for(intent)
    if order is None:
        return

    # Orders that are already cancelled keep their restored stock as is
    cancellable = [status for status, _ in Order.STATUS_CHOICES if status != Order.CANCELLED]
    cancelled = cancel_and_restock(
        order,
        from_statuses=cancellable,
        tracking_status='Payment Failed',
        description='Payment could not be processed. Order has been cancelled.',
    )
    if cancelled:
        logger.warning(f"Order payment failed: order {order.id}, intent {intent.get('id')}")
    else:
        logger.info(f"Payment failure for already cancelled order {order.id} ignored")


def handle_charge_dispute(dispute: Dict[str, Any]):
    logger.warning(
        f"Charge dispute created: dispute {dispute.get('id')}, charge {dispute.get('charge')}, "
        f"amount {dispute.get('amount')}, reason {dispute.get('reason')}"
    )


EVENT_HANDLERS: Dict[str, Callable[[Dict[str, Any]], None]] = {
    'payment_intent.succeeded': handle_payment_succeeded,
    'payment_intent.payment_failed': handle_payment_failed,
    'charge.dispute.created': handle_charge_dispute,
}


def dispatch_event(event: Dict[str, Any]) -> bool:
    """
    Route a verified event to its handler. Returns False for event types we ignore.
    """
    event_type = event.get('type')
    logger.info(f"Received Stripe webhook: type {event_type}, id {event.get('id')}")

    handler = EVENT_HANDLERS.get(event_type)
    if handler is None:
        logger.info(f"Unhandled webhook event type: {event_type}")
        return False

    handler(event.get('data', {}).get('object', {}))
    return True
