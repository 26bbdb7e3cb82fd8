"""
Order workflow: placement, customer cancellation, admin status updates and analytics.

Every multi-row write runs inside a single database transaction. Stock is
decremented with a conditional UPDATE (stock_quantity >= quantity) so two
concurrent checkouts cannot both take the last unit.
"""
import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import Count, F, Prefetch, Sum
from django.utils import timezone

from apps.accounts.models import Address, PaymentMethod
from apps.cart.models import CartItem
from apps.cart.pricing import calculate_totals
from apps.catalog.models import Product, ProductImage
from apps.core.exceptions import NotFoundException, ValidationException
from .models import Order, OrderItem, OrderTracking

logger = logging.getLogger(__name__)

ESTIMATED_DELIVERY_DAYS = 7

STATUS_MESSAGES = {
    Order.PENDING: 'Order is pending confirmation',
    Order.CONFIRMED: 'Order has been confirmed',
    Order.PROCESSING: 'Order is being processed',
    Order.SHIPPED: 'Order has been shipped',
    Order.DELIVERED: 'Order has been delivered',
    Order.CANCELLED: 'Order has been cancelled',
    Order.RETURNED: 'Order has been returned',
}


@dataclass
class OrderLine:
    product_id: object
    quantity: int
    selected_variants: Optional[dict] = None

    def __post_init__(self):
        if not isinstance(self.product_id, uuid.UUID):
            self.product_id = uuid.UUID(str(self.product_id))


@dataclass
class OrderAnalytics:
    total_orders: int
    total_revenue: float
    orders_today: int
    revenue_today: float
    orders_by_status: Dict[str, int] = field(default_factory=dict)
    recent_orders: List[Order] = field(default_factory=list)


def generate_order_number() -> str:
    return f"AMZ{int(time.time() * 1000)}{random.randint(0, 999):03d}"


def order_detail_queryset():
    return Order.objects.select_related(
        'user', 'shipping_address', 'billing_address', 'payment_method'
    ).prefetch_related(
        Prefetch('items', queryset=OrderItem.objects.select_related('product', 'product__seller')),
        Prefetch('items__product__images', queryset=ProductImage.objects.order_by('sort_order')),
        Prefetch('tracking', queryset=OrderTracking.objects.order_by('created_at')),
    )


def _insufficient_stock(product: Product) -> ValidationException:
    return ValidationException.for_field('items', f"Insufficient stock for product: {product.title}")


def place_order(
    user,
    lines: Iterable[OrderLine],
    shipping_address_id,
    billing_address_id,
    payment_method_id,
) -> Order:
    """
    Validate references and stock, then create the order, its items and the
    first tracking event, decrement stock and empty the cart atomically.

    Prices come from the current product rows, never from the client.
    """
    lines = list(lines)

    shipping_address = Address.objects.filter(id=shipping_address_id, user=user).first()
    billing_address = Address.objects.filter(id=billing_address_id, user=user).first()
    if shipping_address is None or billing_address is None:
        raise NotFoundException('Address not found')

    payment_method = PaymentMethod.objects.filter(id=payment_method_id, user=user).first()
    if payment_method is None:
        raise NotFoundException('Payment method not found')

    product_ids = {line.product_id for line in lines}
    products = Product.objects.in_bulk(product_ids)
    if len(products) != len(product_ids):
        raise NotFoundException('One or more products not found')

    for line in lines:
        product = products[line.product_id]
        if not product.in_stock or product.stock_quantity < line.quantity:
            raise _insufficient_stock(product)

    totals = calculate_totals((products[line.product_id].price, line.quantity) for line in lines)

    with transaction.atomic():
        order = Order.objects.create(
            user=user,
            order_number=generate_order_number(),
            subtotal=totals.subtotal,
            tax=totals.tax,
            shipping=totals.shipping,
            total=totals.total,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=payment_method,
            estimated_delivery=timezone.now() + timedelta(days=ESTIMATED_DELIVERY_DAYS),
        )
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product_id=line.product_id,
                quantity=line.quantity,
                price=products[line.product_id].price,
                selected_variants=line.selected_variants,
            )
            for line in lines
        ])
        OrderTracking.objects.create(
            order=order,
            status='Order Placed',
            description='Your order has been successfully placed',
        )

        for line in lines:
            updated = Product.objects.filter(
                id=line.product_id,
                stock_quantity__gte=line.quantity,
            ).update(stock_quantity=F('stock_quantity') - line.quantity)
            if not updated:
                # Another checkout took the stock after validation; roll everything back
                raise _insufficient_stock(products[line.product_id])

        CartItem.objects.filter(user=user).delete()

    logger.info(f"Order {order.order_number} placed by user {user.id} - total {totals.total}")
    return order_detail_queryset().get(id=order.id)


def restore_stock(order: Order):
    for item in order.items.all():
        Product.objects.filter(id=item.product_id).update(
            stock_quantity=F('stock_quantity') + item.quantity
        )


def cancel_and_restock(order: Order, from_statuses: Iterable[str], tracking_status: str, description: str) -> bool:
    """
    Move an order to CANCELLED and put its quantities back on the shelf.

    The status flip is a conditional update, so a concurrent cancellation or
    payment failure restores stock at most once. Returns False when the order
    was no longer in one of `from_statuses`.
    """
    with transaction.atomic():
        flipped = Order.objects.filter(id=order.id, status__in=list(from_statuses)).update(
            status=Order.CANCELLED,
            updated_at=timezone.now(),
        )
        if not flipped:
            return False

        restore_stock(order)
        OrderTracking.objects.create(order=order, status=tracking_status, description=description)
    return True


def cancel_order(user, order_id) -> Order:
    """
    Customer cancellation, allowed only from PENDING or CONFIRMED.
    """
    order = Order.objects.filter(id=order_id, user=user).prefetch_related('items').first()
    if order is None:
        raise NotFoundException('Order not found')

    not_cancellable = ValidationException.for_field('status', 'Order cannot be cancelled in current status')
    if order.status not in Order.CANCELLABLE_STATUSES:
        raise not_cancellable

    cancelled = cancel_and_restock(
        order,
        from_statuses=Order.CANCELLABLE_STATUSES,
        tracking_status='Cancelled',
        description='Order cancelled by customer',
    )
    if not cancelled:
        raise not_cancellable

    logger.info(f"Order {order.order_number} cancelled by user {user.id}")
    return order_detail_queryset().get(id=order.id)


def update_order_status(order_id, status: str, tracking_number: str = None, carrier: str = None) -> Order:
    """
    Admin status change. Any target status is accepted from any current status.
    """
    order = Order.objects.filter(id=order_id).first()
    if order is None:
        raise NotFoundException('Order not found')

    previous = order.status
    order.status = status
    update_fields = ['status', 'updated_at']
    if tracking_number:
        order.tracking_number = tracking_number
        update_fields.append('tracking_number')
    if carrier:
        order.carrier = carrier
        update_fields.append('carrier')
    if status == Order.DELIVERED:
        order.delivered_at = timezone.now()
        update_fields.append('delivered_at')

    with transaction.atomic():
        order.save(update_fields=update_fields)
        OrderTracking.objects.create(order=order, status=status, description=STATUS_MESSAGES[status])

    logger.info(f"Order {order.order_number} status {previous} -> {status}")
    return order_detail_queryset().get(id=order.id)


def order_analytics() -> OrderAnalytics:
    start_of_day = timezone.now().replace(hour=0, minute=0, second=0, microsecond=0)
    today = Order.objects.filter(created_at__gte=start_of_day)

    by_status = Order.objects.values('status').annotate(count=Count('id')).order_by()

    return OrderAnalytics(
        total_orders=Order.objects.count(),
        total_revenue=float(Order.objects.aggregate(total=Sum('total'))['total'] or 0),
        orders_today=today.count(),
        revenue_today=float(today.aggregate(total=Sum('total'))['total'] or 0),
        orders_by_status={row['status']: row['count'] for row in by_status},
        recent_orders=list(Order.objects.select_related('user').order_by('-created_at')[:10]),
    )
