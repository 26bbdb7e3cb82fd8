"""
Orders Models - Checkout and Fulfilment
Tables: Orders, OrderItems, OrderTracking
"""
from django.db import models

from apps.core.models import BaseModel


class Order(BaseModel):
    """
    Placed order. Totals and line prices are frozen at placement time;
    addresses and payment method are referenced, not copied.
    """
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    PROCESSING = 'PROCESSING'
    SHIPPED = 'SHIPPED'
    DELIVERED = 'DELIVERED'
    CANCELLED = 'CANCELLED'
    RETURNED = 'RETURNED'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (CONFIRMED, 'Confirmed'),
        (PROCESSING, 'Processing'),
        (SHIPPED, 'Shipped'),
        (DELIVERED, 'Delivered'),
        (CANCELLED, 'Cancelled'),
        (RETURNED, 'Returned'),
    ]
    CANCELLABLE_STATUSES = (PENDING, CONFIRMED)

    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='orders')
    # Not unique: AMZ + epoch millis + 3 random digits
    order_number = models.CharField(max_length=32, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    tax = models.DecimalField(max_digits=12, decimal_places=2)
    shipping = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    shipping_address = models.ForeignKey(
        'accounts.Address', on_delete=models.PROTECT, related_name='shipping_orders'
    )
    billing_address = models.ForeignKey(
        'accounts.Address', on_delete=models.PROTECT, related_name='billing_orders'
    )
    payment_method = models.ForeignKey(
        'accounts.PaymentMethod',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
    )
    stripe_payment_intent_id = models.CharField(max_length=255, blank=True, null=True)

    tracking_number = models.CharField(max_length=100, blank=True, null=True)
    carrier = models.CharField(max_length=100, blank=True, null=True)
    estimated_delivery = models.DateTimeField(blank=True, null=True)
    delivered_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'orders_orders'
        verbose_name = 'Order'
        verbose_name_plural = 'Orders'
        ordering = ['-created_at']

    def __str__(self):
        return f"Order {self.order_number} - {self.status}"


class OrderItem(BaseModel):
    """
    Snapshot of a purchased line: unit price and variants as they were at checkout.
    """
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('catalog.Product', on_delete=models.PROTECT, related_name='order_items')
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    selected_variants = models.JSONField(blank=True, null=True)

    class Meta:
        db_table = 'orders_order_items'
        verbose_name = 'Order Item'
        verbose_name_plural = 'Order Items'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.quantity} x {self.product_id} @ {self.price}"


class OrderTracking(BaseModel):
    """
    Append-only log of human readable order events.
    """
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='tracking')
    status = models.CharField(max_length=50)
    description = models.TextField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)

    class Meta:
        db_table = 'orders_order_tracking'
        verbose_name = 'Order Tracking Event'
        verbose_name_plural = 'Order Tracking Events'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.order_id} - {self.status}"
