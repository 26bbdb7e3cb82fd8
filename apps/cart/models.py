"""
Cart Models
Tables: CartItems
"""
from django.db import models

from apps.core.models import BaseModel


class CartItem(BaseModel):
    """
    One product line in a user's cart. Rows are merged per (user, product)
    and removed when the quantity drops to zero or the order is placed.
    """
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='cart_items')
    product = models.ForeignKey('catalog.Product', on_delete=models.CASCADE, related_name='cart_items')
    quantity = models.PositiveIntegerField(default=1)
    selected_variants = models.JSONField(blank=True, null=True)

    class Meta:
        db_table = 'cart_items'
        verbose_name = 'Cart Item'
        verbose_name_plural = 'Cart Items'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'product'], name='unique_cart_item_per_product'),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.product_id}"

    @property
    def line_total(self):
        return self.product.price * self.quantity
