"""
Cart workflows. Totals are recomputed from the current product prices on every read.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from django.db.models import Sum

from apps.catalog.models import Product
from apps.core.exceptions import NotFoundException, ValidationException
from .models import CartItem
from .pricing import Totals, calculate_totals

logger = logging.getLogger(__name__)


@dataclass
class CartSummary:
    items: List[CartItem]
    totals: Totals
    item_count: int


def _cart_queryset(user):
    return (
        CartItem.objects.filter(user=user)
        .select_related('product', 'product__seller')
        .prefetch_related('product__images')
    )


def get_cart(user) -> CartSummary:
    items = list(_cart_queryset(user))
    totals = calculate_totals((item.product.price, item.quantity) for item in items)
    return CartSummary(
        items=items,
        totals=totals,
        item_count=sum(item.quantity for item in items),
    )


def add_item(user, product_id, quantity: int, selected_variants: Optional[dict] = None) -> CartItem:
    """
    Add a product to the cart, merging onto an existing line for the same product.
    """
    product = Product.objects.filter(id=product_id).first()
    if product is None:
        raise NotFoundException('Product not found')

    if not product.in_stock or product.stock_quantity < quantity:
        raise ValidationException.for_field('quantity', 'Insufficient stock available')

    item = CartItem.objects.filter(user=user, product=product).first()
    if item is not None:
        item.quantity += quantity
        item.selected_variants = selected_variants or item.selected_variants
        item.save(update_fields=['quantity', 'selected_variants', 'updated_at'])
    else:
        item = CartItem.objects.create(
            user=user,
            product=product,
            quantity=quantity,
            selected_variants=selected_variants,
        )

    logger.info(f"Cart add - user {user.id}, product {product.id}, qty now {item.quantity}")
    return _cart_queryset(user).get(id=item.id)


def update_quantity(user, item_id, quantity: int) -> Optional[CartItem]:
    """
    Set a line's quantity. Zero removes the line and returns None.
    """
    item = CartItem.objects.select_related('product').filter(id=item_id, user=user).first()
    if item is None:
        raise NotFoundException('Cart item not found')

    if quantity == 0:
        item.delete()
        return None

    if item.product.stock_quantity < quantity:
        raise ValidationException.for_field('quantity', 'Insufficient stock available')

    item.quantity = quantity
    item.save(update_fields=['quantity', 'updated_at'])
    return _cart_queryset(user).get(id=item.id)


def remove_item(user, item_id):
    deleted, _ = CartItem.objects.filter(id=item_id, user=user).delete()
    if not deleted:
        raise NotFoundException('Cart item not found')


def clear_cart(user) -> int:
    deleted, _ = CartItem.objects.filter(user=user).delete()
    return deleted


def item_count(user) -> int:
    return CartItem.objects.filter(user=user).aggregate(count=Sum('quantity'))['count'] or 0
