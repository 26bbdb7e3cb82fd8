"""
State tree and reducer.

Every value is a frozen dataclass and the reducer never mutates its input,
so a slice that did not change is the very same object after a dispatch.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from apps.cart.pricing import ZERO, calculate_totals

HISTORY_LIMIT = 10


@dataclass(frozen=True)
class Product:
    id: str
    title: str
    price: Decimal
    image: Optional[str] = None


@dataclass(frozen=True)
class User:
    id: str
    email: str
    first_name: str
    last_name: str
    role: str = 'CUSTOMER'
    wishlist: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int
    selected_variants: Optional[Dict[str, str]] = None
    added_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def product_id(self) -> str:
        return self.product.id


@dataclass(frozen=True)
class Cart:
    items: Tuple[CartLine, ...] = ()
    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    shipping: Decimal = ZERO
    total: Decimal = ZERO

    @classmethod
    def from_items(cls, items) -> 'Cart':
        """Recompute totals from scratch. Only CLEAR_CART yields the all-zero EMPTY_CART."""
        items = tuple(items)
        totals = calculate_totals((line.product.price, line.quantity) for line in items)
        return cls(items=items, **totals.as_dict())

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)


EMPTY_CART = Cart()


@dataclass(frozen=True)
class AppState:
    user: Optional[User] = None
    cart: Cart = EMPTY_CART
    recently_viewed: Tuple[Product, ...] = ()
    search_history: Tuple[str, ...] = ()
    is_loading: bool = False
    error: Optional[str] = None


class ActionType(str, Enum):
    SET_USER = 'SET_USER'
    SET_LOADING = 'SET_LOADING'
    SET_ERROR = 'SET_ERROR'
    ADD_TO_CART = 'ADD_TO_CART'
    REMOVE_FROM_CART = 'REMOVE_FROM_CART'
    UPDATE_CART_QUANTITY = 'UPDATE_CART_QUANTITY'
    CLEAR_CART = 'CLEAR_CART'
    ADD_TO_RECENTLY_VIEWED = 'ADD_TO_RECENTLY_VIEWED'
    ADD_TO_SEARCH_HISTORY = 'ADD_TO_SEARCH_HISTORY'
    TOGGLE_WISHLIST = 'TOGGLE_WISHLIST'


@dataclass(frozen=True)
class Action:
    """
    Payloads per type:
      SET_USER: User | None            SET_LOADING: bool       SET_ERROR: str | None
      ADD_TO_CART: {'product', 'quantity', 'variants'?}
      REMOVE_FROM_CART: product id     UPDATE_CART_QUANTITY: {'product_id', 'quantity'}
      ADD_TO_RECENTLY_VIEWED: Product  ADD_TO_SEARCH_HISTORY: str
      TOGGLE_WISHLIST: product id      CLEAR_CART: None
    """
    type: ActionType
    payload: Any = None


def _push_front(history: tuple, value, key=lambda item: item) -> tuple:
    kept = tuple(item for item in history if key(item) != key(value))
    return ((value,) + kept)[:HISTORY_LIMIT]


def _add_to_cart(cart: Cart, payload: Dict[str, Any]) -> Cart:
    product = payload['product']
    quantity = payload.get('quantity', 1)

    if any(line.product_id == product.id for line in cart.items):
        items = tuple(
            replace(line, quantity=line.quantity + quantity) if line.product_id == product.id else line
            for line in cart.items
        )
    else:
        items = cart.items + (CartLine(product=product, quantity=quantity, selected_variants=payload.get('variants')),)
    return Cart.from_items(items)


def _update_quantity(cart: Cart, product_id: str, quantity: int) -> Cart:
    items = tuple(
        replace(line, quantity=max(0, quantity)) if line.product_id == product_id else line
        for line in cart.items
    )
    return Cart.from_items(line for line in items if line.quantity > 0)


def _toggle_wishlist(user: User, product_id: str) -> User:
    if product_id in user.wishlist:
        wishlist = tuple(item for item in user.wishlist if item != product_id)
    else:
        wishlist = user.wishlist + (product_id,)
    return replace(user, wishlist=wishlist)


def reducer(state: AppState, action: Action) -> AppState:
    """
    Pure transition function. Unknown action types return the state unchanged.
    """
    kind, payload = action.type, action.payload

    if kind == ActionType.SET_USER:
        return replace(state, user=payload)
    if kind == ActionType.SET_LOADING:
        return replace(state, is_loading=bool(payload))
    if kind == ActionType.SET_ERROR:
        return replace(state, error=payload)
    if kind == ActionType.ADD_TO_CART:
        return replace(state, cart=_add_to_cart(state.cart, payload))
    if kind == ActionType.REMOVE_FROM_CART:
        return replace(state, cart=Cart.from_items(line for line in state.cart.items if line.product_id != payload))
    if kind == ActionType.UPDATE_CART_QUANTITY:
        return replace(state, cart=_update_quantity(state.cart, payload['product_id'], payload['quantity']))
    if kind == ActionType.CLEAR_CART:
        return replace(state, cart=EMPTY_CART)
    if kind == ActionType.ADD_TO_RECENTLY_VIEWED:
        return replace(state, recently_viewed=_push_front(state.recently_viewed, payload, key=lambda p: p.id))
    if kind == ActionType.ADD_TO_SEARCH_HISTORY:
        return replace(state, search_history=_push_front(state.search_history, payload))
    if kind == ActionType.TOGGLE_WISHLIST:
        if state.user is None:
            return state
        return replace(state, user=_toggle_wishlist(state.user, payload))
    return state
