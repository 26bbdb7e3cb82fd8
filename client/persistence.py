"""
Persistence adapters for client state.

State is stored as JSON-compatible values, one key per slice.
"""
import json
import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .state import EMPTY_CART, Cart, CartLine, Product, User

logger = logging.getLogger(__name__)

USER_KEY = 'storefront-user'
CART_KEY = 'storefront-cart'
RECENTLY_VIEWED_KEY = 'storefront-recently-viewed'
SEARCH_HISTORY_KEY = 'storefront-search-history'


class StateStorage(Protocol):
    def load(self, key: str) -> Optional[Any]:
        ...

    def save(self, key: str, value: Any) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryStorage:
    def __init__(self, initial: Dict[str, Any] = None):
        self.data: Dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str) -> Optional[Any]:
        raw = self.data.get(key)
        return None if raw is None else json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self.data[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage:
    """
    One `<key>.json` file per slice under `directory`.
    """

    def __init__(self, directory):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding unreadable state file {path}: {e}")
            return None

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp = path.with_suffix('.json.tmp')
        tmp.write_text(json.dumps(value), encoding='utf-8')
        tmp.replace(path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def product_to_dict(product: Product) -> Dict[str, Any]:
    return {'id': product.id, 'title': product.title, 'price': str(product.price), 'image': product.image}


def product_from_dict(data: Dict[str, Any]) -> Product:
    return Product(id=data['id'], title=data['title'], price=Decimal(str(data['price'])), image=data.get('image'))


def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        'id': user.id,
        'email': user.email,
        'first_name': user.first_name,
        'last_name': user.last_name,
        'role': user.role,
        'wishlist': list(user.wishlist),
    }


def user_from_dict(data: Dict[str, Any]) -> User:
    return User(
        id=data['id'],
        email=data['email'],
        first_name=data['first_name'],
        last_name=data['last_name'],
        role=data.get('role', 'CUSTOMER'),
        wishlist=tuple(data.get('wishlist') or ()),
    )


def cart_to_dict(cart: Cart) -> Dict[str, Any]:
    return {
        'items': [
            {
                'product': product_to_dict(line.product),
                'quantity': line.quantity,
                'selected_variants': line.selected_variants,
                'added_at': line.added_at.isoformat(),
            }
            for line in cart.items
        ],
        'subtotal': str(cart.subtotal),
        'tax': str(cart.tax),
        'shipping': str(cart.shipping),
        'total': str(cart.total),
    }


def cart_from_dict(data: Dict[str, Any]) -> Cart:
    """
    Rebuild a cart from its stored lines. Stored totals are recomputed, except that
    a cleared cart (no lines, zero total) comes back as EMPTY_CART.
    """
    lines = [
        CartLine(
            product=product_from_dict(item['product']),
            quantity=item['quantity'],
            selected_variants=item.get('selected_variants'),
            added_at=datetime.fromisoformat(item['added_at']),
        )
        for item in data.get('items', [])
        if item.get('quantity', 0) > 0
    ]
    if not lines and Decimal(str(data.get('total', '0'))) == 0:
        return EMPTY_CART
    return Cart.from_items(lines)
