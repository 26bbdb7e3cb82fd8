"""
Client-side application state: an immutable state tree, a pure reducer and
pluggable persistence, independent of any UI toolkit.
"""
from .persistence import InMemoryStorage, JsonFileStorage, StateStorage
from .state import Action, ActionType, AppState, Cart, CartLine, Product, User, reducer
from .store import ClientStore

__all__ = [
    'Action',
    'ActionType',
    'AppState',
    'Cart',
    'CartLine',
    'ClientStore',
    'InMemoryStorage',
    'JsonFileStorage',
    'Product',
    'StateStorage',
    'User',
    'reducer',
]
