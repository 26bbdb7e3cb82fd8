"""
ClientStore: holds the current AppState, applies actions through the reducer
and writes changed slices to a StateStorage.
"""
from typing import Callable, List, Optional

from .persistence import (
    CART_KEY,
    RECENTLY_VIEWED_KEY,
    SEARCH_HISTORY_KEY,
    USER_KEY,
    StateStorage,
    cart_from_dict,
    cart_to_dict,
    product_from_dict,
    product_to_dict,
    user_from_dict,
    user_to_dict,
)
from .state import EMPTY_CART, HISTORY_LIMIT, Action, ActionType, AppState, Product, User, reducer

Listener = Callable[[AppState], None]


class ClientStore:
    """
    Loads persisted slices on construction and saves every slice that a
    dispatch changed. Last write wins.
    """

    def __init__(self, storage: StateStorage):
        self.storage = storage
        self._listeners: List[Listener] = []
        self.state = self._load()

    def _load(self) -> AppState:
        user = self.storage.load(USER_KEY)
        cart = self.storage.load(CART_KEY)
        recently_viewed = self.storage.load(RECENTLY_VIEWED_KEY) or []
        search_history = self.storage.load(SEARCH_HISTORY_KEY) or []

        return AppState(
            user=user_from_dict(user) if user else None,
            cart=cart_from_dict(cart) if cart else EMPTY_CART,
            recently_viewed=tuple(product_from_dict(item) for item in recently_viewed[:HISTORY_LIMIT]),
            search_history=tuple(search_history[:HISTORY_LIMIT]),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, action: Action) -> AppState:
        previous, self.state = self.state, reducer(self.state, action)
        self._persist(previous, self.state)
        for listener in list(self._listeners):
            listener(self.state)
        return self.state

    def _persist(self, previous: AppState, current: AppState):
        if current.user is not previous.user:
            if current.user is None:
                self.storage.remove(USER_KEY)
            else:
                self.storage.save(USER_KEY, user_to_dict(current.user))
        if current.cart is not previous.cart:
            self.storage.save(CART_KEY, cart_to_dict(current.cart))
        if current.recently_viewed is not previous.recently_viewed:
            self.storage.save(RECENTLY_VIEWED_KEY, [product_to_dict(p) for p in current.recently_viewed])
        if current.search_history is not previous.search_history:
            self.storage.save(SEARCH_HISTORY_KEY, list(current.search_history))

    # Helpers

    def login(self, user: User):
        self.dispatch(Action(ActionType.SET_USER, user))
        self.dispatch(Action(ActionType.SET_ERROR, None))

    def logout(self):
        self.dispatch(Action(ActionType.SET_USER, None))
        self.dispatch(Action(ActionType.CLEAR_CART))

    def add_to_cart(self, product: Product, quantity: int = 1, variants: Optional[dict] = None):
        self.dispatch(Action(ActionType.ADD_TO_CART, {'product': product, 'quantity': quantity, 'variants': variants}))

    def remove_from_cart(self, product_id: str):
        self.dispatch(Action(ActionType.REMOVE_FROM_CART, product_id))

    def update_cart_quantity(self, product_id: str, quantity: int):
        self.dispatch(Action(ActionType.UPDATE_CART_QUANTITY, {'product_id': product_id, 'quantity': quantity}))

    def clear_cart(self):
        self.dispatch(Action(ActionType.CLEAR_CART))

    def add_to_recently_viewed(self, product: Product):
        self.dispatch(Action(ActionType.ADD_TO_RECENTLY_VIEWED, product))

    def add_to_search_history(self, term: str):
        term = term.strip()
        if term:
            self.dispatch(Action(ActionType.ADD_TO_SEARCH_HISTORY, term))

    def toggle_wishlist(self, product_id: str):
        self.dispatch(Action(ActionType.TOGGLE_WISHLIST, product_id))

    def is_in_wishlist(self, product_id: str) -> bool:
        return self.state.user is not None and product_id in self.state.user.wishlist

    def cart_item_count(self) -> int:
        return self.state.cart.item_count
