"""Per-owner cart state with persistence and user-facing notifications.

A cart is bound to at most one restaurant. Adding an item from another
restaurant does not touch the cart; the item is parked as *pending* until
the owner confirms the switch or cancels it.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from apps.common import get_logger
from apps.common.money import ZERO, money_str, to_money
from .protocols import CartNotifierProtocol, CartStorageProtocol

logger = get_logger(__name__).bind(component="carts", layer="store")

CART_KEY = "dashiCart"
PENDING_KEY = "dashiCartPending"
LAST_ORDER_KEY = "lastOrderNumber"


@dataclass(frozen=True)
class CartItem:
    id: int
    name: str
    price: Decimal
    quantity: int = 1
    image_url: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return to_money(self.price * self.quantity)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "price": money_str(self.price),
            "quantity": self.quantity,
        }
        if self.image_url:
            data["imageUrl"] = self.image_url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartItem":
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            price=to_money(data["price"]),
            quantity=max(int(data.get("quantity", 1)), 1),
            image_url=data.get("imageUrl") or None,
        )


@dataclass(frozen=True)
class CartState:
    restaurant_id: Optional[int] = None
    restaurant_name: Optional[str] = None
    items: tuple = ()

    @property
    def subtotal(self) -> Decimal:
        return to_money(sum((item.line_total for item in self.items), ZERO))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, item_id: int) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "restaurantId": self.restaurant_id,
            "restaurantName": self.restaurant_name,
            "items": [item.to_dict() for item in self.items],
            "subtotal": money_str(self.subtotal),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CartState":
        if not data:
            return cls()
        items = tuple(CartItem.from_dict(raw) for raw in data.get("items") or [])
        if not items:
            return cls()
        restaurant_id = data.get("restaurantId")
        return cls(
            restaurant_id=int(restaurant_id) if restaurant_id is not None else None,
            restaurant_name=data.get("restaurantName"),
            items=items,
        )


EMPTY_CART = CartState()


@dataclass(frozen=True)
class PendingItem:
    restaurant_id: int
    restaurant_name: str
    item: CartItem

    def to_dict(self) -> Dict[str, Any]:
        return {
            "restaurantId": self.restaurant_id,
            "restaurantName": self.restaurant_name,
            "item": self.item.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["PendingItem"]:
        if not data:
            return None
        return cls(
            restaurant_id=int(data["restaurantId"]),
            restaurant_name=str(data["restaurantName"]),
            item=CartItem.from_dict(data["item"]),
        )


class AddOutcome(str, Enum):
    ADDED = "added"
    PENDING = "pending"


class CartStore:
    """Mutation API over one owner's cart.

    The state is loaded when the store is built and saved after every
    mutation. Storage failures are logged; the in-memory change still
    applies.
    """

    def __init__(
        self,
        storage: CartStorageProtocol,
        notifier: CartNotifierProtocol,
        owner: str,
    ):
        self.storage = storage
        self.notifier = notifier
        self.owner = owner
        self.logger = logger.bind(owner=self.owner)
        self.state = self._parse(CART_KEY, CartState.from_dict) or CartState()
        self.pending = self._parse(PENDING_KEY, PendingItem.from_dict)

    # --- storage ---
    def _key(self, name: str) -> str:
        return f"{name}:{self.owner}"

    def _read(self, name: str) -> Any:
        try:
            return self.storage.get(self._key(name))
        except Exception as exc:  # storage backends raise their own error types
            self.logger.error("Failed to load cart entry", entry=name, error=str(exc))
            return None

    def _parse(self, name: str, parser: Callable[[Any], Any]) -> Any:
        raw = self._read(name)
        try:
            return parser(raw)
        except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError) as exc:
            self.logger.error("Discarding unreadable cart entry", entry=name, error=str(exc))
            return None

    def _write(self, name: str, value: Any) -> None:
        try:
            if value is None:
                self.storage.delete(self._key(name))
            else:
                self.storage.set(self._key(name), value)
        except Exception as exc:  # storage backends raise their own error types
            self.logger.error("Failed to save cart entry", entry=name, error=str(exc))

    def _commit(self, state: CartState) -> CartState:
        self.state = state
        self._write(CART_KEY, None if state.is_empty else state.to_dict())
        return state

    def _set_pending(self, pending: Optional[PendingItem]) -> None:
        self.pending = pending
        self._write(PENDING_KEY, pending.to_dict() if pending else None)

    # --- derived ---
    @property
    def item_count(self) -> int:
        return self.state.item_count

    @property
    def is_empty(self) -> bool:
        return self.state.is_empty

    @property
    def subtotal(self) -> Decimal:
        return self.state.subtotal

    # --- mutations ---
    def add_item(self, restaurant_id: int, restaurant_name: str, item: CartItem) -> AddOutcome:
        state = self.state
        if not state.is_empty and state.restaurant_id != restaurant_id:
            self.logger.info(
                "Add deferred: cart bound to another restaurant",
                cart_restaurant_id=state.restaurant_id,
                restaurant_id=restaurant_id,
                item_id=item.id,
            )
            self._set_pending(
                PendingItem(restaurant_id, restaurant_name, replace(item, quantity=1))
            )
            return AddOutcome.PENDING

        existing = state.find(item.id)
        if existing is not None:
            items = tuple(
                replace(line, price=item.price, quantity=line.quantity + 1)
                if line.id == item.id
                else line
                for line in state.items
            )
        else:
            items = state.items + (replace(item, quantity=1),)
        self._commit(CartState(restaurant_id, restaurant_name, items))
        if self.pending is not None:
            self._set_pending(None)
        self.notifier.item_added(item.name)
        return AddOutcome.ADDED

    def confirm_pending(self) -> bool:
        pending = self.pending
        if pending is None:
            return False
        self._commit(
            CartState(pending.restaurant_id, pending.restaurant_name, (pending.item,))
        )
        self._set_pending(None)
        self.logger.info("Cart switched restaurant", restaurant_id=pending.restaurant_id)
        self.notifier.restaurant_switched(pending.restaurant_name)
        return True

    def cancel_pending(self) -> bool:
        had_pending = self.pending is not None
        self._set_pending(None)
        return had_pending

    def decrease_item_quantity(self, item_id: int) -> bool:
        line = self.state.find(item_id)
        if line is None:
            return False
        if line.quantity <= 1:
            return self.remove_item(item_id)
        items = tuple(
            replace(i, quantity=i.quantity - 1) if i.id == item_id else i
            for i in self.state.items
        )
        self._commit(replace(self.state, items=items))
        return True

    def remove_item(self, item_id: int) -> bool:
        line = self.state.find(item_id)
        if line is None:
            return False
        items = tuple(i for i in self.state.items if i.id != item_id)
        self._commit(replace(self.state, items=items) if items else EMPTY_CART)
        self.notifier.item_removed(line.name)
        return True

    def clear_cart(self) -> None:
        self._commit(EMPTY_CART)
        self._set_pending(None)
        self.notifier.cart_cleared()

    def refresh_prices(self, prices: Mapping[int, Decimal]) -> bool:
        """Apply current menu prices to matching lines; True when any changed."""
        items = tuple(
            replace(line, price=to_money(prices[line.id]))
            if line.id in prices and to_money(prices[line.id]) != line.price
            else line
            for line in self.state.items
        )
        if items == self.state.items:
            return False
        self._commit(replace(self.state, items=items))
        self.logger.info("Cart prices refreshed", restaurant_id=self.state.restaurant_id)
        return True

    # --- last order ---
    @property
    def last_order_number(self) -> Optional[str]:
        return self._read(LAST_ORDER_KEY)

    def remember_order(self, order_number: str) -> None:
        self._write(LAST_ORDER_KEY, order_number)

    def to_dict(self) -> Dict[str, Any]:
        data = self.state.to_dict()
        data["itemCount"] = self.item_count
        data["pending"] = self.pending.to_dict() if self.pending else None
        return data

