from __future__ import annotations

from typing import List

from django.utils.translation import gettext as _

from apps.common import get_logger

logger = get_logger(__name__).bind(component="carts", layer="notifications")


class CollectingNotifier:
    """Keeps user-facing cart messages so the view can return them."""

    def __init__(self):
        self.messages: List[str] = []

    def _push(self, message: str) -> None:
        self.messages.append(message)
        logger.debug("Cart notification", text=message)

    def item_added(self, item_name: str) -> None:
        self._push(_("%(item)s was added to your cart") % {"item": item_name})

    def item_removed(self, item_name: str) -> None:
        self._push(_("%(item)s was removed from your cart") % {"item": item_name})

    def restaurant_switched(self, restaurant_name: str) -> None:
        self._push(
            _("Switched to a new restaurant: %(restaurant)s")
            % {"restaurant": restaurant_name}
        )

    def cart_cleared(self) -> None:
        self._push(_("Your cart has been cleared"))
