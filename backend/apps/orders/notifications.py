from smtplib import SMTPException
from typing import Sequence

from django.conf import settings
from django.core.mail import send_mail
from django.utils.translation import gettext as _

from apps.common import get_logger
from .models import Order

logger = get_logger(__name__).bind(component="orders", layer="notifications")


def _item_lines(order: Order) -> str:
    return "\n".join(
        f"- {item.quantity} x {item.name} @ {item.price}" for item in order.items.all()
    )


class OrderEmailNotifier:
    """Order confirmation emails. Delivery failures never fail the order."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def _send(self, subject: str, body: str, recipients: Sequence[str], **ctx) -> bool:
        recipients = [r for r in recipients if r]
        if not self.enabled or not recipients:
            return False
        try:
            send_mail(
                subject,
                body,
                settings.DEFAULT_FROM_EMAIL,
                recipients,
                fail_silently=False,
            )
        except (SMTPException, OSError, ValueError) as exc:
            logger.warning("Order email failed", error=str(exc), **ctx)
            return False
        logger.debug("Order email sent", recipients=len(recipients), **ctx)
        return True

    def order_placed(self, order: Order) -> None:
        restaurant = order.restaurant
        lines = _item_lines(order)
        self._send(
            _("New order %(number)s") % {"number": order.display_number},
            _(
                "A new order has been placed.\n\n%(lines)s\n\nTotal: %(total)s\n"
                "Deliver to: %(address)s\nNotes: %(notes)s"
            )
            % {
                "lines": lines,
                "total": order.total,
                "address": order.delivery_address,
                "notes": order.notes or "-",
            },
            [restaurant.email],
            order_id=order.id,
            audience="restaurant",
        )
        self._send(
            _("Your Dashi order %(number)s") % {"number": order.display_number},
            _(
                "Hi %(name)s,\n\nThanks for ordering from %(restaurant)s.\n\n"
                "%(lines)s\n\nTotal: %(total)s"
            )
            % {
                "name": order.first_name,
                "restaurant": restaurant.name,
                "lines": lines,
                "total": order.total,
            },
            [order.email],
            order_id=order.id,
            audience="customer",
        )
