from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


@dataclass
class DeliveryDetails:
    first_name: str
    last_name: str
    email: str
    phone_number: str
    delivery_address: str
    notes: str = ""


@dataclass
class PaymentDetails:
    payment_method: str
    mobile_number: str
    transaction_id: str
    provider_name: str = ""


@dataclass
class OrderLine:
    menu_item_id: int
    quantity: int


@dataclass
class OrderCreateCommand:
    customer_id: int
    restaurant_id: int
    total: Decimal
    delivery: DeliveryDetails
    payment: PaymentDetails
    items: List[OrderLine] = field(default_factory=list)

    @staticmethod
    def from_validated(customer_id: int, data: Dict[str, Any]) -> "OrderCreateCommand":
        delivery = data["delivery"]
        payment = data["payment"]
        # Repeated lines for the same item are merged.
        quantities: Dict[int, int] = {}
        for line in data["items"]:
            item_id = int(line["id"])
            quantities[item_id] = quantities.get(item_id, 0) + int(line["quantity"])
        return OrderCreateCommand(
            customer_id=customer_id,
            restaurant_id=int(data["restaurantId"]),
            total=Decimal(str(data["total"])),
            delivery=DeliveryDetails(
                first_name=delivery["firstName"].strip(),
                last_name=delivery["lastName"].strip(),
                email=delivery["email"].strip().lower(),
                phone_number=delivery["phoneNumber"].strip(),
                delivery_address=delivery["deliveryAddress"].strip(),
                notes=(delivery.get("notes") or "").strip(),
            ),
            payment=PaymentDetails(
                payment_method=payment["paymentMethod"],
                mobile_number=payment["mobileNumber"].strip(),
                transaction_id=payment["transactionId"].strip(),
                provider_name=(payment.get("providerName") or "").strip(),
            ),
            items=[OrderLine(menu_item_id=k, quantity=v) for k, v in quantities.items()],
        )


@dataclass
class OrderStatusUpdateCommand:
    order_id: int
    status: str
    cancellation_reason: Optional[str] = None

    @staticmethod
    def from_validated(order_id: int, data: Dict[str, Any]) -> "OrderStatusUpdateCommand":
        reason = data.get("cancellationReason")
        return OrderStatusUpdateCommand(
            order_id=order_id,
            status=str(data["status"]).upper(),
            cancellation_reason=reason.strip() if isinstance(reason, str) else None,
        )
