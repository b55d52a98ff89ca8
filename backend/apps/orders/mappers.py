from apps.common.money import money_str
from .dtos import OrderDetailDTO, OrderItemDTO, OrderListItemDTO
from .models import Order, OrderItem


class OrderMapper:
    @staticmethod
    def item_to_dto(item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            menu_item_id=item.menu_item_id,
            name=item.name,
            price=money_str(item.price),
            quantity=item.quantity,
        )

    @staticmethod
    def to_list_dto(order: Order) -> OrderListItemDTO:
        customer = order.customer
        return OrderListItemDTO(
            id=order.id,
            order_number=order.display_number,
            restaurant_id=order.restaurant_id,
            restaurant_name=order.restaurant.name,
            customer_name=getattr(customer, "name", "")
            or f"{order.first_name} {order.last_name}".strip(),
            status=order.status,
            total=money_str(order.total),
            created_at=order.created_at.isoformat(),
        )

    @staticmethod
    def to_detail_dto(order: Order) -> OrderDetailDTO:
        payment = getattr(order, "payment", None)
        return OrderDetailDTO(
            id=order.id,
            order_number=order.display_number,
            restaurant_id=order.restaurant_id,
            restaurant_name=order.restaurant.name,
            customer_id=order.customer_id,
            status=order.status,
            total=money_str(order.total),
            first_name=order.first_name,
            last_name=order.last_name,
            email=order.email,
            phone_number=order.phone_number,
            delivery_address=order.delivery_address,
            notes=order.notes,
            cancellation_reason=order.cancellation_reason,
            payment_method=getattr(payment, "payment_method", None),
            payment_status=getattr(payment, "status", None),
            created_at=order.created_at.isoformat(),
            updated_at=order.updated_at.isoformat(),
            items=[OrderMapper.item_to_dto(i) for i in order.items.all()],
        )
