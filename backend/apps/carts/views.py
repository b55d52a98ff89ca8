from django.utils.translation import gettext as _
from rest_framework import serializers, status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import (
    extend_schema,
    inline_serializer,
    OpenApiParameter,
    OpenApiResponse,
)

from apps.api.permissions import HasRouteRole
from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from apps.orders.views import OrderPlacedResponse, placed_order_payload
from .container import build_cart_service
from .serializers import CartAddSerializer, CartResponseSerializer, CheckoutSerializer
from .store import AddOutcome

logger = get_logger(__name__).bind(component="carts", layer="view")


class CartViewMixin:
    permission_classes = [HasRouteRole]
    service = build_cart_service()

    def cart_response(self, store, http_status=status.HTTP_200_OK):
        return Response(
            {"cart": self.service.summary(store), "messages": store.notifier.messages},
            status=http_status,
        )


@extend_schema(tags=["Cart"])
class CartView(CartViewMixin, APIView):
    @extend_schema(summary="Current cart", responses={200: CartResponseSerializer})
    def get(self, request):
        return self.cart_response(self.service.open(request.user.id))

    @extend_schema(summary="Clear the cart", responses={200: CartResponseSerializer})
    def delete(self, request):
        store = self.service.open(request.user.id)
        store.clear_cart()
        return self.cart_response(store)


@extend_schema(tags=["Cart"])
class CartItemListView(CartViewMixin, APIView):
    log = logger.bind(view="CartItemListView")

    @extend_schema(
        summary="Add a menu item to the cart",
        description=(
            "Adding an item from a different restaurant leaves the cart untouched and "
            "returns 409 with the pending item; confirm or cancel it via /api/cart/pending/."
        ),
        request=CartAddSerializer,
        responses={
            200: CartResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = CartAddSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except DRFValidationError as exc:
            self.log.warning("Cart payload validation failed", errors=exc.detail)
            return error_response("VALIDATION_ERROR", "Invalid input", exc.detail)
        store = self.service.open(request.user.id)
        outcome, error = self.service.add_item(
            store,
            serializer.validated_data["restaurantId"],
            serializer.validated_data["menuItemId"],
        )
        if error:
            return service_error_response(error)
        if outcome is AddOutcome.PENDING:
            return error_response(
                "CONFLICT",
                _("Your cart contains items from another restaurant"),
                {
                    "cartRestaurantId": store.state.restaurant_id,
                    "cartRestaurantName": store.state.restaurant_name,
                },
                hint=_("Confirm to clear your cart and start a new order"),
                extra={"pending": store.pending.to_dict()},
            )
        return self.cart_response(store)


@extend_schema(tags=["Cart"])
class CartItemDecreaseView(CartViewMixin, APIView):
    @extend_schema(
        summary="Decrease an item's quantity by one",
        parameters=[OpenApiParameter("item_id", int, OpenApiParameter.PATH)],
        responses={200: CartResponseSerializer},
    )
    def post(self, request, item_id: int):
        store = self.service.open(request.user.id)
        store.decrease_item_quantity(item_id)
        return self.cart_response(store)


@extend_schema(tags=["Cart"])
class CartItemDetailView(CartViewMixin, APIView):
    @extend_schema(
        summary="Remove an item from the cart",
        parameters=[OpenApiParameter("item_id", int, OpenApiParameter.PATH)],
        responses={200: CartResponseSerializer},
    )
    def delete(self, request, item_id: int):
        store = self.service.open(request.user.id)
        store.remove_item(item_id)
        return self.cart_response(store)


@extend_schema(tags=["Cart"])
class CartPendingView(CartViewMixin, APIView):
    @extend_schema(
        summary="Confirm the pending restaurant switch",
        responses={
            200: CartResponseSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        store = self.service.open(request.user.id)
        if not store.confirm_pending():
            return error_response("NOT_FOUND", _("No pending item"))
        return self.cart_response(store)

    @extend_schema(summary="Discard the pending item", responses={200: CartResponseSerializer})
    def delete(self, request):
        store = self.service.open(request.user.id)
        store.cancel_pending()
        return self.cart_response(store)


@extend_schema(tags=["Cart"])
class CartCheckoutView(CartViewMixin, APIView):
    log = logger.bind(view="CartCheckoutView")

    @extend_schema(
        summary="Place an order for the cart contents",
        request=CheckoutSerializer,
        responses={
            201: OrderPlacedResponse,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except DRFValidationError as exc:
            self.log.warning("Checkout payload validation failed", errors=exc.detail)
            return error_response("VALIDATION_ERROR", "Invalid input", exc.detail)
        store = self.service.open(request.user.id)
        dto, error = self.service.checkout(store, request.user.id, serializer.validated_data)
        if error:
            return service_error_response(error)
        return Response(placed_order_payload(dto), status=status.HTTP_201_CREATED)


@extend_schema(tags=["Cart"])
class LastOrderView(CartViewMixin, APIView):
    @extend_schema(
        summary="Number of the last order placed from the cart",
        responses={
            200: inline_serializer(
                name="LastOrderResponse",
                fields={"orderNumber": serializers.CharField(allow_null=True)},
            )
        },
    )
    def get(self, request):
        store = self.service.open(request.user.id)
        return Response({"orderNumber": store.last_order_number})
