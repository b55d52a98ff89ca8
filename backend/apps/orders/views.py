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

from apps.api.exceptions import unwrap
from apps.api.listing import paged_list_response
from apps.api.permissions import HasRouteRole
from apps.api.schemas import (
    ErrorResponseSerializer,
    LIST_QUERY_PARAMETERS,
    paginated_response,
)
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from apps.common.listing import Column
from .commands import OrderCreateCommand, OrderStatusUpdateCommand
from .container import build_order_service
from .serializers import (
    CustomerOrdersPageSerializer,
    OrderCreateSerializer,
    OrderCreatedSerializer,
    OrderDetailSerializer,
    OrderListItemSerializer,
    OrderStatusUpdateSerializer,
)

logger = get_logger(__name__).bind(component="orders", layer="view")

ORDER_COLUMNS = (
    Column("orderNumber", "Order"),
    Column("restaurantName", "Restaurant"),
    Column("customerName", "Customer", sortable=False),
    Column("status", "Status"),
    Column("total", "Total"),
    Column("createdAt", "Placed"),
    Column("id", "ID", sortable=False),
    Column("restaurantId", "Restaurant ID", sortable=False),
)

ORDER_FILTER_KEYS = ("filter", "status", "restaurant", "startDate", "endDate")
ORDER_FILTER_DEFAULTS = {"status": "ALL"}

ORDER_LIST_PARAMETERS = LIST_QUERY_PARAMETERS + [
    OpenApiParameter("status", str, OpenApiParameter.QUERY),
    OpenApiParameter("restaurant", str, OpenApiParameter.QUERY),
    OpenApiParameter("startDate", str, OpenApiParameter.QUERY),
    OpenApiParameter("endDate", str, OpenApiParameter.QUERY),
]

OrderPlacedResponse = inline_serializer(
    name="OrderPlacedResponse",
    fields={
        "status": serializers.CharField(),
        "data": OrderCreatedSerializer(),
        "message": serializers.CharField(),
    },
)


def placed_order_payload(dto):
    return {
        "status": "success",
        "data": OrderCreatedSerializer(dto).data,
        "message": _("Order placed successfully"),
    }


def _order_rows(result):
    result.rows = OrderListItemSerializer(result.rows, many=True).data
    return result


@extend_schema(tags=["Orders"])
class OrderListView(APIView):
    permission_classes = [HasRouteRole]
    service = build_order_service()
    log = logger.bind(view="OrderListView")

    @extend_schema(
        summary="List all orders (admin)",
        parameters=ORDER_LIST_PARAMETERS,
        responses={
            200: paginated_response(OrderListItemSerializer, "orders"),
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        return paged_list_response(
            request,
            fetch=lambda query: _order_rows(unwrap(self.service.list_all_orders(query))),
            columns=ORDER_COLUMNS,
            items_key="orders",
            filter_keys=ORDER_FILTER_KEYS,
            filter_defaults=ORDER_FILTER_DEFAULTS,
        )

    @extend_schema(
        summary="Place an order",
        request=OrderCreateSerializer,
        responses={
            201: OrderPlacedResponse,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except DRFValidationError as exc:
            self.log.warning("Order payload validation failed", errors=exc.detail)
            return error_response("VALIDATION_ERROR", "Invalid input", exc.detail)
        cmd = OrderCreateCommand.from_validated(request.user.id, serializer.validated_data)
        dto, error = self.service.create_order(cmd)
        if error:
            return service_error_response(error)
        return Response(placed_order_payload(dto), status=status.HTTP_201_CREATED)


@extend_schema(tags=["Orders"])
class RestaurantOrderListView(APIView):
    permission_classes = [HasRouteRole]
    service = build_order_service()

    @extend_schema(
        summary="List the manager's restaurant orders",
        parameters=ORDER_LIST_PARAMETERS,
        responses={
            200: paginated_response(OrderListItemSerializer, "orders"),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        user_id = request.user.id
        return paged_list_response(
            request,
            fetch=lambda query: _order_rows(
                unwrap(self.service.list_restaurant_orders(user_id, query))
            ),
            columns=ORDER_COLUMNS,
            items_key="orders",
            filter_keys=ORDER_FILTER_KEYS + ("restaurantId",),
            filter_defaults=ORDER_FILTER_DEFAULTS,
        )


@extend_schema(tags=["Orders"])
class OrderStatusView(APIView):
    permission_classes = [HasRouteRole]
    service = build_order_service()
    log = logger.bind(view="OrderStatusView")

    @extend_schema(
        summary="Update order status (restaurant manager)",
        request=OrderStatusUpdateSerializer,
        responses={
            200: OrderDetailSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request, order_id: int):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except DRFValidationError as exc:
            return error_response("VALIDATION_ERROR", "Invalid input", exc.detail)
        cmd = OrderStatusUpdateCommand.from_validated(order_id, serializer.validated_data)
        dto, error = self.service.update_status(request.user.id, cmd)
        if error:
            return service_error_response(error)
        return Response(OrderDetailSerializer(dto).data)


@extend_schema(tags=["Orders"])
class CustomerOrderListView(APIView):
    permission_classes = [HasRouteRole]
    service = build_order_service()

    @extend_schema(
        summary="The customer's own orders (cursor paginated)",
        parameters=[
            OpenApiParameter("status", str, OpenApiParameter.QUERY, enum=["pending", "delivered", "failed"]),
            OpenApiParameter("limit", int, OpenApiParameter.QUERY),
            OpenApiParameter("cursor", int, OpenApiParameter.QUERY),
        ],
        responses={
            200: CustomerOrdersPageSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        params = request.query_params
        try:
            limit = int(params["limit"]) if params.get("limit") else None
            cursor = int(params["cursor"]) if params.get("cursor") else None
        except ValueError:
            return error_response(
                "VALIDATION_ERROR",
                "Invalid input",
                {"limit": params.get("limit"), "cursor": params.get("cursor")},
            )
        dto, error = self.service.list_customer_orders(
            request.user.id,
            status_group=params.get("status"),
            limit=limit,
            cursor=cursor,
        )
        if error:
            return service_error_response(error)
        return Response(CustomerOrdersPageSerializer(dto).data)


@extend_schema(tags=["Orders"])
class OrderDetailView(APIView):
    permission_classes = [HasRouteRole]
    service = build_order_service()

    @extend_schema(
        summary="Order by display number",
        parameters=[OpenApiParameter("order_number", str, OpenApiParameter.PATH)],
        responses={
            200: OrderDetailSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, order_number: str):
        dto, error = self.service.get_by_display_number(request.user, order_number)
        if error:
            return service_error_response(error)
        return Response(OrderDetailSerializer(dto).data)
