from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse

from apps.api.exceptions import unwrap
from apps.api.listing import paged_list_response
from apps.api.permissions import HasRouteRole
from apps.api.schemas import (
    ErrorResponseSerializer,
    LIST_QUERY_PARAMETERS,
    paginated_response,
)
from apps.api.utils import service_error_response
from apps.common.listing import Column
from apps.common.periods import PERIOD_ALL
from apps.orders.serializers import OrderListItemSerializer
from .container import build_sales_service
from .serializers import (
    RestaurantSalesRowSerializer,
    RestaurantSalesSummarySerializer,
    SalesSummarySerializer,
)

SALES_COLUMNS = (
    Column("restaurantName", "Restaurant"),
    Column("totalSales", "Total sales"),
    Column("orderCount", "Orders"),
    Column("commission", "Commission"),
    Column("period", "Period", sortable=False),
    Column("id", "ID", sortable=False),
    Column("restaurantId", "Restaurant ID", sortable=False),
)

# Every row is a delivered order of the same restaurant, so only the
# order fields are sortable.
RESTAURANT_SALES_COLUMNS = (
    Column("orderNumber", "Order"),
    Column("customerName", "Customer", sortable=False),
    Column("status", "Status", sortable=False),
    Column("total", "Total"),
    Column("createdAt", "Delivered"),
    Column("id", "ID", sortable=False),
)

SALES_FILTER_KEYS = ("restaurant", "period", "startDate", "endDate")
SALES_FILTER_DEFAULTS = {"period": PERIOD_ALL}

PERIOD_PARAMETER = OpenApiParameter(
    "period",
    str,
    OpenApiParameter.QUERY,
    enum=["ALL", "DAILY", "WEEKLY", "MONTHLY", "YEARLY"],
)

DATE_PARAMETERS = [
    OpenApiParameter("startDate", str, OpenApiParameter.QUERY),
    OpenApiParameter("endDate", str, OpenApiParameter.QUERY),
]


@extend_schema(tags=["Sales"])
class SalesListView(APIView):
    permission_classes = [HasRouteRole]
    service = build_sales_service()

    @extend_schema(
        summary="Sales per restaurant (admin)",
        parameters=LIST_QUERY_PARAMETERS
        + [PERIOD_PARAMETER, OpenApiParameter("restaurant", str, OpenApiParameter.QUERY)]
        + DATE_PARAMETERS,
        responses={
            200: paginated_response(RestaurantSalesRowSerializer, "sales"),
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        def fetch(query):
            result = unwrap(self.service.get_sales(query))
            result.rows = RestaurantSalesRowSerializer(result.rows, many=True).data
            return result

        return paged_list_response(
            request,
            fetch=fetch,
            columns=SALES_COLUMNS,
            items_key="sales",
            default_sort_field="totalSales",
            default_sort_order="desc",
            filter_keys=SALES_FILTER_KEYS,
            filter_defaults=SALES_FILTER_DEFAULTS,
        )


@extend_schema(tags=["Sales"])
class SalesSummaryView(APIView):
    permission_classes = [HasRouteRole]
    service = build_sales_service()

    @extend_schema(
        summary="Platform-wide sales totals (admin)",
        parameters=[PERIOD_PARAMETER],
        responses={
            200: SalesSummarySerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        dto, error = self.service.get_summary(request.query_params.get("period", PERIOD_ALL))
        if error:
            return service_error_response(error)
        return Response(SalesSummarySerializer(dto).data)


@extend_schema(tags=["Sales"])
class RestaurantSalesView(APIView):
    permission_classes = [HasRouteRole]
    service = build_sales_service()

    @extend_schema(
        summary="Delivered orders and totals for one restaurant",
        parameters=[OpenApiParameter("restaurant_id", int, OpenApiParameter.PATH)]
        + LIST_QUERY_PARAMETERS
        + [PERIOD_PARAMETER]
        + DATE_PARAMETERS,
        responses={
            200: paginated_response(
                OrderListItemSerializer,
                "orders",
                schema_name="RestaurantSales",
                summary=RestaurantSalesSummarySerializer(),
            ),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, restaurant_id: int):
        user = request.user

        def fetch(query):
            result = unwrap(self.service.get_restaurant_sales(user, restaurant_id, query))
            result.rows = OrderListItemSerializer(result.rows, many=True).data
            result.extra = {
                "summary": RestaurantSalesSummarySerializer(result.extra["summary"]).data
            }
            return result

        return paged_list_response(
            request,
            fetch=fetch,
            columns=RESTAURANT_SALES_COLUMNS,
            items_key="orders",
            filter_keys=("period", "startDate", "endDate"),
            filter_defaults=SALES_FILTER_DEFAULTS,
        )
