from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
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
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from apps.common.listing import Column
from .commands import MenuItemWriteCommand, RestaurantWriteCommand
from .container import build_menu_item_service, build_restaurant_service
from .serializers import (
    DashboardStatsSerializer,
    MenuItemSerializer,
    MenuItemWriteSerializer,
    PublicMenuSerializer,
    RestaurantSerializer,
    RestaurantSummarySerializer,
    RestaurantWithManagersSerializer,
    RestaurantWriteSerializer,
)

logger = get_logger(__name__).bind(component="restaurants", layer="view")

RESTAURANT_COLUMNS = (
    Column("id", "ID", sortable=False),
    Column("name", "Name"),
    Column("category", "Category"),
    Column("rating", "Rating"),
    Column("isActive", "Active", sortable=False),
    Column("managers", "Managers", formatter=lambda ms: [m["email"] for m in ms], sortable=False),
    Column("createdAt", "Created"),
)

MENU_ITEM_COLUMNS = (
    Column("id", "ID", sortable=False),
    Column("name", "Name"),
    Column("category", "Category"),
    Column("price", "Price"),
    Column("isAvailable", "Available", sortable=False),
    Column("imageUrl", "Image", sortable=False),
    Column("description", "Description", sortable=False),
    Column("createdAt", "Created"),
)


def _validate(serializer_class, data, log, *, partial=False):
    serializer = serializer_class(data=data, partial=partial)
    try:
        serializer.is_valid(raise_exception=True)
    except DRFValidationError as exc:
        log.warning("Payload validation failed", errors=exc.detail)
        return None, error_response("VALIDATION_ERROR", "Invalid input", exc.detail)
    return serializer.validated_data, None


@extend_schema(tags=["Restaurants"])
class RestaurantListView(APIView):
    permission_classes = [HasRouteRole]
    service = build_restaurant_service()
    log = logger.bind(view="RestaurantListView")

    @extend_schema(
        summary="List active restaurants",
        responses={200: RestaurantSummarySerializer(many=True)},
    )
    def get(self, request):
        data = self.service.list_active()
        return Response(RestaurantSummarySerializer(data, many=True).data)

    @extend_schema(
        summary="Create restaurant (admin)",
        request=RestaurantWriteSerializer,
        responses={
            201: RestaurantSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        data, failure = _validate(RestaurantWriteSerializer, request.data, self.log)
        if failure:
            return failure
        dto = self.service.create_restaurant(RestaurantWriteCommand.from_validated(data))
        return Response(RestaurantSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Restaurants"])
class AdminRestaurantListView(APIView):
    permission_classes = [HasRouteRole]
    service = build_restaurant_service()

    @extend_schema(
        summary="Restaurants with their managers (admin)",
        parameters=LIST_QUERY_PARAMETERS,
        responses={200: paginated_response(RestaurantWithManagersSerializer, "restaurants")},
    )
    def get(self, request):
        def fetch(query):
            result = unwrap(self.service.list_with_managers(query))
            result.rows = RestaurantWithManagersSerializer(result.rows, many=True).data
            return result

        return paged_list_response(
            request,
            fetch=fetch,
            columns=RESTAURANT_COLUMNS,
            items_key="restaurants",
            default_sort_field="name",
            default_sort_order="asc",
        )


@extend_schema(tags=["Restaurants"])
class RestaurantDetailView(APIView):
    permission_classes = [HasRouteRole]
    service = build_restaurant_service()
    log = logger.bind(view="RestaurantDetailView")

    @extend_schema(
        summary="Restaurant with its available menu",
        parameters=[OpenApiParameter("restaurant_id", int, OpenApiParameter.PATH)],
        responses={
            200: PublicMenuSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, restaurant_id: int):
        data, error = self.service.get_public_menu(restaurant_id)
        if error:
            return service_error_response(error)
        return Response(PublicMenuSerializer(data).data)

    def _update(self, request, restaurant_id: int, *, partial: bool):
        data, failure = _validate(
            RestaurantWriteSerializer, request.data, self.log, partial=partial
        )
        if failure:
            return failure
        dto, error = self.service.update_restaurant(
            RestaurantWriteCommand.from_validated(data, restaurant_id)
        )
        if error:
            return service_error_response(error)
        return Response(RestaurantSerializer(dto).data)

    @extend_schema(
        summary="Replace restaurant (admin)",
        request=RestaurantWriteSerializer,
        responses={200: RestaurantSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def put(self, request, restaurant_id: int):
        return self._update(request, restaurant_id, partial=False)

    @extend_schema(
        summary="Update restaurant (admin)",
        request=RestaurantWriteSerializer,
        responses={200: RestaurantSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def patch(self, request, restaurant_id: int):
        return self._update(request, restaurant_id, partial=True)

    @extend_schema(
        summary="Delete restaurant (admin)",
        description="Restaurants with orders are deactivated instead of removed.",
        responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def delete(self, request, restaurant_id: int):
        mode, error = self.service.delete_restaurant(restaurant_id)
        if error:
            return service_error_response(error)
        self.log.info("Restaurant deleted via API", restaurant_id=restaurant_id, mode=mode)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Restaurant dashboard"])
class DashboardStatsView(APIView):
    permission_classes = [HasRouteRole]
    service = build_restaurant_service()

    @extend_schema(
        summary="Dashboard counters for the manager's restaurant",
        responses={
            200: DashboardStatsSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        dto, error = self.service.get_dashboard_stats(request.user.id)
        if error:
            return service_error_response(error)
        return Response(DashboardStatsSerializer(dto).data)


@extend_schema(tags=["Restaurant dashboard"])
class MenuItemListView(APIView):
    permission_classes = [HasRouteRole]
    service = build_menu_item_service()
    log = logger.bind(view="MenuItemListView")

    @extend_schema(
        summary="List the manager's menu items",
        parameters=LIST_QUERY_PARAMETERS
        + [
            OpenApiParameter("category", str, OpenApiParameter.QUERY),
            OpenApiParameter("isAvailable", bool, OpenApiParameter.QUERY),
        ],
        responses={200: paginated_response(MenuItemSerializer, "menuItems")},
    )
    def get(self, request):
        user_id = request.user.id

        def fetch(query):
            result = unwrap(self.service.list_items(user_id, query))
            result.rows = MenuItemSerializer(result.rows, many=True).data
            return result

        return paged_list_response(
            request,
            fetch=fetch,
            columns=MENU_ITEM_COLUMNS,
            items_key="menuItems",
            filter_keys=("filter", "category", "isAvailable"),
        )

    @extend_schema(
        summary="Create menu item",
        request=MenuItemWriteSerializer,
        responses={
            201: MenuItemSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        data, failure = _validate(MenuItemWriteSerializer, request.data, self.log)
        if failure:
            return failure
        dto, error = self.service.create_item(
            request.user.id, MenuItemWriteCommand.from_validated(data)
        )
        if error:
            return service_error_response(error)
        return Response(MenuItemSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Restaurant dashboard"])
class MenuItemDetailView(APIView):
    permission_classes = [HasRouteRole]
    service = build_menu_item_service()
    log = logger.bind(view="MenuItemDetailView")

    @extend_schema(
        summary="Get menu item",
        responses={200: MenuItemSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def get(self, request, item_id: int):
        dto, error = self.service.get_item(request.user.id, item_id)
        if error:
            return service_error_response(error)
        return Response(MenuItemSerializer(dto).data)

    def _update(self, request, item_id: int, *, partial: bool):
        data, failure = _validate(
            MenuItemWriteSerializer, request.data, self.log, partial=partial
        )
        if failure:
            return failure
        dto, error = self.service.update_item(
            request.user.id, MenuItemWriteCommand.from_validated(data, item_id)
        )
        if error:
            return service_error_response(error)
        return Response(MenuItemSerializer(dto).data)

    @extend_schema(
        summary="Replace menu item",
        request=MenuItemWriteSerializer,
        responses={200: MenuItemSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def put(self, request, item_id: int):
        return self._update(request, item_id, partial=False)

    @extend_schema(
        summary="Update menu item",
        request=MenuItemWriteSerializer,
        responses={200: MenuItemSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def patch(self, request, item_id: int):
        return self._update(request, item_id, partial=True)

    @extend_schema(
        summary="Delete menu item",
        description="Items referenced by past orders are hidden instead of removed.",
        responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def delete(self, request, item_id: int):
        mode, error = self.service.delete_item(request.user.id, item_id)
        if error:
            return service_error_response(error)
        self.log.info("Menu item deleted via API", item_id=item_id, mode=mode)
        return Response(status=status.HTTP_204_NO_CONTENT)
