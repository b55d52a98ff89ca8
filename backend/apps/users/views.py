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
from .commands import RestaurantUserCreateCommand
from .container import build_user_service
from .serializers import (
    CustomerProfileSerializer,
    RestaurantUserCreateSerializer,
    RestaurantUserSerializer,
    UserSerializer,
)

logger = get_logger(__name__).bind(component="users", layer="view")

USER_COLUMNS = (
    Column("id", "ID", sortable=False),
    Column("name", "Name"),
    Column("email", "Email"),
    Column("role", "Role"),
    Column("phoneNumber", "Phone", sortable=False),
    Column("restaurantId", "Restaurant", sortable=False),
    Column("createdAt", "Created"),
)


@extend_schema(tags=["Users"])
class UserListView(APIView):
    permission_classes = [HasRouteRole]
    service = build_user_service()
    log = logger.bind(view="UserListView")

    @extend_schema(
        summary="List users (admin)",
        parameters=LIST_QUERY_PARAMETERS
        + [OpenApiParameter("role", str, OpenApiParameter.QUERY)],
        responses={
            200: paginated_response(UserSerializer, "users"),
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        def fetch(query):
            result = unwrap(self.service.list_users(query))
            result.rows = UserSerializer(result.rows, many=True).data
            return result

        self.log.debug("Listing users via API")
        return paged_list_response(
            request,
            fetch=fetch,
            columns=USER_COLUMNS,
            items_key="users",
            filter_keys=("filter", "role"),
        )


@extend_schema(tags=["Users"])
class RestaurantUserCreateView(APIView):
    permission_classes = [HasRouteRole]
    service = build_user_service()
    log = logger.bind(view="RestaurantUserCreateView")

    @extend_schema(
        summary="Create a restaurant manager account (admin)",
        request=RestaurantUserCreateSerializer,
        responses={
            201: RestaurantUserSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = RestaurantUserCreateSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except DRFValidationError as exc:
            self.log.warning("Restaurant user validation failed", errors=exc.detail)
            return error_response("VALIDATION_ERROR", "Invalid input", exc.detail)
        cmd = RestaurantUserCreateCommand.from_validated(serializer.validated_data)
        dto, error = self.service.create_restaurant_user(cmd)
        if error:
            return service_error_response(error)
        self.log.info("Restaurant user created via API", user_id=dto.id)
        return Response(
            RestaurantUserSerializer(dto).data, status=status.HTTP_201_CREATED
        )


@extend_schema(tags=["Users"])
class CurrentCustomerView(APIView):
    permission_classes = [HasRouteRole]
    service = build_user_service()

    @extend_schema(
        summary="Current customer's profile",
        responses={
            200: CustomerProfileSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        dto, error = self.service.get_current_customer(request.user.id)
        if error:
            return service_error_response(error)
        return Response(CustomerProfileSerializer(dto).data)
