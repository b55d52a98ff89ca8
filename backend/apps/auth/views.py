from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from drf_spectacular.utils import extend_schema, OpenApiResponse

from apps.api.permissions import HasRouteRole
from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from apps.users.commands import CustomerRegisterCommand
from apps.users.container import build_user_service
from apps.users.mappers import user_to_dto
from apps.users.serializers import CustomerRegisterSerializer, UserSerializer
from .container import build_session_service
from .serializers import (
    DetailResponseSerializer,
    EmailTokenObtainPairSerializer,
    LoginResponseSerializer,
    LogoutAllResponseSerializer,
    LogoutRequestSerializer,
)

logger = get_logger(__name__).bind(component="auth", layer="view")


@extend_schema(tags=["Auth"])
class RegisterView(APIView):
    permission_classes = [AllowAny]
    service = build_user_service()
    log = logger.bind(view="RegisterView")

    @extend_schema(
        summary="Register a customer account",
        request=CustomerRegisterSerializer,
        responses={
            201: UserSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = CustomerRegisterSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except DRFValidationError as exc:
            self.log.warning("Registration payload invalid", errors=exc.detail)
            return error_response("VALIDATION_ERROR", "Invalid input", exc.detail)
        dto, error = self.service.register_customer(
            CustomerRegisterCommand.from_validated(serializer.validated_data)
        )
        if error:
            self.log.warning("Registration failed", code=error[0], detail=error[1])
            return service_error_response(error)
        self.log.info("Registration completed", user_id=dto.id)
        return Response(UserSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Auth"],
    summary="Login with email and password",
    responses={200: LoginResponseSerializer, 401: OpenApiResponse(response=ErrorResponseSerializer)},
)
class LoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = EmailTokenObtainPairSerializer


@extend_schema(tags=["Auth"], summary="Refresh JWT")
class RefreshView(TokenRefreshView):
    permission_classes = [AllowAny]


@extend_schema(tags=["Auth"], summary="Get current user", responses={200: UserSerializer})
class MeView(APIView):
    permission_classes = [HasRouteRole]

    def get(self, request):
        return Response(UserSerializer(user_to_dto(request.user)).data)


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    permission_classes = [HasRouteRole]
    service = build_session_service()

    @extend_schema(
        summary="Logout (blacklist refresh)",
        request=LogoutRequestSerializer,
        responses={
            200: DetailResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        error = self.service.logout(request.data.get("refresh"), request.user.id)
        if error:
            return service_error_response(error)
        return Response({"detail": "Logged out"}, status=status.HTTP_200_OK)


@extend_schema(tags=["Auth"])
class LogoutAllView(APIView):
    permission_classes = [HasRouteRole]
    service = build_session_service()

    @extend_schema(
        summary="Logout from all devices",
        request=None,
        responses={
            200: LogoutAllResponseSerializer,
            401: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        result = self.service.logout_all(request.user)
        return Response(LogoutAllResponseSerializer(result).data)
