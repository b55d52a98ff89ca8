import json
import types

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework.test import APIRequestFactory

from apps.api.middleware import RequestValidationMiddleware
from apps.api.permissions import HasRouteRole, ROUTE_ROLES, required_roles, role_of
from apps.api.validation import validate_request_context


factory = APIRequestFactory()


def view_named(name):
    return type(name, (), {})


def make_user(user_id=7, role="CUSTOMER", is_superuser=False):
    return types.SimpleNamespace(
        id=user_id, role=role, is_superuser=is_superuser, is_authenticated=True
    )


def test_unlisted_view_is_open():
    request = factory.get("/api/restaurants/")
    request.user = AnonymousUser()
    assert validate_request_context(request, view_named("RestaurantListView"), {}) is None


def test_anonymous_caller_gets_401():
    request = factory.get("/api/sales/")
    request.user = AnonymousUser()
    response = validate_request_context(request, view_named("SalesListView"), {})
    assert response.status_code == 401
    assert response.data["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.parametrize(
    "view_name,method,role",
    [
        ("SalesListView", "get", "CUSTOMER"),
        ("SalesSummaryView", "get", "RESTAURANT"),
        ("OrderListView", "post", "RESTAURANT"),
        ("OrderListView", "get", "CUSTOMER"),
        ("MenuItemListView", "post", "CUSTOMER"),
        ("RestaurantUserCreateView", "post", "RESTAURANT"),
        ("CartItemListView", "post", "ADMIN"),
        ("DashboardStatsView", "get", "ADMIN"),
    ],
)
def test_wrong_role_gets_403(view_name, method, role):
    request = getattr(factory, method)("/api/x/")
    request.user = make_user(role=role)
    response = validate_request_context(request, view_named(view_name), {})
    assert response.status_code == 403
    assert response.data["error"]["code"] == "FORBIDDEN"
    assert response.data["error"]["details"]["requiredRoles"]


def test_allowed_role_records_validated_context():
    request = factory.post("/api/orders/", {}, format="json")
    request.user = make_user(user_id=42, role="CUSTOMER")
    response = validate_request_context(request, view_named("OrderListView"), {})
    assert response is None
    assert request.validated_user_id == 42
    assert request.validated_role == "CUSTOMER"
    assert request.is_privileged_user is False


def test_superuser_counts_as_admin():
    user = make_user(role="CUSTOMER", is_superuser=True)
    assert role_of(user) == "ADMIN"
    request = factory.get("/api/sales/summary/")
    request.user = user
    assert validate_request_context(request, view_named("SalesSummaryView"), {}) is None
    assert request.is_privileged_user is True


def test_restaurant_sales_allows_managers_and_admins():
    assert sorted(str(r) for r in required_roles("RestaurantSalesView", "GET")) == [
        "ADMIN",
        "RESTAURANT",
    ]


def test_every_cart_route_is_customer_only():
    cart_views = [name for name in ROUTE_ROLES if name.startswith("Cart")]
    assert cart_views
    for name in cart_views:
        for roles in ROUTE_ROLES[name].values():
            assert roles == ("CUSTOMER",)


def test_has_route_role_permission():
    permission = HasRouteRole()
    view = view_named("OrderStatusView")()
    request = types.SimpleNamespace(method="PATCH", user=make_user(role="RESTAURANT"))
    assert permission.has_permission(request, view) is True
    request.user = make_user(role="CUSTOMER")
    assert permission.has_permission(request, view) is False
    request.user = AnonymousUser()
    assert permission.has_permission(request, view) is False


def test_middleware_no_view_class_returns_none():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/health/live")
    response = middleware.process_view(request, lambda req: req, [], {})
    assert response is None


def test_middleware_renders_blocking_response():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/api/sales/")
    request.user = AnonymousUser()

    def view_func(req):
        return None

    view_func.view_class = view_named("SalesListView")
    response = middleware.process_view(request, view_func, [], {})
    assert response.status_code == 401
    assert json.loads(response.content)["error"]["code"] == "UNAUTHORIZED"
