"""Role table shared by the request validation middleware and DRF permissions."""
from typing import Any, Dict, Optional, Tuple

from rest_framework.permissions import BasePermission

from apps.users.models import Role

ADMIN = (Role.ADMIN,)
CUSTOMER = (Role.CUSTOMER,)
RESTAURANT = (Role.RESTAURANT,)
AUTHENTICATED = (Role.CUSTOMER, Role.RESTAURANT, Role.ADMIN)

# View class name -> HTTP method -> roles allowed. Methods missing from a view's
# entry (and views missing from the table) are public.
ROUTE_ROLES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    # sales
    "SalesListView": {"GET": ADMIN},
    "SalesSummaryView": {"GET": ADMIN},
    # orders
    "OrderListView": {"GET": ADMIN, "POST": CUSTOMER},
    "RestaurantOrderListView": {"GET": RESTAURANT},
    "OrderStatusView": {"PATCH": RESTAURANT},
    "CustomerOrderListView": {"GET": CUSTOMER},
    "OrderDetailView": {"GET": AUTHENTICATED},
    # restaurants
    "RestaurantListView": {"POST": ADMIN},
    "RestaurantDetailView": {"PUT": ADMIN, "PATCH": ADMIN, "DELETE": ADMIN},
    "AdminRestaurantListView": {"GET": ADMIN},
    "RestaurantSalesView": {"GET": RESTAURANT + ADMIN},
    "DashboardStatsView": {"GET": RESTAURANT},
    "MenuItemListView": {"GET": RESTAURANT, "POST": RESTAURANT},
    "MenuItemDetailView": {
        "GET": RESTAURANT,
        "PUT": RESTAURANT,
        "PATCH": RESTAURANT,
        "DELETE": RESTAURANT,
    },
    # users
    "UserListView": {"GET": ADMIN},
    "RestaurantUserCreateView": {"POST": ADMIN},
    "CurrentCustomerView": {"GET": CUSTOMER},
    # cart
    "CartView": {"GET": CUSTOMER, "DELETE": CUSTOMER},
    "CartItemListView": {"POST": CUSTOMER},
    "CartItemDecreaseView": {"POST": CUSTOMER},
    "CartItemDetailView": {"DELETE": CUSTOMER},
    "CartPendingView": {"POST": CUSTOMER, "DELETE": CUSTOMER},
    "CartCheckoutView": {"POST": CUSTOMER},
    "LastOrderView": {"GET": CUSTOMER},
    # auth
    "MeView": {"GET": AUTHENTICATED},
    "LogoutView": {"POST": AUTHENTICATED},
    "LogoutAllView": {"POST": AUTHENTICATED},
}


def role_of(user: Any) -> Optional[str]:
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    if getattr(user, "is_superuser", False):
        return Role.ADMIN
    return getattr(user, "role", None) or Role.CUSTOMER


def required_roles(view_name: str, method: str) -> Optional[Tuple[str, ...]]:
    rules = ROUTE_ROLES.get(view_name)
    if not rules:
        return None
    return rules.get((method or "").upper())


def is_privileged(user: Any) -> bool:
    return role_of(user) == Role.ADMIN


class HasRouteRole(BasePermission):
    """Apply ROUTE_ROLES to the current view and method."""

    message = "You do not have permission to perform this action"

    def has_permission(self, request, view) -> bool:
        roles = required_roles(type(view).__name__, request.method)
        if roles is None:
            return True
        user = getattr(request, "user", None)
        if not getattr(user, "is_authenticated", False):
            return False
        return role_of(user) in roles
