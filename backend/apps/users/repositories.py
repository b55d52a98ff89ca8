from typing import Optional

from django.db.models import Q

from apps.common.repository import GenericRepository
from .models import Customer, User


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)

    def _base_queryset(self):
        return self.model.objects.select_related("restaurant_manager")

    def get(self, **filters):
        return self._base_queryset().filter(**filters).first()

    def email_taken(self, email: str) -> bool:
        return self.model.objects.filter(email__iexact=email).exists()

    def create_user(self, **data) -> User:
        return User.objects.create_user(**data)

    def search(self, *, text: Optional[str], role: Optional[str], ordering: str):
        qs = self._base_queryset()
        if text:
            qs = qs.filter(Q(name__icontains=text) | Q(email__icontains=text))
        if role:
            qs = qs.filter(role=role)
        return qs.order_by(ordering, "id")


class CustomerRepository(GenericRepository[Customer]):
    def __init__(self):
        super().__init__(Customer)

    def for_user(self, user_id: int) -> Optional[Customer]:
        return self.model.objects.select_related("user").filter(user_id=user_id).first()
