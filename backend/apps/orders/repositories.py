from apps.common.repository import GenericRepository
from .models import Order


class OrderRepository(GenericRepository[Order]):
    def __init__(self):
        super().__init__(Order)

    def list_for_user(self, user_id: int):
        return self.model.objects.filter(user_id=user_id).order_by("-created_at", "-id")

    def list_all(self):
        return self.model.objects.select_related("user").order_by("-created_at", "-id")
