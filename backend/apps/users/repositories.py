from apps.common.repository import GenericRepository
from .models import User


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)

    def list(self, **filters):
        return self.model.objects.filter(**filters).order_by("id")

    def update_profile(self, user: User, **fields) -> User:
        changed = {k: v for k, v in fields.items() if v is not None}
        if not changed:
            return user
        return self.update(user, **changed)
