from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from apps.common import get_logger
from .dtos import UserDTO, user_to_dto
from .protocols import UserRepositoryProtocol

logger = get_logger(__name__).bind(component="users", layer="service")

PROFILE_FIELDS = ("first_name", "last_name", "phone", "avatar_url")


class UserService:
    def __init__(self, users: UserRepositoryProtocol):
        self.users = users
        self.logger = logger.bind(service="UserService")

    def list_users(self):
        self.logger.debug("Listing users")
        return [user_to_dto(u) for u in self.users.list()]

    def get_user(self, user_id: int) -> Optional[UserDTO]:
        self.logger.debug("Fetching user", user_id=user_id)
        user = self.users.get(id=user_id)
        if not user:
            self.logger.info("User not found", user_id=user_id)
            return None
        return user_to_dto(user)

    def get_user_with_access(
        self, user_id: int, *, actor_id: Optional[int], is_privileged: bool
    ) -> Tuple[Optional[UserDTO], Optional[Tuple[str, str, Optional[Dict[str, Any]]]]]:
        if not is_privileged and actor_id != user_id:
            self.logger.warning(
                "User lookup forbidden", actor_id=actor_id, user_id=user_id
            )
            return None, (
                "FORBIDDEN",
                "You do not have permission to view this user",
                {"id": str(user_id)},
            )
        dto = self.get_user(user_id)
        if not dto:
            return None, ("NOT_FOUND", "User not found", {"id": str(user_id)})
        return dto, None

    def update_profile(self, user_id: int, data: Dict[str, Any]) -> Optional[UserDTO]:
        """Apply the editable profile fields; unknown keys are ignored."""
        user = self.users.get(id=user_id)
        if not user:
            self.logger.warning("Profile update failed: user missing", user_id=user_id)
            return None
        fields = {k: data.get(k) for k in PROFILE_FIELDS if k in data}
        self.logger.info("Updating profile", user_id=user_id, fields=sorted(fields))
        user = self.users.update_profile(user, **fields)
        return user_to_dto(user)
