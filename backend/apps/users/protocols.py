from __future__ import annotations

from typing import Iterable, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.users.models import User


class UserRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable["User"]: ...

    def get(self, **filters) -> Optional["User"]: ...

    def update_profile(self, user: "User", **fields) -> "User": ...
