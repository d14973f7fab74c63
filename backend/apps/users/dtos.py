from dataclasses import dataclass
from typing import Optional

from .models import User


@dataclass
class UserDTO:
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    phone: str
    avatar_url: str
    is_staff: bool
    date_joined: Optional[str]


def user_to_dto(u: User) -> UserDTO:
    joined = getattr(u, "date_joined", None)
    return UserDTO(
        id=u.id,
        username=u.username,
        email=u.email,
        first_name=u.first_name or "",
        last_name=u.last_name or "",
        phone=getattr(u, "phone", "") or "",
        avatar_url=getattr(u, "avatar_url", "") or "",
        is_staff=bool(getattr(u, "is_staff", False)),
        date_joined=joined.isoformat() if joined is not None else None,
    )
