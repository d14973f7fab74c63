from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from django.contrib.auth.hashers import make_password
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common import get_logger
from .protocols import UserRegistrationRepositoryProtocol

logger = get_logger(__name__).bind(component="auth", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]


class RegistrationService:
    def __init__(self, users: UserRegistrationRepositoryProtocol):
        self.users = users
        self.logger = logger.bind(service="RegistrationService")

    def _check_uniqueness(self, username: str, email: str) -> Optional[ErrorTuple]:
        if self.users.username_exists(username):
            self.logger.info(
                "Registration rejected: username already exists", username=username
            )
            return (
                "VALIDATION_ERROR",
                "Username already exists",
                {"username": username},
            )
        if self.users.email_exists(email):
            self.logger.info("Registration rejected: email already exists", email=email)
            return ("VALIDATION_ERROR", "Email already exists", {"email": email})
        return None

    def register(self, data: Dict[str, Any]):
        username = data["username"].strip()
        email = data["email"].strip().lower()
        self.logger.debug("Received registration request", username=username)
        conflict = self._check_uniqueness(username, email)
        if conflict:
            return conflict
        user = self.users.create_user(
            username=username,
            email=email,
            password=make_password(data["password"]),
            first_name=data.get("first_name", "").strip(),
            last_name=data.get("last_name", "").strip(),
            phone=data.get("phone", "").strip(),
        )
        self.logger.info(
            "User registered successfully", user_id=user.id, username=user.username
        )
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
        }


class SessionService:
    def __init__(self, token_class=RefreshToken):
        self.token_class = token_class
        self.logger = logger.bind(service="SessionService")

    def logout(self, refresh_token: Optional[str], actor_id: Optional[int]) -> Optional[ErrorTuple]:
        """Sign out by blacklisting the refresh token."""
        if not refresh_token:
            self.logger.warning("Logout rejected: missing refresh token", actor_id=actor_id)
            return ("VALIDATION_ERROR", "Invalid token", {"refresh": None})
        try:
            token = self.token_class(refresh_token)
            token.blacklist()
        except TokenError as exc:
            self.logger.warning(
                "Logout failed: token error", actor_id=actor_id, error=str(exc)
            )
            return ("VALIDATION_ERROR", "Invalid token", {"error": str(exc)})
        self.logger.info("User logged out", actor_id=actor_id)
        return None
