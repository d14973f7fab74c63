from __future__ import annotations

from rest_framework_simplejwt.tokens import RefreshToken

from .repositories import UserRegistrationRepository
from .services import RegistrationService, SessionService


def build_registration_service() -> RegistrationService:
    return RegistrationService(users=UserRegistrationRepository())


def build_session_service() -> SessionService:
    return SessionService(token_class=RefreshToken)
