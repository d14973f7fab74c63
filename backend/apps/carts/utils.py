from __future__ import annotations

from typing import Optional

from django.conf import settings

from apps.common import get_logger

logger = get_logger(__name__).bind(component="carts", layer="utils")


def build_storage_key(
    *, user_id: Optional[int] = None, session_key: Optional[str] = None
) -> str:
    """Storage key for a cart owner, e.g. ``cart-storage:user:7``."""
    namespace = getattr(settings, "CART_STORAGE_NAMESPACE", "cart-storage")
    if user_id is not None:
        return f"{namespace}:user:{int(user_id)}"
    if not session_key:
        raise ValueError("An anonymous cart needs a session key")
    return f"{namespace}:session:{session_key}"


def resolve_cart_key(request) -> str:
    """
    Authenticated callers own a per-user cart. Anonymous visitors get a cart
    bound to their session, which is created on first use.
    """
    user = getattr(request, "user", None)
    if user is not None and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return build_storage_key(user_id=user.id)
    session = request.session
    if not session.session_key:
        session.save()
        logger.debug("Started anonymous cart session", session_key=session.session_key)
    return build_storage_key(session_key=session.session_key)
