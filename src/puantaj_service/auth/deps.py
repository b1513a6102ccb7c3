"""Session resolution and role gating."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated

import structlog
from fastapi import Depends, Request

from puantaj_service.auth.models import Identity, Role, role_satisfies
from puantaj_service.auth.sessions import SessionStore
from puantaj_service.db.repositories.users import UsersRepo
from puantaj_service.errors import Forbidden, Unauthenticated

log = structlog.get_logger(__name__)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]


def bearer_token(request: Request) -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, if any."""
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header.removeprefix("Bearer ").strip() or None


async def resolve_identity(
    token: str | None, store: SessionStore, users: UsersRepo
) -> Identity:
    """Map a bearer token to the identity of an active user.

    Raises Unauthenticated for a missing token, an unknown or expired
    session, or a session whose user no longer exists or was deactivated.
    """
    if token is None:
        raise Unauthenticated()

    user_id = await store.resolve(token)
    if user_id is None:
        raise Unauthenticated("Invalid or expired session")

    user = await users.get_by_id(user_id)
    if user is None or not user.is_active:
        log.info("session_user_unavailable", user_id=str(user_id))
        raise Unauthenticated("Invalid or expired session")

    return Identity.from_user(user)


def authorize(identity: Identity, roles: Iterable[Role]) -> Identity:
    """Pass identities holding (or outranking) any of ``roles``."""
    if not identity.is_authenticated:
        raise Unauthenticated()
    required = list(roles)
    if required and not any(role_satisfies(identity.role, role) for role in required):
        log.info(
            "access_denied",
            user_id=str(identity.user_id),
            role=identity.role.value if identity.role else None,
            required=[role.value for role in required],
        )
        raise Forbidden()
    return identity
