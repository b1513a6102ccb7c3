"""Auth domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID


class Role(str, Enum):
    """Privilege levels, lowest first."""
    USER = "USER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


_RANK = {Role.USER: 0, Role.ADMIN: 1, Role.SUPER_ADMIN: 2}


def role_satisfies(actual: Role | str | None, required: Role | str) -> bool:
    """True when ``actual`` is ``required`` or ranks above it.

    This is the only place roles are compared; anything that needs to know
    whether a user "is an admin" goes through here.
    """
    if actual is None:
        return False
    try:
        return _RANK[Role(actual)] >= _RANK[Role(required)]
    except ValueError:
        return False


@dataclass(frozen=True)
class Identity:
    user_id: UUID | None
    org_id: UUID | None = None
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: Role | None = None
    subscription_tier: str = "free"

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return role_satisfies(self.role, Role.ADMIN)

    @classmethod
    def from_user(cls, user: Any) -> Identity:
        return cls(
            user_id=user.id,
            org_id=user.org_id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=Role(user.role),
            subscription_tier=user.subscription_tier,
        )


ANONYMOUS = Identity(user_id=None)
