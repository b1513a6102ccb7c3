"""Repository for users and their organizations."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from puantaj_service.auth.models import Role, role_satisfies
from puantaj_service.auth.passwords import hash_password
from puantaj_service.db.models import OrganizationModel, UserModel
from puantaj_service.errors import Conflict

EMAIL_TAKEN = "User with this email already exists"


class UsersRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_user(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        org_name: str,
        role: str = "USER",
    ) -> UserModel:
        """Create a user together with the organization it owns."""
        org = OrganizationModel(name=org_name)
        self._session.add(org)
        await self._session.flush()

        user = UserModel(
            org_id=org.id,
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        self._session.add(user)
        await self._commit()
        await self._session.refresh(user)
        return user

    async def _commit(self) -> None:
        # users.email is the only unique column a write here can collide on
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            raise Conflict(EMAIL_TAKEN) from exc

    async def get_by_id(self, user_id: UUID) -> UserModel | None:
        return await self._session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> UserModel | None:
        result = await self._session.execute(select(UserModel).where(UserModel.email == email))
        return result.scalars().first()

    async def update(self, user_id: UUID, **fields: Any) -> UserModel | None:
        user = await self.get_by_id(user_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        await self._commit()
        await self._session.refresh(user)
        return user

    async def list(self, limit: int = 50, offset: int = 0) -> tuple[list[UserModel], int]:
        query = select(UserModel).order_by(UserModel.created_at.desc()).offset(offset).limit(limit)
        result = await self._session.execute(query)
        total = await self._session.execute(select(func.count()).select_from(UserModel))
        return list(result.scalars().all()), total.scalar_one()

    async def list_active_ids(self) -> list[UUID]:
        result = await self._session.execute(
            select(UserModel.id).where(UserModel.is_active.is_(True))
        )
        return list(result.scalars().all())

    async def stats(self) -> dict[str, int]:
        def count(*criteria):
            return select(func.count()).select_from(UserModel).where(*criteria)

        total = await self._session.execute(count())
        active = await self._session.execute(count(UserModel.is_active.is_(True)))
        verified = await self._session.execute(count(UserModel.is_verified.is_(True)))
        admin_roles = [role.value for role in Role if role_satisfies(role, Role.ADMIN)]
        admins = await self._session.execute(count(UserModel.role.in_(admin_roles)))
        return {
            "total_users": total.scalar_one(),
            "active_users": active.scalar_one(),
            "verified_users": verified.scalar_one(),
            "admin_users": admins.scalar_one(),
        }
