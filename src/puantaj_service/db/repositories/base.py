"""Common CRUD for records owned by an organization."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


class TenantRepo:
    """CRUD scoped to one organization.

    Every query filters on ``org_id``, so a record from another tenant is
    indistinguishable from a missing one.
    """

    model: Any

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list(self, org_id: UUID) -> list[Any]:
        result = await self._session.execute(
            select(self.model)
            .where(self.model.org_id == org_id)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, org_id: UUID, record_id: UUID) -> Any | None:
        result = await self._session.execute(
            select(self.model).where(self.model.id == record_id, self.model.org_id == org_id)
        )
        return result.scalars().first()

    async def create(self, org_id: UUID, **fields: Any) -> Any:
        record = self.model(org_id=org_id, **fields)
        self._session.add(record)
        await self._session.commit()
        await self._session.refresh(record)
        return record

    async def update(self, org_id: UUID, record_id: UUID, **fields: Any) -> Any | None:
        record = await self.get(org_id, record_id)
        if record is None:
            return None
        for key, value in fields.items():
            setattr(record, key, value)
        await self._session.commit()
        await self._session.refresh(record)
        return record

    async def delete(self, org_id: UUID, record_id: UUID) -> bool:
        record = await self.get(org_id, record_id)
        if record is None:
            return False
        await self._session.delete(record)
        await self._session.commit()
        return True
