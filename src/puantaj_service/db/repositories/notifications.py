"""Repository for user notifications."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from puantaj_service.db.models import NotificationModel


class NotificationsRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(
        self, user_id: UUID, unread_only: bool = False, limit: int = 50
    ) -> list[NotificationModel]:
        query = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if unread_only:
            query = query.where(NotificationModel.is_read.is_(False))
        query = query.order_by(NotificationModel.created_at.desc()).limit(limit)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def mark_read(self, user_id: UUID, notification_id: UUID) -> NotificationModel | None:
        result = await self._session.execute(
            select(NotificationModel).where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
        )
        notification = result.scalars().first()
        if notification is None:
            return None
        notification.is_read = True
        await self._session.commit()
        await self._session.refresh(notification)
        return notification

    async def create_many(
        self, user_ids: Iterable[UUID], title: str, message: str, type: str = "info"
    ) -> int:
        rows = [
            NotificationModel(user_id=user_id, title=title, message=message, type=type)
            for user_id in user_ids
        ]
        self._session.add_all(rows)
        await self._session.commit()
        return len(rows)
