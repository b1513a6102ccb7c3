"""Notification endpoints for the signed-in user."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from puantaj_service.db.deps import NotificationsRepoDep
from puantaj_service.errors import NotFound
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest.schemas import NotificationSchema

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationSchema])
async def list_notifications(
    repo: NotificationsRepoDep,
    ctx: RequestContext = endpoint(),
    unread_only: Annotated[bool, Query(alias="unreadOnly")] = False,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[NotificationSchema]:
    rows = await repo.list_for_user(ctx.identity.user_id, unread_only=unread_only, limit=limit)
    return [NotificationSchema.model_validate(row) for row in rows]


@router.patch("/{notification_id}/read", response_model=NotificationSchema)
async def mark_notification_read(
    notification_id: UUID, repo: NotificationsRepoDep, ctx: RequestContext = endpoint()
) -> NotificationSchema:
    row = await repo.mark_read(ctx.identity.user_id, notification_id)
    if row is None:
        raise NotFound("Notification not found")
    return NotificationSchema.model_validate(row)
