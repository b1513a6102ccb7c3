"""Admin panel endpoints."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Query

from puantaj_service.auth.models import Identity, Role, role_satisfies
from puantaj_service.db.deps import NotificationsRepoDep, UsersRepoDep
from puantaj_service.db.models import UserModel
from puantaj_service.db.repositories.users import UsersRepo
from puantaj_service.errors import Conflict, Forbidden, NotFound
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest import rules
from puantaj_service.rest.schemas import (
    DashboardStatsSchema,
    NotificationsCreatedResponse,
    UserListResponse,
    UserSchema,
)

router = APIRouter(prefix="/admin", tags=["admin"])

log = structlog.get_logger(__name__)

ADMIN = (Role.ADMIN,)
SUPER_ADMIN = (Role.SUPER_ADMIN,)


async def _target_user(repo: UsersRepo, actor: Identity, user_id: UUID) -> UserModel:
    """Load a user the actor is allowed to manage."""
    if user_id == actor.user_id:
        raise Conflict("Administrators cannot change their own account here")
    user = await repo.get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    if not role_satisfies(actor.role, user.role):
        raise Forbidden()
    return user


@router.get("/users", response_model=UserListResponse)
async def list_users(
    repo: UsersRepoDep,
    ctx: RequestContext = endpoint(roles=ADMIN),
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> UserListResponse:
    users, total = await repo.list(limit=limit, offset=offset)
    return UserListResponse(users=[UserSchema.from_user(u) for u in users], total=total)


@router.put("/users/{user_id}/active", response_model=UserSchema)
async def set_user_active(
    user_id: UUID,
    repo: UsersRepoDep,
    ctx: RequestContext = endpoint(rules.USER_ACTIVE, roles=ADMIN),
) -> UserSchema:
    await _target_user(repo, ctx.identity, user_id)
    user = await repo.update(user_id, is_active=ctx.body["isActive"])
    log.info(
        "user_active_changed",
        actor_id=str(ctx.identity.user_id),
        user_id=str(user_id),
        is_active=user.is_active,
    )
    return UserSchema.from_user(user)


@router.put("/users/{user_id}/role", response_model=UserSchema)
async def set_user_role(
    user_id: UUID,
    repo: UsersRepoDep,
    ctx: RequestContext = endpoint(rules.USER_ROLE, roles=SUPER_ADMIN),
) -> UserSchema:
    await _target_user(repo, ctx.identity, user_id)
    user = await repo.update(user_id, role=ctx.body["role"])
    log.info(
        "user_role_changed",
        actor_id=str(ctx.identity.user_id),
        user_id=str(user_id),
        role=user.role,
    )
    return UserSchema.from_user(user)


@router.post("/notifications", response_model=NotificationsCreatedResponse, status_code=201)
async def send_notification(
    users: UsersRepoDep,
    notifications: NotificationsRepoDep,
    ctx: RequestContext = endpoint(rules.NOTIFICATION, roles=ADMIN),
) -> NotificationsCreatedResponse:
    """Notify one user (``userId``) or every active user."""
    body = ctx.body
    if body.get("userId"):
        recipient = await users.get_by_id(UUID(body["userId"]))
        if recipient is None:
            raise NotFound("User not found")
        recipients = [recipient.id]
    else:
        recipients = await users.list_active_ids()

    created = await notifications.create_many(
        recipients,
        title=body["title"],
        message=body["message"],
        type=body.get("type") or "info",
    )
    return NotificationsCreatedResponse(created=created)


@router.get("/dashboard-stats", response_model=DashboardStatsSchema)
async def dashboard_stats(
    repo: UsersRepoDep, ctx: RequestContext = endpoint(roles=ADMIN)
) -> DashboardStatsSchema:
    return DashboardStatsSchema.model_validate(await repo.stats())
