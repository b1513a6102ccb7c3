"""Auth endpoints: register, login, logout, refresh, current user, profile."""

from __future__ import annotations

import structlog
from fastapi import APIRouter

from puantaj_service.auth.deps import SessionStoreDep
from puantaj_service.auth.passwords import verify_password
from puantaj_service.db.deps import UsersRepoDep
from puantaj_service.db.repositories.users import EMAIL_TAKEN
from puantaj_service.errors import (
    Conflict,
    FieldViolation,
    Forbidden,
    NotFound,
    Unauthenticated,
    ValidationFailed,
)
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest import rules
from puantaj_service.rest.schemas import AuthResponse, MessageResponse, UserSchema
from puantaj_service.values import extract

router = APIRouter(prefix="/auth", tags=["auth"])

log = structlog.get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    repo: UsersRepoDep,
    sessions: SessionStoreDep,
    ctx: RequestContext = endpoint(rules.REGISTER, auth=False),
) -> AuthResponse:
    """Create a user (and its organization) and open a session."""
    body = ctx.body
    email = normalize_email(body["email"])
    if await repo.get_by_email(email):
        raise Conflict(EMAIL_TAKEN)

    first_name = body["firstName"].strip()
    last_name = body["lastName"].strip()
    user = await repo.create_user(
        email=email,
        password=body["password"],
        first_name=first_name,
        last_name=last_name,
        org_name=(body.get("companyName") or f"{first_name} {last_name}").strip(),
    )
    token = await sessions.create(user.id)
    log.info("user_registered", user_id=str(user.id))
    return AuthResponse(
        message="User created successfully", token=token, user=UserSchema.from_user(user)
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    repo: UsersRepoDep,
    sessions: SessionStoreDep,
    ctx: RequestContext = endpoint(rules.LOGIN, auth=False),
) -> AuthResponse:
    """Verify credentials and open a session."""
    user = await repo.get_by_email(normalize_email(ctx.body["email"]))
    if not user or not verify_password(ctx.body["password"], user.password_hash):
        raise Unauthenticated("Invalid email or password")
    if not user.is_active:
        raise Forbidden("Account is deactivated")

    token = await sessions.create(user.id)
    log.info("user_logged_in", user_id=str(user.id))
    return AuthResponse(message="Login successful", token=token, user=UserSchema.from_user(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    sessions: SessionStoreDep,
    ctx: RequestContext = endpoint(auth=False),
) -> MessageResponse:
    """End the presented session. Succeeds even without one."""
    if ctx.token:
        await sessions.invalidate(ctx.token)
    return MessageResponse(message="Logged out")


@router.post("/refresh", response_model=MessageResponse)
async def refresh(
    sessions: SessionStoreDep,
    ctx: RequestContext = endpoint(),
) -> MessageResponse:
    """Restart the expiry window of the presented session."""
    if not await sessions.extend(ctx.token):
        raise Unauthenticated("Invalid or expired session")
    return MessageResponse(message="Session extended")


@router.get("/user", response_model=UserSchema)
async def current_user(
    repo: UsersRepoDep,
    ctx: RequestContext = endpoint(),
) -> UserSchema:
    user = await repo.get_by_id(ctx.identity.user_id)
    if user is None:
        raise NotFound("User not found")
    return UserSchema.from_user(user)


@router.put("/profile", response_model=UserSchema)
async def update_profile(
    repo: UsersRepoDep,
    ctx: RequestContext = endpoint(rules.PROFILE_UPDATE),
) -> UserSchema:
    fields = extract(
        {key: value for key, value in ctx.body.items() if value not in ("", None)},
        {
            "firstName": ("first_name", str.strip),
            "lastName": ("last_name", str.strip),
            "email": ("email", normalize_email),
        },
    )
    if not fields:
        raise ValidationFailed(
            [FieldViolation("body", "No valid fields provided for update", ctx.body)]
        )

    if "email" in fields:
        existing = await repo.get_by_email(fields["email"])
        if existing and existing.id != ctx.identity.user_id:
            raise Conflict(EMAIL_TAKEN)

    user = await repo.update(ctx.identity.user_id, **fields)
    if user is None:
        raise NotFound("User not found")
    return UserSchema.from_user(user)
