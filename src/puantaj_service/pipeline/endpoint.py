"""The per-request pipeline every API route runs through.

    body parser -> validator -> session resolver -> route guard -> handler

``endpoint(...)`` builds one FastAPI dependency that runs those stages in
order and hands the handler a ``RequestContext``. A stage that fails raises
an ``AppError``; the error handlers in ``rest.errors`` turn it into the
response, so later stages never run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, Request

from puantaj_service.auth.deps import (
    SessionStoreDep,
    authorize,
    bearer_token,
    resolve_identity,
)
from puantaj_service.auth.models import ANONYMOUS, Identity, Role
from puantaj_service.db.deps import UsersRepoDep
from puantaj_service.pipeline.body import parse_body
from puantaj_service.pipeline.validation import RuleSet, validate


@dataclass
class RequestContext:
    body: dict[str, Any] = field(default_factory=dict)
    identity: Identity = ANONYMOUS
    token: str | None = None


async def _parse_and_validate(request: Request, rules: RuleSet | None) -> dict[str, Any]:
    body = parse_body(await request.body(), request.headers.get("content-type"))
    if rules:
        validate(body, rules)
    return body


def endpoint(
    rules: RuleSet | None = None,
    *,
    auth: bool = True,
    roles: tuple[Role, ...] = (),
):
    """Dependency factory for a route's pipeline.

    ``auth=False`` makes the route public: no session lookup happens and the
    handler sees the anonymous identity. ``roles`` restricts an authenticated
    route to identities satisfying at least one of the given roles.
    """
    if not auth:
        if roles:
            raise ValueError("a public endpoint cannot require roles")

        async def _public(request: Request) -> RequestContext:
            body = await _parse_and_validate(request, rules)
            return RequestContext(body=body, token=bearer_token(request))

        return Depends(_public)

    async def _protected(
        request: Request, store: SessionStoreDep, users: UsersRepoDep
    ) -> RequestContext:
        body = await _parse_and_validate(request, rules)
        token = bearer_token(request)
        identity = await resolve_identity(token, store, users)
        authorize(identity, roles)
        return RequestContext(body=body, identity=identity, token=token)

    return Depends(_protected)
