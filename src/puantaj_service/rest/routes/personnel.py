"""Personnel endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from puantaj_service.db.deps import PersonnelRepoDep
from puantaj_service.errors import NotFound
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest import rules
from puantaj_service.rest.schemas import PersonnelSchema
from puantaj_service.values import extract, parse_date

router = APIRouter(prefix="/personnel", tags=["personnel"])

COLUMNS = {
    "name": ("name", str.strip),
    "position": ("position", str.strip),
    "startDate": ("start_date", parse_date),
    "phone": ("phone", None),
    "email": ("email", None),
    "isActive": ("is_active", None),
}


@router.get("", response_model=list[PersonnelSchema])
async def list_personnel(
    repo: PersonnelRepoDep, ctx: RequestContext = endpoint()
) -> list[PersonnelSchema]:
    rows = await repo.list(ctx.identity.org_id)
    return [PersonnelSchema.model_validate(row) for row in rows]


@router.post("", response_model=PersonnelSchema, status_code=201)
async def create_personnel(
    repo: PersonnelRepoDep, ctx: RequestContext = endpoint(rules.PERSONNEL)
) -> PersonnelSchema:
    row = await repo.create(ctx.identity.org_id, **extract(ctx.body, COLUMNS))
    return PersonnelSchema.model_validate(row)


@router.get("/{personnel_id}", response_model=PersonnelSchema)
async def get_personnel(
    personnel_id: UUID, repo: PersonnelRepoDep, ctx: RequestContext = endpoint()
) -> PersonnelSchema:
    row = await repo.get(ctx.identity.org_id, personnel_id)
    if row is None:
        raise NotFound("Personnel not found")
    return PersonnelSchema.model_validate(row)


@router.put("/{personnel_id}", response_model=PersonnelSchema)
async def update_personnel(
    personnel_id: UUID,
    repo: PersonnelRepoDep,
    ctx: RequestContext = endpoint(rules.optional(rules.PERSONNEL)),
) -> PersonnelSchema:
    row = await repo.update(ctx.identity.org_id, personnel_id, **extract(ctx.body, COLUMNS))
    if row is None:
        raise NotFound("Personnel not found")
    return PersonnelSchema.model_validate(row)


@router.delete("/{personnel_id}", status_code=204)
async def delete_personnel(
    personnel_id: UUID, repo: PersonnelRepoDep, ctx: RequestContext = endpoint()
) -> Response:
    if not await repo.delete(ctx.identity.org_id, personnel_id):
        raise NotFound("Personnel not found")
    return Response(status_code=204)
