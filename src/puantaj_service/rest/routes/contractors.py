"""Contractor endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from puantaj_service.db.deps import ContractorsRepoDep
from puantaj_service.errors import NotFound
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest import rules
from puantaj_service.rest.schemas import ContractorSchema
from puantaj_service.values import extract, parse_amount

router = APIRouter(prefix="/contractors", tags=["contractors"])

COLUMNS = {
    "name": ("name", str.strip),
    "company": ("company", None),
    "phone": ("phone", None),
    "email": ("email", None),
    "status": ("status", None),
    "totalAmount": ("total_amount", parse_amount),
}


@router.get("", response_model=list[ContractorSchema])
async def list_contractors(
    repo: ContractorsRepoDep, ctx: RequestContext = endpoint()
) -> list[ContractorSchema]:
    return [ContractorSchema.model_validate(row) for row in await repo.list(ctx.identity.org_id)]


@router.post("", response_model=ContractorSchema, status_code=201)
async def create_contractor(
    repo: ContractorsRepoDep, ctx: RequestContext = endpoint(rules.CONTRACTOR)
) -> ContractorSchema:
    row = await repo.create(ctx.identity.org_id, **extract(ctx.body, COLUMNS))
    return ContractorSchema.model_validate(row)


@router.put("/{contractor_id}", response_model=ContractorSchema)
async def update_contractor(
    contractor_id: UUID,
    repo: ContractorsRepoDep,
    ctx: RequestContext = endpoint(rules.optional(rules.CONTRACTOR)),
) -> ContractorSchema:
    row = await repo.update(ctx.identity.org_id, contractor_id, **extract(ctx.body, COLUMNS))
    if row is None:
        raise NotFound("Contractor not found")
    return ContractorSchema.model_validate(row)


@router.delete("/{contractor_id}", status_code=204)
async def delete_contractor(
    contractor_id: UUID, repo: ContractorsRepoDep, ctx: RequestContext = endpoint()
) -> Response:
    if not await repo.delete(ctx.identity.org_id, contractor_id):
        raise NotFound("Contractor not found")
    return Response(status_code=204)
