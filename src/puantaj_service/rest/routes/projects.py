"""Project endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from puantaj_service.db.deps import ProjectsRepoDep
from puantaj_service.errors import NotFound
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest import rules
from puantaj_service.rest.schemas import ProjectSchema
from puantaj_service.values import extract, parse_amount, parse_date

router = APIRouter(prefix="/projects", tags=["projects"])

COLUMNS = {
    "name": ("name", str.strip),
    "type": ("type", None),
    "amount": ("amount", parse_amount),
    "status": ("status", None),
    "description": ("description", None),
    "clientName": ("client_name", None),
    "startDate": ("start_date", parse_date),
    "endDate": ("end_date", parse_date),
}


@router.get("", response_model=list[ProjectSchema])
async def list_projects(
    repo: ProjectsRepoDep, ctx: RequestContext = endpoint()
) -> list[ProjectSchema]:
    return [ProjectSchema.model_validate(row) for row in await repo.list(ctx.identity.org_id)]


@router.post("", response_model=ProjectSchema, status_code=201)
async def create_project(
    repo: ProjectsRepoDep, ctx: RequestContext = endpoint(rules.PROJECT)
) -> ProjectSchema:
    row = await repo.create(ctx.identity.org_id, **extract(ctx.body, COLUMNS))
    return ProjectSchema.model_validate(row)


@router.put("/{project_id}", response_model=ProjectSchema)
async def update_project(
    project_id: UUID,
    repo: ProjectsRepoDep,
    ctx: RequestContext = endpoint(rules.optional(rules.PROJECT)),
) -> ProjectSchema:
    row = await repo.update(ctx.identity.org_id, project_id, **extract(ctx.body, COLUMNS))
    if row is None:
        raise NotFound("Project not found")
    return ProjectSchema.model_validate(row)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: UUID, repo: ProjectsRepoDep, ctx: RequestContext = endpoint()
) -> Response:
    if not await repo.delete(ctx.identity.org_id, project_id):
        raise NotFound("Project not found")
    return Response(status_code=204)
