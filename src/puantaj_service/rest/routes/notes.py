"""Free-form notes shared within an organization."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from puantaj_service.db.deps import NotesRepoDep
from puantaj_service.errors import NotFound
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest import rules
from puantaj_service.rest.schemas import NoteSchema

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=list[NoteSchema])
async def list_notes(repo: NotesRepoDep, ctx: RequestContext = endpoint()) -> list[NoteSchema]:
    return [NoteSchema.model_validate(row) for row in await repo.list(ctx.identity.org_id)]


@router.post("", response_model=NoteSchema, status_code=201)
async def create_note(
    repo: NotesRepoDep, ctx: RequestContext = endpoint(rules.NOTE)
) -> NoteSchema:
    row = await repo.create(ctx.identity.org_id, content=ctx.body["content"])
    return NoteSchema.model_validate(row)


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: UUID, repo: NotesRepoDep, ctx: RequestContext = endpoint()
) -> Response:
    if not await repo.delete(ctx.identity.org_id, note_id):
        raise NotFound("Note not found")
    return Response(status_code=204)
