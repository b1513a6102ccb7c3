"""Timesheet endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from puantaj_service.db.deps import PersonnelRepoDep, TimesheetsRepoDep
from puantaj_service.errors import NotFound
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest import rules
from puantaj_service.rest.schemas import TimesheetSchema
from puantaj_service.values import extract, hours_between, parse_date, parse_hours

router = APIRouter(prefix="/timesheets", tags=["timesheets"])

COLUMNS = {
    "personnelId": ("personnel_id", UUID),
    "date": ("date", parse_date),
    "startTime": ("start_time", None),
    "endTime": ("end_time", None),
    "totalHours": ("total_hours", parse_hours),
    "notes": ("notes", None),
}


@router.get("", response_model=list[TimesheetSchema])
async def list_timesheets(
    repo: TimesheetsRepoDep, ctx: RequestContext = endpoint()
) -> list[TimesheetSchema]:
    return [TimesheetSchema.model_validate(row) for row in await repo.list(ctx.identity.org_id)]


@router.get("/personnel/{personnel_id}", response_model=list[TimesheetSchema])
async def list_personnel_timesheets(
    personnel_id: UUID, repo: TimesheetsRepoDep, ctx: RequestContext = endpoint()
) -> list[TimesheetSchema]:
    rows = await repo.list_by_personnel(ctx.identity.org_id, personnel_id)
    return [TimesheetSchema.model_validate(row) for row in rows]


@router.post("", response_model=TimesheetSchema, status_code=201)
async def create_timesheet(
    repo: TimesheetsRepoDep,
    personnel: PersonnelRepoDep,
    ctx: RequestContext = endpoint(rules.TIMESHEET),
) -> TimesheetSchema:
    fields = extract(ctx.body, COLUMNS)
    if await personnel.get(ctx.identity.org_id, fields["personnel_id"]) is None:
        raise NotFound("Personnel not found")
    if fields.get("total_hours") is None:
        fields["total_hours"] = hours_between(fields["start_time"], fields["end_time"])

    row = await repo.create(ctx.identity.org_id, **fields)
    return TimesheetSchema.model_validate(row)


@router.delete("/{timesheet_id}", status_code=204)
async def delete_timesheet(
    timesheet_id: UUID, repo: TimesheetsRepoDep, ctx: RequestContext = endpoint()
) -> Response:
    if not await repo.delete(ctx.identity.org_id, timesheet_id):
        raise NotFound("Timesheet not found")
    return Response(status_code=204)
