"""Repositories for personnel, projects, timesheets, contractors and notes."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import select

from puantaj_service.db.models import (
    ContractorModel,
    NoteModel,
    PersonnelModel,
    ProjectModel,
    TimesheetModel,
)
from puantaj_service.db.repositories.base import TenantRepo


class PersonnelRepo(TenantRepo):
    model = PersonnelModel


class ProjectsRepo(TenantRepo):
    model = ProjectModel


class TimesheetsRepo(TenantRepo):
    model = TimesheetModel

    async def list_by_personnel(self, org_id: UUID, personnel_id: UUID) -> list[Any]:
        result = await self._session.execute(
            select(TimesheetModel)
            .where(TimesheetModel.org_id == org_id, TimesheetModel.personnel_id == personnel_id)
            .order_by(TimesheetModel.date.desc())
        )
        return list(result.scalars().all())


class ContractorsRepo(TenantRepo):
    model = ContractorModel


class NotesRepo(TenantRepo):
    model = NoteModel
