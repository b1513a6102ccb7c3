"""FastAPI dependency injection for database sessions and repositories."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from puantaj_service.db.engine import get_session_factory
from puantaj_service.db.repositories.ledger import PaymentsRepo, TransactionsRepo
from puantaj_service.db.repositories.notifications import NotificationsRepo
from puantaj_service.db.repositories.records import (
    ContractorsRepo,
    NotesRepo,
    PersonnelRepo,
    ProjectsRepo,
    TimesheetsRepo,
)
from puantaj_service.db.repositories.users import UsersRepo


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield an async DB session, auto-closing on exit."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_users_repo(session: SessionDep) -> UsersRepo:
    return UsersRepo(session)


def get_personnel_repo(session: SessionDep) -> PersonnelRepo:
    return PersonnelRepo(session)


def get_projects_repo(session: SessionDep) -> ProjectsRepo:
    return ProjectsRepo(session)


def get_timesheets_repo(session: SessionDep) -> TimesheetsRepo:
    return TimesheetsRepo(session)


def get_contractors_repo(session: SessionDep) -> ContractorsRepo:
    return ContractorsRepo(session)


def get_notes_repo(session: SessionDep) -> NotesRepo:
    return NotesRepo(session)


def get_transactions_repo(session: SessionDep) -> TransactionsRepo:
    return TransactionsRepo(session)


def get_payments_repo(session: SessionDep) -> PaymentsRepo:
    return PaymentsRepo(session)


def get_notifications_repo(session: SessionDep) -> NotificationsRepo:
    return NotificationsRepo(session)


UsersRepoDep = Annotated[UsersRepo, Depends(get_users_repo)]
PersonnelRepoDep = Annotated[PersonnelRepo, Depends(get_personnel_repo)]
ProjectsRepoDep = Annotated[ProjectsRepo, Depends(get_projects_repo)]
TimesheetsRepoDep = Annotated[TimesheetsRepo, Depends(get_timesheets_repo)]
ContractorsRepoDep = Annotated[ContractorsRepo, Depends(get_contractors_repo)]
NotesRepoDep = Annotated[NotesRepo, Depends(get_notes_repo)]
TransactionsRepoDep = Annotated[TransactionsRepo, Depends(get_transactions_repo)]
PaymentsRepoDep = Annotated[PaymentsRepo, Depends(get_payments_repo)]
NotificationsRepoDep = Annotated[NotificationsRepo, Depends(get_notifications_repo)]
