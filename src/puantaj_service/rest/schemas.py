"""Pydantic response models for the REST API.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from puantaj_service.auth.models import Role, role_satisfies
from puantaj_service.values import format_amount

Money = Annotated[Decimal, PlainSerializer(format_amount, return_type=str)]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserSchema(ApiModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    role: str
    is_admin: bool
    subscription_tier: str
    is_active: bool
    is_verified: bool
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user: Any) -> UserSchema:
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            is_admin=role_satisfies(user.role, Role.ADMIN),
            subscription_tier=user.subscription_tier,
            is_active=user.is_active,
            is_verified=user.is_verified,
            created_at=user.created_at,
        )


class AuthResponse(ApiModel):
    message: str
    token: str
    user: UserSchema


class MessageResponse(ApiModel):
    success: bool = True
    message: str | None = None


class UserListResponse(ApiModel):
    users: list[UserSchema]
    total: int


class PersonnelSchema(ApiModel):
    id: UUID
    name: str
    position: str
    start_date: date
    phone: str | None = None
    email: str | None = None
    is_active: bool = True
    created_at: datetime | None = None


class ProjectSchema(ApiModel):
    id: UUID
    name: str
    type: str
    amount: Money
    status: str
    description: str | None = None
    client_name: str | None = None
    start_date: date
    end_date: date | None = None
    created_at: datetime | None = None


class TimesheetSchema(ApiModel):
    id: UUID
    personnel_id: UUID
    date: date
    start_time: str
    end_time: str
    total_hours: Money
    notes: str | None = None
    created_at: datetime | None = None


class TransactionSchema(ApiModel):
    id: UUID
    type: str
    amount: Money
    description: str
    category: str | None = None
    date: date
    created_at: datetime | None = None


class PersonnelPaymentSchema(ApiModel):
    id: UUID
    personnel_id: UUID
    transaction_id: UUID | None = None
    amount: Money
    payment_date: date
    payment_type: str
    description: str | None = None
    notes: str | None = None
    created_at: datetime | None = None


class ContractorSchema(ApiModel):
    id: UUID
    name: str
    company: str | None = None
    phone: str | None = None
    email: str | None = None
    status: str
    total_amount: Money
    created_at: datetime | None = None


class NoteSchema(ApiModel):
    id: UUID
    content: str
    created_at: datetime | None = None


class NotificationSchema(ApiModel):
    id: UUID
    title: str
    message: str
    type: str
    is_read: bool
    created_at: datetime | None = None


class NotificationsCreatedResponse(ApiModel):
    created: int


class ProjectTotals(ApiModel):
    total: Money
    active: int = 0
    passive: int = 0
    completed: int = 0


class ContractorTotals(ApiModel):
    total: Money
    active: int = 0
    completed: int = 0


class FinancialSummarySchema(ApiModel):
    total_income: Money
    total_expenses: Money
    net_balance: Money
    given_projects: ProjectTotals
    received_projects: ProjectTotals
    contractors: ContractorTotals


class DashboardStatsSchema(ApiModel):
    total_users: int
    active_users: int
    verified_users: int
    admin_users: int


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    environment: str
