"""Personnel payment endpoints.

Creating a payment also books an expense transaction; deleting it removes
that transaction. See ``PaymentsRepo`` for the atomicity guarantee.
"""

from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, Response

from puantaj_service.db.deps import PaymentsRepoDep, PersonnelRepoDep
from puantaj_service.errors import NotFound
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest import rules
from puantaj_service.rest.schemas import PersonnelPaymentSchema
from puantaj_service.values import parse_amount, parse_date

router = APIRouter(prefix="/personnel-payments", tags=["payments"])

log = structlog.get_logger(__name__)


@router.get("", response_model=list[PersonnelPaymentSchema])
async def list_payments(
    repo: PaymentsRepoDep, ctx: RequestContext = endpoint()
) -> list[PersonnelPaymentSchema]:
    rows = await repo.list(ctx.identity.org_id)
    return [PersonnelPaymentSchema.model_validate(row) for row in rows]


@router.get("/personnel/{personnel_id}", response_model=list[PersonnelPaymentSchema])
async def list_personnel_payments(
    personnel_id: UUID, repo: PaymentsRepoDep, ctx: RequestContext = endpoint()
) -> list[PersonnelPaymentSchema]:
    rows = await repo.list_by_personnel(ctx.identity.org_id, personnel_id)
    return [PersonnelPaymentSchema.model_validate(row) for row in rows]


@router.post("", response_model=PersonnelPaymentSchema, status_code=201)
async def create_payment(
    repo: PaymentsRepoDep,
    personnel: PersonnelRepoDep,
    ctx: RequestContext = endpoint(rules.PERSONNEL_PAYMENT),
) -> PersonnelPaymentSchema:
    body = ctx.body
    org_id = ctx.identity.org_id
    person = await personnel.get(org_id, UUID(body["personnelId"]))
    if person is None:
        raise NotFound("Personnel not found")

    payment = await repo.create_with_transaction(
        org_id=org_id,
        personnel_id=person.id,
        personnel_name=person.name,
        amount=parse_amount(body["amount"]),
        payment_date=parse_date(body["paymentDate"]),
        payment_type=body["paymentType"],
        description=body.get("description"),
        notes=body.get("notes"),
    )
    log.info(
        "payment_recorded",
        payment_id=str(payment.id),
        transaction_id=str(payment.transaction_id),
    )
    return PersonnelPaymentSchema.model_validate(payment)


@router.delete("/{payment_id}", status_code=204)
async def delete_payment(
    payment_id: UUID, repo: PaymentsRepoDep, ctx: RequestContext = endpoint()
) -> Response:
    if not await repo.delete_with_transaction(ctx.identity.org_id, payment_id):
        raise NotFound("Payment not found")
    return Response(status_code=204)
