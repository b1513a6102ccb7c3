"""Ledger transaction endpoints and the financial summary."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response

from puantaj_service.db.deps import ContractorsRepoDep, ProjectsRepoDep, TransactionsRepoDep
from puantaj_service.errors import NotFound
from puantaj_service.finance import summarize
from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest import rules
from puantaj_service.rest.schemas import FinancialSummarySchema, TransactionSchema
from puantaj_service.values import extract, parse_amount, parse_date

router = APIRouter(tags=["transactions"])

COLUMNS = {
    "type": ("type", None),
    "amount": ("amount", parse_amount),
    "description": ("description", str.strip),
    "category": ("category", None),
    "date": ("date", parse_date),
}


@router.get("/transactions", response_model=list[TransactionSchema])
async def list_transactions(
    repo: TransactionsRepoDep, ctx: RequestContext = endpoint()
) -> list[TransactionSchema]:
    return [TransactionSchema.model_validate(row) for row in await repo.list(ctx.identity.org_id)]


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
async def create_transaction(
    repo: TransactionsRepoDep, ctx: RequestContext = endpoint(rules.TRANSACTION)
) -> TransactionSchema:
    row = await repo.create(ctx.identity.org_id, **extract(ctx.body, COLUMNS))
    return TransactionSchema.model_validate(row)


@router.delete("/transactions/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: UUID, repo: TransactionsRepoDep, ctx: RequestContext = endpoint()
) -> Response:
    if not await repo.delete(ctx.identity.org_id, transaction_id):
        raise NotFound("Transaction not found")
    return Response(status_code=204)


@router.get("/financial-summary", response_model=FinancialSummarySchema)
async def financial_summary(
    transactions: TransactionsRepoDep,
    projects: ProjectsRepoDep,
    contractors: ContractorsRepoDep,
    ctx: RequestContext = endpoint(),
) -> FinancialSummarySchema:
    org_id = ctx.identity.org_id
    summary = summarize(
        await transactions.list(org_id),
        await projects.list(org_id),
        await contractors.list(org_id),
    )
    return FinancialSummarySchema.model_validate(summary)
