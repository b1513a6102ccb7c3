"""Repositories for ledger transactions and personnel payments.

A personnel payment always has a matching expense transaction. Both rows are
written (and deleted) in one database transaction: either both commit or the
session is rolled back and neither exists.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import select

from puantaj_service.db.models import PersonnelPaymentModel, TransactionModel
from puantaj_service.db.repositories.base import TenantRepo

log = structlog.get_logger(__name__)

PAYMENT_CATEGORY = "personnel"


class TransactionsRepo(TenantRepo):
    model = TransactionModel


class PaymentsRepo(TenantRepo):
    model = PersonnelPaymentModel

    async def list_by_personnel(self, org_id: UUID, personnel_id: UUID) -> list[Any]:
        result = await self._session.execute(
            select(PersonnelPaymentModel)
            .where(
                PersonnelPaymentModel.org_id == org_id,
                PersonnelPaymentModel.personnel_id == personnel_id,
            )
            .order_by(PersonnelPaymentModel.payment_date.desc())
        )
        return list(result.scalars().all())

    async def create_with_transaction(
        self,
        org_id: UUID,
        personnel_id: UUID,
        personnel_name: str,
        amount: Decimal,
        payment_date: date,
        payment_type: str,
        description: str | None = None,
        notes: str | None = None,
    ) -> PersonnelPaymentModel:
        """Record a payment and its expense transaction atomically."""
        transaction = TransactionModel(
            org_id=org_id,
            type="expense",
            amount=amount,
            description=description or f"Personnel payment ({payment_type}): {personnel_name}",
            category=PAYMENT_CATEGORY,
            date=payment_date,
        )
        try:
            self._session.add(transaction)
            await self._session.flush()

            payment = PersonnelPaymentModel(
                org_id=org_id,
                personnel_id=personnel_id,
                transaction_id=transaction.id,
                amount=amount,
                payment_date=payment_date,
                payment_type=payment_type,
                description=description,
                notes=notes,
            )
            self._session.add(payment)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            log.warning("payment_rolled_back", org_id=str(org_id), personnel_id=str(personnel_id))
            raise

        await self._session.refresh(payment)
        return payment

    async def delete_with_transaction(self, org_id: UUID, payment_id: UUID) -> bool:
        """Delete a payment and its linked transaction atomically."""
        payment = await self.get(org_id, payment_id)
        if payment is None:
            return False
        try:
            if payment.transaction_id is not None:
                transaction = await self._session.get(TransactionModel, payment.transaction_id)
                if transaction is not None:
                    await self._session.delete(transaction)
            await self._session.delete(payment)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        return True
