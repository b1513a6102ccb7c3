"""Financial summary over a tenant's ledger, projects and contractors."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any


def _project_totals(projects: list[Any]) -> dict[str, Any]:
    return {
        "total": sum((Decimal(p.amount) for p in projects), Decimal("0")),
        "active": sum(1 for p in projects if p.status == "active"),
        "passive": sum(1 for p in projects if p.status == "passive"),
        "completed": sum(1 for p in projects if p.status == "completed"),
    }


def _contractor_totals(contractors: list[Any]) -> dict[str, Any]:
    return {
        "total": sum((Decimal(c.total_amount) for c in contractors), Decimal("0")),
        "active": sum(1 for c in contractors if c.status == "active"),
        "completed": sum(1 for c in contractors if c.status == "completed"),
    }


def summarize(
    transactions: Iterable[Any], projects: Iterable[Any], contractors: Iterable[Any] = ()
) -> dict[str, Any]:
    """Income, expenses, net balance, per-direction project totals and contractor totals."""
    income = Decimal("0")
    expenses = Decimal("0")
    for txn in transactions:
        if txn.type == "income":
            income += Decimal(txn.amount)
        elif txn.type == "expense":
            expenses += Decimal(txn.amount)

    projects = list(projects)
    return {
        "total_income": income,
        "total_expenses": expenses,
        "net_balance": income - expenses,
        "given_projects": _project_totals([p for p in projects if p.type == "given"]),
        "received_projects": _project_totals([p for p in projects if p.type == "received"]),
        "contractors": _contractor_totals(list(contractors)),
    }
