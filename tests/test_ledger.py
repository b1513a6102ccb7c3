"""Transactions, personnel payments and the financial summary."""

from __future__ import annotations

import uuid

import pytest

from _helpers import create_personnel, signed_in


def _txn(type_="income", amount="1000", **overrides):
    return {
        "type": type_,
        "amount": amount,
        "description": "Invoice #12",
        "date": "2024-05-10",
        **overrides,
    }


def test_create_and_list_transactions(client, auth):
    resp = client.post("/api/transactions", json=_txn(category="sales"), headers=auth)
    assert resp.status_code == 201
    data = resp.json()
    assert data["amount"] == "1000.00"
    assert data["category"] == "sales"
    assert data["date"] == "2024-05-10"

    rows = client.get("/api/transactions", headers=auth).json()
    assert [r["id"] for r in rows] == [data["id"]]


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"type": "refund"}, "type"),
        ({"amount": "-1"}, "amount"),
        ({"amount": "lots"}, "amount"),
        ({"amount": "1e30"}, "amount"),
        ({"amount": "9" * 29}, "amount"),
        ({"date": "10.05.2024"}, "date"),
        ({"description": ""}, "description"),
    ],
)
def test_transaction_validation(client, auth, overrides, field):
    resp = client.post("/api/transactions", json=_txn(**overrides), headers=auth)
    assert resp.status_code == 400
    assert [d["field"] for d in resp.json()["details"]] == [field]


def test_delete_transaction(client, auth):
    tid = client.post("/api/transactions", json=_txn(), headers=auth).json()["id"]
    assert client.delete(f"/api/transactions/{tid}", headers=auth).status_code == 204
    assert client.delete(f"/api/transactions/{tid}", headers=auth).status_code == 404


def test_financial_summary(client, auth):
    client.post("/api/transactions", json=_txn("income", "2500.75"), headers=auth)
    client.post("/api/transactions", json=_txn("expense", "500.25"), headers=auth)
    client.post(
        "/api/projects",
        json={
            "name": "Warehouse",
            "type": "given",
            "amount": "40000",
            "status": "active",
            "startDate": "2024-01-01",
        },
        headers=auth,
    )

    resp = client.get("/api/financial-summary", headers=auth)
    assert resp.status_code == 200
    data = resp.json()
    assert data["totalIncome"] == "2500.75"
    assert data["totalExpenses"] == "500.25"
    assert data["netBalance"] == "2000.50"
    assert data["givenProjects"] == {
        "total": "40000.00",
        "active": 1,
        "passive": 0,
        "completed": 0,
    }
    assert data["receivedProjects"]["total"] == "0.00"
    assert data["contractors"] == {"total": "0.00", "active": 0, "completed": 0}


def test_financial_summary_counts_contractors(client, auth):
    for status, amount in [("active", "1200"), ("completed", "800.50")]:
        client.post(
            "/api/contractors",
            json={"name": "Demir Yapi", "status": status, "totalAmount": amount},
            headers=auth,
        )
    data = client.get("/api/financial-summary", headers=auth).json()
    assert data["contractors"] == {"total": "2000.50", "active": 1, "completed": 1}


def test_financial_summary_negative_balance(client, auth):
    client.post("/api/transactions", json=_txn("expense", "10"), headers=auth)
    assert client.get("/api/financial-summary", headers=auth).json()["netBalance"] == "-10.00"


# ---------------------------------------------------------------------------
# Personnel payments
# ---------------------------------------------------------------------------


def _payment(personnel_id, **overrides):
    return {
        "personnelId": personnel_id,
        "amount": "17500",
        "paymentDate": "2024-05-31",
        "paymentType": "salary",
        **overrides,
    }


def test_payment_books_expense_transaction(client, backend, auth):
    pid = create_personnel(client, auth)["id"]
    resp = client.post("/api/personnel-payments", json=_payment(pid), headers=auth)
    assert resp.status_code == 201
    payment = resp.json()
    assert payment["amount"] == "17500.00"
    assert payment["transactionId"]

    txns = client.get("/api/transactions", headers=auth).json()
    assert len(txns) == 1
    txn = txns[0]
    assert txn["id"] == payment["transactionId"]
    assert txn["type"] == "expense"
    assert txn["amount"] == "17500.00"
    assert txn["category"] == "personnel"
    assert txn["description"] == "Personnel payment (salary): Mehmet Demir"
    assert txn["date"] == "2024-05-31"

    summary = client.get("/api/financial-summary", headers=auth).json()
    assert summary["totalExpenses"] == "17500.00"


def test_payment_description_is_used_for_transaction(client, auth):
    pid = create_personnel(client, auth)["id"]
    client.post(
        "/api/personnel-payments", json=_payment(pid, description="May advance"), headers=auth
    )
    txn = client.get("/api/transactions", headers=auth).json()[0]
    assert txn["description"] == "May advance"


def test_payment_for_unknown_personnel(client, backend, auth):
    resp = client.post("/api/personnel-payments", json=_payment(str(uuid.uuid4())), headers=auth)
    assert resp.status_code == 404
    assert backend.transactions.rows == {}


def test_payment_for_other_orgs_personnel(client, backend, auth):
    pid = create_personnel(client, auth)["id"]
    _, other = signed_in(client, backend, "other@example.com")
    resp = client.post("/api/personnel-payments", json=_payment(pid), headers=other)
    assert resp.status_code == 404


def test_payment_rejects_unknown_type(client, auth):
    pid = create_personnel(client, auth)["id"]
    resp = client.post(
        "/api/personnel-payments", json=_payment(pid, paymentType="gift"), headers=auth
    )
    assert resp.status_code == 400


def test_list_payments_by_personnel(client, auth):
    first = create_personnel(client, auth)["id"]
    second = create_personnel(client, auth, name="Ali Kaya")["id"]
    client.post("/api/personnel-payments", json=_payment(first), headers=auth)
    client.post("/api/personnel-payments", json=_payment(second, amount="50"), headers=auth)

    assert len(client.get("/api/personnel-payments", headers=auth).json()) == 2
    rows = client.get(f"/api/personnel-payments/personnel/{second}", headers=auth).json()
    assert [r["amount"] for r in rows] == ["50.00"]


def test_delete_payment_removes_transaction(client, auth):
    pid = create_personnel(client, auth)["id"]
    payment = client.post("/api/personnel-payments", json=_payment(pid), headers=auth).json()

    resp = client.delete(f"/api/personnel-payments/{payment['id']}", headers=auth)
    assert resp.status_code == 204
    assert client.get("/api/transactions", headers=auth).json() == []
    assert client.get("/api/personnel-payments", headers=auth).json() == []

    resp = client.delete(f"/api/personnel-payments/{payment['id']}", headers=auth)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Payment not found"}
