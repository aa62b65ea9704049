"""Integration tests for cards, transactions, payments, transfers, recurring charges and budgets."""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from app.models.budget_goal import BudgetGoal
from app.models.payment import Payment
from app.models.transaction import Transaction

NEW_CARD = {
    "holderName": "Second Card",
    "lastFour": "1881",
    "expiry": "01/29",
    "balance": 50,
    "currency": "eur",
    "brand": "Mastercard",
}


class TestCards:
    @pytest.mark.asyncio
    async def test_placeholder_before_first_card(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/card")

        assert response.status_code == 200
        assert response.json()["holderName"] == "New User"
        assert response.json()["lastFour"] == "0000"
        assert response.json()["balance"] == 0

    @pytest.mark.asyncio
    async def test_first_card_becomes_default(self, auth_client: AsyncClient, card_id: str):
        cards = (await auth_client.get("/api/cards")).json()

        assert len(cards) == 1
        assert cards[0]["id"] == card_id
        assert cards[0]["isDefault"] is True
        assert cards[0]["balance"] == 1000

        primary = (await auth_client.get("/api/card")).json()
        assert primary["id"] == card_id

    @pytest.mark.asyncio
    async def test_card_fields_normalized(self, auth_client: AsyncClient, card_id: str):
        response = await auth_client.post("/api/cards", json=NEW_CARD)
        assert response.status_code == 200
        assert response.json()["message"] == "Card added"

        second = next(c for c in (await auth_client.get("/api/cards")).json() if c["lastFour"] == "1881")
        assert second["currency"] == "EUR"
        assert second["brand"] == "mastercard"
        assert second["isDefault"] is False

    @pytest.mark.asyncio
    async def test_invalid_card_rejected(self, auth_client: AsyncClient):
        response = await auth_client.post("/api/cards", json={**NEW_CARD, "lastFour": "12ab"})

        assert response.status_code == 400
        assert "last 4 digits" in response.json()["message"].lower()

    @pytest.mark.asyncio
    async def test_set_default_keeps_exactly_one(self, auth_client: AsyncClient, card_id: str):
        second_id = (await auth_client.post("/api/cards", json=NEW_CARD)).json()["id"]

        response = await auth_client.post("/api/cards/default", json={"cardId": second_id})
        assert response.status_code == 200

        cards = (await auth_client.get("/api/cards")).json()
        assert [c["id"] for c in cards if c["isDefault"]] == [second_id]
        assert cards[0]["id"] == second_id

    @pytest.mark.asyncio
    async def test_set_default_unknown_card(self, auth_client: AsyncClient, card_id: str):
        response = await auth_client.post("/api/cards/default", json={"cardId": str(uuid4())})

        assert response.status_code == 404
        assert response.json()["error_code"] == "API_404"

    @pytest.mark.asyncio
    async def test_update_card(self, auth_client: AsyncClient, card_id: str):
        response = await auth_client.post(
            "/api/card",
            json={"id": card_id, "holderName": "Renamed", "lastFour": "9999", "expiry": "", "brand": "amex"},
        )

        assert response.status_code == 200
        card = (await auth_client.get("/api/card")).json()
        assert card["holderName"] == "Renamed"
        assert card["lastFour"] == "9999"
        assert card["brand"] == "amex"
        assert card["balance"] == 1000

    @pytest.mark.asyncio
    async def test_delete_card_removes_its_transactions(self, auth_client: AsyncClient, card_id: str, db_session):
        await auth_client.post(
            "/api/transactions",
            json={"title": "Lunch", "date": "2024-06-15", "amount": -12, "type": "food", "cardId": card_id},
        )

        response = await auth_client.delete(f"/api/cards/{card_id}")

        assert response.status_code == 200
        assert (await auth_client.get("/api/cards")).json() == []
        count = await db_session.scalar(select(func.count(Transaction.id)))
        assert count == 0

    @pytest.mark.asyncio
    async def test_cards_are_private(self, app, auth_client: AsyncClient, card_id: str):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as other:
            registered = await other.post(
                "/api/register",
                json={"email": "other@example.com", "password": "SecurePass123!", "name": "Other"},
            )
            other.headers["X-CSRF-Token"] = registered.json()["csrfToken"]

            assert (await other.get("/api/cards")).json() == []
            response = await other.delete(f"/api/cards/{card_id}")
            assert response.status_code == 404

        assert len((await auth_client.get("/api/cards")).json()) == 1

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.get("/api/cards")

        assert response.status_code == 401


class TestTransactions:
    @pytest.mark.asyncio
    async def test_add_posts_amount_to_card(self, auth_client: AsyncClient, card_id: str):
        response = await auth_client.post(
            "/api/transactions",
            json={"title": "Groceries", "date": "2024-06-14", "amount": -120.25, "type": "grocery", "cardId": card_id},
        )
        assert response.status_code == 200
        txn = response.json()["transaction"]
        assert txn["amount"] == -120.25
        assert txn["type"] == "grocery"
        assert txn["date"] == "2024-06-14"

        card = (await auth_client.get("/api/card")).json()
        assert card["balance"] == pytest.approx(879.75)

    @pytest.mark.asyncio
    async def test_list_newest_first(self, auth_client: AsyncClient):
        for day, title in [("2024-06-10", "older"), ("2024-06-12", "newer")]:
            await auth_client.post(
                "/api/transactions",
                json={"title": title, "date": day, "amount": -1, "type": "other"},
            )

        titles = [t["title"] for t in (await auth_client.get("/api/transactions")).json()]

        assert titles == ["newer", "older"]

    @pytest.mark.asyncio
    async def test_blank_card_id_means_no_card(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/transactions",
            json={"title": "Cash", "date": "2024-06-14", "amount": -5, "cardId": ""},
        )

        assert response.status_code == 200
        assert response.json()["transaction"]["cardId"] is None
        assert response.json()["transaction"]["type"] == "other"

    @pytest.mark.asyncio
    async def test_title_is_sanitized(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/transactions",
            json={"title": "<script>x</script>Book", "date": "2024-06-14", "amount": -5},
        )

        assert response.json()["transaction"]["title"] == "xBook"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "", "date": "2024-06-14", "amount": -5},
            {"title": "Bad date", "date": "14/06/2024", "amount": -5},
            {"title": "Bad amount", "date": "2024-06-14", "amount": "lots"},
            {"title": "Too big", "date": "2024-06-14", "amount": 2000000},
            {"title": "Bad type", "date": "2024-06-14", "amount": -5, "type": "lottery"},
        ],
    )
    async def test_invalid_transaction(self, auth_client: AsyncClient, payload):
        response = await auth_client.post("/api/transactions", json=payload)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    @pytest.mark.asyncio
    async def test_unknown_card(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/transactions",
            json={"title": "Ghost", "date": "2024-06-14", "amount": -5, "cardId": str(uuid4())},
        )

        assert response.status_code == 404


class TestPayments:
    @pytest.mark.asyncio
    async def test_record_payment(self, auth_client: AsyncClient, card_id: str):
        response = await auth_client.post(
            "/api/payments",
            json={"amount": 75, "recipient": "Electric Co", "date": "2024-06-01", "status": "completed", "cardId": card_id},
        )

        assert response.status_code == 200
        assert response.json()["reference"].startswith("PAY-")

        payments = (await auth_client.get("/api/payments")).json()
        assert payments[0]["recipient"] == "Electric Co"
        assert payments[0]["status"] == "completed"

    @pytest.mark.asyncio
    async def test_payment_amount_must_be_positive(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/payments",
            json={"amount": -10, "recipient": "X", "date": "2024-06-01"},
        )

        assert response.status_code == 400


class TestTransfer:
    @pytest.mark.asyncio
    async def test_transfer_writes_debit_payment_and_transaction(
        self, auth_client: AsyncClient, card_id: str, db_session
    ):
        response = await auth_client.post(
            "/api/transfer",
            json={"cardId": card_id, "recipientName": "Alex", "amount": 250, "note": "rent"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["reference"].startswith("TRF-")
        assert data["amount"] == 250
        assert data["recipient"] == "Alex"
        assert data["newBalance"] == 750

        payment = (await db_session.execute(select(Payment))).scalar_one()
        assert payment.status == "completed"
        assert payment.reference == data["reference"]

        txn = (await db_session.execute(select(Transaction))).scalar_one()
        assert txn.category == "transfer"
        assert txn.title == "Transfer to Alex - rent"
        assert float(txn.amount) == -250

    @pytest.mark.asyncio
    async def test_insufficient_balance_changes_nothing(self, auth_client: AsyncClient, card_id: str, db_session):
        response = await auth_client.post(
            "/api/transfer",
            json={"cardId": card_id, "recipientName": "Alex", "amount": 1000.01},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Insufficient balance"
        assert (await auth_client.get("/api/card")).json()["balance"] == 1000
        assert await db_session.scalar(select(func.count(Payment.id))) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount, message", [(0, "valid amount"), (-5, "valid amount"), (50000.01, "cannot exceed")])
    async def test_amount_bounds(self, auth_client: AsyncClient, card_id: str, amount, message):
        response = await auth_client.post(
            "/api/transfer",
            json={"cardId": card_id, "recipientName": "Alex", "amount": amount},
        )

        assert response.status_code == 400
        assert message in response.json()["message"]

    @pytest.mark.asyncio
    async def test_recipient_required(self, auth_client: AsyncClient, card_id: str):
        response = await auth_client.post(
            "/api/transfer",
            json={"cardId": card_id, "recipientName": " ", "amount": 10},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_card(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/transfer",
            json={"cardId": str(uuid4()), "recipientName": "Alex", "amount": 10},
        )

        assert response.status_code == 404


class TestRecurring:
    @pytest.mark.asyncio
    async def test_add_list_delete(self, auth_client: AsyncClient):
        created = await auth_client.post(
            "/api/recurring",
            json={"title": "Streaming", "amount": -15.99, "type": "subscription", "frequency": "monthly", "nextDueDate": "2024-07-01"},
        )
        assert created.status_code == 200
        recurring_id = created.json()["id"]

        listed = (await auth_client.get("/api/recurring")).json()
        assert listed[0]["title"] == "Streaming"
        assert listed[0]["isActive"] is True
        assert listed[0]["nextDueDate"] == "2024-07-01"

        deleted = await auth_client.delete(f"/api/recurring/{recurring_id}")
        assert deleted.status_code == 200
        assert (await auth_client.get("/api/recurring")).json() == []

    @pytest.mark.asyncio
    async def test_delete_missing(self, auth_client: AsyncClient):
        response = await auth_client.delete(f"/api/recurring/{uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_frequency(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/recurring",
            json={"title": "Gym", "amount": -30, "frequency": "hourly", "nextDueDate": "2024-07-01"},
        )

        assert response.status_code == 400


class TestBudgets:
    @pytest.mark.asyncio
    async def test_upsert_never_duplicates(self, auth_client: AsyncClient, db_session):
        first = await auth_client.post("/api/budgets", json={"category": "food", "amountLimit": 300})
        second = await auth_client.post(
            "/api/budgets", json={"category": "food", "amountLimit": 450, "period": "weekly"}
        )

        assert first.status_code == second.status_code == 200
        assert await db_session.scalar(select(func.count(BudgetGoal.id))) == 1

        budgets = (await auth_client.get("/api/budgets")).json()
        assert budgets == [
            {"id": budgets[0]["id"], "category": "food", "amountLimit": 450, "period": "monthly"}
        ]

    @pytest.mark.asyncio
    async def test_limit_must_be_at_least_one(self, auth_client: AsyncClient):
        response = await auth_client.post("/api/budgets", json={"category": "food", "amountLimit": 0.5})

        assert response.status_code == 400
