"""Integration tests for CSRF protection on mutating API calls."""

import pytest
from httpx import AsyncClient

TRANSACTION = {"title": "Coffee", "date": "2024-06-15", "amount": -4.5, "type": "food"}


class TestCsrfProtection:
    @pytest.mark.asyncio
    async def test_post_without_token_is_rejected(self, auth_client: AsyncClient):
        del auth_client.headers["X-CSRF-Token"]

        response = await auth_client.post("/api/transactions", json=TRANSACTION)

        assert response.status_code == 403
        assert response.json()["error_code"] == "SEC_001"

    @pytest.mark.asyncio
    async def test_post_with_wrong_token_is_rejected(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/transactions", json=TRANSACTION, headers={"X-CSRF-Token": "0" * 64}
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_post_with_session_token_succeeds(self, auth_client: AsyncClient):
        response = await auth_client.post("/api/transactions", json=TRANSACTION)

        assert response.status_code == 200
        assert response.json()["transaction"]["title"] == "Coffee"

    @pytest.mark.asyncio
    async def test_token_endpoint_returns_session_token(self, auth_client: AsyncClient):
        token = (await auth_client.get("/api/csrf-token")).json()["csrfToken"]

        assert token == auth_client.headers["X-CSRF-Token"]

    @pytest.mark.asyncio
    async def test_delete_requires_token(self, auth_client: AsyncClient, card_id: str):
        response = await auth_client.delete(f"/api/cards/{card_id}", headers={"X-CSRF-Token": ""})

        assert response.status_code == 403
        assert len((await auth_client.get("/api/cards")).json()) == 1

    @pytest.mark.asyncio
    async def test_token_from_old_session_is_rejected_after_login(self, client: AsyncClient, register_user):
        await register_user(email="csrf@example.com")
        stale = client.headers["X-CSRF-Token"]

        login = await client.post(
            "/api/login", json={"email": "csrf@example.com", "password": "SecurePass123!"}
        )
        assert login.json()["csrfToken"] != stale

        response = await client.post("/api/transactions", json=TRANSACTION)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_anonymous_mutation_without_token_is_forbidden(self, client: AsyncClient):
        response = await client.post("/api/transactions", json=TRANSACTION)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_anonymous_mutation_with_token_is_unauthorized(self, client: AsyncClient):
        token = (await client.get("/api/csrf-token")).json()["csrfToken"]

        response = await client.post("/api/transactions", json=TRANSACTION, headers={"X-CSRF-Token": token})

        assert response.status_code == 401
