"""HTTP-level tests: real routers and services, in-memory store and cache.

Dependencies that would reach PostgreSQL/Redis are overridden; the auth
guard, validation, error envelope and middleware all run for real.
"""

import pytest
from httpx import AsyncClient

from src.dt_common.database import get_db_session
from src.dt_debt.api.dependencies import get_debt_service
from src.dt_debt.application.service import DebtApplicationService
from src.dt_gateway.api.router import get_user_service
from src.dt_gateway.user.service import UserService
from src.main import app

PASSWORD = "password123"


@pytest.fixture
async def api(client, db, user_repo, debt_repo, memory_cache) -> AsyncClient:
    debt_service = DebtApplicationService(cache=memory_cache, repo=debt_repo)
    user_service = UserService(repo=user_repo)
    app.dependency_overrides[get_db_session] = lambda: db
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_debt_service] = lambda: debt_service
    yield client
    app.dependency_overrides.clear()


async def _auth_headers(api: AsyncClient, name: str, email: str) -> dict[str, str]:
    await api.post(
        "/api/v1/auth/register", json={"name": name, "email": email, "password": PASSWORD}
    )
    resp = await api.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    return {"Authorization": f"Bearer {resp.json()['data']['token']}"}


async def _create(api: AsyncClient, headers: dict[str, str], amount=100, description="Loan"):
    resp = await api.post(
        "/api/v1/debts", json={"description": description, "amount": amount}, headers=headers
    )
    assert resp.status_code == 201
    return resp.json()["data"]


class TestAuth:
    async def test_register(self, api) -> None:
        resp = await api.post(
            "/api/v1/auth/register",
            json={"name": "Test User", "email": "test@example.com", "password": PASSWORD},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["message"] == "User created successfully"
        assert "password" not in resp.text

    async def test_register_duplicate_email(self, api) -> None:
        user = {"name": "Test User", "email": "test@example.com", "password": PASSWORD}
        await api.post("/api/v1/auth/register", json=user)

        resp = await api.post("/api/v1/auth/register", json=user)

        assert resp.status_code == 409
        assert resp.json()["code"] == 1001
        assert resp.json()["message"] == "Email already exists"

    async def test_register_invalid_email(self, api) -> None:
        resp = await api.post(
            "/api/v1/auth/register",
            json={"name": "Test User", "email": "not-an-email", "password": PASSWORD},
        )
        assert resp.status_code == 422

    async def test_login(self, api) -> None:
        await _auth_headers(api, "Test User", "test@example.com")

        resp = await api.post(
            "/api/v1/auth/login", json={"email": "test@example.com", "password": PASSWORD}
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["email"] == "test@example.com"
        assert data["user"] == "Test User"
        assert len(data["token"]) > 20

    async def test_login_wrong_password(self, api) -> None:
        await _auth_headers(api, "Test User", "test@example.com")

        resp = await api.post(
            "/api/v1/auth/login", json={"email": "test@example.com", "password": "nope-nope"}
        )

        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid password"

    async def test_login_unknown_email(self, api) -> None:
        resp = await api.post(
            "/api/v1/auth/login", json={"email": "ghost@example.com", "password": PASSWORD}
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email"


class TestAuthGuard:
    async def test_missing_token(self, api) -> None:
        resp = await api.get("/api/v1/debts")
        assert resp.status_code == 401
        body = resp.json()
        assert body["code"] == 1004
        assert body["message"] == "Invalid or expired token"
        assert body["data"] is None
        assert body["request_id"].startswith("req_")

    async def test_malformed_header(self, api) -> None:
        resp = await api.get("/api/v1/debts", headers={"Authorization": "Token abc"})
        assert resp.status_code == 401

    async def test_invalid_token(self, api) -> None:
        resp = await api.get("/api/v1/debts", headers={"Authorization": "Bearer abc.def.ghi"})
        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"] == "Bearer"
        assert resp.json()["code"] == 1004

    async def test_unknown_route_uses_envelope(self, api) -> None:
        resp = await api.get("/api/v1/nothing-here")
        assert resp.status_code == 404
        assert resp.json()["code"] == 404
        assert resp.json()["data"] is None


class TestDebtEndpoints:
    async def test_create_and_get(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")

        created = await _create(api, headers, amount="19.90", description="Groceries")
        resp = await api.get(f"/api/v1/debts/{created['id']}", headers=headers)

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["description"] == "Groceries"
        assert data["amount"] == "19.90"
        assert data["paid"] is False

    async def test_create_non_positive_amount(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")

        resp = await api.post(
            "/api/v1/debts", json={"description": "x", "amount": 0}, headers=headers
        )

        assert resp.status_code == 400
        assert resp.json()["message"] == "El valor de la deuda debe ser mayor a 0"

    async def test_list_with_status_filter(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        first = await _create(api, headers, description="first")
        await _create(api, headers, description="second")
        await api.patch(f"/api/v1/debts/{first['id']}/pay", headers=headers)

        all_resp = await api.get("/api/v1/debts", headers=headers)
        done = await api.get("/api/v1/debts", params={"status": "completed"}, headers=headers)
        todo = await api.get("/api/v1/debts", params={"status": "pending"}, headers=headers)

        assert [d["description"] for d in all_resp.json()["data"]] == ["second", "first"]
        assert [d["description"] for d in done.json()["data"]] == ["first"]
        assert [d["description"] for d in todo.json()["data"]] == ["second"]

    async def test_unknown_status_is_rejected(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        resp = await api.get("/api/v1/debts", params={"status": "overdue"}, headers=headers)
        assert resp.status_code == 422

    async def test_summary_follows_payment(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        created = await _create(api, headers, amount=100)

        before = await api.get("/api/v1/debts/summary", headers=headers)
        assert before.json()["data"] == {"total": "100.00", "paid": "0.00", "pending": "100.00"}

        paid = await api.patch(f"/api/v1/debts/{created['id']}/pay", headers=headers)
        assert paid.json()["data"]["paid"] is True

        after = await api.get("/api/v1/debts/summary", headers=headers)
        assert after.json()["data"] == {"total": "100.00", "paid": "100.00", "pending": "0.00"}

    async def test_pay_twice(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        created = await _create(api, headers)
        await api.patch(f"/api/v1/debts/{created['id']}/pay", headers=headers)

        resp = await api.patch(f"/api/v1/debts/{created['id']}/pay", headers=headers)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Ya está pagada"

    async def test_update_paid_debt(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        created = await _create(api, headers)
        await api.patch(f"/api/v1/debts/{created['id']}/pay", headers=headers)

        resp = await api.patch(
            f"/api/v1/debts/{created['id']}", json={"description": "new"}, headers=headers
        )

        assert resp.status_code == 400
        assert resp.json()["message"] == "No se puede modificar una deuda pagada"

    async def test_negative_update_leaves_debt_unchanged(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        created = await _create(api, headers, amount=100)

        resp = await api.patch(
            f"/api/v1/debts/{created['id']}", json={"amount": -5}, headers=headers
        )
        assert resp.status_code == 400

        current = await api.get(f"/api/v1/debts/{created['id']}", headers=headers)
        assert current.json()["data"]["amount"] == "100.00"

    async def test_update(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        created = await _create(api, headers, amount=100)

        resp = await api.patch(
            f"/api/v1/debts/{created['id']}",
            json={"description": "Loan (renegotiated)", "amount": "80.00"},
            headers=headers,
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["amount"] == "80.00"
        listed = await api.get("/api/v1/debts", headers=headers)
        assert listed.json()["data"][0]["description"] == "Loan (renegotiated)"

    async def test_delete(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        created = await _create(api, headers)

        resp = await api.delete(f"/api/v1/debts/{created['id']}", headers=headers)
        assert resp.status_code == 200

        gone = await api.get(f"/api/v1/debts/{created['id']}", headers=headers)
        assert gone.status_code == 404
        assert gone.json()["message"] == "Deuda no encontrada"


class TestIsolation:
    async def test_users_cannot_see_or_mutate_each_other(self, api) -> None:
        alice = await _auth_headers(api, "Alice", "alice@example.com")
        bob = await _auth_headers(api, "Bob", "bob@example.com")
        debt = await _create(api, alice, amount=50)
        url = f"/api/v1/debts/{debt['id']}"

        responses = [
            await api.get(url, headers=bob),
            await api.patch(url, json={"amount": 1}, headers=bob),
            await api.patch(f"{url}/pay", headers=bob),
            await api.delete(url, headers=bob),
        ]
        missing = await api.get("/api/v1/debts/999999", headers=bob)

        for resp in responses:
            assert resp.status_code == 404
            assert resp.json()["code"] == missing.json()["code"] == 2005
            assert resp.json()["message"] == missing.json()["message"]

        assert (await api.get("/api/v1/debts", headers=bob)).json()["data"] == []
        mine = await api.get(url, headers=alice)
        assert mine.json()["data"]["amount"] == "50.00"
        assert mine.json()["data"]["paid"] is False


class TestExport:
    async def test_csv(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        created = await _create(api, headers, amount="12.5", description="Pizza")

        resp = await api.get("/api/v1/debts/export/csv", headers=headers)

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        lines = resp.text.splitlines()
        assert lines[0] == "id,description,amount,paid,createdAt"
        assert lines[1].startswith(f"{created['id']},Pizza,12.50,false,")

    async def test_json(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        created = await _create(api, headers)

        resp = await api.get("/api/v1/debts/export/json", headers=headers)

        assert resp.status_code == 200
        assert [d["id"] for d in resp.json()["data"]] == [created["id"]]

    async def test_unknown_format(self, api) -> None:
        headers = await _auth_headers(api, "A", "a@example.com")
        resp = await api.get("/api/v1/debts/export/xml", headers=headers)
        assert resp.status_code == 422


async def test_health(client) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
