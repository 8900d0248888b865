"""Error Responses — how failures inside route handlers reach the client.

Invariants:
    - DatabaseError → 500 DATABASE_ERROR with its message
    - Any other exception → 500 INTERNAL_ERROR carrying only str(exc)
    - Validation message is 'field: message' for the first violation

Design Decisions:
    - raise_app_exceptions=False: Starlette re-raises after the catch-all handler
      has answered; the client should see the response, not the exception
"""

import pytest
from httpx import ASGITransport, AsyncClient

from directory_api.api.dependencies import get_profile_aggregator
from directory_api.api.error_handlers import first_violation_message
from directory_api.core.errors import DatabaseError
from directory_api.main import app

API = "/qccareerschool"


class FailingAggregator:
    def __init__(self, exc: Exception):
        self.exc = exc

    async def search_profiles(self, *args, **kwargs):
        raise self.exc

    async def fetch_profile(self, account_id):
        raise self.exc


@pytest.fixture
async def failing_client():
    async def _client(exc: Exception) -> AsyncClient:
        app.dependency_overrides[get_profile_aggregator] = lambda: FailingAggregator(exc)
        return AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        )
    yield _client
    app.dependency_overrides.clear()


async def test_database_error_is_500(failing_client):
    async with await failing_client(DatabaseError("connection reset", "execute")) as c:
        res = await c.get(f"{API}/profiles")
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "DATABASE_ERROR"
    assert error["message"] == "Database execute failed: connection reset"


async def test_unexpected_error_is_500_with_message_only(failing_client):
    async with await failing_client(RuntimeError("pool exhausted")) as c:
        res = await c.get(f"{API}/profiles/5")
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert error["message"] == "pool exhausted"
    assert "stack" not in error


def test_first_violation_message():
    errors = [
        {"loc": ("body", "emailAddress"), "msg": "value is not a valid email address"},
        {"loc": ("body", "password"), "msg": "Field required"},
    ]
    assert first_violation_message(errors) == (
        "emailAddress: value is not a valid email address"
    )
    assert first_violation_message([{"loc": (), "msg": "Invalid JSON"}]) == "Invalid JSON"
    assert first_violation_message([]) == "Invalid request data"
