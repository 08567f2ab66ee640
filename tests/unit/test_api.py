"""HTTP-level tests: routers, ApiResponse envelope and AppError mapping.

Services run against the in-memory store; DB session, caller identity and the
block clock are supplied through dependency_overrides.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from config.settings import settings
from src.main import app
from src.pm_account.api.router import get_account_service
from src.pm_account.application.service import AccountApplicationService
from src.pm_admin.api.router import get_admin_service
from src.pm_analytics.api.router import get_analytics_service
from src.pm_analytics.application.service import AnalyticsApplicationService
from src.pm_clearing.api.router import get_claim_service
from src.pm_common.clock import current_block_height
from src.pm_common.database import get_db_session
from src.pm_gateway.auth.dependencies import get_current_principal
from src.pm_gateway.auth.jwt_handler import create_access_token
from src.pm_gateway.middleware import rate_limit
from src.pm_market.api.router import get_market_service

TOKEN = 1_000_000
BASE = "/api/v1"


@pytest.fixture
def env(market_service, claim_service, market_repo, accounts, db, fund):
    state = {"caller": "alice", "now": 0}
    app.dependency_overrides.update(
        {
            get_db_session: lambda: db,
            get_current_principal: lambda: state["caller"],
            current_block_height: lambda: state["now"],
            get_market_service: lambda: market_service,
            get_claim_service: lambda: claim_service,
            get_account_service: lambda: AccountApplicationService(repo=accounts),
            get_analytics_service: lambda: AnalyticsApplicationService(repo=market_repo),
        }
    )
    fund(alice=5 * TOKEN, bob=10 * TOKEN, carol=10 * TOKEN)
    with patch.object(rate_limit, "incr_fixed_window", AsyncMock(return_value=1)):
        yield state
    app.dependency_overrides.clear()


async def test_health(client) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_full_market_flow(client, env) -> None:
    resp = await client.post(
        f"{BASE}/markets", json={"title": "Will it rain?", "duration_blocks": 5}
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["code"] == 0
    assert body["data"]["market_id"] == 1
    assert body["request_id"] == resp.headers["X-Request-ID"]

    env["caller"], env["now"] = "bob", 1
    resp = await client.post(
        f"{BASE}/markets/1/stakes", json={"outcome": True, "amount": 2 * TOKEN}
    )
    assert resp.json()["data"]["net_amount"] == 1_900_000

    env["caller"] = "carol"
    await client.post(f"{BASE}/markets/1/stakes", json={"outcome": False, "amount": TOKEN})

    resp = await client.get(f"{BASE}/analytics/markets/1")
    assert resp.json()["data"]["yes_probability"] == 666

    env["caller"], env["now"] = "alice", 5
    resp = await client.post(f"{BASE}/markets/1/resolve", json={"outcome": True})
    assert resp.json()["data"]["is_resolved"] is True

    env["caller"] = "bob"
    resp = await client.post(f"{BASE}/markets/1/claim")
    assert resp.json()["data"]["amount_paid"] == 2_850_000

    resp = await client.get(f"{BASE}/account/balance")
    assert resp.json()["data"]["available_balance"] == 10 * TOKEN - 2 * TOKEN + 2_850_000

    resp = await client.get(f"{BASE}/markets/1/positions/bob")
    assert resp.json()["data"]["has_claimed"] is True


async def test_app_error_envelope(client, env) -> None:
    resp = await client.post(f"{BASE}/markets/42/stakes", json={"outcome": True, "amount": TOKEN})
    assert resp.status_code == 404
    body = resp.json()
    assert body["code"] == 3001
    assert body["data"] is None


async def test_invalid_params_use_domain_code(client, env) -> None:
    resp = await client.post(f"{BASE}/markets", json={"title": "", "duration_blocks": 5})
    assert resp.status_code == 422
    assert resp.json()["code"] == 3007


async def test_resolve_by_non_creator(client, env) -> None:
    await client.post(f"{BASE}/markets", json={"title": "Q", "duration_blocks": 5})
    env["caller"], env["now"] = "mallory", 10
    resp = await client.post(f"{BASE}/markets/1/resolve", json={"outcome": True})
    assert resp.status_code == 403
    assert resp.json()["code"] == 1006


async def test_absent_market_reads_null(client, env) -> None:
    resp = await client.get(f"{BASE}/markets/77")
    assert resp.status_code == 200
    assert resp.json()["data"] is None


async def test_counters(client, env) -> None:
    await client.post(f"{BASE}/markets", json={"title": "Q", "duration_blocks": 5})
    assert (await client.get(f"{BASE}/markets/total")).json()["data"]["total_markets"] == 1
    assert (await client.get(f"{BASE}/markets/next-id")).json()["data"]["next_market_id"] == 2
    stats = (await client.get(f"{BASE}/markets/stats")).json()["data"]
    assert stats["creation_fee"] == TOKEN


async def test_batch_limit(client, env) -> None:
    resp = await client.post(
        f"{BASE}/analytics/batch", json={"market_ids": list(range(11)), "participant": "bob"}
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == 3008


async def test_batch(client, env) -> None:
    resp = await client.post(
        f"{BASE}/analytics/batch", json={"market_ids": [1, 2], "participant": "bob"}
    )
    data = resp.json()["data"]
    assert [item["analytics"]["exists"] for item in data["items"]] == [False, False]
    assert data["total_exposure"] == 0


async def test_deposit_and_withdraw(client, env) -> None:
    env["caller"] = "dave"
    resp = await client.post(f"{BASE}/account/deposit", json={"amount": 3 * TOKEN})
    assert resp.json()["data"]["available_balance"] == 3 * TOKEN
    resp = await client.post(f"{BASE}/account/withdraw", json={"amount": 5 * TOKEN})
    assert resp.status_code == 422
    assert resp.json()["code"] == 2001


async def test_admin_requires_owner(client, env) -> None:
    app.dependency_overrides[get_admin_service] = lambda: AsyncMock()
    env["caller"] = "bob"
    resp = await client.get(f"{BASE}/admin/invariants")
    assert resp.status_code == 403


async def test_admin_invariants_for_owner(client, env) -> None:
    admin = AsyncMock()
    admin.verify_all_invariants.return_value = {"ok": True, "markets_checked": 0, "violations": []}
    app.dependency_overrides[get_admin_service] = lambda: admin
    env["caller"] = settings.CONTRACT_OWNER
    resp = await client.get(f"{BASE}/admin/invariants")
    assert resp.status_code == 200
    assert resp.json()["data"]["ok"] is True


async def test_missing_token_is_401(client) -> None:
    with patch.object(rate_limit, "incr_fixed_window", AsyncMock(return_value=1)):
        resp = await client.post(f"{BASE}/markets/1/claim")
    assert resp.status_code == 401


@pytest.mark.parametrize("outcome", ["yes", "true", 1, 0])
async def test_stake_with_non_bool_outcome(client, env, store, outcome) -> None:
    await client.post(f"{BASE}/markets", json={"title": "Q", "duration_blocks": 5})
    env["caller"], env["now"] = "bob", 1
    resp = await client.post(
        f"{BASE}/markets/1/stakes", json={"outcome": outcome, "amount": 2 * TOKEN}
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == 3006
    assert (1, "bob") not in store.committed.positions


async def test_resolve_with_non_bool_outcome(client, env) -> None:
    await client.post(f"{BASE}/markets", json={"title": "Q", "duration_blocks": 5})
    env["now"] = 5
    resp = await client.post(f"{BASE}/markets/1/resolve", json={"outcome": "no"})
    assert resp.status_code == 422
    assert resp.json()["code"] == 3006


@pytest.mark.parametrize("amount", [0, -TOKEN, TOKEN - 1])
async def test_stake_below_minimum_uses_envelope(client, env, amount) -> None:
    await client.post(f"{BASE}/markets", json={"title": "Q", "duration_blocks": 5})
    env["caller"], env["now"] = "bob", 1
    resp = await client.post(f"{BASE}/markets/1/stakes", json={"outcome": True, "amount": amount})
    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == 2001
    assert body["request_id"] == resp.headers["X-Request-ID"]


@pytest.mark.parametrize("principal", ["MARKET_ESCROW", "PLATFORM_FEE"])
async def test_system_account_token_rejected(client, principal) -> None:
    db = MagicMock()
    db.execute = AsyncMock()
    app.dependency_overrides[get_db_session] = lambda: db
    token = create_access_token(principal)
    with patch.object(rate_limit, "incr_fixed_window", AsyncMock(return_value=1)):
        resp = await client.post(
            f"{BASE}/account/withdraw",
            json={"amount": TOKEN},
            headers={"Authorization": f"Bearer {token}"},
        )
    assert resp.status_code == 401
    db.execute.assert_not_awaited()
