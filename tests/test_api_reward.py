"""
Test daily reward status and claims, including the per-day claim lock.
"""

import pytest

from tokengate.core.database import get_async_session
from tokengate.services.token_contract import SELECTORS
from tokengate.services.user_service import UserService, claim_day

from conftest import RAW_KEY, RAW_KEY_ADDRESS, RECIPIENT, bearer, first_sent_sender, register


async def is_locked(user_id: int) -> bool:
    async with get_async_session() as session:
        return await UserService(session).is_claim_locked(user_id, claim_day())


@pytest.mark.asyncio
async def test_reward_status(client, eth):
    eth.set_result("canClaimDailyReward", ["bool", "uint256"], [False, 19724])

    response = await client.get(f"/api/reward/status/{RECIPIENT}")

    assert response.status_code == 200
    assert response.json()["data"] == {
        "address": RECIPIENT,
        "canClaim": False,
        "lastClaimDay": 19722,
        "nextClaimDay": 19724,
    }


@pytest.mark.asyncio
async def test_reward_status_fallbacks(client, eth):
    """Short canClaim results and a failing lastClaimDay fall back to defaults."""
    eth.set_raw("canClaimDailyReward", b"")
    eth.fail_call("lastClaimDay")

    response = await client.get(f"/api/reward/status/{RECIPIENT}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["canClaim"] is True
    assert data["lastClaimDay"] == 0
    assert data["nextClaimDay"] == 0


@pytest.mark.asyncio
async def test_reward_status_accepts_unprefixed_address(client, eth):
    eth.set_result("canClaimDailyReward", ["bool", "uint256"], [True, 19724])

    response = await client.get(f"/api/reward/status/{RECIPIENT[2:]}")

    assert response.status_code == 200
    assert response.json()["data"]["canClaim"] is True


@pytest.mark.asyncio
async def test_reward_status_invalid_address(client):
    response = await client.get("/api/reward/status/not-an-address")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_claim_with_private_key(client, eth):
    response = await client.post("/api/reward/claim", json={"privateKey": "0x" + RAW_KEY})

    assert response.status_code == 200, response.text
    assert response.json()["data"]["status"] == "pending"
    assert first_sent_sender(eth) == RAW_KEY_ADDRESS
    assert eth.estimates[0][2] == SELECTORS["claimDailyReward"]


@pytest.mark.asyncio
async def test_claim_with_invalid_private_key(client, eth):
    response = await client.post("/api/reward/claim", json={"privateKey": "0x1234"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid private key"}
    assert eth.sent == []


@pytest.mark.asyncio
async def test_claim_without_credentials(client, eth):
    response = await client.post("/api/reward/claim", json={})

    assert response.status_code == 400
    assert eth.sent == []


@pytest.mark.asyncio
async def test_password_without_login_is_rejected(client, eth):
    response = await client.post("/api/reward/claim", json={"password": "pw"})

    assert response.status_code == 400
    assert eth.sent == []


@pytest.mark.asyncio
async def test_custodial_claim_locks_the_day(client, eth):
    """The first claim is submitted; a second one the same day is refused."""
    user = await register(client, "alice@example.com", "pw-alice")
    headers = bearer(user["token"])

    first = await client.post("/api/reward/claim", json={"password": "pw-alice"}, headers=headers)
    assert first.status_code == 200, first.text
    assert first_sent_sender(eth) == user["address"]
    assert await is_locked(user["user_id"])

    second = await client.post("/api/reward/claim", json={"password": "pw-alice"}, headers=headers)
    assert second.status_code == 400
    assert "already submitted" in second.json()["error"]
    assert len(eth.sent) == 1


@pytest.mark.asyncio
async def test_failed_claim_releases_the_lock(client, eth):
    """A submission failure releases the lock so the user can retry."""
    user = await register(client, "alice@example.com", "pw-alice")
    headers = bearer(user["token"])
    eth.fail_step("estimate_gas", "execution reverted")

    failed = await client.post("/api/reward/claim", json={"password": "pw-alice"}, headers=headers)
    assert failed.status_code == 500
    assert not await is_locked(user["user_id"])

    eth.failures.clear()
    retry = await client.post("/api/reward/claim", json={"password": "pw-alice"}, headers=headers)
    assert retry.status_code == 200
    assert await is_locked(user["user_id"])


@pytest.mark.asyncio
async def test_wrong_password_releases_the_lock(client, eth):
    user = await register(client, "alice@example.com", "pw-alice")

    response = await client.post(
        "/api/reward/claim", json={"password": "wrong"}, headers=bearer(user["token"])
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Wrong password or decryption failed"
    assert not await is_locked(user["user_id"])
    assert eth.sent == []


@pytest.mark.asyncio
async def test_logged_in_user_may_still_use_private_key(client, eth):
    """Without a password an authenticated caller falls back to the raw-key path."""
    user = await register(client, "alice@example.com", "pw-alice")

    response = await client.post(
        "/api/reward/claim", json={"privateKey": RAW_KEY}, headers=bearer(user["token"])
    )

    assert response.status_code == 200
    assert first_sent_sender(eth) == RAW_KEY_ADDRESS
    assert not await is_locked(user["user_id"])


@pytest.mark.asyncio
async def test_invalid_token_is_ignored_for_claims(client, eth):
    response = await client.post(
        "/api/reward/claim",
        json={"privateKey": RAW_KEY},
        headers={"Authorization": "Bearer garbage"},
    )

    assert response.status_code == 200
    assert first_sent_sender(eth) == RAW_KEY_ADDRESS


@pytest.mark.asyncio
async def test_null_fields_count_as_missing(client, eth):
    """JSON nulls fall through to the normal credential precedence."""
    user = await register(client, "alice@example.com", "pw-alice")

    response = await client.post(
        "/api/reward/claim",
        json={"privateKey": None, "password": "pw-alice"},
        headers=bearer(user["token"]),
    )
    assert response.status_code == 200, response.text
    assert first_sent_sender(eth) == user["address"]

    anonymous = await client.post("/api/reward/claim", json={"privateKey": None, "password": None})
    assert anonymous.status_code == 400
    assert anonymous.json()["error"] == "Provide a password (when logged in) or a private key"
