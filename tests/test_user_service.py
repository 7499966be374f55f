"""
Test user accounts and claim locks against an in-memory database.
"""

from datetime import datetime, timezone

import pytest
from eth_account import Account

from tokengate.core.database import get_async_session
from tokengate.core.exceptions import (
    ClaimAlreadySubmittedError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    KeyDecryptionError,
    UserNotFoundError,
    ValidationError,
)
from tokengate.services.user_service import UserService, claim_day


def test_claim_day_is_whole_utc_days():
    assert claim_day(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 0
    assert claim_day(datetime(1970, 1, 2, 0, 0, 1, tzinfo=timezone.utc)) == 1
    assert claim_day(datetime(2024, 1, 1, 23, 59, 59, tzinfo=timezone.utc)) == 19723
    assert claim_day(datetime(2024, 1, 2, 0, 0, 0, tzinfo=timezone.utc)) == 19724


@pytest.mark.asyncio
async def test_register_creates_custodial_account(session):
    """Registration stores an address whose key unwraps with the password."""
    users = UserService(session)
    user = await users.register("  Alice@Example.com ", "pw-123")

    assert user.id is not None
    assert user.email == "alice@example.com"
    assert user.address.startswith("0x") and len(user.address) == 42
    assert user.created_at is not None

    key = await users.decrypt_private_key(user, "pw-123")
    assert len(key) == 32
    assert Account.from_key(key).address == user.address


@pytest.mark.asyncio
async def test_register_rejects_duplicate_email(session):
    users = UserService(session)
    await users.register("bob@example.com", "pw")

    with pytest.raises(EmailAlreadyRegisteredError):
        await users.register("BOB@example.com", "other")


@pytest.mark.asyncio
async def test_register_requires_credentials(session):
    users = UserService(session)

    with pytest.raises(ValidationError):
        await users.register("   ", "pw")
    with pytest.raises(ValidationError):
        await users.register("x@example.com", "")


@pytest.mark.asyncio
async def test_authenticate(session):
    """Login succeeds with the right password only."""
    users = UserService(session)
    created = await users.register("carol@example.com", "s3cret")

    user = await users.authenticate("Carol@example.com", "s3cret")
    assert user.id == created.id

    with pytest.raises(InvalidCredentialsError):
        await users.authenticate("carol@example.com", "wrong")
    with pytest.raises(InvalidCredentialsError):
        await users.authenticate("nobody@example.com", "s3cret")


@pytest.mark.asyncio
async def test_wrong_password_cannot_decrypt_key(session):
    users = UserService(session)
    user = await users.register("dave@example.com", "right")

    with pytest.raises(KeyDecryptionError):
        await users.decrypt_private_key(user, "wrong")


@pytest.mark.asyncio
async def test_get_by_id_missing(session):
    with pytest.raises(UserNotFoundError):
        await UserService(session).get_by_id(999)


@pytest.mark.asyncio
async def test_claim_lock_lifecycle(session):
    """A lock can be added, observed and released."""
    users = UserService(session)

    assert not await users.is_claim_locked(1, 20000)
    await users.add_claim_lock(1, 20000)
    assert await users.is_claim_locked(1, 20000)
    assert not await users.is_claim_locked(1, 20001)
    assert not await users.is_claim_locked(2, 20000)

    await users.remove_claim_lock(1, 20000)
    assert not await users.is_claim_locked(1, 20000)


@pytest.mark.asyncio
async def test_duplicate_claim_lock_rejected(db):
    """A concurrent second insert for the same (user, day) fails."""
    async with get_async_session() as first:
        await UserService(first).add_claim_lock(5, 20000)

    async with get_async_session() as second:
        with pytest.raises(ClaimAlreadySubmittedError):
            await UserService(second).add_claim_lock(5, 20000)
