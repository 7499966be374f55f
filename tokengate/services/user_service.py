"""
User accounts and daily claim locks.
Handles registration with a freshly generated custodial key, login, and the
per-day lock that keeps a user from submitting two claims on one UTC day.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from eth_account import Account
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from tokengate.auth.crypto import (
    decrypt_private_key,
    encrypt_private_key,
    hash_password,
    verify_password,
)
from tokengate.core.exceptions import (
    ClaimAlreadySubmittedError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
)
from tokengate.models.claim_lock import ClaimLock
from tokengate.models.user import User

logger = structlog.get_logger(__name__)

SECONDS_PER_DAY = 86400


def claim_day(now: Optional[datetime] = None) -> int:
    """Whole UTC days since the Unix epoch."""
    now = now or datetime.now(timezone.utc)
    return int(now.timestamp()) // SECONDS_PER_DAY


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Service for user accounts and claim locks."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="user_service")

    # ============================================================================
    # ACCOUNTS
    # ============================================================================

    async def register(self, email: str, password: str) -> User:
        """Create a user with a new secp256k1 key wrapped under the password."""
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        if await self.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError(email)

        account = Account.create()
        # argon2id is CPU-bound
        password_hash, pass_salt = await asyncio.to_thread(hash_password, password)
        enc_priv_key, enc_salt = await asyncio.to_thread(
            encrypt_private_key, password, bytes(account.key)
        )

        user = User(
            email=email,
            address=account.address,
            enc_priv_key=enc_priv_key,
            enc_salt=enc_salt,
            pass_salt=pass_salt,
            password_hash=password_hash,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise EmailAlreadyRegisteredError(email) from e

        await self.db.refresh(user)
        self.logger.info("User registered", user_id=user.id, address=user.address)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user for a valid email/password pair."""
        user = await self.get_by_email(normalize_email(email))
        if user is None:
            raise InvalidCredentialsError()

        valid = await asyncio.to_thread(
            verify_password, password, user.password_hash, user.pass_salt
        )
        if not valid:
            self.logger.info("Login rejected", user_id=user.id)
            raise InvalidCredentialsError()

        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def decrypt_private_key(self, user: User, password: str) -> bytes:
        """Unwrap the user's signing key. Raises KeyDecryptionError on a wrong password."""
        return await asyncio.to_thread(
            decrypt_private_key, password, user.enc_priv_key, user.enc_salt
        )

    # ============================================================================
    # CLAIM LOCKS
    # ============================================================================

    async def is_claim_locked(self, user_id: int, day: int) -> bool:
        lock = await self.db.get(ClaimLock, (user_id, day))
        return lock is not None

    async def add_claim_lock(self, user_id: int, day: int) -> None:
        """Take the lock for (user, day), committed immediately."""
        self.db.add(ClaimLock(user_id=user_id, claim_day=day))
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ClaimAlreadySubmittedError(user_id, day) from e

        self.logger.info("Claim lock added", user_id=user_id, claim_day=day)

    async def remove_claim_lock(self, user_id: int, day: int) -> None:
        await self.db.execute(
            delete(ClaimLock).where(
                ClaimLock.user_id == user_id,
                ClaimLock.claim_day == day,
            )
        )
        await self.db.commit()
        self.logger.info("Claim lock released", user_id=user_id, claim_day=day)
