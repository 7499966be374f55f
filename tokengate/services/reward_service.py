"""
Daily reward status and claims.

Custodial claims take a (user, UTC day) lock before anything touches the
chain. The lock is kept once the transaction is submitted and released on any
failure, so a failed attempt can be retried the same day.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog

from tokengate.core.exceptions import ClaimAlreadySubmittedError, ValidationError
from tokengate.services.token_contract import TokenContract, encode_claim_daily_reward
from tokengate.services.transaction_sender import SubmittedTransaction, TransactionSender
from tokengate.services.user_service import UserService, claim_day
from tokengate.utils.validation import is_valid_address, normalize_private_key

logger = structlog.get_logger(__name__)


@dataclass
class RewardStatus:
    address: str
    can_claim: bool
    last_claim_day: int
    next_claim_day: int


class RewardService:
    """Service for the contract's daily reward."""

    def __init__(
        self,
        contract: TokenContract,
        sender: Optional[TransactionSender] = None,
        users: Optional[UserService] = None,
    ):
        self.contract = contract
        self.sender = sender
        self.users = users
        self.logger = logger.bind(service="reward_service")

    async def get_status(self, address: str) -> RewardStatus:
        if not is_valid_address(address):
            raise ValidationError("Invalid address", {"address": address})

        can_claim, next_day = await self.contract.can_claim_daily_reward(address)
        last_day = await self.contract.last_claim_day(address)

        return RewardStatus(
            address=address,
            can_claim=can_claim,
            last_claim_day=last_day or 0,
            next_claim_day=next_day,
        )

    async def _submit_claim(self, private_key) -> SubmittedTransaction:
        if self.sender is None:
            raise RuntimeError("RewardService was built without a transaction sender")
        return await self.sender.send_contract_call(
            private_key, self.contract.address, encode_claim_daily_reward()
        )

    async def claim_with_password(
        self,
        user_id: int,
        password: str,
        now: Optional[datetime] = None,
    ) -> SubmittedTransaction:
        """Claim with the user's custodial key, at most once per UTC day."""
        if self.users is None:
            raise RuntimeError("RewardService was built without a user service")

        day = claim_day(now)
        if await self.users.is_claim_locked(user_id, day):
            raise ClaimAlreadySubmittedError(user_id, day)

        await self.users.add_claim_lock(user_id, day)
        try:
            user = await self.users.get_by_id(user_id)
            private_key = await self.users.decrypt_private_key(user, password)
            tx = await self._submit_claim(private_key)
        except Exception:
            await self.users.remove_claim_lock(user_id, day)
            raise

        self.logger.info(
            "Daily reward claim submitted",
            user_id=user_id,
            claim_day=day,
            tx_hash=tx.tx_hash,
        )
        return tx

    async def claim_with_private_key(self, private_key: str) -> SubmittedTransaction:
        """Claim with a caller-supplied key. No lock is taken."""
        key = normalize_private_key(private_key)
        tx = await self._submit_claim(key)
        self.logger.info("Daily reward claim submitted with raw key", tx_hash=tx.tx_hash)
        return tx
