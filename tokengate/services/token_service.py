"""
Token queries and custodial transfers.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from eth_utils import to_checksum_address

from tokengate.core.exceptions import (
    BlockchainError,
    InsufficientBalanceError,
    SelfTransferError,
    ValidationError,
)
from tokengate.services.token_contract import TokenContract, encode_transfer
from tokengate.services.transaction_sender import SubmittedTransaction, TransactionSender
from tokengate.services.user_service import UserService
from tokengate.utils.validation import format_units, is_valid_address, parse_amount

logger = structlog.get_logger(__name__)

DEFAULT_DECIMALS = 18
DISPLAY_PLACES = 6


@dataclass
class TokenInfo:
    name: str
    symbol: str
    decimals: int
    total_supply: str
    version: Optional[str] = None


@dataclass
class BalanceInfo:
    address: str
    balance: str
    symbol: str


class TokenService:
    """Service for token metadata, balances and transfers."""

    def __init__(
        self,
        contract: TokenContract,
        sender: Optional[TransactionSender] = None,
        users: Optional[UserService] = None,
    ):
        self.contract = contract
        self.sender = sender
        self.users = users
        self.logger = logger.bind(service="token_service")

    async def get_token_info(self) -> TokenInfo:
        """Name, symbol, decimals and formatted supply; version when available."""
        name = await self.contract.name()
        symbol = await self.contract.symbol()
        decimals = await self.contract.decimals()
        total_supply = await self.contract.total_supply()

        try:
            version = await self.contract.version() or None
        except BlockchainError:
            version = None

        return TokenInfo(
            name=name,
            symbol=symbol,
            decimals=decimals,
            total_supply=format_units(total_supply, decimals, DISPLAY_PLACES),
            version=version,
        )

    async def get_balance(self, address: str) -> BalanceInfo:
        """Formatted token balance of an address."""
        if not is_valid_address(address):
            raise ValidationError("Invalid address", {"address": address})

        balance = await self.contract.balance_of(address)

        try:
            decimals = await self.contract.decimals()
        except BlockchainError:
            decimals = DEFAULT_DECIMALS

        try:
            symbol = await self.contract.symbol()
        except BlockchainError:
            symbol = ""

        return BalanceInfo(
            address=address,
            balance=format_units(balance, decimals, DISPLAY_PLACES),
            symbol=symbol,
        )

    async def get_resume(self) -> str:
        return await self.contract.get_resume()

    async def transfer(
        self,
        user_id: int,
        to: str,
        amount: str,
        password: str,
    ) -> SubmittedTransaction:
        """Send `amount` base units from the user's custodial address to `to`."""
        if self.users is None or self.sender is None:
            raise RuntimeError("TokenService was built without transfer support")

        if not to or not amount or not password:
            raise ValidationError("to, amount and password are required")
        if not is_valid_address(to):
            raise ValidationError("Invalid recipient address", {"to": to})
        value = parse_amount(amount)

        user = await self.users.get_by_id(user_id)
        private_key = await self.users.decrypt_private_key(user, password)

        if to_checksum_address(user.address) == to_checksum_address(to):
            raise SelfTransferError(to)

        available = await self.contract.balance_of(user.address)
        if available < value:
            raise InsufficientBalanceError(value, available)

        tx = await self.sender.send_contract_call(
            private_key, self.contract.address, encode_transfer(to, value)
        )
        self.logger.info(
            "Transfer submitted",
            user_id=user_id,
            to=to,
            amount=str(value),
            tx_hash=tx.tx_hash,
        )
        return tx
