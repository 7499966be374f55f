"""
Signs and broadcasts contract calls.

Submission is strictly ordered: pending nonce, chain ID, gas price, gas
estimate, sign, send. Nothing is retried here.
"""

from dataclasses import dataclass
from typing import Union

import structlog
from eth_account import Account
from eth_utils import to_checksum_address, to_hex

from tokengate.core.exceptions import BlockchainError


logger = structlog.get_logger(__name__)


@dataclass
class SubmittedTransaction:
    """A transaction accepted by the node but not yet mined."""
    tx_hash: str
    nonce: int
    gas_limit: int
    gas_price: int
    status: str = "pending"


class TransactionSender:
    """Builds legacy EIP-155 transactions for a single target contract."""

    def __init__(self, client):
        self.client = client
        self.logger = logger.bind(service="transaction_sender")

    async def send_contract_call(
        self,
        private_key: Union[str, bytes],
        to: str,
        data: bytes,
    ) -> SubmittedTransaction:
        """Sign `data` as a zero-value call to `to` and broadcast it."""
        account = Account.from_key(private_key)
        sender = account.address
        to = to_checksum_address(to)

        nonce = await self.client.get_pending_nonce(sender)
        chain_id = await self.client.get_chain_id()
        gas_price = await self.client.get_gas_price()
        gas_limit = await self.client.estimate_gas(sender, to, data)

        transaction = {
            "nonce": nonce,
            "gasPrice": gas_price,
            "gas": gas_limit,
            "to": to,
            "value": 0,
            "data": to_hex(data),
            "chainId": chain_id,
        }

        try:
            signed = Account.sign_transaction(transaction, account.key)
        except Exception as e:
            self.logger.error("Failed to sign transaction", sender=sender, error=str(e))
            raise BlockchainError(f"Failed to sign transaction: {e}")

        tx_hash = await self.client.send_raw_transaction(signed.raw_transaction)

        self.logger.info(
            "Transaction submitted",
            tx_hash=tx_hash,
            sender=sender,
            to=to,
            nonce=nonce,
            gas=gas_limit,
            gas_price=gas_price,
        )

        return SubmittedTransaction(
            tx_hash=tx_hash,
            nonce=nonce,
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
