"""
Ethereum JSON-RPC client service.
Wraps AsyncWeb3 with the handful of calls the gateway needs: contract reads,
transaction submission primitives and a few node inspection helpers.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import aiohttp
import structlog
from eth_utils import to_checksum_address, to_hex
from web3 import AsyncHTTPProvider, AsyncWeb3

from tokengate.core.config import NetworkConfig
from tokengate.core.exceptions import BlockchainError


logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class BlockInfo:
    """Block header summary."""
    number: int
    hash: str
    parent_hash: str
    timestamp: datetime
    gas_used: int
    gas_limit: int
    transaction_count: int


@dataclass
class ContractInfo:
    """On-chain state of a contract account."""
    address: str
    has_code: bool
    code_size: int
    balance: int


class EthereumClient:
    """
    Async Ethereum RPC client.

    Every failure is raised as BlockchainError with a message naming the
    step that failed. Only the read-only inspection helpers retry.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        retry_delay: float = 1.0,
    ):
        rpc_config = NetworkConfig.get_rpc_config()
        self.endpoint = endpoint or rpc_config["endpoint"]
        self.timeout = timeout or rpc_config["timeout"]
        self.max_retries = max_retries or rpc_config["max_retries"]
        self.retry_delay = retry_delay
        self.w3 = AsyncWeb3(
            AsyncHTTPProvider(
                self.endpoint,
                request_kwargs={"timeout": aiohttp.ClientTimeout(total=self.timeout)},
            )
        )
        self.chain_id: Optional[int] = None
        self.logger = logger.bind(service="eth_client")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the provider session."""
        await self.w3.provider.disconnect()

    async def connect(self) -> int:
        """Check connectivity by fetching the chain ID."""
        chain_id = await self.get_chain_id()
        self.chain_id = chain_id
        self.logger.info(
            "Connected to Ethereum node",
            chain_id=chain_id,
            network=NetworkConfig.get_network_name(chain_id),
        )
        return chain_id

    async def _with_retries(self, step: str, func: Callable[[], Awaitable[T]]) -> T:
        """Run an RPC call up to max_retries times with linear back-off."""
        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                return await func()
            except Exception as e:
                last_error = e
                self.logger.warning(
                    "RPC call failed, retrying",
                    step=step,
                    attempt=attempt + 1,
                    error=str(e),
                )
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(self.retry_delay * (attempt + 1))

        raise BlockchainError(
            f"Failed to {step} after {self.max_retries} attempts: {last_error}"
        )

    # Contract reads

    async def call(self, to: str, data: bytes) -> bytes:
        """Execute eth_call against the latest block."""
        try:
            result = await self.w3.eth.call(
                {"to": to_checksum_address(to), "data": to_hex(data)},
                "latest",
            )
            return bytes(result)
        except Exception as e:
            self.logger.error("eth_call failed", to=to, error=str(e))
            raise BlockchainError(f"Contract call failed: {e}")

    # Transaction primitives

    async def get_chain_id(self) -> int:
        try:
            return await self.w3.eth.chain_id
        except Exception as e:
            self.logger.error("Failed to get chain ID", error=str(e))
            raise BlockchainError(f"Failed to get chain ID: {e}")

    async def get_pending_nonce(self, address: str) -> int:
        try:
            return await self.w3.eth.get_transaction_count(
                to_checksum_address(address), "pending"
            )
        except Exception as e:
            self.logger.error("Failed to get nonce", address=address, error=str(e))
            raise BlockchainError(f"Failed to get nonce: {e}")

    async def get_gas_price(self) -> int:
        try:
            return await self.w3.eth.gas_price
        except Exception as e:
            self.logger.error("Failed to get gas price", error=str(e))
            raise BlockchainError(f"Failed to get gas price: {e}")

    async def estimate_gas(self, from_address: str, to: str, data: bytes) -> int:
        try:
            return await self.w3.eth.estimate_gas({
                "from": to_checksum_address(from_address),
                "to": to_checksum_address(to),
                "data": to_hex(data),
            })
        except Exception as e:
            self.logger.error("Gas estimation failed", to=to, error=str(e))
            raise BlockchainError(f"Failed to estimate gas: {e}")

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """Broadcast a signed transaction and return its hash."""
        try:
            tx_hash = await self.w3.eth.send_raw_transaction(raw_transaction)
            return to_hex(tx_hash)
        except Exception as e:
            self.logger.error("Failed to send transaction", error=str(e))
            raise BlockchainError(f"Failed to send transaction: {e}")

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 180,
        poll_latency: float = 2,
    ) -> Dict[str, Any]:
        """Block until the transaction is mined."""
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout, poll_latency=poll_latency
            )
            return dict(receipt)
        except Exception as e:
            self.logger.error("Failed waiting for receipt", tx_hash=tx_hash, error=str(e))
            raise BlockchainError(f"Failed to get transaction receipt: {e}")

    # Node inspection

    async def get_balance(self, address: str) -> int:
        """Native balance in wei."""
        checksum = to_checksum_address(address)
        return await self._with_retries(
            "get balance", lambda: self.w3.eth.get_balance(checksum, "latest")
        )

    async def get_block_info(self, number: Optional[int] = None) -> BlockInfo:
        """Header summary for a block (latest when number is None)."""
        identifier = "latest" if number is None else number
        block = await self._with_retries(
            "get block header",
            lambda: self.w3.eth.get_block(identifier, full_transactions=False),
        )

        return BlockInfo(
            number=block["number"],
            hash=to_hex(block["hash"]),
            parent_hash=to_hex(block["parentHash"]),
            timestamp=datetime.fromtimestamp(block["timestamp"], tz=timezone.utc),
            gas_used=block["gasUsed"],
            gas_limit=block["gasLimit"],
            transaction_count=len(block.get("transactions") or []),
        )

    async def get_contract_info(self, address: str) -> ContractInfo:
        """Code presence and native balance of a contract address."""
        checksum = to_checksum_address(address)
        try:
            code = await self.w3.eth.get_code(checksum)
        except Exception as e:
            self.logger.error("Failed to get contract code", address=address, error=str(e))
            raise BlockchainError(f"Failed to get contract code: {e}")

        balance = await self.get_balance(checksum)
        return ContractInfo(
            address=checksum,
            has_code=len(code) > 0,
            code_size=len(code),
            balance=balance,
        )
