"""
Binding for the QXB token contract.

Calldata is built from the function signature with eth-abi. Reads go through
any client exposing `async call(to, data) -> bytes`.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from tokengate.core.exceptions import BlockchainError


logger = structlog.get_logger(__name__)


TOKEN_ABI: List[Dict[str, Any]] = [
    {"type": "function", "name": "name", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "string"}]},
    {"type": "function", "name": "symbol", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "string"}]},
    {"type": "function", "name": "decimals", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "uint8"}]},
    {"type": "function", "name": "totalSupply", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "uint256"}]},
    {"type": "function", "name": "balanceOf", "stateMutability": "view",
     "inputs": [{"name": "", "type": "address"}],
     "outputs": [{"name": "", "type": "uint256"}]},
    {"type": "function", "name": "canClaimDailyReward", "stateMutability": "view",
     "inputs": [{"name": "_user", "type": "address"}],
     "outputs": [{"name": "canClaim", "type": "bool"},
                 {"name": "nextClaimDay", "type": "uint256"}]},
    {"type": "function", "name": "getClaimDayInfo", "stateMutability": "view",
     "inputs": [{"name": "_user", "type": "address"}],
     "outputs": [{"name": "lastDay", "type": "uint256"},
                 {"name": "currentDay", "type": "uint256"}]},
    {"type": "function", "name": "lastClaimDay", "stateMutability": "view",
     "inputs": [{"name": "", "type": "address"}],
     "outputs": [{"name": "", "type": "uint256"}]},
    {"type": "function", "name": "version", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "string"}]},
    {"type": "function", "name": "getResume", "stateMutability": "view",
     "inputs": [], "outputs": [{"name": "", "type": "string"}]},
    {"type": "function", "name": "setResume", "stateMutability": "nonpayable",
     "inputs": [{"name": "_resume", "type": "string"}], "outputs": []},
    {"type": "function", "name": "claimDailyReward", "stateMutability": "nonpayable",
     "inputs": [], "outputs": [{"name": "success", "type": "bool"}]},
    {"type": "function", "name": "transfer", "stateMutability": "nonpayable",
     "inputs": [{"name": "to", "type": "address"},
                {"name": "amount", "type": "uint256"}],
     "outputs": [{"name": "", "type": "bool"}]},
]


def _signature(entry: Dict[str, Any]) -> str:
    types = ",".join(arg["type"] for arg in entry["inputs"])
    return f"{entry['name']}({types})"


FUNCTIONS: Dict[str, Dict[str, Any]] = {entry["name"]: entry for entry in TOKEN_ABI}

SELECTORS: Dict[str, bytes] = {
    name: function_signature_to_4byte_selector(_signature(entry))
    for name, entry in FUNCTIONS.items()
}


def encode_call(name: str, args: Sequence[Any] = ()) -> bytes:
    """Selector followed by the ABI-encoded arguments."""
    entry = FUNCTIONS[name]
    types = [arg["type"] for arg in entry["inputs"]]
    return SELECTORS[name] + encode(types, list(args))


def decode_output(name: str, data: bytes) -> Tuple[Any, ...]:
    entry = FUNCTIONS[name]
    return decode([out["type"] for out in entry["outputs"]], data)


def encode_claim_daily_reward() -> bytes:
    return encode_call("claimDailyReward")


def encode_transfer(to: str, amount: int) -> bytes:
    return encode_call("transfer", [to_checksum_address(to), amount])


def encode_set_resume(text: str) -> bytes:
    return encode_call("setResume", [text])


class TokenContract:
    """Read-only view of the token contract plus calldata helpers."""

    def __init__(self, client, address: str):
        self.client = client
        self.address = to_checksum_address(address)
        self.logger = logger.bind(service="token_contract", contract=self.address)

    async def _call(self, name: str, args: Sequence[Any] = ()) -> bytes:
        return await self.client.call(self.address, encode_call(name, args))

    async def _query(self, name: str, args: Sequence[Any] = ()) -> Any:
        """Call a single-output view function and decode its value."""
        try:
            raw = await self._call(name, args)
            return decode_output(name, raw)[0]
        except Exception as e:
            self.logger.error("Contract query failed", method=name, error=str(e))
            raise BlockchainError(f"Failed to query {name}: {e}")

    async def name(self) -> str:
        return await self._query("name")

    async def symbol(self) -> str:
        return await self._query("symbol")

    async def decimals(self) -> int:
        return await self._query("decimals")

    async def total_supply(self) -> int:
        return await self._query("totalSupply")

    async def version(self) -> str:
        return await self._query("version")

    async def get_resume(self) -> str:
        return await self._query("getResume")

    async def balance_of(self, address: str) -> int:
        """Token balance in base units; an empty result counts as zero."""
        try:
            raw = await self._call("balanceOf", [to_checksum_address(address)])
        except Exception as e:
            self.logger.error("Contract query failed", method="balanceOf", error=str(e))
            raise BlockchainError(f"Failed to query balanceOf: {e}")

        if not raw:
            return 0
        return int.from_bytes(raw[-32:], "big")

    async def can_claim_daily_reward(self, address: str) -> Tuple[bool, int]:
        """
        Returns (can_claim, next_claim_day).

        Results shorter than two ABI words read as (True, 0).
        """
        try:
            raw = await self._call("canClaimDailyReward", [to_checksum_address(address)])
        except Exception as e:
            self.logger.error("Contract query failed", method="canClaimDailyReward", error=str(e))
            raise BlockchainError(f"Failed to query canClaimDailyReward: {e}")

        if len(raw) < 64:
            return True, 0
        return raw[31] != 0, int.from_bytes(raw[32:64], "big")

    async def get_claim_day_info(self, address: str) -> Tuple[int, int]:
        """Returns (last_day, current_day) as tracked by the contract."""
        name = "getClaimDayInfo"
        try:
            raw = await self._call(name, [to_checksum_address(address)])
            last_day, current_day = decode_output(name, raw)
        except Exception as e:
            self.logger.error("Contract query failed", method=name, error=str(e))
            raise BlockchainError(f"Failed to query {name}: {e}")
        return last_day, current_day

    async def last_claim_day(self, address: str) -> Optional[int]:
        """Last claimed day, or None when the contract cannot tell us."""
        try:
            raw = await self._call("lastClaimDay", [to_checksum_address(address)])
        except Exception as e:
            self.logger.warning("lastClaimDay unavailable", error=str(e))
            return None

        if len(raw) < 32:
            return None
        return int.from_bytes(raw[-32:], "big")
