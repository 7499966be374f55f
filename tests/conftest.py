"""
Shared fixtures: in-memory database, a fake Ethereum node and an HTTP client.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pytest
import pytest_asyncio
from eth_abi import encode
from eth_utils import keccak, to_hex
from httpx import ASGITransport, AsyncClient

from tokengate.core.database import DatabaseManager, close_database, get_async_session, init_database
from tokengate.core.exceptions import BlockchainError
from tokengate.services.token_contract import SELECTORS


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Hardhat's first default account
RAW_KEY = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
RAW_KEY_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

RECIPIENT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


class FakeEthClient:
    """
    Stands in for EthereumClient.

    eth_call results are keyed by contract function name; every transaction
    primitive is recorded in `steps` so tests can check ordering.
    """

    def __init__(self):
        self._by_selector = {selector: name for name, selector in SELECTORS.items()}
        self.results: Dict[str, Union[bytes, Exception]] = {}
        self.failures: Dict[str, Exception] = {}
        self.calls: List[Tuple[str, str, bytes]] = []
        self.steps: List[str] = []
        self.estimates: List[Tuple[str, str, bytes]] = []
        self.sent: List[bytes] = []
        self.nonce = 7
        self.chain_id = 11155111
        self.gas_price = 2_000_000_000
        self.gas = 65_000

    # Test helpers

    def set_result(self, name: str, types: Sequence[str], values: Sequence[Any]) -> None:
        self.results[name] = encode(list(types), list(values))

    def set_raw(self, name: str, raw: bytes) -> None:
        self.results[name] = raw

    def fail_call(self, name: str, message: str = "execution reverted") -> None:
        self.results[name] = BlockchainError(f"Contract call failed: {message}")

    def fail_step(self, step: str, message: str = "boom") -> None:
        self.failures[step] = BlockchainError(f"Failed at {step}: {message}")

    def _step(self, step: str) -> None:
        self.steps.append(step)
        if step in self.failures:
            raise self.failures[step]

    # EthereumClient interface

    async def call(self, to: str, data: bytes) -> bytes:
        name = self._by_selector.get(bytes(data[:4]), "unknown")
        self.calls.append((to, name, bytes(data)))
        result = self.results.get(name)
        if isinstance(result, Exception):
            raise result
        if result is None:
            raise BlockchainError("Contract call failed: execution reverted")
        return result

    async def get_pending_nonce(self, address: str) -> int:
        self._step("nonce")
        return self.nonce

    async def get_chain_id(self) -> int:
        self._step("chain_id")
        return self.chain_id

    async def get_gas_price(self) -> int:
        self._step("gas_price")
        return self.gas_price

    async def estimate_gas(self, from_address: str, to: str, data: bytes) -> int:
        self._step("estimate_gas")
        self.estimates.append((from_address, to, bytes(data)))
        return self.gas

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        self._step("send")
        self.sent.append(bytes(raw_transaction))
        return to_hex(keccak(raw_transaction))

    async def close(self) -> None:
        pass


def default_token_state(client: FakeEthClient) -> FakeEthClient:
    client.set_result("name", ["string"], ["QXB Token"])
    client.set_result("symbol", ["string"], ["QXB"])
    client.set_result("decimals", ["uint8"], [18])
    client.set_result("totalSupply", ["uint256"], [1_000_000 * 10**18])
    client.set_result("version", ["string"], ["1.0.0"])
    client.set_result("balanceOf", ["uint256"], [1500 * 10**18])
    client.set_result("canClaimDailyReward", ["bool", "uint256"], [True, 0])
    client.set_result("lastClaimDay", ["uint256"], [19722])
    client.set_result("getResume", ["string"], ["# Resume\n\nHello"])
    return client


@pytest.fixture
def eth() -> FakeEthClient:
    """Fake node preloaded with a healthy token contract."""
    return default_token_state(FakeEthClient())


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test."""
    await init_database(TEST_DATABASE_URL)
    await DatabaseManager.create_tables()
    yield
    await close_database()


@pytest_asyncio.fixture
async def session(db):
    async with get_async_session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db, eth):
    """HTTP client bound to a fresh app wired to the fake node."""
    from tokengate.api.main import create_app

    app = create_app()
    app.state.eth_client = eth
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def register(client: AsyncClient, email: str = "alice@example.com",
                   password: str = "correct horse") -> Dict[str, Any]:
    response = await client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["data"]


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def first_sent_sender(eth: FakeEthClient) -> Optional[str]:
    from eth_account import Account

    if not eth.sent:
        return None
    return Account.recover_transaction(eth.sent[0])
