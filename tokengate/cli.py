"""
Command line interface for the QXB token gateway.

Server and database management plus a few contract-owner tools that sign
with PRIVATE_KEY.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from tokengate.core.config import NetworkConfig, settings
from tokengate.core.database import DatabaseManager, close_database, init_database
from tokengate.core.exceptions import GatewayException
from tokengate.core.logging import get_logger, setup_logging
from tokengate.services.eth_client import EthereumClient
from tokengate.services.token_contract import TokenContract, encode_set_resume, encode_transfer
from tokengate.services.transaction_sender import TransactionSender
from tokengate.utils.validation import format_units, is_valid_address, normalize_private_key, parse_amount

console = Console()
logger = get_logger(__name__)
app = typer.Typer(help="QXB token gateway commands")

DEFAULT_OWNER_TRANSFER_AMOUNT = "10000000000000000000"  # 10 QXB at 18 decimals


def _run(coro) -> None:
    """Run a command coroutine, turning gateway errors into a non-zero exit."""
    try:
        asyncio.run(coro)
    except GatewayException as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(code=1)


def _owner_key() -> str:
    if not settings.private_key:
        console.print("[red]❌ PRIVATE_KEY is not set (contract owner key)[/red]")
        raise typer.Exit(code=1)
    return normalize_private_key(settings.private_key)


# ============================================================================
# SERVER AND DATABASE
# ============================================================================

@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Listen port"),
    reload: bool = typer.Option(False, help="Auto-reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "tokengate.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("init-db")
def init_db():
    """Initialize database with tables."""
    async def _init():
        setup_logging()
        await init_database()
        await DatabaseManager.create_tables()
        await close_database()
        console.print("✅ Database initialized successfully!")

    _run(_init())


@app.command("reset-db")
def reset_db():
    """Reset database (drop all tables)."""
    confirm = typer.confirm("Are you sure you want to drop all tables?")
    if not confirm:
        console.print("❌ Operation cancelled")
        return

    async def _reset():
        setup_logging()
        await init_database()
        await DatabaseManager.drop_tables()
        await close_database()
        console.print("🗑️ All tables dropped!")

    _run(_reset())


@app.command("db-health")
def db_health():
    """Check database health."""
    async def _health() -> bool:
        setup_logging()
        await init_database()
        try:
            return await DatabaseManager.health_check()
        finally:
            await close_database()

    if asyncio.run(_health()):
        console.print("✅ Database is healthy!")
    else:
        console.print("❌ Database health check failed!")
        raise typer.Exit(code=1)


# ============================================================================
# CHAIN INSPECTION
# ============================================================================

@app.command()
def network():
    """Show the connected network and latest block."""
    async def _network():
        setup_logging()
        async with EthereumClient() as client:
            chain_id = await client.get_chain_id()
            block = await client.get_block_info()

        table = Table(title="Network")
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("RPC", settings.ethereum_rpc_url)
        table.add_row("Chain ID", str(chain_id))
        table.add_row("Network", NetworkConfig.get_network_name(chain_id))
        table.add_row("Block", str(block.number))
        table.add_row("Hash", block.hash)
        table.add_row("Time", block.timestamp.isoformat())
        table.add_row("Gas used / limit", f"{block.gas_used} / {block.gas_limit}")
        table.add_row("Transactions", str(block.transaction_count))
        console.print(table)

    _run(_network())


@app.command()
def balance(address: str = typer.Argument(..., help="Address to inspect")):
    """Show native and token balances of an address."""
    if not is_valid_address(address):
        console.print("[red]❌ Invalid address[/red]")
        raise typer.Exit(code=1)

    async def _balance():
        setup_logging()
        async with EthereumClient() as client:
            contract = TokenContract(client, settings.contract_address)
            native = await client.get_balance(address)
            tokens = await contract.balance_of(address)
            decimals = await contract.decimals()
            symbol = await contract.symbol()

        console.print(f"Address: {address}")
        console.print(f"ETH: {format_units(native, 18, 4)}")
        console.print(f"{symbol}: {format_units(tokens, decimals, 6)}")

    _run(_balance())


@app.command("contract-info")
def contract_info():
    """Show code size, native balance and token metadata of the contract."""
    async def _info():
        setup_logging()
        async with EthereumClient() as client:
            info = await client.get_contract_info(settings.contract_address)
            table = Table(title="Contract")
            table.add_column("Field", style="cyan")
            table.add_column("Value", style="green")
            table.add_row("Address", info.address)
            table.add_row("Deployed", "yes" if info.has_code else "no")
            table.add_row("Code size", f"{info.code_size} bytes")
            table.add_row("ETH balance", format_units(info.balance, 18, 4))

            if info.has_code:
                contract = TokenContract(client, info.address)
                decimals = await contract.decimals()
                table.add_row("Name", await contract.name())
                table.add_row("Symbol", await contract.symbol())
                table.add_row("Decimals", str(decimals))
                table.add_row("Total supply", format_units(await contract.total_supply(), decimals, 6))

        console.print(table)

    _run(_info())


# ============================================================================
# OWNER TOOLS
# ============================================================================

@app.command("owner-transfer")
def owner_transfer(
    to: str = typer.Option(..., "--to", help="Recipient address"),
    amount: str = typer.Option(
        DEFAULT_OWNER_TRANSFER_AMOUNT, "--amount", help="Amount in base units"
    ),
):
    """Transfer tokens from the contract owner account."""
    if not is_valid_address(to):
        console.print("[red]❌ Invalid recipient address[/red]")
        raise typer.Exit(code=1)

    async def _transfer():
        setup_logging()
        key = _owner_key()
        value = parse_amount(amount)
        async with EthereumClient() as client:
            sender = TransactionSender(client)
            tx = await sender.send_contract_call(
                key, settings.contract_address, encode_transfer(to, value)
            )

        console.print(f"✅ Transfer submitted: txHash={tx.tx_hash}")
        console.print(f"to={to} amount={value} (base units)")

    _run(_transfer())


@app.command("set-resume")
def set_resume(
    file: Path = typer.Option(..., "--file", exists=True, dir_okay=False, help="Markdown file"),
    timeout: int = typer.Option(300, help="Seconds to wait for the receipt"),
):
    """Store a Markdown resume in the contract and wait for confirmation."""
    text = file.read_text(encoding="utf-8").strip()
    if not text:
        console.print("[red]❌ Resume file is empty[/red]")
        raise typer.Exit(code=1)

    console.print(f"📄 Resume length: {len(text)} characters")

    async def _set_resume():
        setup_logging()
        key = _owner_key()
        async with EthereumClient() as client:
            sender = TransactionSender(client)
            tx = await sender.send_contract_call(
                key, settings.contract_address, encode_set_resume(text)
            )
            console.print(f"🚀 Transaction sent: {tx.tx_hash}")
            console.print(f"   Nonce: {tx.nonce}, gas limit: {tx.gas_limit}, "
                          f"gas price: {format_units(tx.gas_price, 9, 2)} Gwei")
            console.print("⏳ Waiting for confirmation...")
            receipt = await client.wait_for_receipt(tx.tx_hash, timeout=timeout)

        if receipt.get("status") == 0:
            console.print(f"[red]❌ Transaction failed in block {receipt.get('blockNumber')}[/red]")
            raise typer.Exit(code=1)

        console.print(
            f"✅ Resume stored in block {receipt.get('blockNumber')}, "
            f"gas used {receipt.get('gasUsed')}"
        )

    _run(_set_resume())


if __name__ == "__main__":
    app()
