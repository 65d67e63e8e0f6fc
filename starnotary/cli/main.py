# starnotary/cli/main.py
"""
CLI for requesting ownership messages, checking signatures and replaying
star registrations into a fresh in-memory chain.
"""

import json
import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from starnotary.chain.blockchain import Blockchain
from starnotary.config import Settings
from starnotary.core.payload import StarPayload
from starnotary.crypto.signatures import BitcoinMessageVerifier
from starnotary.errors import StarNotaryError

app = typer.Typer(
    name="starnotary",
    help="Register stars on a tamper-evident in-memory chain",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    network: Optional[str] = typer.Option(
        None,
        "--network",
        help="Bitcoin network for address checks (overrides STARNOTARY_NETWORK)",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (overrides STARNOTARY_LOG_LEVEL)",
    ),
):
    """Star registry tooling."""
    try:
        settings = Settings.from_env(network=network, log_level=log_level)
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(2)
    configure_logging(settings.log_level)
    ctx.obj = settings


@app.command()
def message(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Wallet address that will sign the message"),
):
    """Print a fresh ownership message to sign with your wallet."""
    chain = Blockchain(verifier=lambda *_: False, settings=ctx.obj)
    console.print(chain.request_ownership_message(address), markup=False, highlight=False, soft_wrap=True)


@app.command("verify-signature")
def verify_signature(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Wallet address"),
    msg: str = typer.Argument(..., metavar="MESSAGE", help="Signed message"),
    signature: str = typer.Argument(..., help="Base64 compact signature"),
):
    """Check a signed message against an address."""
    settings: Settings = ctx.obj
    verifier = BitcoinMessageVerifier(settings.network)
    if verifier(msg, address, signature):
        console.print(f"[green]✓ Signature is valid for {address}[/]")
    else:
        console.print(f"[red]✗ Signature does not match {address}[/]")
        raise typer.Exit(1)


@app.command()
def replay(
    ctx: typer.Context,
    requests: Path = typer.Argument(..., help="JSONL file: one {address, message, signature, star} per line"),
    at: Optional[int] = typer.Option(
        None,
        "--at",
        help="Unix time to evaluate message expiry against (default: now)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print resulting blocks as JSONL instead of a table"),
):
    """Submit recorded registrations to a fresh chain and show the result."""
    settings: Settings = ctx.obj

    if not requests.exists():
        console.print(f"[red]Requests file not found: {requests}[/]")
        raise typer.Exit(1)

    clock = (lambda: at) if at is not None else time.time
    chain = Blockchain(
        verifier=BitcoinMessageVerifier(settings.network),
        clock=clock,
        settings=settings,
    )

    rejected = 0
    with open(requests, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                req = json.loads(line)
                chain.submit_star(req["address"], req["message"], req["signature"], req["star"])
            except (json.JSONDecodeError, KeyError, TypeError) as e:
                rejected += 1
                console.print(f"[yellow]line {lineno}: malformed request ({e})[/]")
            except StarNotaryError as e:
                rejected += 1
                console.print(f"[yellow]line {lineno}: rejected: {e}[/]")

    blocks = chain.get_chain()
    if as_json:
        for block in blocks:
            console.print(json.dumps(block.to_dict(), separators=(",", ":")), markup=False, highlight=False, soft_wrap=True)
    else:
        table = Table(title="Chain")
        table.add_column("Height")
        table.add_column("Timestamp")
        table.add_column("Hash")
        table.add_column("Owner")
        for block in blocks:
            owner = "—"
            if block.height > 0:
                payload = block.get_decoded_payload()
                if isinstance(payload, StarPayload):
                    owner = payload.owner
            table.add_row(str(block.height), str(block.timestamp), block.hash[:16], owner)
        console.print(table)

    result = chain.verify()
    if result.is_valid:
        console.print(f"[green]✓ {len(blocks) - 1} stars registered, chain is valid[/]")
    else:
        console.print(f"[red]{result}[/]")

    if rejected:
        console.print(f"[red]{rejected} request(s) rejected[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
