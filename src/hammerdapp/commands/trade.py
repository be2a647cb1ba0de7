"""
Trade - wallet-backed actions.

Flow for assemble / purchase:
1. Initialize the injected wallet provider (fails without a key)
2. Connect: the wallet asks before revealing the account
3. Submit the call; the wallet asks before signing
4. Wait for confirmation, then re-read the inventory
"""

from __future__ import annotations

import click

from ..core.controller import DEFAULT_HAMMER_NAME, DappController
from ..core.provider import AccessMode
from ..core.session import SessionState
from ..units import parse_ether
from .runtime import exit_on_failure, print_panel, rpc_url_option, run_with_controller

yes_option = click.option(
    "--yes", "-y", "assume_yes", is_flag=True, help="Approve wallet prompts without asking"
)


@click.command()
@rpc_url_option
@yes_option
def connect(rpc_url: str | None, assume_yes: bool) -> None:
    """Connect the wallet and show the account it exposes."""
    click.echo("=== Connect Wallet ===")
    click.echo("")

    async def _connect(controller: DappController) -> None:
        if controller.context.provider is not None:
            await controller.connect()

    controller, _ = run_with_controller(
        AccessMode.WALLET_INJECTED, rpc_url, assume_yes, _connect
    )
    print_panel(controller)
    exit_on_failure(controller)


@click.command()
@click.option("--name", default=DEFAULT_HAMMER_NAME, show_default=True, help="Hammer name")
@click.option("--price", default="0.3", show_default=True, help="Sale price in ETH")
@rpc_url_option
@yes_option
def assemble(name: str, price: str, rpc_url: str | None, assume_yes: bool) -> None:
    """
    Assemble a hammer (owner only).

    Authorization is enforced by the contract; a non-owner account sees
    the transaction fail.
    """
    click.echo("=== Assemble Hammer ===")
    click.echo("")

    try:
        price_wei = parse_ether(price)
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        raise SystemExit(1)

    async def _assemble(controller: DappController) -> None:
        if await _connected(controller):
            await controller.assemble(name, price_wei)

    controller, _ = run_with_controller(
        AccessMode.WALLET_INJECTED, rpc_url, assume_yes, _assemble
    )
    print_panel(controller)
    exit_on_failure(controller)


@click.command()
@rpc_url_option
@yes_option
def purchase(rpc_url: str | None, assume_yes: bool) -> None:
    """Buy one hammer, paying the current sale price."""
    click.echo("=== Purchase Hammer ===")
    click.echo("")

    async def _purchase(controller: DappController) -> None:
        if await _connected(controller):
            await controller.purchase()

    controller, _ = run_with_controller(
        AccessMode.WALLET_INJECTED, rpc_url, assume_yes, _purchase
    )
    print_panel(controller)
    exit_on_failure(controller)


async def _connected(controller: DappController) -> bool:
    if controller.context.provider is None:
        return False
    await controller.connect()
    return controller.session_state is SessionState.CONNECTED
