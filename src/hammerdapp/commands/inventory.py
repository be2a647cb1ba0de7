"""
Inventory - show the contract's current hammer stock.

Reads getAvailableHammers and, where the contract has it, hammerSalePrice.
Defaults to the remote read-only endpoint so no wallet is needed.
"""

from __future__ import annotations

import click

from ..core.controller import DappController
from ..core.provider import AccessMode
from .runtime import MODE_CHOICE, exit_on_failure, print_panel, rpc_url_option, run_with_controller


@click.command()
@click.option(
    "--mode",
    type=MODE_CHOICE,
    default=AccessMode.REMOTE_READ_ONLY.value,
    show_default=True,
    help="Access provider to read through",
)
@rpc_url_option
def inventory(mode: str, rpc_url: str | None) -> None:
    """Show available hammers and the sale price."""
    click.echo("=== Hammer Inventory ===")
    click.echo("")

    async def _noop(controller: DappController) -> None:
        # start() already refreshed the snapshot through BINDING_CHANGED
        return None

    controller, _ = run_with_controller(AccessMode(mode), rpc_url, False, _noop)
    print_panel(controller)
    exit_on_failure(controller)
