"""
Shared plumbing for the CLI commands: wallet approval prompts, controller
construction, and the panel every command prints.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Awaitable, Callable, TypeVar

import click

from ..chain.rpc import RpcClient
from ..core.controller import DappController
from ..core.provider import AccessMode
from ..units import format_ether
from ..wallet.injected import Approver, discover_wallet

T = TypeVar("T")

MODE_CHOICE = click.Choice([mode.value for mode in AccessMode])


def rpc_url_option(func):
    return click.option(
        "--rpc-url",
        envvar="HAMMER_RPC_URL",
        default=None,
        help="Override the node endpoint (local test chains)",
    )(func)


def make_approver(assume_yes: bool) -> Approver:
    """Ask on the terminal before revealing the account or signing."""

    async def approve(kind: str, detail: dict) -> bool:
        if assume_yes:
            return True
        if kind == "connect":
            question = f"Allow hammerdapp to use account {detail['account']}?"
        else:
            question = (
                f"Sign transaction to {detail['to']} "
                f"(value {format_ether(detail['value'])} ETH, gas {detail['gas']})?"
            )
        return await asyncio.to_thread(click.confirm, question, default=False)

    return approve


def build_controller(
    mode: AccessMode,
    rpc_url: str | None = None,
    assume_yes: bool = False,
) -> DappController:
    approve = make_approver(assume_yes)

    def make_rpc() -> RpcClient:
        return RpcClient(rpc_url) if rpc_url else RpcClient()

    return DappController(
        mode,
        wallet_factory=lambda: discover_wallet(make_rpc(), approve),
        rpc_factory=make_rpc,
    )


def run_with_controller(
    mode: AccessMode,
    rpc_url: str | None,
    assume_yes: bool,
    action: Callable[[DappController], Awaitable[T]],
) -> tuple[DappController, T]:
    """Start a controller, run ``action`` against it, always close it."""

    async def _main() -> tuple[DappController, T]:
        controller = build_controller(mode, rpc_url, assume_yes)
        try:
            await controller.start()
            result = await action(controller)
        finally:
            await controller.aclose()
        return controller, result

    return asyncio.run(_main())


def print_panel(controller: DappController) -> None:
    """Render the account / inventory / status block."""
    snapshot = controller.snapshot
    price = (
        f"{format_ether(snapshot.unit_price)} ETH"
        if snapshot.unit_price is not None
        else "N/A"
    )
    click.echo(f"  Mode:              {controller.mode.value}")
    click.echo(f"  Connected account: {controller.account or 'Not connected'}")
    click.echo(f"  Available hammers: {snapshot.available_count}")
    click.echo(f"  Sale price:        {price}")
    if controller.status:
        click.secho(f"  {controller.status}", fg="green")
    if controller.error:
        click.secho(f"  {controller.error}", fg="red")


def exit_on_failure(controller: DappController) -> None:
    if controller.failure is not None:
        sys.exit(controller.failure.exit_code)
