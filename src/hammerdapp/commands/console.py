"""
Console - long-lived interactive session.

Keeps one controller alive so the mode selector, the wallet session and
the transaction record behave as they would on a page that stays open.
"""

from __future__ import annotations

import asyncio
import shlex

import click

from ..core.controller import DappController
from ..core.provider import AccessMode, TxKind
from ..units import parse_ether
from .runtime import MODE_CHOICE, build_controller, print_panel, rpc_url_option
from .trade import yes_option

HELP = (
    "  mode wallet|remote       switch access provider\n"
    "  connect                  connect the wallet\n"
    "  assemble [NAME] [PRICE]  assemble a hammer (owner only)\n"
    "  buy                      purchase a hammer\n"
    "  refresh                  re-read inventory\n"
    "  quit"
)


@click.command()
@click.option(
    "--mode",
    type=MODE_CHOICE,
    default=AccessMode.WALLET_INJECTED.value,
    show_default=True,
    help="Initial access provider",
)
@rpc_url_option
@yes_option
def console(mode: str, rpc_url: str | None, assume_yes: bool) -> None:
    """Interactive session: switch modes, connect, assemble and buy."""
    asyncio.run(_console(AccessMode(mode), rpc_url, assume_yes))


async def _console(mode: AccessMode, rpc_url: str | None, assume_yes: bool) -> None:
    controller = build_controller(mode, rpc_url, assume_yes)
    try:
        await controller.start()
        while True:
            click.echo("")
            print_panel(controller)
            click.echo("")
            try:
                line = await asyncio.to_thread(
                    click.prompt, "hammer", default="refresh", show_default=False
                )
            except click.Abort:
                break
            if not await _dispatch(controller, line):
                break
    finally:
        await controller.aclose()


async def _dispatch(controller: DappController, line: str) -> bool:
    """Run one console command; False ends the session."""
    try:
        parts = shlex.split(line)
    except ValueError as exc:
        click.secho(f"  {exc}", fg="red")
        return True
    if not parts:
        return True

    command, args = parts[0].lower(), parts[1:]
    if command in ("quit", "exit"):
        return False
    if command == "help":
        click.echo(HELP)
    elif command == "mode":
        if len(args) != 1 or args[0] not in [m.value for m in AccessMode]:
            click.secho("  usage: mode wallet|remote", fg="yellow")
        else:
            await controller.switch_mode(AccessMode(args[0]))
    elif command == "connect":
        await controller.connect()
    elif command == "assemble":
        if not controller.can_submit(TxKind.ASSEMBLE_INVENTORY):
            click.secho("  Assemble is disabled: connect a wallet in wallet mode first.", fg="yellow")
            return True
        name = args[0] if args else "Basic Hammer"
        try:
            price = parse_ether(args[1]) if len(args) > 1 else parse_ether("0.3")
        except ValueError as exc:
            click.secho(f"  {exc}", fg="red")
            return True
        await controller.assemble(name, price)
    elif command == "buy":
        if controller.snapshot.available_count == 0:
            click.secho("  No hammers available.", fg="yellow")
        elif not controller.can_submit(TxKind.PURCHASE_ITEM):
            click.secho("  Buy is disabled: connect a wallet in wallet mode first.", fg="yellow")
        else:
            await controller.purchase()
    elif command == "refresh":
        await controller.refresh()
    else:
        click.secho(f"  Unknown command: {command} (try 'help')", fg="yellow")
    return True
