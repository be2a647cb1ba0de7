"""
hammerdapp CLI

Command-line front end for the hammer supply-chain contract.

Commands:
  inventory - Show available hammers and the sale price
  connect   - Connect the wallet
  assemble  - Assemble a hammer (owner only)
  purchase  - Buy a hammer at the current sale price
  console   - Interactive session with mode switching
  keygen    - Create a local wallet key
  whoami    - Show the wallet address
  info      - Show configuration
"""

from __future__ import annotations

import logging
import sys

import click

from . import config
from .config import HAMMER_CONTRACT_ADDRESS, REMOTE_RPC_URL, VERSION
from .wallet.keys import generate_eoa, get_address, load_private_key, save_private_key


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="hammerdapp")
@click.option("--verbose", "-v", is_flag=True, help="Log state transitions to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """hammerdapp - Hammer supply chain client."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)-7s] %(name)s - %(message)s",
        stream=sys.stderr,
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .commands.inventory import inventory
from .commands.trade import assemble, connect, purchase
from .commands.console import console

cli.add_command(inventory)
cli.add_command(connect)
cli.add_command(assemble)
cli.add_command(purchase)
cli.add_command(console)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show current wallet identity."""
    try:
        pk = load_private_key()
        address = get_address(pk)
        click.echo(f"Address: {address}")
    except ValueError:
        click.echo("No wallet found.")
        click.echo("Run 'hammerdapp keygen' to create one.")
        sys.exit(1)


@cli.command()
@click.option("--force", is_flag=True, help="Replace an existing key")
def keygen(force: bool) -> None:
    """Create a local wallet key in ~/.hammerdapp/.env."""
    if not force:
        try:
            address = get_address(load_private_key())
        except ValueError:
            pass
        else:
            click.echo(f"Wallet already exists: {address}")
            click.echo("Use --force to replace it.")
            return

    private_key, address = generate_eoa()
    env_path = save_private_key(private_key)
    click.secho(f"Created wallet {address}", fg="green")
    click.echo(f"  Key stored in {env_path}")


# ============ Info ============


@cli.command()
def info() -> None:
    """Show configuration."""
    click.echo(f"hammerdapp v{VERSION}")
    click.echo("")
    click.echo(f"  Contract:    {HAMMER_CONTRACT_ADDRESS}")
    click.echo(f"  Remote RPC:  {REMOTE_RPC_URL}")
    click.echo(f"  Key file:    {config.HAMMERDAPP_ENV}")
    try:
        address = get_address(load_private_key())
        click.echo(f"  Wallet:      {address}")
    except ValueError:
        click.echo(
            "  Wallet:      "
            + click.style("not configured", fg="yellow")
            + click.style("  (run: hammerdapp keygen)", dim=True)
        )


# ============ Entry Points ============


def main() -> None:
    """hammerdapp CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
