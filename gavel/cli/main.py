"""
Gavel CLI - Command Line Interface for the auction ledger simulator.

Main entry point for all CLI commands.
"""

import json
import sys
from pathlib import Path

import click

from gavel.utils.logger import setup_logging, get_logger

logger = get_logger("cli")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="JSON config file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, config_path):
    """Gavel - owner-administered auction ledger simulator"""
    import logging
    from gavel.core.config import load_config

    config = load_config(config_path)
    level = logging.DEBUG if debug else config.log_level_value
    setup_logging(level=level, log_dir=str(config.log_dir), log_to_file=config.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Identity Commands
# =============================================================================


@cli.command("keygen")
@click.option("--count", default=1, type=click.IntRange(min=1), help="Number of identities")
def keygen(count):
    """Generate fresh bidder identities"""
    from gavel.crypto import generate_keypair

    for _ in range(count):
        kp = generate_keypair()
        click.echo(kp.checksum_address)


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.pass_context
def demo(ctx):
    """Run the two-bidder reference auction"""
    from gavel.core.clock import ChainClock
    from gavel.core.ledger import AuctionLedger
    from gavel.core.errors import AlreadyClosed
    from gavel.crypto import generate_keypair
    from gavel.utils.units import parse_units, format_units

    config = ctx.obj["config"]
    day = config.default_window_seconds

    def fmt(amount):
        return f"{format_units(amount, config.currency_decimals)} {config.currency_symbol}"

    owner, bidder1, bidder2 = (generate_keypair().checksum_address for _ in range(3))
    clock = ChainClock()
    start = clock.now() + day
    end = start + day

    ledger = AuctionLedger(owner, clock=clock)
    ledger.authorize(owner, bidder1)
    ledger.authorize(owner, bidder2)
    ledger.set_auction_timing(owner, start, end)
    ledger.product(owner, 1, 1000, False)
    click.echo(f"Listed product 1, window [{start}, {end})")

    clock.increase_to(start + 10)
    for bidder, amount in ((bidder1, "1.0"), (bidder2, "0.99"), (bidder2, "2.0")):
        ledger.bid(bidder, 1, parse_units(amount, config.currency_decimals))
        click.echo(f"  {bidder[:10]}... bid {amount} -> highest {fmt(ledger.get_highest_bid(1))}")

    clock.increase_to(end + 10)
    try:
        ledger.bid(bidder2, 1, parse_units("2.0", config.currency_decimals))
    except AlreadyClosed as e:
        click.echo(f"Late bid rejected: {e}")

    click.echo("Winners:")
    click.echo(ledger.get_winners(owner))


# =============================================================================
# Script Replay
# =============================================================================


def _run_step(ledger, step):
    """Execute one validated script step; returns the printable result."""
    op = step["op"]
    caller = step.get("caller", ledger.owner)

    if op == "authorize":
        ledger.authorize(caller, step["identity"])
    elif op == "set_auction_timing":
        ledger.set_auction_timing(caller, step["start"], step["end"])
    elif op == "product":
        ledger.product(caller, step["code"], step["price"], step["remove"])
    elif op == "bid":
        ledger.bid(caller, step["code"], step["amount"])
    elif op == "advance_time":
        ledger.clock.increase_to(step["timestamp"])
    elif op == "get_current_bids":
        return ledger.get_current_bids(step["code"], step["identity"])
    elif op == "get_highest_bid":
        return ledger.get_highest_bid(step["code"])
    elif op == "get_winners":
        return ledger.get_winners(caller)
    return None


@cli.command("run")
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Stop at the first rejected step")
def run(script, strict):
    """Replay a JSON script of ledger calls"""
    from gavel.core.clock import ChainClock
    from gavel.core.errors import AuctionError
    from gavel.core.ledger import AuctionLedger
    from gavel.utils.validation import validate_script_step

    try:
        data = json.loads(script.read_text())
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {script}: {e}")

    if not isinstance(data, dict) or "owner" not in data:
        raise click.ClickException("Script must be an object with an 'owner' field")

    steps = data.get("steps", [])
    for i, step in enumerate(steps):
        valid, err = validate_script_step(step)
        if not valid:
            raise click.ClickException(f"Step {i}: {err}")

    clock = ChainClock(data.get("timestamp", 0))
    ledger = AuctionLedger(data["owner"], clock=clock)

    failures = 0
    for i, step in enumerate(steps):
        try:
            result = _run_step(ledger, step)
        except (AuctionError, ValueError, TypeError, IndexError) as e:
            failures += 1
            click.echo(f"[{i}] {step['op']}: {e}")
            if strict:
                sys.exit(1)
            continue

        if result is None:
            click.echo(f"[{i}] {step['op']}: ok")
        else:
            click.echo(f"[{i}] {step['op']}: {result}")

    logger.info(f"Replayed {len(steps)} step(s), {failures} rejected")


# =============================================================================
# Config Command
# =============================================================================


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Show the effective configuration"""
    from dataclasses import asdict

    config = ctx.obj["config"]
    for key, value in asdict(config).items():
        click.echo(f"  {key}: {value}")


if __name__ == "__main__":
    cli()
