"""
Fee Auction CLI

Main entry point for all CLI commands.
"""

import json
import logging

import click

from feeauction.utils.logger import setup_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config", "config_path", default=None, help="JSON config file")
@click.option("--log-file", is_flag=True, help="Also write logs to <log_dir>/feeauction.log")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, config_path, log_file):
    """Fee Auction Engine - convert protocol fees into a single bid token"""
    from feeauction.core.config import load_config

    config = load_config(config_path)

    level = logging.DEBUG if debug else logging.WARNING
    setup_logging(level=level, log_dir=config.log_dir if log_file else None)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Config Command
# =============================================================================


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Print the effective configuration"""
    click.echo(json.dumps(ctx.obj["config"].to_dict(), indent=2))


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.option("--bids", default=3, type=int, help="Number of outbidding rounds")
@click.option("--opening-bid", default=1000, type=int, help="Opening bid (raw units)")
@click.pass_context
def demo(ctx, bids: int, opening_bid: int):
    """Run a simulated fee auction end to end"""
    from feeauction.core.amm import PairFactory
    from feeauction.core.auction import AuctionEngine
    from feeauction.core.chain import Chain
    from feeauction.core.errors import AuctionError
    from feeauction.core.tokens import ERC20Token, MAX_UINT256
    from feeauction.crypto import generate_keypair, short_hex

    config = ctx.obj["config"]
    unit = 10 ** 18

    click.echo("=" * 60)
    click.echo("  FEE AUCTION ENGINE - DEMO")
    click.echo("=" * 60)
    click.echo()

    # Setup
    click.echo("📦 Deploying tokens, factory and engine...")
    chain = Chain()
    deployer, alice, bob, treasury = (generate_keypair().address for _ in range(4))

    token_a = ERC20Token(chain, "Token A", "TKA")
    token_b = ERC20Token(chain, "Token B", "TKB")
    bid_token = ERC20Token(chain, "Bid Token", "BID")
    for token in (token_a, token_b, bid_token):
        token.mint(deployer, 1_000_000 * unit)
    bid_token.transfer(deployer, alice, unit)
    bid_token.transfer(deployer, bob, unit)

    factory = PairFactory(chain, fee_to_setter=deployer)
    engine = AuctionEngine(
        chain,
        owner=deployer,
        receiver=treasury,
        bid_token=bid_token.address,
        factory=factory.address,
        pair_code_hash=factory.pair_code_hash,
        config=config,
    )
    factory.set_fee_to(deployer, engine.address)
    click.echo(f"  ✓ Engine at {short_hex(engine.address)}")
    click.echo()

    # Fees accrue
    click.echo("💱 Providing liquidity and trading to accrue fees...")
    pair = factory.create_pair(token_a.address, token_b.address)
    token_a.transfer(deployer, pair.address, 500_000 * unit)
    token_b.transfer(deployer, pair.address, 500_000 * unit)
    pair.mint(deployer)

    token_a.transfer(deployer, pair.address, 100 * unit)
    if pair.token0 == token_a.address:
        pair.swap(0, 99 * unit, deployer)
    else:
        pair.swap(99 * unit, 0, deployer)

    token_a.transfer(deployer, pair.address, unit)
    token_b.transfer(deployer, pair.address, unit)
    pair.mint(deployer)
    click.echo(f"  ✓ Engine holds {pair.balance_of(engine.address)} fee shares")

    amount_a, amount_b = engine.unwind_lp(token_a.address, token_b.address)
    click.echo(f"  ✓ Unwound into {amount_a} TKA and {amount_b} TKB")
    click.echo()

    # Auction
    click.echo("🔨 Running the TKA auction...")
    for account in (alice, bob):
        bid_token.approve(account, engine.address, MAX_UINT256)

    try:
        engine.start(token_a.address, opening_bid, alice)
    except AuctionError as e:
        click.echo(f"❌ Could not start auction: {e}")
        return
    click.echo(f"  ✓ Alice opened with {opening_bid}")

    bidders = [("Bob", bob), ("Alice", alice)]
    for i in range(bids):
        name, account = bidders[i % 2]
        chain.increase_time(config.min_ttl // 2)
        amount = engine.min_next_bid(token_a.address)
        try:
            engine.place_bid(token_a.address, amount, account)
        except AuctionError as e:
            click.echo(f"  ⏹ Bidding closed after {i} bids: {e}")
            break
        click.echo(f"  ✓ {name} bid {amount} (staked: {engine.staked_bid_token})")

    chain.increase_time(config.min_ttl)
    winner, paid = engine.end(token_a.address)
    winner_name = "Alice" if winner == alice else "Bob"
    click.echo(f"  ✓ {winner_name} won {token_a.balance_of(winner)} TKA for {paid} BID")
    click.echo(f"  ✓ Receiver balance: {bid_token.balance_of(treasury)} BID")
    click.echo()

    click.echo("📊 Final Statistics:")
    click.echo(f"  Engine: {engine.stats()}")
    click.echo()
    click.echo("✅ Demo complete!")


# =============================================================================
# Stats Command
# =============================================================================


@cli.command("stats")
@click.pass_context
def stats(ctx):
    """Show auction parameters"""
    config = ctx.obj["config"]
    click.echo("Fee Auction Parameters")
    click.echo("-" * 40)
    click.echo(f"  MIN_TTL: {config.min_ttl}s ({config.min_ttl / 3600:g} hours)")
    click.echo(f"  MAX_TTL: {config.max_ttl}s ({config.max_ttl / 86400:g} days)")
    click.echo(f"  BID_MIN: {config.bid_min}")
    click.echo(f"  Increment: {config.increment_bps}/{config.denominator}")


if __name__ == "__main__":
    cli()
