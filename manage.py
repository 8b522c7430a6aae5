#!/usr/bin/env python3
"""
Pick'em Pool Management CLI

This script provides command-line tools for the admin workflow: checking pool
status, validating pools.json, preparing results.json and printing
leaderboards. Nothing is written back; output is JSON to paste into place.
"""

import json
import logging

import click
from flask.cli import with_appcontext

from pickem import create_app
from pickem.models import MalformedRecordError
from pickem.services import PoolService
from pickem.utils.cache_utils import get_cache_stats, invalidate_documents
from pickem.utils.data_store import (
    ENTRIES_DOCUMENT,
    POOLS_DOCUMENT,
    RESULTS_DOCUMENT,
    DataSourceError,
)
from pickem.utils.pool_admin import (
    create_pool,
    results_template,
    rotate_current_pool,
    validate_pool,
    validate_pools_document,
)
from pickem.utils.submission import SubmissionError
from pickem.utils.timezone_utils import format_game_time

app = create_app()

STATUS_ICONS = {"open": "🟢", "closed": "🔒", "completed": "✅"}


def _echo_json(data):
    click.echo(json.dumps(data, indent=2))


def _resolve_pool(ctx, service, pool_id):
    """Look up a pool by id, or the current pool when no id is given"""
    pool = service.get_pool(pool_id) if pool_id else service.current_pool()
    if pool is None:
        click.echo(f"❌ Pool {pool_id or '(current)'} not found!")
        ctx.exit(1)
    return pool


def _fail(ctx, message, error):
    click.echo(f"❌ {message}: {error}")
    logging.error(f"{message}: {error}")
    ctx.exit(1)


@click.group()
def cli():
    """Pick'em Pool Management CLI"""
    pass


# Pool Commands
@cli.group()
def pools():
    """Pool management commands"""
    pass


@pools.command("list")
@click.option("--sport", help="Only show pools for this sport")
@with_appcontext
@click.pass_context
def list_pools(ctx, sport):
    """List pools with their current status"""
    service = PoolService.from_app()
    try:
        document = service.pools_document()
    except (DataSourceError, MalformedRecordError) as e:
        _fail(ctx, "Could not load pools", e)

    pool_list = service.pools_for_sport(sport) if sport else document.pools
    if not pool_list:
        click.echo("No pools found.")
        return

    click.echo("Pools:")
    for pool in pool_list:
        icon = STATUS_ICONS.get(pool.status, "⚪")
        current = " (current)" if pool.id == document.current_pool_id else ""
        click.echo(
            f"  {icon} {pool.id}: {pool.sport} - {pool.label} - {pool.status}"
            f" - deadline {format_game_time(pool.deadline)}{current}"
        )


@pools.command()
@with_appcontext
@click.pass_context
def validate(ctx):
    """Validate pools.json"""
    service = PoolService.from_app()
    try:
        document = service.raw_document(POOLS_DOCUMENT)
    except DataSourceError as e:
        _fail(ctx, "Could not load pools", e)

    errors = validate_pools_document(document)
    if errors:
        click.echo(f"❌ pools.json has {len(errors)} error(s):")
        for error in errors:
            click.echo(f"  - {error}")
        ctx.exit(1)

    click.echo(f"✅ pools.json is valid ({len(document['pools'])} pools)")


@pools.command()
@click.argument("sport")
@with_appcontext
@click.pass_context
def rotate(ctx, sport):
    """Print pools.json with the next SPORT pool set as current"""
    service = PoolService.from_app()
    try:
        document = service.pools_document()
    except (DataSourceError, MalformedRecordError) as e:
        _fail(ctx, "Could not load pools", e)

    if sport not in document.sports:
        click.echo(f"❌ No pools found for sport {sport}!")
        ctx.exit(1)

    rotated = rotate_current_pool(document, sport)
    click.echo(f"Current pool: {document.current_pool_id} -> {rotated.current_pool_id}")
    click.echo("Copy this into data/pools.json:\n")

    # Keep the statuses as authored; lifecycle status is computed on read
    raw = service.raw_document(POOLS_DOCUMENT)
    _echo_json(dict(raw, currentPoolId=rotated.current_pool_id))


@pools.command("create")
@click.argument("pool_id")
@click.argument("sport")
@click.argument("label")
@click.argument("deadline")
@click.argument("games_json")
@with_appcontext
@click.pass_context
def create_pool_record(ctx, pool_id, sport, label, deadline, games_json):
    """Print pools.json with a new open pool appended

    GAMES_JSON is a list of games; games without an id get
    POOL_ID-game-N.
    """
    service = PoolService.from_app()
    try:
        raw = service.raw_document(POOLS_DOCUMENT)
    except DataSourceError as e:
        _fail(ctx, "Could not load pools", e)

    try:
        games = json.loads(games_json)
    except json.JSONDecodeError as e:
        _fail(ctx, "Games are not valid JSON", e)

    if not isinstance(games, list) or not all(isinstance(g, dict) for g in games):
        _fail(ctx, "Invalid games", "expected a list of game objects")

    existing = raw.get("pools") or []
    if any(pool.get("id") == pool_id for pool in existing if isinstance(pool, dict)):
        _fail(ctx, "Pool already exists", pool_id)

    try:
        new_pool = create_pool(pool_id, sport, label, deadline, games)
    except (KeyError, TypeError) as e:
        _fail(ctx, "Invalid games", f"missing field {e}")

    errors = validate_pool(new_pool)
    if errors:
        _fail(ctx, "Invalid pool", "; ".join(errors))

    click.echo(f"✅ Created pool {pool_id} with {len(new_pool['games'])} games")
    click.echo("Copy this into data/pools.json:\n")
    _echo_json(dict(raw, pools=existing + [new_pool]))


# Results Commands
@cli.group()
def results():
    """Results management commands"""
    pass


@results.command()
@click.argument("pool_id", required=False)
@with_appcontext
@click.pass_context
def template(ctx, pool_id):
    """Print results.json with a score slot for every game of a pool"""
    service = PoolService.from_app()
    try:
        pool = _resolve_pool(ctx, service, pool_id)
        raw_results = service.raw_document(RESULTS_DOCUMENT)
    except (DataSourceError, MalformedRecordError) as e:
        _fail(ctx, "Could not load results", e)

    updated = dict(raw_results)
    updated[pool.id] = results_template(pool, raw_results.get(pool.id))

    click.echo("Copy this into data/results.json:\n")
    _echo_json(updated)


# Leaderboard Commands
@cli.command()
@click.argument("pool_id", required=False)
@with_appcontext
@click.pass_context
def leaderboard(ctx, pool_id):
    """Show the leaderboard for a pool (default: current pool)"""
    service = PoolService.from_app()
    try:
        pool = _resolve_pool(ctx, service, pool_id)
        rows = service.leaderboard(pool)
    except (DataSourceError, MalformedRecordError) as e:
        _fail(ctx, "Could not build leaderboard", e)

    click.echo(f"🏆 {pool.label} ({pool.status}) - max {service.max_score(pool)}")
    if not rows:
        click.echo("No entries yet.")
        return

    for row in rows:
        click.echo(f"  {row.rank:>3}. {row.user:<20} {row.score}")


# Entry Commands
@cli.group()
def entry():
    """Entry commands"""
    pass


@entry.command("create")
@click.argument("user")
@click.argument("pool_id")
@click.argument("picks_json")
@with_appcontext
@click.pass_context
def create_entry(ctx, user, pool_id, picks_json):
    """Print the entry record for USER's PICKS_JSON in POOL_ID"""
    service = PoolService.from_app()

    try:
        picks = json.loads(picks_json)
    except json.JSONDecodeError as e:
        _fail(ctx, "Picks are not valid JSON", e)

    try:
        pool = _resolve_pool(ctx, service, pool_id)
        new_entry = service.submit_entry(pool, user, picks)
    except SubmissionError as e:
        _fail(ctx, "Entry rejected", e)
    except (DataSourceError, MalformedRecordError) as e:
        _fail(ctx, "Could not load pools", e)

    click.echo("Copy this into data/entries.json:\n")
    _echo_json(new_entry.to_dict())


# Cache Commands
@cli.group()
def cache():
    """Document cache commands"""
    pass


@cache.command("clear")
@click.argument(
    "documents",
    nargs=-1,
    type=click.Choice([POOLS_DOCUMENT, RESULTS_DOCUMENT, ENTRIES_DOCUMENT]),
)
@with_appcontext
def clear_cache(documents):
    """Drop cached DOCUMENTS (all of them when none are given)"""
    invalidate_documents(*documents)
    if documents:
        click.echo(f"✅ Cleared cached {', '.join(documents)}")
    else:
        click.echo("✅ Document cache cleared")


@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("🏈 Pick'em Pool Status")
    click.echo("=" * 40)

    service = PoolService.from_app()
    click.echo(f"📂 Data source: {service.store.source}")
    click.echo(f"⏱️  Closing policy: {service.closing_policy}")
    if service.preview_mode:
        click.echo("⚠️  Preview mode: ON (pools stay open until scored)")
    stats = get_cache_stats()
    click.echo(f"🗄️  Cache: {stats['type']} ({stats['timeout']}s)")

    try:
        document = service.pools_document()
    except (DataSourceError, MalformedRecordError) as e:
        click.echo(f"❌ Pools: Error - {str(e)}")
        return

    counts = {}
    for pool in document.pools:
        counts[pool.status] = counts.get(pool.status, 0) + 1
    summary = ", ".join(f"{count} {name}" for name, count in sorted(counts.items()))
    click.echo(f"🏆 Pools: {len(document.pools)} ({summary or 'none'})")

    current = document.current_pool
    if current:
        click.echo(f"✅ Current Pool: {current.id} - {current.label} ({current.status})")
    else:
        click.echo("⚠️  Current Pool: None")

    try:
        entries = service.entries()
    except (DataSourceError, MalformedRecordError) as e:
        click.echo(f"❌ Entries: Error - {str(e)}")
        return
    click.echo(f"👥 Entries: {len(entries)}")


if __name__ == "__main__":
    with app.app_context():
        cli()
