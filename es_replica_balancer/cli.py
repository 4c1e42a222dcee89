"""
Reassign unassigned Elasticsearch replica shards to the least loaded data nodes.

Command Line Interface.
"""

import logging
import sys
from typing import Optional

import click
from click_aliases import ClickAliasedGroup
from rich.console import Console
from rich.panel import Panel

from es_replica_balancer.cluster.client import ElasticsearchClient
from es_replica_balancer.config import CONFIG
from es_replica_balancer.exception import FetchError
from es_replica_balancer.model import Assignment
from es_replica_balancer.option import option_endpoint, option_format, option_limit, option_strict, option_timeout
from es_replica_balancer.rebalance.core import load_snapshot, run_rebalance
from es_replica_balancer.rebalance.planner import plan as plan_assignments
from es_replica_balancer.rebalance.snapshot import parse_nodes, parse_shards
from es_replica_balancer.reporter import ClusterReporter
from es_replica_balancer.util.cli import boot_click, error_logger
from es_replica_balancer.util.data import jd
from es_replica_balancer.util.error import explain_reroute_error

logger = logging.getLogger(__name__)

console = Console()


def get_client(ctx: click.Context, endpoint: Optional[str] = None) -> ElasticsearchClient:
    """
    Create a client from the group options, optionally overriding the endpoint.
    """
    options = ctx.obj or {}
    return ElasticsearchClient(endpoint=endpoint or options.get("endpoint"), timeout=options.get("timeout"))


@click.group(cls=ClickAliasedGroup)  # type: ignore[arg-type]
@option_endpoint
@option_timeout
@click.option("--verbose", is_flag=True, required=False, help="Turn on logging")
@click.option("--debug", is_flag=True, required=False, help="Turn on logging with debug level")
@click.version_option()
@click.pass_context
def cli(ctx: click.Context, endpoint: Optional[str], timeout: Optional[float], verbose: bool, debug: bool):
    """
    Reassign unassigned replica shards to the data nodes holding the fewest replicas.
    """
    ctx.ensure_object(dict)
    ctx.obj["endpoint"] = endpoint
    ctx.obj["timeout"] = timeout
    return boot_click(ctx, verbose, debug)


@cli.command()
@click.pass_context
def nodes(ctx: click.Context):
    """List cluster nodes and whether they are eligible placement targets"""
    client = get_client(ctx)
    ClusterReporter(console).nodes(parse_nodes(client.list_nodes()))


@cli.command()
@click.option("--unassigned", is_flag=True, default=False, help="Only show unassigned shard copies")
@click.pass_context
def shards(ctx: click.Context, unassigned: bool):
    """List shard copies and their allocation"""
    client = get_client(ctx)
    items = parse_shards(client.list_shards())
    if unassigned:
        items = [shard for shard in items if shard.is_unassigned]
    ClusterReporter(console).shards(items)


@cli.command(aliases=["load"])
@option_strict
@click.pass_context
def status(ctx: click.Context, strict: bool):
    """Show replica shards per data node and the number of unassigned replicas"""
    client = get_client(ctx)
    snapshot = load_snapshot(client.list_nodes(), client.list_shards(), strict=strict or None)
    ClusterReporter(console).status(snapshot)


@cli.command()
@option_strict
@option_limit
@option_format
@click.pass_context
def plan(ctx: click.Context, strict: bool, limit: Optional[int], format_: str):
    """Preview which data node each unassigned replica would be rerouted to"""
    client = get_client(ctx)
    show_plan(client, strict=strict, limit=limit, format_=format_)


def show_plan(client: ElasticsearchClient, strict: bool, limit: Optional[int], format_: str = "table"):
    snapshot = load_snapshot(client.list_nodes(), client.list_shards(), strict=strict or None)
    assignments = list(plan_assignments(snapshot.unassigned, snapshot.load))
    if limit is not None:
        assignments = assignments[:limit]
    if format_ == "json":
        jd([assignment.to_dict() for assignment in assignments])
        return
    ClusterReporter(console).assignments(assignments, title=f"Planned Reroutes ({len(assignments)})")
    if snapshot.orphans:
        console.print(f"[yellow]Replicas on unknown nodes: {', '.join(snapshot.orphan_nodes)}[/yellow]")


@cli.command(aliases=["fix"])
@click.argument("endpoint", required=False)
@option_strict
@option_limit
@click.option("--dry-run/--execute", default=True, help="Only show what would be rerouted (default: True)")
@click.option("--yes", "-y", is_flag=True, default=False, help="Do not ask for confirmation")
@click.pass_context
def reassign(
    ctx: click.Context,
    endpoint: Optional[str],
    strict: bool,
    limit: Optional[int],
    dry_run: bool,
    yes: bool,
):
    """
    Reroute unassigned replica shards to the least loaded data nodes.

    Each shard is allocated as an empty primary, accepting data loss.
    Placed copies start empty and resynchronize from the primary.
    """
    client = get_client(ctx, endpoint)
    logger.info(f"Using Elasticsearch endpoint: {client.endpoint}")

    mode_text = "DRY RUN" if dry_run else "EXECUTION MODE"
    color = "green" if dry_run else "red"
    console.print(
        Panel.fit(f"[bold blue]Reassigning Unassigned Shards[/bold blue] - [bold {color}]{mode_text}[/bold {color}]")
    )

    if dry_run:
        show_plan(client, strict=strict, limit=limit)
        console.print("[dim]Use --execute to reroute the shards[/dim]")
        return

    if not yes:
        click.confirm("Allocating empty primaries accepts data loss. Continue?", abort=True)

    try:
        logger.info("Listing available nodes...")
        node_listing = client.list_nodes()
        logger.info("Listing shard allocations...")
        shard_listing = client.list_shards()
    except FetchError as ex:
        error_logger(ctx)(f"Failed to list cluster state: {ex}")
        sys.exit(1)

    def report_step(assignment: Assignment):
        console.print(f"    [green]OK[/green] {assignment.shard.address} => {assignment.target_node}")

    result = run_rebalance(
        node_listing, shard_listing, client, strict=strict or None, limit=limit, on_step=report_step
    )

    ClusterReporter(console).summary(result)
    if not result.succeeded:
        logger.error(f"Rebalancing stopped early: {result.error}")
        if CONFIG.runtime_errors == "raise":
            sys.exit(1)


@cli.command(name="explain-error")
@click.argument("error_message", required=False)
def explain_error(error_message: Optional[str]):
    """Explain Elasticsearch shard allocation error messages and suggest solutions"""
    explain_reroute_error(error_message)


@cli.command(name="test-connection")
@click.argument("endpoint", required=False)
@click.pass_context
def test_connection(ctx: click.Context, endpoint: Optional[str]):
    """Test connection to the Elasticsearch cluster"""
    client = get_client(ctx, endpoint)
    if client.test_connection():
        console.print(f"[green]Connection to {client.endpoint} successful[/green]")
    else:
        console.print(f"[red]Error: Could not connect to {client.endpoint}[/red]")
        sys.exit(1)
