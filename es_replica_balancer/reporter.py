from typing import List

from rich import box
from rich.console import Console
from rich.table import Table

from es_replica_balancer.model import Assignment, ClusterSnapshot, NodeInfo, RebalanceResult, ShardInfo

console = Console()


class ClusterReporter:
    """Render cluster listings and rebalancing outcomes as rich tables"""

    def __init__(self, output: Console = None):
        self.console = output or console

    def nodes(self, nodes: List[NodeInfo]):
        table = Table(title="Cluster Nodes", box=box.ROUNDED)
        table.add_column("Name", style="cyan")
        table.add_column("IP", style="dim")
        table.add_column("Role", style="blue")
        table.add_column("Data", justify="center")

        for node in sorted(nodes, key=lambda n: n.name):
            table.add_row(
                node.name,
                node.ip or "",
                node.role,
                "[green]yes[/green]" if node.is_data_node else "[dim]no[/dim]",
            )
        self.console.print(table)

    def shards(self, shards: List[ShardInfo]):
        table = Table(title=f"Shards ({len(shards)})", box=box.ROUNDED)
        table.add_column("Index", style="cyan")
        table.add_column("Shard", justify="right", style="magenta")
        table.add_column("Type", style="blue")
        table.add_column("State")
        table.add_column("Node", style="green")
        table.add_column("Docs", justify="right", style="dim")
        table.add_column("Reason", style="yellow")

        for shard in shards:
            table.add_row(
                shard.index,
                str(shard.shard),
                shard.shard_type,
                shard.state,
                (f"{shard.node} -> {shard.relocating_node}" if shard.relocating_node else shard.node)
                or "[red]unassigned[/red]",
                f"{shard.docs:,}" if shard.docs is not None else "",
                shard.unassigned_reason or "",
            )
        self.console.print(table)

    def status(self, snapshot: ClusterSnapshot):
        table = Table(title="Replica Load per Data Node", box=box.ROUNDED)
        table.add_column("Node", style="cyan")
        table.add_column("Replicas", justify="right", style="magenta")

        for node, count in sorted(snapshot.load.counts().items()):
            table.add_row(node, str(count))
        self.console.print(table)

        self.console.print(f"Unassigned replicas: [bold]{len(snapshot.unassigned)}[/bold]")
        if snapshot.orphans:
            self.console.print(
                f"[yellow]Replicas on unknown nodes: {len(snapshot.orphans)} "
                f"({', '.join(snapshot.orphan_nodes)})[/yellow]"
            )

    def assignments(self, assignments: List[Assignment], title: str):
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Index", style="cyan")
        table.add_column("Shard", justify="right", style="magenta")
        table.add_column("Target Node", style="green")

        for i, assignment in enumerate(assignments, 1):
            table.add_row(str(i), assignment.shard.index, str(assignment.shard.shard), assignment.target_node)
        self.console.print(table)

    def summary(self, result: RebalanceResult):
        self.console.print("[bold]Rebalancing Summary:[/bold]")
        self.console.print(f"   Rerouted shards: [green]{result.placed}[/green]")
        if result.succeeded:
            return
        if result.attempted is not None:
            self.console.print(
                f"   Failed on: [red]{result.attempted.shard.address} => {result.attempted.target_node}[/red]"
            )
        self.console.print(f"   Error: [red]{result.error}[/red]")
