from typing import List, Optional

from rich import get_console
from rich.panel import Panel

console = get_console()


ERROR_PATTERNS = [
    {
        "pattern": "a copy of this shard is already allocated to this node",
        "title": "Node Already Has Shard Copy",
        "explanation": "The target node already holds a copy (primary or replica) of this shard.",
        "solutions": [
            "Run 'esrb status' to see the current replica distribution",
            "Re-run 'esrb reassign', a fresh snapshot skips shards that are already placed",
        ],
        "prevention": "Avoid running other reroute tools concurrently",
    },
    {
        "pattern": "accept_data_loss parameter to true",
        "title": "Data Loss Not Accepted",
        "explanation": "The cluster refused to allocate an empty primary without accepting data loss.",
        "solutions": [
            "Make sure the reroute command carries accept_data_loss: true",
        ],
        "prevention": "Only use this tool for recovery from stuck unassigned shards",
    },
    {
        "pattern": "primary is already assigned",
        "title": "Primary Already Assigned",
        "explanation": "An empty primary cannot be allocated when an active primary copy exists.",
        "solutions": [
            "Let the cluster recover the replica from the primary",
            "Use the allocation explain API: GET /_cluster/allocation/explain",
        ],
        "prevention": "Inspect 'esrb shards --unassigned' before reassigning",
    },
    {
        "pattern": "watermark",
        "title": "Insufficient Disk Space",
        "explanation": "The target node is above its disk watermark.",
        "solutions": [
            "Free up space on the target node",
            "Adjust cluster.routing.allocation.disk.watermark settings",
        ],
        "prevention": "Monitor disk usage of data nodes",
    },
    {
        "pattern": "allocation is disabled",
        "title": "Allocation Disabled",
        "explanation": "Shard allocation is disabled in the cluster settings.",
        "solutions": [
            "Re-enable allocation: PUT /_cluster/settings "
            '{"persistent":{"cluster.routing.allocation.enable":"all"}}',
            "Check if allocation was disabled for maintenance",
        ],
        "prevention": "Check allocation status before reassigning shards",
    },
    {
        "pattern": "not acknowledged",
        "title": "Reroute Not Acknowledged",
        "explanation": "The master node did not acknowledge the reroute within its timeout.",
        "solutions": [
            "Check cluster health: GET /_cluster/health",
            "Re-run the reassignment once the master node is responsive",
        ],
        "prevention": "Reassign shards while the cluster is not under heavy load",
    },
]


def match_error_patterns(error_message: str) -> List[dict]:
    error_lower = error_message.lower()
    return [info for info in ERROR_PATTERNS if info["pattern"] in error_lower]


def explain_reroute_error(error_message: Optional[str]):
    """
    Decode and troubleshoot common Elasticsearch shard allocation errors.

    Parameters
    ----------
    error_message:
        Raw error message. When empty, the user is prompted to paste the
        message (finish with an empty line).
    """
    console.print(Panel.fit("[bold blue]Reroute Error Message Decoder[/bold blue]"))
    console.print()

    if not error_message:
        console.print("Please paste the error message (press Enter twice when done):")
        lines: List[str] = []
        while True:
            try:
                line = input()
                if line.strip() == "" and lines:
                    break
                lines.append(line)
            except (EOFError, KeyboardInterrupt):
                break
        error_message = "\n".join(lines)

    if not (error_message or "").strip():
        console.print("[yellow]No error message provided[/yellow]")
        return

    matches = match_error_patterns(error_message)

    if matches:
        for i, match in enumerate(matches):
            if i > 0:
                console.print("\n" + "─" * 60 + "\n")

            console.print(f"[bold red]{match['title']}[/bold red]")
            console.print(f"[yellow]Explanation:[/yellow] {match['explanation']}")
            console.print()

            console.print("[green]Solutions:[/green]")
            for j, solution in enumerate(match["solutions"], 1):
                console.print(f"  {j}. {solution}")
            console.print()

            console.print(f"[blue]Prevention:[/blue] {match['prevention']}")
    else:
        console.print("[yellow]No specific pattern match found[/yellow]")
        console.print()
        console.print("[bold]General Troubleshooting Steps:[/bold]")
        console.print("1. Check the replica distribution: [cyan]esrb status[/cyan]")
        console.print("2. List unassigned shards: [cyan]esrb shards --unassigned[/cyan]")
        console.print("3. Ask the cluster: [cyan]GET /_cluster/allocation/explain[/cyan]")
