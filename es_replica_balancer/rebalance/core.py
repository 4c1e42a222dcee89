import logging
from typing import Any, Callable, List, Optional

from es_replica_balancer.cluster.client import ElasticsearchClient
from es_replica_balancer.config import CONFIG
from es_replica_balancer.exception import RebalanceError
from es_replica_balancer.model import Assignment, ClusterSnapshot, RebalanceResult
from es_replica_balancer.rebalance.orchestrator import RerouteOrchestrator
from es_replica_balancer.rebalance.snapshot import build_snapshot, parse_nodes, parse_shards

logger = logging.getLogger(__name__)


def load_snapshot(node_listing: List[Any], shard_listing: List[Any], strict: Optional[bool] = None) -> ClusterSnapshot:
    """
    Build a snapshot from raw `_cat/nodes` and `_cat/shards` records.
    """
    if strict is None:
        strict = CONFIG.strict_topology
    return build_snapshot(parse_nodes(node_listing), parse_shards(shard_listing), strict=strict)


def run_rebalance(
    node_listing: List[Any],
    shard_listing: List[Any],
    client: ElasticsearchClient,
    strict: Optional[bool] = None,
    limit: Optional[int] = None,
    on_step: Optional[Callable[[Assignment], None]] = None,
) -> RebalanceResult:
    """
    Reassign all unassigned replica shards, using pre-fetched listings.

    Returns how many shards have been placed, and the error which stopped
    the run early, if any. Errors are not raised.
    """
    try:
        snapshot = load_snapshot(node_listing, shard_listing, strict=strict)
    except RebalanceError as ex:
        logger.error(f"Failed to build cluster snapshot: {ex.message}")
        return RebalanceResult(error=ex)

    logger.info(f"There are {len(snapshot.unassigned)} unassigned shards.")

    orchestrator = RerouteOrchestrator(client=client, limit=limit, on_step=on_step)
    result = orchestrator.run(snapshot.unassigned, snapshot.load)

    if result.succeeded:
        logger.info(f"Rerouted {result.placed} shards")
    else:
        logger.error(f"Stopped after rerouting {result.placed} shards: {result.error}")
    return result
