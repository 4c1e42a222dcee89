"""
Convert raw cluster listings into the topology the placement planner operates on.
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Tuple

from es_replica_balancer.exception import FetchError, InconsistentTopologyError
from es_replica_balancer.model import ClusterSnapshot, LoadModel, NodeInfo, ShardInfo
from es_replica_balancer.util.data import parse_int

logger = logging.getLogger(__name__)


def _check_record(record: Any, kind: str, required: List[str]):
    if not isinstance(record, Mapping):
        raise FetchError(f"Failed to decode {kind} record: Expected mapping, got {type(record).__name__}")
    missing = [name for name in required if name not in record]
    if missing:
        raise FetchError(f"Failed to decode {kind} record: Missing field(s) {', '.join(missing)}")


def parse_nodes(records: Iterable[Any]) -> List[NodeInfo]:
    nodes = []
    for record in records:
        _check_record(record, "node", ["name"])
        nodes.append(
            NodeInfo(
                name=record["name"],
                ip=record.get("ip"),
                role=record.get("node.role") or "",
            )
        )
    return nodes


def split_node(value: Optional[str]) -> Tuple[str, Optional[str]]:
    """
    Split the `node` column of a relocating copy.

    It reads `<source> -> <ip> <id> <target>` while the copy is relocating.
    The source node keeps hosting the copy until relocation finishes.
    """
    if not value:
        return "", None
    source, sep, target = value.partition(" -> ")
    if not sep:
        return value, None
    parts = target.split()
    return source.strip(), parts[-1] if parts else None


def parse_shards(records: Iterable[Any]) -> List[ShardInfo]:
    shards = []
    for record in records:
        _check_record(record, "shard", ["index", "shard"])
        try:
            shard_id = parse_int(record["shard"], "shard")
            docs = parse_int(record.get("docs"), "docs", optional=True)
        except ValueError as ex:
            raise FetchError(f"Failed to decode shard record of index '{record['index']}': {ex}") from ex
        node, relocating_node = split_node(record.get("node"))
        shards.append(
            ShardInfo(
                index=record["index"],
                shard=shard_id,
                prirep=record.get("prirep") or "",
                state=record.get("state") or "",
                docs=docs,
                store=record.get("store"),
                ip=record.get("ip"),
                node=node,
                unassigned_reason=record.get("unassigned.reason"),
                relocating_node=relocating_node,
            )
        )
    return shards


def build_snapshot(nodes: List[NodeInfo], shards: List[ShardInfo], strict: bool = False) -> ClusterSnapshot:
    """
    Build the snapshot of a cluster from its node and shard listings.

    Only data nodes are placement targets, and only replicas count towards
    their load. Unassigned replicas are collected in listing order. Replicas
    on nodes missing from the data node set are reported as orphans, or
    raise `InconsistentTopologyError` when `strict` is set.
    """
    data_nodes = sorted({node.name for node in nodes if node.is_data_node})
    load = LoadModel(data_nodes)
    unassigned = []
    orphans = []

    for shard in shards:
        if shard.is_primary:
            continue
        if shard.is_unassigned:
            unassigned.append(shard)
        elif shard.node in load:
            load.place(shard.node, shard)
        else:
            orphans.append(shard)

    if orphans:
        orphan_nodes = sorted({shard.node for shard in orphans})
        if strict:
            raise InconsistentTopologyError(nodes=orphan_nodes)
        for shard in orphans:
            logger.warning(
                f"Replica {shard.address} is hosted on node '{shard.node}' which is not a known data node, "
                f"not counting it towards load"
            )

    logger.info(f"Found {len(data_nodes)} data nodes and {load.total()} assigned replica shards")
    return ClusterSnapshot(data_nodes=data_nodes, unassigned=unassigned, load=load, orphans=orphans)
