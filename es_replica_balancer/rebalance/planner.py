from typing import Iterator, List

from es_replica_balancer.exception import NoEligibleNodesError
from es_replica_balancer.model import Assignment, LoadModel, ShardInfo


def next_target(load: LoadModel) -> str:
    """
    Select the data node hosting the fewest replica shards.

    Ties are broken by ascending node name, so the selection is
    reproducible. The load model is not modified.
    """
    candidates = sorted((load.count(node), node) for node in load)
    if not candidates:
        raise NoEligibleNodesError()
    return candidates[0][1]


def plan(unassigned: List[ShardInfo], load: LoadModel) -> Iterator[Assignment]:
    """
    Preview assignments for all unassigned shards, in listing order.

    Every assignment is assumed to succeed. It is applied to a copy of
    the load model, the one passed in stays untouched.
    """
    preview = load.copy()
    for shard in unassigned:
        target = next_target(preview)
        preview.place(target, shard)
        yield Assignment(shard=shard, target_node=target)
