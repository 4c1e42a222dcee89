import logging
from typing import Callable, List, Optional

from es_replica_balancer.cluster.client import ElasticsearchClient
from es_replica_balancer.exception import RebalanceError
from es_replica_balancer.model import Assignment, LoadModel, RebalanceResult, ShardInfo
from es_replica_balancer.rebalance.planner import next_target

logger = logging.getLogger(__name__)


class RerouteOrchestrator:
    """
    Reroute unassigned shards one by one, each to the least loaded data node.

    A shard is only counted towards its target's load after the cluster
    acknowledged the reroute. The first failure stops the run. Reroutes
    which already went through are not rolled back.
    """

    def __init__(
        self,
        client: ElasticsearchClient,
        limit: Optional[int] = None,
        on_step: Optional[Callable[[Assignment], None]] = None,
    ):
        self.client = client
        self.limit = limit
        self.on_step = on_step

    def run(self, unassigned: List[ShardInfo], load: LoadModel) -> RebalanceResult:
        result = RebalanceResult()

        for shard in unassigned:
            if self.limit is not None and result.placed >= self.limit:
                logger.info(f"Reached limit of {self.limit} reroutes, stopping")
                break

            try:
                target = next_target(load)
            except RebalanceError as ex:
                result.error = ex
                break

            assignment = Assignment(shard=shard, target_node=target)
            logger.info(f"Rerouting shard {shard.address} => {target}...")
            try:
                self.client.submit_reroute(shard.index, shard.shard, target)
            except RebalanceError as ex:
                logger.error(f"Failed: {ex.message}")
                result.error = ex
                result.attempted = assignment
                break

            load.place(target, shard)
            shard.node = target
            result.placed += 1
            result.assignments.append(assignment)
            if self.on_step is not None:
                self.on_step(assignment)

        return result
