from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass(frozen=True)
class NodeInfo:
    """Information about an Elasticsearch node, as reported by `_cat/nodes`"""

    name: str
    ip: Optional[str] = None
    role: str = ""

    @property
    def is_master(self) -> bool:
        # `node.role` is "m" for master-only nodes.
        return self.role == "m"

    @property
    def is_data_node(self) -> bool:
        return not self.is_master


@dataclass
class ShardInfo:
    """Information about a shard copy, as reported by `_cat/shards`"""

    index: str
    shard: int
    prirep: str
    state: str = ""
    docs: Optional[int] = None
    store: Optional[str] = None
    ip: Optional[str] = None
    node: str = ""
    unassigned_reason: Optional[str] = None
    relocating_node: Optional[str] = None

    @property
    def is_primary(self) -> bool:
        return self.prirep == "p"

    @property
    def is_replica(self) -> bool:
        return not self.is_primary

    @property
    def is_unassigned(self) -> bool:
        return not self.node

    @property
    def shard_type(self) -> str:
        return "PRIMARY" if self.is_primary else "REPLICA"

    @property
    def address(self) -> str:
        return f"{self.index}/{self.shard}"


class LoadModel:
    """
    Replica shards hosted per eligible data node.

    The set of nodes is fixed on construction. Placing a shard only ever
    appends to an existing node's list, so counts never decrease and no
    node is added or removed during a run.
    """

    def __init__(self, nodes: List[str]):
        self._shards: Dict[str, List[ShardInfo]] = {name: [] for name in nodes}

    def __contains__(self, node: str) -> bool:
        return node in self._shards

    def __iter__(self) -> Iterator[str]:
        return iter(self._shards)

    def __len__(self) -> int:
        return len(self._shards)

    def __repr__(self):
        return f"LoadModel({self.counts()!r})"

    def nodes(self) -> List[str]:
        return list(self._shards)

    def shards(self, node: str) -> List[ShardInfo]:
        return list(self._shards[node])

    def count(self, node: str) -> int:
        return len(self._shards[node])

    def counts(self) -> Dict[str, int]:
        return {name: len(shards) for name, shards in self._shards.items()}

    def total(self) -> int:
        return sum(len(shards) for shards in self._shards.values())

    def place(self, node: str, shard: ShardInfo):
        """Record `shard` as hosted by `node`. Raises `KeyError` for unknown nodes."""
        if node not in self._shards:
            raise KeyError(f"Unknown data node: {node}")
        self._shards[node].append(shard)

    def copy(self) -> "LoadModel":
        other = LoadModel([])
        other._shards = {name: list(shards) for name, shards in self._shards.items()}
        return other


@dataclass
class AllocateEmptyPrimary:
    """
    Force a shard copy onto a node as an empty primary.

    Data which has not been replicated yet is lost. Placed copies start
    empty and resynchronize from the primary.
    """

    index: str
    shard: int
    node: str
    accept_data_loss: bool = True

    kind = "allocate_empty_primary"

    def to_dict(self) -> Dict[str, Any]:
        return {
            self.kind: {
                "index": self.index,
                "shard": self.shard,
                "node": self.node,
                "accept_data_loss": self.accept_data_loss,
            }
        }


@dataclass
class RerouteRequest:
    """Body of a `_cluster/reroute` request"""

    commands: List[AllocateEmptyPrimary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"commands": [command.to_dict() for command in self.commands]}


@dataclass
class Assignment:
    """Decision to move an unassigned shard copy to a target node"""

    shard: ShardInfo
    target_node: str

    def to_command(self) -> AllocateEmptyPrimary:
        return AllocateEmptyPrimary(index=self.shard.index, shard=self.shard.shard, node=self.target_node)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.shard.index,
            "shard": self.shard.shard,
            "target_node": self.target_node,
        }


@dataclass
class ClusterSnapshot:
    """Topology the placement planner operates on"""

    data_nodes: List[str]
    unassigned: List[ShardInfo]
    load: LoadModel
    orphans: List[ShardInfo] = field(default_factory=list)

    @property
    def orphan_nodes(self) -> List[str]:
        return sorted({shard.node for shard in self.orphans})


@dataclass
class RebalanceResult:
    """Outcome of a rebalancing run"""

    placed: int = 0
    assignments: List[Assignment] = field(default_factory=list)
    error: Optional[Exception] = None
    attempted: Optional[Assignment] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
