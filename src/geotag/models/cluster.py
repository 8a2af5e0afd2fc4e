from dataclasses import dataclass, field
from typing import FrozenSet, List, Set


@dataclass
class Cluster:
    """Indices into the clustered collection, listed in ascending order."""

    members: List[int]

    @property
    def representative(self) -> int:
        return self.members[0]

    def __len__(self) -> int:
        return len(self.members)

    def __contains__(self, idx: int) -> bool:
        return idx in self.members


@dataclass
class ClusterResult:
    clusters: List[Cluster] = field(default_factory=list)
    noise: List[int] = field(default_factory=list)

    def partition(self) -> Set[FrozenSet[int]]:
        """Cluster membership as a set of sets; label order is not significant."""
        return {frozenset(c.members) for c in self.clusters}

    def cluster_of(self, idx: int) -> int:
        """Position of the cluster containing `idx`, or -1 for noise."""
        for pos, cluster in enumerate(self.clusters):
            if idx in cluster:
                return pos
        return -1
