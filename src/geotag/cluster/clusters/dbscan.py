import logging
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

import numpy as np
from sklearn.cluster import DBSCAN

from geotag.models.cluster import Cluster, ClusterResult

logger = logging.getLogger(__name__)

T = TypeVar("T")
DistanceFn = Callable[[T, T], Optional[float]]
MatrixFn = Callable[[Sequence[T]], np.ndarray]


class DensityClusterer(Generic[T]):
    """
    DBSCAN over an indexed point set and a pairwise distance function.

    A point whose distance to itself is undefined lacks the attribute the
    metric needs; it is left out of the distance matrix and always ends up
    as noise. Neighbourhoods are inclusive (distance <= eps) and count the
    point itself.

    When `matrix` is given it computes all pairs among the eligible points in
    one call; `distance` is then only used to decide eligibility.
    """

    def __init__(self, eps: float, min_samples: int, distance: DistanceFn, matrix: Optional[MatrixFn] = None):
        if eps <= 0:
            raise ValueError(f"eps must be positive, got {eps}")
        if min_samples < 1:
            raise ValueError(f"min_samples must be at least 1, got {min_samples}")
        self.eps = eps
        self.min_samples = min_samples
        self.distance = distance
        self.matrix = matrix

    def build_distance_matrix(self, points: Sequence[T]) -> Tuple[List[int], Optional[np.ndarray]]:
        eligible = [i for i, p in enumerate(points) if self.distance(p, p) is not None]
        n = len(eligible)
        if n == 0:
            return eligible, None

        if self.matrix is not None:
            return eligible, self.matrix([points[i] for i in eligible])

        # Pairs without a defined distance must never fall inside eps
        unreachable = 2.0 * self.eps + 1.0

        D = np.zeros((n, n), dtype=float)
        for i in range(n):
            for j in range(i + 1, n):
                d = self.distance(points[eligible[i]], points[eligible[j]])
                D[i, j] = D[j, i] = unreachable if d is None else d
        return eligible, D

    def cluster(self, points: Sequence[T]) -> ClusterResult:
        eligible, D = self.build_distance_matrix(points)
        if D is None:
            logger.debug(f"No clusterable points among {len(points)}.")
            return ClusterResult(clusters=[], noise=list(range(len(points))))

        labels = DBSCAN(
            eps=self.eps,
            min_samples=self.min_samples,
            metric="precomputed",
        ).fit(D).labels_

        clusters_dict = {}
        for idx, label in zip(eligible, labels):
            if label == -1:
                continue
            clusters_dict.setdefault(int(label), []).append(idx)

        clusters = [Cluster(members=clusters_dict[k]) for k in sorted(clusters_dict.keys())]
        assigned = {idx for c in clusters for idx in c.members}
        noise = [i for i in range(len(points)) if i not in assigned]

        logger.debug(
            f"DBSCAN(eps={self.eps}, min_samples={self.min_samples}): "
            f"{len(points)} points, {len(eligible)} eligible, {len(clusters)} clusters, {len(noise)} noise"
        )
        return ClusterResult(clusters=clusters, noise=noise)
