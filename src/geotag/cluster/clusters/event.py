import logging
from typing import Sequence

from geotag.cluster.clusters.base import Clusterer
from geotag.cluster.clusters.dbscan import DensityClusterer
from geotag.cluster.distance import temporal_distance, temporal_matrix
from geotag.config import EventClusterConfig
from geotag.models.cluster import ClusterResult
from geotag.models.photo import PhotoRecord

logger = logging.getLogger(__name__)


class EventCluster(Clusterer):
    """Event clusters: dense bursts of photos in capture time, independent of place."""

    def __init__(self, config: EventClusterConfig = None):
        self.config = config or EventClusterConfig()
        self.dbscan = DensityClusterer(
            eps=self.config.eps_s,
            min_samples=self.config.min_samples,
            distance=temporal_distance,
            matrix=temporal_matrix,
        )
        logger.debug(f"EventCluster initialized with eps_s={self.config.eps_s}, min_samples={self.config.min_samples}")

    def cluster(self, photos: Sequence[PhotoRecord]) -> ClusterResult:
        logger.info(f"Starting event clustering for {len(photos)} photos.")
        result = self.dbscan.cluster(photos)
        logger.info(f"Event clustering resulted in {len(result.clusters)} events.")
        return result
