import logging
from typing import Sequence

from geotag.cluster.clusters.base import Clusterer
from geotag.cluster.clusters.dbscan import DensityClusterer
from geotag.cluster.distance import spatial_distance, spatial_matrix
from geotag.config import PlaceClusterConfig
from geotag.models.cluster import ClusterResult
from geotag.models.photo import PhotoRecord

logger = logging.getLogger(__name__)


class GPSCluster(Clusterer):
    """Place clusters: photos taken within walking distance of each other."""

    def __init__(self, config: PlaceClusterConfig = None):
        self.config = config or PlaceClusterConfig()
        self.dbscan = DensityClusterer(
            eps=self.config.eps_m,
            min_samples=self.config.min_samples,
            distance=spatial_distance,
            matrix=spatial_matrix,
        )

    def cluster(self, photos: Sequence[PhotoRecord]) -> ClusterResult:
        with_gps = sum(1 for p in photos if p.has_location)
        logger.info(f"Place clustering {with_gps}/{len(photos)} photos with a location (eps={self.config.eps_m}m).")
        result = self.dbscan.cluster(photos)
        logger.info(f"Found {len(result.clusters)} place clusters, {len(result.noise)} unclustered photos.")
        return result
