import logging
from typing import List, Optional

from geotag.cluster.services.geocode_queue import GeocodeRequestQueue
from geotag.models.cluster import Cluster
from geotag.models.geocode import GeocodeLookup
from geotag.models.photo import PhotoRecord

logger = logging.getLogger(__name__)


class ClusterEnricher:
    """Assigns human-readable place names to place clusters."""

    def __init__(self, photos: List[PhotoRecord]):
        self.photos = photos

    async def enrich(self, clusters: List[Cluster], queue: Optional[GeocodeRequestQueue]) -> int:
        """
        Walks the clusters in order. A cluster that already has a named member
        shares that name with its other members; any other cluster gets one
        reverse-geocode lookup for its representative point.

        Each lookup is drained before the walk moves on, so a bounding box
        returned for one cluster can name later clusters and spare them a
        lookup of their own. The queue keeps ticking while a lookup is in
        flight.

        Returns the number of lookups enqueued.
        """
        enqueued = 0
        for cluster_id, cluster in enumerate(clusters):
            name = self._first_name(cluster)
            if name is not None:
                filled = self._propagate(cluster, name)
                logger.debug(f"Cluster {cluster_id}: propagated '{name}' to {filled} photos.")
                continue

            if queue is None:
                logger.debug(f"Cluster {cluster_id}: no geocoder configured, left unnamed.")
                continue

            rep = self.photos[cluster.representative]
            if not rep.has_location:
                logger.warning(f"Cluster {cluster_id}: representative {rep.path} has no location, skipping lookup.")
                continue

            queue.enqueue(GeocodeLookup(cluster_id=cluster_id, lat=rep.lat, lon=rep.lon))
            enqueued += 1
            await queue.drain()

        logger.info(f"Enrichment: {enqueued} geocode lookups for {len(clusters)} place clusters.")
        return enqueued

    def apply_lookup(self, lookup: GeocodeLookup) -> int:
        """
        Completion handler for a lookup. A successful result names every photo
        in the whole collection whose location lies inside the returned
        bounding box, not only the members of the triggering cluster.

        Returns the number of photos named.
        """
        if lookup.result is None:
            logger.info(f"Cluster {lookup.cluster_id}: no place name found, left unnamed.")
            return 0

        name = lookup.result.name
        bbox = lookup.result.bbox
        named = 0
        for photo in self.photos:
            if photo.has_location and bbox.contains(photo.lon, photo.lat):
                photo.place_name = name
                named += 1

        logger.info(f"Cluster {lookup.cluster_id}: '{name}' assigned to {named} photos.")
        return named

    def _first_name(self, cluster: Cluster) -> Optional[str]:
        for idx in cluster.members:
            if self.photos[idx].place_name:
                return self.photos[idx].place_name
        return None

    def _propagate(self, cluster: Cluster, name: str) -> int:
        filled = 0
        for idx in cluster.members:
            if not self.photos[idx].place_name:
                self.photos[idx].place_name = name
                filled += 1
        return filled
