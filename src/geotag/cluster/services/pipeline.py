import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from core.geocoding.base import ReverseGeocoder
from geotag.cluster.clusters.event import EventCluster
from geotag.cluster.clusters.gps import GPSCluster
from geotag.cluster.services.enricher import ClusterEnricher
from geotag.cluster.services.geocode_queue import GeocodeRequestQueue
from geotag.cluster.services.resolver import GeotagResolver
from geotag.config import JobConfig
from geotag.models.cluster import ClusterResult
from geotag.models.photo import PhotoRecord
from geotag.models.timeline import LocationTimeline
from geotag.utils.performance import PerformanceMonitor

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    photos: List[PhotoRecord]
    places: ClusterResult
    events: ClusterResult


class PhotoGeotagPipeline:
    def __init__(
        self,
        config: JobConfig,
        photos: List[PhotoRecord],
        timeline: Optional[LocationTimeline] = None,
        geocoder: Optional[ReverseGeocoder] = None,
    ):
        self.config = config
        self.photos = photos
        self.timeline = timeline or LocationTimeline()
        self.geocoder = geocoder
        logger.debug(f"Initializing pipeline for job_id: {self.config.job_id}")

        self.place_clusterer = GPSCluster(config.pipeline.place)
        self.event_clusterer = EventCluster(config.pipeline.event)
        self.performance_monitor = PerformanceMonitor()

    async def run(self) -> PipelineResult:
        logger.info(f"Pipeline run started for job {self.config.job_id} with {len(self.photos)} photos.")
        pm = self.performance_monitor

        with pm.measure("resolve", len(self.photos)):
            await asyncio.to_thread(GeotagResolver(self.timeline).resolve, self.photos)

        with pm.measure("place_clustering", len(self.photos)):
            places = await asyncio.to_thread(self.place_clusterer.cluster, self.photos)

        with pm.measure("enrichment", len(places.clusters)):
            await self._enrich(places)

        with pm.measure("event_clustering", len(self.photos)):
            events = await asyncio.to_thread(self.event_clusterer.cluster, self.photos)

        logger.info(
            f"Pipeline finished for job {self.config.job_id}: "
            f"{len(places.clusters)} places, {len(events.clusters)} events."
        )
        return PipelineResult(photos=self.photos, places=places, events=events)

    async def _enrich(self, places: ClusterResult) -> None:
        enricher = ClusterEnricher(self.photos)
        if self.geocoder is None:
            await enricher.enrich(places.clusters, None)
            return

        enrichment = self.config.pipeline.enrichment
        queue = GeocodeRequestQueue(
            self.geocoder,
            on_complete=enricher.apply_lookup,
            max_workers=enrichment.max_workers,
            tick_interval_s=enrichment.tick_interval_s,
        )
        try:
            await enricher.enrich(places.clusters, queue)
        finally:
            queue.close()
