import logging
from typing import List

from geotag.models.photo import PhotoRecord
from geotag.models.timeline import LocationTimeline

logger = logging.getLogger(__name__)


class GeotagResolver:
    """Fills in missing photo locations from a recorded location timeline."""

    def __init__(self, timeline: LocationTimeline):
        self.timeline = timeline

    def resolve(self, photos: List[PhotoRecord]) -> int:
        """
        Snaps every photo that has a capture time but no location to the
        nearest-in-time timeline sample. No interpolation between samples.

        Returns the number of photos that received a location.
        """
        if len(self.timeline) == 0:
            logger.warning("Location timeline is empty. Skipping geotag resolution.")
            return 0

        resolved = 0
        for photo in photos:
            if photo.has_location or not photo.has_timestamp:
                continue
            closest = self.timeline.find_closest(photo.timestamp)
            logger.debug(
                f"{photo.path}: closest timestamp {closest.timestamp} "
                f"long: {closest.longitude} lat: {closest.latitude} accuracy: {closest.accuracy}"
            )
            photo.set_location(closest.longitude, closest.latitude)
            resolved += 1

        unresolved = sum(1 for p in photos if not p.has_location)
        logger.info(f"Resolved {resolved} photo locations from timeline. {unresolved} photos still without location.")
        return resolved
