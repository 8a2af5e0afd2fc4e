import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import TypeAdapter

from geotag.models.geocode import GeocodeResult

from .base import ReverseGeocoder

logger = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(List[GeocodeResult])


class GazetteerGeocoder(ReverseGeocoder):
    """
    Offline reverse geocoding over a list of named bounding boxes.

    The first entry whose box contains the point wins, so list smaller
    areas before the larger ones that enclose them.
    """

    def __init__(self, entries: Sequence[GeocodeResult]):
        self.entries = list(entries)
        logger.debug(f"GazetteerGeocoder initialized with {len(self.entries)} places")

    @classmethod
    def from_file(cls, path: str) -> "GazetteerGeocoder":
        """Loads a JSON list of {"name": ..., "bbox": {"min_lon", "max_lon", "min_lat", "max_lat"}}."""
        with Path(path).open("r", encoding="utf-8") as f:
            entries = _ENTRIES.validate_python(json.load(f))
        logger.info(f"Loaded {len(entries)} gazetteer places from {path}")
        return cls(entries)

    def reverse(self, lat: float, lon: float) -> Optional[GeocodeResult]:
        for entry in self.entries:
            if entry.bbox.contains(lon, lat):
                return entry
        return None
