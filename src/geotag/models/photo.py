from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple


class LocationSource(str, Enum):
    EXIF = "EXIF"
    TIMELINE = "TIMELINE"


@dataclass
class PhotoRecord:
    """
    Per-photo state for one pipeline run.

    A location read from EXIF is authoritative. A missing location may be
    filled once from the timeline and is never overwritten afterwards.
    """

    path: str
    timestamp: Optional[float] = None  # Unix timestamp
    lat: Optional[float] = None
    lon: Optional[float] = None
    place_name: Optional[str] = None
    location_source: Optional[LocationSource] = None

    def __post_init__(self):
        if self.has_location and self.location_source is None:
            self.location_source = LocationSource.EXIF

    @property
    def has_location(self) -> bool:
        return self.lat is not None and self.lon is not None

    @property
    def has_timestamp(self) -> bool:
        return self.timestamp is not None

    @property
    def location(self) -> Optional[Tuple[float, float]]:
        """(lon, lat) pair, or None."""
        if not self.has_location:
            return None
        return self.lon, self.lat

    @property
    def captured_at(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    def set_location(self, lon: float, lat: float) -> None:
        if self.has_location:
            raise ValueError(f"Location of {self.path} is already set ({self.location_source})")
        self.lon = lon
        self.lat = lat
        self.location_source = LocationSource.TIMELINE
