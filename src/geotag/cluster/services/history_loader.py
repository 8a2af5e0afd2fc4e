import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ValidationError, model_validator
from pyproj import Geod

from core.config import configs
from geotag.models.timeline import LocationTimeline, TimelinePoint

logger = logging.getLogger(__name__)


class HistoryEntry(BaseModel):
    """One entry of a Google Takeout location-history export."""

    latitudeE7: int
    longitudeE7: int
    accuracy: Optional[float] = None
    timestampMs: Optional[int] = None
    timestamp: Optional[datetime] = None

    @model_validator(mode="after")
    def check_time(self) -> "HistoryEntry":
        if self.timestampMs is None and self.timestamp is None:
            raise ValueError("entry has neither timestampMs nor timestamp")
        return self

    def to_point(self) -> TimelinePoint:
        if self.timestampMs is not None:
            ts = self.timestampMs / 1000.0
        else:
            dt = self.timestamp
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            ts = dt.timestamp()
        return TimelinePoint(
            timestamp=ts,
            longitude=self.longitudeE7 / 1e7,
            latitude=self.latitudeE7 / 1e7,
            accuracy=self.accuracy,
        )


def parse_location_history(data: dict) -> List[TimelinePoint]:
    """Converts the decoded JSON to points sorted by time. Malformed entries are dropped."""
    points = []
    skipped = 0
    for raw in data.get("locations", []):
        try:
            points.append(HistoryEntry.model_validate(raw).to_point())
        except ValidationError as e:
            skipped += 1
            logger.debug(f"Skipping malformed location entry: {e.errors()[0]['msg']}")

    if skipped:
        logger.warning(f"Skipped {skipped} malformed location-history entries.")
    points.sort(key=lambda p: p.timestamp)
    return points


def filter_outliers(
    points: List[TimelinePoint],
    max_accuracy_m: float = None,
    max_speed_mps: float = None,
) -> List[TimelinePoint]:
    """
    Drops points with a reported accuracy worse than `max_accuracy_m`, then
    points that could only be reached from the previous kept point faster
    than `max_speed_mps`. `points` must be sorted by time.
    """
    if max_accuracy_m is None:
        max_accuracy_m = configs.TIMELINE_MAX_ACCURACY_M
    if max_speed_mps is None:
        max_speed_mps = configs.TIMELINE_MAX_SPEED_MPS

    accurate = [p for p in points if p.accuracy is None or p.accuracy <= max_accuracy_m]

    geod = Geod(ellps="WGS84")
    kept: List[TimelinePoint] = []
    for curr in accurate:
        if not kept:
            kept.append(curr)
            continue
        prev = kept[-1]
        dt = curr.timestamp - prev.timestamp
        if dt <= 0:
            kept.append(curr)
            continue

        # inv(lon1, lat1, lon2, lat2) -> az12, az21, dist
        _, _, dist = geod.inv(prev.longitude, prev.latitude, curr.longitude, curr.latitude)
        speed = dist / dt
        if speed > max_speed_mps:
            logger.debug(f"Timeline outlier at {curr.timestamp} (Speed: {speed:.2f} m/s). Dropped.")
            continue
        kept.append(curr)

    dropped = len(points) - len(kept)
    if dropped:
        logger.info(f"Filtered {dropped} outliers from {len(points)} timeline points.")
    return kept


def load_location_history(path: Union[str, Path]) -> LocationTimeline:
    path = Path(path)
    logger.info(f"Loading location history from {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    points = filter_outliers(parse_location_history(data))
    logger.info(f"Loaded {len(points)} timeline points.")
    return LocationTimeline(points)
