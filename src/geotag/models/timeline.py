import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelinePoint:
    timestamp: float  # Unix timestamp
    longitude: float
    latitude: float
    accuracy: Optional[float] = None  # meters


class LocationTimeline:
    """Immutable, time-ordered sequence of recorded device positions."""

    def __init__(self, points: Sequence[TimelinePoint] = ()):
        self._points = tuple(points)
        self._timestamps = np.array([p.timestamp for p in self._points], dtype=np.float64)
        if np.any(np.diff(self._timestamps) < 0):
            raise ValueError("Timeline points must be sorted ascending by timestamp")
        logger.debug(f"LocationTimeline created with {len(self._points)} points.")

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[TimelinePoint]:
        return iter(self._points)

    def __getitem__(self, idx: int) -> TimelinePoint:
        return self._points[idx]

    def find_closest(self, timestamp: float) -> TimelinePoint:
        """
        Returns the point with the smallest absolute time difference to `timestamp`.

        Equal differences resolve to the earlier point. Querying an empty
        timeline is a caller error.
        """
        if not self._points:
            raise ValueError("find_closest called on an empty timeline")

        ts = self._timestamps
        right = int(np.searchsorted(ts, timestamp, side="left"))
        if right == len(ts):
            best = right - 1
        elif right == 0:
            best = 0
        else:
            left = right - 1
            best = left if timestamp - ts[left] <= ts[right] - timestamp else right

        # Duplicate timestamps: the first occurrence wins
        best = int(np.searchsorted(ts, ts[best], side="left"))
        return self._points[best]
