"""
Pairwise distances between photos.

Both functions are total: when either photo lacks the attribute they measure
they return None instead of a number, and the clusterer never counts such a
pair as neighbours.

The `*_matrix` forms compute every pair at once for photos that all have the
attribute, and agree with the per-pair functions.
"""
from typing import Optional, Sequence

import numpy as np
from pyproj import Geod
from sklearn.metrics.pairwise import haversine_distances

from geotag.models.photo import PhotoRecord

EARTH_RADIUS_M = 6371008.8  # mean Earth radius (IUGG)

# A geodesic on a sphere is the great circle, so this matches the haversine formula.
_SPHERE = Geod(a=EARTH_RADIUS_M, b=EARTH_RADIUS_M)


def haversine_m(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    # inv(lon1, lat1, lon2, lat2) -> az12, az21, dist
    _, _, dist = _SPHERE.inv(lon1, lat1, lon2, lat2)
    return abs(dist)


def spatial_distance(a: PhotoRecord, b: PhotoRecord) -> Optional[float]:
    """Great-circle distance in meters, or None if either photo has no location."""
    if not a.has_location or not b.has_location:
        return None
    return haversine_m(a.lon, a.lat, b.lon, b.lat)


def temporal_distance(a: PhotoRecord, b: PhotoRecord) -> Optional[float]:
    """Absolute capture-time difference in seconds, or None if either time is unknown."""
    if not a.has_timestamp or not b.has_timestamp:
        return None
    return abs(a.timestamp - b.timestamp)


def spatial_matrix(photos: Sequence[PhotoRecord]) -> np.ndarray:
    """Great-circle distances in meters between located photos."""
    # haversine_distances takes [lat, lon] in radians and works on the unit sphere
    coords = np.radians([[p.lat, p.lon] for p in photos])
    return haversine_distances(coords) * EARTH_RADIUS_M


def temporal_matrix(photos: Sequence[PhotoRecord]) -> np.ndarray:
    """Capture-time differences in seconds between timed photos."""
    t = np.array([p.timestamp for p in photos], dtype=float)
    return np.abs(t[:, None] - t[None, :])
