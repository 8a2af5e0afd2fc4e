from abc import ABC, abstractmethod
from typing import Optional

from geotag.models.geocode import GeocodeResult


class ReverseGeocoder(ABC):
    """Abstract base class for reverse-geocoding transports."""

    @abstractmethod
    def reverse(self, lat: float, lon: float) -> Optional[GeocodeResult]:
        """
        Resolve a coordinate to a place name and the bounding box of that place.

        Called from worker threads, so implementations may block.

        Args:
            lat: Latitude in decimal degrees.
            lon: Longitude in decimal degrees.

        Returns:
            The place, or None when the transport knows no place at the point.
            Transport failures and malformed responses are raised.
        """
        pass
