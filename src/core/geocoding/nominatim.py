import logging
from typing import Any, Dict, Optional

import httpx

from core.config import configs
from geotag.models.geocode import BoundingBox, GeocodeResult

from .base import ReverseGeocoder

logger = logging.getLogger(__name__)


class NominatimGeocoder(ReverseGeocoder):
    """Reverse geocoding against an OpenStreetMap Nominatim server."""

    def __init__(
        self,
        url: str = None,
        user_agent: str = None,
        zoom: int = None,
        timeout: float = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url or configs.NOMINATIM_URL
        self.user_agent = user_agent or configs.NOMINATIM_USER_AGENT
        self.zoom = zoom if zoom is not None else configs.NOMINATIM_ZOOM
        self.timeout = timeout if timeout is not None else configs.GEOCODER_TIMEOUT_S
        self.transport = transport
        logger.debug(f"NominatimGeocoder initialized with url {self.url}, zoom {self.zoom}")

    def reverse(self, lat: float, lon: float) -> Optional[GeocodeResult]:
        params = {
            "lat": lat,
            "lon": lon,
            "format": "jsonv2",
            "zoom": self.zoom,
            "accept-language": "en",
        }
        with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
            resp = client.get(self.url, params=params, headers={"User-Agent": self.user_agent})
            resp.raise_for_status()
            data = resp.json()

        if "error" in data:
            logger.info(f"Nominatim has no place at ({lat}, {lon}): {data['error']}")
            return None
        return self._parse(data)

    def _parse(self, data: Dict[str, Any]) -> GeocodeResult:
        # boundingbox is [min_lat, max_lat, min_lon, max_lon] as strings
        bbox = data.get("boundingbox") or []
        if len(bbox) != 4:
            raise ValueError(f"Malformed boundingbox in Nominatim response: {bbox}")
        min_lat, max_lat, min_lon, max_lon = bbox

        return GeocodeResult(
            name=self._short_name(data),
            bbox=BoundingBox(min_lon=min_lon, max_lon=max_lon, min_lat=min_lat, max_lat=max_lat),
        )

    def _short_name(self, data: Dict[str, Any]) -> str:
        """A compact "town, country" string, falling back to the full display name."""
        addr = data.get("address") or {}
        place = addr.get("city") or addr.get("town") or addr.get("village") or addr.get("state") or ""
        country = addr.get("country", "")
        return ", ".join(filter(None, [place, country])) or data.get("display_name", "")
