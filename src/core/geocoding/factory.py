import logging
from functools import lru_cache
from typing import Optional

from core.config import configs

from .base import ReverseGeocoder
from .gazetteer import GazetteerGeocoder
from .nominatim import NominatimGeocoder

logger = logging.getLogger(__name__)


class GeocoderFactory:
    @staticmethod
    def get_geocoder(geocoder_type: str = "nominatim") -> Optional[ReverseGeocoder]:
        logger.info(f"Creating geocoder of type: {geocoder_type}")
        if geocoder_type == "none":
            return None
        elif geocoder_type == "nominatim":
            return NominatimGeocoder()
        elif geocoder_type == "gazetteer":
            if not configs.GAZETTEER_PATH:
                raise ValueError("GAZETTEER_PATH must be set when GEOCODER_TYPE is 'gazetteer'")
            return GazetteerGeocoder.from_file(configs.GAZETTEER_PATH)
        else:
            raise ValueError(f"Unknown geocoder type: {geocoder_type}")


@lru_cache()
def get_geocoder() -> Optional[ReverseGeocoder]:
    geocoder_type = getattr(configs, "GEOCODER_TYPE", "nominatim")
    logger.debug(f"Getting geocoder (cached). Type: {geocoder_type}")
    return GeocoderFactory.get_geocoder(geocoder_type)
