from .base import ReverseGeocoder
from .gazetteer import GazetteerGeocoder
from .nominatim import NominatimGeocoder
from .factory import get_geocoder

__all__ = ["ReverseGeocoder", "GazetteerGeocoder", "NominatimGeocoder", "get_geocoder"]
