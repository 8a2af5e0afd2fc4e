from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Photo Geotag Worker"
    LOG_LEVEL: str = "DEBUG"
    ENVIRONMENT: str = "development"

    # Reverse geocoding
    GEOCODER_TYPE: str = "nominatim" # nominatim, gazetteer, none
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org/reverse"
    NOMINATIM_USER_AGENT: str = "photo-geotag-worker/1.0"
    NOMINATIM_ZOOM: int = 10
    GEOCODER_TIMEOUT_S: float = 10.0
    GAZETTEER_PATH: Optional[str] = None

    # Photo source
    EXIF_UTC_OFFSET_HOURS: float = 0.0

    # Timeline source
    TIMELINE_MAX_ACCURACY_M: float = 1000.0
    TIMELINE_MAX_SPEED_MPS: float = 90.0

    class Config:
        env_file = ".env"

configs = Settings()
