from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class BoundingBox(BaseModel):
    min_lon: float = Field(ge=-180.0, le=180.0)
    max_lon: float = Field(ge=-180.0, le=180.0)
    min_lat: float = Field(ge=-90.0, le=90.0)
    max_lat: float = Field(ge=-90.0, le=90.0)

    @model_validator(mode="after")
    def check_order(self) -> "BoundingBox":
        if self.min_lon > self.max_lon or self.min_lat > self.max_lat:
            raise ValueError("Bounding box minimum exceeds maximum")
        return self

    def contains(self, lon: float, lat: float) -> bool:
        return self.min_lon <= lon <= self.max_lon and self.min_lat <= lat <= self.max_lat


class GeocodeResult(BaseModel):
    name: str = Field(min_length=1)
    bbox: BoundingBox


class LookupState(str, Enum):
    PENDING = "PENDING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


@dataclass
class GeocodeLookup:
    """One reverse-geocode request for the representative point of a place cluster."""

    cluster_id: int
    lat: float
    lon: float
    state: LookupState = LookupState.PENDING
    result: Optional[GeocodeResult] = None
    future: Optional[Future] = None

    def complete(self, result: Optional[GeocodeResult]) -> None:
        self.result = result
        self.state = LookupState.COMPLETE if result is not None else LookupState.FAILED

    def fail(self) -> None:
        self.result = None
        self.state = LookupState.FAILED
