from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PlaceClusterConfig:
    eps_m: float = 1000.0
    min_samples: int = 3


@dataclass
class EventClusterConfig:
    eps_s: float = 600.0
    min_samples: int = 10


@dataclass
class EnrichmentConfig:
    tick_interval_s: float = 1.0
    max_workers: Optional[int] = None  # None -> os.cpu_count()


@dataclass
class PipelineConfig:
    place: PlaceClusterConfig = field(default_factory=PlaceClusterConfig)
    event: EventClusterConfig = field(default_factory=EventClusterConfig)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)


@dataclass
class JobConfig:
    job_id: str
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
