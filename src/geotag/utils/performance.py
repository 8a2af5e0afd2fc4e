import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from prometheus_client import Histogram

logger = logging.getLogger(__name__)

# Prometheus Metrics
STAGE_DURATION_SECONDS = Histogram(
    "pipeline_stage_duration_seconds",
    "Time spent in a geotag pipeline stage",
    ["stage"]
)


class PerformanceMonitor:
    """Helper to measure the wall time of a pipeline stage."""

    def __init__(self):
        self.start_time = 0.0
        self.end_time = 0.0

    def start(self):
        self.start_time = time.perf_counter()

    def stop(self):
        self.end_time = time.perf_counter()

    @property
    def duration(self):
        return self.end_time - self.start_time

    def report(self, label: str, count: Optional[int] = None) -> str:
        count_str = f" (N={count})" if count is not None else ""
        STAGE_DURATION_SECONDS.labels(stage=label).observe(self.duration)
        return f"[{label}]{count_str} Time: {self.duration:.4f}s"

    @contextmanager
    def measure(self, label: str, count: Optional[int] = None) -> Iterator["PerformanceMonitor"]:
        self.start()
        try:
            yield self
        finally:
            self.stop()
            logger.debug(self.report(label, count))
