import asyncio
import logging
import os
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Deque, Optional, Tuple

from core.geocoding.base import ReverseGeocoder
from geotag.models.geocode import GeocodeLookup

logger = logging.getLogger(__name__)


class GeocodeRequestQueue:
    """
    Poll-driven scheduler for reverse-geocode lookups.

    Lookups run on a bounded thread pool. Each lookup's Future is the only
    thing a worker touches; the pending deque itself is owned by the control
    thread (the one calling `enqueue` and `tick`), so it needs no lock.

    Each `tick` polls exactly one lookup from the front of the queue. A
    finished lookup is removed and handed to `on_complete`; an unfinished
    one goes to the back of the queue for a later tick.
    """

    def __init__(
        self,
        geocoder: ReverseGeocoder,
        on_complete: Callable[[GeocodeLookup], None],
        max_workers: Optional[int] = None,
        tick_interval_s: float = 1.0,
    ):
        self.geocoder = geocoder
        self.on_complete = on_complete
        self.tick_interval_s = tick_interval_s
        self.max_workers = max_workers or os.cpu_count() or 1
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="geocode")
        self._pending: Deque[GeocodeLookup] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> Tuple[GeocodeLookup, ...]:
        return tuple(self._pending)

    def enqueue(self, lookup: GeocodeLookup) -> None:
        """Dispatches the lookup to the worker pool. Never blocks."""
        lookup.future = self._executor.submit(self.geocoder.reverse, lookup.lat, lookup.lon)
        self._pending.append(lookup)
        logger.debug(f"Enqueued geocode lookup for cluster {lookup.cluster_id} ({lookup.lat}, {lookup.lon}). Depth: {len(self._pending)}")

    def tick(self) -> Optional[GeocodeLookup]:
        """Polls one pending lookup. Returns it if it was delivered this tick."""
        if not self._pending:
            return None

        lookup = self._pending.popleft()
        if not lookup.future.done():
            self._pending.append(lookup)
            return None

        try:
            lookup.complete(lookup.future.result())
        except Exception as e:
            logger.warning(f"Geocode lookup for cluster {lookup.cluster_id} failed: {e}")
            lookup.fail()

        self.on_complete(lookup)
        return lookup

    async def drain(self) -> None:
        """Ticks at a fixed interval until every pending lookup has been delivered."""
        if self._pending:
            logger.info(f"Draining {len(self._pending)} geocode lookups (tick every {self.tick_interval_s}s).")
        while self._pending:
            self.tick()
            if self._pending:
                await asyncio.sleep(self.tick_interval_s)

    def close(self) -> None:
        self._executor.shutdown(wait=False)
