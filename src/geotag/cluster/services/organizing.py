import asyncio
import logging
import traceback

from core.geocoding import get_geocoder
from geotag.cluster.schema import OrganizeRequest
from geotag.cluster.services.callback_sender import CallbackSender
from geotag.cluster.services.formatters import format_organize_response
from geotag.cluster.services.history_loader import load_location_history
from geotag.cluster.services.metadata_extractor import MetadataExtractor
from geotag.cluster.services.pipeline import PhotoGeotagPipeline
from geotag.config import JobConfig
from geotag.models.timeline import LocationTimeline

logger = logging.getLogger(__name__)


class OrganizeService:
    def __init__(self, callback_sender: CallbackSender):
        self.callback_sender = callback_sender
        self.metadata_extractor = MetadataExtractor()

    async def process_task(
        self,
        task_id: str,
        req: OrganizeRequest,
        lock: asyncio.Lock
    ):
        """Background task: scan, geotag, cluster, name, then report to the webhook."""
        logger.info(f"[Task {task_id}] Background processing started. Photos: {req.photo_dir}")

        try:
            # 1. Photo source: directory walk + EXIF, off the event loop
            photos = await asyncio.to_thread(self.metadata_extractor.scan, req.photo_dir)
            if not photos:
                raise ValueError(f"No photos with EXIF metadata found in: {req.photo_dir}")
            logger.info(f"[Task {task_id}] Found {len(photos)} photos.")

            # 2. Timeline source
            if req.timeline_path:
                timeline = await asyncio.to_thread(load_location_history, req.timeline_path)
            else:
                logger.info(f"[Task {task_id}] No timeline given. Only embedded locations are used.")
                timeline = LocationTimeline()

            # 3. Pipeline Execution (Concurrency Control)
            job_config = JobConfig(job_id=req.request_id)
            async with lock:
                pipeline = PhotoGeotagPipeline(job_config, photos, timeline, get_geocoder())
                result = await pipeline.run()

            # 4. Response Formatting
            response = format_organize_response(result.photos, result.places, result.events)

            full_payload = {
                "task_id": task_id,
                "request_id": req.request_id,
                "status": "completed",
                "result": response.model_dump()
            }

            logger.info(f"[Task {task_id}] Completed. Places: {len(result.places.clusters)}, events: {len(result.events.clusters)}")

            # 5. Callback
            if req.webhook_url:
                await self.callback_sender.send_result(req.webhook_url, full_payload, task_id)
            else:
                logger.warning(f"[Task {task_id}] No webhook_url. Result not delivered.")
            return full_payload

        except Exception as e:
            logger.error(f"[Task {task_id}] Failed: {e}")
            logger.debug(traceback.format_exc())

            if req.webhook_url:
                await self.callback_sender.send_error(
                    req.webhook_url, str(e), task_id, req.request_id
                )
            return None
