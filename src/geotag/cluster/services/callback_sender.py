import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


class CallbackSender:
    async def send_result(self, url: str, payload: Dict[str, Any], task_id: str):
        logger.info(f"[Task {task_id}] Sending callback to {url}")
        async with httpx.AsyncClient() as client:
            for attempt in range(MAX_ATTEMPTS):
                try:
                    response = await client.post(url, json=payload, timeout=10.0)
                    response.raise_for_status()
                    logger.info(f"[Task {task_id}] Callback sent successfully. Status: {response.status_code}")
                    return True
                except httpx.HTTPStatusError as e:
                    logger.error(f"[Task {task_id}] Callback failed (attempt {attempt+1}/{MAX_ATTEMPTS}): HTTP {e.response.status_code} - {e.response.text}")
                    if 400 <= e.response.status_code < 500:
                        # Do not retry client errors
                        break
                except httpx.HTTPError as e:
                    logger.error(f"[Task {task_id}] Callback connection error (attempt {attempt+1}/{MAX_ATTEMPTS}): {e}")

                if attempt < MAX_ATTEMPTS - 1:
                    await asyncio.sleep(2 ** attempt)

            logger.error(f"[Task {task_id}] Callback failed after {attempt+1} attempts.")
            return False

    async def send_error(self, url: str, error_message: str, task_id: str, request_id: Optional[str] = None):
        payload = {
            "task_id": task_id,
            "request_id": request_id,
            "status": "failed",
            "error": error_message
        }
        return await self.send_result(url, payload, task_id)
