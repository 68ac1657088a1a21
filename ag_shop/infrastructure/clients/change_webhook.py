"""Change notifications: revision counter plus webhook with exponential backoff retry logic"""

import asyncio
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import httpx
from ag_shop.config import settings
from ag_shop.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter


class ChangeNotifier:
    """
    Publishes "something changed" signals so clients refetch on demand.

    Every mutation bumps an in-process revision number that clients can poll
    cheaply via GET /api/revision. When a webhook URL is configured the same
    event is also pushed to it.
    """

    def __init__(
        self,
        webhook_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url if webhook_url is not None else settings.change_webhook_url
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base
        self.timeout = settings.http_timeout_seconds
        self._transport = transport
        self._revision = 0
        self._lock = threading.Lock()

    @property
    def revision(self) -> int:
        return self._revision

    def publish(self, entity: str, action: str, entity_id: Optional[int]) -> Dict[str, Any]:
        """Bump the revision and return the event payload describing the change"""
        with self._lock:
            self._revision += 1
            revision = self._revision

        return {
            "event": f"{entity.upper()}_{action.upper()}",
            "entity": entity,
            "entity_id": entity_id,
            "revision": revision,
            "occurred_at": datetime.now(timezone.utc).isoformat(),
        }

    async def send_change_event(self, payload: Dict[str, Any]) -> None:
        """
        Deliver a change event to the configured webhook with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on HTTP error statuses and network failures
        - Tracks latency histogram and failure counter
        - Logs and gives up after max_retries; delivery is best effort

        Args:
            payload: Event data from publish()
        """
        if not self.webhook_url:
            return

        attempt = 0
        async with httpx.AsyncClient(transport=self._transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=self.timeout,
                        )
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        # Best effort: clients still see the revision move
                        logging.error(
                            f"Change webhook gave up after {attempt} attempts: {e}",
                            extra={"event": payload.get("event"), "revision": payload.get("revision")},
                        )
                        return

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)


change_notifier = ChangeNotifier()
