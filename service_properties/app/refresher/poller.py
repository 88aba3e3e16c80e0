"""
Periodic refresh of the property snapshot from Sanity.
"""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, TYPE_CHECKING

from pydantic import ValidationError

from shared.logging import get_logger
from shared.errors import ExternalServiceError
from ..models import Property
from ..store import SnapshotStore

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..adapters.sanity_client import SanityClient
    from shared.metrics import MetricsCollector


DEFAULT_REFRESH_INTERVAL_SECONDS = 3600.0


class RefreshOutcome(str, Enum):
    """How a refresh cycle ended."""

    UPDATED = "updated"
    FETCH_FAILED = "fetch_failed"
    NO_RESULT = "no_result"


@dataclass(frozen=True)
class RefreshResult:
    """Summary of one refresh cycle."""

    outcome: RefreshOutcome
    decoded: int = 0
    dropped: int = 0
    duration_seconds: float = 0.0
    error: Optional[str] = None


class PropertyRefresher:
    """Keeps a SnapshotStore in step with the upstream property collection.

    One cycle runs immediately on ``start`` and then once per interval, with
    no jitter, backoff or retry limit. A failed cycle leaves the previous
    snapshot in place.
    """

    def __init__(
        self,
        store: SnapshotStore,
        client: "SanityClient",
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.store = store
        self.client = client
        self.interval_seconds = interval_seconds
        self.metrics = metrics
        self.logger = get_logger("properties.refresher")

        self.last_result: Optional[RefreshResult] = None
        self.running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Schedule the refresh loop on the running event loop."""
        if self.running:
            return
        self.running = True
        self._task = asyncio.create_task(self._refresh_loop())
        self.logger.info("Property refresher started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the refresh loop and wait for it to finish."""
        if not self.running:
            return
        self.running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self.logger.info("Property refresher stopped")

    async def _refresh_loop(self) -> None:
        while self.running:
            try:
                await self.refresh_once()
            except Exception as exc:
                self.logger.error("Unexpected error in refresh cycle", error=str(exc), exc_info=True)

            self.logger.info("Next update scheduled", in_seconds=self.interval_seconds)
            await asyncio.sleep(self.interval_seconds)

    async def refresh_once(self) -> RefreshResult:
        """Run one fetch-decode-replace cycle."""
        self.logger.info("Starting property fetch from Sanity", url=self.client.build_url())
        start = time.perf_counter()

        try:
            documents = await self.client.fetch_documents()
        except ExternalServiceError as exc:
            self.logger.error(
                "Failed to fetch properties from Sanity",
                reason=exc.reason,
                error=exc.message,
                details=exc.details,
            )
            return self._finish(RefreshResult(
                outcome=RefreshOutcome.FETCH_FAILED,
                duration_seconds=time.perf_counter() - start,
                error=exc.message,
            ))

        if documents is None:
            self.logger.warning("No properties found in Sanity API response")
            return self._finish(RefreshResult(
                outcome=RefreshOutcome.NO_RESULT,
                duration_seconds=time.perf_counter() - start,
            ))

        properties, dropped = await asyncio.to_thread(self.decode_documents, documents)
        snapshot = self.store.replace(properties)
        if self.metrics:
            self.metrics.record_snapshot(len(snapshot.properties))

        self.logger.info(
            "Properties successfully updated from Sanity",
            count=len(properties),
            dropped=dropped,
            generation=snapshot.generation,
        )
        return self._finish(RefreshResult(
            outcome=RefreshOutcome.UPDATED,
            decoded=len(properties),
            dropped=dropped,
            duration_seconds=time.perf_counter() - start,
        ))

    def decode_documents(self, documents: Sequence[Any]) -> Tuple[List[Property], int]:
        """Decode each document on its own; failures are logged and skipped."""
        properties: List[Property] = []
        dropped = 0
        for index, document in enumerate(documents):
            try:
                properties.append(Property.model_validate(document))
            except ValidationError as exc:
                dropped += 1
                document_id = document.get("_id") if isinstance(document, dict) else None
                self.logger.warning(
                    "Failed to decode property",
                    index=index,
                    document_id=document_id,
                    errors=exc.error_count(),
                    error=str(exc),
                )
        return properties, dropped

    def _finish(self, result: RefreshResult) -> RefreshResult:
        self.last_result = result
        if self.metrics:
            self.metrics.record_refresh(result.outcome.value, result.duration_seconds, result.dropped)
        self.logger.info(
            "Property fetch completed",
            outcome=result.outcome.value,
            duration_ms=round(result.duration_seconds * 1000, 2),
        )
        return result
