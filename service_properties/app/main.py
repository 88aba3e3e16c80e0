"""
Properties cache service.

Mirrors the Sanity "property" collection in memory and serves it read-only.
"""

import sys
from typing import Any, Dict, List, Optional

from fastapi.responses import PlainTextResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import ConfigurationError, PropertyNotFoundError
from shared.logging import configure_logging, get_logger

from .adapters.sanity_client import SanityClient
from .models import Property
from .refresher import PropertyRefresher
from .store import SnapshotStore


class PropertiesService(BaseService):
    """Properties service implementation."""

    def __init__(
        self,
        config: ServiceConfig,
        *,
        store: Optional[SnapshotStore] = None,
        sanity_client: Optional[SanityClient] = None,
    ):
        super().__init__("properties", config)

        self.store = store if store is not None else SnapshotStore()
        self.sanity_client = sanity_client or SanityClient(
            self.config.sanity_api_url,
            content_type=self.config.sanity_content_type,
            timeout=self.config.sanity_timeout_seconds,
        )
        self.refresher = PropertyRefresher(
            self.store,
            self.sanity_client,
            interval_seconds=self.config.refresh_interval_seconds,
            metrics=self.metrics,
        )

        self._setup_property_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.properties_service = self

    async def _on_startup(self):
        await self.refresher.start()

    async def _on_shutdown(self):
        await self.refresher.stop()

    def _setup_property_routes(self):
        """Set up property read routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "properties",
                "message": "Read-through cache for Sanity property documents",
                "version": "1.0.0",
                "content_type": self.sanity_client.content_type,
            }

        @self.app.get("/properties", response_model=List[Property])
        async def list_properties():
            """Return every property in the current snapshot."""
            return self.store.read_all()

        @self.app.get(
            "/properties/{slug}",
            response_model=Property,
            responses={404: {"description": "Property not found", "content": {"text/plain": {}}}},
        )
        async def get_property(slug: str):
            """Return the property with the given slug."""
            try:
                return self.store.read_by_slug(slug)
            except PropertyNotFoundError as exc:
                return PlainTextResponse(exc.message, status_code=404)

    async def _check_dependencies(self) -> Dict[str, Any]:
        """Report snapshot freshness and the last refresh outcome."""
        snapshot = self.store.snapshot()
        last_result = self.refresher.last_result
        return {
            "snapshot": {
                "size": len(snapshot.properties),
                "generation": snapshot.generation,
                "refreshed_at": snapshot.refreshed_at.isoformat() if snapshot.refreshed_at else None,
            },
            "sanity": {
                "last_outcome": last_result.outcome.value if last_result else None,
                "last_error": last_result.error if last_result else None,
                "refresher_running": self.refresher.running,
            },
        }


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = PropertiesService(config or get_config("properties"))
    return service.app


def main() -> None:
    """Console entry point; exits with status 1 on missing configuration."""
    try:
        config = get_config("properties")
    except ConfigurationError as exc:
        configure_logging("properties")
        get_logger("properties.main").critical(
            "Invalid configuration, refusing to start",
            error=exc.message,
            details=exc.details,
        )
        sys.exit(1)

    service = PropertiesService(config)
    service.run()


if __name__ == "__main__":
    main()
