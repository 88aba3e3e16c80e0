"""
Properties cache service package.

The service mirrors the Sanity "property" collection in memory and serves it
read-only over HTTP.

Structure:
- app.main: FastAPI app, routes, and refresher wiring.
- app.models: Pydantic models mirroring the CMS document shape.
- app.store: The in-memory snapshot shared by readers and the refresher.
- app.adapters: HTTP client for the Sanity query API.
- app.refresher: Background task that keeps the snapshot current.
"""
