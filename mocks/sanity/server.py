"""
Mock Sanity query API serving a small property dataset.
"""

import copy
import re
import time
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from shared.logging import get_logger


TYPE_FILTER = re.compile(r'^\*\[_type\s*==\s*"(?P<type>[^"]+)"\]$')


def sample_documents() -> List[Dict[str, Any]]:
    """Sample property documents in the shape Sanity returns them."""
    return [
        {
            "_id": "prop-garden-heights",
            "_type": "property",
            "_rev": "v1",
            "title": "Garden Heights",
            "slug": {"_type": "slug", "current": "garden-heights"},
            "developer": {"_ref": "dev-greenline", "_type": "reference"},
            "description": "Low-rise apartments around a shared courtyard garden.",
            "mapUrl": "https://maps.example.com/garden-heights",
            "geoLocation": {"_type": "geopoint", "lat": 6.5244, "lng": 3.3792},
            "minPrice": 120000,
            "maxPrice": 340000.5,
            "facilities": [
                {
                    "facilityType": {"_ref": "facility-pool", "_type": "reference"},
                    "facilityName": "Pool",
                    "description": "Heated outdoor pool",
                    "photos": [
                        {
                            "_key": "a1",
                            "_type": "image",
                            "asset": {"_ref": "image-pool-1200x800-jpg", "_type": "reference"},
                        }
                    ],
                }
            ],
            "photos": [
                {
                    "_key": "p1",
                    "_type": "image",
                    "asset": {"_ref": "image-front-1600x900-jpg", "_type": "reference"},
                }
            ],
            "built": 2019,
            "createdAt": "2024-03-01T09:30:00Z",
        },
        {
            "_id": "prop-harbour-view",
            "_type": "property",
            "title": "Harbour View",
            "slug": {"_type": "slug", "current": "harbour-view"},
            "developer": {"_ref": "dev-bluewater", "_type": "reference"},
            "description": "Waterfront towers with marina access.",
            "mapUrl": "https://maps.example.com/harbour-view",
            "geoLocation": {"_type": "geopoint", "lat": 6.4281, "lng": 3.4219},
            "minPrice": 450000,
            "maxPrice": 1200000,
            "facilities": [],
            "photos": [],
            "built": 2022,
            "createdAt": "2024-05-12T14:00:00Z",
        },
    ]


class MockSanityServer:
    """Mock Sanity query endpoint."""

    def __init__(self, documents: Optional[List[Dict[str, Any]]] = None, port: int = 8090):
        self.port = port
        self.logger = get_logger("mock.sanity")
        self.app = FastAPI(title="Mock Sanity", version="1.0.0")

        self.documents: List[Dict[str, Any]] = documents if documents is not None else sample_documents()
        # When set, every query answers with this status and a text body.
        self.fail_with_status: Optional[int] = None
        self.request_count = 0

        self._setup_routes()

    def _setup_routes(self):
        """Set up mock Sanity routes."""

        @self.app.get("/v1/data/query/{dataset}")
        async def run_query(dataset: str, query: str = Query(...)):
            """Evaluate a type-filter GROQ query against the in-memory documents."""
            self.request_count += 1
            start = time.perf_counter()

            if self.fail_with_status is not None:
                return PlainTextResponse("mock failure", status_code=self.fail_with_status)

            match = TYPE_FILTER.match(query.strip())
            if not match:
                self.logger.warning("Unsupported query", query=query, dataset=dataset)
                return JSONResponse(
                    status_code=400,
                    content={"error": {"description": "Unsupported query", "type": "queryParseError"}},
                )

            doc_type = match.group("type")
            result = [
                copy.deepcopy(document)
                for document in self.documents
                if document.get("_type") == doc_type
            ]
            return {
                "ms": int((time.perf_counter() - start) * 1000),
                "query": query,
                "result": result,
            }


def create_app():
    """Create mock Sanity application."""
    server = MockSanityServer()
    return server.app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8090)
