"""
Unit tests for the properties HTTP service.
"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient

from service_properties.app.main import PropertiesService, create_app, main
from service_properties.app.models import Property
from service_properties.app.store import SnapshotStore
from shared.config import get_config
from shared.test_helpers import TestDataFactory


API_URL = "http://sanity.test/v1/data/query/production?query="


@pytest.fixture
def config():
    """Service configuration that ignores any local .env file."""
    return get_config("properties", sanity_api_url=API_URL, _env_file=None)


@pytest.fixture
def store():
    return SnapshotStore()


@pytest.fixture
def service(config, store):
    """Create PropertiesService with an injected store."""
    return PropertiesService(config, store=store)


@pytest.fixture
def client(service):
    """Create test client; startup hooks (and so the refresher) do not run."""
    return TestClient(service.app)


def load(store, *slugs):
    store.replace(
        Property.model_validate(doc)
        for doc in TestDataFactory.create_property_documents(list(slugs))
    )


class TestPropertiesService:
    """Test cases for PropertiesService."""

    def test_service_initialization(self, service, store):
        """Components are wired to the injected store."""
        assert service.service_name == "properties"
        assert service.port == 8000
        assert service.store is store
        assert service.refresher.store is store
        assert service.refresher.interval_seconds == 3600
        assert service.sanity_client.api_base_url == API_URL
        assert service.app.state.properties_service is service

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "properties"
        assert data["content_type"] == "property"

    def test_list_empty_snapshot(self, client):
        """An empty snapshot lists as an empty array."""
        response = client.get("/properties")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == []

    def test_list_properties(self, client, store):
        """Every property is listed in snapshot order with CMS field names."""
        load(store, "garden-heights", "harbour-view")

        response = client.get("/properties")

        assert response.status_code == 200
        data = response.json()
        assert [item["slug"]["current"] for item in data] == ["garden-heights", "harbour-view"]
        assert data[0]["_id"] == "prop-garden-heights"
        assert data[0]["mapUrl"] == "https://maps.example.com/garden-heights"

    def test_get_property_by_slug(self, client, store):
        """An existing slug returns the full property."""
        load(store, "harbour-view", "garden-heights")

        response = client.get("/properties/garden-heights")

        assert response.status_code == 200
        expected = store.read_by_slug("garden-heights").model_dump(mode="json", by_alias=True)
        assert response.json() == expected

    def test_get_property_not_found(self, client, store):
        """A missing slug returns a plain-text 404."""
        load(store, "garden-heights")

        response = client.get("/properties/does-not-exist")

        assert response.status_code == 404
        assert response.text == "Property not found"
        assert response.headers["content-type"].startswith("text/plain")

    def test_reads_follow_replace(self, client, store):
        """Requests see the latest snapshot after a replace."""
        load(store, "a")
        assert len(client.get("/properties").json()) == 1

        load(store, "b", "c")
        assert [item["slug"]["current"] for item in client.get("/properties").json()] == ["b", "c"]
        assert client.get("/properties/a").status_code == 404

    def test_cors_preflight(self, client):
        """Any origin may call the API with the allowed headers."""
        response = client.options(
            "/properties",
            headers={
                "Origin": "https://frontend.example.com",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "X-API-Key",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        for method in ("GET", "POST", "PUT", "DELETE", "OPTIONS"):
            assert method in response.headers["access-control-allow-methods"]

    def test_cors_simple_request(self, client):
        """Simple requests carry the allow-origin header."""
        response = client.get("/properties", headers={"Origin": "https://frontend.example.com"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_write_methods_not_allowed(self, client):
        """There is no write path."""
        assert client.post("/properties", json={}).status_code == 405
        assert client.delete("/properties/garden-heights").status_code == 405

    def test_request_id_header(self, client):
        """The request ID is echoed back."""
        response = client.get("/properties", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_health_endpoint(self, client, store):
        """Health reports snapshot state."""
        load(store, "a", "b")

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "properties"
        assert data["status"] == "ok"
        assert data["dependencies"]["snapshot"]["size"] == 2
        assert data["dependencies"]["snapshot"]["generation"] == 1
        assert data["dependencies"]["sanity"]["last_outcome"] is None

    def test_metrics_endpoint(self, client):
        """Prometheus metrics are exposed."""
        client.get("/properties")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text
        assert "property_snapshot_size" in response.text

    def test_startup_runs_refresher(self, config, store):
        """Application startup loads the snapshot; shutdown stops the refresher."""
        service = PropertiesService(config, store=store)
        service.sanity_client.fetch_documents = AsyncMock(
            return_value=TestDataFactory.create_property_documents(["garden-heights"])
        )

        with TestClient(service.app) as client:
            for _ in range(100):
                if len(store):
                    break
                client.get("/health")
            response = client.get("/properties/garden-heights")
            assert response.status_code == 200

        assert service.refresher.running is False

    def test_create_app(self, config):
        """create_app builds an application from configuration."""
        app = create_app(config)
        assert isinstance(app.state.properties_service, PropertiesService)


class TestMain:
    """Process entry point."""

    def test_missing_api_url_exits_before_serving(self, monkeypatch, tmp_path):
        """Without SANITY_API_URL the process exits and never binds."""
        monkeypatch.delenv("SANITY_API_URL", raising=False)
        monkeypatch.chdir(tmp_path)

        with patch("shared.base_service.uvicorn.run") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_main_runs_server(self, monkeypatch, tmp_path):
        """With configuration present the server starts on PORT."""
        monkeypatch.setenv("SANITY_API_URL", API_URL)
        monkeypatch.setenv("PORT", "9123")
        monkeypatch.chdir(tmp_path)

        with patch("shared.base_service.uvicorn.run") as mock_run:
            main()

        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == 9123
