from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from main import app
from skycast.models.request import RawResponse, RequestMode
from skycast.services.retry_coordinator import RETRY_NOTICE


@pytest.fixture
def client(orchestrator):
    """Test client with the orchestrator fixture installed on the app."""
    app.state.orchestrator = orchestrator
    yield TestClient(app)
    del app.state.orchestrator


class TestWeatherRoutes:
    """Test cases for the /api/v1/weather routes."""

    def test_get_weather_success(self, client, mock_weather_service, ok_response):
        mock_weather_service.fetch.return_value = ok_response

        response = client.get("/api/v1/weather/Banglore")

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"]["kind"] == "success"
        assert data["outcome"]["report"]["location_name"] == "Bangalore"
        assert data["state"]["recent_searches"] == ["Bangalore"]

    def test_get_weather_blank_query(self, client, mock_weather_service):
        response = client.get("/api/v1/weather/%20%20")

        assert response.status_code == 400
        mock_weather_service.fetch.assert_not_called()

    def test_get_weather_invalid_credential(self, client, mock_weather_service):
        mock_weather_service.fetch.return_value = RawResponse(status_code=401, body=None)

        response = client.get("/api/v1/weather/paris")

        assert response.status_code == 401
        data = response.json()
        assert data["outcome"]["category"] == "auth"
        assert data["state"]["error"].startswith("DENIED (401)")

    def test_get_weather_tier_downgrade(self, client, mock_weather_service, tier_error_payload):
        mock_weather_service.fetch.return_value = RawResponse(status_code=200, body=tier_error_payload)

        response = client.get("/api/v1/weather/paris")

        assert response.status_code == 202
        data = response.json()
        assert data["outcome"]["kind"] == "recoverable"
        assert data["state"]["notice"] == RETRY_NOTICE
        assert data["state"]["retry_pending"] is True

    def test_get_weather_upstream_failure(self, client, mock_weather_service):
        mock_weather_service.fetch.return_value = RawResponse(status_code=400, body=None)

        response = client.get("/api/v1/weather/paris")

        assert response.status_code == 502
        assert response.json()["state"]["error"].startswith("MALFORMED (400)")

    def test_get_state(self, client):
        response = client.get("/api/v1/weather/state")

        assert response.status_code == 200
        data = response.json()
        assert data["report"] is None
        assert data["auto_refresh"] is False
        assert data["recent_searches"] == []

    def test_get_recent(self, client, mock_weather_service, ok_response):
        mock_weather_service.fetch.return_value = ok_response
        client.get("/api/v1/weather/bangalore")

        response = client.get("/api/v1/weather/recent")

        assert response.status_code == 200
        assert response.json() == {"recent_searches": ["Bangalore"], "count": 1}

    def test_refresh_without_report(self, client):
        response = client.post("/api/v1/weather/refresh")

        assert response.status_code == 404

    def test_refresh_with_report(self, client, mock_weather_service, ok_response):
        mock_weather_service.fetch.return_value = ok_response
        client.get("/api/v1/weather/bangalore")

        response = client.post("/api/v1/weather/refresh")

        assert response.status_code == 200
        assert mock_weather_service.fetch.call_count == 2

    def test_current_location(self, client, mock_weather_service, ok_response):
        mock_weather_service.fetch.return_value = ok_response

        response = client.post("/api/v1/weather/location")

        assert response.status_code == 200
        assert mock_weather_service.fetch.call_args[0][0].params["query"] == "12.97,77.59"

    def test_orchestrator_not_running(self):
        response = TestClient(app).get("/api/v1/weather/state")

        assert response.status_code == 503

    def test_token_required_when_configured(self, client):
        mock_config = MagicMock()
        mock_config.api_token = "secret"

        with patch("skycast.api.auth.config", mock_config):
            assert client.get("/api/v1/weather/state").status_code == 401
            assert client.get(
                "/api/v1/weather/state", headers={"Authorization": "Bearer wrong"}
            ).status_code == 401
            assert client.get(
                "/api/v1/weather/state", headers={"Authorization": "Bearer secret"}
            ).status_code == 200


class TestSettingsRoutes:
    """Test cases for the /api/v1/settings routes."""

    def test_update_credential(self, client, orchestrator, memory_store):
        orchestrator.state.error = "DENIED (401): API key is invalid/expired."

        response = client.put("/api/v1/settings/credential", json={"access_key": "  fresh-key "})

        assert response.status_code == 200
        assert memory_store.get("skycast_api_key") == "fresh-key"
        assert orchestrator.get_state().error is None

    @pytest.mark.parametrize("payload, status_code", [({"access_key": ""}, 422), ({"access_key": "   "}, 400)])
    def test_update_credential_rejects_empty(self, client, payload, status_code):
        response = client.put("/api/v1/settings/credential", json=payload)

        assert response.status_code == status_code

    def test_update_historical(self, client, orchestrator):
        response = client.put(
            "/api/v1/settings/historical", json={"enabled": True, "historical_date": "2024-04-01"}
        )

        assert response.status_code == 200
        assert response.json() == {"use_historical": True, "historical_date": "2024-04-01"}

    def test_update_auto_refresh(self, client, fake_scheduler):
        response = client.put("/api/v1/settings/auto-refresh", json={"enabled": True})

        assert response.status_code == 200
        assert response.json() == {"auto_refresh": True, "active": False}
        assert not fake_scheduler.jobs


class TestHealthRoute:
    def test_health(self):
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "SkyCast API is running"
        assert data["scheduler_running"] is False
        assert data["scheduled_jobs"] == {}


class TestErrorHandling:
    def test_storage_failure_is_500(self, client, orchestrator):
        from skycast.exceptions.storage import StorageError

        def fail(key, value):
            raise StorageError("read-only file system")

        orchestrator.credentials.store.set = fail

        response = client.put("/api/v1/settings/credential", json={"access_key": "fresh-key"})

        assert response.status_code == 500
        assert response.json()["error"] == "read-only file system"


class TestWeatherQueryRoutes:
    def test_historical_date_parameter(self, client, orchestrator, mock_weather_service, historical_payload):
        mock_weather_service.fetch.return_value = RawResponse(status_code=200, body=historical_payload)

        response = client.get("/api/v1/weather/paris", params={"historical_date": "2024-04-01"})

        assert response.status_code == 200
        sent = mock_weather_service.fetch.call_args[0][0]
        assert sent.mode == RequestMode.HISTORICAL
        assert sent.url == "http://api.weatherstack.com/historical"
        assert sent.params["historical_date"] == "2024-04-01"
        assert sent.params["hourly"] == 1
        assert sent.params["interval"] == 3
        assert response.json()["outcome"]["report"]["historical_date"] == "2024-04-01"
        assert orchestrator.get_state().use_historical is False

    def test_invalid_historical_date(self, client, mock_weather_service):
        response = client.get("/api/v1/weather/paris", params={"historical_date": "yesterday"})

        assert response.status_code == 422
        mock_weather_service.fetch.assert_not_called()

    def test_query_parameter_reaches_reserved_names(self, client, mock_weather_service, ok_response):
        mock_weather_service.fetch.return_value = ok_response

        response = client.get("/api/v1/weather", params={"query": "State"})

        assert response.status_code == 200
        assert mock_weather_service.fetch.call_args[0][0].params["query"] == "state"

    def test_query_parameter_with_historical_date(self, client, mock_weather_service, historical_payload):
        mock_weather_service.fetch.return_value = RawResponse(status_code=200, body=historical_payload)

        response = client.get("/api/v1/weather", params={"query": "recent", "historical_date": "2024-04-01"})

        assert response.status_code == 200
        sent = mock_weather_service.fetch.call_args[0][0]
        assert sent.mode == RequestMode.HISTORICAL
        assert sent.params["query"] == "recent"

    def test_query_parameter_required(self, client):
        assert client.get("/api/v1/weather").status_code == 422
