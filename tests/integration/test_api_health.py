from fastapi.testclient import TestClient
from tests.support.relay_helpers import make_settings

from pr_relay.api.app import create_app


def test_health_endpoint() -> None:
    client = TestClient(create_app(make_settings()))
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "healthy"
    assert payload["service"] == "github-action-pr-trigger"
    assert payload["timestamp"]


def test_health_ignores_configuration_state() -> None:
    client = TestClient(create_app(make_settings(github_repo=None, github_token=None)))
    assert client.get("/health").status_code == 200


def test_security_headers_are_attached() -> None:
    client = TestClient(create_app(make_settings()))
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"


def test_unknown_route_returns_error_envelope() -> None:
    client = TestClient(create_app(make_settings()))
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"error": {"message": "Endpoint not found", "path": "/api/nope"}}
