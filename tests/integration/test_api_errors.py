from fastapi import FastAPI
from fastapi.testclient import TestClient
from tests.support.relay_helpers import make_settings

from pr_relay.api.app import create_app


def _app_with_failing_route(environment: str) -> FastAPI:
    app = create_app(make_settings(environment=environment))

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("kaboom")

    return app


def test_unhandled_error_hides_internals_in_production() -> None:
    client = TestClient(_app_with_failing_route("production"), raise_server_exceptions=False)

    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"error": {"message": "Internal server error"}}


def test_unhandled_error_includes_stack_in_development() -> None:
    client = TestClient(_app_with_failing_route("development"), raise_server_exceptions=False)

    response = client.get("/boom")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["message"] == "Internal server error"
    assert error["details"] == "kaboom"
    assert "RuntimeError" in error["stack"]


def test_wrong_method_is_treated_as_unknown_endpoint() -> None:
    client = TestClient(create_app(make_settings()))

    response = client.get("/api/trigger-pr-workflow")

    assert response.status_code == 404
    assert response.json() == {
        "error": {"message": "Endpoint not found", "path": "/api/trigger-pr-workflow"}
    }


def test_unhandled_error_keeps_security_and_cors_headers() -> None:
    client = TestClient(_app_with_failing_route("production"))

    response = client.get("/boom", headers={"Origin": "https://app.example"})

    assert response.status_code == 500
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["access-control-allow-origin"] == "*"
