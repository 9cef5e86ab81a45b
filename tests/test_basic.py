"""
Basic application tests.

Validates that the FastAPI app starts correctly, the
health endpoint responds as expected and security headers are set.
"""

import logging

from fastapi.testclient import TestClient

from app.main import app
from app.shared.logging import configure_logging

client = TestClient(app)


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_returns_200(self) -> None:
        """Health endpoint must return HTTP 200 with status ok."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200

    def test_health_response_body(self) -> None:
        """Health endpoint must return status and version fields."""
        response = client.get("/api/v1/health")
        body = response.json()
        assert body["status"] == "ok"
        assert "version" in body

    def test_health_reports_storage_backend(self) -> None:
        """The test suite runs on the in-memory store."""
        body = client.get("/api/v1/health").json()
        assert body["storage"] == "memory"


class TestSecurityHeaders:
    """Tests for SecurityHeadersMiddleware."""

    def test_api_responses_are_hardened(self) -> None:
        response = client.get("/api/v1/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"
        assert "default-src 'none'" in response.headers["Content-Security-Policy"]

    def test_error_responses_are_hardened(self) -> None:
        response = client.get("/api/v1/does-not-exist")
        assert response.status_code == 404
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_docs_disabled_outside_debug(self) -> None:
        assert client.get("/docs").status_code == 404


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sql_statements_quiet_by_default(self) -> None:
        configure_logging(level="INFO")
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_sql_statements_logged_when_enabled(self) -> None:
        configure_logging(level="INFO", log_sql=True)
        try:
            assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        finally:
            configure_logging(level="INFO")

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO
