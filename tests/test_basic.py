"""
Basic application tests.

Validates that the FastAPI app starts correctly and the
health endpoints respond as expected.
"""

from sqlalchemy import create_engine

from app.interfaces.dependencies import get_engine
from app.shared.security.rate_limiting import limiter


class TestHealthEndpoint:
    """Tests for the health check endpoints."""

    def test_health_returns_200(self, api) -> None:
        """Health endpoint must return HTTP 200 with status ok."""
        response = api.get("/api/v1/health")
        assert response.status_code == 200

    def test_health_response_body(self, api) -> None:
        """Health endpoint must return status and version fields."""
        body = api.get("/api/v1/health").json()
        assert body["status"] == "ok"
        assert "version" in body

    def test_ready_when_database_answers(self, api) -> None:
        response = api.get("/api/v1/health/ready")
        assert response.status_code == 200

    def test_not_ready_when_database_is_down(self, api_app, api, tmp_path) -> None:
        broken = create_engine(f"sqlite:///{tmp_path}/missing/dir/db.sqlite")
        api_app.dependency_overrides[get_engine] = lambda: broken
        response = api.get("/api/v1/health/ready")
        assert response.status_code == 503


class TestSecurityHeaders:
    """Tests for security headers on responses."""

    def test_security_headers_present(self, api) -> None:
        """All security headers must be present on every response."""
        response = api.get("/api/v1/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Content-Security-Policy" in response.headers
        assert "Strict-Transport-Security" in response.headers

    def test_headers_on_error_responses(self, api) -> None:
        response = api.get("/api/v1/client/dashboard")
        assert response.status_code == 401
        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestRateLimiting:
    """Tests for rate limiting behavior."""

    def test_rate_limit_returns_429(self, api) -> None:
        """Exceeding the sign-in limit returns HTTP 429."""
        limiter.reset()
        limiter.enabled = True
        try:
            responses = [
                api.post(
                    "/api/v1/auth/sign-in",
                    json={"email": "ghost@example.com", "password": "whatever"},
                )
                for _ in range(11)
            ]
        finally:
            limiter.enabled = False
            limiter.reset()

        assert responses[0].status_code == 401
        assert responses[-1].status_code == 429
        assert responses[-1].json()["error"] == "Rate limit exceeded"
