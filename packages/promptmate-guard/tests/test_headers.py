"""Tests for the security headers middleware"""
from fastapi import FastAPI, Response
from fastapi.testclient import TestClient

from promptmate_guard.headers import SecurityHeadersMiddleware, DEFAULT_SECURITY_HEADERS


def _app(headers=None):
    app = FastAPI()
    app.middleware("http")(SecurityHeadersMiddleware(headers))

    @app.get("/")
    async def root():
        return {"ok": True}

    @app.get("/framed")
    async def framed():
        return Response("ok", headers={"X-Frame-Options": "DENY"})

    return app


class TestSecurityHeadersMiddleware:

    def test_default_headers_added(self):
        response = TestClient(_app()).get("/")

        assert response.status_code == 200
        for name, value in DEFAULT_SECURITY_HEADERS.items():
            assert response.headers[name] == value
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_added_to_not_found_responses(self):
        response = TestClient(_app()).get("/missing")

        assert response.status_code == 404
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"

    def test_route_header_is_kept(self):
        response = TestClient(_app()).get("/framed")

        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "no-referrer"

    def test_custom_headers(self):
        response = TestClient(_app({"X-Content-Type-Options": "nosniff"})).get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "Strict-Transport-Security" not in response.headers
