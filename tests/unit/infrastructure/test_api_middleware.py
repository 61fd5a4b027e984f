"""Tests for RateLimitMiddleware."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from episodarr.interfaces.api.middleware import RateLimitMiddleware


async def _hello(request: Request) -> JSONResponse:
    return JSONResponse({"msg": "ok"})


def _create_app(rpm: int = 5, window_seconds: float = 60.0) -> Starlette:
    app = Starlette(routes=[Route("/", _hello)])
    app.add_middleware(
        RateLimitMiddleware, requests_per_minute=rpm, window_seconds=window_seconds
    )
    return app


class TestRateLimitMiddleware:
    def test_allows_requests_under_limit(self) -> None:
        client = TestClient(_create_app(rpm=10))
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["X-RateLimit-Limit"] == "10"

    def test_blocks_requests_over_limit(self) -> None:
        client = TestClient(_create_app(rpm=3))
        for _ in range(3):
            assert client.get("/").status_code == 200

        resp = client.get("/")
        assert resp.status_code == 429
        assert int(resp.headers["Retry-After"]) >= 1
        assert "Too many requests" in resp.json()["error"]

    def test_unlimited_when_rpm_zero(self) -> None:
        client = TestClient(_create_app(rpm=0))
        for _ in range(20):
            assert client.get("/").status_code == 200

    def test_remaining_header_decreases(self) -> None:
        client = TestClient(_create_app(rpm=5))
        first = int(client.get("/").headers["X-RateLimit-Remaining"])
        second = int(client.get("/").headers["X-RateLimit-Remaining"])
        assert second == first - 1

    def test_expired_hits_are_forgotten(self) -> None:
        client = TestClient(_create_app(rpm=1, window_seconds=0.0))
        assert client.get("/").status_code == 200
        assert client.get("/").status_code == 200
