# tests/test_infrastructure.py

"""
Infrastructure Tests - PocketBase client factory, health checks and logging setup
"""

import asyncio
import logging
from unittest.mock import patch

import httpx
import structlog

from project_eval.config import Settings
from project_eval.core.logging import configure_logging
from project_eval.routers import health
from project_eval.services.pocketbase import build_headers, get_pocketbase_client


class TestPocketBaseClient:

    def test_headers_without_token(self):
        headers = build_headers(Settings(POCKETBASE_TOKEN=None))
        assert "Authorization" not in headers

    def test_headers_with_token(self):
        headers = build_headers(Settings(POCKETBASE_TOKEN="admin-token"))
        assert headers["Authorization"] == "admin-token"

    def test_client_bound_to_settings(self):
        cfg = Settings(POCKETBASE_URL="http://pb.local:8090/", POCKETBASE_TIMEOUT_SECONDS=3)
        with get_pocketbase_client(cfg) as client:
            assert str(client.base_url).startswith("http://pb.local:8090")
            assert client.timeout.read == 3


class TestHealthChecks:

    def test_pocketbase_healthy(self, pocketbase_client):
        with patch.object(health, "get_pocketbase_client", return_value=pocketbase_client):
            result = asyncio.run(health.check_pocketbase())
        assert result.startswith("healthy")

    def test_pocketbase_unreachable(self, pocketbase_client, fake_pocketbase):
        fake_pocketbase.unavailable = True
        with patch.object(health, "get_pocketbase_client", return_value=pocketbase_client):
            result = asyncio.run(health.check_pocketbase())
        assert result.startswith("unhealthy")

    def test_health_degraded_returns_503(self, client, pocketbase_client, fake_pocketbase):
        fake_pocketbase.unavailable = True
        with patch.object(health, "get_pocketbase_client", return_value=pocketbase_client):
            response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["status"] == "degraded"


class TestLogging:

    def test_console_format(self):
        configure_logging(Settings(LOG_FORMAT="console", LOG_LEVEL="WARNING"))
        assert structlog.is_configured()

    def test_debug_forces_debug_level(self):
        with patch("project_eval.core.logging.logging.basicConfig") as basic_config:
            configure_logging(Settings(DEBUG=True, LOG_LEVEL="ERROR"))
        assert basic_config.call_args.kwargs["level"] == logging.DEBUG
