"""
Tests for log scrubbing and request correlation headers.
"""

import pytest
from httpx import AsyncClient

from ticket_accounts.core.logging import redact_secrets


def test_redact_secrets_masks_credentials():
    event = redact_secrets(None, "info", {"event": "login_failed", "password": "hunter2", "token": "abc", "user_id": 3})
    assert event == {"event": "login_failed", "password": "***", "token": "***", "user_id": 3}


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Request-ID"]
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_request_id_is_propagated(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient):
    await client.post("/api/v1/auth/login", json={})
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "auth_attempts_total" in response.text
