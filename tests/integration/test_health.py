"""Integration tests for health endpoints."""

import pytest
from fastapi import status


@pytest.mark.asyncio
async def test_health(client):
    """Test: /health reports ok and the configured environment."""
    response = await client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok", "env": "dev"}


@pytest.mark.asyncio
async def test_db_check(client):
    """Test: /db-check reaches the database."""
    response = await client.get("/db-check")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"db": "ok"}


@pytest.mark.asyncio
async def test_root(client):
    """Test: Root endpoint identifies the API."""
    response = await client.get("/")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["message"] == "Waitlist Backend API"
