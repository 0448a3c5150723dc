"""Health and metrics endpoint tests."""

import pytest
from httpx import AsyncClient

from shortener.enums import HealthStatus
from shortener.store import MappingStore


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == HealthStatus.HEALTHY.value
    assert data["mappings"] == 0


@pytest.mark.asyncio
async def test_health_check_counts_mappings(client: AsyncClient, store: MappingStore) -> None:
    store.shorten("https://www.google.com")
    store.shorten("https://www.github.com")

    response = await client.get("/health")
    assert response.json()["mappings"] == 2


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient) -> None:
    await client.post("/shorten", data={"url": "example.com"})

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "url_shortener_creation_requests_total" in response.text
