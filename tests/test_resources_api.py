"""HTTP tests for the resource routes."""

import pytest
from httpx import AsyncClient

from resource_hub.dependencies import get_repository
from resource_hub.main import app
from resource_hub.repositories.memory_repository import InMemoryResourceRepository
from resource_hub.utils.exceptions import StoreUnavailableError

RESOURCE_PAYLOAD = {
    "name": "Advanced React Patterns",
    "fullUrl": "https://example.org/react-patterns",
    "tags": "React, Hooks",
    "duration": "6h",
    "type": "Course",
    "category": "Frameworks",
    "topic": "Frontend",
    "manualLastUpdate": "01/2024",
}


class BrokenRepository(InMemoryResourceRepository):
    """Repository where every store call fails."""

    async def add(self, data):
        raise StoreUnavailableError("add", detail="connection refused")

    async def query(self, store_query):
        raise StoreUnavailableError("query", detail="connection refused")

    async def list_all(self):
        raise StoreUnavailableError("list_all", detail="connection refused")


@pytest.fixture
async def broken_client(client: AsyncClient):
    app.dependency_overrides[get_repository] = lambda: BrokenRepository()
    yield client


@pytest.mark.asyncio
async def test_resource_lifecycle(client: AsyncClient):
    """
    Test the full lifecycle of a resource:
    1. Create
    2. Read (List & Get)
    3. Update
    4. Delete
    """
    # 1. Create
    response = await client.post("/api/v1/resources", json=RESOURCE_PAYLOAD)
    assert response.status_code == 201
    created = response.json()
    resource_id = created["id"]

    assert created["name"] == RESOURCE_PAYLOAD["name"]
    assert created["tags"] == ["React", "Hooks"]
    assert created["manualLastUpdate"] == "01/2024"
    assert created["manualLastUpdateMonth"] == 1
    assert created["manualLastUpdateYear"] == 2024
    assert created["updatedDate"]

    # 2. Read
    response = await client.get(f"/api/v1/resources/{resource_id}")
    assert response.status_code == 200
    assert response.json()["id"] == resource_id

    response = await client.get("/api/v1/resources")
    assert response.status_code == 200
    listing = response.json()
    assert listing["total"] == 1
    assert listing["items"][0]["id"] == resource_id

    # 3. Update
    response = await client.put(
        f"/api/v1/resources/{resource_id}",
        json={**RESOURCE_PAYLOAD, "name": "React Patterns Revisited", "tags": ["React"]},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "React Patterns Revisited"
    assert updated["tags"] == ["React"]
    assert updated["id"] == resource_id

    # 4. Delete
    response = await client.delete(f"/api/v1/resources/{resource_id}")
    assert response.status_code == 204

    response = await client.get(f"/api/v1/resources/{resource_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_with_invalid_payload_returns_field_errors(client: AsyncClient, repository):
    response = await client.post(
        "/api/v1/resources",
        json={**RESOURCE_PAYLOAD, "name": "ab", "fullUrl": "nope"},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"]["name"] == ["Name must be at least 3 characters long."]
    assert data["errors"]["fullUrl"] == ["Please enter a valid URL."]
    assert len(repository) == 0


@pytest.mark.asyncio
async def test_update_missing_resource_returns_404(client: AsyncClient):
    response = await client.put("/api/v1/resources/missing", json=RESOURCE_PAYLOAD)

    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "RESOURCE_NOT_FOUND"
    assert data["message"] == "Resource 'missing' not found"


@pytest.mark.asyncio
async def test_delete_missing_resource_returns_404(client: AsyncClient, catalog):
    response = await client.delete("/api/v1/resources/missing")

    assert response.status_code == 404
    assert response.json()["code"] == "RESOURCE_NOT_FOUND"
    assert len(catalog) == 4


@pytest.mark.asyncio
async def test_list_with_text_query(client: AsyncClient, catalog):
    response = await client.get("/api/v1/resources", params={"query": "react"})

    assert response.status_code == 200
    assert [item["name"] for item in response.json()["items"]] == ["Advanced React Patterns"]


@pytest.mark.asyncio
async def test_list_sorted_by_name(client: AsyncClient, catalog):
    response = await client.get("/api/v1/resources", params={"sortBy": "name_asc"})

    assert [item["name"] for item in response.json()["items"]] == [
        "Advanced React Patterns",
        "Lucide Icons Introduction",
        "Tailwind CSS Best Practices",
        "Zod Schema Validation",
    ]


@pytest.mark.asyncio
async def test_list_filtered_by_year_and_month(client: AsyncClient, catalog):
    response = await client.get(
        "/api/v1/resources", params={"filterYear": "2024", "filterMonth": "1", "type": "All"}
    )

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["items"]] == ["res-react"]


@pytest.mark.asyncio
async def test_list_filtered_by_type(client: AsyncClient, catalog):
    response = await client.get(
        "/api/v1/resources", params={"type": "Documentation", "sortBy": "name_asc"}
    )

    assert [item["id"] for item in response.json()["items"]] == ["res-tailwind", "res-zod"]


@pytest.mark.asyncio
async def test_list_rejects_unknown_sort(client: AsyncClient):
    response = await client.get("/api/v1/resources", params={"sortBy": "popularity"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_list_rejects_out_of_range_month(client: AsyncClient):
    response = await client.get("/api/v1/resources", params={"filterMonth": "13"})

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"] == {"filterMonth": ["Month must be between 1 and 12."]}


@pytest.mark.asyncio
async def test_filter_options(client: AsyncClient, catalog):
    response = await client.get("/api/v1/resources/filter-options")

    assert response.status_code == 200
    assert response.json() == {
        "categories": ["Frameworks", "Libraries", "Styling"],
        "topics": ["Design", "Frontend", "Validation"],
    }


@pytest.mark.asyncio
async def test_categories_and_topics_endpoints(client: AsyncClient, catalog):
    categories = await client.get("/api/v1/resources/categories")
    topics = await client.get("/api/v1/resources/topics")

    assert categories.json() == ["Frameworks", "Libraries", "Styling"]
    assert topics.json() == ["Design", "Frontend", "Validation"]


@pytest.mark.asyncio
async def test_list_survives_store_failure(broken_client: AsyncClient):
    response = await broken_client.get("/api/v1/resources")

    assert response.status_code == 200
    assert response.json() == {"items": [], "total": 0}


@pytest.mark.asyncio
async def test_filter_options_survive_store_failure(broken_client: AsyncClient):
    response = await broken_client.get("/api/v1/resources/filter-options")

    assert response.status_code == 200
    assert response.json() == {"categories": [], "topics": []}


@pytest.mark.asyncio
async def test_create_store_failure_hides_internal_detail(broken_client: AsyncClient):
    response = await broken_client.post("/api/v1/resources", json=RESOURCE_PAYLOAD)

    assert response.status_code == 503
    data = response.json()
    assert data["code"] == "STORE_UNAVAILABLE"
    assert "detail" not in data
    assert "connection refused" not in response.text


@pytest.mark.asyncio
async def test_get_missing_resource_returns_error_response(client: AsyncClient):
    response = await client.get("/api/v1/resources/missing")

    assert response.status_code == 404
    data = response.json()
    assert data == {
        "status_code": 404,
        "code": "RESOURCE_NOT_FOUND",
        "message": "Resource 'missing' not found",
    }
