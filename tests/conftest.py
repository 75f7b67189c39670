from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from resource_hub.dependencies import get_repository
from resource_hub.main import app
from resource_hub.repositories.memory_repository import InMemoryResourceRepository


def stored_record(**overrides) -> dict:
    """A well-formed stored record; override fields to make it malformed."""
    record = {
        "name": "Advanced React Patterns",
        "relativeUrl": None,
        "fullUrl": "https://example.org/react-patterns",
        "tags": ["React", "Hooks"],
        "duration": "6h",
        "type": "Course",
        "category": "Frameworks",
        "topic": "Frontend",
        "updatedDate": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        "manualLastUpdateString": None,
        "manualLastUpdateMonth": None,
        "manualLastUpdateYear": None,
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_record():
    """Factory for stored records."""
    return stored_record


@pytest.fixture
def repository() -> InMemoryResourceRepository:
    """Empty in-memory repository."""
    return InMemoryResourceRepository()


@pytest.fixture
def catalog(repository: InMemoryResourceRepository) -> InMemoryResourceRepository:
    """Repository holding a small catalog with fixed ids and dates."""
    repository.insert_raw(
        stored_record(
            manualLastUpdateString="01/2024",
            manualLastUpdateMonth=1,
            manualLastUpdateYear=2024,
        ),
        record_id="res-react",
    )
    repository.insert_raw(
        stored_record(
            name="Tailwind CSS Best Practices",
            tags=["CSS", "Tailwind"],
            type="Documentation",
            category="Styling",
            topic="Frontend",
            updatedDate=datetime(2024, 6, 1, tzinfo=timezone.utc),
            manualLastUpdateString="02/2024",
            manualLastUpdateMonth=2,
            manualLastUpdateYear=2024,
        ),
        record_id="res-tailwind",
    )
    repository.insert_raw(
        stored_record(
            name="Zod Schema Validation",
            tags=["TypeScript"],
            type="Documentation",
            category="Libraries",
            topic="Validation",
            updatedDate=datetime(2023, 1, 1, tzinfo=timezone.utc),
            manualLastUpdateString="01/2023",
            manualLastUpdateMonth=1,
            manualLastUpdateYear=2023,
        ),
        record_id="res-zod",
    )
    repository.insert_raw(
        stored_record(
            name="Lucide Icons Introduction",
            tags=["Icons"],
            type="Article",
            category="Libraries",
            topic="Design",
            updatedDate=datetime(2024, 3, 1, tzinfo=timezone.utc),
        ),
        record_id="res-lucide",
    )
    return repository


@pytest.fixture
async def client(repository: InMemoryResourceRepository) -> AsyncGenerator[AsyncClient, None]:
    """Async client wired to the test repository, without running the app lifespan."""
    app.dependency_overrides[get_repository] = lambda: repository

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
