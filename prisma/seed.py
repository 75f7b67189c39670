"""
Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.

Database seed script for preview environments.

Seeds the catalog with a few sample resources. Safe to run multiple times:
resources whose name already exists are skipped.
"""

import asyncio

from resource_hub.repositories.prisma_repository import PrismaResourceRepository
from resource_hub.services import resource_service

SAMPLE_RESOURCES = [
    {
        "name": "Advanced React Patterns",
        "fullUrl": "https://www.udemy.com/course/advanced-react-patterns/",
        "tags": "React, Hooks, Patterns",
        "duration": "6h",
        "type": "Course",
        "category": "Frameworks",
        "topic": "Frontend",
        "manualLastUpdate": "01/2024",
    },
    {
        "name": "Tailwind CSS Best Practices",
        "fullUrl": "https://tailwindcss.com/docs/reusing-styles",
        "tags": "CSS, Tailwind",
        "duration": "30m",
        "type": "Documentation",
        "category": "Styling",
        "topic": "Frontend",
    },
    {
        "name": "Zod Schema Validation",
        "fullUrl": "https://zod.dev/",
        "tags": "TypeScript, Validation",
        "type": "Documentation",
        "category": "Libraries",
        "topic": "Validation",
        "manualLastUpdate": "03/2024",
    },
    {
        "name": "Lucide Icons Introduction",
        "fullUrl": "https://lucide.dev/guide/",
        "tags": "Icons, UI",
        "duration": "15m",
        "type": "Article",
        "category": "Libraries",
        "topic": "Design",
    },
]


async def main() -> None:
    """Seed the database with sample resources."""
    repository = PrismaResourceRepository()
    await repository.connect()

    try:
        existing = {record.data.get("name") for record in await repository.list_all()}
        for sample in SAMPLE_RESOURCES:
            if sample["name"] in existing:
                print(f"Skipping existing resource: {sample['name']}")
                continue
            resource = await resource_service.create_resource(repository, sample)
            print(f"Created resource: {resource.name} ({resource.id})")
    finally:
        await repository.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
