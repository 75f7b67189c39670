"""
Prisma database client.

The generated client is created on first use, so importing this module does
not require `prisma generate` to have run.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger(__name__)

# Global database instance, shared by every repository that is not handed its own
_db: "Prisma | None" = None


def get_db() -> "Prisma":
    """Return the global client, creating it on first use."""
    global _db
    if _db is None:
        from prisma import Prisma

        _db = Prisma()
    return _db


async def connect_db(client: "Prisma") -> None:
    """Connect a client (startup)."""
    if not client.is_connected():
        await client.connect()
        logger.info("Database connected")


async def disconnect_db(client: "Prisma") -> None:
    """Disconnect a client (shutdown)."""
    if client.is_connected():
        await client.disconnect()
        logger.info("Database disconnected")


async def check_db_health(client: "Prisma") -> dict[str, Any]:
    """Run a trivial query to verify connectivity."""
    try:
        result = await client.query_raw("SELECT 1 as test")
        if result:
            return {"status": "healthy", "type": "postgresql"}
        return {"status": "unhealthy", "type": "postgresql", "error": "No response from database"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "type": "postgresql", "error": str(e)}
