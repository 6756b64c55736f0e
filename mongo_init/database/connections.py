"""
MongoDB connection management and readiness polling.
"""
import asyncio
import logging
import time
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from mongo_init.config import Settings, get_settings
from mongo_init.errors import DatabaseNotReadyError

logger = logging.getLogger(__name__)

# Global connection instance
_mongo_client: Optional[AsyncIOMotorClient] = None


async def get_mongo_client(settings: Optional[Settings] = None) -> AsyncIOMotorClient:
    """Get or create MongoDB client."""
    global _mongo_client
    if _mongo_client is None:
        settings = settings or get_settings()
        _mongo_client = AsyncIOMotorClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        )
    return _mongo_client


async def close_connections():
    """Close the MongoDB connection."""
    global _mongo_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None


async def wait_for_mongo(
    client: AsyncIOMotorClient,
    timeout_seconds: float,
    db_name: str = "admin",
    initial_backoff: float = 0.5,
    max_backoff: float = 5.0,
) -> int:
    """
    Ping database ``db_name`` until it answers or ``timeout_seconds`` elapse.

    The wait between probes starts at ``initial_backoff`` and doubles up to
    ``max_backoff``; it is also clipped to the time left before the deadline.

    Returns:
        Number of ping attempts made, including the successful one

    Raises:
        DatabaseNotReadyError: if no ping succeeded before the deadline
    """
    deadline = time.monotonic() + timeout_seconds
    backoff = initial_backoff
    attempt = 0

    while True:
        attempt += 1
        try:
            await client[db_name].command("ping")
        except PyMongoError as e:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise DatabaseNotReadyError(attempt, e) from e

            delay = min(backoff, remaining)
            logger.info(f"MongoDB not ready (attempt {attempt}), retrying in {delay:.1f}s: {e}")
            await asyncio.sleep(delay)
            backoff = min(backoff * 2, max_backoff)
        else:
            logger.info(f"Connected to MongoDB after {attempt} attempt(s)")
            return attempt
