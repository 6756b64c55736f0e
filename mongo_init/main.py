#!/usr/bin/env python3
"""
MongoDB Init Job

Provisions MongoDB on container startup: administrator user, vectors
collection and vector search index. Safe to run on every start.

Usage:
    mongo-init
    python -m mongo_init

Environment Variables:
    MONGODB_URI: MongoDB connection string
    MONGODB_USER: Administrator username (required)
    MONGODB_PASSWORD: Administrator password (required)
    MONGODB_DATABASE: Database holding the vectors collection (required)
    READINESS_TIMEOUT_SECONDS: Max time to wait for MongoDB (default: 30)
    LOG_LEVEL: Logging level (default: INFO)
"""
import asyncio
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from mongo_init.config import Settings, get_settings
from mongo_init.database.connections import close_connections, get_mongo_client
from mongo_init.errors import ProvisionError
from mongo_init.provisioner import ProvisionResult, provision, provisioning_step

logger = logging.getLogger("mongo_init")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the job."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def main(settings: Optional[Settings] = None) -> ProvisionResult:
    """Connect, provision, and always close the connection."""
    settings = settings or get_settings()
    try:
        with provisioning_step("connection"):
            client = await get_mongo_client(settings)
    except ProvisionError as e:
        logger.error(f"Error during initialization: {e}")
        raise

    try:
        return await provision(client, settings)
    finally:
        await close_connections()


def run() -> None:
    """Console entry point. Exits with status 1 if provisioning fails."""
    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("MongoDB Init Job")
    logger.info(f"Target database: {settings.mongodb_database}")
    logger.info(f"Readiness timeout: {settings.readiness_timeout_seconds}s")
    logger.info("=" * 60)

    try:
        result = asyncio.run(main(settings))
    except ProvisionError:
        # Already logged by provision()
        sys.exit(1)

    logger.info(
        f"user_created={result.user_created} "
        f"collection_created={result.collection_created} "
        f"index_created={result.index_created} "
        f"index_updated={result.index_updated}"
    )


if __name__ == "__main__":
    run()
