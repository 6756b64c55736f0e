"""
MongoDB provisioning.
Brings a freshly started instance into a known-ready state on startup.

Every step checks before it acts, so running the job again is a no-op.
"""
import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pydantic import BaseModel, Field
from pymongo.errors import PyMongoError
from pymongo.operations import SearchIndexModel

from mongo_init.config import Settings
from mongo_init.database.connections import wait_for_mongo
from mongo_init.database.databases.vector_db import (
    Collections,
    VectorIndex,
    vector_index_definition,
)
from mongo_init.errors import ProvisionError

logger = logging.getLogger(__name__)


class ProvisionResult(BaseModel):
    """What a provisioning run created."""
    readiness_attempts: int = Field(0, description="Ping attempts before MongoDB answered")
    user_created: bool = Field(False, description="Administrator user was created")
    collection_created: bool = Field(False, description="Vectors collection was created")
    index_created: bool = Field(False, description="Vector search index was created")
    index_updated: bool = Field(False, description="Vector search index was redefined to match")


@contextmanager
def provisioning_step(step: str) -> Iterator[None]:
    """Wrap driver errors raised inside a step in ``ProvisionError``."""
    try:
        yield
    except PyMongoError as e:
        raise ProvisionError(step, e) from e


async def ensure_admin_user(
    admin_db: AsyncIOMotorDatabase,
    username: str,
    password: str,
    roles: list[str],
) -> bool:
    """Create the administrator user unless it already exists."""
    info = await admin_db.command("usersInfo", username)
    if info.get("users"):
        logger.debug(f"User '{username}' already exists")
        return False

    await admin_db.command("createUser", username, pwd=password, roles=roles)
    logger.info(f"Created administrator user '{username}'")
    return True


async def ensure_collection(db: AsyncIOMotorDatabase, name: str) -> bool:
    """Create collection ``name`` unless it already exists."""
    if name in await db.list_collection_names():
        logger.debug(f"Collection '{name}' already exists")
        return False

    await db.create_collection(name)
    logger.info(f"Created {name} collection")
    return True


async def ensure_vector_index(
    collection: AsyncIOMotorCollection,
    name: str = VectorIndex.NAME,
    definition: dict[str, Any] | None = None,
) -> Optional[str]:
    """
    Make the vector search index ``name`` match ``definition``.

    Returns:
        "created" for a new index, "updated" when an existing index had a
        different definition and was redefined, None when nothing changed
    """
    if definition is None:
        definition = vector_index_definition()

    existing = await collection.list_search_indexes(name).to_list(length=None)
    if existing:
        current = existing[0].get("latestDefinition")
        if current is not None and current.get("fields") == definition["fields"]:
            logger.debug(f"Search index '{name}' already exists")
            return None

        logger.warning(f"Search index '{name}' has definition {current}, updating")
        await collection.update_search_index(name, definition)
        logger.info("Updated vector search index")
        return "updated"

    model = SearchIndexModel(definition=definition, name=name, type=VectorIndex.TYPE)
    await collection.create_search_index(model)
    logger.info("Created vector search index")
    return "created"


async def provision(client: AsyncIOMotorClient, settings: Settings) -> ProvisionResult:
    """
    Provision MongoDB for the application.

    Steps, in order:
    - Wait for MongoDB to answer pings
    - Ensure the administrator user exists
    - Ensure the vectors collection exists in the target database
    - Ensure the vector search index exists on it with the configured definition

    The first failing step aborts the run. Its error is logged and re-raised.
    """
    logger.info("Starting MongoDB initialization...")
    result = ProvisionResult()

    try:
        if settings.startup_delay_seconds > 0:
            await asyncio.sleep(settings.startup_delay_seconds)

        result.readiness_attempts = await wait_for_mongo(
            client,
            db_name=settings.admin_db_name,
            timeout_seconds=settings.readiness_timeout_seconds,
            initial_backoff=settings.readiness_initial_backoff_seconds,
            max_backoff=settings.readiness_max_backoff_seconds,
        )

        with provisioning_step("admin_user"):
            result.user_created = await ensure_admin_user(
                client[settings.admin_db_name],
                settings.mongodb_user,
                settings.mongodb_password,
                settings.admin_roles,
            )

        db = client[settings.mongodb_database]

        with provisioning_step("collection"):
            result.collection_created = await ensure_collection(db, Collections.VECTORS)

        with provisioning_step("vector_index"):
            index_action = await ensure_vector_index(db[Collections.VECTORS])
            result.index_created = index_action == "created"
            result.index_updated = index_action == "updated"

    except Exception as e:
        logger.error(f"Error during initialization: {e}")
        raise

    logger.info("MongoDB initialization complete")
    return result
