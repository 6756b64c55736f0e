"""
Global test fixtures for mongo_init.

This module provides shared fixtures for all tests including:
- Settings factory that ignores the local .env file
- Mock MongoDB (mongomock-motor)
- In-memory fake MongoDB server for commands mongomock does not implement
  (usersInfo/createUser and search index management)
"""

import sys
from pathlib import Path
from typing import Any, Optional

import pytest
import pytest_asyncio
from pymongo.errors import CollectionInvalid, OperationFailure

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def make_settings():
    """
    Build Settings with test defaults, overridable per test.

    Usage:
        def test_something(make_settings):
            settings = make_settings(readiness_timeout_seconds=0)
    """
    from mongo_init.config import Settings

    def _make(**overrides) -> Settings:
        values = {
            "mongodb_uri": "mongodb://test:27017",
            "mongodb_user": "admin",
            "mongodb_password": "SecurePassword123!",
            "mongodb_database": "langchain",
            "readiness_timeout_seconds": 1.0,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings):
    """Settings with test defaults."""
    return make_settings()


# =============================================================================
# MongoDB Fixtures (mongomock)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
        client = AsyncMongoMockClient()
        yield client
        client.close()
    except ImportError:
        pytest.skip("mongomock-motor not installed")


# =============================================================================
# Fake MongoDB server (users and search indexes)
# =============================================================================

class FakeCommandCursor:
    """Latent command cursor returned by list_search_indexes."""

    def __init__(self, docs: list[dict]):
        self._docs = docs

    async def to_list(self, length: Optional[int] = None) -> list[dict]:
        return list(self._docs)


class FakeCollection:
    def __init__(self, server: "FakeMongoServer", name: str):
        self.server = server
        self.name = name
        self.search_indexes: dict[str, dict] = {}

    def list_search_indexes(self, name: Optional[str] = None) -> FakeCommandCursor:
        self.server.check("listSearchIndexes")
        docs = [
            idx for idx_name, idx in self.search_indexes.items()
            if name is None or idx_name == name
        ]
        return FakeCommandCursor(docs)

    async def create_search_index(self, model) -> str:
        self.server.check("createSearchIndexes")
        document = model.document
        name = document["name"]
        if name in self.search_indexes:
            raise OperationFailure(f"Duplicate Index: {name}")
        self.search_indexes[name] = {
            "name": name,
            "type": document.get("type", "search"),
            "status": "READY",
            "queryable": True,
            "latestDefinition": document["definition"],
        }
        return name

    async def update_search_index(self, name: str, definition: dict) -> None:
        self.server.check("updateSearchIndex")
        if name not in self.search_indexes:
            raise OperationFailure(f"Search index {name} not found")
        self.search_indexes[name]["latestDefinition"] = definition


class FakeDatabase:
    def __init__(self, server: "FakeMongoServer", name: str):
        self.server = server
        self.name = name
        self.collection_names: list[str] = []
        self._collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(self.server, name)
        return self._collections[name]

    async def command(self, command: str, value: Any = 1, **kwargs) -> dict:
        self.server.check(command)
        if command == "ping":
            self.server.pinged.append(self.name)
            return {"ok": 1.0}
        if command == "usersInfo":
            users = [u for u in self.server.users if u["user"] == value and u["db"] == self.name]
            return {"users": users, "ok": 1.0}
        if command == "createUser":
            if any(u["user"] == value and u["db"] == self.name for u in self.server.users):
                raise OperationFailure(f"User \"{value}@{self.name}\" already exists")
            self.server.users.append({
                "user": value,
                "db": self.name,
                "pwd": kwargs["pwd"],
                "roles": kwargs["roles"],
            })
            return {"ok": 1.0}
        raise OperationFailure(f"no such command: '{command}'")

    async def list_collection_names(self) -> list[str]:
        self.server.check("listCollections")
        return list(self.collection_names)

    async def create_collection(self, name: str) -> FakeCollection:
        self.server.check("create")
        if name in self.collection_names:
            raise CollectionInvalid(f"collection {name} already exists")
        self.collection_names.append(name)
        return self[name]


class FakeMongoServer:
    """
    In-memory stand-in for a MongoDB deployment.

    Set ``failures[command_name] = exc`` to make that command raise.
    """

    def __init__(self):
        self.users: list[dict] = []
        self.pinged: list[str] = []
        self.failures: dict[str, Exception] = {}
        self.databases: dict[str, FakeDatabase] = {}

    def check(self, command: str) -> None:
        if command in self.failures:
            raise self.failures[command]


class FakeMongoClient:
    def __init__(self, server: Optional[FakeMongoServer] = None):
        self.server = server or FakeMongoServer()
        self.closed = False

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.server.databases:
            self.server.databases[name] = FakeDatabase(self.server, name)
        return self.server.databases[name]

    def close(self):
        self.closed = True


@pytest.fixture
def fake_mongo_client() -> FakeMongoClient:
    """Fresh fake MongoDB client with an empty server."""
    return FakeMongoClient()
