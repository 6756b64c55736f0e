"""
Database module - MongoDB connection and database definitions.
"""
from mongo_init.database.connections import (
    get_mongo_client,
    close_connections,
    wait_for_mongo,
)
from mongo_init.database.databases import vector_db

__all__ = [
    "get_mongo_client",
    "close_connections",
    "wait_for_mongo",
    "vector_db",
]
