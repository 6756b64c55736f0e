"""
Database definitions and collection constants.
"""
from mongo_init.database.databases import vector_db

__all__ = ["vector_db"]
