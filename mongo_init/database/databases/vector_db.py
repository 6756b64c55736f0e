"""
Vector store database configuration.
Holds document embeddings for similarity search.

Structure:
- vectors: Documents with an ``embedding`` field (1536-dim)

The database name itself comes from MONGODB_DATABASE.
"""
from typing import Any


class Collections:
    """Collection names in the vector store database."""
    VECTORS = "vectors"


class VectorIndex:
    """Atlas Vector Search index on the vectors collection."""
    NAME = "vector_index"
    TYPE = "vectorSearch"
    FIELD = "embedding"
    NUM_DIMENSIONS = 1536
    SIMILARITY = "cosine"


def vector_index_definition() -> dict[str, Any]:
    """Search index definition for ``VectorIndex``."""
    return {
        "fields": [
            {
                "type": "vector",
                "path": VectorIndex.FIELD,
                "numDimensions": VectorIndex.NUM_DIMENSIONS,
                "similarity": VectorIndex.SIMILARITY,
            }
        ]
    }
