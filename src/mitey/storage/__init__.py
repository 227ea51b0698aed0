"""Index storage and similarity search."""

from mitey.storage.store import IndexStore, StoredIndex
from mitey.storage.vector_index import VectorIndex

__all__ = ["IndexStore", "StoredIndex", "VectorIndex"]
