"""Data models for Mitey."""

from mitey.models.conversation import RetrievedContext, Role, Turn
from mitey.models.document import Chunk, Document, ScanResult, unique_sources

__all__ = [
    "Document",
    "Chunk",
    "ScanResult",
    "unique_sources",
    "Turn",
    "Role",
    "RetrievedContext",
]
