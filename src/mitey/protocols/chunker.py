"""Protocol for text chunking strategies."""

from typing import Protocol, runtime_checkable

from mitey.models import Chunk


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Protocol for text chunking strategies."""

    def chunk(self, text: str, source: str) -> list[Chunk]:
        """Split text into chunks tagged with ``source``."""
        ...
