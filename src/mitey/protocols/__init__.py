"""Protocol definitions for extensible components."""

from mitey.protocols.chat import ChatModel
from mitey.protocols.chunker import ChunkingStrategy
from mitey.protocols.embedder import EmbeddingProvider

__all__ = ["ChatModel", "EmbeddingProvider", "ChunkingStrategy"]
