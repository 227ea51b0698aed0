"""Context retrieval for questions."""

from mitey.retrieval.hybrid import (
    BLOCK_SEPARATOR,
    DEFAULT_K,
    EMPTY_CONTEXT,
    HybridRetriever,
    find_mentioned_file,
    format_block,
)

__all__ = [
    "HybridRetriever",
    "find_mentioned_file",
    "format_block",
    "BLOCK_SEPARATOR",
    "DEFAULT_K",
    "EMPTY_CONTEXT",
]
