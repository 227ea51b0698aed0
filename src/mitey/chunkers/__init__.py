"""Text chunking strategies."""

from mitey.chunkers.window_chunker import SlidingWindowChunker

__all__ = ["SlidingWindowChunker"]
