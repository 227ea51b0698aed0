"""Indexing pass: scan, chunk, embed, persist."""

import asyncio
import logging
from pathlib import Path

from mitey.chunkers import SlidingWindowChunker
from mitey.config import Settings
from mitey.ingesters import FolderScanner
from mitey.models import ScanResult
from mitey.protocols import ChunkingStrategy, EmbeddingProvider
from mitey.storage import VectorIndex

logger = logging.getLogger(__name__)


async def index_directory(
    settings: Settings,
    embedder: EmbeddingProvider,
    source: Path | str | None = None,
    chunker: ChunkingStrategy | None = None,
) -> ScanResult:
    """Rebuild the index for ``source`` (default ``settings.source_root``).

    The index is rebuilt from scratch and only replaces the previous one once
    every chunk has been embedded and written.

    Returns:
        The scan result; its manifest is the one stored with the index.
    """
    root = Path(source) if source is not None else settings.source_root
    chunker = chunker or SlidingWindowChunker(settings.chunk_size, settings.chunk_overlap)

    logger.info(f"[SCAN] Initializing index for: {root}...")
    result = await FolderScanner(settings, chunker).scan(root)

    index = await asyncio.to_thread(
        VectorIndex.build, result.chunks, embedder, source_root=str(root)
    )
    await asyncio.to_thread(index.persist, settings.index_path)

    logger.info(
        f"[SCAN] Success. Indexed {len(result.manifest)} files "
        f"({len(result.chunks)} chunks) -> {settings.index_path}"
    )
    return result
