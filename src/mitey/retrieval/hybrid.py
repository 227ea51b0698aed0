"""Hybrid retrieval: whole-file inclusion or semantic chunk search."""

import asyncio
import logging
from pathlib import Path, PurePosixPath

from mitey.errors import SourceUnavailable
from mitey.models import RetrievedContext, unique_sources
from mitey.storage import VectorIndex

logger = logging.getLogger(__name__)

DEFAULT_K = 6
BLOCK_SEPARATOR = "\n---\n"
EMPTY_CONTEXT = "No relevant context found."


def format_block(source: str, text: str) -> str:
    return f"[File: {source}]\n{text}"


def find_mentioned_file(query: str, manifest: list[str]) -> str | None:
    """Return the first manifest entry whose file name appears in ``query``.

    Matching is a case-insensitive substring test on the base name. When
    several entries match, manifest order decides.
    """
    lowered = query.lower()
    for source in manifest:
        name = PurePosixPath(source).name.lower()
        if name and name in lowered:
            return source
    return None


class HybridRetriever:
    """Builds the context block for a question.

    A question that names an indexed file gets that file's current content
    from disk, in full. Anything else gets the ``k`` most similar chunks
    from the index.
    """

    def __init__(self, project_root: Path | str, k: int = DEFAULT_K):
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        self.project_root = Path(project_root)
        self.k = k

    async def retrieve(
        self, query: str, manifest: list[str], index: VectorIndex
    ) -> RetrievedContext:
        mentioned = find_mentioned_file(query, manifest)
        if mentioned is not None:
            logger.info(f"[CHAT] Including full file {mentioned}")
            content = await self._read_source(mentioned)
            return RetrievedContext(
                text=format_block(mentioned, content),
                mode="direct",
                sources=[mentioned],
            )

        results = await asyncio.to_thread(index.similarity_search, query, self.k)
        if not results:
            logger.info("[CHAT] No indexed content to search")
            return RetrievedContext(text=EMPTY_CONTEXT, mode="empty")

        chunks = [chunk for chunk, _ in results]
        logger.debug(
            "[CHAT] Semantic matches: "
            + ", ".join(f"{chunk.source} ({score:.3f})" for chunk, score in results)
        )
        return RetrievedContext(
            text=BLOCK_SEPARATOR.join(format_block(c.source, c.text) for c in chunks),
            mode="semantic",
            sources=unique_sources(chunks),
        )

    async def _read_source(self, source: str) -> str:
        path = self.project_root / source
        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise SourceUnavailable(source, e.strerror or str(e)) from e
        return raw.decode("utf-8", errors="replace")
