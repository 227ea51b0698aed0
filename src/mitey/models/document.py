"""Core data models for documents and chunks."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Document:
    """A source file read during a scan."""

    source: str  # path relative to the project root, POSIX separators
    text: str


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of a document's text."""

    text: str
    source: str
    chunk_index: int
    start_char: int
    end_char: int


def unique_sources(chunks: list[Chunk]) -> list[str]:
    """Return the distinct chunk sources in first-seen order."""
    seen: set[str] = set()
    sources: list[str] = []
    for chunk in chunks:
        if chunk.source in seen:
            continue
        seen.add(chunk.source)
        sources.append(chunk.source)
    return sources


@dataclass(frozen=True)
class ScanResult:
    """Chunks produced by one scan and the file manifest derived from them."""

    chunks: list[Chunk]
    manifest: list[str]
