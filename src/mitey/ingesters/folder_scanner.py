"""Scanner for local source folders."""

import asyncio
import logging
import os
from pathlib import Path

from mitey.config import Settings
from mitey.errors import ScanIOError
from mitey.models import Chunk, Document, ScanResult, unique_sources
from mitey.protocols import ChunkingStrategy

logger = logging.getLogger(__name__)


def _list_dir(directory: Path) -> list[os.DirEntry]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda entry: entry.name)


def _read_text(path: Path) -> str:
    return path.read_bytes().decode("utf-8", errors="replace")


class FolderScanner:
    """Walks a folder, reads allow-listed files and chunks them.

    Each directory is listed in a worker thread; its subdirectories are then
    walked concurrently (bounded by ``settings.scan_concurrency``) and joined
    before the level returns. Entries are sorted by name, so the resulting
    file order, and therefore the manifest, is reproducible.
    """

    def __init__(self, settings: Settings, chunker: ChunkingStrategy):
        self.settings = settings
        self.chunker = chunker
        self._extensions = {ext.lower() for ext in settings.extensions}
        self._ignore_dirs = set(settings.ignore_dirs)

    async def scan(self, root: Path | str) -> ScanResult:
        """Read and chunk every matching file under ``root``.

        Raises:
            ScanIOError: If the root, a directory or a matched file cannot be read.
        """
        root_path = Path(root)
        if not root_path.is_dir():
            raise ScanIOError(str(root_path), "not a directory")

        limiter = asyncio.Semaphore(self.settings.scan_concurrency)
        files = await self._walk(root_path, limiter)
        logger.debug(f"[SCAN] {len(files)} matching files under {root_path}")

        chunks: list[Chunk] = []
        for path in files:
            document = await self._read_document(path)
            file_chunks = self.chunker.chunk(document.text, document.source)
            logger.debug(f"  {document.source}: {len(file_chunks)} chunks")
            chunks.extend(file_chunks)

        return ScanResult(chunks=chunks, manifest=unique_sources(chunks))

    async def _walk(self, directory: Path, limiter: asyncio.Semaphore) -> list[Path]:
        async with limiter:
            try:
                entries = await asyncio.to_thread(_list_dir, directory)
            except OSError as e:
                raise ScanIOError(str(directory), e.strerror or str(e)) from e

        # Slots per entry keep files and subtrees in listing order
        slots: list[list[Path] | None] = []
        subdirs: list[tuple[int, Path]] = []
        for entry in entries:
            path = Path(entry.path)
            if self._should_skip(entry.name):
                if path.suffix.lower() in self._extensions:
                    logger.debug(f"[SCAN] Skipping hidden or ignored {path}")
                continue
            if entry.is_dir(follow_symlinks=False):
                subdirs.append((len(slots), path))
                slots.append(None)
            elif entry.is_file() and path.suffix.lower() in self._extensions:
                slots.append([path])

        results = await asyncio.gather(*(self._walk(path, limiter) for _, path in subdirs))
        for (slot, _), files in zip(subdirs, results):
            slots[slot] = files

        return [path for files in slots if files for path in files]

    async def _read_document(self, path: Path) -> Document:
        try:
            text = await asyncio.to_thread(_read_text, path)
        except OSError as e:
            raise ScanIOError(str(path), e.strerror or str(e)) from e
        return Document(source=self._source_for(path), text=text)

    def _source_for(self, path: Path) -> str:
        """Path relative to the project root; may climb out of it with `..`."""
        absolute = os.path.abspath(path)
        try:
            return Path(os.path.relpath(absolute, os.path.abspath(self.settings.project_root))).as_posix()
        except ValueError:
            # different drive on Windows
            return Path(absolute).as_posix()

    def _should_skip(self, name: str) -> bool:
        """Skip hidden entries and common build artifacts."""
        return name.startswith(".") or name in self._ignore_dirs
