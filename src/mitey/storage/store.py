"""SQLite-backed storage for Mitey indexes."""

import logging
import os
import sqlite3
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import numpy as np

from mitey.errors import IndexCorrupt, IndexNotFound
from mitey.models import Chunk
from mitey.storage.schema import FORMAT_VERSION, REQUIRED_TABLES, SCHEMA

logger = logging.getLogger(__name__)


@dataclass
class StoredIndex:
    """Everything read back from an index file."""

    chunks: list[Chunk]
    vectors: np.ndarray
    manifest: list[str]
    metadata: dict[str, str]


class IndexStore:
    """Reads and atomically writes an index file.

    A write goes to a temporary file next to the target and is moved into
    place with ``os.replace`` only once it is complete, so readers see
    either the previous index or the new one.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    @contextmanager
    def connection(self, path: Path, read_only: bool = False) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        if read_only:
            conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
        else:
            conn = sqlite3.connect(path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def write(
        self,
        chunks: list[Chunk],
        vectors: np.ndarray,
        manifest: list[str],
        metadata: dict[str, str],
    ) -> None:
        """Replace the index file with the given records."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        os.close(fd)
        tmp_path = Path(tmp_name)

        try:
            with self.connection(tmp_path) as conn:
                conn.executescript(SCHEMA)
                conn.executemany(
                    "INSERT INTO files (position, path) VALUES (?, ?)",
                    enumerate(manifest),
                )
                for record_id, (chunk, vector) in enumerate(zip(chunks, vectors), start=1):
                    conn.execute(
                        """INSERT INTO chunks (id, file_path, chunk_index, text, start_char, end_char)
                           VALUES (?, ?, ?, ?, ?, ?)""",
                        (
                            record_id,
                            chunk.source,
                            chunk.chunk_index,
                            chunk.text,
                            chunk.start_char,
                            chunk.end_char,
                        ),
                    )
                    conn.execute(
                        "INSERT INTO vectors (chunk_id, embedding) VALUES (?, ?)",
                        (record_id, vector.astype(np.float32).tobytes()),
                    )
                conn.executemany(
                    "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
                    [("format_version", FORMAT_VERSION), *metadata.items()],
                )
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.debug(f"Wrote {len(chunks)} records to {self.path}")

    def read(self) -> StoredIndex:
        """Load the whole index file.

        Raises:
            IndexNotFound: If nothing exists at the path.
            IndexCorrupt: If the file is not a readable index.
        """
        if not self.path.exists():
            raise IndexNotFound(str(self.path))
        if not self.path.is_file():
            raise IndexCorrupt(str(self.path), "not a file")

        try:
            with self.connection(self.path, read_only=True) as conn:
                return self._read(conn)
        except sqlite3.DatabaseError as e:
            raise IndexCorrupt(str(self.path), str(e)) from e

    def _read(self, conn: sqlite3.Connection) -> StoredIndex:
        tables = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        missing = REQUIRED_TABLES - tables
        if missing:
            raise IndexCorrupt(str(self.path), f"missing tables: {', '.join(sorted(missing))}")

        metadata = {
            row["key"]: row["value"] for row in conn.execute("SELECT key, value FROM metadata")
        }
        version = metadata.get("format_version")
        if version != FORMAT_VERSION:
            raise IndexCorrupt(str(self.path), f"unsupported format version {version!r}")

        try:
            dimension = int(metadata.get("dimension", ""))
        except ValueError as e:
            raise IndexCorrupt(str(self.path), "missing vector dimension") from e

        manifest = [row["path"] for row in conn.execute("SELECT path FROM files ORDER BY position")]

        chunks: list[Chunk] = []
        rows: list[np.ndarray] = []
        cursor = conn.execute(
            """SELECT c.id, c.file_path, c.chunk_index, c.text, c.start_char, c.end_char,
                      v.embedding
               FROM chunks c LEFT JOIN vectors v ON c.id = v.chunk_id
               ORDER BY c.id"""
        )
        for row in cursor:
            blob = row["embedding"]
            if blob is None or len(blob) != dimension * 4:
                raise IndexCorrupt(str(self.path), f"bad vector for record {row['id']}")
            rows.append(np.frombuffer(blob, dtype=np.float32))
            chunks.append(
                Chunk(
                    text=row["text"],
                    source=row["file_path"],
                    chunk_index=row["chunk_index"],
                    start_char=row["start_char"],
                    end_char=row["end_char"],
                )
            )

        if rows:
            vectors = np.vstack(rows)
        else:
            vectors = np.zeros((0, dimension), dtype=np.float32)

        return StoredIndex(chunks=chunks, vectors=vectors, manifest=manifest, metadata=metadata)
