"""Database schema for persisted Mitey indexes."""

FORMAT_VERSION = "1"

SCHEMA = """
-- File manifest: one row per indexed file, in first-seen order
CREATE TABLE IF NOT EXISTS files (
    position INTEGER PRIMARY KEY,
    path TEXT NOT NULL UNIQUE
);

-- Chunks table: text and provenance of every embedding record
CREATE TABLE IF NOT EXISTS chunks (
    id INTEGER PRIMARY KEY,
    file_path TEXT NOT NULL,
    chunk_index INTEGER NOT NULL,
    text TEXT NOT NULL,
    start_char INTEGER NOT NULL,
    end_char INTEGER NOT NULL,
    FOREIGN KEY (file_path) REFERENCES files(path)
);

-- Vectors table: float32 embeddings
CREATE TABLE IF NOT EXISTS vectors (
    chunk_id INTEGER PRIMARY KEY,
    embedding BLOB NOT NULL,
    FOREIGN KEY (chunk_id) REFERENCES chunks(id)
);

-- Metadata table: format version, embedding model, build time
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);

CREATE INDEX IF NOT EXISTS idx_chunks_file ON chunks(file_path);
"""

REQUIRED_TABLES = frozenset({"files", "chunks", "vectors", "metadata"})
