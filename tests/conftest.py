"""Shared pytest fixtures.

The embedder and chat model here are deterministic stand-ins so tests never
download a model or talk to a server.
"""

import re
import zlib
from pathlib import Path

import numpy as np
import pytest

from mitey.config import Settings
from mitey.errors import EmbeddingUnavailable, ModelUnavailable

TOKEN_RE = re.compile(r"[a-z0-9]+")


class HashingEmbedder:
    """Bag-of-words vectors: each token bumps one hashed dimension."""

    def __init__(self, dimension: int = 256):
        self._dimension = dimension
        self.calls: list[list[str]] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return "test-hashing"

    def embed(self, texts: list[str]) -> np.ndarray:
        self.calls.append(list(texts))
        vectors = np.zeros((len(texts), self._dimension), dtype=np.float32)
        for row, text in enumerate(texts):
            for token in TOKEN_RE.findall(text.lower()):
                vectors[row, zlib.crc32(token.encode()) % self._dimension] += 1.0
        return vectors


class UnreachableEmbedder(HashingEmbedder):
    """Embedder whose backend is down."""

    def embed(self, texts: list[str]) -> np.ndarray:
        raise EmbeddingUnavailable("connection refused")


class ScriptedChatModel:
    """Chat model that records prompts and replies from a script."""

    def __init__(self, replies: list[str] | None = None):
        self.replies = list(replies or [])
        self.prompts: list[list[dict[str, str]]] = []

    async def complete(self, messages: list[dict[str, str]]) -> str:
        self.prompts.append([dict(m) for m in messages])
        if self.replies:
            return self.replies.pop(0)
        return f"reply {len(self.prompts)}"


class UnreachableChatModel:
    """Chat model whose backend is down."""

    async def complete(self, messages: list[dict[str, str]]) -> str:
        raise ModelUnavailable("connection refused")


@pytest.fixture
def embedder() -> HashingEmbedder:
    return HashingEmbedder()


@pytest.fixture
def chat_model() -> ScriptedChatModel:
    return ScriptedChatModel()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small source tree with code, docs and files that must be ignored."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "node_modules" / "lib").mkdir(parents=True)
    (root / ".git").mkdir()

    (root / "src" / "app.ts").write_text(
        "import { add } from './util';\n"
        "export function main() {\n"
        "  return add(1, 2);\n"
        "}\n"
    )
    (root / "src" / "util.ts").write_text(
        "export function add(a: number, b: number) {\n  return a + b;\n}\n"
    )
    (root / "docs" / "guide.md").write_text(
        "# Guide\n\nThe database layer stores users and sessions.\n"
    )
    (root / "README.md").write_text("# Project\n\nA tiny calculator app.\n")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")
    (root / "notes.txt").write_text("not indexed")
    (root / "node_modules" / "lib" / "index.js").write_text("module.exports = 1;\n")
    (root / ".git" / "config.md").write_text("hidden")
    return root


@pytest.fixture
def settings(project: Path, tmp_path: Path) -> Settings:
    return Settings(
        index_path=tmp_path / "index" / "local_index.mitey",
        source_root=project,
        project_root=project,
        chunk_size=200,
        chunk_overlap=20,
    )
