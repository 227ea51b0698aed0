"""In-memory vector index over embedded chunks."""

import logging
from datetime import datetime
from pathlib import Path

import numpy as np

from mitey.errors import EmbeddingUnavailable, IndexCorrupt
from mitey.models import Chunk, unique_sources
from mitey.protocols import EmbeddingProvider
from mitey.storage.store import IndexStore

logger = logging.getLogger(__name__)


class VectorIndex:
    """Embedding records with exact cosine-similarity search.

    Records are kept in insertion order; that order is the record id and
    breaks ties between equally similar records. The file manifest is
    derived from the same chunks the records were built from.
    """

    DEFAULT_BATCH_SIZE = 64

    def __init__(
        self,
        chunks: list[Chunk],
        vectors: np.ndarray,
        manifest: list[str],
        embedder: EmbeddingProvider,
        metadata: dict[str, str] | None = None,
        path: Path | None = None,
    ):
        if len(chunks) != len(vectors):
            raise ValueError(f"{len(chunks)} chunks but {len(vectors)} vectors")
        self._chunks = list(chunks)
        self._vectors = np.asarray(vectors, dtype=np.float32)
        self._norms = np.linalg.norm(self._vectors, axis=1) if len(self._chunks) else np.zeros(0)
        self.manifest = list(manifest)
        self.embedder = embedder
        self.metadata = dict(metadata or {})
        self.path = path

    @classmethod
    def build(
        cls,
        chunks: list[Chunk],
        embedder: EmbeddingProvider,
        batch_size: int = DEFAULT_BATCH_SIZE,
        source_root: str | None = None,
    ) -> "VectorIndex":
        """Embed every chunk and return the finished index.

        Raises:
            EmbeddingUnavailable: If the embedder fails; no index is returned.
        """
        texts = [c.text for c in chunks]
        batches: list[np.ndarray] = []
        for start in range(0, len(texts), batch_size):
            batch = texts[start : start + batch_size]
            vectors = np.asarray(embedder.embed(batch), dtype=np.float32)
            if vectors.ndim != 2 or len(vectors) != len(batch):
                raise EmbeddingUnavailable(
                    f"{embedder.model_name} returned {len(vectors)} vectors for {len(batch)} texts"
                )
            batches.append(vectors)
            logger.debug(f"Embedded {start + len(batch)}/{len(texts)} chunks")

        if batches:
            matrix = np.vstack(batches)
        else:
            matrix = np.zeros((0, 0), dtype=np.float32)

        metadata = {
            "embedding_model": embedder.model_name,
            "dimension": str(matrix.shape[1]),
            "created_at": datetime.now().isoformat(),
        }
        if source_root is not None:
            metadata["source_root"] = source_root

        return cls(
            chunks=chunks,
            vectors=matrix,
            manifest=unique_sources(chunks),
            embedder=embedder,
            metadata=metadata,
        )

    @classmethod
    def load(cls, path: Path | str, embedder: EmbeddingProvider) -> "VectorIndex":
        """Load a persisted index.

        Raises:
            IndexNotFound: If nothing exists at ``path``.
            IndexCorrupt: If the stored index is unreadable.
        """
        stored = IndexStore(path).read()
        stored_model = stored.metadata.get("embedding_model")
        if stored_model and stored_model != embedder.model_name:
            logger.warning(
                f"Index {path} was built with {stored_model}, querying with {embedder.model_name}"
            )
        return cls(
            chunks=stored.chunks,
            vectors=stored.vectors,
            manifest=stored.manifest,
            embedder=embedder,
            metadata=stored.metadata,
            path=Path(path),
        )

    def persist(self, path: Path | str) -> None:
        """Write the index to ``path``, replacing any previous index atomically."""
        IndexStore(path).write(self._chunks, self._vectors, self.manifest, self.metadata)
        self.path = Path(path)
        logger.debug(f"Persisted {len(self)} records to {path}")

    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def dimension(self) -> int:
        return int(self._vectors.shape[1]) if self._vectors.ndim == 2 else 0

    def similarity_search(self, query: str, k: int) -> list[tuple[Chunk, float]]:
        """Return the ``k`` records most similar to ``query``, best first.

        Scores are cosine similarities. Asking for more records than the
        index holds returns all of them.
        """
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        if not self._chunks:
            return []

        query_vector = np.asarray(self.embedder.embed([query]), dtype=np.float32)[0]
        if query_vector.shape[0] != self.dimension:
            raise IndexCorrupt(
                str(self.path or "<memory>"),
                f"query vector has {query_vector.shape[0]} dimensions, index has {self.dimension}",
            )

        scores = self._cosine_scores(query_vector)
        order = np.argsort(-scores, kind="stable")[:k]
        return [(self._chunks[i], float(scores[i])) for i in order]

    def _cosine_scores(self, query_vector: np.ndarray) -> np.ndarray:
        dots = self._vectors @ query_vector
        denom = self._norms * np.linalg.norm(query_vector)
        return np.divide(dots, denom, out=np.zeros_like(dots), where=denom > 0)
