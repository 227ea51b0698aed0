"""SentenceTransformer-based embedding provider."""

import logging

import numpy as np
from sentence_transformers import SentenceTransformer

from mitey.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Embedding provider using sentence-transformers library.

    Uses all-MiniLM-L6-v2 by default - a fast, lightweight model
    that produces good quality embeddings for semantic search.
    """

    DEFAULT_MODEL = "all-MiniLM-L6-v2"

    def __init__(self, model_name: str | None = None):
        self._model_name = model_name or self.DEFAULT_MODEL
        self._model: SentenceTransformer | None = None

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the model on first access."""
        if self._model is None:
            logger.info(f"Loading embedding model {self._model_name}...")
            try:
                self._model = SentenceTransformer(self._model_name)
            except (OSError, ValueError) as e:
                raise EmbeddingUnavailable(
                    f"Cannot load embedding model {self._model_name}: {e}"
                ) from e
        return self._model

    @property
    def dimension(self) -> int:
        return self.model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        return self._model_name

    def embed(self, texts: list[str]) -> np.ndarray:
        """Generate embeddings for a batch of texts.

        Args:
            texts: List of text strings to embed

        Returns:
            numpy array of shape (len(texts), embedding_dim)
        """
        if not texts:
            return np.zeros((0, self.dimension), dtype=np.float32)

        try:
            embeddings = self.model.encode(
                texts,
                convert_to_numpy=True,
                normalize_embeddings=True,  # For cosine similarity
            )
        except RuntimeError as e:
            raise EmbeddingUnavailable(f"Embedding failed: {e}") from e
        return embeddings
