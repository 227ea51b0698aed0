"""LiteLLM-based embedding provider for served models (Ollama, OpenAI)."""

import logging
from typing import Any

import numpy as np
from litellm import embedding
from litellm.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    BadGatewayError,
    InternalServerError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
)

from mitey.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)


def _vector(item: Any) -> list[float]:
    if isinstance(item, dict):
        return item["embedding"]
    return item.embedding


class LiteLLMEmbedder:
    """Embedding provider that calls a model through LiteLLM.

    Model ids use LiteLLM's ``provider/model`` form, e.g.
    ``ollama/nomic-embed-text``.
    """

    def __init__(self, model_name: str, api_base: str | None = None):
        self._model_name = model_name
        self.api_base = api_base
        self._dimension: int | None = None

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def dimension(self) -> int:
        """Embedding width, discovered by embedding a probe string once."""
        if self._dimension is None:
            self._dimension = int(self.embed(["dimension probe"]).shape[1])
        return self._dimension

    def embed(self, texts: list[str]) -> np.ndarray:
        if not texts:
            return np.zeros((0, self._dimension or 0), dtype=np.float32)

        kwargs: dict[str, Any] = {"model": self._model_name, "input": texts}
        if self.api_base and self._model_name.startswith("ollama/"):
            kwargs["api_base"] = self.api_base

        try:
            response = embedding(**kwargs)
        except (APIConnectionError, BadGatewayError, ServiceUnavailableError, Timeout) as e:
            raise EmbeddingUnavailable(
                f"Cannot reach embedding model {self._model_name}: {e}"
            ) from e
        except (
            APIError,
            AuthenticationError,
            InternalServerError,
            NotFoundError,
            RateLimitError,
        ) as e:
            raise EmbeddingUnavailable(
                f"Embedding model {self._model_name} failed: {e}"
            ) from e

        vectors = np.asarray([_vector(item) for item in response.data], dtype=np.float32)
        self._dimension = int(vectors.shape[1])
        logger.debug(f"Embedded {len(texts)} texts with {self._model_name}")
        return vectors
