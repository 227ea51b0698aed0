"""Embedding providers for vector generation."""

from mitey.config import Settings
from mitey.embedders.litellm_embedder import LiteLLMEmbedder
from mitey.embedders.sentence_transformer import SentenceTransformerEmbedder
from mitey.protocols import EmbeddingProvider

# Model ids with one of these prefixes are served models reached via LiteLLM
LITELLM_PREFIXES = ("ollama/", "openai/", "azure/", "cohere/", "mistral/", "voyage/")


def get_embedder(settings: Settings) -> EmbeddingProvider:
    """Pick the embedding provider for the configured model id."""
    model = settings.embedding_model
    if model.startswith(LITELLM_PREFIXES):
        return LiteLLMEmbedder(model, api_base=settings.api_base)
    return SentenceTransformerEmbedder(model)


__all__ = [
    "get_embedder",
    "LiteLLMEmbedder",
    "SentenceTransformerEmbedder",
    "LITELLM_PREFIXES",
]
