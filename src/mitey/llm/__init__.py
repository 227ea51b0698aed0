"""Chat model clients."""

from mitey.llm.client import LiteLLMChatModel

__all__ = ["LiteLLMChatModel"]
