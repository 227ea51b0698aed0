"""Protocol for chat completion models."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ChatModel(Protocol):
    """A chat model that answers an ordered list of role/content messages."""

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Return the model's reply to ``messages``.

        Raises:
            ModelUnavailable: If the model cannot be reached.
        """
        ...
