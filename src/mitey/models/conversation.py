"""Conversation turns and retrieved context."""

from dataclasses import dataclass, field
from typing import Literal

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class Turn:
    """One role-tagged message in a session history."""

    role: Role
    content: str

    def as_message(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class RetrievedContext:
    """Context block handed to the model, plus the files it came from."""

    text: str
    mode: Literal["direct", "semantic", "empty"]
    sources: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.mode == "empty"
