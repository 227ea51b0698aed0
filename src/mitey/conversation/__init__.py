"""Prompt assembly and chat sessions."""

from mitey.conversation.prompt import (
    CITATION_INSTRUCTION,
    PERSONA,
    build_prompt,
    question_prompt,
    system_prompt,
)
from mitey.conversation.session import ChatSession

__all__ = [
    "ChatSession",
    "build_prompt",
    "system_prompt",
    "question_prompt",
    "PERSONA",
    "CITATION_INSTRUCTION",
]
