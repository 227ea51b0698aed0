"""Prompt assembly for a chat turn."""

from mitey.models import RetrievedContext, Turn

PERSONA = (
    "Your name is Mitey. You are small, but mighty! "
    "Act as a highly skilled assistant."
)

CITATION_INSTRUCTION = "Use the context to answer. State which file you are referring to."


def system_prompt(manifest: list[str]) -> str:
    """Persona plus the full list of project files."""
    return f"{PERSONA} Project files: {', '.join(manifest)}.\n{CITATION_INSTRUCTION}"


def question_prompt(context: RetrievedContext, query: str) -> str:
    return f"Context snippets:\n{context.text}\n\nQuestion: {query}"


def build_prompt(
    manifest: list[str],
    history: list[Turn] | tuple[Turn, ...],
    context: RetrievedContext,
    query: str,
) -> list[dict[str, str]]:
    """Return the messages for one turn: system, prior history, then the question."""
    return [
        {"role": "system", "content": system_prompt(manifest)},
        *(turn.as_message() for turn in history),
        {"role": "user", "content": question_prompt(context, query)},
    ]
