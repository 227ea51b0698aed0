"""Prompt assembly and chat session tests."""

from dataclasses import replace

import pytest

from conftest import ScriptedChatModel, UnreachableChatModel, UnreachableEmbedder
from mitey.conversation import PERSONA, ChatSession, build_prompt
from mitey.errors import EmbeddingUnavailable, IndexCorrupt, IndexNotFound, ModelUnavailable
from mitey.models import RetrievedContext, Turn
from mitey.pipeline import index_directory


def test_build_prompt_order():
    """System first, then history verbatim, then context and question."""
    history = [Turn("user", "first question"), Turn("assistant", "first answer")]
    context = RetrievedContext(text="[File: a.md]\nhello", mode="semantic", sources=["a.md"])

    messages = build_prompt(["a.md", "src/b.ts"], history, context, "second question")

    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert messages[1] == {"role": "user", "content": "first question"}
    assert messages[2] == {"role": "assistant", "content": "first answer"}
    assert messages[3]["content"] == (
        "Context snippets:\n[File: a.md]\nhello\n\nQuestion: second question"
    )


def test_system_prompt_lists_every_file():
    context = RetrievedContext(text="x", mode="direct", sources=["a.md"])

    system = build_prompt(["a.md", "src/b.ts", "docs/c.md"], [], context, "q")[0]

    assert system["role"] == "system"
    assert PERSONA in system["content"]
    assert "Project files: a.md, src/b.ts, docs/c.md." in system["content"]
    assert "State which file you are referring to" in system["content"]


def test_build_prompt_without_history():
    context = RetrievedContext(text="none", mode="empty")

    messages = build_prompt([], [], context, "hi")

    assert [m["role"] for m in messages] == ["system", "user"]


@pytest.fixture
async def indexed(settings, embedder):
    await index_directory(settings, embedder)
    return settings


async def test_one_cycle_appends_user_then_assistant(indexed, embedder):
    chat_model = ScriptedChatModel(["It adds numbers."])
    session = ChatSession(indexed, embedder, chat_model)

    reply = await session.ask("what does util.ts do")

    assert reply == "It adds numbers."
    assert session.history == (
        Turn("user", "what does util.ts do"),
        Turn("assistant", "It adds numbers."),
    )


async def test_second_question_sees_prior_turns(indexed, embedder):
    chat_model = ScriptedChatModel(["first reply", "second reply"])
    session = ChatSession(indexed, embedder, chat_model)

    await session.ask("what does app.ts do")
    await session.ask("and the guide?")

    second_prompt = chat_model.prompts[1]
    assert second_prompt[1] == {"role": "user", "content": "what does app.ts do"}
    assert second_prompt[2] == {"role": "assistant", "content": "first reply"}
    assert second_prompt[-1]["content"].endswith("Question: and the guide?")
    assert len(session.history) == 4


async def test_named_file_question_sends_whole_file(indexed, embedder, project):
    chat_model = ScriptedChatModel()
    session = ChatSession(indexed, embedder, chat_model)

    await session.ask("what does app.ts do")

    content = chat_model.prompts[0][-1]["content"]
    assert f"[File: src/app.ts]\n{(project / 'src' / 'app.ts').read_text()}" in content
    assert session.last_context.mode == "direct"


async def test_named_file_outside_project_root_is_read_from_scanned_tree(
    settings, embedder, project, tmp_path
):
    """A folder scanned from elsewhere still resolves to its own files."""
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    (cwd / "app.ts").write_text("DECOY unrelated file in cwd\n")
    scanned = replace(settings, project_root=cwd, source_root=project / "src")
    await index_directory(scanned, embedder)
    chat_model = ScriptedChatModel()
    session = ChatSession(scanned, embedder, chat_model)

    await session.ask("what does app.ts do")

    assert session.last_context.mode == "direct"
    assert session.last_context.sources == ["../project/src/app.ts"]
    assert (project / "src" / "app.ts").read_text() in session.last_context.text
    assert "DECOY" not in chat_model.prompts[0][-1]["content"]


async def test_system_prompt_uses_stored_manifest(indexed, embedder):
    chat_model = ScriptedChatModel()
    session = ChatSession(indexed, embedder, chat_model)

    await session.ask("how do I use this")

    system = chat_model.prompts[0][0]["content"]
    assert "README.md, docs/guide.md, src/app.ts, src/util.ts" in system


async def test_missing_index_leaves_session_usable(settings, embedder):
    """Asking before a scan fails cleanly; after a scan the same session works."""
    chat_model = ScriptedChatModel(["ok"])
    session = ChatSession(settings, embedder, chat_model)

    with pytest.raises(IndexNotFound):
        await session.ask("anything")
    assert session.history == ()

    await index_directory(settings, embedder)
    assert await session.ask("anything") == "ok"
    assert len(session.history) == 2


async def test_corrupt_index_is_reported(settings, embedder):
    settings.index_path.parent.mkdir(parents=True, exist_ok=True)
    settings.index_path.write_text("garbage" * 50)
    session = ChatSession(settings, embedder, ScriptedChatModel())

    with pytest.raises(IndexCorrupt):
        await session.ask("anything")


async def test_model_failure_leaves_history_untouched(indexed, embedder):
    session = ChatSession(indexed, embedder, ScriptedChatModel(["one"]))
    await session.ask("first")

    session.chat_model = UnreachableChatModel()
    with pytest.raises(ModelUnavailable):
        await session.ask("second")

    assert [t.content for t in session.history] == ["first", "one"]


async def test_embedding_failure_leaves_history_untouched(indexed):
    session = ChatSession(indexed, UnreachableEmbedder(), ScriptedChatModel())

    with pytest.raises(EmbeddingUnavailable):
        await session.ask("a question naming no file")

    assert session.history == ()


async def test_history_cannot_be_mutated_from_outside(indexed, embedder):
    session = ChatSession(indexed, embedder, ScriptedChatModel())
    await session.ask("q")

    with pytest.raises(AttributeError):
        session.history.append(Turn("user", "sneaky"))  # type: ignore[attr-defined]
