"""Chat sessions over an indexed source tree."""

import asyncio
import logging

from mitey.config import Settings
from mitey.conversation.prompt import build_prompt
from mitey.models import RetrievedContext, Turn
from mitey.protocols import ChatModel, EmbeddingProvider
from mitey.retrieval import HybridRetriever
from mitey.storage import VectorIndex

logger = logging.getLogger(__name__)


class ChatSession:
    """One conversation: question in, answer out, history kept in memory.

    The index is loaded fresh for every question so a rescan between
    questions is picked up. History only grows after the model has replied;
    a question that fails at any step leaves it untouched.

    ``last_context`` holds the context behind the most recent answer (None
    before the first one), so callers can report which files were used.
    """

    def __init__(self, settings: Settings, embedder: EmbeddingProvider, chat_model: ChatModel):
        self.settings = settings
        self.embedder = embedder
        self.chat_model = chat_model
        self.retriever = HybridRetriever(settings.project_root, k=settings.retrieval_k)
        self._history: list[Turn] = []
        self.last_context: RetrievedContext | None = None

    @property
    def history(self) -> tuple[Turn, ...]:
        return tuple(self._history)

    async def ask(self, query: str) -> str:
        """Answer ``query`` using the persisted index and the history so far.

        Raises:
            IndexNotFound, IndexCorrupt: If there is no usable index.
            EmbeddingUnavailable: If the query cannot be embedded.
            SourceUnavailable: If a named file cannot be read.
            ModelUnavailable: If the chat model fails.
        """
        logger.info(f'[CHAT] Processing query: "{query}"')

        index = await asyncio.to_thread(
            VectorIndex.load, self.settings.index_path, self.embedder
        )
        context = await self.retriever.retrieve(query, index.manifest, index)
        messages = build_prompt(index.manifest, self._history, context, query)

        reply = await self.chat_model.complete(messages)

        self.last_context = context
        self._history.append(Turn("user", query))
        self._history.append(Turn("assistant", reply))
        return reply
