"""CLI entry point for Mitey."""

import argparse
import asyncio
import logging
import sys

from mitey.config import Settings, load_settings
from mitey.conversation import ChatSession
from mitey.embedders import get_embedder
from mitey.errors import MiteyError
from mitey.llm import LiteLLMChatModel
from mitey.pipeline import index_directory
from mitey.storage import IndexStore

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"exit", "quit"}


def scan(settings: Settings) -> None:
    """Index settings.source_root and replace the stored index."""
    embedder = get_embedder(settings)
    result = asyncio.run(index_directory(settings, embedder))
    for path in result.manifest:
        logger.debug(f"  {path}")


def _session(settings: Settings) -> ChatSession:
    chat_model = LiteLLMChatModel(
        settings.chat_model,
        temperature=settings.temperature,
        api_base=settings.api_base,
        max_tokens=settings.max_tokens,
        num_ctx=settings.num_ctx,
        repeat_penalty=settings.repeat_penalty,
    )
    return ChatSession(settings, get_embedder(settings), chat_model)


def ask(settings: Settings, question: str) -> None:
    """Answer a single question against the existing index."""
    session = _session(settings)
    answer = asyncio.run(session.ask(question))
    print(answer)


async def _chat_loop(session: ChatSession) -> None:
    while True:
        try:
            query = await asyncio.to_thread(input, "\nmitey > ")
        except EOFError:
            break
        query = query.strip()
        if not query:
            continue
        if query.lower() in EXIT_COMMANDS:
            break

        try:
            answer = await session.ask(query)
        except MiteyError as e:
            logger.error(f"Error: {e}")
            continue
        context = session.last_context
        if context is not None:
            logger.debug(f"[CHAT] Answered from {context.mode} context: {', '.join(context.sources)}")
        print(f"\nAI: {answer}")


def chat(settings: Settings, rescan: bool = True) -> None:
    """Optionally rescan, then answer questions until ``exit``."""
    if rescan:
        scan(settings)

    logger.info("\n--- mitey System Ready ---")
    try:
        asyncio.run(_chat_loop(_session(settings)))
    except KeyboardInterrupt:
        pass


def info(settings: Settings) -> None:
    """Show information about the index."""
    stored = IndexStore(settings.index_path).read()

    print(f"Index: {settings.index_path}")
    print(f"  Size: {settings.index_path.stat().st_size / 1024:.1f} KB")
    print(f"")
    print(f"Metadata:")
    for key, value in sorted(stored.metadata.items()):
        print(f"  {key}: {value}")
    print(f"")
    print(f"Contents:")
    print(f"  Files: {len(stored.manifest)}")
    print(f"  Chunks: {len(stored.chunks)}")
    for path in stored.manifest:
        print(f"    {path}")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--index", dest="index_path", help="Index file path")
    parser.add_argument(
        "--project-root",
        help="Directory that file names in the index are relative to (default: cwd)",
    )
    parser.add_argument("--embedding-model", help="Embedding model id")
    parser.add_argument("--chat-model", help="Chat model id (LiteLLM form)")
    parser.add_argument("--temperature", type=float, help="Generation temperature")
    parser.add_argument("--api-base", help="Model endpoint (Ollama)")
    parser.add_argument("--num-ctx", type=int, help="Model context window in tokens (Ollama)")
    parser.add_argument("--repeat-penalty", type=float, help="Repetition penalty (Ollama)")
    parser.add_argument("--max-tokens", type=int, help="Maximum reply length in tokens")
    parser.add_argument("--chunk-size", type=int, help="Maximum chunk length in characters")
    parser.add_argument("--chunk-overlap", type=int, help="Characters shared by adjacent chunks")
    parser.add_argument("-k", dest="retrieval_k", type=int, help="Chunks retrieved per question")
    parser.add_argument(
        "--ext",
        dest="extensions",
        action="append",
        help="File extension to index (repeatable, replaces the default list)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mitey",
        description="Mitey - small, but mighty answers about your source tree",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Index a source folder")
    scan_parser.add_argument("source", nargs="?", help="Folder to index (default: source root)")
    _add_common_arguments(scan_parser)

    # ask command
    ask_parser = subparsers.add_parser("ask", help="Ask one question against the index")
    ask_parser.add_argument("question", help="Question to ask")
    _add_common_arguments(ask_parser)

    # chat command
    chat_parser = subparsers.add_parser("chat", help="Scan, then answer questions interactively")
    chat_parser.add_argument("source", nargs="?", help="Folder to index (default: source root)")
    chat_parser.add_argument(
        "--no-scan",
        action="store_true",
        help="Use the existing index instead of rescanning",
    )
    _add_common_arguments(chat_parser)

    # info command
    info_parser = subparsers.add_parser("info", help="Show information about the index")
    _add_common_arguments(info_parser)

    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = {
        name: getattr(args, name, None)
        for name in (
            "index_path",
            "project_root",
            "embedding_model",
            "chat_model",
            "temperature",
            "api_base",
            "num_ctx",
            "repeat_penalty",
            "max_tokens",
            "chunk_size",
            "chunk_overlap",
            "retrieval_k",
        )
    }
    if getattr(args, "source", None):
        overrides["source_root"] = args.source
    if args.extensions:
        overrides["extensions"] = tuple(
            ext if ext.startswith(".") else f".{ext}" for ext in args.extensions
        )
    return load_settings(**overrides)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )
    # LiteLLM and httpx are chatty at INFO
    for noisy in ("LiteLLM", "httpx", "sentence_transformers"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    try:
        settings = settings_from_args(args)
        if args.command == "scan":
            scan(settings)
        elif args.command == "ask":
            ask(settings, args.question)
        elif args.command == "chat":
            chat(settings, rescan=not args.no_scan)
        elif args.command == "info":
            info(settings)
    except MiteyError as e:
        logger.error(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
