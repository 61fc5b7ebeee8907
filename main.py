"""Command-line entry point for indexing documents and chatting with personas."""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from oracle.config import config
from oracle.conversation import ConversationManager
from oracle.personas import DEFAULT_PERSONA, PERSONAS
from oracle.pipeline import RAGPipeline
from oracle.seeding import seed_documents
from oracle.web_search import WebSearchAdapter

if TYPE_CHECKING:
    from collections.abc import Sequence

BENCHMARK_QUERY = "NIGHT token"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Build the CLI parser and read command-line arguments."""  # noqa: DOC201
    parser = argparse.ArgumentParser(
        description="Index documents and answer questions with the Oracle agents.",
    )
    parser.add_argument(
        "--db-path",
        type=Path,
        default=None,
        help="SQLite vector store path (default: VECTOR_STORE_DB_PATH).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed = subparsers.add_parser("seed", help="Index every document in a directory.")
    seed.add_argument(
        "directory",
        type=Path,
        nargs="?",
        default=config.SEED_DOCUMENTS_DIR,
        help="Directory of .txt/.pdf files (default: SEED_DOCUMENTS_DIR).",
    )

    search = subparsers.add_parser("search", help="Search indexed documents.")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=config.SEARCH_TOP_K)

    ask = subparsers.add_parser("ask", help="Answer one chat message.")
    ask.add_argument("message")
    ask.add_argument(
        "--persona",
        choices=sorted(PERSONAS),
        default=DEFAULT_PERSONA.key,
    )

    subparsers.add_parser("stats", help="Show the number of indexed documents.")
    subparsers.add_parser("benchmark", help="Time one vector and one web search.")
    return parser.parse_args(argv)


async def run_command(args: argparse.Namespace) -> int:
    """Execute the selected subcommand and return its exit code."""  # noqa: DOC201
    pipeline = RAGPipeline(db_path=args.db_path)

    if args.command == "seed":
        report = await seed_documents(pipeline, args.directory)
        print(
            f"Processed {len(report.processed)} documents, "
            f"{len(report.failed)} failed; {report.document_count} indexed."
        )
        return 1 if report.failed and not report.processed else 0

    if args.command == "search":
        results = await pipeline.search_documents(args.query, args.limit)
        for rank, result in enumerate(results, start=1):
            print(f"{rank}. [{result.similarity:.4f}] {result.filename}")
            print(f"   {result.content[:200]}")
        if not results:
            print("No results.")
        return 0

    if args.command == "ask":
        manager = ConversationManager(rag_pipeline=pipeline)
        print(await manager.generate_response(args.persona, args.message))
        return 0

    if args.command == "stats":
        count = await pipeline.get_indexed_document_count()
        print(f"Indexed documents: {count}")
        return 0

    if args.command == "benchmark":
        vector_start = time.perf_counter()
        await pipeline.search_documents(BENCHMARK_QUERY, 3)
        vector_ms = (time.perf_counter() - vector_start) * 1000

        web_start = time.perf_counter()
        await WebSearchAdapter().search(BENCHMARK_QUERY)
        web_ms = (time.perf_counter() - web_start) * 1000

        print(f"Vector search: {vector_ms:.0f}ms")
        print(f"Web search: {web_ms:.0f}ms")
        print(f"Total: {vector_ms + web_ms:.0f}ms")
        return 0

    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Validate configuration and run the requested command."""  # noqa: DOC201
    args = parse_args(argv)

    config.setup_logging()
    logger = config.get_logger(__name__)

    try:
        config.validate()
    except ValueError:
        logger.exception("Configuration invalid")
        return 1

    try:
        return asyncio.run(run_command(args))
    except KeyboardInterrupt:
        logger.info("Oracle agent stopped by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
