"""stylecraft-ingest — populate and inspect the embedding store from the command line."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from stylecraft.config import PROVIDERS, StylecraftConfig, build_provider, build_store
from stylecraft.exceptions import StylecraftError
from stylecraft.ingest.pipeline import SOURCES, IngestionPipeline
from stylecraft.logs import configure_logging
from stylecraft.search.types import SourceType

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stylecraft.search.stores.database import DatabaseEmbeddingStore

logger = logging.getLogger(__name__)

DEFAULT_TEST_QUERY = "accessible modal with focus trap"
TEST_QUERY_LIMIT = 3
TEST_QUERY_MIN_SIMILARITY = 0.3

SOURCE_CHOICES = (*SOURCES, "all")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stylecraft-ingest",
        description="Ingest design knowledge into the stylecraft embedding store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Sources:
  shadcn   shadcn/ui component registry (git clone)
  axe      axe-core accessibility rules
  tokens   Material Design 3 and Primer design tokens (git clone)
  aria     WAI-ARIA Authoring Practices patterns
  all      every source above, in that order

Examples:
  stylecraft-ingest tokens
  stylecraft-ingest --source all --provider hash
  stylecraft-ingest --stats
  stylecraft-ingest --test-query "dark dashboard with data tables"
        """,
    )
    parser.add_argument("source", nargs="?", help="Source to ingest")
    parser.add_argument("--source", dest="source_opt", metavar="SOURCE", help="Source to ingest")
    parser.add_argument("--stats", action="store_true", help="Print embedding counts per type")
    parser.add_argument(
        "--test-query",
        nargs="?",
        const=DEFAULT_TEST_QUERY,
        default=None,
        metavar="TEXT",
        help=f"Run a similarity search (default: {DEFAULT_TEST_QUERY!r})",
    )
    parser.add_argument("--db", dest="db_url", help="SQLAlchemy async database URL")
    parser.add_argument("--cache-dir", type=Path, help="Directory for cloned source repositories")
    parser.add_argument("--provider", choices=PROVIDERS, help="Embedding provider")
    parser.add_argument(
        "--offline", action="store_true", help="Never clone; use cached and built-in data"
    )
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING...)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    return parser


def config_from_args(args: argparse.Namespace, base: StylecraftConfig) -> StylecraftConfig:
    overrides: dict[str, object] = {}
    if args.db_url:
        overrides["db_url"] = args.db_url
    if args.cache_dir:
        overrides["cache_dir"] = args.cache_dir
    if args.provider:
        overrides["provider"] = args.provider
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if args.json_logs:
        overrides["json_logs"] = True
    return dataclasses.replace(base, **overrides) if overrides else base


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


async def print_stats(store: DatabaseEmbeddingStore) -> None:
    counts = await store.stats()
    print("Embedding statistics:")
    for source_type in SourceType:
        print(f"  {source_type.value:<12} {counts.get(source_type, 0)}")
    print(f"  {'total':<12} {sum(counts.values())}")


async def run_test_query(
    store: DatabaseEmbeddingStore, config: StylecraftConfig, query: str
) -> None:
    provider = build_provider(config)
    vector = await provider.embed(query)
    print(f"Query: {query}")
    counts = await store.stats()
    if not counts:
        print("  (store is empty)")
        return
    for source_type in SourceType:
        if not counts.get(source_type):
            continue
        results = await store.semantic_search(
            vector,
            source_type,
            limit=TEST_QUERY_LIMIT,
            min_similarity=TEST_QUERY_MIN_SIMILARITY,
        )
        print(f"[{source_type.value}]")
        if not results:
            print("  no matches above threshold")
        for r in results:
            print(f"  {r.similarity:.3f}  {r.source_id}  {r.text[:80]}")


async def run(args: argparse.Namespace, source: str | None, config: StylecraftConfig) -> int:
    store = build_store(config)
    await store.connect()
    try:
        if source:
            pipeline = IngestionPipeline(
                store, build_provider(config), config=config, offline=args.offline
            )
            counts = await pipeline.run(source)
            for name, count in counts.items():
                print(f"{name}: {count} embeddings")
        if args.stats:
            await print_stats(store)
        if args.test_query is not None:
            await run_test_query(store, config, args.test_query)
    finally:
        await store.close()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    source = args.source_opt or args.source

    if not source and not args.stats and args.test_query is None:
        parser.print_help()
        return 0
    if source and source not in SOURCE_CHOICES:
        print(
            f"Unknown source {source!r}; choose from {', '.join(SOURCE_CHOICES)}",
            file=sys.stderr,
        )
        return 1

    try:
        config = config_from_args(args, StylecraftConfig.from_env())
    except StylecraftError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    try:
        configure_logging(config.log_level, json_output=config.json_logs)
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(run(args, source, config))
    except (ImportError, StylecraftError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
