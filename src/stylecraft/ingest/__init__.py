"""Offline ingestion — design tokens, accessibility rules, ARIA patterns, components."""

from stylecraft.ingest.pipeline import SOURCES, IngestionPipeline
from stylecraft.ingest.sources import SourceDocument
from stylecraft.ingest.tokens import (
    DesignToken,
    builtin_tokens,
    dedupe_tokens,
    flatten_tokens,
    token_source_id,
    token_text,
)

__all__ = [
    "SOURCES",
    "DesignToken",
    "IngestionPipeline",
    "SourceDocument",
    "builtin_tokens",
    "dedupe_tokens",
    "flatten_tokens",
    "token_source_id",
    "token_text",
]
