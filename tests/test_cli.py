"""Tests for the stylecraft-ingest command line."""

from __future__ import annotations

import logging

import pytest

from stylecraft.cli import DEFAULT_TEST_QUERY, build_parser, config_from_args, main
from stylecraft.config import StylecraftConfig


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    """Point the CLI at a temporary database and cache, hash provider, no env leakage."""
    for key in (
        "STYLECRAFT_PROVIDER",
        "STYLECRAFT_MODEL",
        "STYLECRAFT_LOG_LEVEL",
        "STYLECRAFT_JSON_LOGS",
        "STYLECRAFT_AXE_DIR",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("STYLECRAFT_DB_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("STYLECRAFT_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("STYLECRAFT_PROVIDER", "hash")
    logger = logging.getLogger("stylecraft")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


class TestParser:
    def test_test_query_default(self):
        args = build_parser().parse_args(["--test-query"])
        assert args.test_query == DEFAULT_TEST_QUERY

    def test_test_query_text(self):
        args = build_parser().parse_args(["--test-query", "dark table"])
        assert args.test_query == "dark table"

    def test_source_flag(self):
        args = build_parser().parse_args(["--source", "axe"])
        assert args.source_opt == "axe"
        assert args.source is None

    def test_overrides(self, tmp_path):
        args = build_parser().parse_args(
            ["--db", "sqlite+aiosqlite://", "--cache-dir", str(tmp_path), "--log-level", "debug"]
        )
        config = config_from_args(args, StylecraftConfig(provider="hash"))
        assert config.db_url == "sqlite+aiosqlite://"
        assert config.cache_dir == tmp_path
        assert config.log_level == "DEBUG"

    def test_no_overrides_keeps_base(self):
        base = StylecraftConfig(provider="hash")
        assert config_from_args(build_parser().parse_args([]), base) is base


class TestMain:
    def test_no_arguments_prints_usage(self, capsys):
        assert main([]) == 0
        assert "usage: stylecraft-ingest" in capsys.readouterr().out

    def test_unknown_source(self, capsys):
        assert main(["figma"]) == 1
        assert "Unknown source 'figma'" in capsys.readouterr().err

    def test_invalid_env_config(self, monkeypatch, capsys):
        monkeypatch.setenv("STYLECRAFT_MAX_TOKENS", "lots")
        assert main(["--stats"]) == 1
        assert "STYLECRAFT_MAX_TOKENS" in capsys.readouterr().err

    def test_ingest_then_stats(self, capsys):
        assert main(["aria", "--offline"]) == 0
        assert "aria: 30 embeddings" in capsys.readouterr().out

        assert main(["--stats"]) == 0
        out = capsys.readouterr().out
        assert "pattern      30" in out
        assert "total        30" in out

    def test_source_flag_ingests(self, capsys):
        assert main(["--source", "axe", "--offline"]) == 0
        assert "axe: 52 embeddings" in capsys.readouterr().out

    def test_test_query(self, capsys):
        assert main(["aria", "--offline"]) == 0
        capsys.readouterr()

        assert main(["--test-query", "dialog modal focus trapped escape close"]) == 0
        out = capsys.readouterr().out
        assert "[pattern]" in out
        assert "aria-dialog-modal" in out
        assert "[token]" not in out

    def test_test_query_empty_store(self, capsys):
        assert main(["--test-query"]) == 0
        assert "(store is empty)" in capsys.readouterr().out

    def test_invalid_log_level(self, capsys):
        assert main(["--stats", "--log-level", "loud"]) == 1
        assert "Configuration error" in capsys.readouterr().err
