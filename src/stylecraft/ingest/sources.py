"""Ingestion sources — turn external datasets into embeddable documents.

Each ``*_documents`` function is synchronous and does its own file and
subprocess I/O; the pipeline runs them in a worker thread.  Live sources
that cannot be reached raise :class:`SourceUnavailableError` internally and
are replaced by the packaged fallback data where one exists.
"""

from __future__ import annotations

import json
import logging
import re
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stylecraft.data import load_json
from stylecraft.exceptions import SourceUnavailableError
from stylecraft.ingest.tokens import (
    BUILTIN_SYSTEMS,
    DesignToken,
    builtin_tokens,
    dedupe_tokens,
    flatten_tokens,
    token_source_id,
    token_text,
)
from stylecraft.search.types import SourceType

logger = logging.getLogger(__name__)

CLONE_TIMEOUT = 30.0
JSON_SEARCH_DEPTH = 3
CODE_SAMPLE_CHARS = 1000
MAX_PATTERN_CLASSES = 20


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """A piece of text ready for embedding.

    Attributes:
        source_id: Stable identifier, e.g. ``"axe-color-contrast"``.
        source_type: Partition the embedding is stored under.
        text: Text to embed.
        metadata: Structured fields stored alongside the embedding.
    """

    source_id: str
    source_type: SourceType
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TokenRepository:
    """A git repository holding design token JSON for one design system."""

    system: str
    url: str
    directory: str
    sparse_paths: tuple[str, ...] = ()


TOKEN_REPOSITORIES: tuple[TokenRepository, ...] = (
    TokenRepository(
        system="material-design-3",
        url="https://github.com/nicholasgasior/material-design-tokens.git",
        directory="material-tokens",
    ),
    TokenRepository(
        system="primer",
        url="https://github.com/primer/primitives.git",
        directory="primer-primitives",
        sparse_paths=("data",),
    ),
)

SHADCN_URL = "https://github.com/shadcn-ui/ui.git"
SHADCN_REGISTRY_PATHS = (
    ("packages", "shadcn", "src", "registry", "default", "ui"),
    ("packages", "shadcn", "src", "registry", "new-york", "ui"),
)
SHADCN_FALLBACK_PATH = ("apps", "www", "registry", "default", "ui")


# ------------------------------------------------------------------
# Git and filesystem helpers
# ------------------------------------------------------------------


def clone_repo(
    url: str,
    dest: Path,
    *,
    sparse_paths: tuple[str, ...] = (),
    timeout: float = CLONE_TIMEOUT,
) -> Path:
    """Shallow-clone *url* into *dest*, optionally as a sparse checkout."""
    cmd = ["git", "clone", "--depth", "1"]
    if sparse_paths:
        cmd += ["--filter=blob:none", "--sparse"]
    cmd += [url, str(dest)]
    try:
        subprocess.run(cmd, check=True, capture_output=True, timeout=timeout)
        if sparse_paths:
            subprocess.run(
                ["git", "sparse-checkout", "set", *sparse_paths],
                cwd=dest,
                check=True,
                capture_output=True,
                timeout=timeout,
            )
    except (OSError, subprocess.SubprocessError) as exc:
        msg = f"Could not clone {url}: {exc}"
        raise SourceUnavailableError(msg) from exc
    return dest


def ensure_checkout(
    url: str,
    dest: Path,
    *,
    sparse_paths: tuple[str, ...] = (),
    offline: bool = False,
) -> Path | None:
    """Return *dest* if it exists or could be cloned, else ``None``."""
    if dest.exists():
        return dest
    if offline:
        return None
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Cloning %s", url)
    try:
        return clone_repo(url, dest, sparse_paths=sparse_paths)
    except SourceUnavailableError as exc:
        # A half-written checkout would be mistaken for a good one next run
        shutil.rmtree(dest, ignore_errors=True)
        logger.warning("%s; using built-in data where available", exc)
        return None


def find_json_files(directory: Path, max_depth: int = JSON_SEARCH_DEPTH) -> list[Path]:
    """JSON files under *directory*, at most *max_depth* levels deep.

    Hidden directories and ``node_modules`` are skipped.
    """
    if max_depth <= 0 or not directory.is_dir():
        return []
    found: list[Path] = []
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            if entry.name.startswith(".") or entry.name == "node_modules":
                continue
            found.extend(find_json_files(entry, max_depth - 1))
        elif entry.is_file() and entry.suffix == ".json":
            found.append(entry)
    return found


# ------------------------------------------------------------------
# Design tokens
# ------------------------------------------------------------------


def tokens_from_directory(directory: Path, system: str) -> list[DesignToken]:
    """Flatten every parseable token file under *directory*."""
    tokens: list[DesignToken] = []
    for path in find_json_files(directory):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.debug("Skipped unparseable token file %s", path)
            continue
        if isinstance(data, dict):
            tokens.extend(flatten_tokens(data, system))
    return tokens


def collect_design_tokens(cache_dir: Path, *, offline: bool = False) -> list[DesignToken]:
    """Flatten live token repositories, substituting built-ins per empty system.

    Returns deduplicated tokens in discovery order; no cap is applied here.
    """
    collected: list[DesignToken] = []
    for repo in TOKEN_REPOSITORIES:
        checkout = ensure_checkout(
            repo.url,
            cache_dir / repo.directory,
            sparse_paths=repo.sparse_paths,
            offline=offline,
        )
        system_tokens = tokens_from_directory(checkout, repo.system) if checkout else []
        if not system_tokens and repo.system in BUILTIN_SYSTEMS:
            logger.info("No live tokens for %s, using built-in set", repo.system)
            system_tokens = builtin_tokens(repo.system)
        collected.extend(system_tokens)
    return dedupe_tokens(collected)


def token_documents(tokens: list[DesignToken]) -> list[SourceDocument]:
    return [
        SourceDocument(
            source_id=token_source_id(t),
            source_type=SourceType.TOKEN,
            text=token_text(t),
            metadata=t.to_metadata(),
        )
        for t in tokens
    ]


# ------------------------------------------------------------------
# axe-core accessibility rules
# ------------------------------------------------------------------


def _rules_from_checkout(axe_dir: Path) -> list[dict[str, Any]]:
    locale = axe_dir / "locales" / "en.json"
    if locale.is_file():
        try:
            data = json.loads(locale.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.debug("Could not parse %s", locale)
        else:
            rules = data.get("rules") or {}
            if rules:
                return [
                    {
                        "id": rule_id,
                        "description": info.get("description", ""),
                        "help": info.get("help", ""),
                    }
                    for rule_id, info in rules.items()
                ]

    rules_dir = axe_dir / "lib" / "rules"
    parsed: list[dict[str, Any]] = []
    if rules_dir.is_dir():
        for path in sorted(rules_dir.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                logger.debug("Skipped unparseable rule file %s", path)
                continue
            meta = data.get("metadata") or {}
            parsed.append(
                {
                    "id": data.get("id") or path.stem,
                    "description": meta.get("description") or data.get("description", ""),
                    "help": meta.get("help") or data.get("help", ""),
                    "impact": meta.get("impact") or data.get("impact", "moderate"),
                    "tags": data.get("tags", []),
                }
            )
    return parsed


def axe_documents(axe_dir: Path | None = None) -> list[SourceDocument]:
    """Accessibility rules from a local axe-core checkout, or the built-in list."""
    rules = _rules_from_checkout(axe_dir) if axe_dir is not None else []
    if not rules:
        logger.info("Using built-in axe-core rule list")
        rules = load_json("axe_rules.json")

    documents = []
    for rule in rules:
        description = rule.get("description") or rule["id"]
        impact = rule.get("impact") or "moderate"
        fix = rule.get("help") or ""
        documents.append(
            SourceDocument(
                source_id=f"axe-{rule['id']}",
                source_type=SourceType.RULE,
                text=f"a11y rule {rule['id']}: {description}. Impact: {impact}. Fix: {fix}",
                metadata={"rule": rule["id"], "impact": impact},
            )
        )
    return documents


# ------------------------------------------------------------------
# WAI-ARIA Authoring Practices patterns
# ------------------------------------------------------------------


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def aria_documents() -> list[SourceDocument]:
    patterns = load_json("aria_patterns.json")
    return [
        SourceDocument(
            source_id=f"aria-{_slug(p['name'])}",
            source_type=SourceType.PATTERN,
            text=(
                f"ARIA pattern {p['name']}: {p['description']}. "
                f"Roles: {', '.join(p['roles'])}. Keys: {'; '.join(p['keyboard'])}"
            ),
            metadata={"pattern": p["name"], "url": p.get("url", "")},
        )
        for p in patterns
    ]


# ------------------------------------------------------------------
# shadcn/ui components
# ------------------------------------------------------------------

_JSDOC_RE = re.compile(r"/\*\*[\s\S]*?\*/")
_JSDOC_STRIP_RE = re.compile(r"/\*\*|\s*\*/|\n\s*\*")
_PROPS_RE = re.compile(r"interface\s+\w+Props\s*\{([^}]*)\}")
_CLASS_ATTR_RE = re.compile(r"(?:className|class)=[\"']([^\"']*)[\"']")


@dataclass(frozen=True, slots=True)
class ShadcnComponent:
    name: str
    code: str
    description: str
    props: tuple[str, ...]
    classes: tuple[str, ...]


def parse_component(name: str, code: str) -> ShadcnComponent:
    """Extract description, prop names and utility classes from a component file."""
    jsdoc = _JSDOC_RE.search(code)
    if jsdoc:
        description = " ".join(_JSDOC_STRIP_RE.sub(" ", jsdoc.group(0)).split())
    else:
        description = f"{name} component"

    props: list[str] = []
    props_match = _PROPS_RE.search(code)
    if props_match:
        for line in props_match.group(1).split("\n"):
            prop = line.strip().split(":")[0].strip()
            if prop:
                props.append(prop)

    classes: dict[str, None] = {}
    for attr in _CLASS_ATTR_RE.findall(code):
        for cls in attr.split():
            if re.match(r"[a-z]", cls):
                classes.setdefault(cls, None)

    return ShadcnComponent(
        name=name,
        code=code,
        description=description,
        props=tuple(props),
        classes=tuple(classes),
    )


def parse_registry(directory: Path) -> list[ShadcnComponent]:
    if not directory.is_dir():
        return []
    return [
        parse_component(path.stem, path.read_text(encoding="utf-8"))
        for path in sorted(directory.glob("*.tsx"))
    ]


def shadcn_documents(cache_dir: Path, *, offline: bool = False) -> list[SourceDocument]:
    """Component descriptions plus truncated code samples from shadcn/ui."""
    checkout = ensure_checkout(
        SHADCN_URL,
        cache_dir / "shadcn-ui",
        sparse_paths=("packages/shadcn/src/registry",),
        offline=offline,
    )
    if checkout is None:
        logger.warning("shadcn/ui registry unavailable")
        return []

    unique: dict[str, ShadcnComponent] = {}
    for parts in SHADCN_REGISTRY_PATHS:
        for comp in parse_registry(checkout.joinpath(*parts)):
            unique.setdefault(comp.name, comp)
    if not unique:
        logger.warning("No shadcn components found, trying alternative registry path")
        for comp in parse_registry(checkout.joinpath(*SHADCN_FALLBACK_PATH)):
            unique.setdefault(comp.name, comp)
    if not unique:
        logger.warning("No shadcn components found after trying all paths")
        return []

    components = list(unique.values())
    documents = [
        SourceDocument(
            source_id=f"shadcn-{c.name}",
            source_type=SourceType.COMPONENT,
            text=(
                f"shadcn {c.name}: {c.description}. Tags: {', '.join(c.props)}. "
                f"Patterns: {' '.join(c.classes[:MAX_PATTERN_CLASSES])}"
            ),
            metadata={"component": c.name},
        )
        for c in components
    ]
    documents.extend(
        SourceDocument(
            source_id=f"shadcn-code-{c.name}",
            source_type=SourceType.EXAMPLE,
            text=c.code[:CODE_SAMPLE_CHARS],
            metadata={"component": c.name},
        )
        for c in components
    )
    return documents
