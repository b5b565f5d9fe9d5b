"""Design token flattening, deduplication, and embedding text.

Token documents from design systems are nested mappings.  A node is a
token when it carries a value marker (``$value`` in the W3C draft format,
``value`` in Style Dictionary); every other mapping is a group whose key is
appended to the dash-joined name.  Arrays are never searched for tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from stylecraft.data import load_json

if TYPE_CHECKING:
    from collections.abc import Iterable

VALUE_MARKERS = ("$value", "value")
DESCRIPTION_MARKERS = ("$description", "description")

BUILTIN_SYSTEMS = ("material-design-3", "primer")


@dataclass(frozen=True, slots=True)
class DesignToken:
    """A single named design value.

    Attributes:
        system: Originating design system, e.g. ``"primer"``.
        category: Top-level group the token was found under (``color``, ``spacing``...).
        name: Dash-joined path from the document root.
        value: Literal value as a string.
        description: Usage note; may be empty.
    """

    system: str
    category: str
    name: str
    value: str
    description: str = ""

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used for deduplication."""
        return (self.system, self.category, self.name)

    def to_metadata(self) -> dict[str, str]:
        return {
            "system": self.system,
            "category": self.category,
            "name": self.name,
            "value": self.value,
            "description": self.description,
        }


def _first_marker(node: dict[str, Any], markers: tuple[str, ...]) -> str:
    for marker in markers:
        if marker in node and node[marker] is not None:
            return str(node[marker])
    return ""


def flatten_tokens(
    tree: dict[str, Any],
    system: str,
    category: str = "",
    prefix: str = "",
) -> list[DesignToken]:
    """Walk *tree* depth-first and return every token in document order.

    The first key below the root becomes the category of everything
    underneath it unless *category* is already set.
    """
    tokens: list[DesignToken] = []
    for key, child in tree.items():
        if not isinstance(child, dict):
            continue
        full_name = f"{prefix}-{key}" if prefix else str(key)
        if any(marker in child for marker in VALUE_MARKERS):
            tokens.append(
                DesignToken(
                    system=system,
                    category=category or str(key),
                    name=full_name,
                    value=_first_marker(child, VALUE_MARKERS),
                    description=_first_marker(child, DESCRIPTION_MARKERS),
                )
            )
        else:
            tokens.extend(flatten_tokens(child, system, category or str(key), full_name))
    return tokens


def dedupe_tokens(tokens: Iterable[DesignToken]) -> list[DesignToken]:
    """Keep the first token seen for each ``(system, category, name)``."""
    unique: dict[tuple[str, str, str], DesignToken] = {}
    for token in tokens:
        unique.setdefault(token.key, token)
    return list(unique.values())


def token_text(token: DesignToken) -> str:
    """The descriptive string a token is embedded as."""
    usage = token.description or f"{token.category} token"
    return f"{token.system} {token.category} {token.name}: {token.value}. Usage: {usage}"


def token_source_id(token: DesignToken) -> str:
    return f"token-{token.system}-{token.name}"


def builtin_tokens(system: str) -> list[DesignToken]:
    """The packaged fallback token set for *system*."""
    if system not in BUILTIN_SYSTEMS:
        msg = f"No built-in tokens for design system {system!r}"
        raise KeyError(msg)
    data = load_json(f"tokens/{system}.json")
    return [
        DesignToken(
            system=data["system"],
            category=item["category"],
            name=item["name"],
            value=item["value"],
            description=item.get("description", ""),
        )
        for item in data["tokens"]
    ]
