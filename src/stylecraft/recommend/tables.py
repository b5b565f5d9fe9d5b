"""Industry and mood lookup tables for the heuristic recommender."""

from __future__ import annotations

import dataclasses
import functools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from stylecraft.data import load_json
from stylecraft.exceptions import TableError

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_INDUSTRY = "general"

# Data-file key -> StyleBundle field
_FIELD_KEYS: dict[str, str] = {
    "primaryColor": "primary_color",
    "secondaryColor": "secondary_color",
    "fontFamily": "font_family",
    "spacing": "spacing",
    "borderRadius": "border_radius",
    "designSystem": "design_system",
}


@dataclass(frozen=True, slots=True)
class StyleBundle:
    """The six style attributes an industry defines."""

    primary_color: str
    secondary_color: str
    font_family: str
    spacing: str
    border_radius: str
    design_system: str

    def overlay(self, overrides: Mapping[str, str]) -> StyleBundle:
        """Return a copy with *overrides* (bundle field names) applied."""
        return dataclasses.replace(self, **overrides) if overrides else self


@dataclass(frozen=True, slots=True)
class StyleTables:
    """Industry base bundles and partial mood overrides.

    ``industries`` always contains :data:`DEFAULT_INDUSTRY`.  Lookups are
    case-sensitive; unknown industries resolve to the default and unknown
    moods contribute nothing.
    """

    industries: dict[str, StyleBundle]
    moods: dict[str, dict[str, str]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StyleTables:
        """Build tables from ``{"industries": {...}, "moods": {...}}`` with camelCase keys.

        Raises:
            TableError: ``general`` is missing, an industry lacks a field, or a
                mood names an unknown field.
        """
        raw_industries = data.get("industries") or {}
        if DEFAULT_INDUSTRY not in raw_industries:
            msg = f"Style tables must define a {DEFAULT_INDUSTRY!r} industry"
            raise TableError(msg)

        industries: dict[str, StyleBundle] = {}
        for name, raw in raw_industries.items():
            missing = [key for key in _FIELD_KEYS if not raw.get(key)]
            if missing:
                msg = f"Industry {name!r} is missing {', '.join(missing)}"
                raise TableError(msg)
            industries[name] = StyleBundle(
                **{attr: str(raw[key]) for key, attr in _FIELD_KEYS.items()}
            )

        moods: dict[str, dict[str, str]] = {}
        for name, raw in (data.get("moods") or {}).items():
            unknown = [key for key in raw if key not in _FIELD_KEYS]
            if unknown:
                msg = f"Mood {name!r} overrides unknown fields {', '.join(unknown)}"
                raise TableError(msg)
            moods[name] = {_FIELD_KEYS[key]: str(value) for key, value in raw.items()}

        return cls(industries=industries, moods=moods)

    @classmethod
    def load_default(cls) -> StyleTables:
        return cls.from_mapping(load_json("styles.json"))

    def base(self, industry: str | None) -> StyleBundle:
        if industry and industry in self.industries:
            return self.industries[industry]
        return self.industries[DEFAULT_INDUSTRY]

    def mood(self, mood: str | None) -> dict[str, str]:
        if mood and mood in self.moods:
            return self.moods[mood]
        return {}

    def resolve(self, industry: str | None, mood: str | None) -> StyleBundle:
        """Industry base with the mood override layered on top."""
        return self.base(industry).overlay(self.mood(mood))


@functools.lru_cache(maxsize=1)
def default_tables() -> StyleTables:
    """Packaged tables, parsed and validated once per process."""
    return StyleTables.load_default()
