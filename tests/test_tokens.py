"""Tests for design token flattening and built-in token sets."""

from __future__ import annotations

import pytest

from stylecraft.ingest.tokens import (
    BUILTIN_SYSTEMS,
    DesignToken,
    builtin_tokens,
    dedupe_tokens,
    flatten_tokens,
    token_source_id,
    token_text,
)

# ==================================================================
# Flattening
# ==================================================================


class TestFlattenTokens:
    def test_nested_style_dictionary(self):
        tree = {
            "color": {
                "primary": {"value": "#6750A4", "description": "Brand"},
                "surface": {"tint": {"value": "#FFFBFE"}},
            }
        }
        tokens = flatten_tokens(tree, "material-design-3")
        assert tokens == [
            DesignToken("material-design-3", "color", "color-primary", "#6750A4", "Brand"),
            DesignToken("material-design-3", "color", "color-surface-tint", "#FFFBFE", ""),
        ]

    def test_root_level_token_uses_key_as_category(self):
        tokens = flatten_tokens({"radius": {"value": "8px"}}, "primer")
        assert tokens == [DesignToken("primer", "radius", "radius", "8px")]

    def test_w3c_markers_preferred(self):
        tree = {"space": {"md": {"$value": "16px", "value": "12px", "$description": "Medium"}}}
        [token] = flatten_tokens(tree, "primer")
        assert token.value == "16px"
        assert token.description == "Medium"

    def test_null_value_renders_empty(self):
        [token] = flatten_tokens({"size": {"x": {"value": None}}}, "s")
        assert token.value == ""

    def test_non_string_values_stringified(self):
        [token] = flatten_tokens({"line": {"height": {"value": 1.5}}}, "s")
        assert token.value == "1.5"

    def test_arrays_and_scalars_skipped(self):
        tree = {
            "color": {
                "list": [{"value": "#000"}],
                "name": "ignored",
                "ok": {"value": "#fff"},
            },
            "version": 3,
        }
        tokens = flatten_tokens(tree, "s")
        assert [t.name for t in tokens] == ["color-ok"]

    def test_explicit_category_is_inherited(self):
        tokens = flatten_tokens({"a": {"b": {"value": "1"}}}, "s", category="spacing")
        assert tokens[0].category == "spacing"
        assert tokens[0].name == "a-b"

    def test_document_order(self):
        tree = {"z": {"value": "1"}, "a": {"value": "2"}, "m": {"n": {"value": "3"}}}
        assert [t.name for t in flatten_tokens(tree, "s")] == ["z", "a", "m-n"]

    def test_empty_tree(self):
        assert flatten_tokens({}, "s") == []

    def test_rebuilt_tree_flattens_identically(self):
        original = flatten_tokens(
            {"color": {"primary": {"value": "#111"}, "on": {"primary": {"value": "#fff"}}}},
            "sys",
        )
        rebuilt: dict = {}
        for t in original:
            parts = t.name.split("-")
            node = rebuilt
            for part in parts[:-1]:
                node = node.setdefault(part, {})
            node[parts[-1]] = {"value": t.value}
        assert flatten_tokens(rebuilt, "sys") == original


# ==================================================================
# Deduplication and text
# ==================================================================


class TestDedupe:
    def test_first_seen_wins(self):
        first = DesignToken("primer", "color", "fg", "#000")
        dup = DesignToken("primer", "color", "fg", "#111")
        other = DesignToken("primer", "color", "bg", "#fff")
        assert dedupe_tokens([first, other, dup]) == [first, other]

    def test_same_name_different_system_kept(self):
        a = DesignToken("primer", "color", "fg", "#000")
        b = DesignToken("material-design-3", "color", "fg", "#000")
        assert dedupe_tokens([a, b]) == [a, b]

    def test_idempotent(self):
        tokens = [DesignToken("s", "c", str(i % 3), "v") for i in range(9)]
        once = dedupe_tokens(tokens)
        assert dedupe_tokens(once) == once
        assert len(once) == 3


class TestTokenText:
    def test_with_description(self):
        token = DesignToken(
            "material-design-3", "color", "primary", "#6750A4", "Primary brand color"
        )
        assert token_text(token) == (
            "material-design-3 color primary: #6750A4. Usage: Primary brand color"
        )

    def test_without_description(self):
        token = DesignToken("primer", "spacing", "space-1", "4px")
        assert token_text(token) == "primer spacing space-1: 4px. Usage: spacing token"

    def test_source_id(self):
        token = DesignToken("primer", "spacing", "space-1", "4px")
        assert token_source_id(token) == "token-primer-space-1"

    def test_metadata(self):
        token = DesignToken("primer", "shape", "border-radius-md", "6px", "Medium")
        assert token.to_metadata() == {
            "system": "primer",
            "category": "shape",
            "name": "border-radius-md",
            "value": "6px",
            "description": "Medium",
        }


# ==================================================================
# Built-ins
# ==================================================================


class TestBuiltinTokens:
    @pytest.mark.parametrize("system", BUILTIN_SYSTEMS)
    def test_loads(self, system):
        tokens = builtin_tokens(system)
        assert tokens
        assert all(t.system == system for t in tokens)
        assert all(t.value for t in tokens)
        assert dedupe_tokens(tokens) == tokens

    def test_material_primary(self):
        tokens = {t.name: t for t in builtin_tokens("material-design-3")}
        assert tokens["primary"].value == "#6750A4"

    def test_primer_font_family(self):
        tokens = {t.name: t for t in builtin_tokens("primer")}
        assert tokens["font-family"].category == "typography"

    def test_unknown_system(self):
        with pytest.raises(KeyError):
            builtin_tokens("carbon")
