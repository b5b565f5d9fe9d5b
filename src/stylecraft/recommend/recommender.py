"""StyleRecommender — retrieval-augmented style recommendation with a heuristic fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from stylecraft.config import StylecraftConfig
from stylecraft.recommend.tables import default_tables
from stylecraft.search.types import SimilarityResult, SourceType

if TYPE_CHECKING:
    from stylecraft.recommend.tables import StyleBundle, StyleTables
    from stylecraft.search.protocols import EmbeddingProvider, EmbeddingStore


class RecommendationSource(str, Enum):
    RAG = "rag"
    HEURISTIC = "heuristic"


@dataclass(frozen=True, slots=True)
class StyleContext:
    """Optional hints accompanying a prompt."""

    industry: str | None = None
    mood: str | None = None


@dataclass(frozen=True, slots=True)
class StyleRecommendation:
    """A complete set of style attributes plus how they were obtained.

    Every attribute is populated.  ``confidence`` is exactly the configured
    heuristic constant for heuristic results and at most the configured cap
    for retrieval results.  ``matched_tokens`` is empty for heuristic results.
    """

    primary_color: str
    secondary_color: str
    font_family: str
    spacing: str
    border_radius: str
    design_system: str
    confidence: float
    source: RecommendationSource
    matched_tokens: tuple[SimilarityResult, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "primaryColor": self.primary_color,
            "secondaryColor": self.secondary_color,
            "fontFamily": self.font_family,
            "spacing": self.spacing,
            "borderRadius": self.border_radius,
            "designSystem": self.design_system,
            "confidence": self.confidence,
            "source": self.source.value,
            "matchedTokens": [r.to_dict() for r in self.matched_tokens],
        }


# ------------------------------------------------------------------
# Result interpretation
# ------------------------------------------------------------------


def _is_color(text: str) -> bool:
    return "color" in text and "primary" in text


def _is_typography(text: str) -> bool:
    return "typography" in text or "font" in text


def _is_spacing(text: str) -> bool:
    return "spacing" in text or "space" in text


def _is_radius(text: str) -> bool:
    return "radius" in text or "corner" in text or "shape" in text


_ATTRIBUTE_MATCHERS = (
    ("primary_color", _is_color),
    ("font_family", _is_typography),
    ("spacing", _is_spacing),
    ("border_radius", _is_radius),
)


def result_system(result: SimilarityResult) -> str:
    """Design system a result came from: metadata first, else the first word of its text."""
    system = result.metadata.get("system")
    if system:
        return str(system)
    words = result.text.split(maxsplit=1)
    return words[0] if words else ""


def result_value(result: SimilarityResult) -> str:
    """Display value of a token result, or ``""`` when none can be read."""
    value = result.metadata.get("value")
    if value is not None and str(value).strip():
        return str(value).strip()
    _, colon, rest = result.text.partition(":")
    if not colon:
        return ""
    return rest.split(".", 1)[0].strip()


def dominant_system(results: list[SimilarityResult]) -> str:
    """Most frequent system; ties go to the one encountered first in *results*."""
    counts: dict[str, int] = {}
    for result in results:
        system = result_system(result)
        if system:
            counts[system] = counts.get(system, 0) + 1

    best, best_count = "", 0
    for system, count in counts.items():
        if count > best_count:
            best, best_count = system, count
    return best


# ------------------------------------------------------------------
# Recommender
# ------------------------------------------------------------------


class StyleRecommender:
    """Choose between retrieval and heuristic style recommendation per call.

    If the store holds no token embeddings the heuristic tables answer
    directly and the provider is never touched.  Otherwise the prompt is
    embedded and matched against stored tokens; any failure on that path is
    logged and answered heuristically, so :meth:`recommend_style` does not
    raise.

    The recommender holds no per-request state and may be shared between
    concurrent callers.

    Args:
        store: :class:`EmbeddingStore` holding ``token`` embeddings.
        provider: :class:`EmbeddingProvider` matching the one used at ingestion.
        tables: Industry/mood tables; the packaged defaults when ``None``.
        config: Retrieval and confidence settings.
        logger: Override for the module logger.
    """

    def __init__(
        self,
        store: EmbeddingStore,
        provider: EmbeddingProvider,
        *,
        tables: StyleTables | None = None,
        config: StylecraftConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.provider = provider
        self.tables = tables or default_tables()
        self.config = config or StylecraftConfig()
        self.logger = logger or logging.getLogger(__name__)

    async def recommend_style(
        self, prompt: str, context: StyleContext | None = None
    ) -> StyleRecommendation:
        context = context or StyleContext()
        try:
            count = await self.store.get_embedding_count(SourceType.TOKEN)
        except Exception as exc:
            self.logger.warning("Embedding count failed, using heuristic: %s", exc)
            return self.recommend_with_heuristic(prompt, context)

        if count == 0:
            return self.recommend_with_heuristic(prompt, context)

        try:
            return await self.recommend_with_rag(prompt, context)
        except Exception as exc:
            self.logger.warning("RAG recommendation failed, using heuristic: %s", exc)
            return self.recommend_with_heuristic(prompt, context)

    def recommend_with_heuristic(
        self, prompt: str, context: StyleContext | None = None
    ) -> StyleRecommendation:
        """Industry base with mood override; never performs I/O."""
        context = context or StyleContext()
        bundle = self.tables.resolve(context.industry, context.mood)
        return self._from_bundle(
            bundle,
            confidence=self.config.heuristic_confidence,
            source=RecommendationSource.HEURISTIC,
        )

    async def recommend_with_rag(
        self, prompt: str, context: StyleContext | None = None
    ) -> StyleRecommendation:
        """Recommend from retrieved token embeddings.

        Falls back to the heuristic when nothing clears the similarity floor.
        Provider and store errors propagate.
        """
        context = context or StyleContext()
        query = " ".join(
            part
            for part in (
                prompt,
                f"{context.industry} industry" if context.industry else "",
                f"{context.mood} mood" if context.mood else "",
            )
            if part
        )
        vector = await self.provider.embed(query)
        results = await self.store.semantic_search(
            vector,
            SourceType.TOKEN,
            limit=self.config.search_limit,
            min_similarity=self.config.min_similarity,
        )
        if not results:
            self.logger.debug("No token matched %r above threshold", query)
            return self.recommend_with_heuristic(prompt, context)

        base = self.tables.base(context.industry)
        attributes: dict[str, str] = {}
        for attr, matches in _ATTRIBUTE_MATCHERS:
            hit = next((r for r in results if matches(r.text)), None)
            value = result_value(hit) if hit is not None else ""
            attributes[attr] = value or getattr(base, attr)

        confidence = min(
            self.config.confidence_cap, results[0].similarity + self.config.confidence_bonus
        )
        return StyleRecommendation(
            primary_color=attributes["primary_color"],
            secondary_color=base.secondary_color,
            font_family=attributes["font_family"],
            spacing=attributes["spacing"],
            border_radius=attributes["border_radius"],
            design_system=dominant_system(results) or base.design_system,
            confidence=max(0.0, confidence),
            source=RecommendationSource.RAG,
            matched_tokens=tuple(results[: self.config.matched_token_limit]),
        )

    @staticmethod
    def _from_bundle(
        bundle: StyleBundle, *, confidence: float, source: RecommendationSource
    ) -> StyleRecommendation:
        return StyleRecommendation(
            primary_color=bundle.primary_color,
            secondary_color=bundle.secondary_color,
            font_family=bundle.font_family,
            spacing=bundle.spacing,
            border_radius=bundle.border_radius,
            design_system=bundle.design_system,
            confidence=confidence,
            source=source,
        )


async def recommend_style(
    prompt: str,
    context: StyleContext | None = None,
    *,
    store: EmbeddingStore,
    provider: EmbeddingProvider,
) -> StyleRecommendation:
    """One-shot convenience wrapper around :meth:`StyleRecommender.recommend_style`."""
    return await StyleRecommender(store, provider).recommend_style(prompt, context)
