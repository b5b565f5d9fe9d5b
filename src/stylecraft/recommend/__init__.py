"""Style recommendation — heuristic tables and retrieval over design tokens."""

from stylecraft.recommend.recommender import (
    RecommendationSource,
    StyleContext,
    StyleRecommendation,
    StyleRecommender,
    recommend_style,
)
from stylecraft.recommend.tables import StyleBundle, StyleTables

__all__ = [
    "RecommendationSource",
    "StyleBundle",
    "StyleContext",
    "StyleRecommendation",
    "StyleRecommender",
    "StyleTables",
    "recommend_style",
]
