"""Fixed-vocabulary keyword tagging over trend titles."""

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import structlog

from marketintel.config import KeywordVocabulary
from marketintel.scrapers.base import TrendBatch

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TrendInsights:
    """Keywords found in the collected trend titles, in vocabulary order."""

    styles: Tuple[str, ...] = ()
    colors: Tuple[str, ...] = ()
    themes: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.styles or self.colors or self.themes)


def match_keywords(text: str, vocabulary: Sequence[str]) -> Tuple[str, ...]:
    """Return vocabulary words contained in ``text`` (case-insensitive).

    Matching is plain substring containment, so "animals" matches inside
    "farm animals coloring" but "kawaii" also matches "kawaiicore".
    """
    text = text.lower()
    matched = []
    for word in vocabulary:
        key = word.lower()
        if key and key in text and word not in matched:
            matched.append(word)
    return tuple(matched)


class TrendAnalyzer:
    """Tags trend batches with style, color and theme keywords."""

    def __init__(self, vocabulary: KeywordVocabulary):
        self.vocabulary = vocabulary

    def analyze(self, batches: Iterable[TrendBatch]) -> TrendInsights:
        """Scan all trend titles for the configured vocabularies.

        Args:
            batches: Per-category trend batches

        Returns:
            TrendInsights (empty tuples when nothing matched)
        """
        titles = [trend.title.lower() for batch in batches for trend in batch.trends]
        text = " ".join(titles)

        insights = TrendInsights(
            styles=match_keywords(text, self.vocabulary.styles),
            colors=match_keywords(text, self.vocabulary.colors),
            themes=match_keywords(text, self.vocabulary.themes),
        )
        logger.info(
            "trend_insights",
            titles=len(titles),
            styles=list(insights.styles),
            colors=list(insights.colors),
            themes=list(insights.themes),
        )
        return insights
