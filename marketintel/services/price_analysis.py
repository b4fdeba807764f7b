"""Pricing statistics over scraped product listings.

The analyzer turns a list of listings into a small summary used by the
report: mean/min/max of the positive prices and a positioning
recommendation bucketed by the mean.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

import structlog

from marketintel.config import PricingRules
from marketintel.scrapers.base import ProductRecord

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Recommendation tiers
# ---------------------------------------------------------------------------
LOW_PRICE = "low-price"
MID_RANGE = "mid-range"
HIGH_PRICE = "high-price"

RECOMMENDATIONS = {
    LOW_PRICE: "Low price point - consider premium positioning",
    HIGH_PRICE: "High price point - good for quality positioning",
    MID_RANGE: "Mid-range pricing - competitive zone",
}


@dataclass(frozen=True)
class PricingSummary:
    """Result of pricing analysis.

    Attributes:
        average: Mean price, formatted with 2 decimals
        min: Lowest price, formatted with 2 decimals
        max: Highest price, formatted with 2 decimals
        sample_size: Number of strictly positive prices considered
        recommendation_tag: One of "low-price", "mid-range", "high-price"
        recommendation: Human-readable positioning advice
    """

    average: str
    min: str
    max: str
    sample_size: int
    recommendation_tag: str
    recommendation: str


def dedupe_by_title(products: Iterable[ProductRecord]) -> List[ProductRecord]:
    """Drop products whose title was already seen; first occurrence wins."""
    seen = set()
    unique: List[ProductRecord] = []
    for product in products:
        if product.title in seen:
            continue
        seen.add(product.title)
        unique.append(product)
    return unique


class PriceAnalyzer:
    """Computes descriptive price statistics and a positioning tag."""

    def __init__(self, rules: PricingRules):
        self.rules = rules

    def classify(self, mean: float) -> str:
        """Bucket a mean price.

        Both thresholds are exclusive: a mean exactly on a threshold is
        mid-range.
        """
        if mean < self.rules.low_threshold:
            return LOW_PRICE
        if mean > self.rules.high_threshold:
            return HIGH_PRICE
        return MID_RANGE

    def analyze(self, products: Iterable[ProductRecord]) -> Optional[PricingSummary]:
        """Summarize positive prices.

        Args:
            products: Products (already de-duplicated)

        Returns:
            PricingSummary, or None when no product has a positive price
        """
        prices = [p.price for p in products if p.price > 0]
        if not prices:
            logger.info("pricing_skipped", reason="no_positive_prices")
            return None

        # Thresholds apply to the unrounded mean; only the display is rounded
        mean = sum(prices) / len(prices)
        tag = self.classify(mean)

        summary = PricingSummary(
            average=f"{mean:.2f}",
            min=f"{min(prices):.2f}",
            max=f"{max(prices):.2f}",
            sample_size=len(prices),
            recommendation_tag=tag,
            recommendation=RECOMMENDATIONS[tag],
        )
        logger.info(
            "pricing_analyzed",
            sample_size=summary.sample_size,
            average=summary.average,
            tag=tag,
        )
        return summary
