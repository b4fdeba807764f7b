"""Daily Markdown report rendering.

The renderer is a pure function of the collected RunData: it never fetches
anything and never fails on missing data. Sections are rendered in the
order listed in ``report.sections``; empty data renders a placeholder line
instead of dropping the section.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional

import structlog

from marketintel.config import ReportConfig
from marketintel.scrapers.base import ProductRecord, ShopStats, TrendBatch
from marketintel.services.price_analysis import (
    HIGH_PRICE,
    LOW_PRICE,
    PricingSummary,
)
from marketintel.services.trend_analysis import TrendInsights

logger = structlog.get_logger(__name__)

FILENAME_TEMPLATE = "intel-report-{day}.md"
TOP_PRODUCTS = 5
TRENDS_PER_CATEGORY_IN_REPORT = 5


@dataclass
class RunData:
    """Everything one run collected; built fresh for each run."""

    mode: str = "test"
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    trend_batches: List[TrendBatch] = field(default_factory=list)
    insights: Optional[TrendInsights] = None
    products: List[ProductRecord] = field(default_factory=list)
    pricing: Optional[PricingSummary] = None
    competitors: List[ShopStats] = field(default_factory=list)

    @property
    def trend_count(self) -> int:
        return sum(batch.count for batch in self.trend_batches)

    @property
    def run_date(self) -> date:
        return self.started_at.date()


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


class ReportGenerator:
    """Renders RunData into the daily Markdown report."""

    def __init__(self, config: ReportConfig):
        self.config = config
        self._renderers: Dict[str, Callable[[RunData], List[str]]] = {
            "executive-summary": self._executive_summary,
            "trending-topics": self._trending_topics,
            "competitor-activity": self._competitor_activity,
            "opportunity-alerts": self._opportunity_alerts,
            "action-items": self._action_items,
        }

    @staticmethod
    def get_filename(day: date) -> str:
        """Report file name for a run date, e.g. ``intel-report-2026-10-19.md``."""
        return FILENAME_TEMPLATE.format(day=day.isoformat())

    def generate(self, data: RunData) -> str:
        """Render the full report.

        Args:
            data: Collected run data (may be entirely empty)

        Returns:
            Markdown text ending with a newline
        """
        lines = [
            f"# Daily Market Intel Report - {data.run_date.isoformat()}",
            "",
            f"_Generated {data.started_at.strftime('%Y-%m-%d %H:%M')} UTC "
            f"in {data.mode} mode_",
            "",
        ]

        for section in self.config.sections:
            renderer = self._renderers.get(section)
            if renderer is None:
                logger.warning("unknown_report_section", section=section)
                continue
            lines.extend(renderer(data))
            lines.append("")

        if not self.config.sections:
            lines.extend(["_No report sections configured._", ""])

        return "\n".join(lines).rstrip() + "\n"

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _executive_summary(self, data: RunData) -> List[str]:
        lines = ["## Executive Summary", ""]
        lines.append(
            f"- Trends collected: {data.trend_count} across "
            f"{len(data.trend_batches)} searches"
        )
        lines.append(f"- Products analyzed: {len(data.products)}")
        tracked = [c for c in data.competitors if c.ok]
        lines.append(
            f"- Competitors tracked: {len(tracked)} of {len(data.competitors)}"
        )
        if data.pricing:
            lines.append(
                f"- Average price: ${data.pricing.average} "
                f"({data.pricing.recommendation_tag})"
            )
        else:
            lines.append("- Average price: no pricing data")
        if data.insights and not data.insights.is_empty:
            top = list(data.insights.styles[:2]) + list(data.insights.themes[:2])
            lines.append(f"- Hot keywords: {', '.join(top) if top else 'colors only'}")
        return lines

    def _trending_topics(self, data: RunData) -> List[str]:
        lines = ["## Trending Topics", ""]
        if data.trend_count == 0:
            lines.append("_No trend data collected this run._")
            return lines

        insights = data.insights or TrendInsights()
        lines.append(f"- **Popular styles:** {', '.join(insights.styles) or 'none detected'}")
        lines.append(f"- **Trending colors:** {', '.join(insights.colors) or 'none detected'}")
        lines.append(f"- **Emerging themes:** {', '.join(insights.themes) or 'none detected'}")
        lines.append("")

        for batch in data.trend_batches:
            lines.append(f"### {batch.category} ({batch.count})")
            if not batch.trends:
                lines.append("_No results._")
            for trend in batch.trends[:TRENDS_PER_CATEGORY_IN_REPORT]:
                lines.append(f"- {trend.title}")
            lines.append("")
        return lines[:-1]

    def _competitor_activity(self, data: RunData) -> List[str]:
        lines = ["## Competitor Activity", ""]
        if not data.competitors:
            lines.append("_No competitor data collected this run._")
            return lines

        lines.append("| Shop | Sales | Rating | Listings | Joined |")
        lines.append("| --- | --- | --- | --- | --- |")
        for shop in data.competitors[: self.config.max_competitors]:
            if shop.ok:
                cells = [shop.name, shop.sales, shop.rating, shop.listing_count, shop.joined]
            else:
                cells = [shop.name, f"unavailable ({shop.error})", "", "", ""]
            lines.append("| " + " | ".join(_escape_cell(c) for c in cells) + " |")
        return lines

    def _opportunity_alerts(self, data: RunData) -> List[str]:
        lines = ["## Pricing & Opportunities", ""]
        if data.pricing is None:
            lines.append("_No pricing data collected this run._")
        else:
            p = data.pricing
            lines.append(f"- Sample size: {p.sample_size} listings")
            lines.append(f"- Average: ${p.average} (min ${p.min}, max ${p.max})")
            lines.append(f"- Positioning: {p.recommendation}")

        reviewed = sorted(
            (p for p in data.products if p.review_count > 0),
            key=lambda p: p.review_count,
            reverse=True,
        )[:TOP_PRODUCTS]
        if reviewed:
            lines.append("")
            lines.append("### Most reviewed listings")
            for product in reviewed:
                shop = f" by {product.shop_name}" if product.shop_name else ""
                lines.append(
                    f"- [{product.title}]({product.link}){shop}: "
                    f"${product.price:.2f}, {product.review_count} reviews"
                )
        return lines

    def _action_items(self, data: RunData) -> List[str]:
        lines = ["## Action Items", ""]
        items: List[str] = []

        if data.pricing:
            if data.pricing.recommendation_tag == LOW_PRICE:
                items.append("Test a premium bundle priced above the market average")
            elif data.pricing.recommendation_tag == HIGH_PRICE:
                items.append("Lean on quality and detail in listing photos and copy")
            else:
                items.append(
                    f"Keep prices near ${data.pricing.average} and compete on presentation"
                )

        if data.insights:
            for style in data.insights.styles[:2]:
                items.append(f"Draft a new design in the '{style}' style")
            for theme in data.insights.themes[:2]:
                items.append(f"Consider a '{theme}' themed collection")

        failed = [c.name for c in data.competitors if not c.ok]
        if failed:
            items.append(f"Check competitor shops manually: {', '.join(failed)}")

        if not items:
            items.append("Not enough data today - review scraper logs and rerun")

        lines.extend(f"- [ ] {item}" for item in items)
        return lines
