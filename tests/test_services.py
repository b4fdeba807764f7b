"""Tests for aggregation and report services.

Tests cover:
- Trend keyword tagging
- Product de-duplication and pricing summary
- Markdown report rendering and file naming
"""

from datetime import date, datetime, timezone

import pytest

from marketintel.config import KeywordVocabulary, PricingRules, ReportConfig
from marketintel.scrapers.base import ProductRecord, ShopStats, TrendBatch, TrendRecord
from marketintel.services.price_analysis import PriceAnalyzer, dedupe_by_title
from marketintel.services.report_service import ReportGenerator, RunData
from marketintel.services.trend_analysis import TrendAnalyzer, TrendInsights, match_keywords


def product(title: str, price: float, reviews: int = 0, shop: str = "") -> ProductRecord:
    return ProductRecord(
        title=title,
        price=price,
        link=f"https://etsy.com/listing/{abs(hash(title))}",
        shop_name=shop,
        review_count=reviews,
    )


def batch(category: str, *titles: str) -> TrendBatch:
    return TrendBatch(category=category, trends=tuple(TrendRecord(title=t) for t in titles))


# ============================================================================
# TESTS: TREND ANALYSIS
# ============================================================================

class TestTrendAnalyzer:
    """Tests for fixed-vocabulary keyword tagging."""

    def test_case_insensitive_match(self):
        insights = TrendAnalyzer(KeywordVocabulary()).analyze([batch("art", "KAWAII Art stickers")])
        assert insights.styles == ("kawaii",)

    def test_matches_across_batches_in_vocabulary_order(self):
        batches = [
            batch("a", "Boho flowers wall art", "Pastel unicorn"),
            batch("b", "Vintage ANIMALS coloring", "Neon anime poster"),
        ]

        insights = TrendAnalyzer(KeywordVocabulary()).analyze(batches)

        assert insights.styles == ("anime", "vintage", "boho")
        assert insights.colors == ("pastel", "neon")
        assert insights.themes == ("animals", "flowers")

    def test_no_matches(self):
        insights = TrendAnalyzer(KeywordVocabulary()).analyze([batch("a", "Plain wooden table")])
        assert insights.is_empty

    def test_empty_input(self):
        assert TrendAnalyzer(KeywordVocabulary()).analyze([]) == TrendInsights()

    def test_custom_vocabulary(self):
        vocabulary = KeywordVocabulary(styles=["Cottagecore"], colors=[], themes=[])
        insights = TrendAnalyzer(vocabulary).analyze([batch("a", "cottagecore mushrooms")])
        assert insights.styles == ("Cottagecore",)

    def test_match_keywords_deduplicates(self):
        assert match_keywords("neon neon", ["neon", "neon"]) == ("neon",)


# ============================================================================
# TESTS: PRICE ANALYSIS
# ============================================================================

class TestDedupe:
    """Tests for title de-duplication."""

    def test_first_occurrence_wins(self):
        products = [
            product("Same title", 3.0, shop="First"),
            product("Other", 4.0),
            product("Same title", 9.0, shop="Second"),
        ]

        unique = dedupe_by_title(products)

        assert [p.title for p in unique] == ["Same title", "Other"]
        assert unique[0].shop_name == "First"
        assert len({p.title for p in unique}) == len(unique)


class TestPriceAnalyzer:
    """Tests for pricing summary and recommendation tiers."""

    @pytest.mark.parametrize(
        "mean,tag",
        [
            (4.99, "low-price"),
            (4.996, "low-price"),
            (5.00, "mid-range"),
            (15.00, "mid-range"),
            (15.004, "high-price"),
            (15.01, "high-price"),
        ],
    )
    def test_recommendation_boundaries(self, mean, tag):
        summary = PriceAnalyzer(PricingRules()).analyze([product("Only", mean)])
        assert summary.recommendation_tag == tag

    def test_tag_uses_unrounded_mean(self):
        summary = PriceAnalyzer(PricingRules()).analyze([product("Only", 4.996)])

        assert summary.average == "5.00"
        assert summary.recommendation_tag == "low-price"

    def test_summary_statistics(self):
        products = [product("a", 2.0), product("b", 4.0), product("c", 9.0), product("free", 0.0)]

        summary = PriceAnalyzer(PricingRules()).analyze(products)

        assert summary.average == "5.00"
        assert summary.min == "2.00"
        assert summary.max == "9.00"
        assert summary.sample_size == 3
        assert summary.recommendation == "Mid-range pricing - competitive zone"
        assert float(summary.min) <= float(summary.average) <= float(summary.max)

    def test_no_positive_prices(self):
        analyzer = PriceAnalyzer(PricingRules())
        assert analyzer.analyze([]) is None
        assert analyzer.analyze([product("free", 0.0)]) is None

    def test_custom_thresholds(self):
        summary = PriceAnalyzer(PricingRules(low_threshold=1, high_threshold=3)).analyze(
            [product("a", 4.0)]
        )
        assert summary.recommendation_tag == "high-price"

    def test_thresholds_must_be_ordered(self):
        with pytest.raises(ValueError):
            PricingRules(low_threshold=20, high_threshold=10)


# ============================================================================
# TESTS: REPORT
# ============================================================================

RUN_AT = datetime(2026, 10, 19, 6, 0, tzinfo=timezone.utc)


class TestReportGenerator:
    """Tests for Markdown rendering."""

    def test_filename_depends_only_on_date(self):
        assert ReportGenerator.get_filename(date(2026, 10, 19)) == "intel-report-2026-10-19.md"
        assert ReportGenerator.get_filename(date(2026, 10, 19)) == ReportGenerator.get_filename(
            date(2026, 10, 19)
        )
        assert ReportGenerator.get_filename(date(2026, 10, 20)) != "intel-report-2026-10-19.md"

    def test_empty_run_renders_every_section(self):
        report = ReportGenerator(ReportConfig()).generate(RunData(started_at=RUN_AT))

        assert report.startswith("# Daily Market Intel Report - 2026-10-19")
        for heading in (
            "## Executive Summary",
            "## Trending Topics",
            "## Competitor Activity",
            "## Pricing & Opportunities",
            "## Action Items",
        ):
            assert heading in report
        assert "_No trend data collected this run._" in report
        assert "_No competitor data collected this run._" in report
        assert "_No pricing data collected this run._" in report
        assert "Not enough data today" in report

    def test_sections_follow_config_order(self):
        config = ReportConfig(sections=["action-items", "executive-summary"])
        report = ReportGenerator(config).generate(RunData(started_at=RUN_AT))

        assert report.index("## Action Items") < report.index("## Executive Summary")
        assert "## Trending Topics" not in report

    def test_unknown_section_skipped(self):
        config = ReportConfig(sections=["executive-summary", "weather"])
        report = ReportGenerator(config).generate(RunData(started_at=RUN_AT))
        assert "## Executive Summary" in report

    def test_no_sections_configured(self):
        report = ReportGenerator(ReportConfig(sections=[])).generate(RunData(started_at=RUN_AT))
        assert "_No report sections configured._" in report

    def test_full_report_content(self):
        products = [product("Kawaii Book", 4.5, reviews=87, shop="CuteShop"), product("Mandala", 0.0)]
        data = RunData(
            mode="production",
            started_at=RUN_AT,
            trend_batches=[batch("kawaii art", "KAWAII Art cat", "Pastel fantasy"), batch("empty")],
            insights=TrendInsights(styles=("kawaii",), colors=("pastel",), themes=("fantasy",)),
            products=products,
            pricing=PriceAnalyzer(PricingRules()).analyze(products),
            competitors=[
                ShopStats(name="Mythographic", sales="12,345 Sales", rating="4.9"),
                ShopStats(name="GoneShop", error="timeout"),
            ],
        )

        report = ReportGenerator(ReportConfig()).generate(data)

        assert "in production mode" in report
        assert "- Trends collected: 2 across 2 searches" in report
        assert "- **Popular styles:** kawaii" in report
        assert "### empty (0)" in report
        assert "| Mythographic | 12,345 Sales | 4.9 | N/A | N/A |" in report
        assert "unavailable (timeout)" in report
        assert "Low price point - consider premium positioning" in report
        assert "[Kawaii Book](" in report
        assert "Test a premium bundle" in report
        assert "Draft a new design in the 'kawaii' style" in report
        assert "Check competitor shops manually: GoneShop" in report

    def test_pipes_escaped_in_table(self):
        data = RunData(started_at=RUN_AT, competitors=[ShopStats(name="A|B")])
        report = ReportGenerator(ReportConfig()).generate(data)
        assert "A\\|B" in report
