"""Services module for aggregation and reporting.

Services turn scraped records into the statistics and the Markdown
document that one run publishes. They never perform network I/O.
"""

from marketintel.services.price_analysis import PriceAnalyzer, PricingSummary, dedupe_by_title
from marketintel.services.report_service import ReportGenerator, RunData
from marketintel.services.trend_analysis import TrendAnalyzer, TrendInsights

__all__ = [
    "PriceAnalyzer",
    "PricingSummary",
    "dedupe_by_title",
    "ReportGenerator",
    "RunData",
    "TrendAnalyzer",
    "TrendInsights",
]
