"""Main orchestrator: one full collection run.

Sequence: Pinterest trends -> Etsy products (de-duplicated) -> pricing ->
competitor shops -> report -> publish -> summary. Adapters absorb their
own fetch failures; rendering and publishing errors propagate to the
caller.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

import structlog

from marketintel.config import Settings
from marketintel.publishers.git_publisher import GitPublisher, PublishResult
from marketintel.scrapers.adapters.etsy import EtsyAdapter
from marketintel.scrapers.adapters.pinterest import PinterestAdapter
from marketintel.scrapers.base import ProductRecord
from marketintel.scrapers.factory import AdapterFactory, build_default_factory
from marketintel.services.price_analysis import PriceAnalyzer, dedupe_by_title
from marketintel.services.report_service import ReportGenerator, RunData
from marketintel.services.trend_analysis import TrendAnalyzer

logger = structlog.get_logger(__name__)


class IntelEngine:
    """Runs the collect -> aggregate -> render -> publish pipeline once."""

    def __init__(
        self,
        settings: Settings,
        factory: Optional[AdapterFactory] = None,
        publisher: Optional[GitPublisher] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize engine.

        Args:
            settings: Process settings
            factory: Adapter factory (defaults to Pinterest + Etsy)
            publisher: Report publisher (defaults to GitPublisher)
            clock: Returns the run start time (UTC); injectable for tests
        """
        self.settings = settings
        self.factory = factory or build_default_factory(settings)
        self.pinterest: PinterestAdapter = self.factory.create_adapter("pinterest")
        self.etsy: EtsyAdapter = self.factory.create_adapter("etsy")
        self.trend_analyzer = TrendAnalyzer(settings.keywords)
        self.price_analyzer = PriceAnalyzer(settings.pricing)
        self.reporter = ReportGenerator(settings.report)
        self.publisher = publisher or GitPublisher(settings)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger.bind(service="intel_engine")
        self.data = RunData(mode=settings.MODE)

    async def run(self) -> PublishResult:
        """Execute one full run.

        Returns:
            PublishResult of the report

        Raises:
            Exception: Rendering or publishing failures (never fetch failures)
        """
        self.data = RunData(mode=self.settings.MODE, started_at=self._clock())
        self.logger.info(
            "run_started",
            started_at=self.data.started_at.strftime("%Y-%m-%d %H:%M UTC"),
            mode=self.settings.MODE.upper(),
        )

        sources = self.settings.sources
        if sources.pinterest.enabled and self.pinterest:
            await self.gather_pinterest_data()

        if sources.etsy.enabled and self.etsy:
            await self.gather_etsy_data()

        report = self.reporter.generate(self.data)
        filename = self.reporter.get_filename(self.data.run_date)

        result = self.publisher.publish(report, filename, day=self.data.run_date)

        self.print_summary(result, filename)
        return result

    async def gather_pinterest_data(self) -> None:
        self.logger.info("gathering_pinterest_trends")

        boards = self.settings.sources.pinterest.trending_boards
        self.data.trend_batches = await self.pinterest.get_trending_boards(boards)
        if self.data.trend_count > 0:
            self.data.insights = self.trend_analyzer.analyze(self.data.trend_batches)

        self.logger.info("pinterest_trends_collected", count=self.data.trend_count)

    async def gather_etsy_data(self) -> None:
        self.logger.info("gathering_etsy_market_data")
        etsy_source = self.settings.sources.etsy

        all_products: List[ProductRecord] = []
        for category in etsy_source.categories:
            products = await self.etsy.search_products(category, etsy_source.product_limit)
            all_products.extend(products)

        self.data.products = dedupe_by_title(all_products)
        self.data.pricing = self.price_analyzer.analyze(self.data.products)

        if etsy_source.track_competitors:
            shops = self.settings.competitor_shops()
            self.data.competitors = await self.etsy.track_competitors(shops)

        self.logger.info(
            "etsy_products_collected",
            count=len(self.data.products),
            duplicates_dropped=len(all_products) - len(self.data.products),
        )

    def print_summary(self, result: PublishResult, filename: str) -> None:
        """Print the run summary to stdout."""
        print("\nSUMMARY")
        print("=" * 40)
        print(f"Report: {filename}")
        print(f"Status: {'SUCCESS' if result.success else 'FAILED'}")

        if result.published:
            print(f"Published: {result.url}")
        elif result.local_path:
            print(f"Saved: {result.local_path}")
        elif result.reason:
            print(f"Not published: {result.reason}")

        print("\nData Collected:")
        print(f"  - Pinterest trends: {self.data.trend_count}")
        print(f"  - Etsy products: {len(self.data.products)}")
        print(f"  - Competitors tracked: {len(self.data.competitors)}")
        print(f"  - Requests made: {self.factory.throttle.waits}")
