"""Base scraper adapter interface and scraped record types.

Every site adapter inherits from BaseHTTPAdapter, which owns the single
GET-then-throttle fetch path. Adapters expose the narrow
``fetch_and_extract(query)`` interface so orchestration code never touches
markup.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import httpx
import structlog

from marketintel.config import Settings
from marketintel.scrapers.utils.rate_limiter import PolitenessThrottle

TITLE_MAX_LENGTH = 100
SHOP_NAME_MAX_LENGTH = 50
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class TrendRecord:
    """A popular image/topic found for a search phrase."""

    title: str
    image_url: Optional[str] = None
    source: str = "pinterest"

    def __post_init__(self):
        if not self.title:
            raise ValueError("title is required")
        if len(self.title) > TITLE_MAX_LENGTH:
            raise ValueError(f"title exceeds {TITLE_MAX_LENGTH} characters")


@dataclass(frozen=True)
class TrendBatch:
    """Trend records collected for one search phrase."""

    category: str
    trends: Sequence[TrendRecord] = ()

    @property
    def count(self) -> int:
        return len(self.trends)


@dataclass(frozen=True)
class ProductRecord:
    """A marketplace listing with price, shop and review metadata."""

    title: str
    price: float
    link: str
    shop_name: str = ""
    review_count: int = 0
    currency: str = "USD"
    source: str = "etsy"

    def __post_init__(self):
        if not self.title:
            raise ValueError("title is required")
        if len(self.title) > TITLE_MAX_LENGTH:
            raise ValueError(f"title exceeds {TITLE_MAX_LENGTH} characters")
        if len(self.shop_name) > SHOP_NAME_MAX_LENGTH:
            raise ValueError(f"shop_name exceeds {SHOP_NAME_MAX_LENGTH} characters")
        if self.price is None or self.price < 0:
            raise ValueError("price must be non-negative")
        if self.review_count < 0:
            raise ValueError("review_count must be non-negative")


@dataclass
class ShopStats:
    """Free-text stats for a competitor shop.

    Fields that could not be resolved hold "N/A". ``error`` is set only when
    the shop page could not be fetched at all.
    """

    name: str
    sales: str = NOT_AVAILABLE
    rating: str = NOT_AVAILABLE
    listing_count: str = NOT_AVAILABLE
    joined: str = NOT_AVAILABLE
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BaseAdapter(ABC):
    """Abstract base class for all site adapters."""

    source_slug: str = ""  # Must be overridden in subclass (e.g., "etsy")
    source_name: str = ""

    def __init__(self, settings: Settings, throttle: PolitenessThrottle):
        self.settings = settings
        self.throttle = throttle
        self.logger = structlog.get_logger(adapter=self.source_slug)

    @abstractmethod
    async def fetch_and_extract(self, query: str) -> List:
        """Fetch the search page for a query and return extracted records.

        Never raises for network or markup problems; returns an empty list.
        """


class BaseHTTPAdapter(BaseAdapter):
    """Base class for adapters that read server-rendered HTML over httpx."""

    origin: str = ""

    def __init__(
        self,
        settings: Settings,
        throttle: PolitenessThrottle,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize HTTP adapter.

        Args:
            settings: Process settings (timeout, user agent)
            throttle: Shared politeness throttle
            transport: Optional httpx transport, used by tests to fake sites
        """
        super().__init__(settings, throttle)
        self._transport = transport
        self._timeout = settings.REQUEST_TIMEOUT_SECONDS

    async def _fetch_html(self, url: str, headers: Dict[str, str]) -> str:
        """GET a page and return its body, then wait out the throttle.

        The throttle runs whether the request succeeded or not.

        Raises:
            httpx.HTTPError: On connection errors, timeouts or non-2xx status
        """
        self.logger.debug("fetching_url", url=url)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
                return response.text
        finally:
            await self.throttle.wait()
