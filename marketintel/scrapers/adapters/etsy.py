"""Etsy market scraper adapter.

Searches listings, reads competitor shop pages and tracks competitor
shops. Etsy markup varies between A/B variants, so each field is resolved
through an ordered list of selectors (see FIELD_SELECTORS).

Structure: [data-listing-id]
  - h3 / .title / [data-title] (title)
  - .currency-value / [data-price] (price)
  - .shop-name / [data-shop] (shop name)
  - .reviews (review count text)
  - a[href] (listing link, often relative)
"""

from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

from bs4 import BeautifulSoup, Tag
import httpx
import structlog

from marketintel.scrapers.base import (
    BaseHTTPAdapter,
    NOT_AVAILABLE,
    ProductRecord,
    SHOP_NAME_MAX_LENGTH,
    ShopStats,
    TITLE_MAX_LENGTH,
)
from marketintel.scrapers.utils.normalizer import (
    PriceNormalizer,
    absolutize_url,
    extract_count,
    truncate,
)
from marketintel.scrapers.utils.selectors import Attr, Strategy, Text, first_non_empty
from marketintel.scrapers.utils.user_agents import browser_headers


logger = structlog.get_logger()

SEARCH_URL = "https://www.etsy.com/search?q={query}"
SHOP_URL = "https://www.etsy.com/shop/{shop}"
LISTING_SELECTOR = "[data-listing-id]"

# Listing fields, tried in order
FIELD_SELECTORS: Dict[str, Tuple[Strategy, ...]] = {
    "title": (Text("h3"), Text(".title"), Attr("[data-title]", "data-title")),
    "price": (Text(".currency-value"), Attr("[data-price]", "data-price")),
    "link": (Attr("a", "href"),),
    "shop": (Text(".shop-name"), Attr("[data-shop]", "data-shop")),
    "reviews": (Text(".reviews"),),
}

# Shop page fields, tried in order
SHOP_SELECTORS: Dict[str, Tuple[Strategy, ...]] = {
    "sales": (Text(".shop-sales"), Attr("[data-sales]", "data-sales")),
    "rating": (Attr(".stars-svg", "aria-label"), Text(".rating")),
    "listing_count": (Text(".listing-count"),),
    "joined": (Text(".shop-open-date"),),
}


class EtsyAdapter(BaseHTTPAdapter):
    """Etsy search and shop page adapter."""

    source_slug = "etsy"
    source_name = "Etsy"
    origin = "https://etsy.com"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.logger = logger.bind(adapter=self.source_slug)

    async def fetch_and_extract(self, query: str) -> List[ProductRecord]:
        return await self.search_products(query, self.settings.sources.etsy.product_limit)

    async def search_products(self, query: str, limit: int = 10) -> List[ProductRecord]:
        """Search listings for a phrase.

        Args:
            query: Search phrase (e.g., "coloring book")
            limit: Maximum number of products to return

        Returns:
            Up to ``limit`` products in page order; empty on any failure
        """
        url = SEARCH_URL.format(query=quote(query, safe=""))
        self.logger.info("searching_etsy", query=query, limit=limit)

        try:
            html = await self._fetch_html(url, browser_headers(self.settings.USER_AGENT))
            products = self.parse_products(html, limit)
        except httpx.HTTPError as e:
            self.logger.error("etsy_search_failed", query=query, error=str(e))
            return []
        except Exception as e:
            self.logger.error("etsy_parse_failed", query=query, error=str(e))
            return []

        self.logger.info("etsy_products_found", query=query, count=len(products))
        return products

    def parse_products(self, html: str, limit: int) -> List[ProductRecord]:
        """Extract product records from a search results page."""
        if limit <= 0:
            return []

        soup = BeautifulSoup(html, "html.parser")
        listings = soup.select(LISTING_SELECTOR)
        self.logger.debug("etsy_listings_found", count=len(listings))

        products: List[ProductRecord] = []
        for listing in listings:
            product = self._parse_listing(listing)
            if product:
                products.append(product)
                if len(products) >= limit:
                    break
        return products

    def _parse_listing(self, listing: Tag) -> Optional[ProductRecord]:
        """Parse one listing container; None when it has no title."""
        title = first_non_empty(listing, FIELD_SELECTORS["title"])
        if not title:
            return None

        price_text = first_non_empty(listing, FIELD_SELECTORS["price"], default="")
        href = first_non_empty(listing, FIELD_SELECTORS["link"], default="")
        shop = first_non_empty(listing, FIELD_SELECTORS["shop"], default="")
        reviews = first_non_empty(listing, FIELD_SELECTORS["reviews"], default="")

        return ProductRecord(
            title=truncate(title, TITLE_MAX_LENGTH),
            price=PriceNormalizer.clean_price_string(price_text),
            link=absolutize_url(href, self.origin),
            shop_name=truncate(shop, SHOP_NAME_MAX_LENGTH),
            review_count=extract_count(reviews),
            source=self.source_slug,
        )

    async def analyze_shop(self, shop_name: str) -> ShopStats:
        """Read the public stats of one shop.

        Args:
            shop_name: Etsy shop identifier

        Returns:
            ShopStats; fields default to "N/A", ``error`` is set when the
            page could not be fetched
        """
        url = SHOP_URL.format(shop=quote(shop_name, safe=""))
        self.logger.info("analyzing_shop", shop=shop_name)

        try:
            html = await self._fetch_html(
                url, browser_headers(self.settings.USER_AGENT, full=False)
            )
            return self.parse_shop(shop_name, html)
        except httpx.HTTPError as e:
            self.logger.error("shop_analysis_failed", shop=shop_name, error=str(e))
            return ShopStats(name=shop_name, error=str(e) or type(e).__name__)
        except Exception as e:
            self.logger.error("shop_parse_failed", shop=shop_name, error=str(e))
            return ShopStats(name=shop_name, error=str(e) or type(e).__name__)

    def parse_shop(self, shop_name: str, html: str) -> ShopStats:
        """Extract shop stats from a shop page."""
        soup = BeautifulSoup(html, "html.parser")
        fields = {
            name: first_non_empty(soup, strategies, default=NOT_AVAILABLE)
            for name, strategies in SHOP_SELECTORS.items()
        }
        return ShopStats(name=shop_name, **fields)

    async def track_competitors(self, shops: Sequence[str]) -> List[ShopStats]:
        """Analyze competitor shops one after another.

        At most ``report.max_competitors`` shops are fetched.
        """
        limit = self.settings.report.max_competitors
        if len(shops) > limit:
            self.logger.info("competitors_capped", requested=len(shops), limit=limit)

        results: List[ShopStats] = []
        for shop in list(shops)[:limit]:
            results.append(await self.analyze_shop(shop))
        return results
