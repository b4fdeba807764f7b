"""Pinterest trend scraper adapter.

Reads the server-rendered part of Pinterest's pin search page. Most of the
page is built by JavaScript, so only the images present in the initial
HTML are visible; their alt text is used as the trend title.

Structure: img[alt][src]
  - alt: pin description (the trend title)
  - src: pin image (avatars are skipped)
"""

from typing import List, Sequence
from urllib.parse import quote

from bs4 import BeautifulSoup
import httpx
import structlog

from marketintel.scrapers.base import (
    BaseHTTPAdapter,
    TITLE_MAX_LENGTH,
    TrendBatch,
    TrendRecord,
)
from marketintel.scrapers.utils.user_agents import browser_headers


logger = structlog.get_logger()

SEARCH_URL = "https://www.pinterest.com/search/pins/?q={query}"

# Alt text must be longer than this to count as a description
MIN_ALT_LENGTH = 5

# Images whose src contains any of these are profile pictures, not pins
SKIP_SRC_MARKERS = ("avatar",)


class PinterestAdapter(BaseHTTPAdapter):
    """Pinterest pin search adapter."""

    source_slug = "pinterest"
    source_name = "Pinterest"
    origin = "https://www.pinterest.com"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.logger = logger.bind(adapter=self.source_slug)
        self.max_results = self.settings.report.max_trends

    async def fetch_and_extract(self, query: str) -> List[TrendRecord]:
        return await self.search_trends(query)

    async def search_trends(self, query: str) -> List[TrendRecord]:
        """Search pins for a phrase and return up to ``max_results`` trends.

        Args:
            query: Search phrase (e.g., "kawaii art")

        Returns:
            Trend records in page order; empty on any failure
        """
        url = SEARCH_URL.format(query=quote(query, safe=""))
        self.logger.info("searching_pinterest", query=query)

        try:
            html = await self._fetch_html(url, browser_headers(self.settings.USER_AGENT))
            trends = self.parse_trends(html)
        except httpx.HTTPError as e:
            self.logger.error("pinterest_search_failed", query=query, error=str(e))
            return []
        except Exception as e:
            self.logger.error("pinterest_parse_failed", query=query, error=str(e))
            return []

        self.logger.info("pinterest_trends_found", query=query, count=len(trends))
        return trends

    def parse_trends(self, html: str) -> List[TrendRecord]:
        """Extract trend records from a search results page."""
        soup = BeautifulSoup(html, "html.parser")
        trends: List[TrendRecord] = []

        for img in soup.find_all("img"):
            alt = img.get("alt")
            src = img.get("src")
            if not alt or len(alt) <= MIN_ALT_LENGTH:
                continue
            if src and any(marker in src for marker in SKIP_SRC_MARKERS):
                continue

            trends.append(
                TrendRecord(
                    title=alt[:TITLE_MAX_LENGTH],
                    image_url=src,
                    source=self.source_slug,
                )
            )
            if len(trends) >= self.max_results:
                break

        return trends

    async def get_trending_boards(self, boards: Sequence[str]) -> List[TrendBatch]:
        """Search every board phrase in order.

        Args:
            boards: Board/search phrases from settings

        Returns:
            One TrendBatch per phrase, including empty ones
        """
        batches: List[TrendBatch] = []
        for board in boards:
            trends = await self.search_trends(board)
            batches.append(TrendBatch(category=board, trends=tuple(trends)))
        return batches
