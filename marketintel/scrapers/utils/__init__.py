"""Scraper utilities: throttling, headers, normalization, selectors."""

from .normalizer import PriceNormalizer, absolutize_url, extract_count, truncate
from .rate_limiter import PolitenessThrottle
from .selectors import Attr, Text, first_non_empty
from .user_agents import browser_headers

__all__ = [
    "PriceNormalizer",
    "absolutize_url",
    "extract_count",
    "truncate",
    "PolitenessThrottle",
    "Attr",
    "Text",
    "first_non_empty",
    "browser_headers",
]
