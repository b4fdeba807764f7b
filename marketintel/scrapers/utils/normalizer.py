"""Data normalization utilities for scraped text fields."""

import re
from typing import Optional

_NON_PRICE_CHARS = re.compile(r"[^\d.]")
_FIRST_NUMBER = re.compile(r"\d+")
_LEADING_FLOAT = re.compile(r"\d+(?:\.\d+)?|\.\d+")


class PriceNormalizer:
    """Price parsing for marketplace listings.

    Prices are kept as floats in USD; listings never carry another
    currency in the pages we read.
    """

    @staticmethod
    def clean_price_string(raw: Optional[str]) -> float:
        """Parse a price string, defaulting to 0.0.

        Handles:
        - "$12.99" -> 12.99
        - "USD 1,234.50" -> 1234.5
        - "" / None / "free" -> 0.0
        - "1.2.3" -> 1.2 (leading number wins)
        - "." -> 0.0

        Args:
            raw: Raw price text or attribute value

        Returns:
            Non-negative float price
        """
        if not raw:
            return 0.0

        cleaned = _NON_PRICE_CHARS.sub("", raw)
        if not cleaned:
            return 0.0

        match = _LEADING_FLOAT.match(cleaned)
        if not match:
            return 0.0
        value = float(match.group(0))
        return value if value > 0 else 0.0


def extract_count(text: Optional[str]) -> int:
    """Return the first run of digits in text as an int, or 0."""
    if not text:
        return 0
    match = _FIRST_NUMBER.search(text)
    return int(match.group(0)) if match else 0


def absolutize_url(href: Optional[str], origin: str) -> str:
    """Prefix relative links with the site origin.

    Args:
        href: Link as found in the markup (may be empty)
        origin: Site origin without trailing slash, e.g. "https://etsy.com"

    Returns:
        Absolute URL string
    """
    href = (href or "").strip()
    if href.startswith("http"):
        return href
    if href.startswith("//"):
        return f"https:{href}"
    return f"{origin}{href}"


def truncate(text: Optional[str], limit: int) -> str:
    """Strip and cut text to at most ``limit`` characters."""
    return (text or "").strip()[:limit]
