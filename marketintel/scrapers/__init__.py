"""Scraper system for collecting market signals from public pages.

This package provides:
- Record types shared by all adapters
- Base adapter classes with the throttled fetch path
- Site adapters for Pinterest trends and Etsy listings/shops
- Factory for creating adapters with shared dependencies
"""

from .base import (
    BaseAdapter,
    BaseHTTPAdapter,
    ProductRecord,
    ShopStats,
    TrendBatch,
    TrendRecord,
)
from .factory import AdapterFactory, build_default_factory

__all__ = [
    # Base classes
    "BaseAdapter",
    "BaseHTTPAdapter",
    # Data structures
    "ProductRecord",
    "ShopStats",
    "TrendBatch",
    "TrendRecord",
    # Factory
    "AdapterFactory",
    "build_default_factory",
]
