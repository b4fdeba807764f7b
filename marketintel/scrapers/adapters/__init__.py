"""Site adapters."""

from .etsy import EtsyAdapter
from .pinterest import PinterestAdapter

__all__ = ["EtsyAdapter", "PinterestAdapter"]
