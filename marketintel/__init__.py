"""Daily market intelligence collector for Pinterest trends and Etsy listings."""

__version__ = "1.0.0"
