"""Manual scraper runner for testing and debugging adapters.

This script runs a single adapter call and prints what it extracted, which
is the quickest way to check selectors after a site changes its markup.

Usage:
    python scripts/run_scraper.py --source pinterest --query "kawaii art"
    python scripts/run_scraper.py --source etsy --query "coloring book" --limit 5
    python scripts/run_scraper.py --source shop --query Mythographic
"""

import argparse
import asyncio
import os
import sys

# Add project root to path so we can import marketintel without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from marketintel.config import get_settings
from marketintel.core.logging import configure_logging
from marketintel.scrapers.factory import build_default_factory

SOURCES = ("pinterest", "etsy", "shop")


async def run_scraper(source: str, query: str, limit: int = 10) -> int:
    """Run one adapter call and display the results.

    Args:
        source: "pinterest", "etsy" or "shop"
        query: Search phrase, or shop name for "shop"
        limit: Maximum number of products (etsy only)

    Returns:
        Number of records found
    """
    settings = get_settings()
    factory = build_default_factory(settings)

    print(f"\n{'='*70}")
    print(f"  Running {source.upper()} scraper: {query!r}")
    print(f"{'='*70}\n")

    if source == "pinterest":
        adapter = factory.create_adapter("pinterest")
        trends = await adapter.search_trends(query)
        if not trends:
            print("No trends found.\n")
            return 0
        for i, trend in enumerate(trends, 1):
            print(f"[{i}] {trend.title}")
            if trend.image_url:
                print(f"    Image: {trend.image_url[:80]}")
        print(f"\nTotal: {len(trends)}\n")
        return len(trends)

    adapter = factory.create_adapter("etsy")

    if source == "shop":
        stats = await adapter.analyze_shop(query)
        if not stats.ok:
            print(f"Shop analysis failed: {stats.error}\n")
            return 0
        print(f"  Sales:    {stats.sales}")
        print(f"  Rating:   {stats.rating}")
        print(f"  Listings: {stats.listing_count}")
        print(f"  Joined:   {stats.joined}\n")
        return 1

    products = await adapter.search_products(query, limit)
    if not products:
        print("No products found.\n")
        return 0

    for i, product in enumerate(products, 1):
        print(f"[{i}] {product.title}")
        print(f"    Price: ${product.price:.2f} {product.currency}")
        if product.shop_name:
            print(f"    Shop: {product.shop_name}")
        print(f"    Reviews: {product.review_count}")
        print(f"    URL: {product.link[:80]}")
        print()

    priced = [p.price for p in products if p.price > 0]
    print(f"{'='*70}")
    print(f"  Total products: {len(products)}")
    if priced:
        print(f"  Avg price: ${sum(priced) / len(priced):.2f}")
    print(f"{'='*70}\n")
    return len(products)


def main():
    parser = argparse.ArgumentParser(description="Run a single scraper adapter manually")
    parser.add_argument("--source", required=True, choices=SOURCES)
    parser.add_argument("--query", required=True, help="Search phrase or shop name")
    parser.add_argument("--limit", type=int, default=10, help="Max products (etsy)")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    configure_logging(args.log_level)
    asyncio.run(run_scraper(args.source, args.query, args.limit))


if __name__ == "__main__":
    main()
