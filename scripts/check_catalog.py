#!/usr/bin/env python3
"""Smoke-check a deployed catalog API.

Usage:
    python scripts/check_catalog.py [--limit 12]

Reads APP_URL from the environment (or .env).
"""
import os
import sys
import httpx
from dotenv import load_dotenv

load_dotenv()


def main():
    app_url = os.environ.get("APP_URL", "").rstrip("/")
    if not app_url:
        print("Error: APP_URL not set")
        sys.exit(1)

    limit = 12
    if "--limit" in sys.argv:
        limit = int(sys.argv[sys.argv.index("--limit") + 1])

    health = httpx.get(f"{app_url}/api/health", timeout=10.0)
    print(f"health: {health.status_code} {health.json()}")

    resp = httpx.get(
        f"{app_url}/api/products",
        params={"sort": "newest", "limit": limit, "include": "images,variants"},
        timeout=30.0,
    )
    if resp.status_code != 200:
        print(f"Error: {resp.status_code} {resp.text[:200]}")
        sys.exit(1)

    data = resp.json()
    items = data["items"]
    print(f"total count: {data['meta']['total']}")
    print(f"returned rows: {len(items)}")
    if items:
        p = items[0]
        print(f"First product: {p['slug']} | {p['title']} | price: {p['price']}")
        print(f"  images count: {len(p.get('images') or [])}")
        if p.get("images"):
            print(f"  first image: {p['images'][0]['url'][:90]}")
        print(f"  variants count: {len(p.get('variants') or [])}")

    facets = data.get("facets") or {}
    print(
        f"facets: {len(facets.get('sizes', []))} sizes, "
        f"{len(facets.get('colors', []))} colors, price {facets.get('price')}"
    )


if __name__ == "__main__":
    main()
