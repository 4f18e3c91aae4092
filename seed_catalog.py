#!/usr/bin/env python3
"""
Seed or prune the brand/model/generation catalog.

Loads a JSON file shaped like ``data/catalog.example.json`` (a list of
brands with nested models and generations).  Loading is idempotent:
rows that already exist are matched by name and not duplicated.

Usage:
    python seed_catalog.py data/catalog.example.json
    python seed_catalog.py --db ./carpost.db data/catalog.example.json
    python seed_catalog.py --delete-brand 3
"""

import argparse
import asyncio
import json
import logging
import os
import sys

from carpost_api.app.core.config import settings
from carpost_api.app.core.db import init_db
from carpost_api.app.core.logging_config import setup_logging
from carpost_api.app.services.catalog_service import CatalogService


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Seed the Carpost car catalog.")
    ap.add_argument("catalog", nargs="?", help="Path to a catalog JSON file")
    ap.add_argument("--db", help="SQLite DB path (overrides DATABASE_URL)")
    ap.add_argument("--delete-brand", type=int, metavar="ID", help="Delete a brand with its models and generations")
    args = ap.parse_args(argv)

    if not args.catalog and args.delete_brand is None:
        ap.error("either a catalog file or --delete-brand is required")

    setup_logging(settings.log_level)
    if args.db:
        settings.database_url = os.path.abspath(args.db)
    init_db()
    service = CatalogService()

    if args.delete_brand is not None:
        try:
            deleted = asyncio.run(service.delete_brand(args.delete_brand))
        except ValueError as exc:
            print(f"[!] {exc}", file=sys.stderr)
            return 2
        if not deleted:
            print(f"[!] Brand {args.delete_brand} not found", file=sys.stderr)
            return 1
        print(f"[+] Brand {args.delete_brand} deleted")

    if args.catalog:
        try:
            with open(args.catalog, "r", encoding="utf-8") as f:
                entries = json.load(f)
        except (OSError, ValueError) as exc:
            print(f"[!] Cannot read catalog {args.catalog}: {exc}", file=sys.stderr)
            return 1
        try:
            counts = asyncio.run(service.load_catalog(entries))
        except ValueError as exc:
            print(f"[!] Invalid catalog {args.catalog}: {exc}", file=sys.stderr)
            return 1
        logging.getLogger(__name__).info("Seeded from %s", args.catalog)
        print(
            f"[+] Inserted {counts['brands']} brand(s), {counts['models']} model(s), "
            f"{counts['generations']} generation(s)"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
