#!/usr/bin/env python3
"""
Reorder one collection by discount from the command line.
Cron example: 0 3 * * * cd /path/to/app && /path/to/venv/bin/python scripts/reorder_collection.py 123456789

This runs the reorder as a standalone script, not through the web server.
"""

import argparse
import asyncio
import json
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from discount_sorter.config import Settings
from discount_sorter.processor import CollectionLocks, run_reorder
from discount_sorter.shopify import ShopifyClient, ShopifyClientError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


async def main(collection_id: str) -> int:
    settings = Settings()

    missing = settings.missing_connection_settings()
    if missing:
        logger.error(f"Missing environment variables: {missing}")
        return 2

    logger.info(f"Starting reorder of {collection_id}...")

    async with ShopifyClient(
        settings.shop, settings.admin_token, api_version=settings.api_version
    ) as client:
        try:
            result = await run_reorder(client, collection_id, settings, CollectionLocks())
        except ShopifyClientError as e:
            logger.error(f"Reorder failed: {e}")
            return 1

    print(json.dumps({
        "ok": result.ok,
        "moved": result.moved,
        "sortOrderChanged": result.sort_order_changed,
        "errors": [e.model_dump() for e in result.errors],
        "job": result.job_id,
        "message": result.message,
    }, indent=2))

    return 0 if result.ok else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("collection_id", help="Collection GID or numeric id")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.collection_id)))
