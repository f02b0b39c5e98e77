"""
Download Scryfall card database.

Run this job to refresh the card data the version catalog is built from.
"""

import asyncio
import logging

from decksmith.services.card_database import (
    download_card_database,
    get_card_catalog,
    get_platform_catalog,
)

logger = logging.getLogger(__name__)


async def run_download() -> None:
    """Download the Scryfall card database and drop the cached catalog."""
    logger.info("Downloading Scryfall card database...")

    try:
        path = await download_card_database()
        logger.info("Downloaded card database to %s", path)
    except Exception as e:
        logger.error("Failed to download card database: %s", e)
        raise

    get_card_catalog.cache_clear()
    get_platform_catalog.cache_clear()


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_download())


if __name__ == "__main__":
    main()
