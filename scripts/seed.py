#!/usr/bin/env python3
"""Seed script for the booking core data directory."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from matchtrip.core.exceptions import ConflictError  # noqa: E402
from matchtrip.core.pricing_config import DEFAULT_BASE_PRICES  # noqa: E402
from matchtrip.core.storage import create_store, init_collections  # noqa: E402
from matchtrip.repositories import AdminRepository, StartingPriceRepository  # noqa: E402
from matchtrip.schemas.starting_price import UpsertStartingPriceRequest  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PACKAGE_DESCRIPTIONS = {
    "standard": "Return flights, 3-star hotel and a match ticket",
    "premium": "Return flights, 4-star hotel and premium match seats",
}


async def seed_starting_prices(store) -> None:
    """Store the default price table for every sport that has no row yet."""
    repository = StartingPriceRepository(store)
    existing = {row.sport for row in await repository.list()}

    for sport, prices in DEFAULT_BASE_PRICES.items():
        if sport in existing:
            logger.info("Starting price for %s already present, skipping", sport.value)
            continue
        await repository.upsert(UpsertStartingPriceRequest(
            sport=sport,
            standard_description=PACKAGE_DESCRIPTIONS["standard"],
            premium_description=PACKAGE_DESCRIPTIONS["premium"],
            prices_by_duration=dict(prices),
        ))
        logger.info("Seeded starting price for %s", sport.value)


async def seed_admin(store, email: str, password: str) -> None:
    try:
        await AdminRepository(store).create_admin(email, password)
        logger.info("Created admin %s", email)
    except ConflictError:
        logger.info("Admin %s already exists, skipping", email)


async def main(args: argparse.Namespace) -> None:
    """Main seed function."""
    store = create_store()
    logger.info("Seeding data directory %s", store.data_dir)

    await init_collections(store)

    if not args.skip_prices:
        await seed_starting_prices(store)

    password = args.admin_password or os.environ.get("ADMIN_PASSWORD")
    if args.admin_email and password:
        await seed_admin(store, args.admin_email, password)
    elif args.admin_email:
        logger.warning("No admin password given (--admin-password or ADMIN_PASSWORD), admin not created")

    logger.info("Seed completed. Start the API with: cd server && uvicorn matchtrip.main:app --reload")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialise the booking core data directory")
    parser.add_argument("--admin-email", help="Create an admin with this email")
    parser.add_argument("--admin-password", help="Password for --admin-email (or set ADMIN_PASSWORD)")
    parser.add_argument("--skip-prices", action="store_true", help="Do not seed the default starting prices")
    return parser.parse_args()


if __name__ == "__main__":
    asyncio.run(main(parse_args()))
