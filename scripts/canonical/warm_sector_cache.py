"""
Warm the sector overview snapshot cache on demand.

Usage:
    python scripts/canonical/warm_sector_cache.py
    python scripts/canonical/warm_sector_cache.py --sector 12 --sector 40
    python scripts/canonical/warm_sector_cache.py --delay 0 --purge-only
"""
import sys
import os
sys.path.append(os.getcwd())

import argparse
import asyncio
import logging

from src.core.config import settings
from src.core.database import get_async_db
from src.dashboard.cache import purge_expired, set_cached_overview
from src.dashboard.client import XanoClient
from src.dashboard.service import fetch_sector_overview_raw
from src.dashboard.workflow import warm_sector_cache

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler(settings.logs_dir / "sector_warm.log", encoding="utf-8"),
    ],
)
logger = logging.getLogger(__name__)


async def warm_selected(sector_ids, token):
    async with XanoClient(token=token) as client:
        for sector_id in sector_ids:
            raw, widgets = await fetch_sector_overview_raw(client, sector_id)
            if not any(w.ok for w in widgets):
                logger.error(f"Sector {sector_id}: every widget failed, nothing cached")
                continue
            async with get_async_db() as session:
                await set_cached_overview(session, sector_id, raw)
            logger.info(f"Sector {sector_id}: cached ({sum(w.ok for w in widgets)}/{len(widgets)} widgets)")


async def run(sector_ids, delay, purge_only):
    token = settings.xano_service_token
    if not token:
        logger.warning("XANO_SERVICE_TOKEN not set, requests go out unauthenticated")

    if purge_only:
        async with get_async_db() as session:
            removed = await purge_expired(session)
        logger.info(f"Purged {removed} expired snapshots")
        return

    if sector_ids:
        await warm_selected(sector_ids, token)
        return

    async with XanoClient(token=token) as client:
        results = await warm_sector_cache(client, delay_seconds=delay)

    for result in results:
        print(f"  sector {result.sector_id:>6}  {result.status:<20} {result.ms}ms")


def main():
    parser = argparse.ArgumentParser(description="Warm sector overview snapshots")
    parser.add_argument(
        "--sector", type=int, action="append", dest="sectors",
        help="Warm only this sector id (repeatable)",
    )
    parser.add_argument(
        "--delay", type=float, default=settings.sector_warm_delay_seconds,
        help="Pause between sectors in seconds",
    )
    parser.add_argument(
        "--purge-only", action="store_true",
        help="Only delete expired snapshots",
    )
    args = parser.parse_args()

    asyncio.run(run(args.sectors, args.delay, args.purge_only))


if __name__ == "__main__":
    main()
