"""
Sector cache warming.

Walks every primary sector and refreshes its overview snapshot, one sector at
a time with a short pause between sectors. A failing sector is recorded and
skipped.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from src.core.config import settings
from src.core.database import get_async_db
from src.dashboard.cache import purge_expired, set_cached_overview
from src.dashboard.client import XanoClient, XanoError
from src.dashboard.service import fetch_sector_overview_raw
from src.normalization.coercers import coerce_int
from src.normalization.extract import as_record

logger = logging.getLogger(__name__)


@dataclass
class WarmResult:
    sector_id: int
    status: str
    ms: int


def extract_sector_ids(raw: Any) -> List[int]:
    """Sector ids from a list, ``sectors`` or ``items``; each row's ``id`` or ``Sector_id``."""
    if isinstance(raw, list):
        rows = raw
    else:
        record = as_record(raw) or {}
        rows = record.get("sectors") or record.get("items") or []
    ids = []
    for row in rows if isinstance(rows, list) else []:
        row = as_record(row)
        if row is None:
            continue
        sector_id = coerce_int(row.get("id")) or coerce_int(row.get("Sector_id"))
        if sector_id:
            ids.append(sector_id)
    return ids


async def warm_sector_cache(
    client: XanoClient,
    delay_seconds: Optional[float] = None,
    session_scope: Callable = get_async_db,
) -> List[WarmResult]:
    """Refresh the overview snapshot of every primary sector."""
    delay = settings.sector_warm_delay_seconds if delay_seconds is None else delay_seconds

    try:
        sector_ids = extract_sector_ids(await client.get_primary_sectors())
    except XanoError as e:
        logger.error(f"Failed to fetch sector list: {e}")
        return []

    if not sector_ids:
        logger.warning("No sectors found to warm")
        return []

    logger.info(f"Starting cache warm for {len(sector_ids)} sectors")
    results: List[WarmResult] = []
    started_all = time.perf_counter()

    for index, sector_id in enumerate(sector_ids):
        started = time.perf_counter()
        try:
            raw, widgets = await fetch_sector_overview_raw(client, sector_id)
            ok = [w for w in widgets if w.ok]
            if ok:
                async with session_scope() as session:
                    await set_cached_overview(session, sector_id, raw)
                status = "success" if len(ok) == len(widgets) else "partial"
            else:
                status = "failed (" + ", ".join(str(w.status_code) for w in widgets) + ")"
        except Exception as e:
            logger.error(f"Sector {sector_id} warm failed: {e}", exc_info=True)
            status = f"error: {e}"

        ms = int((time.perf_counter() - started) * 1000)
        results.append(WarmResult(sector_id=sector_id, status=status, ms=ms))
        logger.info(f"Sector {sector_id} warmed in {ms}ms ({status})")

        if delay and index < len(sector_ids) - 1:
            await asyncio.sleep(delay)

    try:
        async with session_scope() as session:
            await purge_expired(session)
    except Exception as e:
        logger.error(f"Expired snapshot purge failed: {e}", exc_info=True)

    total_ms = int((time.perf_counter() - started_all) * 1000)
    warmed = sum(1 for r in results if r.status in ("success", "partial"))
    logger.info(f"Cache warm completed in {total_ms}ms: {warmed}/{len(results)} sectors stored")
    return results


async def run_sector_warm() -> List[WarmResult]:
    """Entry point for the scheduler and the CLI script (service token auth)."""
    async with XanoClient(token=settings.xano_service_token) as client:
        return await warm_sector_cache(client)
