"""
Sector overview snapshot cache.

One row per sector, keyed by sector id, expiring after the configured TTL
(clamped to [60s, 7d]). Expired rows are removed on read.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings, MAX_CACHE_TTL_SECONDS, MIN_CACHE_TTL_SECONDS
from src.dashboard.database import SectorSnapshotModel

logger = logging.getLogger(__name__)


def cache_key(sector_id: int) -> str:
    """Log/display key for a sector snapshot."""
    return f"sector:{sector_id}:overview"


def _ttl(ttl_seconds: Optional[int]) -> timedelta:
    seconds = settings.sector_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
    return timedelta(seconds=max(MIN_CACHE_TTL_SECONDS, min(MAX_CACHE_TTL_SECONDS, seconds)))


async def get_cached_overview(session: AsyncSession, sector_id: int) -> Optional[Dict[str, Any]]:
    """Return the cached raw payload, or None on miss/expiry."""
    result = await session.execute(
        select(SectorSnapshotModel).where(SectorSnapshotModel.sector_id == sector_id)
    )
    snapshot = result.scalar_one_or_none()
    if snapshot is None:
        logger.info(f"Cache miss for {cache_key(sector_id)}")
        return None

    if snapshot.is_expired():
        logger.info(f"Cache expired for {cache_key(sector_id)}")
        await session.delete(snapshot)
        await session.commit()
        return None

    logger.info(f"Cache hit for {cache_key(sector_id)}")
    return snapshot.payload


async def set_cached_overview(
    session: AsyncSession,
    sector_id: int,
    payload: Dict[str, Any],
    ttl_seconds: Optional[int] = None,
) -> SectorSnapshotModel:
    """Insert or replace the snapshot for a sector."""
    now = datetime.utcnow()
    expires_at = now + _ttl(ttl_seconds)

    result = await session.execute(
        select(SectorSnapshotModel).where(SectorSnapshotModel.sector_id == sector_id)
    )
    snapshot = result.scalar_one_or_none()
    if snapshot is None:
        snapshot = SectorSnapshotModel(sector_id=sector_id)
        session.add(snapshot)

    snapshot.payload = payload
    snapshot.fetched_at = now
    snapshot.expires_at = expires_at
    await session.commit()

    logger.info(f"Cached {cache_key(sector_id)} until {expires_at.isoformat()}")
    return snapshot


async def is_cache_empty(session: AsyncSession) -> bool:
    count = await session.scalar(select(func.count(SectorSnapshotModel.id)))
    return not count


async def purge_expired(session: AsyncSession) -> int:
    """Delete expired snapshots; returns how many were removed."""
    result = await session.execute(
        delete(SectorSnapshotModel).where(SectorSnapshotModel.expires_at <= datetime.utcnow())
    )
    await session.commit()
    removed = result.rowcount or 0
    if removed:
        logger.info(f"Purged {removed} expired sector snapshots")
    return removed
