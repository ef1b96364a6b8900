import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from src.core.config import settings

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def run_sector_cache_warm():
    """
    Job function: refresh every sector's overview snapshot.
    Runs with the service token; per-sector failures are logged by the workflow.
    """
    logger.info("Running scheduled job: Sector Cache Warm")
    try:
        from src.dashboard.workflow import run_sector_warm
        results = await run_sector_warm()
        failed = [r.sector_id for r in results if r.status not in ("success", "partial")]
        if failed:
            logger.warning(f"Sector warm finished with {len(failed)} failures: {failed}")
        else:
            logger.info(f"Sector warm finished for {len(results)} sectors")
    except Exception as e:
        logger.error(f"Sector cache warm job failed: {e}", exc_info=True)


async def run_cache_purge():
    """Drop expired sector snapshots."""
    logger.info("Running scheduled expired snapshot purge...")
    try:
        from src.core.database import get_async_db
        from src.dashboard.cache import purge_expired
        async with get_async_db() as session:
            count = await purge_expired(session)
        logger.info(f"Snapshot purge complete: {count} rows removed")
    except Exception as e:
        logger.error(f"Snapshot purge failed: {e}", exc_info=True)


async def warm_if_cache_empty(session_scope=None) -> bool:
    """
    Queue an immediate sector warm when no snapshots exist (fresh database).
    Returns True if a warm was queued.
    """
    try:
        from src.dashboard.cache import is_cache_empty
        if session_scope is None:
            from src.core.database import get_async_db
            session_scope = get_async_db
        async with session_scope() as session:
            empty = await is_cache_empty(session)
    except Exception as e:
        logger.error(f"Snapshot cache check failed: {e}", exc_info=True)
        return False

    if not empty:
        return False

    logger.info("Sector snapshot cache is empty; queueing an initial warm")
    scheduler.add_job(
        run_sector_cache_warm,
        id='sector_cache_warm_initial',
        replace_existing=True
    )
    return True


def start_scheduler():
    """
    Initialize and start the scheduler.
    """
    # Daily: warm sector overview snapshots (6:00 AM by default)
    scheduler.add_job(
        run_sector_cache_warm,
        CronTrigger(hour=settings.sector_warm_hour, minute=0),
        id='sector_cache_warm',
        replace_existing=True
    )

    # Hourly: purge expired snapshots
    scheduler.add_job(
        run_cache_purge,
        CronTrigger(minute=30),
        id='sector_cache_purge',
        replace_existing=True
    )

    scheduler.start()
    logger.info(f"APScheduler started. Sector warm daily {settings.sector_warm_hour}:00, snapshot purge hourly at :30.")


async def stop_scheduler():
    """
    Shutdown the scheduler.
    """
    logger.info("Stopping APScheduler...")
    scheduler.shutdown()
