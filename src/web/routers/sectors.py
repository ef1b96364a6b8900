"""Sectors router: overview page, company listing, sub-sectors, cache warm trigger."""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.core.models import CompanyType
from src.core.schemas import StandardResponse
from src.dashboard.cache import get_cached_overview, set_cached_overview
from src.dashboard.client import XanoClient, XanoError
from src.dashboard.service import build_sector_overview, load_sector_companies, load_sector_overview, load_sub_sectors
from src.dashboard.workflow import run_sector_warm
from src.web.dependencies import get_xano_client, upstream_http_error, verify_cron_secret
from src.web.responses import collection, paged
from src.web.serializers import serialize, serialize_list

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sectors", tags=["Sectors"])


@router.get("/{sector_id}/overview", summary="Sector Overview")
async def get_sector_overview(
    sector_id: int,
    refresh: bool = False,
    client: XanoClient = Depends(get_xano_client),
    session: AsyncSession = Depends(get_db),
):
    """
    Sector header, market map, leaderboards and recent transactions.

    Served from the snapshot cache when fresh. Cache storage problems never
    fail the request; the page is fetched live instead.
    """
    if not refresh:
        try:
            cached = await get_cached_overview(session, sector_id)
        except SQLAlchemyError as e:
            logger.warning(f"Sector cache read failed for {sector_id}: {e}")
            await session.rollback()
            cached = None
        if cached is not None:
            return serialize(build_sector_overview(sector_id, cached, from_cache=True))

    overview, raw = await load_sector_overview(client, sector_id)

    if any(w.ok for w in overview.widgets):
        try:
            await set_cached_overview(session, sector_id, raw)
        except SQLAlchemyError as e:
            logger.warning(f"Sector cache write failed for {sector_id}: {e}")
            await session.rollback()
    elif all(w.status_code in (401, 403) for w in overview.widgets):
        raise HTTPException(status_code=401, detail="Upstream rejected credentials")

    return serialize(overview)


@router.get("/{sector_id}/companies", summary="Sector Companies")
async def get_sector_companies(
    sector_id: int,
    page: int = Query(1, ge=1),
    per_page: int = Query(25, ge=1, le=100),
    company_type: Optional[CompanyType] = None,
    client: XanoClient = Depends(get_xano_client),
):
    """One page of the sector's companies, optionally filtered by ownership type."""
    try:
        result = await load_sector_companies(client, sector_id, page, per_page, company_type)
    except XanoError as e:
        raise upstream_http_error(e)

    return paged(
        serialize_list(result.items),
        total=result.total,
        page=result.cur_page,
        per_page=result.per_page,
        page_total=result.page_total,
        next_page=result.next_page,
        prev_page=result.prev_page,
    )


@router.get("/{sector_id}/sub-sectors", summary="Sub-sectors")
async def get_sub_sectors(sector_id: int, client: XanoClient = Depends(get_xano_client)):
    try:
        sub_sectors = await load_sub_sectors(client, sector_id)
    except XanoError as e:
        raise upstream_http_error(e)
    return collection(serialize_list(sub_sectors))


@router.post("/warm", summary="Trigger Sector Cache Warm", dependencies=[Depends(verify_cron_secret)])
async def trigger_warm(background_tasks: BackgroundTasks):
    """Refresh every sector's overview snapshot in the background."""

    async def run_warm():
        try:
            results = await run_sector_warm()
            logger.info(f"Sector warm complete, {len(results)} sectors processed")
        except Exception:
            logger.exception("Sector warm failed")

    background_tasks.add_task(run_warm)

    return StandardResponse(status="accepted", message="Sector cache warm started in background")
