"""
Dashboard Module - Xano-backed page loaders.

Fetches sector, company and corporate-event payloads from Xano, feeds them
through src.normalization, and caches raw sector overviews in PostgreSQL.
"""

from src.dashboard.client import XanoClient, XanoError
from src.dashboard.database import SectorSnapshotModel
from src.dashboard.service import (
    CorporateEventDetail,
    SectorOverview,
    WidgetStatus,
    build_sector_overview,
    fetch_sector_overview_raw,
    load_corporate_event,
    load_sector_companies,
    load_sector_overview,
    load_sub_sectors,
)
from src.dashboard.workflow import WarmResult, warm_sector_cache

__all__ = [
    "XanoClient",
    "XanoError",
    "SectorSnapshotModel",
    "CorporateEventDetail",
    "SectorOverview",
    "WidgetStatus",
    "build_sector_overview",
    "fetch_sector_overview_raw",
    "load_corporate_event",
    "load_sector_companies",
    "load_sector_overview",
    "load_sub_sectors",
    "WarmResult",
    "warm_sector_cache",
]
