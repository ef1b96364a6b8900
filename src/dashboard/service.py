"""
Dashboard page loaders.

Each page issues its independent Xano calls concurrently. Widgets fail in
isolation: a failed call is logged, recorded in the page's widget statuses
and leaves that widget empty, while the rest of the page still renders.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Dict, List, Mapping, Optional, Tuple

from src.core.models import CompanyType, OWNERSHIP_TYPE_IDS
from src.dashboard.client import XanoClient, XanoError
from src.normalization import (
    adapt_advisors,
    adapt_counterparties,
    adapt_insights,
    adapt_market_map,
    adapt_ranked_entities,
    adapt_sector_companies,
    adapt_sector_summary,
    adapt_sub_sectors,
    adapt_transactions,
    bucket_counts,
    dedupe,
    split_event_parties,
)
from src.normalization.coercers import coerce_int, to_safe_string
from src.normalization.extract import as_record, extract_array, nested
from src.normalization.keys import coalesce
from src.normalization.records import (
    CompanyPage,
    CompanyRecord,
    EventParty,
    InsightRecord,
    RankedEntity,
    SectorSummary,
    SubSectorRecord,
    TransactionRecord,
)

logger = logging.getLogger(__name__)

# Upstream spells the recent transactions key both ways
RECENT_TRANSACTION_KEYS = ("resent_trasnactions", "recent_transactions")


@dataclass
class WidgetStatus:
    """Outcome of one upstream fetch"""
    name: str
    ok: bool
    status_code: int = 0
    error: Optional[str] = None
    ms: int = 0


@dataclass
class SectorOverview:
    sector_id: int
    summary: Optional[SectorSummary] = None
    companies: List[CompanyRecord] = field(default_factory=list)
    company_counts: Dict[str, int] = field(default_factory=dict)
    strategic_acquirers: List[RankedEntity] = field(default_factory=list)
    pe_investors: List[RankedEntity] = field(default_factory=list)
    recent_transactions: List[TransactionRecord] = field(default_factory=list)
    widgets: List[WidgetStatus] = field(default_factory=list)
    from_cache: bool = False
    generated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class CorporateEventDetail:
    id: int
    description: str = ""
    long_description: str = ""
    deal_type: str = ""
    deal_status: str = ""
    announcement_date: Optional[str] = None
    closed_date: Optional[str] = None
    investment_amount_m: Optional[str] = None
    enterprise_value_m: Optional[str] = None
    currency: Optional[str] = None
    primary_sectors: List[str] = field(default_factory=list)
    sub_sectors: List[str] = field(default_factory=list)
    counterparties: List[EventParty] = field(default_factory=list)
    advisors: List[EventParty] = field(default_factory=list)
    buyers: List[EventParty] = field(default_factory=list)
    sellers: List[EventParty] = field(default_factory=list)
    buyer_label: str = "Investor(s)"
    insights: List[InsightRecord] = field(default_factory=list)
    related_insights: List[InsightRecord] = field(default_factory=list)
    widgets: List[WidgetStatus] = field(default_factory=list)


# ──── Fetch helpers ────

def _first(value: Any) -> Mapping[str, Any]:
    """The record itself, or the first record of a list."""
    if isinstance(value, list):
        return next((v for v in value if isinstance(v, Mapping)), {})
    return as_record(value) or {}


async def _timed(name: str, call: Awaitable[Any]) -> Tuple[Any, WidgetStatus]:
    started = time.perf_counter()
    data = await call
    ms = int((time.perf_counter() - started) * 1000)
    return data, WidgetStatus(name=name, ok=True, status_code=200, ms=ms)


async def fetch_widgets(calls: Dict[str, Awaitable[Any]]) -> Tuple[Dict[str, Any], List[WidgetStatus]]:
    """
    Run named upstream calls concurrently.

    Returns the data per widget (None for failures) and one WidgetStatus per
    call, in the order given.
    """
    names = list(calls)
    results = await asyncio.gather(
        *(_timed(name, calls[name]) for name in names),
        return_exceptions=True,
    )

    data: Dict[str, Any] = {}
    statuses: List[WidgetStatus] = []
    for name, result in zip(names, results):
        if isinstance(result, XanoError):
            logger.warning(f"Widget '{name}' failed: {result}")
            data[name] = None
            statuses.append(WidgetStatus(name=name, ok=False, status_code=result.status_code, error=result.message or str(result)))
        elif isinstance(result, Exception):
            logger.error(f"Widget '{name}' raised unexpectedly: {result}", exc_info=result)
            data[name] = None
            statuses.append(WidgetStatus(name=name, ok=False, error=str(result) or type(result).__name__))
        elif isinstance(result, BaseException):
            raise result
        else:
            data[name], status = result
            statuses.append(status)
    return data, statuses


# ──── Sector overview ────

async def fetch_sector_overview_raw(
    client: XanoClient, sector_id: int
) -> Tuple[Dict[str, Any], List[WidgetStatus]]:
    """Fetch the three overview payloads concurrently: overview_data, sector, recent transactions."""
    logger.info(f"Fetching overview for sector {sector_id}")
    raw, widgets = await fetch_widgets({
        "overview": client.get_overview_data(sector_id),
        "sector": client.get_sector(sector_id),
        "recent": client.get_recent_transactions(sector_id),
    })
    failed = [w.name for w in widgets if not w.ok]
    if failed:
        logger.warning(f"Sector {sector_id} overview partial, failed widgets: {', '.join(failed)}")
    return raw, widgets


def _recent_transactions_payload(raw: Mapping[str, Any]) -> Any:
    """Dedicated endpoint first, then the same keys on the sector payload."""
    recent = raw.get("recent")
    if isinstance(recent, list):
        return recent
    payload = coalesce(recent, RECENT_TRANSACTION_KEYS)
    if payload is None and extract_array(recent):
        payload = recent
    if payload is None:
        payload = coalesce(_first(raw.get("sector")), RECENT_TRANSACTION_KEYS)
    return payload


def build_sector_overview(
    sector_id: int,
    raw: Mapping[str, Any],
    widgets: Optional[List[WidgetStatus]] = None,
    from_cache: bool = False,
) -> SectorOverview:
    """Normalize raw overview payloads. Missing pieces yield empty widgets."""
    overview = as_record(raw.get("overview")) or {}

    companies = adapt_market_map(overview.get("market_map"))
    return SectorOverview(
        sector_id=sector_id,
        summary=adapt_sector_summary(raw.get("sector")),
        companies=companies,
        company_counts=bucket_counts(companies),
        strategic_acquirers=adapt_ranked_entities(overview.get("strategic_acquirers")),
        pe_investors=adapt_ranked_entities(overview.get("pe_investors")),
        recent_transactions=adapt_transactions(_recent_transactions_payload(raw)),
        widgets=list(widgets or []),
        from_cache=from_cache,
    )


async def load_sector_overview(client: XanoClient, sector_id: int) -> Tuple[SectorOverview, Dict[str, Any]]:
    """Live fetch + normalize. Also returns the raw payload for caching."""
    raw, widgets = await fetch_sector_overview_raw(client, sector_id)
    return build_sector_overview(sector_id, raw, widgets), raw


# ──── Sector listings ────

async def load_sector_companies(
    client: XanoClient,
    sector_id: int,
    page: int = 1,
    per_page: int = 25,
    company_type: Optional[CompanyType] = None,
) -> CompanyPage:
    """
    One page of a sector's companies, optionally narrowed to one ownership type.

    The ownership filter is applied upstream so page sizes and totals describe
    the filtered set. Rows that still classify differently are dropped and
    taken off the total.
    """
    ownership_type_ids = [OWNERSHIP_TYPE_IDS[company_type]] if company_type is not None else None
    raw = await client.get_sector_companies(sector_id, page, per_page, ownership_type_ids)
    result = adapt_sector_companies(raw, page=page, per_page=per_page)
    if company_type is None:
        return result

    items = [c for c in result.items if c.company_type == company_type]
    dropped = len(result.items) - len(items)
    if dropped:
        logger.warning(
            f"Sector {sector_id}: {dropped} companies returned for {company_type.value} classify differently"
        )
    return CompanyPage(
        items=items,
        total=max(0, result.total - dropped),
        cur_page=result.cur_page,
        per_page=result.per_page,
        page_total=result.page_total,
        next_page=result.next_page,
        prev_page=result.prev_page,
    )


async def load_sub_sectors(client: XanoClient, sector_id: int) -> List[SubSectorRecord]:
    return adapt_sub_sectors(await client.get_sub_sectors(sector_id))


# ──── Corporate events ────

def _names(value: Any) -> List[str]:
    names = []
    for item in extract_array(value):
        name = to_safe_string(coalesce(item, ("sector_name", "name")) if isinstance(item, Mapping) else item).strip()
        if name:
            names.append(name)
    return names


def _sector_ids(value: Any) -> List[int]:
    ids = []
    for item in extract_array(value):
        sector_id = coerce_int(coalesce(item, ("id", "sector_id"))) if isinstance(item, Mapping) else None
        if sector_id:
            ids.append(sector_id)
    return ids


def _optional(value: Any) -> Optional[str]:
    return to_safe_string(value).strip() or None


def build_corporate_event(event_id: int, raw: Any) -> CorporateEventDetail:
    payload = as_record(raw) or {}
    event = _first(payload.get("Event"))

    counterparties = adapt_counterparties(payload.get("Event_counterparties"))
    split = split_event_parties(counterparties)

    return CorporateEventDetail(
        id=coerce_int(event.get("id")) or event_id,
        description=to_safe_string(event.get("description")).strip(),
        long_description=to_safe_string(event.get("long_description")).strip(),
        deal_type=to_safe_string(event.get("deal_type")).strip(),
        deal_status=to_safe_string(event.get("deal_status")).strip(),
        announcement_date=_optional(event.get("announcement_date")),
        closed_date=_optional(event.get("closed_date")),
        investment_amount_m=_optional(nested(event, "investment_data", "investment_amount_m")),
        enterprise_value_m=_optional(nested(event, "ev_data", "enterprise_value_m")),
        currency=_optional(nested(event, "ev_data", "_currency", "Currency")),
        primary_sectors=_names(payload.get("Primary_sectors")),
        sub_sectors=_names(payload.get("Sub-sectors")),
        counterparties=counterparties,
        advisors=adapt_advisors(payload.get("Event_advisors")),
        buyers=split.buyers,
        sellers=split.sellers,
        buyer_label=split.buyer_label,
        insights=adapt_insights(coalesce(payload, ("Related_Articles", "Insights", "articles"))),
    )


async def load_corporate_event(client: XanoClient, event_id: int) -> CorporateEventDetail:
    """
    Event detail plus sector-wide related insights.

    The event call is required and its XanoError propagates. Related
    insights are best effort and never repeat an article already listed
    under the event itself.
    """
    started = time.perf_counter()
    raw = await client.get_corporate_event(event_id)
    detail = build_corporate_event(event_id, raw)
    detail.widgets.append(WidgetStatus(
        name="event", ok=True, status_code=200, ms=int((time.perf_counter() - started) * 1000)
    ))

    sector_ids = _sector_ids(nested(raw, "Primary_sectors"))
    if not sector_ids:
        return detail

    data, widgets = await fetch_widgets({
        "related_insights": client.get_content_articles(
            primary_sectors_ids=",".join(str(i) for i in sector_ids),
            Offset=1,
            Per_page=10,
        ),
    })
    detail.widgets.extend(widgets)
    related = adapt_insights(data["related_insights"])
    detail.related_insights = dedupe(detail.insights, related, lambda article: article.id)
    return detail
