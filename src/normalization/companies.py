"""
Company adapters: sector market map, sector company listing, sub-sectors.

Market map payloads arrive in three container shapes:

    {"Public Companies": [...], "pe_companies": [...]}     bucket name → list
    [{"bucket": "Public", "companies": [...]}, ...]         bucket groups
    [{...company...}, ...]                                   flat list

optionally wrapped once more under ``market_map``.
"""
import logging
import math
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from src.normalization.coercers import (
    build_image_src,
    clean_braced_list,
    coerce_int,
    leading_int,
    to_safe_string,
)
from src.normalization.extract import ARRAY_WRAPPER_KEYS, as_record, extract_array, iter_records, nested
from src.normalization.keys import coalesce, resolve_number, resolve_string
from src.normalization.ownership import classify_company_type, company_type_from_ownership, ownership_label
from src.normalization.records import CompanyInvestorRef, CompanyPage, CompanyRecord, SubSectorRecord

logger = logging.getLogger(__name__)

GROUP_LIST_KEYS = ("companies", "items")
SUB_SECTOR_ID_KEYS = ("id", "sector_id", "secondary_sector_id")
SUB_SECTOR_NAME_KEYS = ("sector_name", "name")


# ──── Field helpers ────

def _company_id(raw: Mapping[str, Any]) -> int:
    # Numeric id, then "12"-style string id, then the legacy id column
    parsed = leading_int(raw.get("id"))
    if parsed is not None:
        return parsed
    fallback = coerce_int(raw.get("original_new_company_id"))
    return fallback if fallback is not None else 0


def _count(raw: Mapping[str, Any], keys: Tuple[str, ...]) -> int:
    value = coerce_int(coalesce(raw, keys))
    return value if value is not None else 0


def sector_names(value: Any) -> List[str]:
    """Sector lists come as strings, ``{sector_name}`` objects, or a braced/comma string."""
    if value is None:
        return []
    if isinstance(value, str):
        cleaned = to_safe_string(clean_braced_list(value))
        return [part.strip() for part in cleaned.split(",") if part.strip()]
    names = []
    for item in extract_array(value):
        if isinstance(item, str):
            name = item.strip()
        elif isinstance(item, Mapping):
            name = resolve_string(item, ("sector_name", "name")).strip()
        else:
            name = to_safe_string(item).strip()
        if name:
            names.append(name)
    return names


def _investors(value: Any) -> List[CompanyInvestorRef]:
    refs = []
    for item in iter_records(value):
        name = resolve_string(item, ("company_name", "name")).strip()
        if not name:
            continue
        refs.append(CompanyInvestorRef(
            name=name,
            id=coerce_int(coalesce(item, ("original_new_company_id", "id"))),
        ))
    return refs


def _is_true(raw: Mapping[str, Any], *keys: str) -> bool:
    return any(raw.get(key) is True for key in keys)


# ──── Market map ────

def adapt_company(raw: Any, bucket_hint: Optional[str] = None) -> Optional[CompanyRecord]:
    """Adapt one market-map company; None when it has neither id nor name."""
    record = as_record(raw)
    if record is None:
        return None

    company_id = _company_id(record)
    name = to_safe_string(coalesce(record, ("name", "company_name"))).strip()
    if not company_id and not name:
        return None

    # The record's own bucket wins over the grouping it was found under
    own_bucket = record.get("bucket")
    bucket = to_safe_string(own_bucket if own_bucket is not None else bucket_hint).strip()
    ownership = to_safe_string(record.get("ownership")).strip()
    company_type = classify_company_type(bucket, ownership)

    return CompanyRecord(
        id=company_id,
        name=name,
        company_type=company_type,
        ownership_label=ownership_label(ownership, company_type),
        ownership_text=ownership,
        logo_src=build_image_src(record.get("linkedin_logo")),
        primary_sectors=sector_names(record.get("primary_sectors")),
        secondary_sectors=sector_names(record.get("sectors")),
        is_investor=_is_true(record, "is_that_investor", "_is_that_investor"),
        linkedin_members=_count(record, ("linkedin_employee", "linkedin_members")),
        linkedin_members_latest=_count(record, ("linkedin_employee_latest", "linkedin_employee", "linkedin_members_latest", "linkedin_members")),
        linkedin_members_old=_count(record, ("linkedin_employee_old", "linkedin_members_old")),
        country=to_safe_string(record.get("country")).strip(),
        description=to_safe_string(record.get("description")).strip(),
        url=to_safe_string(record.get("url")).strip(),
        ownership_type_id=coerce_int(record.get("ownership_type_id")) or 0,
        bucket=bucket,
        investors=_investors(record.get("companies_investors")),
    )


def _iter_market_map(raw: Any) -> Iterator[Tuple[Any, Optional[str]]]:
    """Yield (company, bucket_hint) pairs from any of the supported container shapes."""
    if isinstance(raw, Mapping) and "market_map" in raw:
        raw = raw["market_map"]

    if isinstance(raw, Mapping) and not any(key in raw for key in ARRAY_WRAPPER_KEYS):
        for bucket_name, companies in raw.items():
            if isinstance(companies, list):
                for company in companies:
                    yield company, str(bucket_name)
        return

    for element in extract_array(raw):
        group = as_record(element)
        if group is None:
            continue
        group_list = next(
            (group[key] for key in GROUP_LIST_KEYS if isinstance(group.get(key), list)),
            None,
        )
        if group_list is None:
            yield group, None
            continue
        hint = to_safe_string(group.get("bucket")).strip() or None
        for company in group_list:
            yield company, hint


def adapt_market_map(raw: Any) -> List[CompanyRecord]:
    companies = []
    for company, hint in _iter_market_map(raw):
        record = adapt_company(company, hint)
        if record is not None:
            companies.append(record)
    logger.debug(f"Market map adapted: {len(companies)} companies")
    return companies


# ──── Sector companies listing ────

def adapt_sector_company(raw: Any) -> Optional[CompanyRecord]:
    """Adapt one row of ``Get_Sector_s_new_companies``."""
    record = as_record(raw)
    if record is None:
        return None

    company_id = _company_id(record)
    name = to_safe_string(coalesce(record, ("name", "company_name"))).strip()
    if not company_id and not name:
        return None

    ownership = to_safe_string(record.get("ownership")).strip()
    if not ownership:
        ownership = to_safe_string(nested(record, "_ownership_type", "ownership")).strip()
    company_type = company_type_from_ownership(ownership)

    secondary = coalesce(record, ("sectors", "secondary_sectors"))
    members = _count(record, ("linkedin_members", "linkedin_employee"))

    return CompanyRecord(
        id=company_id,
        name=name,
        company_type=company_type,
        ownership_label=ownership_label(ownership, company_type),
        ownership_text=ownership,
        logo_src=build_image_src(coalesce(record, ("linkedin_logo", "logo"))),
        primary_sectors=sector_names(record.get("primary_sectors")),
        secondary_sectors=sector_names(secondary),
        is_investor=_is_true(record, "is_that_investor", "_is_that_investor"),
        linkedin_members=members,
        linkedin_members_latest=_count(record, ("linkedin_members_latest", "linkedin_employee_latest", "linkedin_members", "linkedin_employee")),
        linkedin_members_old=_count(record, ("linkedin_members_old", "linkedin_employee_old")),
        country=to_safe_string(record.get("country")).strip(),
        description=to_safe_string(record.get("description")).strip(),
        url=to_safe_string(record.get("url")).strip(),
        ownership_type_id=coerce_int(record.get("ownership_type_id")) or 0,
        investors=_investors(record.get("companies_investors")),
    )


def _page_number(value: Any) -> Optional[int]:
    number = coerce_int(value)
    return number if number is not None and number > 0 else None


def adapt_sector_companies(
    raw: Any,
    page: int = 1,
    per_page: int = 25,
) -> CompanyPage:
    """
    Adapt a sector company listing into a CompanyPage.

    Items live under ``result1.items`` (current API), top-level ``items``, or
    the payload is the bare list. The total prefers the SQL count block.
    """
    result = as_record(nested(raw, "result1")) or {}
    if isinstance(result.get("items"), list):
        items_raw = result["items"]
    elif isinstance(raw, Mapping) and isinstance(raw.get("items"), list):
        items_raw = raw["items"]
    elif isinstance(raw, list):
        items_raw = raw
    else:
        items_raw = []

    items = [c for c in map(adapt_sector_company, items_raw) if c is not None]

    sql_count = nested(raw, "sql_count")
    total = None
    if isinstance(sql_count, list) and sql_count:
        total = coerce_int(nested(sql_count[0], "total_companies"))
    if total is None:
        total = coerce_int(nested(raw, "Count"))
    if total is None:
        total = coerce_int(result.get("itemsReceived"))
    if total is None:
        total = len(items_raw)

    cur_page = _page_number(coalesce(result, ("curPage", "page"))) or max(1, page)
    size = _page_number(coalesce(result, ("perPage", "per_page"))) or max(1, per_page)
    page_total = _page_number(result.get("pageTotal")) or max(1, math.ceil(total / size))

    return CompanyPage(
        items=items,
        total=total,
        cur_page=cur_page,
        per_page=size,
        page_total=page_total,
        next_page=_page_number(result.get("nextPage")),
        prev_page=_page_number(result.get("prevPage")),
    )


# ──── Sub-sectors ────

def adapt_sub_sectors(raw: Any) -> List[SubSectorRecord]:
    sub_sectors = []
    for item in iter_records(raw):
        sector_id = resolve_number(item, SUB_SECTOR_ID_KEYS)
        name = resolve_string(item, SUB_SECTOR_NAME_KEYS).strip()
        if not sector_id and not name:
            continue
        sub_sectors.append(SubSectorRecord(id=int(sector_id or 0), sector_name=name))
    return sub_sectors
