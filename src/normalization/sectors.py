"""
Sector header + ownership statistics.

Two payload generations are live:

- current: ``Total_number_of_companies`` is a list of totals rows
  (``Number_of_Companies``, ``Number_of_PE``, ...)
- legacy: ``Total_number_of_companies`` is a number and the split lives in
  top-level ``Number_Of_Public_Companies``-style fields

Name and thesis are either flat or nested under ``Sector``.
"""
from typing import Any, Mapping, Optional

from src.normalization.coercers import coerce_int, decode_html_entities, to_safe_string
from src.normalization.extract import ARRAY_WRAPPER_KEYS, as_record, extract_array, nested
from src.normalization.keys import coalesce
from src.normalization.records import SectorSummary

TOTALS_KEYS = {
    "total_companies": "Number_of_Companies",
    "pe_count": "Number_of_PE",
    "vc_count": "Number_of_VC",
    "public_count": "Number_of_Public",
    "private_count": "Number_of_Private",
    "subsidiaries_count": "Number_of_Subsidiaries_Acquired",
}

LEGACY_KEYS = {
    "public_count": "Number_Of_Public_Companies",
    "pe_count": "Number_Of_PE_Companies",
    "vc_count": "Number_of_VC-owned_companies",
    "private_count": "Number_of_private_companies",
    "subsidiaries_count": "Number_of_subsidiaries",
}


def _int(value: Any) -> int:
    number = coerce_int(value)
    return number if number is not None else 0


def _sector_record(raw: Any) -> Optional[Mapping[str, Any]]:
    record = as_record(raw)
    if record is not None and not any(isinstance(record.get(k), list) for k in ARRAY_WRAPPER_KEYS):
        return record
    for item in extract_array(raw):
        if isinstance(item, Mapping):
            return item
    return record


def _statistics(record: Mapping[str, Any]) -> dict:
    totals = record.get("Total_number_of_companies")
    stats = {}
    if isinstance(totals, list):
        row = next((r for r in totals if isinstance(r, Mapping)), {})
        for field_name, key in TOTALS_KEYS.items():
            stats[field_name] = _int(row.get(key))
        return stats

    stats["total_companies"] = _int(totals)
    for field_name, key in LEGACY_KEYS.items():
        stats[field_name] = _int(record.get(key))
    return stats


def adapt_sector_summary(raw: Any) -> Optional[SectorSummary]:
    """Adapt the ``sectors/{id}`` payload; None when nothing usable came back."""
    record = _sector_record(raw)
    if record is None:
        return None

    sector = as_record(record.get("Sector")) or {}
    name = to_safe_string(record.get("sector_name") or sector.get("sector_name")).strip()
    thesis = record.get("Sector_thesis") or sector.get("Sector_thesis")
    sector_id = coerce_int(coalesce(record, ("Sector_id", "sector_id", "id")) or sector.get("id"))
    if not name and sector_id is None:
        return None

    importance = to_safe_string(
        record.get("Sector_importance") or nested(sector, "Sector_importance")
    ).strip() or None

    return SectorSummary(
        name=name,
        id=sector_id,
        thesis_html=decode_html_entities(thesis),
        importance=importance,
        **_statistics(record),
    )
