"""Insight article adapter (content API)."""
from typing import Any, List, Optional

from src.normalization.coercers import coerce_int
from src.normalization.extract import iter_records
from src.normalization.keys import resolve_optional_string, resolve_string, resolve_value
from src.normalization.records import InsightRecord

INSIGHT_ID_KEYS = ("id", "article_id")
INSIGHT_TITLE_KEYS = ("Headline", "headline", "title")
INSIGHT_SUMMARY_KEYS = ("Strapline", "strapline", "summary", "content")
INSIGHT_DATE_KEYS = ("Publication_Date", "publication_date", "date")
INSIGHT_TAG_KEYS = ("Content_Type", "content_type", "tag")


def adapt_insight(raw: Any) -> Optional[InsightRecord]:
    title = resolve_string(raw, INSIGHT_TITLE_KEYS).strip()
    if not title:
        return None
    return InsightRecord(
        title=title,
        id=coerce_int(resolve_value(raw, INSIGHT_ID_KEYS)),
        summary=resolve_string(raw, INSIGHT_SUMMARY_KEYS).strip(),
        date=resolve_optional_string(raw, INSIGHT_DATE_KEYS),
        tag=resolve_optional_string(raw, INSIGHT_TAG_KEYS),
    )


def adapt_insights(raw: Any) -> List[InsightRecord]:
    return [insight for insight in map(adapt_insight, iter_records(raw)) if insight is not None]
