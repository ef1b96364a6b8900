"""
Normalization Module - Xano payload adapters.

Pure functions that turn loosely-shaped Xano JSON into stable records:
array extraction, two-pass key resolution, field coercion, per-entity
adapters, ownership bucketing and cross-source de-duplication.
"""

from src.normalization.coercers import (
    build_image_src,
    clean_braced_list,
    coerce_number,
    decode_html_entities,
    to_safe_string,
)
from src.normalization.extract import extract_array, iter_records
from src.normalization.keys import coalesce, normalize_key, resolve_number, resolve_string, resolve_value
from src.normalization.transactions import (
    adapt_ranked_entities,
    adapt_ranked_entity,
    adapt_transaction,
    adapt_transactions,
)
from src.normalization.companies import (
    adapt_company,
    adapt_market_map,
    adapt_sector_companies,
    adapt_sector_company,
    adapt_sub_sectors,
)
from src.normalization.events import (
    adapt_advisor,
    adapt_advisors,
    adapt_counterparties,
    adapt_counterparty,
    resolve_party_link,
    split_event_parties,
)
from src.normalization.articles import adapt_insight, adapt_insights
from src.normalization.sectors import adapt_sector_summary
from src.normalization.ownership import bucket_counts, bucketize, classify_company_type, ownership_label
from src.normalization.dedupe import dedupe

__all__ = [
    "build_image_src",
    "clean_braced_list",
    "coerce_number",
    "decode_html_entities",
    "to_safe_string",
    "extract_array",
    "iter_records",
    "coalesce",
    "normalize_key",
    "resolve_number",
    "resolve_string",
    "resolve_value",
    "adapt_transaction",
    "adapt_transactions",
    "adapt_ranked_entity",
    "adapt_ranked_entities",
    "adapt_company",
    "adapt_market_map",
    "adapt_sector_company",
    "adapt_sector_companies",
    "adapt_sub_sectors",
    "adapt_counterparty",
    "adapt_counterparties",
    "adapt_advisor",
    "adapt_advisors",
    "resolve_party_link",
    "split_event_parties",
    "adapt_insight",
    "adapt_insights",
    "adapt_sector_summary",
    "bucketize",
    "bucket_counts",
    "classify_company_type",
    "ownership_label",
    "dedupe",
]
