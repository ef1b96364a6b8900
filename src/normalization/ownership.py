"""
Ownership classification for market-map companies.

Layered rule, first match wins:
  1. bucket hint from the source grouping ("Public Companies", "pe_companies", ...)
  2. free-text ``ownership`` field
  3. private

There is no investor-flag step: any non-empty hint already resolves to a type,
so a flag check after it could never be reached.
"""
import re
from collections import OrderedDict
from typing import Any, Dict, Iterable, List

from src.core.models import COMPANY_TYPE_LABELS, CompanyType
from src.normalization.coercers import to_safe_string
from src.normalization.records import CompanyRecord

_COMPANIES_WORD = re.compile(r"\bcompanies\b")


def normalize_bucket(bucket: Any) -> str:
    text = to_safe_string(bucket).lower().replace("_", " ")
    text = _COMPANIES_WORD.sub("", text)
    return " ".join(text.split())


def company_type_from_bucket(bucket: Any) -> CompanyType:
    # Plain substring tests; compact hints like "pebacked" or "vcbacked" must match
    hint = normalize_bucket(bucket)
    if "public" in hint:
        return CompanyType.PUBLIC
    if "private equity" in hint or "privateequity" in hint or "pe" in hint:
        return CompanyType.PRIVATE_EQUITY_OWNED
    if "venture" in hint or "vc" in hint:
        return CompanyType.VENTURE_CAPITAL_BACKED
    return CompanyType.PRIVATE


def company_type_from_ownership(ownership: Any) -> CompanyType:
    text = normalize_bucket(ownership)
    if "public" in text:
        return CompanyType.PUBLIC
    if "private equity" in text:
        return CompanyType.PRIVATE_EQUITY_OWNED
    if "venture" in text:
        return CompanyType.VENTURE_CAPITAL_BACKED
    return CompanyType.PRIVATE


def classify_company_type(bucket: Any = None, ownership: Any = None) -> CompanyType:
    """Always returns one of the four CompanyType members."""
    if normalize_bucket(bucket):
        return company_type_from_bucket(bucket)
    return company_type_from_ownership(ownership)


def ownership_label(ownership: Any, company_type: CompanyType) -> str:
    text = to_safe_string(ownership).strip()
    return text or COMPANY_TYPE_LABELS[company_type]


def bucketize(companies: Iterable[CompanyRecord]) -> Dict[CompanyType, List[CompanyRecord]]:
    """Group companies by type. Every type is present; input order is kept within a bucket."""
    buckets: Dict[CompanyType, List[CompanyRecord]] = OrderedDict(
        (company_type, []) for company_type in CompanyType
    )
    for company in companies:
        buckets[company.company_type].append(company)
    return buckets


def bucket_counts(companies: Iterable[CompanyRecord]) -> Dict[str, int]:
    return {company_type.value: len(items) for company_type, items in bucketize(companies).items()}
