"""
Transaction and leaderboard adapters.

Recent-transaction rows and the strategic-acquirer / PE-investor leaderboards
come from several Xano endpoints that never agreed on field names, so each
logical field is resolved from an ordered candidate list.
"""
import logging
from typing import Any, List, Optional

from src.normalization.coercers import build_image_src, clean_braced_list, to_safe_string
from src.normalization.extract import iter_records
from src.normalization.keys import resolve_number, resolve_optional_string, resolve_string, resolve_value
from src.normalization.records import RankedEntity, TransactionRecord

logger = logging.getLogger(__name__)

TRANSACTION_DATE_KEYS = ("deal_date", "date", "announcement_date", "closed_date", "deal date")
TRANSACTION_BUYER_KEYS = (
    "buyer_name", "acquirer", "buyer", "acquirer_name", "buyer company",
    "acquirer company", "buyer_company", "acquirer_company", "buyer_investor",
)
TRANSACTION_SELLER_KEYS = ("seller_name", "seller", "seller company", "seller_company")
TRANSACTION_TARGET_KEYS = (
    "target_name", "company", "target", "asset", "target company",
    "target_company", "target_company_name", "company_name", "name",
)
TRANSACTION_TARGET_ID_KEYS = ("Target_company_id", "target_company_id", "company_id", "target_id")
TRANSACTION_VALUE_KEYS = (
    "value_usd", "value", "deal_value", "amount", "deal size",
    "deal_value_usd", "investment_amount_m",
)
TRANSACTION_TYPE_KEYS = ("type", "deal_type", "transaction_type", "category", "structure")
TRANSACTION_EVENT_ID_KEYS = ("Corporate_event_id", "corporate_event_id", "Event_id", "event_id", "id")
TRANSACTION_LOGO_KEYS = ("Target_Logo", "target_logo", "targetLogo")

RANKED_NAME_KEYS = ("name", "company", "investor", "acquirer", "label", "entity", "firm", "Acquirer")
RANKED_COUNT_KEYS = ("Deals_5y", "deals_5y", "count", "deals", "total", "n", "times", "occurrences")
RANKED_TARGET_KEYS = (
    "Most_Recent_Target", "most_recent_target",
    "Most_Recent_Acquisition", "most_recent_acquisition",
)
RANKED_DATE_KEYS = ("Closed_Date", "closed_date", "date", "Announcement_Date", "announcement_date")
RANKED_ID_KEYS = (
    "acquirer_company_id", "original_new_company_id", "new_company_id",
    "acquirer_id", "company_id", "id", "investor_company_id",
)
RANKED_LOGO_KEYS = ("Acquirer_Logo_Url", "logo", "logo_url", "logoUrl")


def adapt_transaction(raw: Any) -> Optional[TransactionRecord]:
    """Build a TransactionRecord, or None when neither buyer nor target resolves."""
    buyer = to_safe_string(clean_braced_list(resolve_string(raw, TRANSACTION_BUYER_KEYS))).strip()
    target = resolve_string(raw, TRANSACTION_TARGET_KEYS).strip()
    if not buyer and not target:
        return None

    return TransactionRecord(
        date=resolve_string(raw, TRANSACTION_DATE_KEYS).strip(),
        buyer=buyer,
        target=target,
        seller=resolve_optional_string(raw, TRANSACTION_SELLER_KEYS),
        value=resolve_optional_string(raw, TRANSACTION_VALUE_KEYS),
        deal_type=resolve_optional_string(raw, TRANSACTION_TYPE_KEYS),
        target_logo_src=build_image_src(resolve_value(raw, TRANSACTION_LOGO_KEYS)),
        event_id=resolve_number(raw, TRANSACTION_EVENT_ID_KEYS),
        target_company_id=resolve_number(raw, TRANSACTION_TARGET_ID_KEYS),
    )


def adapt_transactions(raw: Any) -> List[TransactionRecord]:
    records = []
    for item in iter_records(raw):
        record = adapt_transaction(item)
        if record is None:
            logger.debug("Dropped transaction with neither buyer nor target")
            continue
        records.append(record)
    return records


def adapt_ranked_entity(raw: Any) -> Optional[RankedEntity]:
    name = resolve_string(raw, RANKED_NAME_KEYS).strip()
    if not name:
        return None

    count = resolve_number(raw, RANKED_COUNT_KEYS)
    return RankedEntity(
        name=name,
        count=count if count is not None else 0,
        id=resolve_number(raw, RANKED_ID_KEYS),
        most_recent_target=resolve_optional_string(raw, RANKED_TARGET_KEYS),
        closed_date=resolve_optional_string(raw, RANKED_DATE_KEYS),
        logo_src=build_image_src(resolve_value(raw, RANKED_LOGO_KEYS)),
    )


def adapt_ranked_entities(raw: Any) -> List[RankedEntity]:
    """Adapt a leaderboard collection, dropping rows without a name."""
    return [entity for entity in map(adapt_ranked_entity, iter_records(raw)) if entity is not None]
