"""
Corporate-event party adapters (counterparties and advisors).

Link routing for a party's company:
  1. investor → /investors/{investor_profile_id} when positive, else /investors/{party id}
  2. data-analytics company → /company/{party id}
  3. canonical ``_url`` (``/investor/`` rewritten to ``/investors/``)
  4. fallback href, usually none (plain text)

Flags count only when the key is present and literally boolean ``True``.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from src.normalization.coercers import build_image_src, coerce_int, to_safe_string
from src.normalization.extract import as_record, iter_records, nested
from src.normalization.keys import coalesce, resolve_string
from src.normalization.records import EventParty, EventPartyRef, IndividualRef

logger = logging.getLogger(__name__)

INVESTOR_FLAG_KEYS = ("_is_that_investor", "is_that_investor")
DATA_ANALYTICS_FLAG_KEYS = ("_is_that_data_analytic_company", "is_that_data_analytic_company")
# Renamed upstream between API versions; both spellings are live
COUNTERPARTY_ROLE_KEYS = ("_counterpartys_type", "_counterparty_type")

BUYER_ROLE_RE = re.compile(r"investor|acquirer", re.IGNORECASE)
SELLER_ROLE_RE = re.compile(r"divestor|seller|vendor", re.IGNORECASE)


def _flag(company: Mapping[str, Any], keys) -> bool:
    return any(key in company and company[key] is True for key in keys)


def _positive_int(value: Any) -> Optional[int]:
    number = coerce_int(value)
    return number if number is not None and number > 0 else None


def resolve_party_link(
    company: Any,
    party_id: Any = None,
    fallback_href: Optional[str] = None,
) -> Optional[str]:
    record = as_record(company)
    if record is None:
        return fallback_href

    target_id = _positive_int(party_id) or _positive_int(record.get("id"))

    if _flag(record, INVESTOR_FLAG_KEYS):
        profile_id = _positive_int(record.get("_investor_profile_id"))
        if profile_id:
            return f"/investors/{profile_id}"
        if target_id:
            return f"/investors/{target_id}"
        return fallback_href

    if _flag(record, DATA_ANALYTICS_FLAG_KEYS):
        return f"/company/{target_id}" if target_id else fallback_href

    url = to_safe_string(coalesce(record, ("_url", "url"))).strip()
    if url:
        return url.replace("/investor/", "/investors/")

    return fallback_href


def _party_logo(company: Mapping[str, Any]) -> Optional[str]:
    return build_image_src(
        nested(company, "_linkedin_data_of_new_company", "linkedin_logo")
        or nested(company, "linkedin_data", "linkedin_logo")
        or company.get("linkedin_logo")
    )


def _status_text(value: Any) -> str:
    if isinstance(value, Mapping):
        return to_safe_string(value.get("counterparty_status")).strip()
    return to_safe_string(value).strip()


def adapt_individuals(raw: Any) -> List[IndividualRef]:
    """Individuals link to /individual/{individuals_id} when that id is present."""
    individuals = []
    for item in iter_records(raw):
        name = resolve_string(item, ("advisor_individuals", "individual_name", "name")).strip()
        if not name:
            continue
        individual_id = _positive_int(item.get("individuals_id"))
        individuals.append(IndividualRef(
            name=name,
            id=individual_id,
            href=f"/individual/{individual_id}" if individual_id else None,
        ))
    return individuals


def counterparty_role(raw: Any) -> str:
    """Role text from the nested status object, either spelling, else a flat status."""
    record = as_record(raw)
    if record is None:
        return ""
    for key in COUNTERPARTY_ROLE_KEYS:
        role = _status_text(record.get(key))
        if role:
            return role
    return _status_text(record.get("counterparty_status"))


def adapt_counterparty(raw: Any) -> Optional[EventParty]:
    record = as_record(raw)
    if record is None:
        return None
    company = as_record(record.get("_new_company")) or {}
    name = to_safe_string(company.get("name") or record.get("counterparty_name")).strip()
    if not name:
        return None

    role = counterparty_role(record)
    party_id = _positive_int(record.get("new_company_counterparty")) or _positive_int(company.get("id")) or 0

    return EventParty(
        id=party_id,
        name=name,
        role=role,
        logo_src=_party_logo(company),
        link_href=resolve_party_link(company, party_id),
        individuals=adapt_individuals(record.get("counterparty_individuals")),
        announcement_url=to_safe_string(record.get("counterparty_announcement_url")).strip() or None,
    )


def adapt_advisor(raw: Any) -> Optional[EventParty]:
    """Advisors without a richer route fall back to their /advisor/{id} page."""
    record = as_record(raw)
    if record is None:
        return None
    company = as_record(record.get("_new_company")) or {}
    name = to_safe_string(company.get("name")).strip()
    if not name:
        return None

    advisor_id = _positive_int(company.get("id")) or 0
    fallback = f"/advisor/{advisor_id}" if advisor_id else None

    advising = None
    counterparty = as_record(record.get("_counterparties"))
    if counterparty is not None:
        advised_company = as_record(counterparty.get("_new_company")) or {}
        advised_name = to_safe_string(advised_company.get("name")).strip()
        if advised_name:
            advised_id = (
                _positive_int(counterparty.get("new_company_counterparty"))
                or _positive_int(advised_company.get("id"))
            )
            advising = EventPartyRef(
                name=advised_name,
                id=advised_id,
                link_href=resolve_party_link(advised_company, advised_id),
            )

    # Bare individuals_id arrays carry no names, only expanded rows are shown
    individuals = adapt_individuals(coalesce(record, ("counterparty_individuals", "individuals")))

    return EventParty(
        id=advisor_id,
        name=name,
        role=_status_text(record.get("_advisor_role")) or _status_text(record.get("advisor_role")),
        logo_src=_party_logo(company),
        link_href=resolve_party_link(company, advisor_id, fallback_href=fallback),
        individuals=individuals,
        announcement_url=to_safe_string(record.get("announcement_url")).strip() or None,
        advising=advising,
    )


def adapt_counterparties(raw: Any) -> List[EventParty]:
    return [party for party in map(adapt_counterparty, iter_records(raw)) if party is not None]


def adapt_advisors(raw: Any) -> List[EventParty]:
    return [party for party in map(adapt_advisor, iter_records(raw)) if party is not None]


@dataclass
class PartySplit:
    """Buy side / sell side view of an event's counterparties"""
    buyers: List[EventParty] = field(default_factory=list)
    sellers: List[EventParty] = field(default_factory=list)
    buyer_label: str = "Investor(s)"


def split_event_parties(parties: List[EventParty]) -> PartySplit:
    buyers = [p for p in parties if BUYER_ROLE_RE.search(p.role)]
    sellers = [p for p in parties if SELLER_ROLE_RE.search(p.role)]
    has_acquirer = any("acquirer" in p.role.lower() for p in buyers)
    return PartySplit(
        buyers=buyers,
        sellers=sellers,
        buyer_label="Buyer(s)" if has_acquirer else "Investor(s)",
    )
