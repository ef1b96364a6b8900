"""
Normalized record types produced by the adapters.

These are transfer objects (Dataclasses), NOT database models. They are
frozen: adapters build them once and the web layer only reads them.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from src.core.models import CompanyType
from src.normalization.coercers import Number


@dataclass(frozen=True)
class TransactionRecord:
    """One row of a recent-transactions table"""
    date: str
    buyer: str
    target: str
    seller: Optional[str] = None
    value: Optional[str] = None
    deal_type: Optional[str] = None
    target_logo_src: Optional[str] = None
    event_id: Optional[Number] = None
    target_company_id: Optional[Number] = None


@dataclass(frozen=True)
class RankedEntity:
    """Strategic acquirer / PE investor leaderboard row"""
    name: str
    count: Number = 0
    id: Optional[Number] = None
    most_recent_target: Optional[str] = None
    closed_date: Optional[str] = None
    logo_src: Optional[str] = None


@dataclass(frozen=True)
class CompanyInvestorRef:
    name: str
    id: Optional[int] = None


@dataclass(frozen=True)
class CompanyRecord:
    """Market-map / sector-listing company"""
    id: int
    name: str
    company_type: CompanyType
    ownership_label: str
    ownership_text: str = ""
    logo_src: Optional[str] = None
    primary_sectors: List[str] = field(default_factory=list)
    secondary_sectors: List[str] = field(default_factory=list)
    is_investor: bool = False
    linkedin_members: int = 0
    linkedin_members_latest: int = 0
    linkedin_members_old: int = 0
    country: str = ""
    description: str = ""
    url: str = ""
    ownership_type_id: int = 0
    bucket: str = ""
    investors: List[CompanyInvestorRef] = field(default_factory=list)


@dataclass(frozen=True)
class IndividualRef:
    name: str
    id: Optional[int] = None
    href: Optional[str] = None


@dataclass(frozen=True)
class EventPartyRef:
    """The counterparty an advisor acted for"""
    name: str
    id: Optional[int] = None
    link_href: Optional[str] = None


@dataclass(frozen=True)
class EventParty:
    """Corporate-event counterparty or advisor"""
    id: int
    name: str
    role: str = ""
    logo_src: Optional[str] = None
    link_href: Optional[str] = None
    individuals: List[IndividualRef] = field(default_factory=list)
    announcement_url: Optional[str] = None
    advising: Optional[EventPartyRef] = None


@dataclass(frozen=True)
class InsightRecord:
    title: str
    id: Optional[int] = None
    summary: str = ""
    date: Optional[str] = None
    tag: Optional[str] = None


@dataclass(frozen=True)
class SubSectorRecord:
    id: int
    sector_name: str
    importance: str = "Secondary"


@dataclass(frozen=True)
class SectorSummary:
    """Sector header + ownership statistics"""
    name: str
    id: Optional[int] = None
    thesis_html: str = ""
    importance: Optional[str] = None
    total_companies: int = 0
    public_count: int = 0
    pe_count: int = 0
    vc_count: int = 0
    private_count: int = 0
    subsidiaries_count: int = 0


@dataclass(frozen=True)
class CompanyPage:
    items: List[CompanyRecord]
    total: int
    cur_page: int
    per_page: int
    page_total: int
    next_page: Optional[int] = None
    prev_page: Optional[int] = None
