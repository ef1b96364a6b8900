"""
Core enums for the sector intelligence service.

NOTE: These are NOT database models. For SQLAlchemy ORM models, see each module's database.py:
  - SectorSnapshotModel → src/dashboard/database.py

CompanyType is the ownership taxonomy used for market-map grouping and for
filtering sector company listings.
"""
from enum import Enum


class CompanyType(str, Enum):
    PUBLIC = "public"
    PRIVATE_EQUITY_OWNED = "private_equity_owned"
    VENTURE_CAPITAL_BACKED = "venture_capital_backed"
    PRIVATE = "private"


COMPANY_TYPE_LABELS = {
    CompanyType.PUBLIC: "Public",
    CompanyType.PRIVATE_EQUITY_OWNED: "Private Equity Owned",
    CompanyType.VENTURE_CAPITAL_BACKED: "Venture Capital Backed",
    CompanyType.PRIVATE: "Private",
}

# Upstream ownership type ids, used to filter company listings server-side
OWNERSHIP_TYPE_IDS = {
    CompanyType.PUBLIC: 7,
    CompanyType.PRIVATE_EQUITY_OWNED: 1,
    CompanyType.VENTURE_CAPITAL_BACKED: 3,
    CompanyType.PRIVATE: 2,
}
