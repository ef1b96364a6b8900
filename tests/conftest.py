"""
Shared pytest fixtures for the sector intelligence test suite.
"""
import copy

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from src.core.database import Base
from src.dashboard import database as dashboard_database  # noqa: F401
from src.dashboard.client import XanoError


# --- Database Fixtures ---

@pytest.fixture
async def async_db_session():
    """Async in-memory SQLite session for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session_factory() as session:
        yield session

    await engine.dispose()


# --- Mock Xano Payloads ---

SECTOR_PAYLOAD = {
    "Sector": {
        "id": 12,
        "sector_name": "Data & Analytics",
        "Sector_thesis": "&lt;p&gt;Data &amp; analytics thesis&lt;/p&gt;",
        "Sector_importance": "Primary",
    },
    "Total_number_of_companies": [{
        "Number_of_Companies": 120,
        "Number_of_PE": 10,
        "Number_of_VC": 20,
        "Number_of_Public": 5,
        "Number_of_Private": 85,
        "Number_of_Subsidiaries_Acquired": 3,
    }],
}

OVERVIEW_PAYLOAD = {
    "market_map": {
        "Public Companies": [{"id": "5", "name": "Acme", "country": "UK"}],
        "pe_companies": [{"id": 6, "name": "Beta Data", "ownership": "Private Equity"}],
        "Venture Capital": [{"id": 7, "company_name": "Gamma AI", "linkedin_employee": 40}],
        "Private": [{"original_new_company_id": 8, "name": "Delta Ltd"}],
    },
    "strategic_acquirers": {
        "items": [
            {"Acquirer": "Big Co", "Deals_5y": "7", "acquirer_company_id": 99,
             "Most_Recent_Target": "Small Co", "Closed_Date": "2024-03-01"},
            {"Deals_5y": 2},
        ]
    },
    "pe_investors": [{"investor": "Fund X", "count": 3, "logo": "https://media.licdn.com/x.jpg"}],
}

RECENT_PAYLOAD = {
    "resent_trasnactions": [
        {"deal_date": "2024-01-02", "buyer_name": "Big Co", "target_name": "Small Co",
         "value_usd": 12.5, "Corporate_event_id": 501, "Target_company_id": "77"},
        {"deal_date": "2024-01-05", "value_usd": 3},
    ]
}

SECTOR_COMPANIES_PAYLOAD = {
    "result1": {
        "items": [
            {"id": 1, "name": "Acme", "ownership": "Public", "sectors": [{"sector_name": "BI"}],
             "primary_sectors": ["Data & Analytics"], "linkedin_members": 250},
            {"id": 2, "name": "Beta", "ownership": "Venture Capital", "secondary_sectors": "{\"AI\",\"ML\"}"},
            {"id": 3, "name": "Gamma", "ownership": "Private Equity"},
        ],
        "itemsReceived": 3,
        "curPage": 2,
        "nextPage": 3,
        "prevPage": 1,
        "perPage": 3,
        "pageTotal": 14,
    },
    "sql_count": [{"total_companies": 42}],
}

# Ownership-filtered companies search; the stray private row exercises the local check
FILTERED_COMPANIES_PAYLOAD = {
    "result1": {
        "items": [
            {"id": 1, "name": "Acme", "ownership": "Public"},
            {"id": 4, "name": "Delta", "ownership": "Private"},
        ],
        "itemsReceived": 5,
        "curPage": 2,
        "nextPage": None,
        "prevPage": 1,
        "perPage": 3,
        "pageTotal": 2,
    }
}

SUB_SECTORS_PAYLOAD = [
    {"id": 31, "sector_name": "Market Data"},
    {"sector_id": "32", "name": "Credit Ratings"},
    {"foo": "bar"},
]

CORPORATE_EVENT_PAYLOAD = {
    "Event": [{
        "id": 501,
        "description": "Big Co acquires Small Co",
        "deal_type": "Acquisition",
        "deal_status": "Completed",
        "announcement_date": "2024-01-02",
        "closed_date": "2024-02-01",
        "investment_data": {"investment_amount_m": "12.5"},
        "ev_data": {"enterprise_value_m": "40", "_currency": {"Currency": "USD"}},
    }],
    "Event_counterparties": [
        {
            "id": 1,
            "new_company_counterparty": 99,
            "counterparty_announcement_url": "https://example.com/pr",
            "_counterpartys_type": {"counterparty_status": "Acquirer"},
            "counterparty_individuals": [
                {"id": 1, "individuals_id": 700, "advisor_individuals": "Jane Doe"},
                {"id": 2, "advisor_individuals": "John Roe"},
            ],
            "_new_company": {"id": 99, "name": "Big Co", "_is_that_investor": False,
                             "_url": "https://app.example.com/company/99"},
        },
        {
            "id": 2,
            "new_company_counterparty": 77,
            "_counterparty_type": {"counterparty_status": "Divestor"},
            "_new_company": {"id": 77, "name": "Seller Group", "_is_that_investor": True,
                             "_investor_profile_id": 4},
        },
        {"id": 3, "_counterpartys_type": {"counterparty_status": "Target"}, "_new_company": {"id": 50, "name": "Small Co"}},
    ],
    "Event_advisors": [
        {
            "id": 9,
            "announcement_url": "https://example.com/adv",
            "_new_company": {"id": 300, "name": "Advisory LLP"},
            "_advisor_role": {"counterparty_status": "Financial Advisor"},
            "_counterparties": {"new_company_counterparty": 99, "_new_company": {"id": 99, "name": "Big Co"}},
        }
    ],
    "Primary_sectors": [{"id": 12, "sector_name": "Data & Analytics"}],
    "Sub-sectors": [{"id": 31, "sector_name": "Market Data"}],
    "Related_Articles": [{"id": 1, "Headline": "Event write-up", "Content_Type": "Deal Analysis"}],
}

ARTICLES_PAYLOAD = {
    "items": [
        {"id": 1, "Headline": "Event write-up"},
        {"id": 2, "Headline": "Sector trends", "Strapline": "What changed", "Publication_Date": "2024-02-10"},
    ]
}


class FakeXanoClient:
    """Stand-in for XanoClient serving canned payloads; a payload that is an Exception is raised."""

    def __init__(self, **overrides):
        self.token = None
        self.calls = []
        self.payloads = {
            "overview": OVERVIEW_PAYLOAD,
            "sector": SECTOR_PAYLOAD,
            "recent": RECENT_PAYLOAD,
            "companies": SECTOR_COMPANIES_PAYLOAD,
            "filtered_companies": FILTERED_COMPANIES_PAYLOAD,
            "sub_sectors": SUB_SECTORS_PAYLOAD,
            "primary_sectors": [{"id": 12}, {"Sector_id": 13}],
            "event": CORPORATE_EVENT_PAYLOAD,
            "articles": ARTICLES_PAYLOAD,
        }
        self.payloads.update(overrides)

    async def _serve(self, name, *args):
        self.calls.append((name,) + args)
        payload = self.payloads[name]
        if isinstance(payload, Exception):
            raise payload
        return copy.deepcopy(payload)

    async def get_overview_data(self, sector_id):
        return await self._serve("overview", sector_id)

    async def get_sector(self, sector_id):
        return await self._serve("sector", sector_id)

    async def get_recent_transactions(self, sector_id, top_15=True):
        return await self._serve("recent", sector_id)

    async def get_sector_companies(self, sector_id, page, per_page, ownership_type_ids=None):
        if ownership_type_ids:
            return await self._serve("filtered_companies", sector_id, page, per_page, list(ownership_type_ids))
        return await self._serve("companies", sector_id, page, per_page)

    async def get_sub_sectors(self, sector_id):
        return await self._serve("sub_sectors", sector_id)

    async def get_primary_sectors(self):
        return await self._serve("primary_sectors")

    async def get_corporate_event(self, event_id):
        return await self._serve("event", event_id)

    async def get_content_articles(self, **params):
        return await self._serve("articles", params)


@pytest.fixture
def fake_xano():
    """Factory for FakeXanoClient with per-endpoint payload overrides."""
    def _create(**overrides):
        return FakeXanoClient(**overrides)
    return _create


@pytest.fixture
def upstream_error():
    def _create(status_code=500, path="/api:test", message="boom"):
        return XanoError(status_code, path, message)
    return _create


@pytest.fixture
def payloads():
    """Deep copies of the canned Xano payloads, keyed by endpoint."""
    return copy.deepcopy({
        "sector": SECTOR_PAYLOAD,
        "overview": OVERVIEW_PAYLOAD,
        "recent": RECENT_PAYLOAD,
        "companies": SECTOR_COMPANIES_PAYLOAD,
        "filtered_companies": FILTERED_COMPANIES_PAYLOAD,
        "sub_sectors": SUB_SECTORS_PAYLOAD,
        "event": CORPORATE_EVENT_PAYLOAD,
        "articles": ARTICLES_PAYLOAD,
    })
