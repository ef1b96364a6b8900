"""
Unit tests for corporate-event party adapters and link routing.
"""
from src.normalization.events import (
    adapt_advisor,
    adapt_advisors,
    adapt_counterparties,
    adapt_counterparty,
    adapt_individuals,
    counterparty_role,
    resolve_party_link,
    split_event_parties,
)
from src.normalization.records import EventParty


class TestResolvePartyLink:

    def test_investor_prefers_profile_id(self):
        company = {"id": 5, "_is_that_investor": True, "_investor_profile_id": 42}
        assert resolve_party_link(company, 9) == "/investors/42"

    def test_investor_falls_back_to_party_id(self):
        company = {"id": 5, "_is_that_investor": True, "_investor_profile_id": 0}
        assert resolve_party_link(company, 9) == "/investors/9"
        assert resolve_party_link(company) == "/investors/5"

    def test_data_analytics_company(self):
        company = {"id": 5, "_is_that_data_analytic_company": True}
        assert resolve_party_link(company, 9) == "/company/9"

    def test_canonical_url_rewritten(self):
        company = {"id": 5, "_url": "https://app.example.com/investor/5"}
        assert resolve_party_link(company) == "https://app.example.com/investors/5"

    def test_flags_must_be_real_booleans(self):
        company = {"id": 5, "_is_that_investor": "true", "_is_that_data_analytic_company": 1}
        assert resolve_party_link(company) is None

    def test_no_link(self):
        assert resolve_party_link({"id": 5}) is None
        assert resolve_party_link({"id": 5}, fallback_href="/advisor/5") == "/advisor/5"
        assert resolve_party_link(None) is None


class TestCounterparty:

    def test_role_fallback_key(self):
        raw = {"_counterparty_type": {"counterparty_status": "Divestor"}}
        assert counterparty_role(raw) == "Divestor"
        party = adapt_counterparty(dict(raw, _new_company={"id": 3, "name": "Seller"}))
        assert party.role == "Divestor"

    def test_current_role_key_wins(self):
        raw = {
            "_counterpartys_type": {"counterparty_status": "Acquirer"},
            "_counterparty_type": {"counterparty_status": "Divestor"},
        }
        assert counterparty_role(raw) == "Acquirer"

    def test_flat_status(self):
        assert counterparty_role({"counterparty_status": "Target"}) == "Target"
        assert counterparty_role({}) == ""

    def test_full_counterparty(self, payloads):
        party = adapt_counterparty(payloads["event"]["Event_counterparties"][0])
        assert party.id == 99
        assert party.name == "Big Co"
        assert party.role == "Acquirer"
        assert party.link_href == "https://app.example.com/company/99"
        assert party.announcement_url == "https://example.com/pr"
        assert [(i.name, i.href) for i in party.individuals] == [
            ("Jane Doe", "/individual/700"),
            ("John Roe", None),
        ]

    def test_logo_sources(self):
        raw = {"_new_company": {"id": 1, "name": "A",
                                "linkedin_data": {"linkedin_logo": "https://cdn.example.com/a.png"}}}
        assert adapt_counterparty(raw).logo_src == "https://cdn.example.com/a.png"
        raw["_new_company"]["_linkedin_data_of_new_company"] = {"linkedin_logo": "iVBORw0KGgo="}
        assert adapt_counterparty(raw).logo_src == "data:image/jpeg;base64,iVBORw0KGgo="

    def test_name_required(self):
        assert adapt_counterparty({"_new_company": {"id": 1}}) is None
        assert adapt_counterparty(None) is None
        assert adapt_counterparties({"items": [{"x": 1}, {"_new_company": {"name": "A"}}]})[0].name == "A"


class TestAdvisor:

    def test_advisor(self, payloads):
        advisor = adapt_advisor(payloads["event"]["Event_advisors"][0])
        assert advisor.id == 300
        assert advisor.name == "Advisory LLP"
        assert advisor.role == "Financial Advisor"
        assert advisor.link_href == "/advisor/300"
        assert advisor.announcement_url == "https://example.com/adv"
        assert advisor.advising.name == "Big Co"
        assert advisor.advising.id == 99
        assert advisor.advising.link_href is None

    def test_investor_advisor_routes_to_investor(self):
        advisor = adapt_advisor({"_new_company": {"id": 8, "name": "Bank", "_is_that_investor": True}})
        assert advisor.link_href == "/investors/8"

    def test_collection(self):
        assert adapt_advisors([{"_new_company": {"name": ""}}, "junk"]) == []


def test_individuals_skip_nameless():
    individuals = adapt_individuals([{"individuals_id": 3}, {"advisor_individuals": "Ann", "individuals_id": "4"}])
    assert [(i.name, i.id, i.href) for i in individuals] == [("Ann", 4, "/individual/4")]


def test_split_event_parties():
    parties = [
        EventParty(id=1, name="A", role="Acquirer"),
        EventParty(id=2, name="B", role="Investor"),
        EventParty(id=3, name="C", role="Divestor"),
        EventParty(id=4, name="D", role="Target"),
        EventParty(id=5, name="E", role="Vendor"),
    ]
    split = split_event_parties(parties)
    assert [p.name for p in split.buyers] == ["A", "B"]
    assert [p.name for p in split.sellers] == ["C", "E"]
    assert split.buyer_label == "Buyer(s)"

    investors_only = split_event_parties([EventParty(id=2, name="B", role="Lead Investor")])
    assert investors_only.buyer_label == "Investor(s)"
