# tests/test_company_resolver.py
from __future__ import annotations

import logging

import pytest
from conftest import FakeLookup, count_rows

from leadintake.exceptions import EnrichmentError, StoreError
from leadintake.models import CompanyCandidate
from leadintake.resolve.company import CompanyResolver

ACME = CompanyCandidate(domain="acme.com", name="Acme Corp", logo_url="https://logo.test/acme.png")


def test_enrichment_adopts_top_result(store):
    lookup = FakeLookup(
        {"Acme Corporation": [ACME, CompanyCandidate(domain="acme.net", name="Acme Net")]}
    )
    resolver = CompanyResolver(store, lookup)

    company = resolver.resolve(CompanyCandidate(domain=None, name="Acme Corporation"))

    assert company.domain == "acme.com"
    assert company.name == "Acme Corp"
    assert company.logo_url == "https://logo.test/acme.png"
    assert lookup.queries == ["Acme Corporation"]


def test_lookup_domain_supersedes_local_domain(store):
    lookup = FakeLookup({"Acme": [ACME]})
    company = CompanyResolver(store, lookup).resolve(
        CompanyCandidate(domain="acme-mail.com", name="Acme")
    )
    assert company.domain == "acme.com"


def test_same_domain_twice_returns_same_company_first_write_wins(store):
    lookup = FakeLookup({"Acme": [ACME]})
    resolver = CompanyResolver(store, lookup)
    first = resolver.resolve(CompanyCandidate(domain=None, name="Acme"))

    lookup.results["Acme"] = [
        CompanyCandidate(domain="acme.com", name="ACME Holdings", logo_url="https://other/logo.png")
    ]
    second = resolver.resolve(CompanyCandidate(domain=None, name="Acme"))

    assert second.id == first.id
    stored = store.select_company_by_domain("acme.com")
    assert stored.name == "Acme Corp"
    assert stored.logo_url == "https://logo.test/acme.png"
    assert count_rows(store, "companies") == 1


def test_lookup_failure_degrades_to_candidate(store, caplog):
    lookup = FakeLookup(error=EnrichmentError("suggest lookup timed out for 'Innovate'"))
    resolver = CompanyResolver(store, lookup)

    with caplog.at_level(logging.WARNING, logger="leadintake.resolve.company"):
        company = resolver.resolve(CompanyCandidate(domain="innovate.tech", name="Innovate"))

    assert company.domain == "innovate.tech"
    assert company.name == "Innovate"
    assert "degraded" in caplog.text


def test_empty_lookup_result_keeps_candidate(store):
    company = CompanyResolver(store, FakeLookup()).resolve(
        CompanyCandidate(domain="innovate.tech", name="Innovate")
    )
    assert (company.domain, company.name) == ("innovate.tech", "Innovate")


def test_domain_only_candidate_skips_lookup(store):
    lookup = FakeLookup()
    company = CompanyResolver(store, lookup).resolve(CompanyCandidate(domain="innovate.tech"))
    assert company.domain == "innovate.tech"
    assert company.name is None
    assert lookup.queries == []


def test_no_lookup_configured(store):
    company = CompanyResolver(store, None).resolve(CompanyCandidate(domain="globex.com", name="Globex"))
    assert company.domain == "globex.com"


def test_name_only_fallback_reuses_existing_name(store):
    resolver = CompanyResolver(store, FakeLookup())
    first = resolver.resolve(CompanyCandidate(domain=None, name="Initech"))
    second = resolver.resolve(CompanyCandidate(domain=None, name="initech"))
    assert first.domain is None
    assert second.id == first.id
    assert count_rows(store, "companies") == 1


def test_empty_candidate_resolves_to_none(store):
    lookup = FakeLookup()
    assert CompanyResolver(store, lookup).resolve(CompanyCandidate(domain=None)) is None
    assert lookup.queries == []
    assert count_rows(store, "companies") == 0


def test_store_errors_propagate(store):
    resolver = CompanyResolver(store, None)
    store.con.close()
    with pytest.raises(StoreError):
        resolver.resolve(CompanyCandidate(domain="acme.com"))


def test_lookup_subdomain_collapses_to_sender_company(store):
    resolver = CompanyResolver(
        store, FakeLookup({"Acme": [CompanyCandidate(domain="www.acme.com", name="Acme")]})
    )
    by_sender = resolver.resolve(CompanyCandidate(domain="acme.com"))
    by_mention = resolver.resolve(CompanyCandidate(domain=None, name="Acme"))

    assert by_mention.id == by_sender.id
    assert by_mention.domain == "acme.com"
    assert count_rows(store, "companies") == 1
