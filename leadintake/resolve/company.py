# leadintake/resolve/company.py
"""
CompanyResolver: CompanyCandidate -> canonical persisted Company.

Steps:
  1. Enrich (best-effort): if the candidate has a name, ask the suggestion
     lookup and adopt the top result's name/domain/logo. The lookup's domain
     wins over the locally derived one. Lookup failure or no results -> keep
     the candidate as-is.
  2. Select by domain; an existing row is returned untouched (first write wins).
  3. Otherwise insert; a UNIQUE race on domain re-selects the winner.

No domain after enrichment (personal sender whose mention the lookup did not
recognise): fall back to an exact-name match, then a name-only insert.

Store errors propagate as StoreError; enrichment errors never do.
"""

from __future__ import annotations

import logging
from typing import Protocol

from leadintake.db import LeadStore
from leadintake.exceptions import EnrichmentError
from leadintake.models import Company, CompanyCandidate
from leadintake.parse.normalize import registrable_domain

logger = logging.getLogger(__name__)


class SuggestLookup(Protocol):
    def suggest(self, query: str) -> list[CompanyCandidate]: ...


class CompanyResolver:
    def __init__(self, store: LeadStore, lookup: SuggestLookup | None = None) -> None:
        self.store = store
        self.lookup = lookup

    def enrich(self, candidate: CompanyCandidate) -> CompanyCandidate:
        """Return the enriched candidate, or the original one when enrichment is unavailable."""
        if not candidate.name or self.lookup is None:
            return candidate
        try:
            results = self.lookup.suggest(candidate.name)
        except EnrichmentError as exc:
            logger.warning("Company enrichment degraded to local candidate: %s", exc)
            return candidate
        if not results:
            logger.info("Company enrichment found no match for %r", candidate.name)
            return candidate

        top = results[0]
        return CompanyCandidate(
            # Same apex rule as sender domains, so both paths key one row.
            domain=registrable_domain(top.domain) or candidate.domain,
            name=top.name or candidate.name,
            logo_url=top.logo_url or candidate.logo_url,
        )

    def resolve(self, candidate: CompanyCandidate) -> Company | None:
        """Return the canonical Company for `candidate`, or None if it carries no identity."""
        if candidate.is_empty:
            return None
        return self.persist(self.enrich(candidate))

    def persist(self, enriched: CompanyCandidate) -> Company | None:
        """Store half of resolve(): no lookup, only select/insert."""
        if enriched.is_empty:
            return None

        if enriched.domain:
            company = self.store.get_or_create_company(enriched)
            logger.debug("Company resolved by domain=%s -> id=%s", enriched.domain, company.id)
            return company

        existing = self.store.select_company_by_name(enriched.name or "")
        if existing is not None:
            logger.debug("Company resolved by name=%r -> id=%s", enriched.name, existing.id)
            return existing
        company = self.store.insert_company(enriched.name, None, enriched.logo_url)
        logger.info("Company created without domain: name=%r id=%s", enriched.name, company.id)
        return company


__all__ = [
    "CompanyResolver",
    "SuggestLookup",
]
