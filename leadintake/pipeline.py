# leadintake/pipeline.py
"""
LeadPersistenceCoordinator: one inbound email, one sequential run.

    received --invalid--> rejected                      (no store writes)
    received --> parsed --> lead_inserted --> company_resolved --> linked
                        `-> lead_duplicate                       (no-op)
    lead_inserted --(no company identity)--> unlinked
    any store step --StoreError--> failed        (transaction rolled back)

Terminal states map to ProcessingResult.state. `ok` is False only for
rejected/failed, which is what callers use to route the source message into a
"failed" bucket.

Duplicates are idempotent no-ops by default. With relink_duplicates=True a
duplicate whose existing row has no company gets resolved and linked, and
reports "linked".

The company lookup runs before the store transaction opens; everything from
the lead insert to the link commits or rolls back together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from leadintake.config import Settings, load_settings
from leadintake.db import LeadStore
from leadintake.enrich.suggest import CompanySuggestClient
from leadintake.exceptions import DuplicateKeyError, StoreError
from leadintake.models import CompanyCandidate, LeadCandidate, ProcessingResult, RawEmail
from leadintake.parse.builder import LeadRecordBuilder
from leadintake.resolve.company import CompanyResolver

logger = logging.getLogger(__name__)


class LeadPersistenceCoordinator:
    def __init__(
        self,
        store: LeadStore,
        resolver: CompanyResolver,
        builder: LeadRecordBuilder | None = None,
        *,
        relink_duplicates: bool = False,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.builder = builder or LeadRecordBuilder()
        self.relink_duplicates = relink_duplicates

    def process(self, raw: RawEmail) -> ProcessingResult:
        candidate = self.builder.build(raw)
        if not candidate.is_valid:
            return self._finish(
                ProcessingResult("rejected", email=candidate.email, message=candidate.message)
            )
        logger.debug("state=parsed email=%s", candidate.email)

        try:
            if not self.relink_duplicates and self._already_known(candidate):
                return self._finish(
                    ProcessingResult(
                        "duplicate", email=candidate.email, message="lead already exists"
                    )
                )
            # Lookup runs before the write transaction so no lock is held across HTTP.
            company = self.resolver.enrich(candidate.company_candidate)
            with self.store.transaction():
                result = self._persist(candidate, company)
        except StoreError as exc:
            return self._finish(ProcessingResult("failed", email=candidate.email, message=str(exc)))
        return self._finish(result)

    def close(self) -> None:
        lookup = self.resolver.lookup
        if lookup is not None and hasattr(lookup, "close"):
            lookup.close()
        self.store.close()

    def process_many(self, raws: Iterable[RawEmail]) -> list[ProcessingResult]:
        return [self.process(raw) for raw in raws]

    def _already_known(self, candidate: LeadCandidate) -> bool:
        return self.store.select_lead_by_email(candidate.email or "") is not None

    def _persist(
        self, candidate: LeadCandidate, company_candidate: CompanyCandidate
    ) -> ProcessingResult:
        email = candidate.email or ""
        try:
            lead = self.store.insert_lead(email, candidate.first_name, candidate.last_name)
        except DuplicateKeyError:
            logger.debug("state=lead_duplicate email=%s", email)
            return self._handle_duplicate(email, company_candidate)
        logger.debug("state=lead_inserted email=%s lead_id=%s", email, lead.id)

        company = self.resolver.persist(company_candidate)
        if company is None:
            return ProcessingResult(
                "unlinked",
                email=email,
                lead_id=lead.id,
                message="no company identity (personal domain, no company mention)",
            )
        logger.debug("state=company_resolved email=%s company_id=%s", email, company.id)

        self.store.update_lead_company(lead.id, company.id)
        return ProcessingResult(
            "linked",
            email=email,
            lead_id=lead.id,
            company_id=company.id,
            message=f"linked to {company.name or company.domain}",
        )

    def _handle_duplicate(
        self, email: str, company_candidate: CompanyCandidate
    ) -> ProcessingResult:
        if not self.relink_duplicates:
            return ProcessingResult("duplicate", email=email, message="lead already exists")

        existing = self.store.select_lead_by_email(email)
        if existing is None:
            raise StoreError(f"lead {email!r} reported duplicate but was not found")
        if existing.company_id is not None:
            return ProcessingResult(
                "duplicate",
                email=email,
                lead_id=existing.id,
                company_id=existing.company_id,
                message="lead already exists",
            )

        company = self.resolver.persist(company_candidate)
        if company is None:
            return ProcessingResult(
                "duplicate", email=email, lead_id=existing.id, message="lead already exists"
            )
        self.store.update_lead_company(existing.id, company.id)
        return ProcessingResult(
            "linked",
            email=email,
            lead_id=existing.id,
            company_id=company.id,
            message=f"existing lead re-linked to {company.name or company.domain}",
        )

    @staticmethod
    def _finish(result: ProcessingResult) -> ProcessingResult:
        if result.state == "failed":
            logger.error("Lead intake failed: email=%s %s", result.email, result.message)
        else:
            logger.info(
                "Lead intake %s: email=%s lead_id=%s company_id=%s",
                result.state,
                result.email,
                result.lead_id,
                result.company_id,
            )
        return result


def build_coordinator(
    settings: Settings | None = None,
    store: LeadStore | None = None,
) -> LeadPersistenceCoordinator:
    """Wire the coordinator from Settings (env-driven by default)."""
    settings = settings or load_settings()
    store = store or LeadStore.connect(settings.database_url)
    lookup = None
    if settings.suggest_enabled:
        lookup = CompanySuggestClient(settings.suggest_url, timeout=settings.suggest_timeout_sec)
    return LeadPersistenceCoordinator(
        store,
        CompanyResolver(store, lookup),
        LeadRecordBuilder(settings.personal_domains),
        relink_duplicates=settings.relink_duplicates,
    )


__all__ = [
    "LeadPersistenceCoordinator",
    "build_coordinator",
]
