# leadintake/models.py
"""
Plain data carriers for one intake run.

Transient (built and discarded per email):
    RawEmail, ParsedSender, LeadCandidate, CompanyCandidate

Persisted (mirrors the SQLite rows):
    Company, Lead

Outcome:
    ProcessingResult: terminal state the caller uses to file the source
    message into a "processed" or "failed" bucket.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

CandidateStatus = Literal["parsed", "invalid"]

# Terminal states of LeadPersistenceCoordinator.process()
TerminalState = Literal["rejected", "duplicate", "unlinked", "linked", "failed"]

OK_STATES: frozenset[str] = frozenset({"duplicate", "unlinked", "linked"})


@dataclass(frozen=True, slots=True)
class RawEmail:
    header_text: str
    body_text: str


@dataclass(frozen=True, slots=True)
class ParsedSender:
    email: str | None = None
    domain: str | None = None  # lowercased
    name: str | None = None  # only set by the "Name <email>" style matchers


@dataclass(frozen=True, slots=True)
class CompanyCandidate:
    domain: str | None
    name: str | None = None
    logo_url: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.domain or self.name)


@dataclass(frozen=True, slots=True)
class LeadCandidate:
    email: str | None
    domain: str | None
    status: CandidateStatus
    message: str = ""
    first_name: str | None = None
    last_name: str | None = None
    company_name: str | None = None
    company_domain: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.status == "parsed"

    @property
    def company_candidate(self) -> CompanyCandidate:
        return CompanyCandidate(domain=self.company_domain, name=self.company_name)


@dataclass(frozen=True, slots=True)
class Company:
    id: int
    name: str | None
    domain: str | None
    description: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True, slots=True)
class Lead:
    id: int
    created_at: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    company_id: int | None = None


@dataclass(slots=True)
class ProcessingResult:
    state: TerminalState
    email: str | None = None
    lead_id: int | None = None
    company_id: int | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        """True for outcomes that belong in the "processed" bucket."""
        return self.state in OK_STATES

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["ok"] = self.ok
        return d


__all__ = [
    "CandidateStatus",
    "TerminalState",
    "OK_STATES",
    "RawEmail",
    "ParsedSender",
    "CompanyCandidate",
    "LeadCandidate",
    "Company",
    "Lead",
    "ProcessingResult",
]
