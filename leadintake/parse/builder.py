# leadintake/parse/builder.py
"""
LeadRecordBuilder: RawEmail -> LeadCandidate.

The candidate's status is the single gate for persistence: "invalid"
candidates never reach the store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from leadintake.config import load_personal_domains
from leadintake.exceptions import ParseError
from leadintake.models import LeadCandidate, RawEmail
from leadintake.parse.company_mention import is_personal_domain, scan_company_mention
from leadintake.parse.headers import extract_sender
from leadintake.parse.names import infer_name_from_email, split_name
from leadintake.parse.normalize import registrable_domain
from leadintake.parse.validators import is_valid_email

logger = logging.getLogger(__name__)

NO_SENDER_MESSAGE = "no parseable From address found"


class LeadRecordBuilder:
    def __init__(self, personal_domains: Iterable[str] | None = None) -> None:
        domains = load_personal_domains() if personal_domains is None else personal_domains
        self.personal_domains = frozenset(d.strip().lower() for d in domains if d)

    def build(self, raw: RawEmail) -> LeadCandidate:
        sender = extract_sender(raw.header_text)

        if not is_valid_email(sender.email):
            message = NO_SENDER_MESSAGE
            if sender.email:
                message = f"{NO_SENDER_MESSAGE} (got {sender.email!r})"
            logger.info("Lead rejected: %s", message)
            return LeadCandidate(
                email=sender.email,
                domain=sender.domain,
                status="invalid",
                message=message,
            )

        full_name = sender.name or infer_name_from_email(sender.email)
        first, last = split_name(full_name)

        personal = is_personal_domain(sender.domain, self.personal_domains)
        if personal:
            # A provider domain never identifies the employer.
            company_name = scan_company_mention(raw.body_text)
            company_domain = None
        else:
            company_name = None
            company_domain = registrable_domain(sender.domain)

        msg = "parsed"
        if sender.name is None:
            msg = "parsed; name inferred from address" if full_name else "parsed; no name"
        logger.debug(
            "Lead parsed: email=%s personal=%s company_name=%r company_domain=%s",
            sender.email,
            personal,
            company_name,
            company_domain,
        )
        return LeadCandidate(
            email=sender.email,
            domain=sender.domain,
            status="parsed",
            message=msg,
            first_name=first,
            last_name=last,
            company_name=company_name,
            company_domain=company_domain,
        )

    def build_strict(self, raw: RawEmail) -> LeadCandidate:
        """Same as build(), but raises ParseError instead of returning an invalid candidate."""
        candidate = self.build(raw)
        if not candidate.is_valid:
            raise ParseError(candidate.message)
        return candidate


__all__ = [
    "NO_SENDER_MESSAGE",
    "LeadRecordBuilder",
]
