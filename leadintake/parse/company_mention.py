# leadintake/parse/company_mention.py
"""
Company mentions in message bodies.

Only used for senders on personal providers (gmail.com, outlook.com, ...):
their address says nothing about the employer, so we look for the usual
self-introduction instead:

    "I'm VP of Ops at **Acme Corporation**."
    "I lead procurement at Globex Industries and we're evaluating ..."

Rules:
- Emphasized (**bold** / __bold__) and plain "at <Company>" forms.
- Plain form must start with a capital letter ("at 3pm", "at the moment" do not count).
- Capture is bounded and stops at sentence punctuation or a line break.
- Earliest match in document order wins.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

MAX_COMPANY_LEN = 60

_EMPHASIS_RE = re.compile(
    r"\b(?i:at)[ \t]+(?:\*\*|__)[ \t]*(?P<name>[^*_\n]{1,%d}?)[ \t]*(?:\*\*|__)" % MAX_COMPANY_LEN
)
_PLAIN_RE = re.compile(
    r"\b(?i:at)[ \t]+(?P<name>[A-Z][^\n.!?,;:()*<>\[\]|]{0,%d})" % (MAX_COMPANY_LEN - 1)
)

# Lower-case words allowed inside a company name ("Bank of America").
_CONNECTORS = {"of", "and", "&", "the", "for", "de", "du", "von", "van", "y"}

# Capitalized words that follow "at" but are not employers.
_NOT_COMPANIES = {
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
    "january",
    "february",
    "march",
    "april",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
    "noon",
    "midnight",
    "i",
    "my",
    "our",
    "your",
    "this",
    "that",
    "least",
    "all",
}


def is_personal_domain(domain: str | None, personal_domains: Iterable[str]) -> bool:
    """Case-insensitive exact match against the configured provider list."""
    if not domain:
        return False
    d = domain.strip().lower()
    return d in {p.lower() for p in personal_domains}


def _trim_plain(name: str) -> str | None:
    """
    Cut a plain capture down to the capitalized run:
    'Globex Industries and we are evaluating' -> 'Globex Industries'
    """
    kept: list[str] = []
    for tok in name.split():
        if tok[0].isupper() or tok[0].isdigit() or tok.lower() in _CONNECTORS:
            kept.append(tok)
            continue
        break
    while kept and kept[-1].lower() in _CONNECTORS:
        kept.pop()
    if not kept or kept[0].lower() in _NOT_COMPANIES:
        return None
    return " ".join(kept)


def _clean_emphasis(name: str) -> str | None:
    out = " ".join(name.split()).strip(" .,;:")
    return out or None


def scan_company_mention(body_text: str | None) -> str | None:
    """Return the first company named as "at <Company>" in `body_text`, or None."""
    if not body_text:
        return None

    hits: list[tuple[int, str]] = []
    for m in _EMPHASIS_RE.finditer(body_text):
        name = _clean_emphasis(m.group("name"))
        if name:
            hits.append((m.start(), name))
            break
    for m in _PLAIN_RE.finditer(body_text):
        name = _trim_plain(m.group("name"))
        if name:
            hits.append((m.start(), name))
            break

    if not hits:
        return None
    return min(hits, key=lambda h: h[0])[1]


__all__ = [
    "MAX_COMPANY_LEN",
    "is_personal_domain",
    "scan_company_mention",
]
