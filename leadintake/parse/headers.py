# leadintake/parse/headers.py
"""
Sender extraction from forwarded-message header text.

Forwarded mail embeds the original headers in the body, and different clients
render them differently:

    From: Jane Doe <jane@acme.com>                  (Gmail, Apple Mail)
    From: Doe, Jane [mailto:jane@acme.com]          (Outlook)
    *From:* "Jane Doe" <jane@acme.com>              (HTML->text conversions)
    From: <jane@acme.com>
    From: jane@acme.com

Only the FIRST "From:" line in document order is used. Later ones belong to
quoted history (">"-prefixed or nested forwards), not the actual sender.

Each matcher is a pure function `line -> ParsedSender | None`; they are tried
in order and the first hit wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from leadintake.models import ParsedSender
from leadintake.parse.validators import split_email

Matcher = Callable[[str], ParsedSender | None]

# "From:" label at line start, optionally behind quote markers and bold/italic markup.
# The value may be empty on the label line and continue on folded lines.
FROM_LABEL_RE = re.compile(
    r"^[ \t>]*[*_]{0,2}From[*_]{0,2}[ \t]*:[*_]{0,2}(?P<value>[^\n]*)$",
    re.IGNORECASE | re.MULTILINE,
)
_FOLDED_RE = re.compile(r"\n(?P<more>[ \t]+\S[^\n]*)")

_ADDR = r"[^<>\[\]\s@\",;:]+@[^<>\[\]\s@\",;:]+"

# "Doe, John" is reordered; "Acme, Inc" is not.
_ORG_TAIL = {"inc", "llc", "ltd", "corp", "co", "gmbh", "plc", "sa", "ag", "team"}

_NAME_ANGLE_RE = re.compile(rf"^(?P<name>[^<>]*?)\s*<\s*(?:mailto:)?(?P<email>{_ADDR})\s*>")
_NAME_MAILTO_RE = re.compile(rf"^(?P<name>[^\[\]<>]*?)\s*\[\s*mailto:\s*(?P<email>{_ADDR})\s*\]")
_ANGLE_ONLY_RE = re.compile(rf"<\s*(?:mailto:)?(?P<email>{_ADDR})\s*>")
_BARE_RE = re.compile(r"(?P<email>[A-Z0-9._%+\-']+@[A-Z0-9.\-]+\.[A-Z]{2,})", re.IGNORECASE)

_NAME_STRIP = " \t\"'*_"


def find_from_line(text: str | None) -> str | None:
    """
    Return the value of the first "From:" header in document order, or None.

    Folded continuation lines (leading whitespace) are unfolded into the value.
    The first label is authoritative even when its value is empty; later
    "From:" lines are never consulted.
    """
    if not text:
        return None
    m = FROM_LABEL_RE.search(text)
    if not m:
        return None
    parts = [m.group("value")]
    pos = m.end()
    while True:
        folded = _FOLDED_RE.match(text, pos)
        if folded is None:
            break
        parts.append(folded.group("more"))
        pos = folded.end()
    return " ".join(" ".join(parts).split())


def _clean_email(raw: str) -> str:
    return raw.strip().strip(".,;:*_")


def _clean_name(raw: str | None) -> str | None:
    """
    Strip quoting/markup from a display name.

    "Doe, John" is reordered to "John Doe". A display name that is itself an
    address carries no name information and is dropped.
    """
    if not raw:
        return None
    name = " ".join(raw.strip(_NAME_STRIP).split())
    if not name or "@" in name:
        return None
    if name.count(",") == 1:
        last, first = (p.strip(_NAME_STRIP) for p in name.split(","))
        if first and last and first.strip(".").lower() not in _ORG_TAIL:
            name = f"{first} {last}"
    return name or None


def _sender(email: str, name: str | None = None) -> ParsedSender:
    addr = _clean_email(email)
    _local, domain = split_email(addr)
    return ParsedSender(email=addr, domain=domain or None, name=name)


def match_name_angle(line: str) -> ParsedSender | None:
    """`Name <email>`: the only shape that yields both name and address."""
    m = _NAME_ANGLE_RE.search(line)
    if not m:
        return None
    name = _clean_name(m.group("name"))
    if not name:
        return None
    return _sender(m.group("email"), name)


def match_name_mailto(line: str) -> ParsedSender | None:
    """`Name [mailto:email]`: Outlook's rendering of forwarded headers."""
    m = _NAME_MAILTO_RE.search(line)
    if not m:
        return None
    return _sender(m.group("email"), _clean_name(m.group("name")))


def match_angle_only(line: str) -> ParsedSender | None:
    m = _ANGLE_ONLY_RE.search(line)
    return _sender(m.group("email")) if m else None


def match_bare(line: str) -> ParsedSender | None:
    m = _BARE_RE.search(line)
    return _sender(m.group("email")) if m else None


MATCHERS: tuple[Matcher, ...] = (
    match_name_angle,
    match_name_mailto,
    match_angle_only,
    match_bare,
)


def extract_sender(header_text: str | None, matchers: Sequence[Matcher] = MATCHERS) -> ParsedSender:
    """
    Parse the sender out of `header_text`.

    Returns an empty ParsedSender (email=None) when there is no "From:" line or
    none of the matchers recognise it.
    """
    line = find_from_line(header_text)
    if line is None:
        return ParsedSender()
    for matcher in matchers:
        hit = matcher(line)
        if hit is not None:
            return hit
    return ParsedSender()


__all__ = [
    "FROM_LABEL_RE",
    "MATCHERS",
    "extract_sender",
    "find_from_line",
    "match_angle_only",
    "match_bare",
    "match_name_angle",
    "match_name_mailto",
]
