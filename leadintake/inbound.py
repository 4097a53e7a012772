# leadintake/inbound.py
"""
Inbound adapter: turn a delivered message into a RawEmail.

Forwarded inquiries carry the original sender inside the body ("From: ..."
block written by the forwarding client), so the body text doubles as header
text and the envelope From is appended last. Anything else (direct inquiries,
replies quoting older mail) puts the envelope From first.

HTML-only messages are flattened to text; <b>/<strong> become **bold** so the
company-mention scanner still sees emphasis.
"""

from __future__ import annotations

import html
import re
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from pathlib import Path

from leadintake.models import RawEmail
from leadintake.parse.headers import FROM_LABEL_RE

_BOLD_RE = re.compile(r"</?(?:b|strong)(?:\s[^>]*)?>", re.IGNORECASE)
_BREAK_RE = re.compile(r"<(?:br|/p|/div|/tr|/li)\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_SPACES_RE = re.compile(r"[ \t]+")

_FORWARD_SUBJECT_RE = re.compile(r"^\s*fwd?\s*:", re.IGNORECASE)
# "Original Message" is left out: Outlook also uses it when quoting a reply.
_FORWARD_MARKER_RE = re.compile(
    r"^[ \t>]*(?:-{2,}[ \t]*Forwarded message[ \t]*-{2,}|Begin forwarded message:)",
    re.IGNORECASE | re.MULTILINE,
)

def html_to_text(s: str) -> str:
    """Best-effort convert HTML to plain text, keeping bold as **markers**."""
    if not s:
        return ""
    out = _BOLD_RE.sub("**", s)
    out = _BREAK_RE.sub("\n", out)
    out = html.unescape(_TAG_RE.sub(" ", out))
    return "\n".join(_SPACES_RE.sub(" ", line).strip() for line in out.splitlines())


def _body_text(msg: EmailMessage) -> str:
    part = msg.get_body(preferencelist=("plain", "html"))
    if part is None:
        return ""
    content = part.get_content()
    if part.get_content_subtype() == "html":
        return html_to_text(content)
    return content


def is_forward(subject: str | None, body: str) -> bool:
    """
    A Fwd:/FW: subject, or a forward marker that precedes the first "From:"
    line of the body.
    """
    if subject and _FORWARD_SUBJECT_RE.match(subject):
        return True
    marker = _FORWARD_MARKER_RE.search(body)
    if marker is None:
        return False
    first_from = FROM_LABEL_RE.search(body)
    return first_from is None or marker.start() < first_from.start()


def raw_email_from_message(msg: EmailMessage) -> RawEmail:
    body = _body_text(msg)
    header_text = body
    envelope_from = msg.get("From")
    if envelope_from:
        if is_forward(msg.get("Subject"), body):
            header_text = f"{body}\nFrom: {envelope_from}"
        else:
            # Direct mail: "From:" lines in the body are quoted history.
            header_text = f"From: {envelope_from}\n\n{body}"
    return RawEmail(header_text=header_text, body_text=body)


def raw_email_from_bytes(data: bytes) -> RawEmail:
    msg = BytesParser(policy=policy.default).parsebytes(data)
    return raw_email_from_message(msg)


def raw_email_from_path(path: Path | str) -> RawEmail:
    """
    .eml files are parsed as RFC 822 messages; anything else is read as plain
    text that serves as both header and body text.
    """
    p = Path(path)
    if p.suffix.lower() == ".eml":
        return raw_email_from_bytes(p.read_bytes())
    text = p.read_text(encoding="utf-8", errors="replace")
    return RawEmail(header_text=text, body_text=text)


__all__ = [
    "html_to_text",
    "is_forward",
    "raw_email_from_bytes",
    "raw_email_from_message",
    "raw_email_from_path",
]
