from __future__ import annotations

import re

# Lightweight email regex (intentionally simple/forgiving):
# local@domain with at least one dot in the domain.
_EMAIL_RE = re.compile(r"^[A-Z0-9._%+\-']+@[A-Z0-9.\-]+\.[A-Z]{2,}$", re.IGNORECASE)


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    v = value.strip()
    if ".." in v or v.startswith(".") or "@." in v:
        return False
    return bool(_EMAIL_RE.match(v))


def split_email(value: str) -> tuple[str, str]:
    """'Jane.Doe@Acme.com' -> ('Jane.Doe', 'acme.com'). Domain is lowercased."""
    local, _, domain = value.strip().rpartition("@")
    return local, domain.lower()
