# leadintake/parse/names.py
"""
Display-name helpers.

- infer_name_from_email(): best-effort name from an address local part when
  the headers carried none ('john.doe' -> 'John Doe').
- split_name(): full name -> (first, last), particle-aware.
"""

from __future__ import annotations

import re

from leadintake.parse.normalize import collapse_ws

# Letters only: digits and punctuation are both treated as boundaries.
_ALPHA_RUN_RE = re.compile(r"[^\W\d_]+", re.UNICODE)

# Common honorifics/suffixes for light cleanup in split_name()
_PREFIXES = {"mr", "mrs", "ms", "miss", "mx", "dr", "prof"}
_SUFFIXES = {"jr", "sr", "ii", "iii", "iv", "phd", "md", "mba", "cpa", "esq"}


def _cap(token: str) -> str:
    """Title-case one token, capitalizing after hyphens/apostrophes (mary-kate, o'leary)."""
    return re.sub(
        r"(^|[-'’])([^\W\d_])",
        lambda m: m.group(1) + m.group(2).upper(),
        token.lower(),
    )


def infer_name_from_email(email: str | None) -> str | None:
    """
    'john.doe@example.com'   -> 'John Doe'
    'm.chen88@gmail.com'     -> 'M Chen'
    '12345@example.com'      -> None
    'j@example.com'          -> None

    Returns None rather than fabricating a name from numeric-only or
    single-character local parts.
    """
    if not email:
        return None
    local = email.rsplit("@", 1)[0]
    tokens = _ALPHA_RUN_RE.findall(local)
    if not tokens:
        return None
    if len(tokens) == 1 and len(tokens[0]) < 2:
        return None
    return " ".join(_cap(t) for t in tokens)


def _strip_affixes(full: str) -> list[str]:
    toks = [t for t in re.split(r"[^\w\-'’.]+", full) if t]
    while toks and toks[0].strip(".").lower() in _PREFIXES:
        toks.pop(0)
    while toks and toks[-1].strip(".").lower() in _SUFFIXES:
        toks.pop()
    return toks


def split_name(full: str | None) -> tuple[str | None, str | None]:
    """
    Split a full name into (first, last).

    - Drops honorific prefixes (Dr., Ms.) and trailing suffixes (Jr., PhD).
    - Everything after the first token is the last name: 'Anna van der Berg' ->
      ('Anna', 'van der Berg').
    - A single token yields (token, None).
    """
    if not full:
        return None, None
    toks = _strip_affixes(collapse_ws(str(full)))
    if not toks:
        return None, None
    if len(toks) == 1:
        return toks[0], None
    return toks[0], " ".join(toks[1:])


__all__ = [
    "infer_name_from_email",
    "split_name",
]
