# leadintake/parse/normalize.py
from __future__ import annotations

import re
import unicodedata

import idna
import tldextract

# Public Suffix handling: use bundled list only (no network fetch)
_EXTRACT = tldextract.TLDExtract(cache_dir=None, suffix_list_urls=())

_WS_RE = re.compile(r"\s+")


def _to_nfkc(s: str) -> str:
    return unicodedata.normalize("NFKC", s)


def collapse_ws(s: str) -> str:
    return _WS_RE.sub(" ", s).strip()


def norm_domain(domain: str | None) -> str | None:
    """
    Lowercase + IDNA-encode a domain. Returns None for empty input.

    Unencodable input is returned lowercased as-is; validation happens elsewhere.
    """
    if not domain:
        return None
    d = _to_nfkc(str(domain)).strip().strip(".").lower()
    if not d:
        return None
    try:
        return idna.encode(d, uts46=True).decode("ascii")
    except idna.IDNAError:
        return d


def registrable_domain(domain: str | None) -> str | None:
    """
    Collapse any subdomain to the registrable domain (apex),
    e.g. mail.acme.co.uk -> acme.co.uk
    """
    d = norm_domain(domain)
    if not d:
        return None
    ext = _EXTRACT(d)
    if not ext.suffix or not ext.domain:
        return d
    return f"{ext.domain}.{ext.suffix}".lower()
