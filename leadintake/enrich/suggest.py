"""
Company suggestion lookup.

Wraps a Clearbit-style autocomplete endpoint:

    GET <SUGGEST_URL>?query=<company name>
    -> [{"name": "Acme Corp", "domain": "acme.com", "logo": "https://..."}, ...]

Results are ordered best-first. No authentication.

Every failure mode (timeout, connection error, non-2xx, non-JSON, wrong shape)
is raised as EnrichmentError so callers can degrade to their own candidate.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from leadintake.config import DEFAULT_SUGGEST_URL
from leadintake.exceptions import EnrichmentError
from leadintake.models import CompanyCandidate
from leadintake.parse.normalize import norm_domain

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 5.0


def _candidate_from_item(item: Any) -> CompanyCandidate | None:
    if not isinstance(item, dict):
        return None
    name = str(item.get("name") or "").strip() or None
    domain = norm_domain(str(item.get("domain") or "").strip() or None)
    logo = str(item.get("logo") or item.get("logo_url") or "").strip() or None
    if not (name or domain):
        return None
    return CompanyCandidate(domain=domain, name=name, logo_url=logo)


class CompanySuggestClient:
    """
    Thin synchronous client. Use as a context manager, or call close().

    Pass `client` to share an httpx.Client (tests use respx against the default one).
    """

    def __init__(
        self,
        url: str = DEFAULT_SUGGEST_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
        )

    def __enter__(self) -> CompanySuggestClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def suggest(self, query: str) -> list[CompanyCandidate]:
        """Return candidates for `query`, best first. Raises EnrichmentError on any failure."""
        q = (query or "").strip()
        if not q:
            return []

        try:
            resp = self._client.get(self.url, params={"query": q})
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException as exc:
            raise EnrichmentError(f"suggest lookup timed out for {q!r}") from exc
        except httpx.HTTPStatusError as exc:
            raise EnrichmentError(
                f"suggest lookup failed for {q!r}: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise EnrichmentError(f"suggest lookup failed for {q!r}: {exc}") from exc
        except ValueError as exc:
            raise EnrichmentError(f"suggest lookup returned non-JSON for {q!r}") from exc

        if not isinstance(data, list):
            raise EnrichmentError(f"suggest lookup returned {type(data).__name__}, expected list")

        out = [c for c in (_candidate_from_item(item) for item in data) if c is not None]
        logger.debug("suggest %r -> %d candidate(s)", q, len(out))
        return out


__all__ = [
    "CompanySuggestClient",
    "DEFAULT_TIMEOUT_SEC",
]
