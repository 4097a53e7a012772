# ruff: noqa: E402
# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from leadintake.db import LeadStore, ensure_schema, get_connection
from leadintake.models import CompanyCandidate, RawEmail


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer .env / shell settings out of tests."""
    for var in (
        "DATABASE_URL",
        "DATABASE_PATH",
        "SUGGEST_URL",
        "SUGGEST_TIMEOUT_SEC",
        "SUGGEST_ENABLED",
        "RELINK_DUPLICATES",
        "PERSONAL_DOMAINS",
        "PERSONAL_DOMAINS_FILE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def temp_db(tmp_path: Path) -> Path:
    db_path = tmp_path / "leads.db"
    con = get_connection(str(db_path))
    try:
        ensure_schema(con)
    finally:
        con.close()
    return db_path


@pytest.fixture
def store(temp_db: Path):
    s = LeadStore(get_connection(str(temp_db)))
    yield s
    s.close()


def count_rows(store: LeadStore, table: str) -> int:
    return int(store.con.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0])


class FakeLookup:
    """In-memory stand-in for CompanySuggestClient."""

    def __init__(self, results=None, error: Exception | None = None) -> None:
        self.results: dict[str, list[CompanyCandidate]] = results or {}
        self.error = error
        self.queries: list[str] = []

    def suggest(self, query: str) -> list[CompanyCandidate]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results.get(query, []))


def make_email(from_line: str, body: str = "Hello, we'd like a quote.") -> RawEmail:
    text = f"---------- Forwarded message ---------\nFrom: {from_line}\nSubject: Inquiry\n\n{body}"
    return RawEmail(header_text=text, body_text=text)
