# leadintake/db.py
"""
SQLite persistence for leads and companies.

Schema invariants:
  - leads.email is UNIQUE (case-insensitive)
  - companies.domain is UNIQUE
  - leads.company_id references companies.id

Each write runs in its own SAVEPOINT, so a failed statement (e.g. a UNIQUE
violation) never poisons an enclosing LeadStore.transaction(). Outside a
transaction() block every write commits on its own. The UNIQUE constraints are
the only serialization between concurrent workers; an insert that loses a race
surfaces as DuplicateKeyError, never as a second row.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from leadintake.exceptions import DuplicateKeyError, StoreError
from leadintake.models import Company, CompanyCandidate, Lead

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS companies (
  id INTEGER PRIMARY KEY,
  name TEXT,
  domain TEXT UNIQUE,
  description TEXT,
  logo_url TEXT,
  created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS leads (
  id INTEGER PRIMARY KEY,
  created_at TEXT NOT NULL,
  first_name TEXT,
  last_name TEXT,
  email TEXT NOT NULL UNIQUE COLLATE NOCASE,
  company_id INTEGER REFERENCES companies(id) ON DELETE SET NULL
);

CREATE INDEX IF NOT EXISTS idx_leads_company_id ON leads(company_id);
"""

_LEAD_COLS = "id, created_at, first_name, last_name, email, company_id"
_COMPANY_COLS = "id, name, domain, description, logo_url"


# -------------------- basics --------------------


def _utc_now_iso() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def db_path_from_url(url: str | None = None) -> str:
    """
    Resolve the SQLite file path. Prefers the explicit url, then DATABASE_URL,
    then DATABASE_PATH, then dev.db.
    """
    url = url or os.environ.get("DATABASE_URL")
    if url:
        if not url.strip().lower().startswith("sqlite:///"):
            raise RuntimeError(f"DATABASE_URL must be sqlite:///...; got {url!r}")
        # works for Windows paths like C:/... and POSIX /...
        return url.strip()[len("sqlite:///") :]
    return os.environ.get("DATABASE_PATH") or "dev.db"


def get_connection(db_path: str | None = None, *, timeout: float = 10.0) -> sqlite3.Connection:
    """
    Shared SQLite connection helper.

    - If db_path is None, resolves DATABASE_URL/DATABASE_PATH/dev.db.
    - Ensures foreign key enforcement.
    - Sets row_factory to sqlite3.Row.
    """
    if db_path is None:
        db_path = db_path_from_url()
    con = sqlite3.connect(db_path, timeout=timeout)
    con.row_factory = sqlite3.Row
    con.execute("PRAGMA foreign_keys=ON")
    return con


def ensure_schema(con: sqlite3.Connection) -> None:
    con.executescript(SCHEMA)
    con.commit()


def _is_unique_violation(exc: sqlite3.Error) -> bool:
    if not isinstance(exc, sqlite3.IntegrityError):
        return False
    errname = getattr(exc, "sqlite_errorname", "")
    if errname in {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}:
        return True
    return "UNIQUE constraint failed" in str(exc)


def _lead_from_row(row: sqlite3.Row) -> Lead:
    return Lead(
        id=int(row["id"]),
        created_at=row["created_at"],
        email=row["email"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        company_id=row["company_id"],
    )


def _company_from_row(row: sqlite3.Row) -> Company:
    return Company(
        id=int(row["id"]),
        name=row["name"],
        domain=row["domain"],
        description=row["description"],
        logo_url=row["logo_url"],
    )


# -------------------- store --------------------


class LeadStore:
    """Store operations consumed by the intake pipeline."""

    def __init__(self, con: sqlite3.Connection) -> None:
        self.con = con
        self._depth = 0

    @classmethod
    def connect(cls, database_url: str | None = None) -> LeadStore:
        con = get_connection(db_path_from_url(database_url))
        ensure_schema(con)
        return cls(con)

    def close(self) -> None:
        self.con.close()

    def _exec_tx(self, sql: str) -> None:
        try:
            self.con.execute(sql)
        except sqlite3.Error as exc:
            raise StoreError(f"transaction control failed ({sql}): {exc}") from exc

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Atomic unit over several store calls. Nests via SAVEPOINTs; the
        outermost block commits on exit and rolls everything back on error.
        """
        name = f"lt_{self._depth}"
        self._exec_tx(f"SAVEPOINT {name}")
        self._depth += 1
        try:
            yield
        except BaseException:
            self._depth -= 1
            self._exec_tx(f"ROLLBACK TO {name}")
            self._exec_tx(f"RELEASE {name}")
            raise
        self._depth -= 1
        self._exec_tx(f"RELEASE {name}")

    def _write(self, sql: str, params: tuple, *, table: str, key: str | None) -> sqlite3.Cursor:
        try:
            with self.transaction():
                return self.con.execute(sql, params)
        except sqlite3.Error as exc:
            if _is_unique_violation(exc):
                raise DuplicateKeyError(table, key) from exc
            raise StoreError(f"{table} write failed: {exc}") from exc

    def _read_one(self, sql: str, params: tuple) -> sqlite3.Row | None:
        try:
            return self.con.execute(sql, params).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"read failed: {exc}") from exc

    # ---- leads ----

    def insert_lead(self, email: str, first_name: str | None, last_name: str | None) -> Lead:
        """Insert a lead keyed by email. Raises DuplicateKeyError if it already exists."""
        created_at = _utc_now_iso()
        cur = self._write(
            "INSERT INTO leads (created_at, first_name, last_name, email) VALUES (?, ?, ?, ?)",
            (created_at, first_name, last_name, email),
            table="leads",
            key=email,
        )
        return Lead(
            id=int(cur.lastrowid),
            created_at=created_at,
            email=email,
            first_name=first_name,
            last_name=last_name,
        )

    def select_lead_by_email(self, email: str) -> Lead | None:
        row = self._read_one(f"SELECT {_LEAD_COLS} FROM leads WHERE email = ?", (email,))
        return _lead_from_row(row) if row else None

    def update_lead_company(self, lead_id: int, company_id: int) -> None:
        cur = self._write(
            "UPDATE leads SET company_id = ? WHERE id = ?",
            (company_id, lead_id),
            table="leads",
            key=str(lead_id),
        )
        if cur.rowcount != 1:
            raise StoreError(f"lead {lead_id} not found for company link")

    # ---- companies ----

    def select_company_by_domain(self, domain: str) -> Company | None:
        row = self._read_one(f"SELECT {_COMPANY_COLS} FROM companies WHERE domain = ?", (domain,))
        return _company_from_row(row) if row else None

    def select_company_by_name(self, name: str) -> Company | None:
        """Exact (case-insensitive) name match; oldest row wins."""
        row = self._read_one(
            f"SELECT {_COMPANY_COLS} FROM companies WHERE name = ? COLLATE NOCASE "
            "ORDER BY id LIMIT 1",
            (name,),
        )
        return _company_from_row(row) if row else None

    def insert_company(
        self,
        name: str | None,
        domain: str | None,
        logo_url: str | None = None,
        description: str | None = None,
    ) -> Company:
        """Insert a company. Raises DuplicateKeyError if the domain is taken."""
        cur = self._write(
            "INSERT INTO companies (name, domain, description, logo_url) VALUES (?, ?, ?, ?)",
            (name, domain, description, logo_url),
            table="companies",
            key=domain,
        )
        return Company(
            id=int(cur.lastrowid),
            name=name,
            domain=domain,
            description=description,
            logo_url=logo_url,
        )

    def get_or_create_company(self, candidate: CompanyCandidate) -> Company:
        """
        Insert-or-fetch-existing keyed by domain.

        An existing row is returned unchanged (first write wins). Losing an
        insert race to another worker is not an error: the winner is re-selected.
        """
        if not candidate.domain:
            raise ValueError("get_or_create_company requires a domain")

        existing = self.select_company_by_domain(candidate.domain)
        if existing is not None:
            return existing

        try:
            return self.insert_company(candidate.name, candidate.domain, candidate.logo_url)
        except DuplicateKeyError:
            logger.info("Company insert raced for domain=%s; re-selecting", candidate.domain)
            winner = self.select_company_by_domain(candidate.domain)
            if winner is None:
                raise StoreError(
                    f"company {candidate.domain!r} reported duplicate but was not found"
                ) from None
            return winner


__all__ = [
    "SCHEMA",
    "LeadStore",
    "db_path_from_url",
    "ensure_schema",
    "get_connection",
]
