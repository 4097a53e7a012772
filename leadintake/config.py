from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv


def _getenv_float(name: str, default: float) -> float:
    v = os.getenv(name, str(default)).strip()
    try:
        return float(v)
    except ValueError as err:
        raise ValueError(f"Environment variable {name} must be a number; got {v!r}") from err


def _getenv_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


def _getenv_list_str(name: str, default_csv: str) -> list[str]:
    raw = os.getenv(name, default_csv).strip()
    out: list[str] = []
    for tok in (t.strip() for t in raw.split(",")):
        if tok:
            out.append(tok)
    return out


def _getenv_bool(name: str, default: bool) -> bool:
    """
    Read a loosely-typed boolean from the environment.

    Treats "1", "true", "yes", "on" (case-insensitive) as True;
    "0", "false", "no", "off", "" as False. If unset, returns default.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off", ""}:
        return False
    # Fallback: any other non-empty value -> True
    return True


# Load .env from project root if present
ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env", override=False)

DEFAULT_DB_URL = f"sqlite:///{(ROOT / 'dev.db').as_posix()}"
DEFAULT_SUGGEST_URL = "https://autocomplete.clearbit.com/v1/companies/suggest"
DEFAULT_PERSONAL_DOMAINS_FILE = ROOT / "docs" / "personal-domains.yaml"

# Used when the YAML list is missing or empty; keep in step with docs/personal-domains.yaml.
DEFAULT_PERSONAL_DOMAINS: frozenset[str] = frozenset(
    {
        "gmail.com",
        "googlemail.com",
        "yahoo.com",
        "yahoo.co.uk",
        "ymail.com",
        "outlook.com",
        "hotmail.com",
        "live.com",
        "msn.com",
        "aol.com",
        "icloud.com",
        "me.com",
        "mac.com",
        "gmx.com",
        "proton.me",
        "protonmail.com",
        "pm.me",
        "yandex.com",
        "zoho.com",
        "mail.com",
        "hey.com",
    }
)


def load_personal_domains(path: Path | str | None = None) -> frozenset[str]:
    """
    Load the known personal-email provider domains.

    Sources, unioned:
      - YAML file (PERSONAL_DOMAINS_FILE or docs/personal-domains.yaml), shaped
        either as a bare list or as {"personal_domains": [...]}
      - PERSONAL_DOMAINS env var (CSV), for quick additions without a file edit

    Falls back to DEFAULT_PERSONAL_DOMAINS if the file is absent or empty.
    All entries are lowercased.
    """
    if path is None:
        path = _getenv_str("PERSONAL_DOMAINS_FILE", "") or DEFAULT_PERSONAL_DOMAINS_FILE
    p = Path(path)

    domains: set[str] = set()
    if p.exists():
        cfg = yaml.safe_load(p.read_text(encoding="utf-8"))
        if isinstance(cfg, dict):
            cfg = cfg.get("personal_domains")
        if isinstance(cfg, list):
            domains.update(str(d).strip().lower() for d in cfg if str(d or "").strip())

    if not domains:
        domains.update(DEFAULT_PERSONAL_DOMAINS)

    domains.update(d.lower() for d in _getenv_list_str("PERSONAL_DOMAINS", ""))
    return frozenset(domains)


@dataclass(frozen=True)
class Settings:
    database_url: str
    suggest_url: str
    suggest_timeout_sec: float
    suggest_enabled: bool
    relink_duplicates: bool
    personal_domains: frozenset[str] = field(default_factory=frozenset)


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        database_url=_getenv_str("DATABASE_URL", DEFAULT_DB_URL),
        suggest_url=_getenv_str("SUGGEST_URL", DEFAULT_SUGGEST_URL),
        suggest_timeout_sec=_getenv_float("SUGGEST_TIMEOUT_SEC", 5.0),
        suggest_enabled=_getenv_bool("SUGGEST_ENABLED", True),
        relink_duplicates=_getenv_bool("RELINK_DUPLICATES", False),
        personal_domains=load_personal_domains(),
    )


__all__ = [
    "Settings",
    "load_settings",
    "load_personal_domains",
    "DEFAULT_DB_URL",
    "DEFAULT_SUGGEST_URL",
    "DEFAULT_PERSONAL_DOMAINS",
]
