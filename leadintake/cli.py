"""
Lead intake CLI

Usage examples
--------------
# Create the SQLite schema (DATABASE_URL or dev.db)
python -m leadintake.cli init-db

# Parse + persist forwarded inquiries; one JSON line per file on stdout
python -m leadintake.cli process inbox/*.eml

# Parse only, no DB writes and no lookup calls
python -m leadintake.cli process --dry-run inbox/inquiry.txt

# File sources into buckets by outcome
python -m leadintake.cli process inbox/*.eml --processed-dir done/ --failed-dir failed/
"""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
from dataclasses import asdict, replace
from pathlib import Path

from leadintake.config import load_settings
from leadintake.db import LeadStore
from leadintake.inbound import raw_email_from_path
from leadintake.parse.builder import LeadRecordBuilder
from leadintake.pipeline import build_coordinator


def _configure_logging(verbose: bool) -> None:
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def _emit(record: dict[str, object]) -> None:
    sys.stdout.write(json.dumps(record, ensure_ascii=False) + "\n")


def _file_into(path: Path, bucket: str | None) -> None:
    if not bucket:
        return
    dest = Path(bucket)
    dest.mkdir(parents=True, exist_ok=True)
    shutil.move(str(path), str(dest / path.name))


def _cmd_init_db(args: argparse.Namespace) -> int:
    settings = load_settings()
    store = LeadStore.connect(args.database_url or settings.database_url)
    store.close()
    print(f"✔ Schema ready at {args.database_url or settings.database_url}")
    return 0


def _cmd_process(args: argparse.Namespace) -> int:
    paths = [Path(s) for s in args.inputs]
    for pth in paths:
        if not pth.exists():
            raise SystemExit(f"Input not found: {pth}")

    settings = load_settings()

    if args.dry_run:
        builder = LeadRecordBuilder(settings.personal_domains)
        rejected = 0
        for pth in paths:
            candidate = builder.build(raw_email_from_path(pth))
            rejected += 0 if candidate.is_valid else 1
            _emit({"file": str(pth), **asdict(candidate)})
        return 1 if rejected else 0

    if args.database_url:
        settings = replace(settings, database_url=args.database_url)
    coordinator = build_coordinator(settings)
    failures = 0
    try:
        for pth in paths:
            result = coordinator.process(raw_email_from_path(pth))
            if not result.ok:
                failures += 1
            _emit({"file": str(pth), **result.to_dict()})
            _file_into(pth, args.processed_dir if result.ok else args.failed_dir)
    finally:
        coordinator.close()
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Turn forwarded sales inquiries into leads.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument(
        "--database-url",
        metavar="URL",
        help="sqlite:///path/to.db (default: DATABASE_URL or dev.db)",
    )
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create tables if missing")

    proc = sub.add_parser("process", help="Parse and persist inquiry files (.eml or text)")
    proc.add_argument("inputs", nargs="+", help="Input files")
    proc.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse only; print lead candidates without touching the DB or lookup.",
    )
    proc.add_argument("--processed-dir", metavar="DIR", help="Move successful sources here")
    proc.add_argument("--failed-dir", metavar="DIR", help="Move rejected/failed sources here")

    args = p.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "init-db":
        return _cmd_init_db(args)
    return _cmd_process(args)


if __name__ == "__main__":
    sys.exit(main())
