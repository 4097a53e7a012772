# leadintake/exceptions.py
"""
Shared exception classes used across the intake pipeline.

Taxonomy:
  - ParseError       no extractable sender address (recovered as "rejected")
  - EnrichmentError  suggestion lookup timeout/failure (recovered, domain-only)
  - DuplicateKeyError uniqueness violation on insert (recovered as no-op / re-select)
  - StoreError       any other persistence failure (fatal for the email)
"""

from __future__ import annotations


class LeadIntakeError(Exception):
    """Base class for all pipeline errors."""


class ParseError(LeadIntakeError):
    """
    Raised when an email carries no parseable sender address.

    The builder reports this as an "invalid" candidate rather than raising;
    callers that need an exception (e.g. strict tooling) use this type.
    """


class EnrichmentError(LeadIntakeError):
    """
    Raised when the company suggestion lookup fails.

    Examples:
        - connect/read timeout
        - non-2xx HTTP status
        - payload that is not a JSON list of objects
    """


class DuplicateKeyError(LeadIntakeError):
    """
    Raised when an insert hits a UNIQUE constraint.

    Carries the table and the natural key that collided so callers can
    re-select the existing row.
    """

    def __init__(self, table: str, key: str | None, message: str = "") -> None:
        self.table = table
        self.key = key
        super().__init__(message or f"duplicate {table} key: {key!r}")


class StoreError(LeadIntakeError):
    """Raised for persistence failures that are not uniqueness violations."""


__all__ = [
    "LeadIntakeError",
    "ParseError",
    "EnrichmentError",
    "DuplicateKeyError",
    "StoreError",
]
