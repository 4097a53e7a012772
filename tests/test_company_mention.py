# tests/test_company_mention.py
from __future__ import annotations

import pytest

from leadintake.parse.company_mention import (
    MAX_COMPANY_LEN,
    is_personal_domain,
    scan_company_mention,
)


@pytest.mark.parametrize(
    "body,expected",
    [
        ("Hi, I'm VP of Ops at **Acme Corporation** and we need help.", "Acme Corporation"),
        ("I'm the buyer at __Hooli__.", "Hooli"),
        ("I lead procurement at Globex Industries and we're evaluating vendors.", "Globex Industries"),
        ("I work at Bank of America, in Charlotte.", "Bank of America"),
        ("At Initech we ship TPS reports", "Initech"),
        ("Working at Acme\nCorporation is great", "Acme"),
    ],
)
def test_scan_finds_company(body, expected):
    assert scan_company_mention(body) == expected


@pytest.mark.parametrize(
    "body",
    [
        "",
        None,
        "Can we talk at 3pm?",
        "I'm busy at the moment.",
        "Let's meet at Monday standup.",
        "Nothing to see here.",
    ],
)
def test_scan_returns_none(body):
    assert scan_company_mention(body) is None


def test_first_match_in_document_order():
    body = "I'm a buyer at Initech. Previously I was at **Hooli**."
    assert scan_company_mention(body) == "Initech"


def test_emphasis_before_plain():
    body = "Director at **Umbrella Corp**. We met at Globex last year."
    assert scan_company_mention(body) == "Umbrella Corp"


def test_capture_is_bounded():
    got = scan_company_mention("I work at " + "A" * 200)
    assert got is not None
    assert len(got) <= MAX_COMPANY_LEN


@pytest.mark.parametrize(
    "domain,expected",
    [
        ("gmail.com", True),
        ("Gmail.COM", True),
        ("outlook.com", True),
        ("innovate.tech", False),
        ("mail.gmail.com", False),
        ("", False),
        (None, False),
    ],
)
def test_is_personal_domain(domain, expected):
    assert is_personal_domain(domain, {"gmail.com", "outlook.com"}) is expected
