# tests/test_headers.py
from __future__ import annotations

import pytest

from leadintake.parse.headers import (
    extract_sender,
    find_from_line,
    match_angle_only,
    match_bare,
    match_name_angle,
)

# -----------------------------
# Matcher precedence
# -----------------------------


@pytest.mark.parametrize(
    "line,exp_name,exp_email",
    [
        ("Jane Doe <jane.doe@acme.com>", "Jane Doe", "jane.doe@acme.com"),
        ('"Jane Doe" <jane.doe@acme.com>', "Jane Doe", "jane.doe@acme.com"),
        ('"Doe, Jane" <jane.doe@acme.com>', "Jane Doe", "jane.doe@acme.com"),
        ("**Jane Doe** <jane.doe@acme.com>", "Jane Doe", "jane.doe@acme.com"),
        ("Doe, Jane [mailto:Jane.Doe@Acme.com]", "Jane Doe", "Jane.Doe@Acme.com"),
        ("<info@global-corp.net>", None, "info@global-corp.net"),
        ("info@global-corp.net", None, "info@global-corp.net"),
        ("jane@acme.com <jane@acme.com>", None, "jane@acme.com"),
    ],
)
def test_extract_sender_variants(line, exp_name, exp_email):
    sender = extract_sender(f"From: {line}\nSubject: hi\n")
    assert sender.name == exp_name
    assert sender.email == exp_email


def test_first_from_line_wins_over_quoted_history():
    text = (
        "---------- Forwarded message ---------\n"
        "From: John Smith <john@smith.io>\n"
        "Date: Mon, 3 Mar 2025\n"
        "\n"
        "Looking forward to it.\n"
        "\n"
        "> From: Someone Else <someone@elsewhere.com>\n"
        "> Sent: Friday\n"
        "From: Third Party <third@party.org>\n"
    )
    sender = extract_sender(text)
    assert sender.name == "John Smith"
    assert sender.email == "john@smith.io"


def test_email_case_preserved_domain_lowercased():
    sender = extract_sender("From: John <John.Doe@Example.COM>")
    assert sender.email == "John.Doe@Example.COM"
    assert sender.domain == "example.com"


def test_markup_around_from_label():
    sender = extract_sender("*From:* Jane Doe <jane@acme.com>")
    assert sender.email == "jane@acme.com"
    assert sender.name == "Jane Doe"


def test_sent_from_signature_is_not_a_from_line():
    text = "Sent from my iPhone\nFrom: A Buyer <a.buyer@bigco.com>\n"
    assert extract_sender(text).email == "a.buyer@bigco.com"


@pytest.mark.parametrize(
    "text",
    [
        "",
        None,
        "Subject: no sender here\n\nbody",
        "From: Support Team\n",
    ],
)
def test_no_sender(text):
    sender = extract_sender(text)
    assert sender.email is None
    assert sender.name is None
    assert sender.domain is None


def test_only_first_from_line_is_considered():
    # The first From: line is unparseable; later lines are history and are ignored.
    text = "From: Support Team\n> From: quoted@history.com\n"
    assert extract_sender(text).email is None


def test_matchers_are_pure_functions():
    assert match_name_angle("<a@b.com>") is None
    assert match_angle_only("<a@b.com>").email == "a@b.com"
    assert match_bare("reach me: a@b.com.").email == "a@b.com"
    assert find_from_line("x\n>> From: a@b.com\n") == "a@b.com"


def test_folded_first_from_header_is_unfolded():
    text = (
        "From:\n"
        "  John Doe <john@acme.com>\n"
        "Subject: x\n"
        "\n"
        "> From: Old Sender <old@quoted.com>\n"
    )
    sender = extract_sender(text)
    assert sender.email == "john@acme.com"
    assert sender.name == "John Doe"


def test_empty_first_from_header_does_not_fall_through():
    text = "From:\nSubject: x\n\n> From: Old Sender <old@quoted.com>\n"
    assert find_from_line(text) == ""
    assert extract_sender(text).email is None


def test_find_from_line_joins_continuations():
    text = 'From: "Doe,\n\tJane" <jane@acme.com>\nTo: sales@ourco.com\n'
    assert find_from_line(text) == '"Doe, Jane" <jane@acme.com>'
