# tests/test_names.py
from __future__ import annotations

import pytest

from leadintake.parse.names import infer_name_from_email, split_name


@pytest.mark.parametrize(
    "email,expected",
    [
        ("john.doe@example.com", "John Doe"),
        ("m.chen88@gmail.com", "M Chen"),
        ("JOHN_SMITH@example.com", "John Smith"),
        ("mary-kate.oleary@example.com", "Mary Kate Oleary"),
        ("info@global-corp.net", "Info"),
        ("12345@example.com", None),
        ("j@example.com", None),
        ("j.9@example.com", None),
        ("", None),
        (None, None),
    ],
)
def test_infer_name_from_email(email, expected):
    assert infer_name_from_email(email) == expected


@pytest.mark.parametrize(
    "full,exp_first,exp_last",
    [
        ("John Doe", "John", "Doe"),
        ("  John   Doe  ", "John", "Doe"),
        ("Dr. Jane van der Berg PhD", "Jane", "van der Berg"),
        ("Ms Ada Lovelace", "Ada", "Lovelace"),
        ("Cher", "Cher", None),
        ("Info", "Info", None),
        ("", None, None),
        (None, None, None),
    ],
)
def test_split_name(full, exp_first, exp_last):
    assert split_name(full) == (exp_first, exp_last)


def test_inferred_name_splits_into_first_and_last():
    assert split_name(infer_name_from_email("john.doe@example.com")) == ("John", "Doe")
