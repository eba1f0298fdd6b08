"""
Tests for identifier validation and LIKE escaping.
"""

import pytest

from lightbnb_storage.exceptions import SQLInjectionAttempt
from lightbnb_storage.utils.validation import escape_like, validate_identifier


@pytest.mark.parametrize("name", ["users", "cost_per_night", "_private", "public.users", "T2"])
def test_valid_identifiers(name):
    """Test that plain names pass through unchanged."""
    assert validate_identifier(name) == name


@pytest.mark.parametrize(
    "name",
    [
        "",
        "users;",
        "users--",
        "a.b.c",
        "2fast",
        "my table",
        "my-table",
        '"users"',
        "x" * 64,
        None,
        42,
    ],
)
def test_invalid_identifiers(name):
    """Test that anything but a plain name is rejected."""
    with pytest.raises(SQLInjectionAttempt):
        validate_identifier(name)


def test_max_length_identifier():
    """Test that a 63-character name is accepted."""
    assert validate_identifier("x" * 63) == "x" * 63


def test_escape_like():
    """Test that wildcards and the escape character are escaped."""
    assert escape_like("Van") == "Van"
    assert escape_like("100%") == "100\\%"
    assert escape_like("a_b") == "a\\_b"
    assert escape_like("c:\\dir") == "c:\\\\dir"
