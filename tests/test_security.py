"""
Tests for password hashing, the strength policy and payload sanitization.
"""

import pytest
from passlib.hash import bcrypt

from app.core.exceptions import ValidationFailed
from app.core.sanitize import escape_text, sanitize_model, sanitize_tree
from app.core.security import (
    get_password_hash,
    password_strength_error,
    pwd_context,
    verify_password,
)
from app.schemas.suggestion import SuggestionUpdate


def test_hash_is_salted_pbkdf2() -> None:
    first = get_password_hash("Str0ng!Pass")
    second = get_password_hash("Str0ng!Pass")
    assert first != second
    assert first.startswith("$pbkdf2-sha256$")
    assert verify_password("Str0ng!Pass", first)
    assert not verify_password("Str0ng!Pas", first)


def test_verify_never_raises_on_bad_hash() -> None:
    assert verify_password("Str0ng!Pass", "not-a-hash") is False
    assert verify_password("Str0ng!Pass", "") is False
    assert verify_password("", get_password_hash("Str0ng!Pass")) is False


def test_legacy_bcrypt_hash_still_verifies() -> None:
    pytest.importorskip("bcrypt")
    legacy = bcrypt.hash("Str0ng!Pass")
    assert verify_password("Str0ng!Pass", legacy)
    assert pwd_context.needs_update(legacy)


@pytest.mark.parametrize(
    "password, expected",
    [
        ("Sh0rt!", "at least 8 characters"),
        ("alllower1!", "one uppercase letter"),
        ("ALLUPPER1!", "one lowercase letter"),
        ("NoDigits!!", "one number"),
        ("NoSpecial123", "one special character"),
    ],
)
def test_password_strength_errors(password: str, expected: str) -> None:
    error = password_strength_error(password)
    assert error is not None
    assert expected in error


def test_password_strength_ok() -> None:
    assert password_strength_error("Str0ng!Pass") is None


def test_escape_text() -> None:
    assert escape_text('<a href="/x">R&D</a>') == "&lt;a href=&quot;&#x2F;x&quot;&gt;R&D&lt;&#x2F;a&gt;"
    assert escape_text("don't") == "don't"


def test_sanitize_tree_skips_exempt_fields() -> None:
    payload = {
        "assigned_to": "<b>Ops</b>",
        "reply": "<keep> this",
        "email": "a/b@example.com",
        "nested": {"tags": ["<x>", "plain"], "count": 3},
    }
    result = sanitize_tree(payload)
    assert result["assigned_to"] == "&lt;b&gt;Ops&lt;&#x2F;b&gt;"
    assert result["reply"] == "<keep> this"
    assert result["email"] == "a/b@example.com"
    assert result["nested"] == {"tags": ["&lt;x&gt;", "plain"], "count": 3}
    # Input is not mutated
    assert payload["assigned_to"] == "<b>Ops</b>"


def test_sanitize_tree_depth_limit() -> None:
    deep: dict = {}
    node = deep
    for _ in range(10):
        node["child"] = {}
        node = node["child"]
    with pytest.raises(ValidationFailed):
        sanitize_tree(deep)
    assert sanitize_tree({"a": {"b": "ok"}}) == {"a": {"b": "ok"}}


def test_sanitize_model_keeps_partial_update() -> None:
    changes = SuggestionUpdate(assigned_to="<Ops>")
    result = sanitize_model(changes)
    assert result.assigned_to == "&lt;Ops&gt;"
    assert result.model_dump(exclude_unset=True) == {"assigned_to": "&lt;Ops&gt;"}


def test_sanitize_model_revalidates() -> None:
    """Escaping can push a value past its length limit."""
    changes = SuggestionUpdate(assigned_to="<" * 100)
    with pytest.raises(ValidationFailed) as exc_info:
        sanitize_model(changes)
    assert exc_info.value.errors[0]["field"] == "assigned_to"
