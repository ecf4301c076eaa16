"""Property-based tests for invite code generation and format checks."""

import asyncio
import re
from unittest.mock import AsyncMock, MagicMock

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from src.bale.core.security import (
    generate_api_code,
    generate_direct_code,
    is_api_code,
    is_direct_code,
)
from src.bale.services.invite_service import InviteService, build_magic_link

pytestmark = pytest.mark.unit

FOUR_DIGITS = re.compile(r"\d{4}", re.ASCII)


def _service_with_untouchable_store() -> tuple[InviteService, AsyncMock]:
    repo = AsyncMock()
    return InviteService(repo, MagicMock()), repo


def test_api_codes_are_four_digits():
    for _ in range(500):
        code = generate_api_code()
        assert FOUR_DIGITS.fullmatch(code)
        assert 1000 <= int(code) <= 9999
        assert is_api_code(code)


def test_direct_codes_are_twelve_uppercase_hex():
    code = generate_direct_code()
    assert re.fullmatch(r"[0-9A-F]{12}", code)
    assert is_direct_code(code)
    assert not is_api_code(code)


@given(code=st.text().filter(lambda s: not FOUR_DIGITS.fullmatch(s)))
def test_non_four_digit_codes_rejected(code: str):
    assert not is_api_code(code)


@given(code=st.text(alphabet="٠١٢٣٤٥٦٧٨٩", min_size=4, max_size=4))
def test_non_ascii_digits_rejected(code: str):
    """Unicode digits would satisfy a plain \\d."""
    assert not is_api_code(code)


@given(
    code=st.text(min_size=1).filter(lambda s: not FOUR_DIGITS.fullmatch(s)),
    email=st.emails(),
)
@settings(max_examples=50)
def test_validate_rejects_bad_format_without_store_access(code: str, email: str):
    service, repo = _service_with_untouchable_store()

    result = asyncio.run(service.validate_invite(code, email))

    assert result.valid is False
    assert result.error == "Invalid invite code format"
    repo.get_usable.assert_not_awaited()


@pytest.mark.parametrize(
    ("code", "email"),
    [(None, "a@x.com"), ("1234", None), ("", "a@x.com"), ("1234", "")],
)
def test_validate_requires_code_and_email(code, email):
    service, repo = _service_with_untouchable_store()

    result = asyncio.run(service.validate_invite(code, email))

    assert result.valid is False
    assert result.error == "Invite code and email are required"
    repo.get_usable.assert_not_awaited()


def test_validate_reports_unknown_invite():
    service, repo = _service_with_untouchable_store()
    repo.get_usable.return_value = None

    result = asyncio.run(service.validate_invite("1234", " a@x.com "))

    assert result.valid is False
    assert result.error == "Invalid or expired invite code"
    repo.get_usable.assert_awaited_once_with("1234", "a@x.com")


class TestMagicLink:
    def test_format(self):
        link = build_magic_link("https://app.example.com", "1234", "a@x.com")
        assert link == "https://app.example.com/signup?invite=1234&email=a%40x.com"

    def test_email_encoded_like_encode_uri_component(self):
        link = build_magic_link("https://app.example.com/", "1234", "first.last+tag@x.com")
        assert link.endswith("email=first.last%2Btag%40x.com")
        assert "//signup" not in link
