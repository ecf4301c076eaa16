"""Invite code formats.

Two formats are live. Codes issued through the API are four decimal digits
and are the only ones ``/api/validate-invite`` accepts. Codes issued by the
operator CLI are twelve uppercase hex characters.
"""

import re
import secrets
from typing import Final

API_CODE_REGEX: Final[str] = r"^\d{4}$"
DIRECT_CODE_REGEX: Final[str] = r"^[0-9A-F]{12}$"

_API_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(API_CODE_REGEX, re.ASCII)
_DIRECT_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(DIRECT_CODE_REGEX)


def generate_api_code() -> str:
    """Four-digit code in 1000-9999."""
    return str(1000 + secrets.randbelow(9000))


def generate_direct_code() -> str:
    return secrets.token_hex(6).upper()


def is_api_code(code: str) -> bool:
    """Exactly four ASCII digits. ``re.ASCII`` keeps other Unicode digits out."""
    return _API_CODE_PATTERN.fullmatch(code) is not None


def is_direct_code(code: str) -> bool:
    return _DIRECT_CODE_PATTERN.fullmatch(code) is not None
