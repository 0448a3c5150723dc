"""Short-code generation for the URL shortener.

A short code is six characters of URL-safe base64 drawn from a
cryptographically secure random source.

Flow Diagram - generate_short_code()
=====================================
::
    ┌─────────────┐
    │ 6 random    │
    │ bytes       │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ URL-safe    │
    │ base64      │
    │ (8 chars)   │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Keep first  │
    │ 6 chars     │
    └─────────────┘

Key Behaviours
===============
- The alphabet is ``A-Z a-z 0-9 - _`` (64 symbols), so the code space is
  64^6, roughly 6.8e10 codes.
- Truncating 8 encoded characters to 6 keeps 36 of the 48 random bits.
- The random source is injectable so callers can simulate failures.
"""

__all__ = [
    "ALPHABET",
    "SHORT_CODE_LENGTH",
    "SHORT_CODE_RANDOM_BYTES",
    "SHORT_CODE_PATTERN",
    "generate_short_code",
    "is_short_code",
]

import base64
import re
import secrets
import string
from collections.abc import Callable

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"
SHORT_CODE_LENGTH = 6
SHORT_CODE_RANDOM_BYTES = 6
SHORT_CODE_PATTERN = re.compile(f"[{re.escape(ALPHABET)}]{{{SHORT_CODE_LENGTH}}}")


def generate_short_code(random_bytes: Callable[[int], bytes] = secrets.token_bytes) -> str:
    """Draw random bytes and encode them into a short code.

    Args:
        random_bytes: Callable returning ``n`` random bytes. Defaults to
            ``secrets.token_bytes``; any exception it raises propagates.

    Returns:
        str: A 6-character code matching ``SHORT_CODE_PATTERN``.

    Example:
        >>> code = generate_short_code()
        >>> len(code)
        6
    """
    raw = random_bytes(SHORT_CODE_RANDOM_BYTES)
    encoded = base64.urlsafe_b64encode(raw).decode("ascii")
    return encoded[:SHORT_CODE_LENGTH]


def is_short_code(value: str) -> bool:
    return SHORT_CODE_PATTERN.fullmatch(value) is not None
