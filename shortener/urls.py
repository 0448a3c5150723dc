"""URL normalization for shorten submissions.

Normalization is syntactic only: the URL is trimmed, parsed, and given an
``http://`` scheme when it has none. Hosts are never resolved and
anything the parser accepts is kept as submitted.

Flow Diagram - normalize_url()
==============================
::
    ┌─────────────┐
    │ Trim        │
    │ whitespace  │
    └──────┬──────┘
    EMPTY? │──── YES ──▶ ValidationError
           ▼
    ┌─────────────┐
    │ Parse       │──── FAIL ──▶ ValidationError
    └──────┬──────┘
    SCHEME?│──── YES ──▶ return as-is
           ▼
    ┌─────────────┐
    │ Prepend     │
    │ http://     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Re-parse    │──── FAIL ──▶ ValidationError
    └──────┬──────┘
           ▼
      return "http://..."

Key Behaviours
===============
- ``"example.com"`` becomes ``"http://example.com"``.
- ``"https://example.com"`` is returned unchanged.
- ``"http://"`` is accepted: the parser treats it as a scheme with an
  empty host, and no reachability check is made.
- ``"localhost:8080"`` parses with scheme ``localhost`` and is kept as-is.
- Rejected: control characters, malformed percent-escapes, invalid
  ports, unbalanced IPv6 brackets, a missing scheme before ``:``, and a
  colon in the first path segment of a scheme-less URL.
"""

__all__ = ["DEFAULT_SCHEME", "normalize_url"]

import re
from urllib.parse import SplitResult, urlsplit

from shortener.errors import ValidationError

DEFAULT_SCHEME = "http"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _parse(url: str) -> SplitResult:
    if _CONTROL_CHARS.search(url):
        raise ValidationError("invalid URL: invalid control character in URL")
    if url.startswith(":"):
        raise ValidationError("invalid URL: missing protocol scheme")
    if _BAD_ESCAPE.search(url):
        raise ValidationError("invalid URL: invalid URL escape")

    try:
        parsed = urlsplit(url)
        # Accessing the port validates it.
        parsed.port
    except ValueError as exc:
        raise ValidationError(f"invalid URL: {exc}") from exc

    if not parsed.scheme and not parsed.netloc and ":" in parsed.path.split("/", 1)[0]:
        raise ValidationError("invalid URL: first path segment in URL cannot contain colon")
    return parsed


def normalize_url(raw_url: str) -> str:
    """Trim a submitted URL and default its scheme to ``http``.

    Args:
        raw_url: URL text as submitted by the client.

    Returns:
        str: The normalized URL.

    Raises:
        ValidationError: If the URL is empty or fails to parse.
    """
    url = raw_url.strip()
    if not url:
        raise ValidationError("URL is required")

    parsed = _parse(url)
    if parsed.scheme:
        return url

    url = f"{DEFAULT_SCHEME}://{url}"
    _parse(url)
    return url
