"""Typed errors raised by the URL shortener core.

Every failure a request can hit is one of these. Each error carries the
HTTP status it maps to, so the application registers a single exception
handler instead of translating errors in every route.

Error Taxonomy
==============
::
    ShortenerError
    ├─ ValidationError        (400)  empty or unparseable URL
    ├─ NotFoundError          (404)  unknown short code
    ├─ MethodNotAllowedError  (405)  wrong HTTP method for a route
    └─ ExhaustedError         (500)  no free short code could be generated

Classes:
    ShortenerError:  Base class with ``message`` and ``status_code``.
"""

__all__ = [
    "ShortenerError",
    "ValidationError",
    "NotFoundError",
    "MethodNotAllowedError",
    "ExhaustedError",
]


class ShortenerError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ShortenerError):
    """The submitted URL is empty or cannot be parsed."""

    status_code = 400


class NotFoundError(ShortenerError):
    """No mapping exists for the requested short code."""

    status_code = 404


class MethodNotAllowedError(ShortenerError):
    status_code = 405


class ExhaustedError(ShortenerError):
    """Short-code generation failed: the random source errored or every attempt collided."""

    status_code = 500
