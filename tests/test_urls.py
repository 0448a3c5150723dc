"""URL normalization tests."""

import pytest

from shortener.errors import ValidationError
from shortener.urls import normalize_url


def test_bare_host_gets_http_scheme() -> None:
    assert normalize_url("example.com") == "http://example.com"


def test_existing_scheme_is_unchanged() -> None:
    assert normalize_url("https://example.com") == "https://example.com"


def test_surrounding_whitespace_is_trimmed() -> None:
    assert normalize_url("  https://example.com/a?b=1 \n") == "https://example.com/a?b=1"


def test_path_and_query_are_kept_when_defaulting_scheme() -> None:
    assert normalize_url("foo.com/a:b?q=1") == "http://foo.com/a:b?q=1"


def test_scheme_only_url_is_accepted() -> None:
    # Syntactically a scheme with an empty host; hosts are not checked.
    assert normalize_url("http://") == "http://"


def test_host_port_without_scheme_parses_as_scheme() -> None:
    assert normalize_url("localhost:8080") == "localhost:8080"


@pytest.mark.parametrize("value", ["", "   ", "\t\n"])
def test_empty_url_is_rejected(value: str) -> None:
    with pytest.raises(ValidationError, match="URL is required"):
        normalize_url(value)


@pytest.mark.parametrize(
    "value",
    [
        "http://[::1",
        "http://example.com:port",
        "http://exa\x7fmple.com",
        "http://example.com/\x00",
        "http://example.com/%zz",
        ":no-scheme",
        "1.2.3.4:80",
    ],
)
def test_unparseable_url_is_rejected(value: str) -> None:
    with pytest.raises(ValidationError, match="invalid URL"):
        normalize_url(value)


def test_validation_error_maps_to_400() -> None:
    with pytest.raises(ValidationError) as exc_info:
        normalize_url(" ")
    assert exc_info.value.status_code == 400
