"""Unit tests for the URL shortening service layer."""

from unittest.mock import MagicMock, Mock

import pytest
from prometheus_client import REGISTRY

from shortener.config import Settings
from shortener.errors import ExhaustedError, NotFoundError, ValidationError
from shortener.service import URLShorteningService
from shortener.store import Mapping, MappingStore

# ============================================================================
# TEST FIXTURES AND UTILITIES
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, RECENT_MAPPINGS_LIMIT=2)


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def url_service(store: MappingStore, mock_logger: MagicMock, settings: Settings) -> URLShorteningService:
    """Create URL service over a real store with a mocked request context."""
    ctx = Mock()
    ctx.store = store
    ctx.logger = mock_logger
    ctx.settings = settings
    return URLShorteningService.from_context(ctx)


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


# ============================================================================
# SERVICE CLASS TESTS
# ============================================================================


class TestURLShorteningService:
    def test_create_short_url_normalizes(self, url_service, store):
        mapping = url_service.create_short_url("  example.com  ")

        assert mapping.original_url == "http://example.com"
        assert store.resolve(mapping.short_code) == "http://example.com"

    def test_create_short_url_deduplicates(self, url_service, store):
        first = url_service.create_short_url("example.com")
        second = url_service.create_short_url("http://example.com")

        assert first == second
        assert url_service.count_mappings() == 1

    def test_create_short_url_validation_error(self, url_service, mock_logger):
        with pytest.raises(ValidationError, match="URL is required"):
            url_service.create_short_url("   ")

        mock_logger.warning.assert_called_once()
        assert url_service.count_mappings() == 0

    def test_create_short_url_exhausted(self, mock_logger, settings):
        def broken() -> str:
            raise OSError("no entropy")

        ctx = Mock(store=MappingStore(code_generator=broken), logger=mock_logger, settings=settings)
        service = URLShorteningService(ctx)

        with pytest.raises(ExhaustedError):
            service.create_short_url("example.com")

        mock_logger.error.assert_called_once()

    def test_create_short_url_records_metrics(self, url_service):
        labels = {"status": "success"}
        before = _sample("url_shortener_creation_requests_total", labels)

        url_service.create_short_url("https://metrics.example")

        assert _sample("url_shortener_creation_requests_total", labels) == before + 1
        assert _sample("url_shortener_mappings_stored", {}) == 1

    def test_validation_failure_metric(self, url_service):
        labels = {"status": "validation_error"}
        before = _sample("url_shortener_creation_requests_total", labels)

        with pytest.raises(ValidationError):
            url_service.create_short_url("")

        assert _sample("url_shortener_creation_requests_total", labels) == before + 1

    def test_lookup_url_by_code(self, url_service):
        mapping = url_service.create_short_url("https://www.python.org")
        assert url_service.lookup_url_by_code(mapping.short_code) == "https://www.python.org"

    def test_lookup_url_not_found(self, url_service, mock_logger):
        labels = {"status": "not_found"}
        before = _sample("url_shortener_lookup_requests_total", labels)

        with pytest.raises(NotFoundError):
            url_service.lookup_url_by_code("nonexistent")

        mock_logger.warning.assert_called_once()
        assert _sample("url_shortener_lookup_requests_total", labels) == before + 1

    def test_lookup_unknown_well_formed_code(self, url_service):
        with pytest.raises(NotFoundError, match="Short URL not found: abc123"):
            url_service.lookup_url_by_code("abc123")

    @pytest.mark.parametrize("code", ["docs", "openapi.json", "abc12!", "abcdefg"])
    def test_lookup_malformed_code_skips_store(self, mock_logger, settings, code):
        ctx = Mock()
        ctx.store = Mock()
        ctx.logger = mock_logger
        ctx.settings = settings
        service = URLShorteningService.from_context(ctx)

        with pytest.raises(NotFoundError):
            service.lookup_url_by_code(code)

        ctx.store.resolve.assert_not_called()

    def test_list_recent_mappings_uses_configured_limit(self, url_service):
        for i in range(5):
            url_service.create_short_url(f"https://example.com/{i}")

        recent = url_service.list_recent_mappings()
        assert len(recent) == 2
        assert all(isinstance(m, Mapping) for m in recent)
        assert len(url_service.list_recent_mappings(limit=4)) == 4
