"""URL Shortener Service Layer - Core Business Logic

This module wraps the in-memory ``MappingStore`` with the per-request
concerns the store itself stays free of: URL normalization, structured
logging, and Prometheus metrics.

Architecture Overview
==================
::
    ┌────────────────────────────────────────────────────┐
    │                  Service Layer                     │
    │  ┌──────────────────┐       ┌───────────────────┐  │
    │  │   URL Service    │       │  Normalization    │  │
    │  │                  │──────▶│                   │  │
    │  │ • Create URLs    │       │ • Trim / parse    │  │
    │  │ • Resolve codes  │       │ • Default scheme  │  │
    │  │ • List mappings  │       └───────────────────┘  │
    │  └────────┬─────────┘                              │
    └───────────┼────────────────────────────────────────┘
                ▼
    ┌──────────────────┐
    │   MappingStore   │
    │   (in-memory)    │
    └──────────────────┘

URL Creation Flow
-----------------
::
    ┌─────────────┐
    │ POST        │
    │ /shorten    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ normalize_  │──── ValidationError (400)
    │ url()       │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ store.      │──── ExhaustedError (500)
    │ shorten()   │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Record      │
    │ metrics     │
    └──────┬──────┘
           ▼
      Mapping(code, url)

Usage Examples
=============

```python
@router.post("/shorten")
def shorten(url: str = Form(""), service: URLShorteningService = Depends(get_url_service)):
    mapping = service.create_short_url(url)
    return {"code": mapping.short_code}
```
"""

import time
from typing import Optional

from prometheus_client import Counter, Gauge, Histogram

from shortener.codes import is_short_code
from shortener.enums import RequestStatus
from shortener.errors import NotFoundError, ShortenerError, ValidationError
from shortener.store import Mapping, MappingStore
from shortener.urls import normalize_url

__all__ = ["URLShorteningService"]


# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

URL_CREATION_REQUESTS_TOTAL = Counter(
    "url_shortener_creation_requests_total",
    "Total URL creation requests",
    ["status"],
)
URL_CREATION_DURATION = Histogram(
    "url_shortener_creation_duration_seconds",
    "Time taken to create short URLs",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
)
URL_LOOKUP_REQUESTS_TOTAL = Counter(
    "url_shortener_lookup_requests_total",
    "Total URL lookup requests",
    ["status"],
)
MAPPINGS_STORED = Gauge(
    "url_shortener_mappings_stored",
    "Number of short codes currently held in memory",
)


# ============================================================================
# CORE SERVICE CLASS
# ============================================================================


class URLShorteningService:
    """Per-request façade over the mapping store.

    The service owns no state of its own; every instance shares the
    store carried by the request context.

    Example:
        >>> service = URLShorteningService.from_context(ctx)
        >>> mapping = service.create_short_url("example.com")
        >>> mapping.original_url
        'http://example.com'
    """

    def __init__(self, ctx: "RequestContext"):
        self._store: MappingStore = ctx.store
        self._logger = ctx.logger
        self._settings = ctx.settings
        self._ctx = ctx

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "URLShorteningService":
        return cls(ctx)

    # ========================================================================
    # PUBLIC API METHODS
    # ========================================================================

    def create_short_url(self, raw_url: str) -> Mapping:
        """Normalize a submitted URL and map it to a short code.

        Submitting a URL that is already stored returns the existing
        mapping rather than creating a second one.

        Args:
            raw_url: URL text exactly as the client submitted it.

        Returns:
            Mapping: The stored code and normalized URL.

        Raises:
            ValidationError: If the URL is empty or unparseable.
            ExhaustedError: If no free short code could be generated.
        """
        start_time = time.perf_counter()

        try:
            original_url = normalize_url(raw_url)
            short_code = self._store.shorten(original_url)
        except ValidationError as exc:
            URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.VALIDATION_ERROR).inc()
            self._logger.warning(f"URL creation rejected: {exc.message}")
            raise
        except ShortenerError as exc:
            URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.ERROR).inc()
            self._logger.error(f"URL creation error: {exc.message}")
            raise
        finally:
            URL_CREATION_DURATION.observe(time.perf_counter() - start_time)

        URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        MAPPINGS_STORED.set(len(self._store))
        self._logger.info(f"URL shortened: {short_code} -> {original_url}")
        return Mapping(short_code=short_code, original_url=original_url)

    def lookup_url_by_code(self, short_code: str) -> str:
        """Resolve a short code to its original URL.

        Raises:
            NotFoundError: If the code is unknown or not shaped like a code.
        """
        try:
            if not is_short_code(short_code):
                raise NotFoundError(f"Short URL not found: {short_code}")
            original_url = self._store.resolve(short_code)
        except NotFoundError:
            URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            self._logger.warning(f"Short code not found: {short_code}")
            raise

        URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.debug(f"Resolved {short_code} -> {original_url}")
        return original_url

    def list_recent_mappings(self, limit: Optional[int] = None) -> list[Mapping]:
        if limit is None:
            limit = self._settings.RECENT_MAPPINGS_LIMIT
        return self._store.list_recent(limit)

    def count_mappings(self) -> int:
        return len(self._store)
