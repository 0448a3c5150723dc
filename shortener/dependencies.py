"""Dependency injection for the URL shortener routes.

The mapping store is created once by the application and kept on
``app.state``; every request receives it through ``get_store`` so that
tests can swap in a fresh store with ``app.dependency_overrides``.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request

from shortener.config import Settings, get_settings
from shortener.logging_config import get_logger
from shortener.service import URLShorteningService
from shortener.store import MappingStore


# ============================================================================
# REQUEST CONTEXT
# ============================================================================


@dataclass
class RequestContext:
    """Per-request context with tracking and shared resources.

    Attributes:
        store: Application-wide mapping store
        settings: Loaded application settings
        request_id: Unique identifier for this request
        host: Host header the client used, for building short URLs
        user_agent: Client user agent string
        client_ip: Client IP address
        start_time: Request start timestamp
        tags: Request tags for categorization
    """

    store: MappingStore
    settings: Settings
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    host: Optional[str] = None
    user_agent: Optional[str] = None
    client_ip: Optional[str] = None
    start_time: float = field(default_factory=lambda: time.time())
    tags: list[str] = field(default_factory=list)

    @property
    def logger(self) -> logging.LoggerAdapter:
        """Get the service logger with request context attached."""
        return logging.LoggerAdapter(
            get_logger(),
            {
                "request_id": self.request_id,
                "client_ip": self.client_ip,
                "user_agent": self.user_agent,
                "tags": ",".join(self.tags),
            },
        )

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def get_duration(self) -> float:
        """Get request duration in milliseconds."""
        return (time.time() - self.start_time) * 1000


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_store(request: Request) -> MappingStore:
    return request.app.state.store


def get_request_context(
    request: Request,
    store: MappingStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> RequestContext:
    """Build the request context from the incoming request.

    Args:
        request: FastAPI Request object for extracting client info
        store: Mapping store shared by all requests
        settings: Application settings

    Returns:
        RequestContext: Context for the request
    """
    return RequestContext(
        store=store,
        settings=settings,
        host=request.headers.get("host") or request.url.netloc,
        user_agent=request.headers.get("user-agent"),
        client_ip=request.client.host if request.client else None,
    )


def get_url_service(ctx: RequestContext = Depends(get_request_context)) -> URLShorteningService:
    return URLShorteningService.from_context(ctx)
