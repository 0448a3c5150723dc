"""FastAPI route definitions for the URL shortener.

API Endpoint Overview
=====================
::
    GET  /
        └─ index page (200), 405 for other methods

    POST /shorten
        ├─ form field ``url``
        └─ index page with the new short URL (200), 400 or 500 on error
           405 for other methods

    GET  /health
        └─ HealthResponse (200)

    GET  /:short_code
        └─ 302 Redirect or 404, 405 for other methods

Request Flow Diagram
====================
::
    ┌─────────────┐
    │  HTTP       │
    │  Request    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ FastAPI     │
    │ Router      │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Inject      │
    │ Context &   │
    │ Service     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Call Service│──── ShortenerError ──▶ exception handler
    │ Layer       │                        (plain text + status)
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Render page │
    │ or redirect │
    └─────────────┘

Key Behaviours
===============
- Handlers are plain functions, so FastAPI runs each request on its
  worker thread pool; the store's lock does the rest.
- Short URLs are built from the request's Host header as
  ``http://<host>/<code>``.
- ``health`` is a route name and a valid code shape, so it is reserved
  and never generated.
- Redirects use 302 Found. ``Location`` is the stored URL with only
  non-ASCII characters percent-encoded.
- Paths with a trailing slash or more than one segment are 404s.
"""

from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from shortener.dependencies import RequestContext, get_request_context, get_url_service
from shortener.enums import HealthStatus
from shortener.errors import MethodNotAllowedError
from shortener.schemas import HealthResponse
from shortener.service import URLShorteningService

__all__ = ["RESERVED_CODES", "router", "templates"]

TEMPLATES_DIR = Path(__file__).parent / "templates"
INDEX_TEMPLATE = "index.html"

RESERVED_CODES = frozenset({"health"})

router = APIRouter(redirect_slashes=False)
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _render_index(
    request: Request,
    ctx: RequestContext,
    service: URLShorteningService,
    short_url: str | None = None,
) -> Response:
    context = {
        "short_url": short_url,
        "mappings": service.list_recent_mappings(),
    }
    try:
        return templates.TemplateResponse(request, INDEX_TEMPLATE, context)
    except TemplateError:
        ctx.logger.exception("Template error")
        return PlainTextResponse("Failed to render page", status_code=500)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    service: URLShorteningService = Depends(get_url_service),
) -> Response:
    return _render_index(request, ctx, service)


@router.get("/health", response_model=HealthResponse, tags=["health"])
def health_check(service: URLShorteningService = Depends(get_url_service)) -> HealthResponse:
    return HealthResponse(status=HealthStatus.HEALTHY, mappings=service.count_mappings())


@router.post("/shorten", response_class=HTMLResponse, tags=["urls"])
def shorten_url(
    request: Request,
    url: str = Form(""),
    ctx: RequestContext = Depends(get_request_context),
    service: URLShorteningService = Depends(get_url_service),
) -> Response:
    ctx.add_tag("url_creation")

    mapping = service.create_short_url(url)
    short_url = f"http://{ctx.host}/{mapping.short_code}"
    ctx.logger.info(f"Short URL ready: {short_url} in {ctx.get_duration():.1f}ms")

    return _render_index(request, ctx, service, short_url=short_url)


# GET /shorten would otherwise be taken as a lookup for the code "shorten".
@router.api_route("/shorten", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def shorten_method_not_allowed() -> Response:
    raise MethodNotAllowedError("Method not allowed")


@router.get("/{short_code}", tags=["redirect"])
def redirect_to_url(
    short_code: str,
    service: URLShorteningService = Depends(get_url_service),
) -> Response:
    original_url = service.lookup_url_by_code(short_code)
    # Location is the stored URL verbatim apart from non-ASCII escapes.
    return Response(status_code=302, headers={"location": _escape_non_ascii(original_url)})


def _escape_non_ascii(url: str) -> str:
    return "".join(c if c.isascii() else quote(c) for c in url)
