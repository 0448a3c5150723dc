"""FastAPI application entry point for the URL shortener service.

This module assembles the application: it builds the in-memory mapping
store, registers the error handler and routes, and starts uvicorn.

Application Lifecycle Diagram
===========================
::
    ┌─────────────┐
    │ Load        │
    │ settings    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Create      │
    │ FastAPI app │
    │ + store     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Instrument  │
    │ (/metrics)  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Include     │
    │ routes      │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ mappings    │
    │ discarded   │
    └─────────────┘

How to Use
===========
**Step 1 - Run the server**::
    shortener
    # or
    uvicorn shortener.main:app --host 0.0.0.0 --port 8080

**Step 2 - Shorten a URL**::
    curl -X POST http://localhost:8080/shorten -d "url=example.com"

**Step 3 - Follow the short link**::
    curl -i http://localhost:8080/AbC12_

Key Behaviours
===============
- ``PORT`` overrides the default port 8080; the server listens on all
  interfaces.
- All mappings live in memory and are lost on shutdown.
- Typed errors become plain-text responses with their HTTP status.
"""

__all__ = ["app", "run"]

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from prometheus_fastapi_instrumentator import Instrumentator

from shortener.config import get_settings
from shortener.errors import ShortenerError
from shortener.logging_config import setup_logging
from shortener.routes import RESERVED_CODES, router
from shortener.store import MappingStore

LISTEN_HOST = "0.0.0.0"

settings = get_settings()
logger = setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(f"Starting server on {LISTEN_HOST}:{settings.PORT}")
    yield
    logger.info(f"Shutting down, discarding {len(app.state.store)} mappings")


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="A minimal in-memory URL shortener",
    lifespan=lifespan,
    # Every unrouted single-segment path is a short-code lookup.
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    redirect_slashes=False,
)
app.state.store = MappingStore(
    max_attempts=settings.SHORT_CODE_MAX_ATTEMPTS,
    reserved_codes=RESERVED_CODES,
)


@app.exception_handler(ShortenerError)
async def shortener_error_handler(request: Request, exc: ShortenerError) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=False,
    should_respect_env_var=False,
).instrument(app).expose(app, include_in_schema=False)

app.include_router(router)


def run() -> None:
    uvicorn.run(
        app,
        host=LISTEN_HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
