"""
api.py - HTTP Endpoint
======================
FastAPI app exposing the same validate -> enrich -> record flow as the
console, sharing its cache and output workbook.

Routes:
-------
- POST /validate  : {"ifsc": "<code>"} -> 200 {ifsc, bank, branch, status}
                    400 {error} for a missing/blank code or a non-JSON body
                    500 {error, details} when the lookup or the write fails
- GET  /regions   : ?q=<region> -> 200 [{name, address}], 400 on a blank region
- GET  /history   : records currently in the output workbook
- GET  /health    : {"status": "ok"}

Any unexpected failure is also answered with the 500 {error, details} body.

Usage:
------
    uvicorn ifsccheck.api:get_app --factory
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .cache import ResultCache
from .config import Settings, load_settings
from .errors import LookupFailure
from .lookup import IfscClient
from .models import CodeRecord
from .processor import resolve_code
from .region import RegionSearchClient
from .sink import ResultSink


logger = logging.getLogger(__name__)

router = APIRouter()


class ValidateRequest(BaseModel):
    ifsc: str | None = None


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/validate")
def validate_code(payload: ValidateRequest, request: Request):
    if not payload.ifsc or not payload.ifsc.strip():
        return _error(400, "IFSC code is required")

    cache: ResultCache = request.app.state.cache
    sink: ResultSink = request.app.state.sink

    try:
        record = resolve_code(cache, payload.ifsc)
        sink.append(record)
    except LookupFailure as e:
        logger.error(f"Lookup failed for {payload.ifsc}: {e}")
        return _error(500, "Failed to fetch IFSC details", str(e))
    except OSError as e:
        logger.error(f"Could not write to {sink.path}: {e}")
        return _error(500, "Failed to record IFSC details", str(e))

    return record.to_json()


@router.get("/regions")
def search_regions(request: Request, q: str = ""):
    if not q.strip():
        return _error(400, "Region name is required")

    client: RegionSearchClient = request.app.state.region_client
    try:
        results = client.search(q)
    except LookupFailure as e:
        logger.error(f"Region search failed for {q!r}: {e}")
        return _error(500, "Failed to search region", str(e))

    return [r.to_json() for r in results]


@router.get("/history")
def history(request: Request):
    sink: ResultSink = request.app.state.sink
    return [CodeRecord.from_row(row).to_json() for row in sink.read_all()]


async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, "Request body must be JSON of the form {\"ifsc\": \"<code>\"}")


async def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error handling {request.method} {request.url.path}", exc_info=exc)
    return _error(500, "Internal server error", f"{type(exc).__name__}: {exc}")


def create_app(cache: ResultCache, sink: ResultSink, region_client: RegionSearchClient) -> FastAPI:
    """Build the app around an existing cache and sink (shared with the console)."""
    app = FastAPI(title="IFSC Checker API")
    app.state.cache = cache
    app.state.sink = sink
    app.state.region_client = region_client
    app.add_exception_handler(RequestValidationError, _bad_request)
    app.add_exception_handler(Exception, _internal_error)
    app.include_router(router)
    return app


def get_app(settings: Settings | None = None) -> FastAPI:
    """App factory for `uvicorn ifsccheck.api:get_app --factory`."""
    settings = settings or load_settings()
    logger.info("Starting IFSC Checker API")
    return create_app(
        ResultCache(IfscClient.from_settings(settings)),
        ResultSink(Path(settings.output_file)),
        RegionSearchClient.from_settings(settings),
    )
