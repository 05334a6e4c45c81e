"""Custom exception types and HTTP mapping utilities."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AeroWeatherError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StationNotFoundError(AeroWeatherError):
    """Neither a METAR nor a TAF exists for the requested station."""

    status_code = 404


class UpstreamError(AeroWeatherError):
    """A required aviationweather.gov request failed.

    ``upstream_status`` is None for transport-level failures (DNS, timeout, ...).
    """

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        if upstream_status == 404:
            self.status_code = 404


class AnalysisError(AeroWeatherError):
    """The language model call failed or returned an empty/malformed result."""

    status_code = 502


class ConfigurationError(AeroWeatherError):
    """Server-side misconfiguration (e.g. missing AI credential)."""

    status_code = 500


async def _aeroweather_error_handler(request: Request, exc: AeroWeatherError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query"))
    msg = first.get("msg", "Invalid request")
    detail = f"{loc}: {msg}" if loc else msg
    return JSONResponse(status_code=400, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AeroWeatherError, _aeroweather_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
