"""Shared-secret access gate.

A request is let through when no ACCESS_KEY is configured, when ``?key=``
matches it (a 24h ``authorized`` cookie is then set), or when that cookie is
already present. Anything else gets the fixed 403 page. There is no lockout
or backoff.
"""

from __future__ import annotations

import html
import logging
import secrets
from enum import Enum
from typing import Callable, Iterable, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse, Response

from aeroweather.utils.labels import label

logger = logging.getLogger(__name__)

COOKIE_NAME = "authorized"
COOKIE_VALUE = "true"
COOKIE_MAX_AGE = 60 * 60 * 24

# Health checks and the key check itself stay reachable.
DEFAULT_EXEMPT_PATHS = ("/healthz", "/api/verify-key")


class GateDecision(str, Enum):
    ALLOW = "allow"
    ALLOW_AND_SET_COOKIE = "allow_and_set_cookie"
    DENY = "deny"


def keys_match(client_key: Optional[str], secret: str) -> bool:
    if client_key is None:
        return False
    return secrets.compare_digest(client_key.encode("utf-8"), secret.encode("utf-8"))


class AccessGate:
    def __init__(self, secret: Optional[str], language: str = "en", exempt_paths: Iterable[str] = DEFAULT_EXEMPT_PATHS):
        self.secret = secret or None
        self.language = language
        self.exempt_paths = tuple(exempt_paths)
        if self.secret is None:
            logger.warning("ACCESS_KEY not set, authorization disabled")

    def evaluate(self, client_key: Optional[str], cookie_value: Optional[str]) -> GateDecision:
        if self.secret is None:
            return GateDecision.ALLOW
        if keys_match(client_key, self.secret):
            return GateDecision.ALLOW_AND_SET_COOKIE
        if cookie_value == COOKIE_VALUE:
            return GateDecision.ALLOW
        return GateDecision.DENY

    def denied_response(self) -> HTMLResponse:
        title = html.escape(label("denied_title", self.language))
        body = html.escape(label("denied_body", self.language))
        page = (
            "<!DOCTYPE html>\n"
            f'<html lang="{self.language}">\n'
            "  <head>\n"
            '    <meta charset="UTF-8" />\n'
            '    <meta name="viewport" content="width=device-width, initial-scale=1.0" />\n'
            f"    <title>{title}</title>\n"
            "  </head>\n"
            "  <body>\n"
            f"    <h2>{title}</h2>\n"
            f"    <p>{body}</p>\n"
            "    <pre>?key=YOUR_ACCESS_KEY</pre>\n"
            "  </body>\n"
            "</html>\n"
        )
        return HTMLResponse(content=page, status_code=403)

    async def __call__(self, request: Request, call_next: Callable) -> Response:
        # CORS preflight carries no cookie; CORSMiddleware answers it
        if request.method == "OPTIONS" or request.url.path in self.exempt_paths:
            return await call_next(request)

        decision = self.evaluate(request.query_params.get("key"), request.cookies.get(COOKIE_NAME))
        if decision is GateDecision.DENY:
            logger.info("Access denied for %s %s", request.method, request.url.path)
            return self.denied_response()

        response = await call_next(request)
        if decision is GateDecision.ALLOW_AND_SET_COOKIE:
            response.set_cookie(
                COOKIE_NAME,
                COOKIE_VALUE,
                max_age=COOKIE_MAX_AGE,
                httponly=True,
                secure=True,
                samesite="strict",
            )
        return response
