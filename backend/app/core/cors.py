# app/core/cors.py
"""
Origin authorization (CORS) for browser and WebGL clients.

The allow-list is an ordered list of rules, each either an exact origin string or a
pattern. The first rule that matches grants access. Requests without an Origin header
are treated as same-origin and pass through untouched. Requests from any other origin
are refused with 403 before they reach a route.

Also home to the fixed security headers added to every response.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Union

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("uvicorn.error")

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD")
ALLOWED_HEADERS = ("Content-Type", "Authorization", "X-Requested-With")
EXPOSED_HEADERS = ("Content-Length", "X-Request-Id")
MAX_AGE_SECONDS = 86400

# One or more DNS labels, e.g. "game" or "html.game"
_WILDCARD_HOST = r"[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*"


@dataclass(frozen=True)
class ExactOrigin:
    value: str

    def matches(self, origin: str) -> bool:
        return origin == self.value


@dataclass(frozen=True)
class PatternOrigin:
    """Regular expression over scheme://host[:port]."""

    source: str
    pattern: re.Pattern

    def matches(self, origin: str) -> bool:
        return self.pattern.search(origin) is not None


OriginRule = Union[ExactOrigin, PatternOrigin]


def wildcard_to_regex(text: str) -> re.Pattern:
    """Compile "https://*.itch.io" style rules; each "*" stands for one or more host labels."""
    parts = [re.escape(part) for part in text.split("*")]
    return re.compile("^" + _WILDCARD_HOST.join(parts) + "$")


def parse_origin_rule(text: str) -> OriginRule:
    """
    Turn one configured allow-list entry into a rule.

    - "^..."           -> regular expression
    - contains "*"     -> host wildcard
    - anything else    -> exact match (including the literal "null" origin)
    """
    if text.startswith("^"):
        return PatternOrigin(text, re.compile(text))
    if "*" in text:
        return PatternOrigin(text, wildcard_to_regex(text))
    return ExactOrigin(text)


class OriginPolicy:
    """Ordered allow-list plus the CORS response headers granted to matching origins."""

    def __init__(self, entries: Iterable[str | OriginRule]):
        self.rules: list[OriginRule] = [
            parse_origin_rule(entry) if isinstance(entry, str) else entry for entry in entries
        ]

    def is_allowed(self, origin: str) -> bool:
        return any(rule.matches(origin) for rule in self.rules)

    def headers_for(self, origin: str | None) -> dict[str, str]:
        """
        CORS headers for a granted request.
        With origin=None (same-origin caller) nothing is echoed back as allowed origin.
        Access-Control-Allow-Credentials is never sent: credentials are not allowed.
        """
        headers = {
            "Access-Control-Allow-Methods": ",".join(ALLOWED_METHODS),
            "Access-Control-Allow-Headers": ",".join(ALLOWED_HEADERS),
            "Access-Control-Expose-Headers": ",".join(EXPOSED_HEADERS),
            "Access-Control-Max-Age": str(MAX_AGE_SECONDS),
        }
        if origin is not None:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        return headers


class OriginFilterMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, policy: OriginPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next):
        """
        Decide whether the request's Origin may receive a response.
        Preflight (OPTIONS) requests are answered here with 204 and never reach the router.
        """
        origin = request.headers.get("origin")
        if origin is not None and not self.policy.is_allowed(origin):
            logger.warning("Blocked by CORS: %s", origin)
            return JSONResponse(status_code=403, content={"error": "Not allowed by CORS"})

        headers = self.policy.headers_for(origin)
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        if origin is not None:
            response.headers.update(headers)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds fixed hardening headers to every response and drops the body of HEAD responses."""

    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "X-XSS-Protection": "1; mode=block",
    }

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.update(self.HEADERS)
        if request.method == "HEAD":
            # Same status and headers as GET (Content-Length included), no body
            async for _ in response.body_iterator:
                pass
            return Response(status_code=response.status_code, headers=dict(response.headers))
        return response
