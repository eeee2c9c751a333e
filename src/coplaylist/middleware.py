"""HTTP middleware: response hardening, brute-force throttling and request ids."""

import logging
import re
import time
import uuid
from collections import defaultdict, deque
from dataclasses import dataclass

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from coplaylist.constants import Routes
from coplaylist.logging import request_id_var

logger = logging.getLogger(__name__)

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-XSS-Protection": "0",
}

# Responses on these prefixes can carry Spotify or admin tokens.
_NO_STORE_PREFIXES = (Routes.AUTH.prefix, Routes.ADMIN_TOKEN.prefix, Routes.ADMIN.prefix)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to every response, and ``no-store`` where tokens travel."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(_SECURITY_HEADERS)
        if request.url.path.startswith(_NO_STORE_PREFIXES):
            response.headers["Cache-Control"] = "no-store"
        return response


@dataclass(frozen=True, slots=True)
class _Throttle:
    """Requests matching ``method`` and ``path`` are counted under ``name``."""

    name: str
    path: str
    method: str | None = None
    prefix: bool = False

    def matches(self, request: Request) -> bool:
        if self.method is not None and request.method != self.method:
            return False
        path = request.url.path
        return path.startswith(self.path) if self.prefix else path == self.path


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP sliding-window limit on the endpoints worth guessing against.

    Covers the Spotify login flow (``/auth/*``) and the admin password check
    (``POST /api/admin/verify``). Each has its own window per client IP, so
    hammering one does not lock a user out of the other. Everything else
    passes straight through.
    """

    throttles = (
        _Throttle("auth", f"{Routes.AUTH.prefix}/", prefix=True),
        _Throttle("verify", f"{Routes.ADMIN.prefix}/verify", method="POST"),
    )

    def __init__(
        self,
        app: ASGIApp,
        auth_limit: int = 10,
        window_seconds: int = 60,
    ) -> None:
        super().__init__(app)
        self.auth_limit = auth_limit
        self.window = window_seconds
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        throttle = next((t for t in self.throttles if t.matches(request)), None)
        if throttle is None:
            return await call_next(request)

        key = f"{throttle.name}:{_client_ip(request)}"
        hits = self._hits[key]
        now = time.monotonic()
        while hits and hits[0] <= now - self.window:
            hits.popleft()

        if len(hits) >= self.auth_limit:
            retry_after = max(1, int(hits[0] + self.window - now))
            logger.warning("Rate limit exceeded for %s", key)
            return JSONResponse(
                {"detail": "Rate limit exceeded. Try again later."},
                status_code=429,
                headers={"Retry-After": str(retry_after)},
            )

        hits.append(now)
        return await call_next(request)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id for log correlation.

    A well-formed inbound ``X-Request-ID`` is reused; anything else is
    replaced by a fresh uuid4 hex so clients cannot inject text into the
    logs. The id is stored on ``request.state``, bound to ``request_id_var``
    for the JSON formatter, and echoed in the response header.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        inbound = request.headers.get("x-request-id", "")
        request_id = inbound if _REQUEST_ID_PATTERN.match(inbound) else uuid.uuid4().hex
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response
