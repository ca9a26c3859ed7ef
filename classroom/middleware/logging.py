"""Per-request log line and metrics middleware."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from classroom.telemetry import observe_request
from classroom.utils import AuthenticationError, decode_access_token

logger = logging.getLogger("classroom.middleware.structured")

COLOR_RESET = "\u001b[0m"
COLOR_GREEN = "\u001b[32m"
COLOR_CYAN = "\u001b[36m"
COLOR_YELLOW = "\u001b[33m"
COLOR_RED = "\u001b[31m"

_LOGGED_FIELDS = (
    "timestamp",
    "method",
    "url",
    "client_ip",
    "user_id",
    "status_code",
    "duration_ms",
)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one coloured log line and one metrics sample per HTTP request.

    The user id comes from the bearer token claims, so no database lookup is
    made; an invalid token is logged as an anonymous request.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": request.method,
            "url": str(request.url),
            "client_ip": request.client.host if request.client else None,
            "user_id": self._token_user_id(request),
            "status_code": 500,
        }

        try:
            response = await call_next(request)
            entry["status_code"] = response.status_code
            return response
        except Exception as exc:
            entry["error"] = repr(exc)
            raise
        finally:
            elapsed = time.perf_counter() - started
            entry["duration_ms"] = round(elapsed * 1000, 2)
            if "error" in entry:
                logger.error(self._format(entry))
            else:
                logger.info(self._format(entry))
            observe_request(
                request.method,
                self._route_template(request),
                entry["status_code"],
                elapsed,
            )

    @staticmethod
    def _route_template(request: Request) -> str:
        """Route path with placeholders, keeping metric labels low-cardinality."""

        route = request.scope.get("route")
        return getattr(route, "path", None) or request.url.path

    @staticmethod
    def _bearer_token(request: Request) -> Optional[str]:
        scheme, _, token = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None
        return token

    def _token_user_id(self, request: Request) -> int | None:
        token = self._bearer_token(request)
        if token is None:
            return None

        try:
            return decode_access_token(token).user.id
        except AuthenticationError:
            return None

    @staticmethod
    def _format(entry: dict[str, Any]) -> str:
        status = entry.get("status_code") or 0
        if 200 <= status < 300:
            color = COLOR_GREEN
        elif 400 <= status < 500:
            color = COLOR_YELLOW
        elif status >= 500:
            color = COLOR_RED
        else:
            color = COLOR_CYAN

        message = ", ".join(
            f"{name}={entry[name] if entry.get(name) is not None else '-'}"
            for name in _LOGGED_FIELDS
        )
        return f"{color}{message}{COLOR_RESET}"
