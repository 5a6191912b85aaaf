"""
Ouderschaps API: Access Log Middleware
========================================

What:  One log line per HTTP request under the `ouderschaps_api.access` logger,
       attributed to the user the request was resolved to.
How:   `current_user` stores the resolved user id on `request.state.user_id`;
       request.state lives in the ASGI scope, so this middleware reads it back
       once the route has run. Requests that never authenticated (public
       lookups, 401s) are logged with user "-".

Logged: method, path, status, duration, request id, user id, client ip.
Not logged: request bodies and the Authorization / x-user-id headers.

/health is skipped; probes hit it every few seconds.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ouderschaps_api.middleware.request_id import request_id_var

logger = logging.getLogger("ouderschaps_api.access")

UNAUTHENTICATED = "-"


def level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path == "/health":
            return await call_next(request)

        # Created up front so the route's writes land in the same scope dict
        request.state.user_id = None
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        user_id: Optional[int] = getattr(request.state, "user_id", None)
        fields = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "user_id": user_id,
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            level_for(response.status_code),
            "%s %s %d %.1fms [%s] user=%s from %s",
            fields["method"],
            fields["path"],
            fields["status"],
            elapsed_ms,
            fields["request_id"],
            user_id if user_id is not None else UNAUTHENTICATED,
            fields["client_ip"],
            extra=fields,
        )
        return response
