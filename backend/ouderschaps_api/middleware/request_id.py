"""
Ouderschaps API: Request ID Middleware
========================================

What:  Gives every request a short correlation id and echoes it in the
       `X-Request-ID` response header.
How:   Reuses the client's `X-Request-ID` when one is sent, otherwise takes
       the first 8 characters of a UUID4. The id lives in a ContextVar so the
       access log and the exception handlers can prefix their lines with it.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
