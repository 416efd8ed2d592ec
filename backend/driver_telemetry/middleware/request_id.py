"""
Driver Telemetry API: Request ID Middleware
==============================================

What:  Tags each request with a correlation ID and echoes it in the
       `X-Request-ID` response header.
How:   A client-supplied `X-Request-ID` is kept when it is a short token of
       letters, digits, `-`, `_` or `.`; anything else (or no header) is
       replaced by the first 8 hex characters of a UUID4.

The ID lives in two places:
    request_id_var       ContextVar read by handlers and log calls
    request.state        read by the fallback 500 handler, which runs
                         outside this middleware
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(supplied: Optional[str]) -> str:
    """Keep a well-formed client ID, otherwise generate a new one."""
    if supplied and _VALID_REQUEST_ID.match(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
