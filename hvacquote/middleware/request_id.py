# hvacquote/middleware/request_id.py
from __future__ import annotations

import re
import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

# Client ids are echoed into logs and headers; anything else gets a fresh id
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def request_id_from(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if _VALID_REQUEST_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Puts the request id on request.state, in the structlog context for the
    duration of the request, and on the response.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        req_id = request_id_from(request)
        request.state.request_id = req_id

        with structlog.contextvars.bound_contextvars(request_id=req_id):
            response: Response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = req_id
        return response
