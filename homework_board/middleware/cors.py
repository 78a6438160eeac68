from __future__ import annotations

from typing import Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds permissive cross-origin headers to every HTTP response.

    Unlike Starlette's ``CORSMiddleware`` the headers are emitted whether or
    not the request carries an ``Origin`` header, and error responses (404,
    405, 500) get them too. Preflight requests are answered by the explicit
    OPTIONS routes, so this middleware never short-circuits.
    """

    def __init__(
        self,
        app,
        *,
        allow_origin: str = "*",
        allow_methods: Sequence[str] = ("GET", "POST", "OPTIONS"),
        allow_headers: Sequence[str] = ("Content-Type",),
    ):
        super().__init__(app)
        self.allow_origin = allow_origin
        self.allow_methods = ", ".join(allow_methods)
        self.allow_headers = ", ".join(allow_headers)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = self.allow_origin
        response.headers["Access-Control-Allow-Methods"] = self.allow_methods
        response.headers["Access-Control-Allow-Headers"] = self.allow_headers
        return response
