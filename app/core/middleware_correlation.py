from typing_extensions import override
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable
from collections.abc import Awaitable

from app.core.logging import request_id_var


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id taken from X-Request-ID (or a fresh uuid4).
    - Sets `request.state.correlation_id`
    - Exposes it to log records through `request_id_var`
    - Echoes it back on the response
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name: str = header_name

    @override
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        corr_id = request.headers.get(self.header_name, "").strip() or str(uuid.uuid4())
        request.state.correlation_id = corr_id
        token = request_id_var.set(corr_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[self.header_name] = corr_id
        return response
