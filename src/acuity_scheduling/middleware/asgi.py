"""
ASGI middleware for Acuity static webhooks (FastAPI/Starlette).
"""

from typing import Any, Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..errors import WebhookError
from ..handler import StaticWebhookHandler, WebhookCallback
from ..models import StaticWebhookEvent


def _ignore(event: StaticWebhookEvent) -> None:
    return None


def error_response(error: WebhookError) -> JSONResponse:
    return JSONResponse(
        status_code=error.http_status,
        content={"error": error.code.value, "message": error.message},
    )


class AcuityWebhookASGIMiddleware(BaseHTTPMiddleware):
    """
    ASGI middleware verifying Acuity static webhooks.

    POST requests to ``path`` are verified and decoded before reaching the
    endpoint; the event is attached to `request.state.acuity_event`.
    Rejected requests get a JSON error (401 for signature problems, 400 for
    invalid payloads) and never reach the endpoint. Other requests pass
    through untouched.

    Args:
        app: ASGI application
        secret: API key Acuity signs static webhooks with
        callback: Optional callback run with each verified event
        path: Request path carrying webhooks. Default: /webhooks/acuity
        header_name: Signature header name. Default: x-acuity-signature
        verify: If False, skip signature verification (local testing only)

    Example (FastAPI):
        >>> from fastapi import FastAPI, Request
        >>> from acuity_scheduling import AcuityWebhookASGIMiddleware
        >>>
        >>> app = FastAPI()
        >>> app.add_middleware(AcuityWebhookASGIMiddleware, secret=API_KEY)
        >>>
        >>> @app.post("/webhooks/acuity")
        >>> async def acuity_webhook(request: Request):
        ...     event = request.state.acuity_event
        ...     return {"received": event.type}
    """

    def __init__(
        self,
        app: Any,
        secret: Optional[str] = None,
        callback: Optional[WebhookCallback] = None,
        path: str = "/webhooks/acuity",
        header_name: Optional[str] = None,
        verify: bool = True,
    ):
        super().__init__(app)
        self.path = path
        self.handler = StaticWebhookHandler(
            secret=secret,
            callback=callback or _ignore,
            header_name=header_name,
            verify=verify,
        )

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        if request.method != "POST" or request.url.path != self.path:
            return await call_next(request)

        body = await request.body()

        try:
            event = await self.handler.handle(body, headers=request.headers)
        except WebhookError as e:
            return error_response(e)

        request.state.acuity_event = event
        return await call_next(request)
