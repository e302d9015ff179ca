"""
WSGI middleware for Acuity static webhooks (Flask).
"""

from __future__ import annotations

import json
from io import BytesIO
from typing import Any, Callable, Iterable

from ..errors import WebhookError
from ..handler import StaticWebhookHandler, WebhookCallback
from ..models import StaticWebhookEvent

ENVIRON_KEY = "acuity.event"


def _ignore(event: StaticWebhookEvent) -> None:
    return None


def _extract_headers(environ: dict[str, Any]) -> dict[str, str]:
    """Extract HTTP headers from WSGI environ."""
    headers: dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            # HTTP_X_ACUITY_SIGNATURE -> x-acuity-signature
            header_name = key[5:].replace("_", "-").lower()
            headers[header_name] = value
        elif key == "CONTENT_TYPE":
            headers["content-type"] = value
        elif key == "CONTENT_LENGTH":
            headers["content-length"] = value
    return headers


def _read_body(environ: dict[str, Any]) -> bytes:
    """Read the raw body and reset the input stream for downstream apps."""
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0

    stream = environ.get("wsgi.input")
    body = stream.read(length) if stream is not None and length > 0 else b""
    environ["wsgi.input"] = BytesIO(body)
    return body


class AcuityWebhookWSGIMiddleware:
    """
    WSGI middleware verifying Acuity static webhooks.

    POST requests to ``path`` are verified and decoded before reaching the
    app; the event is stored in `environ["acuity.event"]`. Rejected requests
    get a JSON error (401 for signature problems, 400 for invalid payloads).

    Args:
        app: WSGI application
        secret: API key Acuity signs static webhooks with
        callback: Optional synchronous callback run with each verified event
        path: Request path carrying webhooks. Default: /webhooks/acuity
        header_name: Signature header name. Default: x-acuity-signature
        verify: If False, skip signature verification (local testing only)

    Example (Flask):
        >>> from flask import Flask, request
        >>> from acuity_scheduling.middleware.wsgi import AcuityWebhookWSGIMiddleware
        >>>
        >>> app = Flask(__name__)
        >>> app.wsgi_app = AcuityWebhookWSGIMiddleware(app.wsgi_app, secret=API_KEY)
        >>>
        >>> @app.post("/webhooks/acuity")
        >>> def acuity_webhook():
        ...     event = request.environ["acuity.event"]
        ...     return {"received": event.type}
    """

    def __init__(
        self,
        app: Callable[..., Iterable[bytes]],
        secret: str | None = None,
        callback: WebhookCallback | None = None,
        path: str = "/webhooks/acuity",
        header_name: str | None = None,
        verify: bool = True,
    ):
        self.app = app
        self.path = path
        self.handler = StaticWebhookHandler(
            secret=secret,
            callback=callback or _ignore,
            header_name=header_name,
            verify=verify,
        )

    def __call__(
        self,
        environ: dict[str, Any],
        start_response: Callable[..., Any],
    ) -> Iterable[bytes]:
        if (
            environ.get("REQUEST_METHOD") != "POST"
            or environ.get("PATH_INFO", "/") != self.path
        ):
            return self.app(environ, start_response)

        body = _read_body(environ)

        try:
            event = self.handler.handle_sync(body, headers=_extract_headers(environ))
        except WebhookError as e:
            return self._error_response(start_response, e)

        environ[ENVIRON_KEY] = event
        return self.app(environ, start_response)

    def _error_response(
        self,
        start_response: Callable[..., Any],
        error: WebhookError,
    ) -> Iterable[bytes]:
        """Return a JSON error response for a rejected webhook."""
        body = json.dumps(
            {"error": error.code.value, "message": error.message}
        ).encode("utf-8")
        status = "401 Unauthorized" if error.http_status == 401 else "400 Bad Request"
        start_response(
            status,
            [
                ("Content-Type", "application/json"),
                ("Content-Length", str(len(body))),
            ],
        )
        return [body]
