"""
Verify-then-decode-then-dispatch handler for Acuity static webhooks.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from enum import Enum
from typing import Any, Awaitable, Callable, Union

import structlog

from .body import RawBody, decode_body, normalize_body
from .errors import WebhookError
from .events import decode_event
from .headers import DEFAULT_SIGNATURE_HEADER, resolve_signature
from .models import StaticWebhookEvent
from .signature import check_signature, require_secret

logger = structlog.get_logger()

WebhookCallback = Callable[[StaticWebhookEvent], Union[None, Awaitable[None]]]


class HandlerState(str, Enum):
    """Stages a single request passes through."""

    IDLE = "idle"
    SIGNATURE_RESOLVED = "signature_resolved"
    VERIFIED = "verified"
    DECODED = "decoded"
    REJECTED = "rejected"


class StaticWebhookHandler:
    """
    Handler for Acuity static webhooks.

    Resolves the claimed signature, verifies it against the raw body,
    decodes the event and hands it to ``callback``. The callback only ever
    sees authenticated, fully decoded events; errors it raises propagate
    unchanged.

    Args:
        secret: API key used by Acuity to sign static webhooks
        callback: Called with each decoded event; may be sync or async
        header_name: Signature header name. Default: x-acuity-signature
        verify: If False, skip signature checks (local testing only).
            A present signature is still resolved and logged.

    Raises:
        WebhookError: invalid_payload if verify is on and the secret is blank

    Example:
        >>> async def on_event(event):
        ...     print(event.type, event.id)
        >>>
        >>> handler = StaticWebhookHandler(secret="api-key", callback=on_event)
        >>> event = await handler.handle(raw_body, headers=request.headers)
    """

    def __init__(
        self,
        secret: str | None,
        callback: WebhookCallback,
        header_name: str | None = None,
        verify: bool = True,
    ):
        self.verify = verify
        self.header_name = header_name or DEFAULT_SIGNATURE_HEADER
        self.callback = callback
        # Fail fast: a misconfigured handler cannot be installed
        self._secret = require_secret(secret) if verify else (secret or "").strip()

    def __repr__(self) -> str:
        return (
            f"StaticWebhookHandler(header_name={self.header_name!r}, "
            f"verify={self.verify!r})"
        )

    def process(
        self,
        body: RawBody,
        headers: Mapping[str, Any] | Any | None = None,
        signature: str | None = None,
    ) -> StaticWebhookEvent:
        """
        Verify and decode a request without invoking the callback.

        Raises:
            WebhookError: On a missing/mismatched signature or invalid payload
        """
        state = HandlerState.IDLE
        try:
            claimed = resolve_signature(signature, headers, self.header_name)
            if claimed:
                state = HandlerState.SIGNATURE_RESOLVED
            body_bytes = normalize_body(body)

            if self.verify:
                check_signature(self._secret, body_bytes, claimed, self.header_name)
                state = HandlerState.VERIFIED
            else:
                logger.debug(
                    "webhook_verification_skipped",
                    signature_present=claimed is not None,
                )

            event = decode_event(decode_body(body_bytes))
        except WebhookError as e:
            logger.warning(
                "webhook_rejected",
                code=e.code.value,
                state=HandlerState.REJECTED.value,
                reached=state.value,
            )
            raise

        logger.info(
            "webhook_decoded",
            state=HandlerState.DECODED.value,
            event_type=event.type.value,
            id=event.id,
        )
        return event

    async def handle(
        self,
        body: RawBody,
        headers: Mapping[str, Any] | Any | None = None,
        signature: str | None = None,
    ) -> StaticWebhookEvent:
        """
        Verify, decode and dispatch a webhook request.

        Args:
            body: Raw request body exactly as received
            headers: Request headers (mapping or object with ``get``)
            signature: Explicit signature, overrides headers

        Returns:
            The decoded event, after the callback has completed

        Raises:
            WebhookError: On a missing/mismatched signature or invalid payload.
                The callback is not invoked in that case.
        """
        event = self.process(body, headers, signature)

        result = self.callback(event)
        if inspect.isawaitable(result):
            await result

        return event

    def handle_sync(
        self,
        body: RawBody,
        headers: Mapping[str, Any] | Any | None = None,
        signature: str | None = None,
    ) -> StaticWebhookEvent:
        """
        Synchronous variant of :meth:`handle` for WSGI apps.

        Raises:
            WebhookError: On a missing/mismatched signature or invalid payload
            TypeError: If the callback is a coroutine function
        """
        if inspect.iscoroutinefunction(self.callback):
            raise TypeError("handle_sync() requires a synchronous callback; use handle()")

        event = self.process(body, headers, signature)

        result = self.callback(event)
        if inspect.isawaitable(result):
            # Close un-awaited coroutines so they do not leak a warning
            close = getattr(result, "close", None)
            if close is not None:
                close()
            raise TypeError("handle_sync() requires a synchronous callback; use handle()")

        return event


def create_static_webhook_handler(
    callback: WebhookCallback,
    *,
    secret: str | None,
    header_name: str | None = None,
    verify: bool = True,
) -> Callable[..., Awaitable[StaticWebhookEvent]]:
    """
    Build an async ``(body, headers=None, signature=None)`` function bound to
    a configured :class:`StaticWebhookHandler`.
    """
    handler = StaticWebhookHandler(
        secret=secret,
        callback=callback,
        header_name=header_name,
        verify=verify,
    )
    return handler.handle


async def handle_static_webhook(
    callback: WebhookCallback,
    *,
    secret: str | None,
    body: RawBody,
    headers: Mapping[str, Any] | Any | None = None,
    signature: str | None = None,
    header_name: str | None = None,
) -> StaticWebhookEvent:
    """One-shot form of :meth:`StaticWebhookHandler.handle`."""
    handler = StaticWebhookHandler(
        secret=secret,
        callback=callback,
        header_name=header_name,
    )
    return await handler.handle(body, headers=headers, signature=signature)


def parse_static_webhook_event(body_text: str) -> StaticWebhookEvent:
    """Decode a body without verifying it. Only use on already trusted input."""
    return decode_event(body_text)
