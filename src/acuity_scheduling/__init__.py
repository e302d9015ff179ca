"""
Acuity Scheduling SDK for Python

Verify and decode Acuity static webhooks, and call the Acuity REST API.
"""

from .body import decode_body, normalize_body
from .client import AcuityClient, AsyncAcuityClient
from .config import ClientSettings, WebhookSettings
from .errors import (
    AcuityAuthError,
    AcuityConflictError,
    AcuityError,
    AcuityErrorCode,
    AcuityForbiddenError,
    AcuityNetworkError,
    AcuityNotFoundError,
    AcuityRateLimitError,
    AcuityServerError,
    AcuityTimeoutError,
    AcuityValidationError,
    AppointmentErrorCode,
    CancelAppointmentErrorCode,
    RescheduleAppointmentErrorCode,
    UnsupportedBodyType,
    WebhookError,
    WebhookErrorCode,
)
from .events import decode_event
from .handler import (
    HandlerState,
    StaticWebhookHandler,
    create_static_webhook_handler,
    handle_static_webhook,
    parse_static_webhook_event,
)
from .headers import DEFAULT_SIGNATURE_HEADER, resolve_signature
from .models import (
    AppointmentAction,
    AppointmentQueryOptions,
    AppointmentRequestDefaults,
    StaticWebhookEvent,
    WebhookEventType,
)
from .signature import compute_signature, safe_compare, verify_or_fail, verify_signature

__version__ = "0.1.0"

__all__ = [
    "AcuityClient",
    "AsyncAcuityClient",
    "ClientSettings",
    "WebhookSettings",
    "AcuityError",
    "AcuityErrorCode",
    "AcuityAuthError",
    "AcuityConflictError",
    "AcuityForbiddenError",
    "AcuityNetworkError",
    "AcuityNotFoundError",
    "AcuityRateLimitError",
    "AcuityServerError",
    "AcuityTimeoutError",
    "AcuityValidationError",
    "AppointmentErrorCode",
    "CancelAppointmentErrorCode",
    "RescheduleAppointmentErrorCode",
    "UnsupportedBodyType",
    "WebhookError",
    "WebhookErrorCode",
    "AppointmentAction",
    "AppointmentQueryOptions",
    "AppointmentRequestDefaults",
    "StaticWebhookEvent",
    "WebhookEventType",
    "DEFAULT_SIGNATURE_HEADER",
    "HandlerState",
    "StaticWebhookHandler",
    "create_static_webhook_handler",
    "handle_static_webhook",
    "parse_static_webhook_event",
    "compute_signature",
    "decode_body",
    "decode_event",
    "normalize_body",
    "resolve_signature",
    "safe_compare",
    "verify_or_fail",
    "verify_signature",
    "AcuityWebhookWSGIMiddleware",
]

from .middleware.wsgi import AcuityWebhookWSGIMiddleware

# ASGI middleware requires starlette (install the "fastapi" extra)
try:
    from .middleware.asgi import AcuityWebhookASGIMiddleware
    __all__.append("AcuityWebhookASGIMiddleware")
except ImportError:
    pass
