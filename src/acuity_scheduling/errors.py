"""
Error types for Acuity static webhooks and the REST client.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class WebhookErrorCode(str, Enum):
    """Discriminating codes carried by :class:`WebhookError`."""

    SIGNATURE_MISSING = "signature_missing"
    SIGNATURE_MISMATCH = "signature_mismatch"
    INVALID_PAYLOAD = "invalid_payload"


WEBHOOK_ERROR_MESSAGES: dict[WebhookErrorCode, str] = {
    WebhookErrorCode.SIGNATURE_MISSING: "Webhook signature header is missing.",
    WebhookErrorCode.SIGNATURE_MISMATCH: "Webhook signature verification failed.",
    WebhookErrorCode.INVALID_PAYLOAD: "Webhook payload is invalid.",
}

# Suggested response status when a webhook request is rejected
WEBHOOK_ERROR_STATUS: dict[WebhookErrorCode, int] = {
    WebhookErrorCode.SIGNATURE_MISSING: 401,
    WebhookErrorCode.SIGNATURE_MISMATCH: 401,
    WebhookErrorCode.INVALID_PAYLOAD: 400,
}


class WebhookError(Exception):
    """
    Raised when a static webhook request is rejected.

    A single exception type is used for every rejection; inspect ``code``
    to tell them apart.

    Attributes:
        code: One of :class:`WebhookErrorCode`
        message: Human readable description (never contains the expected signature)
    """

    def __init__(
        self,
        code: WebhookErrorCode | str,
        message: str | None = None,
    ):
        self.code = WebhookErrorCode(code)
        self.message = message or WEBHOOK_ERROR_MESSAGES[self.code]
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return WEBHOOK_ERROR_STATUS[self.code]

    def __repr__(self) -> str:
        return f"WebhookError(code={self.code.value!r}, message={self.message!r})"


class UnsupportedBodyType(TypeError):
    """Raised when a raw webhook body is not str, bytes, bytearray or memoryview."""


class AcuityErrorCode(str, Enum):
    """Generic status-driven codes returned across REST endpoints."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    CONFLICT = "conflict"
    INVALID_DATA = "invalid_data"
    TOO_MANY_REQUESTS = "too_many_requests"
    SERVER_ERROR = "server_error"
    UNKNOWN_ERROR = "unknown_error"
    TIMEOUT = "timeout"
    NETWORK = "network_error"


class AppointmentErrorCode(str, Enum):
    """Codes returned by ``POST /appointments``."""

    REQUIRED_FIRST_NAME = "required_first_name"
    REQUIRED_LAST_NAME = "required_last_name"
    REQUIRED_EMAIL = "required_email"
    INVALID_EMAIL = "invalid_email"
    INVALID_FIELDS = "invalid_fields"
    REQUIRED_FIELD = "required_field"
    REQUIRED_APPOINTMENT_TYPE_ID = "required_appointment_type_id"
    INVALID_APPOINTMENT_TYPE = "invalid_appointment_type"
    INVALID_CALENDAR = "invalid_calendar"
    REQUIRED_DATETIME = "required_datetime"
    INVALID_TIMEZONE = "invalid_timezone"
    INVALID_DATETIME = "invalid_datetime"
    NO_AVAILABLE_CALENDAR = "no_available_calendar"
    NOT_AVAILABLE_MIN_HOURS_IN_ADVANCE = "not_available_min_hours_in_advance"
    NOT_AVAILABLE_MAX_DAYS_IN_ADVANCE = "not_available_max_days_in_advance"
    NOT_AVAILABLE = "not_available"
    INVALID_CERTIFICATE = "invalid_certificate"
    EXPIRED_CERTIFICATE = "expired_certificate"
    CERTIFICATE_USES = "certificate_uses"
    INVALID_CERTIFICATE_TYPE = "invalid_certificate_type"


class CancelAppointmentErrorCode(str, Enum):
    """Codes returned by ``PUT /appointments/{id}/cancel``."""

    CANCEL_NOT_ALLOWED = "cancel_not_allowed"
    CANCEL_TOO_CLOSE = "cancel_too_close"


class RescheduleAppointmentErrorCode(str, Enum):
    """Codes returned by ``PUT /appointments/{id}/reschedule``."""

    RESCHEDULE_NOT_ALLOWED = "reschedule_not_allowed"
    RESCHEDULE_TOO_CLOSE = "reschedule_too_close"
    RESCHEDULE_SERIES = "reschedule_series"
    RESCHEDULE_CANCELED = "reschedule_canceled"
    INVALID_CALENDAR = "invalid_calendar"
    REQUIRED_DATETIME = "required_datetime"
    INVALID_TIMEZONE = "invalid_timezone"
    INVALID_DATETIME = "invalid_datetime"
    NOT_AVAILABLE_MIN_HOURS_IN_ADVANCE = "not_available_min_hours_in_advance"
    NOT_AVAILABLE_MAX_DAYS_IN_ADVANCE = "not_available_max_days_in_advance"
    NOT_AVAILABLE = "not_available"


class AcuityError(Exception):
    """
    Base error for failed REST calls.

    Attributes:
        status: HTTP status code (0 when the request never got a response)
        code: Error code reported by Acuity, or derived from the status
        payload: Decoded response body, if any
    """

    default_message: str | None = None

    def __init__(
        self,
        status: int,
        code: str | None = None,
        message: str | None = None,
        payload: Any = None,
    ):
        self.status = status
        self.code = code
        self.payload = payload
        self.message = (
            message
            or self.default_message
            or code
            or f"Acuity request failed with status {status}"
        )
        super().__init__(self.message)


class AcuityAuthError(AcuityError):
    default_message = "Authentication with Acuity failed."


class AcuityForbiddenError(AcuityError):
    default_message = "You do not have permission to access this resource."


class AcuityNotFoundError(AcuityError):
    default_message = "The requested resource was not found."


class AcuityRateLimitError(AcuityError):
    default_message = "Rate limit exceeded. Please retry with backoff."


class AcuityValidationError(AcuityError):
    default_message = "Validation failed for the provided data."


class AcuityConflictError(AcuityError):
    default_message = "The request conflicts with the current state of the resource."


class AcuityServerError(AcuityError):
    default_message = "Acuity encountered an internal error."


class AcuityNetworkError(AcuityError):
    default_message = "Network error while calling Acuity."


class AcuityTimeoutError(AcuityError):
    default_message = "Acuity request timed out. Consider increasing the timeout threshold."
