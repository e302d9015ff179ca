"""
Decoding of static webhook bodies into :class:`StaticWebhookEvent`.

Acuity posts ``application/x-www-form-urlencoded`` bodies such as::

    action=scheduled&id=42&calendarID=7&appointmentTypeID=3
"""

import re
from typing import Optional
from urllib.parse import parse_qsl

from .errors import WebhookError, WebhookErrorCode
from .models import APPOINTMENT_EVENT_TYPES, AppointmentAction, StaticWebhookEvent

# Leading ASCII base-10 integer, optional sign
_INTEGER_PREFIX = re.compile(r"[+-]?[0-9]+")


def _invalid(message: str) -> WebhookError:
    return WebhookError(WebhookErrorCode.INVALID_PAYLOAD, message)


def _parse_integer(trimmed: str, field: str) -> int:
    match = _INTEGER_PREFIX.match(trimmed)
    if match is None:
        raise _invalid(f'Static webhook payload field "{field}" must be numeric.')
    return int(match.group(0))


def parse_required_numeric(value: Optional[str], field: str) -> int:
    """
    Parse a required numeric form field.

    Raises:
        WebhookError: invalid_payload if the field is missing, blank or not numeric
    """
    trimmed = value.strip() if value else ""
    if not trimmed:
        raise _invalid(f'Static webhook payload is missing "{field}".')
    return _parse_integer(trimmed, field)


def parse_optional_numeric(value: Optional[str], field: str) -> Optional[int]:
    """
    Parse an optional numeric form field, returning None when absent or blank.

    Raises:
        WebhookError: invalid_payload if the field is present but not numeric
    """
    trimmed = value.strip() if value else ""
    if not trimmed:
        return None
    return _parse_integer(trimmed, field)


def parse_action(value: Optional[str]) -> AppointmentAction:
    """
    Classify the ``action`` field.

    Raises:
        WebhookError: invalid_payload if missing or not a supported action
    """
    action = value.strip() if value else ""
    if not action:
        raise _invalid('Static webhook payload is missing "action".')

    try:
        return AppointmentAction(action)
    except ValueError:
        raise _invalid(f'Unsupported static webhook action "{action}".') from None


def parse_form(text: str) -> dict[str, str]:
    """Parse a form-encoded body; later duplicates overwrite earlier ones."""
    return dict(parse_qsl(text, keep_blank_values=True))


def decode_event(text: str) -> StaticWebhookEvent:
    """
    Decode a static webhook body.

    Args:
        text: The form-encoded body as text

    Returns:
        A fully validated StaticWebhookEvent

    Raises:
        WebhookError: invalid_payload for a missing/unsupported action or a
            missing/non-numeric id; non-numeric optional IDs also fail

    Examples:
        >>> event = decode_event("action=scheduled&id=42&calendarID=7")
        >>> event.type.value, event.id, event.calendar_id
        ('appointment.scheduled', 42, 7)
    """
    payload = parse_form(text)

    action = parse_action(payload.get("action"))
    event_id = parse_required_numeric(payload.get("id"), "id")
    calendar_id = parse_optional_numeric(payload.get("calendarID"), "calendarID")
    appointment_type_id = parse_optional_numeric(
        payload.get("appointmentTypeID"), "appointmentTypeID"
    )

    return StaticWebhookEvent(
        action=action,
        type=APPOINTMENT_EVENT_TYPES[action],
        id=event_id,
        calendar_id=calendar_id,
        appointment_type_id=appointment_type_id,
        payload=payload,
        raw_body=text,
    )
