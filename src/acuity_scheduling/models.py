"""
Data models for Acuity webhooks and REST requests.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class AppointmentAction(str, Enum):
    """Appointment lifecycle actions delivered by static webhooks."""

    SCHEDULED = "scheduled"
    RESCHEDULED = "rescheduled"
    CANCELED = "canceled"
    CHANGED = "changed"


class WebhookEventType(str, Enum):
    """
    Fully-qualified webhook event tags.

    Appointment tags are what static webhooks decode to; ``order.completed``
    is only used when managing subscriptions through the REST API.
    """

    APPOINTMENT_SCHEDULED = "appointment.scheduled"
    APPOINTMENT_RESCHEDULED = "appointment.rescheduled"
    APPOINTMENT_CANCELED = "appointment.canceled"
    APPOINTMENT_CHANGED = "appointment.changed"
    ORDER_COMPLETED = "order.completed"


APPOINTMENT_EVENT_TYPES: dict[AppointmentAction, WebhookEventType] = {
    AppointmentAction.SCHEDULED: WebhookEventType.APPOINTMENT_SCHEDULED,
    AppointmentAction.RESCHEDULED: WebhookEventType.APPOINTMENT_RESCHEDULED,
    AppointmentAction.CANCELED: WebhookEventType.APPOINTMENT_CANCELED,
    AppointmentAction.CHANGED: WebhookEventType.APPOINTMENT_CHANGED,
}


@dataclass(frozen=True)
class StaticWebhookEvent:
    """
    A verified and decoded static webhook notification.

    Attributes:
        action: Appointment action that triggered the webhook
        type: Fully-qualified event tag, e.g. ``appointment.canceled``
        id: Appointment ID
        calendar_id: Calendar the appointment belongs to, if sent
        appointment_type_id: Appointment type, if sent
        payload: Every decoded form field (last value wins for duplicates)
        raw_body: Body text the event was decoded from
        scope: Resource scope of the event, always ``appointment``
    """
    action: AppointmentAction
    type: WebhookEventType
    id: int
    calendar_id: int | None = None
    appointment_type_id: int | None = None
    payload: dict[str, str] = field(default_factory=dict)
    raw_body: str = ""
    scope: str = "appointment"


@dataclass
class AppointmentQueryOptions:
    """
    Query flags accepted by appointment create/cancel/reschedule.

    Attributes:
        no_email: Suppress Acuity's client notification emails
        admin: Act as an admin (skips availability and booking rules)
    """
    no_email: bool | None = None
    admin: bool | None = None

    def to_query(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in (("noEmail", self.no_email), ("admin", self.admin))
            if value is not None
        }


@dataclass
class AppointmentRequestDefaults:
    """Per-operation query defaults applied by the appointments resource."""
    create: AppointmentQueryOptions | None = None
    cancel: AppointmentQueryOptions | None = None
    reschedule: AppointmentQueryOptions | None = None


def merge_query_options(
    defaults: AppointmentQueryOptions | None,
    overrides: AppointmentQueryOptions | None,
) -> dict[str, Any] | None:
    """Merge default and per-call flags; per-call values win when set."""
    if defaults is None and overrides is None:
        return None

    merged: dict[str, Any] = {}
    if defaults is not None:
        merged.update(defaults.to_query())
    if overrides is not None:
        merged.update(overrides.to_query())
    return merged


def event_to_dict(event: StaticWebhookEvent) -> dict[str, Any]:
    """JSON-friendly representation of an event (enum members as values)."""
    data = asdict(event)
    data["action"] = event.action.value
    data["type"] = event.type.value
    return data
