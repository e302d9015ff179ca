"""
REST API resources exposed on :class:`~acuity_scheduling.client.AcuityClient`
and :class:`~acuity_scheduling.client.AsyncAcuityClient`.

Each method returns whatever the owning client's ``request`` returns: the
decoded payload for the sync client, an awaitable of it for the async one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from .models import (
    AppointmentQueryOptions,
    AppointmentRequestDefaults,
    WebhookEventType,
    merge_query_options,
)

if TYPE_CHECKING:
    from .client import AcuityClient, AsyncAcuityClient

    Client = Union[AcuityClient, AsyncAcuityClient]


class AppointmentsResource:
    """``/appointments`` and ``/appointment-types`` endpoints."""

    def __init__(
        self,
        client: "Client",
        defaults: AppointmentRequestDefaults | None = None,
    ):
        self._client = client
        self.defaults = defaults or AppointmentRequestDefaults()

    def list(self, **params: Any) -> list[dict[str, Any]]:
        """
        List appointments.

        Keyword arguments are passed through as query parameters using
        Acuity's names, e.g. ``calendarID=1, minDate="2024-01-01", max=50``.
        """
        return self._client.request("GET", "/appointments", query=params)

    def types(self) -> list[dict[str, Any]]:
        return self._client.request("GET", "/appointment-types")

    def get(self, appointment_id: int, past_form_answers: bool | None = None) -> dict[str, Any]:
        return self._client.request(
            "GET",
            f"/appointments/{appointment_id}",
            query={"pastFormAnswers": past_form_answers},
        )

    def create(
        self,
        payload: dict[str, Any],
        options: AppointmentQueryOptions | None = None,
    ) -> dict[str, Any]:
        """Book an appointment. ``payload`` needs datetime, appointmentTypeID and client details."""
        return self._client.request(
            "POST",
            "/appointments",
            query=merge_query_options(self.defaults.create, options),
            body=payload,
        )

    def update(self, appointment_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        return self._client.request("PUT", f"/appointments/{appointment_id}", body=payload)

    def cancel(
        self,
        appointment_id: int,
        payload: dict[str, Any] | None = None,
        options: AppointmentQueryOptions | None = None,
    ) -> dict[str, Any]:
        return self._client.request(
            "PUT",
            f"/appointments/{appointment_id}/cancel",
            query=merge_query_options(self.defaults.cancel, options),
            body=payload,
        )

    def reschedule(
        self,
        appointment_id: int,
        payload: dict[str, Any],
        options: AppointmentQueryOptions | None = None,
    ) -> dict[str, Any]:
        return self._client.request(
            "PUT",
            f"/appointments/{appointment_id}/reschedule",
            query=merge_query_options(self.defaults.reschedule, options),
            body=payload,
        )


class AvailabilityResource:
    """``/availability`` endpoints."""

    def __init__(self, client: "Client"):
        self._client = client

    def dates(
        self,
        month: str,
        appointment_type_id: int,
        calendar_id: int | None = None,
        timezone: str | None = None,
    ) -> list[dict[str, Any]]:
        return self._client.request(
            "GET",
            "/availability/dates",
            query={
                "month": month,
                "appointmentTypeID": appointment_type_id,
                "calendarID": calendar_id,
                "timezone": timezone,
            },
        )

    def times(
        self,
        date: str,
        appointment_type_id: int,
        calendar_id: int | None = None,
        timezone: str | None = None,
    ) -> list[dict[str, Any]]:
        return self._client.request(
            "GET",
            "/availability/times",
            query={
                "date": date,
                "appointmentTypeID": appointment_type_id,
                "calendarID": calendar_id,
                "timezone": timezone,
            },
        )

    def check_times(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._client.request("POST", "/availability/check-times", body=payload)


class CalendarsResource:
    def __init__(self, client: "Client"):
        self._client = client

    def list(self) -> list[dict[str, Any]]:
        return self._client.request("GET", "/calendars")


class WebhooksResource:
    """Dynamic webhook subscriptions (``/webhooks``)."""

    def __init__(self, client: "Client"):
        self._client = client

    def list(self) -> list[dict[str, Any]]:
        return self._client.request("GET", "/webhooks")

    def create(self, event: WebhookEventType | str, target: str) -> dict[str, Any]:
        """
        Subscribe ``target`` to an event.

        Raises:
            ValueError: If event is not a known webhook event type
        """
        event_type = WebhookEventType(event)
        return self._client.request(
            "POST",
            "/webhooks",
            body={"event": event_type.value, "target": target},
        )

    def delete(self, subscription_id: int) -> None:
        # 204 No Content decodes to None
        return self._client.request("DELETE", f"/webhooks/{subscription_id}")
