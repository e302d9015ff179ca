"""Tests for AcuityClient."""

import base64
import json

import httpx
import pytest
import respx

from acuity_scheduling import (
    AcuityAuthError,
    AcuityClient,
    AcuityError,
    AcuityNetworkError,
    AcuityNotFoundError,
    AcuityRateLimitError,
    AcuityServerError,
    AcuityTimeoutError,
    AcuityValidationError,
    AppointmentErrorCode,
    AppointmentQueryOptions,
    AppointmentRequestDefaults,
    AsyncAcuityClient,
    CancelAppointmentErrorCode,
    ClientSettings,
    RescheduleAppointmentErrorCode,
)
from acuity_scheduling.client import build_query, normalize_query_value

BASE_URL = "https://acuity.test/api/v1"


@pytest.fixture
def mock_api():
    """Create a respx mock for the Acuity API."""
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def client():
    with AcuityClient(user_id=123, api_key="key", base_url=BASE_URL) as acuity:
        yield acuity


class TestQueryNormalization:
    """Tests for query value normalization."""

    def test_bool(self):
        assert normalize_query_value(True) == "true"
        assert normalize_query_value(False) == "false"

    def test_list(self):
        assert normalize_query_value([1, 2, 3]) == "1,2,3"

    def test_none_dropped(self):
        assert build_query({"a": None, "b": 1, "c": True}) == {"b": "1", "c": "true"}

    def test_empty(self):
        assert build_query(None) == {}


class TestAcuityClient:
    """Tests for AcuityClient requests and error mapping."""

    def test_default_base_url(self):
        acuity = AcuityClient(user_id=1, api_key="key")
        assert acuity.base_url == "https://acuityscheduling.com/api/v1"
        acuity.close()

    def test_basic_auth(self, mock_api, client):
        """Requests carry HTTP Basic credentials."""
        route = mock_api.get("/calendars").respond(json=[{"id": 1, "name": "Main"}])

        calendars = client.calendars.list()

        assert calendars == [{"id": 1, "name": "Main"}]
        expected = base64.b64encode(b"123:key").decode()
        assert route.calls.last.request.headers["Authorization"] == f"Basic {expected}"

    def test_list_appointments_query(self, mock_api, client):
        """Query params are normalized and unset values dropped."""
        route = mock_api.get("/appointments").respond(json=[])

        client.appointments.list(calendarID=7, canceled=True, max=None)

        params = route.calls.last.request.url.params
        assert params["calendarID"] == "7"
        assert params["canceled"] == "true"
        assert "max" not in params

    def test_create_appointment_merges_defaults(self, mock_api):
        """Default flags merge with per-call overrides."""
        route = mock_api.post("/appointments").respond(json={"id": 42})
        defaults = AppointmentRequestDefaults(
            create=AppointmentQueryOptions(no_email=True, admin=False),
        )

        with AcuityClient(1, "key", base_url=BASE_URL, appointment_defaults=defaults) as acuity:
            result = acuity.appointments.create(
                {"datetime": "2024-01-01T10:00:00", "appointmentTypeID": 3},
                options=AppointmentQueryOptions(admin=True),
            )

        assert result == {"id": 42}
        request = route.calls.last.request
        assert request.url.params["noEmail"] == "true"
        assert request.url.params["admin"] == "true"
        assert json.loads(request.content)["appointmentTypeID"] == 3

    def test_cancel_appointment(self, mock_api, client):
        route = mock_api.put("/appointments/9/cancel").respond(json={"id": 9, "canceled": True})

        result = client.appointments.cancel(9, {"cancelNote": "sick"})

        assert result["canceled"] is True
        assert json.loads(route.calls.last.request.content) == {"cancelNote": "sick"}
        assert "noEmail" not in route.calls.last.request.url.params

    def test_reschedule_appointment(self, mock_api, client):
        route = mock_api.put("/appointments/9/reschedule").respond(json={"id": 9})

        client.appointments.reschedule(9, {"datetime": "2024-02-01T09:00:00"})

        assert route.called

    def test_availability_times(self, mock_api, client):
        route = mock_api.get("/availability/times").respond(json=[{"time": "2024-01-01T09:00"}])

        client.availability.times("2024-01-01", appointment_type_id=3)

        params = route.calls.last.request.url.params
        assert params["date"] == "2024-01-01"
        assert params["appointmentTypeID"] == "3"
        assert "calendarID" not in params

    def test_webhook_subscription(self, mock_api, client):
        route = mock_api.post("/webhooks").respond(json={"id": 5})

        client.webhooks.create("appointment.scheduled", "https://example.com/hook")

        assert json.loads(route.calls.last.request.content) == {
            "event": "appointment.scheduled",
            "target": "https://example.com/hook",
        }

    def test_webhook_subscription_unknown_event(self, client):
        with pytest.raises(ValueError):
            client.webhooks.create("appointment.exploded", "https://example.com/hook")

    def test_webhook_delete(self, mock_api, client):
        route = mock_api.delete("/webhooks/5").respond(status_code=204)

        assert client.webhooks.delete(5) is None
        assert route.called

    @pytest.mark.parametrize(
        "status,error_cls,code",
        [
            (400, AcuityValidationError, "bad_request"),
            (401, AcuityAuthError, "unauthorized"),
            (404, AcuityNotFoundError, "not_found"),
            (429, AcuityRateLimitError, "too_many_requests"),
            (503, AcuityServerError, "server_error"),
        ],
    )
    def test_status_mapping(self, mock_api, client, status, error_cls, code):
        """Error statuses map to typed errors."""
        mock_api.get("/calendars").respond(status_code=status, json={})

        with pytest.raises(error_cls) as exc_info:
            client.calendars.list()

        assert exc_info.value.status == status
        assert exc_info.value.code == code

    def test_error_body_code_and_message(self, mock_api, client):
        """Acuity's error code and message are preserved."""
        mock_api.post("/appointments").respond(
            status_code=400,
            json={"status_code": 400, "error": "invalid_email", "message": "Bad email"},
        )

        with pytest.raises(AcuityValidationError) as exc_info:
            client.appointments.create({"email": "nope"})

        assert exc_info.value.code == "invalid_email"
        assert exc_info.value.message == "Bad email"

    def test_endpoint_error_codes(self, mock_api, client):
        """Endpoint-specific codes compare equal to their enum members."""
        mock_api.post("/appointments").respond(
            status_code=400,
            json={"status_code": 400, "error": "not_available", "message": "Taken"},
        )
        mock_api.put("/appointments/9/cancel").respond(
            status_code=400,
            json={"error": "cancel_too_close"},
        )
        mock_api.put("/appointments/9/reschedule").respond(
            status_code=400,
            json={"error": "reschedule_series"},
        )

        with pytest.raises(AcuityValidationError) as created:
            client.appointments.create({"datetime": "2024-01-01T10:00:00"})
        with pytest.raises(AcuityValidationError) as canceled:
            client.appointments.cancel(9)
        with pytest.raises(AcuityValidationError) as rescheduled:
            client.appointments.reschedule(9, {"datetime": "2024-02-01T09:00:00"})

        assert created.value.code == AppointmentErrorCode.NOT_AVAILABLE
        assert canceled.value.code == CancelAppointmentErrorCode.CANCEL_TOO_CLOSE
        assert rescheduled.value.code == RescheduleAppointmentErrorCode.RESCHEDULE_SERIES

    def test_error_code_enums(self):
        assert AppointmentErrorCode("expired_certificate") is AppointmentErrorCode.EXPIRED_CERTIFICATE
        assert CancelAppointmentErrorCode.CANCEL_NOT_ALLOWED.value == "cancel_not_allowed"
        assert RescheduleAppointmentErrorCode.INVALID_TIMEZONE == "invalid_timezone"

    def test_text_error_body(self, mock_api, client):
        """Non-JSON bodies are wrapped as a message."""
        mock_api.get("/calendars").respond(status_code=500, text="Oops")

        with pytest.raises(AcuityServerError) as exc_info:
            client.calendars.list()

        assert exc_info.value.payload == {"message": "Oops"}
        assert exc_info.value.message == "Oops"

    def test_default_message(self, mock_api, client):
        mock_api.get("/calendars").respond(status_code=404, json={})

        with pytest.raises(AcuityNotFoundError, match="requested resource was not found"):
            client.calendars.list()

    def test_network_error(self, mock_api, client):
        mock_api.get("/calendars").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(AcuityNetworkError) as exc_info:
            client.calendars.list()

        assert exc_info.value.status == 0
        assert exc_info.value.code == "network_error"

    def test_timeout(self, mock_api, client):
        mock_api.get("/calendars").mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(AcuityTimeoutError) as exc_info:
            client.calendars.list()

        assert isinstance(exc_info.value, AcuityError)
        assert exc_info.value.code == "timeout"


class TestFromSettings:
    """Tests for AcuityClient.from_settings."""

    def test_from_settings(self):
        settings = ClientSettings(user_id="1", api_key="key", base_url=BASE_URL, timeout_s=5)

        with AcuityClient.from_settings(settings) as acuity:
            assert acuity.base_url == BASE_URL
            assert acuity.timeout_s == 5

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("ACUITY_USER_ID", raising=False)
        monkeypatch.delenv("ACUITY_API_KEY", raising=False)

        with pytest.raises(ValueError, match="ACUITY_USER_ID"):
            AcuityClient.from_settings(ClientSettings(_env_file=None))

    def test_keyword_overrides(self):
        """Explicit base_url and timeout_s win over the settings."""
        settings = ClientSettings(user_id="1", api_key="key", timeout_s=5)

        with AcuityClient.from_settings(settings, base_url=BASE_URL, timeout_s=2.5) as acuity:
            assert acuity.base_url == BASE_URL
            assert acuity.timeout_s == 2.5

    def test_keyword_overrides_credentials(self, mock_api):
        settings = ClientSettings(user_id="1", api_key="key", base_url=BASE_URL)
        route = mock_api.get("/calendars").respond(json=[])

        with AcuityClient.from_settings(settings, api_key="other") as acuity:
            acuity.calendars.list()

        expected = base64.b64encode(b"1:other").decode()
        assert route.calls.last.request.headers["Authorization"] == f"Basic {expected}"

    @pytest.mark.asyncio
    async def test_async_from_settings(self):
        settings = ClientSettings(user_id="1", api_key="key")

        async with AsyncAcuityClient.from_settings(settings, base_url=BASE_URL) as acuity:
            assert acuity.base_url == BASE_URL
            assert acuity.timeout_s == 30.0


class TestAsyncAcuityClient:
    """Tests for AsyncAcuityClient."""

    @pytest.mark.asyncio
    async def test_basic_auth(self, mock_api):
        route = mock_api.get("/calendars").respond(json=[{"id": 1, "name": "Main"}])

        async with AsyncAcuityClient(user_id=123, api_key="key", base_url=BASE_URL) as acuity:
            calendars = await acuity.calendars.list()

        assert calendars == [{"id": 1, "name": "Main"}]
        expected = base64.b64encode(b"123:key").decode()
        assert route.calls.last.request.headers["Authorization"] == f"Basic {expected}"

    @pytest.mark.asyncio
    async def test_create_appointment_merges_defaults(self, mock_api):
        route = mock_api.post("/appointments").respond(json={"id": 42})
        defaults = AppointmentRequestDefaults(
            create=AppointmentQueryOptions(no_email=True),
        )

        async with AsyncAcuityClient(
            1, "key", base_url=BASE_URL, appointment_defaults=defaults
        ) as acuity:
            result = await acuity.appointments.create({"appointmentTypeID": 3})

        assert result == {"id": 42}
        assert route.calls.last.request.url.params["noEmail"] == "true"

    @pytest.mark.asyncio
    async def test_availability_dates(self, mock_api):
        route = mock_api.get("/availability/dates").respond(json=[{"date": "2024-01-02"}])

        async with AsyncAcuityClient(1, "key", base_url=BASE_URL) as acuity:
            dates = await acuity.availability.dates("2024-01", appointment_type_id=3)

        assert dates == [{"date": "2024-01-02"}]
        params = route.calls.last.request.url.params
        assert params["month"] == "2024-01"
        assert "timezone" not in params

    @pytest.mark.asyncio
    async def test_webhook_delete(self, mock_api):
        route = mock_api.delete("/webhooks/5").respond(status_code=204)

        async with AsyncAcuityClient(1, "key", base_url=BASE_URL) as acuity:
            assert await acuity.webhooks.delete(5) is None

        assert route.called

    @pytest.mark.asyncio
    async def test_error_mapping(self, mock_api):
        mock_api.put("/appointments/9/cancel").respond(
            status_code=400,
            json={"error": "cancel_not_allowed", "message": "Too late"},
        )

        async with AsyncAcuityClient(1, "key", base_url=BASE_URL) as acuity:
            with pytest.raises(AcuityValidationError) as exc_info:
                await acuity.appointments.cancel(9)

        assert exc_info.value.status == 400
        assert exc_info.value.code == CancelAppointmentErrorCode.CANCEL_NOT_ALLOWED
        assert exc_info.value.message == "Too late"

    @pytest.mark.asyncio
    async def test_timeout(self, mock_api):
        mock_api.get("/calendars").mock(side_effect=httpx.ReadTimeout("slow"))

        async with AsyncAcuityClient(1, "key", base_url=BASE_URL) as acuity:
            with pytest.raises(AcuityTimeoutError) as exc_info:
                await acuity.calendars.list()

        assert exc_info.value.status == 0
        assert exc_info.value.code == "timeout"

    @pytest.mark.asyncio
    async def test_network_error(self, mock_api):
        mock_api.get("/calendars").mock(side_effect=httpx.ConnectError("refused"))

        async with AsyncAcuityClient(1, "key", base_url=BASE_URL) as acuity:
            with pytest.raises(AcuityNetworkError):
                await acuity.calendars.list()
