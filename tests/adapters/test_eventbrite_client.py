from __future__ import annotations

import asyncio
from collections.abc import Callable  # noqa: TC003
from datetime import UTC, datetime

import httpx
import pytest

from tracker_sync.adapters.eventbrite import EventbriteClient
from tracker_sync.adapters.eventbrite.schema import AttendeePayload
from tracker_sync.adapters.eventbrite.translator import translate_attendee
from tracker_sync.adapters.http_resilience import ResilientClient
from tracker_sync.config.eventbrite import EventbriteConfig, default_eventbrite_resilience
from tracker_sync.config.http_resilience import ResilienceConfig  # noqa: TC001
from tracker_sync.domain.errors import RegistrationAuthError, RegistrationSourceError
from tracker_sync.domain.ports.registration import ExternalAttendee, ExternalEvent


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> EventbriteClient:
    config = EventbriteConfig(
        api_key="token-123",
        organization_id="ORG1",
        resilience=default_eventbrite_resilience(),
    )
    return EventbriteClient(config=config, client_factory=_make_client_factory(handler))


def _collect_events(client: EventbriteClient) -> list[ExternalEvent]:
    async def collect() -> list[ExternalEvent]:
        return [event async for event in client.iter_org_events()]

    return asyncio.run(collect())


def _collect_attendees(client: EventbriteClient, event_id: str) -> list[ExternalAttendee]:
    async def collect() -> list[ExternalAttendee]:
        return [attendee async for attendee in client.iter_attendees(event_id)]

    return asyncio.run(collect())


def test_org_events_follow_page_numbers() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        page = int(request.url.params["page"])
        events = {
            1: [
                {
                    "id": "E1",
                    "name": {"text": "Saturday Dig"},
                    "start": {"utc": "2025-06-07T09:00:00Z"},
                    "series_id": "S1",
                    "url": "https://www.eventbrite.co.uk/e/E1",
                }
            ],
            2: [{"id": "E2", "name": {"text": "Open Day"}, "start": {"utc": ""}}],
        }[page]
        return httpx.Response(
            200,
            json={
                "events": events,
                "pagination": {"has_more_items": page == 1, "page_number": page},
            },
        )

    events = _collect_events(_client(handler))

    assert [e.external_id for e in events] == ["E1", "E2"]
    assert events[0].series_id == "S1"
    assert events[0].start == datetime(2025, 6, 7, 9, tzinfo=UTC)
    assert events[1].start is None
    first = requests[0]
    assert first.url.path == "/v3/organizations/ORG1/events/"
    assert first.url.params["status"] == "live"
    assert first.url.params["page_size"] == "100"
    assert first.headers["Authorization"] == "Bearer token-123"


def test_attendees_follow_continuation_and_drop_cancelled() -> None:
    seen_params: list[dict[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_params.append(dict(request.url.params))
        if "continuation" not in request.url.params:
            return httpx.Response(
                200,
                json={
                    "attendees": [
                        {
                            "created": "2025-05-02T10:00:00Z",
                            "profile": {"name": "Alice Smith", "email": "alice@example.org"},
                            "ticket_class_name": "Adult",
                            "answers": [
                                {"question_id": 315115173, "answer": "accepted"},
                            ],
                        },
                        {"profile": {"name": "Gone Away"}, "cancelled": True},
                    ],
                    "pagination": {"has_more_items": True, "continuation": "abc"},
                },
            )
        return httpx.Response(
            200,
            json={
                "attendees": [
                    {"profile": {"first_name": "Kid", "last_name": "Smith"}, "ticket_class_name": "Child"}
                ],
                "pagination": {"has_more_items": False},
            },
        )

    attendees = _collect_attendees(_client(handler), "E1")

    assert [a.name for a in attendees] == ["Alice Smith", "Kid Smith"]
    assert attendees[0].answers[0].question_id == "315115173"
    assert attendees[0].registered_at == datetime(2025, 5, 2, 10, tzinfo=UTC)
    assert seen_params[0]["status"] == "attending"
    assert seen_params[0]["expand"] == "answers"
    assert seen_params[1]["continuation"] == "abc"
    assert "page" not in seen_params[1]


@pytest.mark.parametrize("status", [401, 403])
def test_auth_failures_map_to_auth_error(status: int) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status,
            json={"error": "INVALID_AUTH", "error_description": "The OAuth token you provided was invalid."},
        )

    with pytest.raises(RegistrationAuthError) as exc:
        _collect_events(_client(handler))

    assert exc.value.status_code == status


def test_server_errors_map_to_source_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "NOT_FOUND", "error_description": "gone"})

    with pytest.raises(RegistrationSourceError) as exc:
        _collect_attendees(_client(handler), "E404")

    assert not isinstance(exc.value, RegistrationAuthError)
    assert exc.value.status_code == 404


def test_timeouts_map_to_source_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(RegistrationSourceError, match="timed out"):
        _collect_attendees(_client(handler), "E1")


def test_malformed_payload_maps_to_source_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"events": "not-a-list"})

    with pytest.raises(RegistrationSourceError, match="Unexpected Eventbrite payload"):
        _collect_events(_client(handler))


def test_event_config_check() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/ticket_classes/"):
            return httpx.Response(
                200, json={"ticket_classes": [{"name": "Adult"}, {"name": "Child (5-15)"}]}
            )
        return httpx.Response(
            200,
            json={
                "questions": [
                    {"respondent": "attendee", "question": {"text": "Personal Data Consent"}},
                    {"respondent": "attendee", "question": {"text": "Photo and Video Consent"}},
                ]
            },
        )

    check = asyncio.run(_client(handler).get_event_config("E1"))

    assert check.has_child_ticket
    assert check.has_privacy_consent_question
    assert check.has_photo_consent_question
    assert check.consent_questions_per_attendee
    assert check.ok


def test_translate_attendee_blank_name_is_none() -> None:
    payload = AttendeePayload.model_validate({"profile": {"name": "  "}})

    assert translate_attendee(payload).name is None
