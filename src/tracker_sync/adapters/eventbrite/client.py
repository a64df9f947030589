"""HTTP client for the Eventbrite v3 API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from tracker_sync.adapters.http_resilience import ClientFactory, default_client_factory
from tracker_sync.config.eventbrite import EventbriteConfig, get_eventbrite_config
from tracker_sync.domain.errors import RegistrationAuthError, RegistrationSourceError
from tracker_sync.domain.ports.registration import EventConfigCheck, RegistrationSource

from .schema import (
    AttendeesPage,
    ErrorResponse,
    EventsPage,
    Pagination,
    QuestionsPage,
    TicketClassesPage,
)
from .translator import translate_attendee, translate_event

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tracker_sync.adapters.http_resilience import ResilientClient
    from tracker_sync.domain.ports.registration import ExternalAttendee, ExternalEvent

log = getLogger(__name__)

EVENTS_PAGE_SIZE = 100
ATTENDING_STATUS = "attending"
PRIVACY_CONSENT_QUESTION = "Personal Data Consent"
PHOTO_CONSENT_QUESTION = "Photo and Video Consent"


def _next_page_params(
    params: dict[str, str | int],
    pagination: Pagination,
) -> dict[str, str | int] | None:
    if not pagination.has_more_items:
        return None
    following = dict(params)
    if pagination.continuation:
        following.pop("page", None)
        following["continuation"] = pagination.continuation
    else:
        current = pagination.page_number or int(params.get("page", 1))
        following["page"] = current + 1
    return following


@dataclass(slots=True)
class EventbriteClient:
    config: EventbriteConfig = field(default_factory=get_eventbrite_config)
    client_factory: ClientFactory = field(default=default_client_factory)

    async def iter_org_events(self) -> AsyncIterator[ExternalEvent]:
        path = f"organizations/{self.config.organization_id}/events/"
        params: dict[str, str | int] | None = {
            "status": "live",
            "page_size": EVENTS_PAGE_SIZE,
            "page": 1,
        }
        async with self.client_factory(self.config.resilience) as client:
            while params is not None:
                page = await self._get_model(client, path, params, EventsPage)
                for payload in page.events:
                    yield translate_event(payload)
                params = _next_page_params(params, page.pagination)

    async def iter_attendees(self, external_event_id: str) -> AsyncIterator[ExternalAttendee]:
        path = f"events/{external_event_id}/attendees/"
        params: dict[str, str | int] | None = {
            "status": ATTENDING_STATUS,
            "expand": "answers",
            "page": 1,
        }
        async with self.client_factory(self.config.resilience) as client:
            while params is not None:
                page = await self._get_model(client, path, params, AttendeesPage)
                for payload in page.attendees:
                    if payload.cancelled:
                        continue
                    yield translate_attendee(payload)
                params = _next_page_params(params, page.pagination)

    async def get_event_config(self, external_event_id: str) -> EventConfigCheck:
        async with self.client_factory(self.config.resilience) as client:
            tickets = await self._get_model(
                client, f"events/{external_event_id}/ticket_classes/", {}, TicketClassesPage
            )
            questions = await self._get_model(
                client, f"events/{external_event_id}/questions/", {}, QuestionsPage
            )

        question_texts = {
            (question.question.text or "").strip() for question in questions.questions
        }
        ticket_names = [ticket.name.lower() for ticket in tickets.ticket_classes]
        return EventConfigCheck(
            external_event_id=external_event_id,
            has_child_ticket=any("child" in name for name in ticket_names),
            has_privacy_consent_question=PRIVACY_CONSENT_QUESTION in question_texts,
            has_photo_consent_question=PHOTO_CONSENT_QUESTION in question_texts,
            consent_questions_per_attendee=any(
                question.respondent == "attendee" for question in questions.questions
            ),
        )

    async def _get_model[TModel: BaseModel](
        self,
        client: ResilientClient,
        path: str,
        params: dict[str, str | int],
        model: type[TModel],
    ) -> TModel:
        payload = await self._perform_request(client, path, params)
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise RegistrationSourceError(f"Unexpected Eventbrite payload for {path}") from exc

    async def _perform_request(
        self,
        client: ResilientClient,
        path: str,
        params: dict[str, str | int],
    ) -> object:
        log.debug("Eventbrite GET %s %s", path, params)
        try:
            response = await client.get(
                path,
                params=params,
                headers={"Authorization": f"Bearer {self.config.api_key}"},
            )
        except httpx.TimeoutException as exc:
            raise RegistrationSourceError(f"Eventbrite request timed out: {path}") from exc
        except httpx.HTTPError as exc:
            raise RegistrationSourceError(f"Eventbrite request failed: {path}: {exc}") from exc

        if response.is_error:
            raise _error_from_response(path, response)

        try:
            return response.json()
        except ValueError as exc:
            raise RegistrationSourceError(f"Eventbrite returned invalid JSON for {path}") from exc


def _error_from_response(path: str, response: httpx.Response) -> RegistrationSourceError:
    detail = response.text
    try:
        error = ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        error = None
    if error is not None and (error.error or error.error_description):
        detail = f"{error.error}: {error.error_description}"

    message = f"Eventbrite API {response.status_code} for {path}: {detail}"
    log.error(message)
    if response.status_code in {401, 403}:
        return RegistrationAuthError(message, status_code=response.status_code)
    return RegistrationSourceError(message, status_code=response.status_code)


if TYPE_CHECKING:
    _source_check: RegistrationSource = EventbriteClient()
