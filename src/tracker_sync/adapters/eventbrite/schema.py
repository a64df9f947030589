"""Pydantic models describing the Eventbrite v3 payloads we consume."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class EventbriteBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TextPayload(EventbriteBaseModel):
    text: str | None = None


class DateTimePayload(EventbriteBaseModel):
    utc: datetime | None = None
    timezone: str | None = None

    _normalize_utc = field_validator("utc", mode="before")(_blank_to_none)


class Pagination(EventbriteBaseModel):
    has_more_items: bool = False
    page_number: int | None = None
    continuation: str | None = None


class EventPayload(EventbriteBaseModel):
    id: str
    name: TextPayload | None = None
    description: TextPayload | None = None
    start: DateTimePayload | None = None
    series_id: str | None = None
    url: str | None = None

    _normalize_series = field_validator("series_id", mode="before")(_blank_to_none)


class EventsPage(EventbriteBaseModel):
    events: list[EventPayload] = Field(default_factory=list["EventPayload"])
    pagination: Pagination = Field(default_factory=Pagination)


class AttendeeProfile(EventbriteBaseModel):
    name: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class AnswerPayload(EventbriteBaseModel):
    question_id: str
    question: str | None = None
    answer: str | None = None

    @field_validator("question_id", mode="before")
    @classmethod
    def _coerce_question_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


class AttendeePayload(EventbriteBaseModel):
    id: str | None = None
    created: datetime | None = None
    profile: AttendeeProfile = Field(default_factory=AttendeeProfile)
    status: str | None = None
    cancelled: bool = False
    ticket_class_name: str | None = None
    answers: list[AnswerPayload] = Field(default_factory=list["AnswerPayload"])


class AttendeesPage(EventbriteBaseModel):
    attendees: list[AttendeePayload] = Field(default_factory=list["AttendeePayload"])
    pagination: Pagination = Field(default_factory=Pagination)


class TicketClassPayload(EventbriteBaseModel):
    name: str = ""


class TicketClassesPage(EventbriteBaseModel):
    ticket_classes: list[TicketClassPayload] = Field(default_factory=list["TicketClassPayload"])


class QuestionPayload(EventbriteBaseModel):
    respondent: str | None = None
    question: TextPayload = Field(default_factory=TextPayload)


class QuestionsPage(EventbriteBaseModel):
    questions: list[QuestionPayload] = Field(default_factory=list["QuestionPayload"])


class ErrorResponse(EventbriteBaseModel):
    error: str | None = None
    error_description: str | None = None
    status_code: int | None = None
