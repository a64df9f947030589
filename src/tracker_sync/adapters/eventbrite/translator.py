"""Translate Eventbrite payloads into registration port records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tracker_sync.domain.ports.registration import CustomAnswer, ExternalAttendee, ExternalEvent

if TYPE_CHECKING:
    from .schema import AttendeePayload, EventPayload


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def translate_event(payload: EventPayload) -> ExternalEvent:
    return ExternalEvent(
        external_id=payload.id,
        name=_text(payload.name.text if payload.name else None) or "",
        start=payload.start.utc if payload.start else None,
        series_id=payload.series_id,
        description=_text(payload.description.text if payload.description else None),
        url=payload.url,
    )


def translate_attendee(payload: AttendeePayload) -> ExternalAttendee:
    profile = payload.profile
    name = _text(profile.name)
    if name is None:
        parts = [part for part in (_text(profile.first_name), _text(profile.last_name)) if part]
        name = " ".join(parts) or None
    return ExternalAttendee(
        name=name,
        ticket_type=_text(payload.ticket_class_name),
        registered_at=payload.created,
        email=_text(profile.email),
        answers=tuple(
            CustomAnswer(
                question_id=answer.question_id,
                value=_text(answer.answer),
                question=answer.question,
            )
            for answer in payload.answers
        ),
    )
