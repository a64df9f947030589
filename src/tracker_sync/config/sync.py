"""Reconciliation policy defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from tracker_sync.domain.model import ConsentType

if TYPE_CHECKING:
    from collections.abc import Mapping

# Eventbrite custom question ids on the volunteer registration form
DEFAULT_CONSENT_QUESTIONS: Final[Mapping[str, ConsentType]] = MappingProxyType(
    {
        "315115173": ConsentType.PRIVACY,
        "315115803": ConsentType.PHOTO,
    }
)
DEFAULT_PLACEHOLDER_NAMES: Final[frozenset[str]] = frozenset({"info requested"})
DEFAULT_CHILD_KEYWORD: Final[str] = "child"
DEFAULT_ACCEPTED_ANSWER: Final[str] = "accepted"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    consent_questions: Mapping[str, ConsentType] = field(
        default_factory=lambda: DEFAULT_CONSENT_QUESTIONS
    )
    placeholder_names: frozenset[str] = DEFAULT_PLACEHOLDER_NAMES
    child_keyword: str = DEFAULT_CHILD_KEYWORD
    accepted_answer: str = DEFAULT_ACCEPTED_ANSWER


def get_sync_config() -> SyncConfig:
    return SyncConfig()
