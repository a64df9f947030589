"""Name-based identity matching between attendees and Profiles.

Email is deliberately not an identity key: walk-ins have none, group bookings
share one, and people change theirs. A case-insensitive name is the match key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from tracker_sync.domain.model import NewProfile

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tracker_sync.domain.model import Profile
    from tracker_sync.domain.ports.persistence import AttendanceRecords

log = getLogger(__name__)


def normalize_match_key(name: str) -> str:
    return name.strip().casefold()


@dataclass(slots=True, frozen=True)
class Resolution:
    profile_id: int
    created: bool


def find_profile(profiles: Iterable[Profile], key: str) -> Profile | None:
    """Match on the stored match key first, then on the display name."""

    candidates = list(profiles)
    for profile in candidates:
        if profile.match_key and normalize_match_key(profile.match_key) == key:
            return profile
    for profile in candidates:
        if normalize_match_key(profile.name) == key:
            return profile
    return None


@dataclass(slots=True)
class IdentityResolver:
    records: AttendanceRecords
    # profiles created by this resolver, in case the store listing lags behind
    _created: dict[str, int] = field(default_factory=dict[str, int], init=False)

    async def resolve(self, name: str, *, email: str | None = None) -> Resolution:
        key = normalize_match_key(name)
        if not key:
            raise ValueError("Cannot resolve an empty name")

        if key in self._created:
            return Resolution(profile_id=self._created[key], created=False)

        profile = find_profile(await self.records.list_profiles(), key)
        if profile is not None:
            return Resolution(profile_id=profile.id, created=False)

        profile_id = await self.records.create_profile(
            NewProfile(name=name, match_key=key, email=email)
        )
        self._created[key] = profile_id
        log.info("Created profile %s (ID: %s)", name, profile_id)
        return Resolution(profile_id=profile_id, created=True)


__all__ = ["IdentityResolver", "Resolution", "find_profile", "normalize_match_key"]
