from __future__ import annotations

import asyncio

from tests.helpers.records import FakeListStore, add_profile, make_repository
from tracker_sync.domain.model import Collection
from tracker_sync.domain.sync import IdentityResolver, normalize_match_key


def test_normalize_match_key_trims_and_lowercases() -> None:
    assert normalize_match_key("  Jane DOE ") == "jane doe"


def test_name_variants_resolve_to_one_profile() -> None:
    store = FakeListStore()
    resolver = IdentityResolver(make_repository(store))

    async def resolve_all() -> list[int]:
        return [
            (await resolver.resolve(name)).profile_id
            for name in ("Jane Doe", "jane doe", "JANE DOE")
        ]

    ids = asyncio.run(resolve_all())

    assert len(set(ids)) == 1
    profiles = store.values(Collection.PROFILES)
    assert len(profiles) == 1
    assert profiles[0]["Title"] == "Jane Doe"
    assert profiles[0]["MatchName"] == "jane doe"


def test_match_key_takes_precedence_over_display_name() -> None:
    store = FakeListStore()
    renamed = add_profile(store, "Janet (Jane) Doe", match_name="jane doe")
    add_profile(store, "Jane Doe")
    resolver = IdentityResolver(make_repository(store))

    resolution = asyncio.run(resolver.resolve("Jane Doe"))

    assert resolution.profile_id == renamed
    assert not resolution.created


def test_falls_back_to_display_name_for_profiles_without_match_key() -> None:
    store = FakeListStore()
    legacy = add_profile(store, "Bob Jones")
    resolver = IdentityResolver(make_repository(store))

    resolution = asyncio.run(resolver.resolve("BOB JONES"))

    assert resolution.profile_id == legacy
    assert store.writes(Collection.PROFILES) == []


def test_new_profile_keeps_email_but_does_not_match_on_it() -> None:
    store = FakeListStore()
    add_profile(store, "Carol King")
    resolver = IdentityResolver(make_repository(store))

    resolution = asyncio.run(resolver.resolve("Carole King", email="carol@example.org"))

    assert resolution.created
    created = store.items[Collection.PROFILES][resolution.profile_id]
    assert created["Email"] == "carol@example.org"


def test_lagging_listing_does_not_cause_second_create() -> None:
    store = FakeListStore(stale_lists=frozenset({Collection.PROFILES}))
    resolver = IdentityResolver(make_repository(store))

    async def resolve_twice() -> tuple[int, int]:
        first = await resolver.resolve("Dana Scully")
        second = await resolver.resolve("dana scully")
        return first.profile_id, second.profile_id

    first, second = asyncio.run(resolve_twice())

    assert first == second
    assert store.writes(Collection.PROFILES) == ["create"]
