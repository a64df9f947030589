"""Eventbrite configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

EVENTBRITE_BASE_URL = "https://www.eventbriteapi.com/v3/"
EVENTBRITE_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True)
class EventbriteConfig:
    """Holds Eventbrite API configuration values."""

    api_key: str
    organization_id: str
    resilience: ResilienceConfig


def default_eventbrite_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="eventbrite",
        base_url=EVENTBRITE_BASE_URL,
        timeout_seconds=EVENTBRITE_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=8, per_seconds=1.0),
    )


def get_eventbrite_config(*, resilience: ResilienceConfig | None = None) -> EventbriteConfig:
    values = require_env_vars(("EVENTBRITE_API_KEY", "EVENTBRITE_ORGANIZATION_ID"))
    return EventbriteConfig(
        api_key=values["EVENTBRITE_API_KEY"],
        organization_id=values["EVENTBRITE_ORGANIZATION_ID"],
        resilience=resilience or default_eventbrite_resilience(),
    )
