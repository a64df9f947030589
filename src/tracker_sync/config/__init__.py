"""Application configuration helpers."""

from __future__ import annotations

from .env import env_choice, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .eventbrite import EventbriteConfig, get_eventbrite_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .sharepoint import ListIds, SharePointConfig, get_field_layout_name, get_sharepoint_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_record_store_name,
    get_storage_config,
)
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "EventbriteConfig",
    "ListIds",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SharePointConfig",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "env_choice",
    "get_database_config",
    "get_eventbrite_config",
    "get_field_layout_name",
    "get_record_store_name",
    "get_sharepoint_config",
    "get_storage_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_vars",
]
