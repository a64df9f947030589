"""Mapping between raw list items and domain entities."""

from __future__ import annotations

from .fields import (
    CURRENT_LAYOUT,
    FIELD_LAYOUTS,
    LEGACY_LAYOUT,
    FieldLayout,
    InvalidRecordError,
    get_field_layout,
)
from .repository import ListRecordRepository

__all__ = [
    "CURRENT_LAYOUT",
    "FIELD_LAYOUTS",
    "LEGACY_LAYOUT",
    "FieldLayout",
    "InvalidRecordError",
    "ListRecordRepository",
    "get_field_layout",
]
