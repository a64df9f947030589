"""Public interface for the SharePoint adapter."""

from __future__ import annotations

from .client import GraphListStore, transform_list_item

__all__ = ["GraphListStore", "transform_list_item"]
