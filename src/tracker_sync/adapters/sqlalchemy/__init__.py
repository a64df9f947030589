"""SQLAlchemy adapter package: a local list store."""

from __future__ import annotations

from .store import SqlAlchemyListStore, create_sqlite_engine
from .tables import LIST_TABLES, create_all_tables, metadata

__all__ = [
    "LIST_TABLES",
    "SqlAlchemyListStore",
    "create_all_tables",
    "create_sqlite_engine",
    "metadata",
]
