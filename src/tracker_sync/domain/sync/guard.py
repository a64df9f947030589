"""Fail-fast exclusion between writing sync runs."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from tracker_sync.domain.errors import SyncInProgressError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

log = getLogger(__name__)


@dataclass(slots=True)
class RunGuard:
    """Admits one writing run at a time across every service sharing it.

    The lock is only acquired after :meth:`asyncio.Lock.locked` reported it free,
    so a second run never waits for the first one.
    """

    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    active: str | None = None

    @property
    def running(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def hold(self, operation: str) -> AsyncIterator[None]:
        if self._lock.locked():
            raise SyncInProgressError(
                f"Cannot start {operation}: {self.active or 'a sync run'} is already active"
            )
        async with self._lock:
            self.active = operation
            log.info("Starting %s", operation)
            try:
                yield
            finally:
                self.active = None
