"""Exception hierarchy shared by the engine and its adapters."""

from __future__ import annotations


class RegistrationSourceError(RuntimeError):
    """The registration platform could not be read (network, timeout, bad payload)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RegistrationAuthError(RegistrationSourceError):
    """The registration platform rejected our credentials."""


class RecordStoreError(RuntimeError):
    """The record store could not be read or written."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RecordStoreAuthError(RecordStoreError):
    """The record store rejected our credentials."""


class SyncError(RuntimeError):
    """Base class for reconciliation engine errors."""


class SyncInProgressError(SyncError):
    """Raised when a run is requested while another one is active."""


class SessionNotEligibleError(SyncError):
    """Raised when a session cannot be refreshed from the registration platform."""
