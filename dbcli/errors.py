"""Error types raised by the profile lifecycle and its stores."""

from __future__ import annotations


class DbCliError(RuntimeError):
    """Base class for failures reported to the user."""

    exit_code = 1
    title = "Error"


class NotConfiguredError(DbCliError):
    """Raised when an operation needs a stored profile and none exists."""

    exit_code = 3


class StoreCorruptionError(NotConfiguredError):
    """Raised when the profile and credential stores disagree or hold invalid data."""

    exit_code = 4
    title = "Corrupt configuration"


class ProfileValidationError(DbCliError):
    """Raised when a required field is empty or out of range."""

    exit_code = 5
    title = "Invalid input"


class ProbeFailureError(DbCliError):
    """Raised when the connection test rejects a candidate profile."""

    exit_code = 6
    title = "Connection failed"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class EngineError(DbCliError):
    """Raised when the database engine refuses a provisioning request."""

    exit_code = 7


class InvalidIdentifierError(EngineError):
    """Raised when a database name is not a safe identifier."""


class StoreError(DbCliError):
    """Raised when the credential store or config file cannot be accessed."""

    exit_code = 8
    title = "Storage error"


__all__ = [
    "DbCliError",
    "EngineError",
    "InvalidIdentifierError",
    "NotConfiguredError",
    "ProbeFailureError",
    "ProfileValidationError",
    "StoreCorruptionError",
    "StoreError",
]
