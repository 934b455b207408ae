"""Single-slot password storage backed by the platform keyring."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from .config import ACCOUNT_NAME, SERVICE_NAME
from .errors import StoreError

LOG = logging.getLogger(__name__)


@runtime_checkable
class CredentialStore(Protocol):
    """One password slot; there is never more than one stored credential."""

    def get(self) -> str | None:
        """Return the stored password, or ``None`` when the slot is empty."""

    def set(self, secret: str) -> None:
        """Store ``secret``, replacing any previous value."""

    def delete(self) -> None:
        """Empty the slot; a no-op when nothing is stored."""

    def exists(self) -> bool:
        """Whether the slot currently holds a password."""


class KeyringCredentialStore:
    """Credential slot stored under a fixed keyring service and account."""

    def __init__(self, service_name: str = SERVICE_NAME, account_name: str = ACCOUNT_NAME) -> None:
        self._service_name = service_name
        self._account_name = account_name

    def get(self) -> str | None:
        try:
            return keyring.get_password(self._service_name, self._account_name)
        except KeyringError as exc:
            raise StoreError(f"Could not read from the system keyring: {exc}") from exc

    def set(self, secret: str) -> None:
        try:
            keyring.set_password(self._service_name, self._account_name, secret)
        except KeyringError as exc:
            raise StoreError(f"Could not save the password to the system keyring: {exc}") from exc
        LOG.debug("Credential stored", extra={"service": self._service_name})

    def delete(self) -> None:
        try:
            keyring.delete_password(self._service_name, self._account_name)
        except PasswordDeleteError:
            LOG.debug("No credential to delete", extra={"service": self._service_name})
            return
        except KeyringError as exc:
            raise StoreError(f"Could not remove the password from the system keyring: {exc}") from exc
        LOG.debug("Credential deleted", extra={"service": self._service_name})

    def exists(self) -> bool:
        # keyring has no presence query; the value is dropped immediately.
        return self.get() is not None


__all__ = ["CredentialStore", "KeyringCredentialStore"]
