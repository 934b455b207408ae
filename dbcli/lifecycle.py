"""Profile lifecycle: configure, view, add-database and reset transitions.

The controller is the only writer of the profile file and the credential
slot. Every transition starts by deriving the current :class:`ProfileState`
from the two stores:

* ``ABSENT``: neither store holds anything.
* ``COMPLETE``: both hold a value.
* ``INCOMPLETE``: exactly one holds a value. This is reported as corruption
  and only ``configure`` (after a successful probe) or ``reset`` leaves it.

Candidate credentials are probed before anything is written, and the two
stores are written profile-first with a rollback of the profile when the
credential cannot be saved.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .config import Profile, ProfileStore
from .credentials import CredentialStore
from .errors import (
    NotConfiguredError,
    ProbeFailureError,
    StoreCorruptionError,
    StoreError,
)
from .models import (
    ConfigureOutcome,
    ProfileCandidate,
    ProfileState,
    ResetOutcome,
    connection_string,
)
from .probe import Prober
from .provision import Provisioner, validate_database_name

LOG = logging.getLogger(__name__)

Confirm = Callable[[str], bool]
CandidateSource = Callable[[], ProfileCandidate]

OVERWRITE_PROMPT = "Existing configuration found. Do you want to overwrite it?"
RESET_PROMPT = "Are you sure you want to remove all saved configuration?"

NOT_CONFIGURED_MESSAGE = 'No configuration found. Use "db-cli config" to set up the database connection.'
MISSING_CREDENTIAL_MESSAGE = (
    "No password found in secure storage. "
    'Run "db-cli config" to store a new one or "db-cli reset" to start over.'
)
MISSING_PROFILE_MESSAGE = (
    "A password is stored but the connection settings are missing. "
    'Run "db-cli config" to store new ones or "db-cli reset" to start over.'
)


class ProfileLifecycleController:
    """Orchestrates every read-modify-write across the two stores."""

    def __init__(
        self,
        profile_store: ProfileStore,
        credential_store: CredentialStore,
        prober: Prober,
        provisioner: Provisioner,
    ) -> None:
        self._profiles = profile_store
        self._credentials = credential_store
        self._prober = prober
        self._provisioner = provisioner

    def state(self) -> ProfileState:
        """Current lifecycle state derived from both stores."""

        return ProfileState.from_presence(self._profiles.has("host"), self._credentials.exists())

    def configure(self, collect: CandidateSource, *, confirm: Confirm) -> ConfigureOutcome:
        """Probe a new candidate and persist it only if the connection succeeds.

        ``confirm`` and ``collect`` run outside any event loop so Ctrl-C at a
        prompt raises ``KeyboardInterrupt`` there; only the probe runs under
        ``asyncio.run``.
        """

        prior = self.state()
        if prior is ProfileState.COMPLETE and not confirm(OVERWRITE_PROMPT):
            LOG.info("Overwrite declined", extra={"state": prior.value})
            return ConfigureOutcome.UNCHANGED

        candidate = collect()
        result = asyncio.run(self._prober.test(candidate.profile, candidate.password))
        if not result.success:
            raise ProbeFailureError(result.error_detail or "unknown error")

        if prior is not ProfileState.ABSENT:
            self._clear_stores()
        self._commit(candidate)
        LOG.info("Configuration saved", extra={"host": candidate.profile.host, "previous": prior.value})
        return ConfigureOutcome.SAVED

    def view(self, reveal_credential: bool = False) -> str:
        """Connection string for the administrative database."""

        profile = self.require_complete()
        password = self._read_credential() if reveal_credential else None
        return connection_string(profile, password)

    async def add_database(self, name: str) -> str:
        """Create ``name`` on the configured server and return its connection string."""

        profile = self.require_complete()
        database = validate_database_name(name)
        password = self._read_credential()
        await self._provisioner.create_database(profile, password, database)
        return connection_string(profile, password, database)

    def reset(self, *, confirm: Confirm) -> ResetOutcome:
        """Remove the profile and credential together."""

        current = self.state()
        if current is ProfileState.ABSENT:
            return ResetOutcome.NOTHING_TO_RESET
        if not confirm(RESET_PROMPT):
            return ResetOutcome.CANCELLED
        self._clear_stores()
        LOG.info("Configuration removed", extra={"previous": current.value})
        return ResetOutcome.RESET

    def require_complete(self) -> Profile:
        """Stored profile, or raise when the configuration is absent or incomplete."""

        profile_present = self._profiles.has("host")
        credential_present = self._credentials.exists()
        current = ProfileState.from_presence(profile_present, credential_present)
        if current is ProfileState.ABSENT:
            raise NotConfiguredError(NOT_CONFIGURED_MESSAGE)
        if current is ProfileState.INCOMPLETE:
            LOG.info(
                "Incomplete configuration detected",
                extra={"profile": profile_present, "credential": credential_present},
            )
            raise StoreCorruptionError(
                MISSING_CREDENTIAL_MESSAGE if profile_present else MISSING_PROFILE_MESSAGE
            )
        return self._profiles.read()

    def _read_credential(self) -> str:
        password = self._credentials.get()
        if password is None:
            raise StoreCorruptionError(MISSING_CREDENTIAL_MESSAGE)
        return password

    def _commit(self, candidate: ProfileCandidate) -> None:
        self._profiles.write(candidate.profile)
        try:
            self._credentials.set(candidate.password)
        except Exception:
            LOG.warning("Credential write failed; rolling back profile")
            try:
                self._profiles.clear()
            except StoreError as exc:
                raise StoreCorruptionError(
                    "The password could not be saved and the connection settings could not be "
                    'removed. Run "db-cli reset" before configuring again.'
                ) from exc
            raise

    def _clear_stores(self) -> None:
        failures: list[StoreError] = []
        for clear in (self._profiles.clear, self._credentials.delete):
            try:
                clear()
            except StoreError as exc:
                failures.append(exc)
        if failures:
            raise failures[0]


__all__ = [
    "CandidateSource",
    "Confirm",
    "OVERWRITE_PROMPT",
    "ProfileLifecycleController",
    "RESET_PROMPT",
]
