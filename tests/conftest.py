"""Shared fakes for the lifecycle, CLI and store tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from dbcli.config import Profile, ProfileStore
from dbcli.errors import StoreError
from dbcli.lifecycle import ProfileLifecycleController
from dbcli.models import ProbeResult, ProfileCandidate


class MemoryCredentialStore:
    """Credential slot kept in memory; records every call."""

    def __init__(self, secret: str | None = None, *, fail_set: bool = False) -> None:
        self.secret = secret
        self.fail_set = fail_set
        self.calls: list[str] = []

    def get(self) -> str | None:
        self.calls.append("get")
        return self.secret

    def set(self, secret: str) -> None:
        self.calls.append("set")
        if self.fail_set:
            raise StoreError("keyring is locked")
        self.secret = secret

    def delete(self) -> None:
        self.calls.append("delete")
        self.secret = None

    def exists(self) -> bool:
        self.calls.append("exists")
        return self.secret is not None


class StubProber:
    def __init__(self, result: ProbeResult | None = None) -> None:
        self.result = result or ProbeResult(success=True, elapsed_ms=3)
        self.calls: list[tuple[Profile, str]] = []

    async def test(self, profile: Profile, password: str) -> ProbeResult:
        self.calls.append((profile, password))
        return self.result


class RecordingProvisioner:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.created: list[tuple[str, str, str]] = []

    async def create_database(self, profile: Profile, password: str, name: str) -> None:
        if self.error is not None:
            raise self.error
        self.created.append((profile.host, password, name))


class ScriptedPrompter:
    """Prompter returning canned answers."""

    def __init__(
        self,
        *,
        candidate: ProfileCandidate | BaseException | None = None,
        confirm: bool = True,
        database: str = "analytics",
    ) -> None:
        self._candidate = candidate
        self._confirm = confirm
        self._database = database
        self.asked: list[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self._confirm

    def profile_candidate(self) -> ProfileCandidate:
        self.asked.append("profile")
        if isinstance(self._candidate, BaseException):
            raise self._candidate
        assert self._candidate is not None
        return self._candidate

    def database_name(self) -> str:
        self.asked.append("database")
        return self._database


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def profile_store(tmp_path: Path) -> ProfileStore:
    return ProfileStore(tmp_path / "db-cli" / "config.toml")


@pytest.fixture
def credentials() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def prober() -> StubProber:
    return StubProber()


@pytest.fixture
def provisioner() -> RecordingProvisioner:
    return RecordingProvisioner()


@pytest.fixture
def controller(
    profile_store: ProfileStore,
    credentials: MemoryCredentialStore,
    prober: StubProber,
    provisioner: RecordingProvisioner,
) -> ProfileLifecycleController:
    return ProfileLifecycleController(profile_store, credentials, prober, provisioner)


@pytest.fixture
def candidate() -> ProfileCandidate:
    return ProfileCandidate.build(host="db.local", port=5432, user="root", password="secret")


@pytest.fixture
def configured(profile_store: ProfileStore, credentials: MemoryCredentialStore) -> None:
    """Seed both stores as if a configure had already succeeded."""

    profile_store.write(Profile(host="db.local", port=5432, user="root"))
    credentials.secret = "secret"
    credentials.calls.clear()
