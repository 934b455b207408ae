"""Profile configuration: constants, the profile schema and its TOML store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import tomllib

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import NotConfiguredError, StoreCorruptionError, StoreError

LOG = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".config" / "db-cli" / "config.toml"
CONFIG_ENV_VAR = "DB_CLI_CONFIG"

SERVICE_NAME = "db-cli"
ACCOUNT_NAME = "database"

ADMIN_DATABASE = "postgres"
DEFAULT_PORT = 5432
DEFAULT_USER = "root"
PROBE_TIMEOUT = 10.0

PROFILE_FIELDS = ("host", "port", "user")


class Profile(BaseModel):
    """Non-secret connection fields stored in config.toml.

    Values are checked strictly: a port stored as ``"5432"`` is rejected
    instead of being coerced.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    host: str = Field(min_length=1, description="Server hostname or address.")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Server TCP port.")
    user: str = Field(default=DEFAULT_USER, min_length=1, description="Login role.")

    @field_validator("host", "user", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


def config_path() -> Path:
    """Location of the profile file, honouring the ``DB_CLI_CONFIG`` override."""

    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE


class ProfileStore:
    """Schema-validated storage of the profile's non-secret fields."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or config_path()

    @property
    def path(self) -> Path:
        return self._path

    def has(self, field: str) -> bool:
        """Whether ``field`` is set to a non-empty value in the file."""

        value = self._read_raw().get(field)
        if isinstance(value, str):
            return bool(value.strip())
        return value is not None

    def read(self) -> Profile:
        """Load and validate the stored profile."""

        raw = self._read_raw()
        if not raw.get("host"):
            raise NotConfiguredError(
                'No configuration found. Use "db-cli config" to set up the database connection.'
            )
        try:
            return Profile.model_validate(raw)
        except ValidationError as exc:
            LOG.warning("Stored profile failed validation", extra={"path": str(self._path)})
            raise StoreCorruptionError(
                f"The configuration file {self._path} is invalid ({exc.error_count()} error(s)). "
                'Use "db-cli reset" and configure again.'
            ) from exc

    def write(self, profile: Profile) -> None:
        """Replace the file with ``profile`` in a single rename."""

        lines = [
            f"host = {_toml_string(profile.host)}",
            f"port = {profile.port}",
            f"user = {_toml_string(profile.user)}",
        ]
        staging = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            staging.write_text("\n".join(lines) + "\n", encoding="utf-8")
            staging.replace(self._path)
        except OSError as exc:
            raise StoreError(f"Failed to write {self._path}: {exc.strerror or exc}") from exc
        LOG.debug("Profile written", extra={"path": str(self._path)})

    def clear(self) -> None:
        """Remove every stored field."""

        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            raise StoreError(f"Failed to remove {self._path}: {exc.strerror or exc}") from exc
        LOG.debug("Profile cleared", extra={"path": str(self._path)})

    def _read_raw(self) -> dict[str, object]:
        try:
            with self._path.open("rb") as handle:
                raw = tomllib.load(handle)
        except FileNotFoundError:
            return {}
        except (tomllib.TOMLDecodeError, OSError) as exc:
            LOG.warning(
                "Ignoring unreadable configuration file",
                extra={"path": str(self._path), "error": str(exc)},
            )
            return {}
        return {key: raw[key] for key in PROFILE_FIELDS if key in raw}


def _toml_string(value: str) -> str:
    # JSON string escapes are a subset of TOML basic-string escapes.
    return json.dumps(value, ensure_ascii=False)


__all__ = [
    "ACCOUNT_NAME",
    "ADMIN_DATABASE",
    "CONFIG_ENV_VAR",
    "CONFIG_FILE",
    "DEFAULT_PORT",
    "DEFAULT_USER",
    "PROBE_TIMEOUT",
    "Profile",
    "ProfileStore",
    "SERVICE_NAME",
    "config_path",
]
