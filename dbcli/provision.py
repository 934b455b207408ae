"""Database creation against the stored profile."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Protocol

import asyncpg
from sqlglot import exp

from .config import ADMIN_DATABASE, PROBE_TIMEOUT, Profile
from .errors import EngineError, InvalidIdentifierError, ProfileValidationError
from .probe import connect_kwargs

LOG = logging.getLogger(__name__)

DATABASE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
MAX_IDENTIFIER_BYTES = 63


class Provisioner(Protocol):
    """Interface implemented by database provisioners."""

    async def create_database(self, profile: Profile, password: str, name: str) -> None: ...


def validate_database_name(name: str) -> str:
    """Return ``name`` stripped, or raise if it is not a safe identifier."""

    candidate = name.strip()
    if not candidate:
        raise ProfileValidationError("Database name is required.")
    if not DATABASE_NAME_PATTERN.fullmatch(candidate):
        raise InvalidIdentifierError(
            f"Invalid database name {candidate!r}: use letters, digits and underscores, "
            "starting with a letter or underscore."
        )
    if len(candidate.encode("utf-8")) > MAX_IDENTIFIER_BYTES:
        raise InvalidIdentifierError(
            f"Invalid database name {candidate!r}: longer than {MAX_IDENTIFIER_BYTES} bytes."
        )
    return candidate


def create_database_sql(name: str) -> str:
    """``CREATE DATABASE`` statement with ``name`` as a quoted identifier."""

    identifier = exp.to_identifier(validate_database_name(name), quoted=True)
    return f"CREATE DATABASE {identifier.sql(dialect='postgres')}"


class AsyncpgProvisioner:
    """Creates databases through a short-lived asyncpg connection."""

    def __init__(self, *, admin_database: str = ADMIN_DATABASE, timeout: float = PROBE_TIMEOUT) -> None:
        self._admin_database = admin_database
        self._timeout = timeout

    async def create_database(self, profile: Profile, password: str, name: str) -> None:
        statement = create_database_sql(name)
        try:
            conn = await asyncio.wait_for(
                asyncpg.connect(**connect_kwargs(profile, password, self._admin_database, self._timeout)),
                timeout=self._timeout,
            )
        except TimeoutError as exc:
            raise EngineError(f"Connection timed out after {self._timeout:g}s") from exc
        except Exception as exc:
            raise EngineError(f"Failed to connect to {profile.host}: {exc}") from exc
        try:
            await conn.execute(statement)
        except Exception as exc:
            LOG.info("Database creation failed", extra={"database": name, "error": str(exc)})
            raise EngineError(f"Failed to create database: {exc}") from exc
        finally:
            try:
                await conn.close()
            except Exception:
                LOG.debug("Provision connection did not close cleanly", extra={"host": profile.host})
        LOG.info("Database created", extra={"database": name, "host": profile.host})


__all__ = [
    "AsyncpgProvisioner",
    "DATABASE_NAME_PATTERN",
    "Provisioner",
    "create_database_sql",
    "validate_database_name",
]
