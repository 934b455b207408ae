"""Connection test used to validate credentials before they are stored."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Protocol

import asyncpg

from .config import ADMIN_DATABASE, PROBE_TIMEOUT, Profile
from .models import ProbeResult

LOG = logging.getLogger(__name__)


class Prober(Protocol):
    """Interface implemented by connection probers."""

    async def test(self, profile: Profile, password: str) -> ProbeResult: ...


def connect_kwargs(profile: Profile, password: str, database: str, timeout: float) -> dict[str, object]:
    """Keyword arguments for ``asyncpg.connect`` built from a profile."""

    return {
        "host": profile.host,
        "port": profile.port,
        "user": profile.user,
        "password": password,
        "database": database,
        "timeout": timeout,
    }


class ConnectionProber:
    """Makes one bounded connection attempt against the administrative database."""

    def __init__(self, *, admin_database: str = ADMIN_DATABASE, timeout: float = PROBE_TIMEOUT) -> None:
        self._admin_database = admin_database
        self._timeout = timeout

    async def test(self, profile: Profile, password: str) -> ProbeResult:
        started = time.perf_counter()
        try:
            conn = await asyncio.wait_for(
                asyncpg.connect(**connect_kwargs(profile, password, self._admin_database, self._timeout)),
                timeout=self._timeout,
            )
        except TimeoutError:
            return self._failed(profile, f"Connection timed out after {self._timeout:g}s", started)
        except Exception as exc:
            return self._failed(profile, _describe(exc), started)
        try:
            await conn.close()
        except Exception:  # pragma: no cover - best effort cleanup
            LOG.debug("Probe connection did not close cleanly", extra={"host": profile.host})
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        LOG.info("Connection test succeeded", extra={"host": profile.host, "elapsed_ms": elapsed_ms})
        return ProbeResult(success=True, elapsed_ms=elapsed_ms)

    def _failed(self, profile: Profile, detail: str, started: float) -> ProbeResult:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        LOG.info("Connection test failed", extra={"host": profile.host, "error": detail})
        return ProbeResult(success=False, error_detail=detail, elapsed_ms=elapsed_ms)


def _describe(exc: BaseException) -> str:
    message = str(exc).strip()
    return message or type(exc).__name__


__all__ = ["ConnectionProber", "Prober", "connect_kwargs"]
