"""Shared value types passed between the lifecycle controller and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote

from pydantic import ValidationError

from .config import ADMIN_DATABASE, Profile
from .errors import ProfileValidationError

MASKED_PASSWORD = "********"


class ProfileState(str, Enum):
    """Presence of the profile relative to its credential."""

    ABSENT = "absent"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"

    @classmethod
    def from_presence(cls, profile_present: bool, credential_present: bool) -> ProfileState:
        if profile_present and credential_present:
            return cls.COMPLETE
        if profile_present or credential_present:
            return cls.INCOMPLETE
        return cls.ABSENT


class ConfigureOutcome(str, Enum):
    SAVED = "saved"
    UNCHANGED = "unchanged"


class ResetOutcome(str, Enum):
    RESET = "reset"
    CANCELLED = "cancelled"
    NOTHING_TO_RESET = "nothing_to_reset"


@dataclass(frozen=True, slots=True)
class ProfileCandidate:
    """Profile fields plus the password collected before a configure."""

    profile: Profile
    password: str

    @classmethod
    def build(cls, *, host: str, port: int, user: str, password: str) -> ProfileCandidate:
        """Validate raw prompt answers into a candidate."""

        try:
            profile = Profile(host=host, port=port, user=user)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "profile"
            if first["type"] == "string_too_short":
                raise ProfileValidationError(f"{field.capitalize()} is required.") from exc
            raise ProfileValidationError(f"Invalid {field}: {first['msg']}.") from exc
        return cls(profile=profile, password=password)

    def __repr__(self) -> str:
        return f"ProfileCandidate(profile={self.profile!r}, password='{MASKED_PASSWORD}')"


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of a single connection test. Never persisted."""

    success: bool
    error_detail: str | None = None
    elapsed_ms: int = 0


def connection_string(profile: Profile, password: str | None = None, database: str = ADMIN_DATABASE) -> str:
    """Render a ``postgresql://`` URL; the password is masked unless given."""

    secret = quote(password, safe="") if password is not None else MASKED_PASSWORD
    host = f"[{profile.host}]" if ":" in profile.host else profile.host
    return f"postgresql://{quote(profile.user, safe='')}:{secret}@{host}:{profile.port}/{database}"


__all__ = [
    "ConfigureOutcome",
    "MASKED_PASSWORD",
    "ProbeResult",
    "ProfileCandidate",
    "ProfileState",
    "ResetOutcome",
    "connection_string",
]
