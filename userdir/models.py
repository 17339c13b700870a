"""Domain models for the in-memory user directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

ACTIVE_FLAG = "yes"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserCandidate(BaseModel):
    """Description of a user submitted to :meth:`UserDirectory.add_record`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None


@dataclass(frozen=True, eq=False)
class UserRecord:
    """Represents one user held by the directory.

    Records compare by identity so that two users sharing a name stay distinct.
    """

    name: str
    email: str
    age: int = 0
    created_at: datetime = field(default_factory=_utcnow)
    active: str = ACTIVE_FLAG
    password: Optional[str] = field(default=None, repr=False)

    def format_line(self, separator: str = "-") -> str:
        return separator.join((self.name, self.email, str(self.age)))


class AddStatus(str, Enum):
    """Outcome of an add attempt."""

    ACCEPTED = "feito"
    REJECTED = "rejeitado"


class AuthStatus(str, Enum):
    """Outcome of an authenticate-or-create call."""

    AUTHENTICATED = "authenticated"
    CREATED = "created"
    REJECTED = "rejected"


class RemovalStatus(str, Enum):
    REMOVED = "removed"
    NOT_REMOVED = "not_removed"


@dataclass(frozen=True)
class AddResult:
    status: AddStatus
    record: UserRecord
    matches: Tuple[UserRecord, ...]

    @property
    def accepted(self) -> bool:
        return self.status is AddStatus.ACCEPTED


@dataclass(frozen=True)
class AuthResult:
    status: AuthStatus
    record: Optional[UserRecord]
    token: str


@dataclass(frozen=True)
class RemovalResult:
    """Outcome of a removal, including the size of the rebuilt directory."""

    status: RemovalStatus
    index: int
    removed: Optional[UserRecord]
    remaining: int

    @property
    def is_empty(self) -> bool:
        return self.remaining == 0

    def describe(self) -> str:
        if self.index < 0:
            return "not removed"
        return "empty" if self.is_empty else "not empty"


__all__ = [
    "ACTIVE_FLAG",
    "AddResult",
    "AddStatus",
    "AuthResult",
    "AuthStatus",
    "RemovalResult",
    "RemovalStatus",
    "UserCandidate",
    "UserRecord",
]
