"""In-memory registry of user records."""

from __future__ import annotations

import logging
import random
from typing import Callable, Iterator, List, Mapping, Optional, Tuple, Union

from .acceptance import AcceptanceGate, build_gate
from .config import DirectoryConfig
from .errors import RecordIndexError
from .models import (
    AddResult,
    AddStatus,
    AuthResult,
    AuthStatus,
    RemovalResult,
    RemovalStatus,
    UserCandidate,
    UserRecord,
)
from .tokens import TokenIssuer

logger = logging.getLogger("userdir.directory")

CandidateInput = Union[UserCandidate, UserRecord, Mapping[str, object], None]
CompletionCallback = Callable[[str, Tuple[UserRecord, ...]], None]


class UserDirectory:
    """Own the ordered user collection and the currently active user."""

    def __init__(
        self,
        config: Optional[DirectoryConfig] = None,
        *,
        gate: Optional[AcceptanceGate] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config or DirectoryConfig()
        self._rng = rng or random.Random()
        self._gate = gate if gate is not None else build_gate(self._config, rng=self._rng)
        self._tokens = TokenIssuer(prefix=self._config.token_prefix, rng=self._rng)
        self._users: List[UserRecord] = []
        self._current: Optional[UserRecord] = None

    @property
    def config(self) -> DirectoryConfig:
        return self._config

    @property
    def users(self) -> Tuple[UserRecord, ...]:
        return tuple(self._users)

    @property
    def current_user(self) -> Optional[UserRecord]:
        return self._current

    @property
    def last_token(self) -> Optional[str]:
        return self._tokens.last

    def __len__(self) -> int:
        return len(self._users)

    def __iter__(self) -> Iterator[UserRecord]:
        return iter(tuple(self._users))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def find_by_name(self, name: str) -> Tuple[UserRecord, ...]:
        """Return every record named ``name`` in insertion order."""

        return tuple(user for user in self._users if user.name == name)

    def _first_by_name(self, name: str) -> Optional[UserRecord]:
        for user in self._users:
            if user.name == name:
                return user
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_record(
        self,
        candidate: CandidateInput = None,
        on_complete: Optional[CompletionCallback] = None,
    ) -> AddResult:
        """Build a record from ``candidate`` and store it if the gate accepts it.

        ``candidate`` may be a mapping or any object exposing ``name``, ``email``
        and ``age``, such as an existing :class:`UserRecord`. Missing fields fall
        back to the configured defaults; ``candidate`` itself is left untouched.
        ``matches`` always holds the stored records sharing the candidate's name,
        whether or not the record was accepted. ``on_complete`` runs before
        returning, and only for accepted records.
        """

        record = self._build_record(candidate)

        if self._gate(record):
            self._users.append(record)
            self._current = record
            status = AddStatus.ACCEPTED
            logger.debug("Added user %r at position %d", record.name, len(self._users) - 1)
        else:
            status = AddStatus.REJECTED
            logger.debug("Acceptance gate rejected user %r", record.name)

        matches = self.find_by_name(record.name)
        if status is AddStatus.ACCEPTED and on_complete is not None:
            on_complete(status.value, matches)
        return AddResult(status=status, record=record, matches=matches)

    def authenticate_or_create(
        self,
        name: Optional[str] = None,
        password: Optional[str] = None,
    ) -> AuthResult:
        """Make the first user named ``name`` current, creating it when absent."""

        name = name or self._config.default_name
        password = password or self._config.default_password
        token = self._tokens.issue()

        existing = self._first_by_name(name)
        if existing is not None:
            if self._config.verify_passwords and existing.password != password:
                logger.warning("Rejected authentication for user %r", name)
                return AuthResult(status=AuthStatus.REJECTED, record=None, token=token)
            self._current = existing
            logger.debug("Authenticated user %r", name)
            return AuthResult(status=AuthStatus.AUTHENTICATED, record=existing, token=token)

        record = UserRecord(
            name=name,
            email=self._config.default_email,
            age=self._config.default_age,
            password=password,
        )
        self._users.append(record)
        self._current = record
        logger.debug("Created user %r during authentication", name)
        return AuthResult(status=AuthStatus.CREATED, record=record, token=token)

    def remove_by_position(self, index: int) -> RemovalResult:
        """Remove the record at ``index``.

        Negative positions are ignored. Positions past the end are ignored too,
        unless the directory is configured for strict removal, in which case
        :class:`~userdir.errors.RecordIndexError` is raised.
        """

        if index < 0:
            return RemovalResult(
                status=RemovalStatus.NOT_REMOVED,
                index=index,
                removed=None,
                remaining=len(self._users),
            )

        if index >= len(self._users):
            if self._config.strict_removal:
                raise RecordIndexError(index, len(self._users))
            logger.debug("Ignoring removal of position %d beyond %d record(s)", index, len(self._users))
            return RemovalResult(
                status=RemovalStatus.NOT_REMOVED,
                index=index,
                removed=None,
                remaining=len(self._users),
            )

        removed = self._users[index]
        self._users = [user for position, user in enumerate(self._users) if position != index]
        if self._current is removed:
            self._current = None
        logger.debug("Removed user %r from position %d", removed.name, index)
        return RemovalResult(
            status=RemovalStatus.REMOVED,
            index=index,
            removed=removed,
            remaining=len(self._users),
        )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def format_report(self, separator: Optional[str] = None) -> str:
        """Render ``name-email-age`` for every record, joined by ``separator``."""

        joiner = self._config.report_separator if separator is None else separator
        return joiner.join(user.format_line() for user in self._users)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_record(self, candidate: CandidateInput) -> UserRecord:
        if candidate is None:
            candidate = UserCandidate()
        elif isinstance(candidate, Mapping):
            candidate = UserCandidate.model_validate(dict(candidate))
        elif not isinstance(candidate, UserCandidate):
            candidate = UserCandidate.model_validate(candidate, from_attributes=True)

        return UserRecord(
            name=candidate.name or self._config.default_name,
            email=candidate.email if candidate.email is not None else self._config.default_email,
            age=candidate.age if candidate.age is not None else self._config.default_age,
        )


__all__ = ["CandidateInput", "CompletionCallback", "UserDirectory"]
