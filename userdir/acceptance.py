"""Acceptance gates deciding whether :meth:`UserDirectory.add_record` stores a record."""

from __future__ import annotations

import random
from typing import Optional, Protocol

from .config import DirectoryConfig
from .models import UserRecord


class AcceptanceGate(Protocol):
    def __call__(self, record: UserRecord) -> bool:
        ...


class AlwaysAccept:
    """Store every candidate."""

    def __call__(self, record: UserRecord) -> bool:
        return True

    def __repr__(self) -> str:
        return "AlwaysAccept()"


class RandomAcceptance:
    """Store a candidate only when a uniform draw exceeds ``threshold``.

    With the default threshold roughly one call in ten is rejected. Pass a seeded
    :class:`random.Random` to make the outcome reproducible.
    """

    def __init__(self, threshold: float = 0.1, *, rng: Optional[random.Random] = None) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("Acceptance threshold must be between 0 and 1")
        self._threshold = threshold
        self._rng = rng or random.Random()

    @property
    def threshold(self) -> float:
        return self._threshold

    def __call__(self, record: UserRecord) -> bool:
        return self._rng.random() > self._threshold

    def __repr__(self) -> str:
        return f"RandomAcceptance(threshold={self._threshold})"


def build_gate(config: DirectoryConfig, *, rng: Optional[random.Random] = None) -> AcceptanceGate:
    """Return the gate selected by ``config.acceptance_mode``."""

    if config.acceptance_mode == "random":
        return RandomAcceptance(config.acceptance_threshold, rng=rng)
    return AlwaysAccept()


__all__ = ["AcceptanceGate", "AlwaysAccept", "RandomAcceptance", "build_gate"]
