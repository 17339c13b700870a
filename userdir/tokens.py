"""Throwaway tokens issued on every authentication attempt."""

from __future__ import annotations

import random
from typing import Optional

TOKEN_RANGE = 1_000_000


class TokenIssuer:
    """Generate prefixed numeric tokens and remember the latest one.

    Tokens are never checked against anything; they only record that an
    authentication call happened.
    """

    def __init__(self, *, prefix: str = "token-", rng: Optional[random.Random] = None) -> None:
        self._prefix = prefix
        self._rng = rng or random.Random()
        self._last: Optional[str] = None

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def last(self) -> Optional[str]:
        return self._last

    def issue(self) -> str:
        token = f"{self._prefix}{self._rng.randrange(TOKEN_RANGE)}"
        self._last = token
        return token


__all__ = ["TOKEN_RANGE", "TokenIssuer"]
