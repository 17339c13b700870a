"""Tests for the acceptance gates used when adding records."""

from __future__ import annotations

import unittest

from userdir.acceptance import AlwaysAccept, RandomAcceptance, build_gate
from userdir.config import DirectoryConfig
from userdir.directory import UserDirectory
from userdir.models import AddStatus


class _FixedRandom:
    """Stand-in for :class:`random.Random` returning scripted draws."""

    def __init__(self, *values: float) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)

    def randrange(self, stop: int) -> int:
        return 7


class AcceptanceGateTests(unittest.TestCase):
    def test_build_gate_defaults_to_always_accept(self) -> None:
        self.assertIsInstance(build_gate(DirectoryConfig()), AlwaysAccept)

    def test_build_gate_random_mode_uses_threshold(self) -> None:
        gate = build_gate(DirectoryConfig(acceptance_mode="random", acceptance_threshold=0.25))
        self.assertIsInstance(gate, RandomAcceptance)
        self.assertEqual(gate.threshold, 0.25)

    def test_random_gate_accepts_only_above_threshold(self) -> None:
        gate = RandomAcceptance(0.1, rng=_FixedRandom(0.5, 0.1, 0.05))  # type: ignore[arg-type]
        self.assertTrue(gate(None))  # type: ignore[arg-type]
        self.assertFalse(gate(None))  # type: ignore[arg-type]
        self.assertFalse(gate(None))  # type: ignore[arg-type]

    def test_random_gate_rejects_invalid_threshold(self) -> None:
        with self.assertRaises(ValueError):
            RandomAcceptance(1.5)

    def test_directory_in_random_mode_exercises_both_branches(self) -> None:
        config = DirectoryConfig(acceptance_mode="random")
        directory = UserDirectory(config, rng=_FixedRandom(0.9, 0.01))  # type: ignore[arg-type]

        accepted = directory.add_record({"name": "ana"})
        rejected = directory.add_record({"name": "ana"})

        self.assertIs(accepted.status, AddStatus.ACCEPTED)
        self.assertIs(rejected.status, AddStatus.REJECTED)
        self.assertEqual(len(directory), 1)
        self.assertIs(directory.current_user, accepted.record)
        self.assertEqual(rejected.matches, (accepted.record,))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
