"""Fake adapters, clock and sleep for refresh tests (no live network)."""

from .adapters import FAKE_OBSERVED_AT, FakeAdapter, FakeClock, RaisingAdapter, RecordingSleep

__all__ = [
    "FAKE_OBSERVED_AT",
    "FakeAdapter",
    "FakeClock",
    "RaisingAdapter",
    "RecordingSleep",
]
