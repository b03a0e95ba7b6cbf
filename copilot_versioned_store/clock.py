# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Clock sources used to evaluate document expiry."""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of the current Unix time in whole seconds (UTC)."""

    def now(self) -> int:
        ...


class SystemClock:
    """Clock backed by the process wall clock."""

    def now(self) -> int:
        return int(datetime.now(timezone.utc).timestamp())


class ManualClock:
    """Clock that only moves when told to.

    Useful in tests that exercise TTL behavior without sleeping.
    """

    def __init__(self, start: int = 1_700_000_000):
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        self._now = timestamp

    def advance(self, seconds: int) -> int:
        """Move the clock forward and return the new time."""
        self._now += seconds
        return self._now
