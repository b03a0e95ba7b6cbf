# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Pytest configuration and shared fixtures for versioned store tests."""

import pytest

from copilot_versioned_store import InMemoryVersionedStore, ManualClock


@pytest.fixture
def clock():
    """Manual clock starting at a fixed Unix time."""
    return ManualClock(start=1_700_000_000)


@pytest.fixture
def store(clock):
    """In-memory store with the default JSON codec, bound to the manual clock."""
    return InMemoryVersionedStore(clock=clock)
