# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""TTL interpretation shared by all versioned stores.

A TTL of 30 days or less can be given as relative seconds; anything at or
above the number of seconds in 30 days is taken as an absolute Unix time.
"""

THIRTY_DAY_SECONDS = 30 * 24 * 60 * 60

# TTLs are unsigned 32-bit on the wire of real document stores
MAX_TTL = 2**32 - 1


def validate_ttl(ttl: int) -> int:
    """Check that ttl is an unsigned 32-bit integer.

    Raises:
        ValueError: If ttl is not an int or is out of range
    """
    if isinstance(ttl, bool) or not isinstance(ttl, int):
        raise ValueError(f"ttl must be an integer, got {type(ttl).__name__}")
    if ttl < 0 or ttl > MAX_TTL:
        raise ValueError(f"ttl must be between 0 and {MAX_TTL}, got {ttl}")
    return ttl


def compute_expiry(ttl: int, now: int) -> int:
    """Convert a raw TTL into an absolute expiry timestamp.

    Args:
        ttl: 0 for no expiry, relative seconds below THIRTY_DAY_SECONDS,
             otherwise an absolute Unix timestamp
        now: Current Unix time in seconds

    Returns:
        Absolute expiry in Unix seconds, or 0 if the document never expires
    """
    validate_ttl(ttl)
    if 0 < ttl < THIRTY_DAY_SECONDS:
        return now + ttl
    return ttl


def is_expired(expires_at: int, now: int) -> bool:
    """Return True if a document with this expiry is no longer live."""
    return 0 < expires_at < now
