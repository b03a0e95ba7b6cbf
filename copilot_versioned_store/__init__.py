# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Copilot-for-Consensus Versioned Store.

An in-process key-value store with document-database semantics (version
tokens for optimistic concurrency and TTL expiry) for exercising code
written against a document store without a real backend.
"""

__version__ = "0.1.0"

from .clock import Clock, ManualClock, SystemClock
from .codec import Codec, JsonCodec, PydanticCodec
from .config import VersionedStoreConfig
from .expiry import THIRTY_DAY_SECONDS, compute_expiry, is_expired
from .factory import create_versioned_store
from .inmemory_versioned_store import InMemoryVersionedStore, StoredDocument
from .validating_versioned_store import ValidatingVersionedStore, ValueValidationError
from .versioned_store import (
    CasMismatchError,
    DecodeError,
    EncodeError,
    KeyExistsError,
    KeyNotFoundError,
    VersionedStore,
    VersionedStoreError,
    is_key_not_found_error,
)

__all__ = [
    # Version
    "__version__",
    # Stores
    "VersionedStore",
    "InMemoryVersionedStore",
    "ValidatingVersionedStore",
    "StoredDocument",
    "create_versioned_store",
    "VersionedStoreConfig",
    # Collaborators
    "Clock",
    "SystemClock",
    "ManualClock",
    "Codec",
    "JsonCodec",
    "PydanticCodec",
    # Expiry
    "THIRTY_DAY_SECONDS",
    "compute_expiry",
    "is_expired",
    # Exceptions
    "VersionedStoreError",
    "KeyExistsError",
    "KeyNotFoundError",
    "CasMismatchError",
    "EncodeError",
    "DecodeError",
    "ValueValidationError",
    "is_key_not_found_error",
]
