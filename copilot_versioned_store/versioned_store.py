# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Abstract versioned key-value store interface with CAS semantics."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple


class VersionedStoreError(Exception):
    """Base exception for versioned store errors."""
    pass


class KeyExistsError(VersionedStoreError):
    """Exception raised when inserting a key that is already present."""

    def __init__(self, key: str, version: int):
        self.key = key
        self.version = version
        super().__init__(f"document key exists: {key}")


class KeyNotFoundError(VersionedStoreError):
    """Exception raised when a key is absent or has expired."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"document key does not exist: {key}")


class CasMismatchError(VersionedStoreError):
    """Exception raised when the supplied version does not match the stored one."""

    def __init__(self, key: str, expected: int, actual: int):
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(f"cas mismatch for {key}: expected {expected}, stored {actual}")


class EncodeError(VersionedStoreError):
    """Exception raised when a value cannot be encoded by the codec."""
    pass


class DecodeError(VersionedStoreError):
    """Exception raised when a stored payload cannot be decoded by the codec."""
    pass


def is_key_not_found_error(err: Optional[BaseException]) -> bool:
    """Return True if err is the "key does not exist" kind."""
    return isinstance(err, KeyNotFoundError)


class VersionedStore(ABC):
    """Abstract base class for versioned document stores.

    Every mutation is guarded by a version token. Callers read a document,
    keep its version, and pass it back on replace/remove/touch; a stale
    version is rejected with CasMismatchError.

    TTL values follow the document-store convention: 0 never expires, values
    below 30 days are relative seconds, anything larger is an absolute Unix
    timestamp.
    """

    @abstractmethod
    def insert(self, key: str, value: Any, ttl: int = 0) -> int:
        """Create a new document.

        Args:
            key: Document key
            value: Value to encode and store
            ttl: Expiry in seconds or as a Unix timestamp (0 never expires)

        Returns:
            The version of the new document (always 1)

        Raises:
            KeyExistsError: If the key is already present
            EncodeError: If the value cannot be encoded
        """
        pass

    @abstractmethod
    def get(self, key: str, target: Any = None) -> Tuple[int, Any]:
        """Retrieve a document.

        Args:
            key: Document key
            target: Optional type the payload is decoded into

        Returns:
            Tuple of (version, value)

        Raises:
            KeyNotFoundError: If the key is absent or expired
            DecodeError: If the payload cannot be decoded into target
        """
        pass

    @abstractmethod
    def upsert(self, key: str, value: Any, ttl: int = 0) -> int:
        """Create a document or overwrite the value of an existing one.

        The expiry of an existing document is left untouched; ttl only
        applies when the document is created.

        Returns:
            The new version

        Raises:
            EncodeError: If the value cannot be encoded
        """
        pass

    @abstractmethod
    def replace(self, key: str, value: Any, version: int, ttl: int = 0) -> int:
        """Replace an existing document if its version matches.

        The expiry is recomputed from ttl.

        Returns:
            The new version (version + 1)

        Raises:
            KeyNotFoundError: If the key is absent or expired
            CasMismatchError: If version does not match the stored version
            EncodeError: If the value cannot be encoded
        """
        pass

    @abstractmethod
    def remove(self, key: str, version: int) -> int:
        """Delete a document if its version matches.

        Returns:
            The version that was deleted

        Raises:
            KeyNotFoundError: If the key is absent
            CasMismatchError: If version does not match the stored version
        """
        pass

    @abstractmethod
    def touch(self, key: str, version: int, ttl: int) -> int:
        """Reset the expiry of a document if its version matches.

        Returns:
            The new version

        Raises:
            KeyNotFoundError: If the key is absent
            CasMismatchError: If version does not match the stored version
        """
        pass

    def is_key_not_found_error(self, err: Optional[BaseException]) -> bool:
        """Return True if err reports a missing or expired key."""
        return is_key_not_found_error(err)
