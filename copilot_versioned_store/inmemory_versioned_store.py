# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""In-memory versioned store for testing and local development."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .clock import Clock, SystemClock
from .codec import Codec, JsonCodec
from .expiry import compute_expiry, is_expired, validate_ttl
from .versioned_store import (
    CasMismatchError,
    KeyExistsError,
    KeyNotFoundError,
    VersionedStore,
)

logger = logging.getLogger(__name__)


@dataclass
class StoredDocument:
    """A stored payload with its version and expiry.

    Attributes:
        version: CAS token, 1 on creation and bumped on every mutation
        expires_at: Absolute Unix seconds, 0 or less never expires
        payload: Codec-encoded value
    """
    version: int
    expires_at: int
    payload: bytes


class InMemoryVersionedStore(VersionedStore):
    """In-memory versioned store implementation.

    Mimics a networked document database: values are kept encoded, every
    mutation is versioned, and expired documents are evicted lazily when an
    operation observes them. Nothing survives the process.
    """

    def __init__(
        self,
        codec: Optional[Codec] = None,
        clock: Optional[Clock] = None,
        uniform_expiry: bool = True,
    ):
        """Initialize in-memory versioned store.

        Args:
            codec: Codec for values (defaults to JsonCodec)
            clock: Time source for expiry (defaults to SystemClock)
            uniform_expiry: If True, every operation evicts an expired document
                before acting on it. If False, insert, upsert, remove and touch
                act on expired documents as if they were live, matching the
                legacy document-store mock.
        """
        self.codec = codec or JsonCodec()
        self.clock = clock or SystemClock()
        self.uniform_expiry = uniform_expiry
        self._documents: Dict[str, StoredDocument] = {}
        self._lock = threading.Lock()

    def _live_document(self, key: str) -> Optional[StoredDocument]:
        """Return the document for key, evicting it first if it has expired.

        Caller must hold the lock.
        """
        doc = self._documents.get(key)
        if doc is None:
            return None

        if is_expired(doc.expires_at, self.clock.now()):
            del self._documents[key]
            logger.debug(f"InMemoryVersionedStore: evicted expired document {key}")
            return None

        return doc

    def _observed_document(self, key: str) -> Optional[StoredDocument]:
        """Lookup used by the paths whose expiry check depends on uniform_expiry."""
        if self.uniform_expiry:
            return self._live_document(key)
        return self._documents.get(key)

    def _create(self, key: str, payload: bytes, ttl: int) -> int:
        doc = StoredDocument(
            version=1,
            expires_at=compute_expiry(ttl, self.clock.now()),
            payload=payload,
        )
        self._documents[key] = doc
        logger.debug(
            f"InMemoryVersionedStore: inserted document {key} (expires_at={doc.expires_at})"
        )
        return doc.version

    @staticmethod
    def _check_version(key: str, doc: StoredDocument, version: int) -> None:
        if doc.version != version:
            logger.debug(
                f"InMemoryVersionedStore: cas mismatch on {key} "
                f"(expected {version}, stored {doc.version})"
            )
            raise CasMismatchError(key, version, doc.version)

    def insert(self, key: str, value: Any, ttl: int = 0) -> int:
        validate_ttl(ttl)
        with self._lock:
            existing = self._observed_document(key)
            if existing is not None:
                raise KeyExistsError(key, existing.version)

            payload = self.codec.encode(value)
            return self._create(key, payload, ttl)

    def get(self, key: str, target: Any = None) -> Tuple[int, Any]:
        with self._lock:
            doc = self._live_document(key)
            if doc is None:
                logger.debug(f"InMemoryVersionedStore: document {key} not found")
                raise KeyNotFoundError(key)

            value = self.codec.decode(doc.payload, target)
            logger.debug(f"InMemoryVersionedStore: retrieved document {key} (version {doc.version})")
            return doc.version, value

    def upsert(self, key: str, value: Any, ttl: int = 0) -> int:
        validate_ttl(ttl)
        with self._lock:
            payload = self.codec.encode(value)

            doc = self._observed_document(key)
            if doc is None:
                return self._create(key, payload, ttl)

            # Expiry of an existing document is kept as is
            doc.version += 1
            doc.payload = payload
            logger.debug(f"InMemoryVersionedStore: upserted document {key} (version {doc.version})")
            return doc.version

    def replace(self, key: str, value: Any, version: int, ttl: int = 0) -> int:
        validate_ttl(ttl)
        with self._lock:
            doc = self._live_document(key)
            if doc is None:
                raise KeyNotFoundError(key)

            self._check_version(key, doc, version)

            payload = self.codec.encode(value)
            new_doc = StoredDocument(
                version=version + 1,
                expires_at=compute_expiry(ttl, self.clock.now()),
                payload=payload,
            )
            self._documents[key] = new_doc
            logger.debug(f"InMemoryVersionedStore: replaced document {key} (version {new_doc.version})")
            return new_doc.version

    def remove(self, key: str, version: int) -> int:
        with self._lock:
            doc = self._observed_document(key)
            if doc is None:
                raise KeyNotFoundError(key)

            self._check_version(key, doc, version)

            del self._documents[key]
            logger.debug(f"InMemoryVersionedStore: removed document {key} (version {version})")
            return version

    def touch(self, key: str, version: int, ttl: int) -> int:
        validate_ttl(ttl)
        with self._lock:
            doc = self._observed_document(key)
            if doc is None:
                raise KeyNotFoundError(key)

            self._check_version(key, doc, version)

            doc.expires_at = compute_expiry(ttl, self.clock.now())
            # Changing the expiry also changes the version, like a real document store
            doc.version += 1
            logger.debug(
                f"InMemoryVersionedStore: touched document {key} "
                f"(version {doc.version}, expires_at={doc.expires_at})"
            )
            return doc.version

    def __len__(self) -> int:
        """Number of stored documents, including expired ones not yet evicted."""
        with self._lock:
            return len(self._documents)

    def clear_all(self) -> None:
        """Drop every document (useful for testing)."""
        with self._lock:
            self._documents.clear()
        logger.debug("InMemoryVersionedStore: cleared all documents")
