# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Factory for creating versioned store instances based on configuration."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .clock import Clock
from .codec import Codec, JsonCodec, PydanticCodec
from .config import VersionedStoreConfig
from .inmemory_versioned_store import InMemoryVersionedStore
from .validating_versioned_store import ValidatingVersionedStore
from .versioned_store import VersionedStore

logger = logging.getLogger(__name__)

_CODECS: Mapping[str, Callable[[], Codec]] = {
    "json": JsonCodec,
    "pydantic": PydanticCodec,
}


def _create_codec(codec_type: str) -> Codec:
    normalized = str(codec_type).lower()
    try:
        factory = _CODECS[normalized]
    except KeyError as exc:
        supported = ", ".join(sorted(_CODECS.keys()))
        raise ValueError(f"Unknown codec: {normalized}. Supported codecs: {supported}") from exc
    return factory()


def create_versioned_store(
    config: VersionedStoreConfig | None = None,
    clock: Clock | None = None,
    schema_provider: Any | None = None,
) -> VersionedStore:
    """Create a versioned store instance.

    Args:
        config: Store settings. If None, read from the environment.
        clock: Optional time source; defaults to the system clock.
        schema_provider: Schema provider for value validation. Required when
                         config.enable_validation is True.

    Returns:
        VersionedStore instance.

    Raises:
        ValueError: If codec_type is unknown, or validation is enabled
                    without a schema provider.
    """
    if config is None:
        config = VersionedStoreConfig.from_env()

    codec = _create_codec(config.codec_type)
    base_store = InMemoryVersionedStore(
        codec=codec,
        clock=clock,
        uniform_expiry=config.uniform_expiry,
    )
    logger.debug(
        f"Created InMemoryVersionedStore (codec={config.codec_type}, "
        f"uniform_expiry={config.uniform_expiry})"
    )

    if not config.enable_validation:
        return base_store

    if schema_provider is None:
        raise ValueError("schema_provider is required when validation is enabled")

    return ValidatingVersionedStore(
        store=base_store,
        schema_provider=schema_provider,
        strict=bool(config.strict_validation),
        validate_reads=bool(config.validate_reads),
    )
