# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Configuration for versioned store instances."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


def _get_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    value = environ.get(key)
    if value is None:
        return default

    value_lower = value.lower()
    if value_lower in ("true", "1", "yes", "on"):
        return True
    if value_lower in ("false", "0", "no", "off"):
        return False
    return default


@dataclass
class VersionedStoreConfig:
    """Settings used by create_versioned_store.

    Attributes:
        codec_type: Value codec, "json" or "pydantic" (default: "json")
        uniform_expiry: Evict expired documents on every operation (default: True)
        enable_validation: Wrap the store in ValidatingVersionedStore (default: False)
        strict_validation: Raise on validation failure instead of logging (default: True)
        validate_reads: Also validate values returned by get (default: False)
    """
    codec_type: str = "json"
    uniform_expiry: bool = True
    enable_validation: bool = False
    strict_validation: bool = True
    validate_reads: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "VersionedStoreConfig":
        """Build a config from VERSIONED_STORE_* environment variables.

        Unset or unparseable values fall back to the defaults.
        """
        env = environ if environ is not None else os.environ
        defaults = cls()
        return cls(
            codec_type=env.get("VERSIONED_STORE_CODEC", defaults.codec_type),
            uniform_expiry=_get_bool(env, "VERSIONED_STORE_UNIFORM_EXPIRY", defaults.uniform_expiry),
            enable_validation=_get_bool(env, "VERSIONED_STORE_VALIDATION", defaults.enable_validation),
            strict_validation=_get_bool(
                env, "VERSIONED_STORE_STRICT_VALIDATION", defaults.strict_validation
            ),
            validate_reads=_get_bool(env, "VERSIONED_STORE_VALIDATE_READS", defaults.validate_reads),
        )
