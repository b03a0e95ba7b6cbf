# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Validating versioned store that enforces JSON schema validation on values."""

import logging
from typing import Any, Tuple

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .versioned_store import VersionedStore, VersionedStoreError

logger = logging.getLogger(__name__)


class ValueValidationError(VersionedStoreError):
    """Exception raised when a value fails schema validation.

    Attributes:
        key: The key whose value failed validation
        errors: List of validation error messages
    """

    def __init__(self, key: str, errors: list[str]):
        self.key = key
        self.errors = errors
        error_msg = f"Validation failed for key '{key}': {'; '.join(errors)}"
        super().__init__(error_msg)


def validate_value(value: Any, schema: dict[str, Any]) -> tuple[bool, list[str]]:
    """Validate a value against a JSON schema.

    The value is first reduced to JSON-compatible Python (models, dataclasses
    and similar become dicts) so that any value a codec can store can be checked.

    Returns:
        Tuple of (is_valid, errors)
    """
    try:
        instance = to_jsonable_python(value)
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        return False, [f"Value is not JSON-compatible: {exc}"]

    try:
        Draft202012Validator.check_schema(schema)
        validator = Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    except SchemaError as exc:
        logger.error(f"Schema validation failed due to an invalid schema: {exc.message}")
        return False, [f"Invalid schema: {exc.message}"]

    if not errors:
        return True, []

    messages: list[str] = []
    for err in errors:
        path = ".".join([str(p) for p in err.absolute_path])
        location = f" at '{path}'" if path else ""
        messages.append(f"{err.message}{location}")
    return False, messages


class ValidatingVersionedStore(VersionedStore):
    """Versioned store that validates values against schemas before writing.

    Wraps any VersionedStore. The schema for a key is looked up by the key's
    key-space, the part before key_separator ("user:42" -> "user"). Keys
    without a separator use the whole key as the schema name.

    Example:
        >>> from copilot_versioned_store import InMemoryVersionedStore
        >>> store = ValidatingVersionedStore(
        ...     store=InMemoryVersionedStore(),
        ...     schema_provider=provider,
        ... )
        >>> store.insert("user:42", {"name": "Ada"})
        1
    """

    def __init__(
        self,
        store: VersionedStore,
        schema_provider: Any | None = None,
        strict: bool = True,
        validate_reads: bool = False,
        key_separator: str = ":",
    ):
        """Initialize the validating versioned store.

        Args:
            store: Underlying VersionedStore to delegate to
            schema_provider: Object with get_schema(name) returning a JSON
                             schema dict or None (optional)
            strict: If True, raise ValueValidationError on validation failure.
                   If False, log a warning and allow the operation to proceed.
            validate_reads: If True, validate values returned by get().
            key_separator: Separator between key-space and the rest of a key
        """
        self._store = store
        self._schema_provider = schema_provider
        self._strict = strict
        self._validate_reads = validate_reads
        self._key_separator = key_separator

    def _key_to_schema_name(self, key: str) -> str:
        return key.split(self._key_separator, 1)[0]

    def _validate(self, key: str, value: Any) -> tuple[bool, list[str]]:
        if self._schema_provider is None:
            logger.debug("No schema provider configured, skipping validation")
            return True, []

        schema_name = self._key_to_schema_name(key)
        schema = self._schema_provider.get_schema(schema_name)
        if schema is None:
            logger.debug("No schema found for key '%s' (schema: '%s')", key, schema_name)
            if not self._strict:
                return True, []
            return False, [f"No schema found for key-space '{schema_name}'"]

        return validate_value(value, schema)

    def _check(self, key: str, value: Any) -> None:
        is_valid, errors = self._validate(key, value)
        if is_valid:
            return

        if self._strict:
            raise ValueValidationError(key, errors)

        logger.warning(
            "Value validation failed for key '%s' but continuing in non-strict mode: %s",
            key, errors
        )

    def insert(self, key: str, value: Any, ttl: int = 0) -> int:
        self._check(key, value)
        return self._store.insert(key, value, ttl)

    def get(self, key: str, target: Any = None) -> Tuple[int, Any]:
        version, value = self._store.get(key, target)
        if self._validate_reads:
            self._check(key, value)
        return version, value

    def upsert(self, key: str, value: Any, ttl: int = 0) -> int:
        self._check(key, value)
        return self._store.upsert(key, value, ttl)

    def replace(self, key: str, value: Any, version: int, ttl: int = 0) -> int:
        self._check(key, value)
        return self._store.replace(key, value, version, ttl)

    def remove(self, key: str, version: int) -> int:
        return self._store.remove(key, version)

    def touch(self, key: str, version: int, ttl: int) -> int:
        return self._store.touch(key, version, ttl)
