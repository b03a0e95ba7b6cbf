# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for validating versioned store."""

import logging

import pytest
from pydantic import BaseModel

from copilot_versioned_store import (
    InMemoryVersionedStore,
    KeyNotFoundError,
    ValidatingVersionedStore,
    ValueValidationError,
    VersionedStoreError,
)
from copilot_versioned_store.validating_versioned_store import validate_value

USER_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "age": {"type": "integer", "minimum": 0},
    },
    "required": ["name"],
    "additionalProperties": False,
}


class MockSchemaProvider:
    """Mock schema provider for testing."""

    def __init__(self, schemas=None):
        """Initialize with optional schemas dictionary."""
        self.schemas = schemas or {}

    def get_schema(self, schema_name: str):
        """Return schema for schema name or None if not found."""
        return self.schemas.get(schema_name)


class User(BaseModel):
    name: str
    age: int


@pytest.fixture
def base_store(clock):
    return InMemoryVersionedStore(clock=clock)


@pytest.fixture
def provider():
    return MockSchemaProvider({"user": USER_SCHEMA})


class TestValidateValue:
    """Tests for validate_value."""

    def test_valid(self):
        assert validate_value({"name": "Ada", "age": 36}, USER_SCHEMA) == (True, [])

    def test_errors_include_path(self):
        is_valid, errors = validate_value({"name": "Ada", "age": -1}, USER_SCHEMA)

        assert is_valid is False
        assert len(errors) == 1
        assert "at 'age'" in errors[0]

    def test_model_is_normalized(self):
        assert validate_value(User(name="Ada", age=36), USER_SCHEMA) == (True, [])

    def test_invalid_schema(self):
        is_valid, errors = validate_value({"name": "Ada"}, {"type": 12})

        assert is_valid is False
        assert errors[0].startswith("Invalid schema")

    def test_not_json_compatible(self):
        is_valid, errors = validate_value(object(), USER_SCHEMA)

        assert is_valid is False
        assert "JSON-compatible" in errors[0]


class TestValidatingVersionedStore:
    """Tests for ValidatingVersionedStore."""

    def test_init(self, base_store, provider):
        store = ValidatingVersionedStore(store=base_store, schema_provider=provider, strict=True)

        assert store._store is base_store
        assert store._schema_provider is provider
        assert store._strict is True
        assert store._validate_reads is False

    def test_key_to_schema_name(self, base_store):
        store = ValidatingVersionedStore(base_store)

        assert store._key_to_schema_name("user:42") == "user"
        assert store._key_to_schema_name("user:42:profile") == "user"
        assert store._key_to_schema_name("settings") == "settings"

    def test_custom_separator(self, base_store):
        store = ValidatingVersionedStore(base_store, key_separator="/")

        assert store._key_to_schema_name("user/42") == "user"

    def test_insert_valid(self, base_store, provider):
        store = ValidatingVersionedStore(base_store, schema_provider=provider)

        assert store.insert("user:1", {"name": "Ada"}) == 1
        assert store.get("user:1") == (1, {"name": "Ada"})

    def test_insert_invalid_strict(self, base_store, provider):
        store = ValidatingVersionedStore(base_store, schema_provider=provider)

        with pytest.raises(ValueValidationError) as exc_info:
            store.insert("user:1", {"age": 3})

        assert isinstance(exc_info.value, VersionedStoreError)
        assert exc_info.value.key == "user:1"
        assert exc_info.value.errors
        with pytest.raises(KeyNotFoundError):
            base_store.get("user:1")

    def test_insert_invalid_non_strict(self, base_store, provider, caplog):
        store = ValidatingVersionedStore(base_store, schema_provider=provider, strict=False)

        with caplog.at_level(logging.WARNING):
            assert store.insert("user:1", {"age": 3}) == 1

        assert "non-strict mode" in caplog.text
        assert base_store.get("user:1") == (1, {"age": 3})

    def test_missing_schema_strict(self, base_store, provider):
        store = ValidatingVersionedStore(base_store, schema_provider=provider)

        with pytest.raises(ValueValidationError):
            store.insert("order:1", {"total": 3})

    def test_missing_schema_non_strict(self, base_store, provider):
        store = ValidatingVersionedStore(base_store, schema_provider=provider, strict=False)

        assert store.insert("order:1", {"total": 3}) == 1

    def test_no_provider_skips_validation(self, base_store):
        store = ValidatingVersionedStore(base_store)

        assert store.insert("anything", [1, 2, 3]) == 1

    def test_upsert_and_replace_are_validated(self, base_store, provider):
        store = ValidatingVersionedStore(base_store, schema_provider=provider)
        cas = store.insert("user:1", {"name": "Ada"})

        with pytest.raises(ValueValidationError):
            store.upsert("user:1", {"name": 1})
        with pytest.raises(ValueValidationError):
            store.replace("user:1", {"nickname": "A"}, cas)

        assert store.upsert("user:1", {"name": "Ada", "age": 36}) == 2
        assert store.replace("user:1", {"name": "Ada", "age": 37}, 2) == 3

    def test_model_values(self, base_store, provider):
        store = ValidatingVersionedStore(base_store, schema_provider=provider)

        # JsonCodec cannot encode a model, but validation sees its dict form
        with pytest.raises(ValueValidationError):
            store.insert("user:1", User(name="Ada", age=-1))

    def test_remove_and_touch_delegate(self, base_store, provider):
        store = ValidatingVersionedStore(base_store, schema_provider=provider)
        cas = store.insert("user:1", {"name": "Ada"})

        cas = store.touch("user:1", cas, 10)
        assert store.remove("user:1", cas) == 2
        assert store.is_key_not_found_error(KeyNotFoundError("user:1")) is True

    def test_validate_reads(self, base_store, provider):
        base_store.insert("user:1", {"nickname": "A"})
        store = ValidatingVersionedStore(base_store, schema_provider=provider, validate_reads=True)

        with pytest.raises(ValueValidationError):
            store.get("user:1")

    def test_reads_not_validated_by_default(self, base_store, provider):
        base_store.insert("user:1", {"nickname": "A"})
        store = ValidatingVersionedStore(base_store, schema_provider=provider)

        assert store.get("user:1") == (1, {"nickname": "A"})
