"""Schema conformance tests for the settings model.

Valid settings documents must be accepted by both the JSON Schema and the
SplitSettings model. Documents the schema rejects must be rejected by the
model too, so the model is never laxer than the published schema.
"""

# pylint: disable=missing-function-docstring
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from jsonschema import ValidationError as JsonSchemaValidationError
from jsonschema import validate as jsonschema_validate
from pydantic import ValidationError as PydanticValidationError
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

from split_audio.core.config.settings import SplitSettings

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load_schema(name: str) -> dict:
    """
    Load a JSON schema shipped with the package.
    """
    root = Path(__file__).parent.parent.parent.parent
    schema_path = root / "split_audio" / "core" / "schemas" / name

    with schema_path.open("r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture(scope="module")
def schema() -> dict[str, Any]:
    return load_schema("settings.schema.json")


@pytest.fixture(scope="module")
def registry(schema: dict[str, Any]) -> Registry:
    resource = Resource.from_contents(schema, default_specification=DRAFT202012)
    return Registry().with_resource(schema["$id"], resource)


def assert_schema_then_pydantic_ok(
    data: dict[str, Any],
    schema: dict[str, Any],
    registry: Registry,
) -> SplitSettings:
    jsonschema_validate(instance=data, schema=schema, registry=registry)
    return SplitSettings.from_settings_obj(data)


def assert_schema_invalid_but_pydantic_rejects(
    data: dict[str, Any],
    schema: dict[str, Any],
    registry: Registry,
) -> None:
    with pytest.raises(JsonSchemaValidationError):
        jsonschema_validate(instance=data, schema=schema, registry=registry)

    with pytest.raises(PydanticValidationError):
        SplitSettings.from_settings_obj(data)


def mk_settings(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "pattern": "??YYYYMMDDhhmmss",
        "segment_duration": "02:30:00",
        "output_folder": "SOUND",
        "log_enabled": "true",
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


# ---------------------------------------------------------------------------
# Valid documents
# ---------------------------------------------------------------------------

def test_default_document_is_valid(schema, registry) -> None:
    settings = assert_schema_then_pydantic_ok(mk_settings(), schema, registry)
    assert settings.log_enabled is True


def test_optional_keys_are_valid(schema, registry) -> None:
    settings = assert_schema_then_pydantic_ok(
        mk_settings(log_path="logs/run.jsonl", ffmpeg_path="/usr/bin/ffmpeg"),
        schema,
        registry,
    )
    assert settings.log_path == Path("logs/run.jsonl")


def test_integer_duration_is_valid(schema, registry) -> None:
    settings = assert_schema_then_pydantic_ok(
        mk_settings(segment_duration=600), schema, registry
    )
    assert settings.segment_seconds == 600


def test_boolean_log_flag_is_valid(schema, registry) -> None:
    settings = assert_schema_then_pydantic_ok(
        mk_settings(log_enabled=False), schema, registry
    )
    assert settings.log_enabled is False


def test_day_prefixed_duration_is_valid(schema, registry) -> None:
    settings = assert_schema_then_pydantic_ok(
        mk_settings(segment_duration="1.00:00:00"), schema, registry
    )
    assert settings.segment_seconds == 86400


# ---------------------------------------------------------------------------
# Invalid documents
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "overrides",
    [
        {"pattern": None},
        {"pattern": ""},
        {"segment_duration": None},
        {"segment_duration": "2h"},
        {"segment_duration": "00:75:00"},
        {"segment_duration": 0},
        {"output_folder": None},
        {"output_folder": ""},
        {"output_folder": "   "},
        {"log_enabled": "sometimes"},
        {"log_path": ""},
        {"ffmpeg_path": ""},
        {"unexpected": "value"},
    ],
)
def test_schema_invalid_documents_are_rejected(schema, registry, overrides) -> None:
    assert_schema_invalid_but_pydantic_rejects(mk_settings(**overrides), schema, registry)


def test_model_is_stricter_than_schema_for_templates(schema, registry) -> None:
    # The schema cannot see template tokens; the model rejects a pattern
    # without a year token.
    data = mk_settings(pattern="??MMDDhhmmss")

    jsonschema_validate(instance=data, schema=schema, registry=registry)
    with pytest.raises(PydanticValidationError):
        SplitSettings.from_settings_obj(data)
