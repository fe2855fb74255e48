"""Data model for the sections of a ``.prompt`` document.

Attributes are snake_case in Python and camelCase in the document
(``maxTokens``, ``fewShots``). Unknown document keys are ignored and keys
with a null value are treated as absent.
"""

import json
from enum import StrEnum
from functools import cached_property
from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

# Keys whose empty value is meaningful and must survive serialization ({} is a valid schema).
_KEEP_EMPTY_KEYS: frozenset[str] = frozenset({"schema", "json_schema"})


class ParameterType(StrEnum):
    """Types a prompt parameter can be declared with."""

    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    DATETIME = "datetime"
    OBJECT = "object"

    @classmethod
    def parse(cls, value: str) -> Self | None:
        """Case-insensitive lookup; returns None for unknown type names."""
        try:
            return cls(value.lower())
        except ValueError:
            return None


class OutputFormat(StrEnum):
    """Shape of the reply expected from the model."""

    TEXT = "text"
    JSON = "json"
    JSON_SCHEMA = "jsonSchema"

    @classmethod
    def _missing_(cls, value: object) -> "OutputFormat | None":
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


def _is_empty(key: str, value: Any) -> bool:
    if value is None:
        return True
    return key not in _KEEP_EMPTY_KEYS and isinstance(value, (dict, list)) and not value


class PromptModel(BaseModel):
    """Base for every model that maps onto part of a prompt document.

    Serialization drops null values and empty collections so that a dumped
    prompt file only carries what was actually configured.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_null_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if not _is_empty(key, value)}


class InputSchema(PromptModel):
    """Parameters accepted by the prompt templates.

    Attributes:
        parameters: Parameter name to type name. A trailing ``?`` on the name
                    marks the parameter as optional.
        defaults: Values used when the caller does not supply a parameter.
                  Stored under the ``default`` key in documents.
    """

    parameters: dict[str, str] = Field(default_factory=dict)
    defaults: dict[str, Any] = Field(default_factory=dict, alias="default")

    @field_validator("parameters", mode="before")
    @classmethod
    def _stringify_type_names(cls, value: Any) -> Any:
        # Non-string type names are kept so that declaration validation can report them by name.
        if isinstance(value, dict):
            return {key: "" if type_name is None else str(type_name) for key, type_name in value.items()}
        return value


class Output(PromptModel):
    """Output configuration: format and, for JSON Schema output, the schema itself."""

    format: OutputFormat = OutputFormat.TEXT
    json_schema: JsonValue = Field(default=None, alias="schema")

    @field_validator("format", mode="before")
    @classmethod
    def _parse_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            return OutputFormat(value)
        return value

    @field_serializer("format")
    def _serialize_format(self, value: OutputFormat) -> str:
        return value.value

    @cached_property
    def schema_document(self) -> str:
        """The schema as compact JSON text, computed once per instance.

        When the schema is an object without an ``additionalProperties`` key,
        ``"additionalProperties": false`` is added at the top level. Returns an
        empty string when no schema is configured. Later changes to
        ``json_schema`` are not reflected once this value has been read.
        """
        if self.json_schema is None:
            return ""

        schema = self.json_schema
        if isinstance(schema, dict) and "additionalProperties" not in schema:
            schema = {**schema, "additionalProperties": False}

        return json.dumps(schema, separators=(",", ":"), ensure_ascii=False)


class PromptConfig(PromptModel):
    """Model call configuration for a prompt.

    Older documents declare the output format with a top-level ``outputFormat``
    key. When no ``output`` section is present, that value is moved into
    ``output.format`` during validation; ``output_format`` is kept as a
    read-only view of it.
    """

    input: InputSchema = Field(default_factory=InputSchema)
    output: Output = Field(default_factory=Output)
    temperature: float | None = None
    max_tokens: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _migrate_output_format(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        legacy_format = data.pop("outputFormat", None)
        legacy_format = data.pop("output_format", legacy_format)
        if data.get("output") is None and legacy_format is not None:
            data["output"] = {"format": legacy_format}
        return data

    @property
    def output_format(self) -> OutputFormat:
        """The configured output format (same as ``output.format``)."""
        return self.output.format


class FewShotPair(PromptModel):
    """An example exchange between the user and the model."""

    user: str
    response: str


class Prompts(PromptModel):
    """The system and user templates of a prompt."""

    system: str | None = None
    user: str


__all__ = [
    "FewShotPair",
    "InputSchema",
    "Output",
    "OutputFormat",
    "ParameterType",
    "PromptConfig",
    "PromptModel",
    "Prompts",
]
