"""The PromptFile model: loading, validation, prompt generation and serialization.

@public

A ``.prompt`` file is a YAML document describing one parametrized request to a
language model::

    name: Example
    model: gpt-4o
    config:
      input:
        parameters:
          country: string
          style?: string
        default:
          country: Malta
      output:
        format: text
    prompts:
      system: You are a helpful travel agent
      user: Tell me about {{ country }}
    fewShots:
      - user: What is the capital of France?
        response: Paris

Loading runs every validation step up front, so a PromptFile returned by
``from_file``, ``from_stream`` or ``from_string`` is always fully valid.
"""

import json
from io import StringIO
from pathlib import Path
from typing import IO, Any

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for
from pydantic import Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import LiteralScalarString

from dotprompt_core.exceptions import (
    EmptyPromptNameError,
    InvalidOutputSchemaError,
    InvalidParameterDeclarationError,
    MissingPromptsError,
    MissingUserPromptError,
    PromptParseError,
    PromptSourceNotFoundError,
    StreamNotReadableError,
)
from dotprompt_core.logging import get_logger

from .naming import clean_name
from .parameters import resolve_parameters
from .templating import render_template
from .types import FewShotPair, OutputFormat, ParameterType, PromptConfig, PromptModel, Prompts

logger = get_logger(__name__)

JSON_RESPONSE_REQUEST = "Please provide the response in JSON"
"""Appended to the system prompt of JSON-format prompts that never mention JSON."""

_VALID_TYPE_NAMES = ", ".join(parameter_type.value for parameter_type in ParameterType)


class PromptFile(PromptModel):
    """A validated prompt definition.

    @public

    Attributes:
        name: Cleaned prompt name (lower-case, hyphen-separated).
        model: Target model identifier, if the prompt names one.
        version: Prompt version, 1 unless the document says otherwise.
        config: Parameters, output format and sampling options.
        prompts: The system and user templates.
        few_shots: Example exchanges sent ahead of the real request.

    Example:
        >>> prompt_file = PromptFile.from_file("prompts/basic.prompt")
        >>> prompt_file.get_user_prompt({"country": "Japan"})
    """

    name: str = ""
    model: str | None = None
    version: int = 1
    config: PromptConfig = Field(default_factory=PromptConfig)
    prompts: Prompts
    few_shots: list[FewShotPair] = Field(default_factory=list)

    # Loading

    @classmethod
    def from_file(cls, path: str | Path) -> "PromptFile":
        """Load a prompt file from disk.

        The file name without its extension is used as the prompt name when
        the document does not declare one.

        Raises:
            PromptSourceNotFoundError: If the file does not exist.
            StreamNotReadableError: If the file cannot be opened or read.
            DotPromptError: Any error raised by ``from_string``.
        """
        path = Path(path)
        if not path.is_file():
            raise PromptSourceNotFoundError(f"The specified file does not exist: {path}")

        try:
            f = open(path, "r", encoding="utf-8-sig")
        except OSError as e:
            raise StreamNotReadableError(f"Unable to open prompt file {path}: {e}") from e

        with f:
            return cls.from_stream(path.stem, f)

    @classmethod
    def from_stream(cls, name: str, stream: IO[str] | IO[bytes]) -> "PromptFile":
        """Load a prompt file from an open text or binary stream.

        Args:
            name: Fallback name used when the document does not declare one.
            stream: Readable stream positioned at the start of the document.

        Raises:
            StreamNotReadableError: If the stream is not readable or reading it fails.
            PromptParseError: If the content cannot be decoded or parsed.
        """
        if getattr(stream, "closed", False) or not stream.readable():
            raise StreamNotReadableError("Stream is not in a readable state")

        try:
            content = stream.read()
        except UnicodeDecodeError as e:
            raise PromptParseError(f"Unable to parse prompt file: {e}") from e
        except OSError as e:
            raise StreamNotReadableError(f"Unable to read prompt stream: {e}") from e

        return cls.from_string(name, content)

    @classmethod
    def from_string(cls, name: str, content: str | bytes) -> "PromptFile":
        """Parse and validate a prompt document.

        Args:
            name: Fallback name used when the document does not declare one.
            content: YAML text, or UTF-8 encoded bytes.

        Returns:
            A fully validated PromptFile.

        Raises:
            PromptParseError: Invalid YAML, or content that does not fit the model.
            MissingPromptsError: No ``prompts`` section.
            MissingUserPromptError: ``prompts`` section without a user template.
            InvalidOutputSchemaError: ``config.output.schema`` is not a valid JSON Schema.
            EmptyPromptNameError: The name is empty after cleaning.
            InvalidParameterDeclarationError: A parameter is declared with an unknown type.
        """
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise PromptParseError(f"Unable to parse prompt file: {e}") from e

        document = _parse_document(content)

        prompts = document.get("prompts")
        if prompts is None:
            raise MissingPromptsError("Unable to extract prompts from prompt file")
        if isinstance(prompts, dict) and prompts.get("user") is None:
            raise MissingUserPromptError("No user prompt template was provided in the prompt file")

        try:
            prompt_file = cls.model_validate(document)
        except ValidationError as e:
            raise PromptParseError(f"Unable to parse prompt file: {e}") from e

        if not prompt_file.name:
            prompt_file.name = name

        prompt_file._validate_output_schema()

        declared_name = prompt_file.name
        prompt_file.name = clean_name(declared_name)
        if not prompt_file.name:
            raise EmptyPromptNameError(
                f"The prompt file name '{declared_name}' is empty after removing invalid characters"
            )

        prompt_file._validate_parameter_declarations()

        logger.debug(f"Loaded prompt file '{prompt_file.name}' version {prompt_file.version}")
        return prompt_file

    def _validate_output_schema(self) -> None:
        output = self.config.output
        if output.json_schema is None:
            return

        schema = json.loads(output.schema_document)
        if not isinstance(schema, (dict, bool)):
            raise InvalidOutputSchemaError(
                f"The output schema must be an object or a boolean, got {type(schema).__name__}"
            )

        try:
            validator_for(schema).check_schema(schema)
        except SchemaError as e:
            raise InvalidOutputSchemaError(f"The output schema is not a valid JSON Schema: {e.message}") from e

    def _validate_parameter_declarations(self) -> None:
        for parameter, type_name in self.config.input.parameters.items():
            if ParameterType.parse(type_name) is None:
                raise InvalidParameterDeclarationError(
                    f"The provided data type for '{parameter}' is not a valid type, should be {_VALID_TYPE_NAMES}"
                )

    # Prompt generation

    def _resolve(self, values: dict[str, Any] | None) -> dict[str, Any]:
        input_schema = self.config.input
        return resolve_parameters(input_schema.parameters, input_schema.defaults, values)

    def get_system_prompt(self, values: dict[str, Any] | None = None) -> str:
        """Render the system prompt.

        For JSON output, when neither template mentions JSON (in any case),
        ``JSON_RESPONSE_REQUEST`` is appended so the model is told to answer
        in JSON. Returns an empty string when there is no system template and
        no request had to be added.

        Args:
            values: Parameter values; declared defaults fill the gaps.

        Raises:
            MissingParameterError: A required parameter has no value.
            InvalidParameterTypeError: A value does not match its declared type.
            PromptRenderError: The template cannot be parsed or rendered.
        """
        resolved = self._resolve(values)
        system = self.prompts.system or ""

        if (
            self.config.output.format is OutputFormat.JSON
            and "json" not in system.lower()
            and "json" not in self.prompts.user.lower()
        ):
            system = f"{system} {JSON_RESPONSE_REQUEST}" if system else JSON_RESPONSE_REQUEST

        return render_template(system, resolved, name="system prompt")

    def get_user_prompt(self, values: dict[str, Any] | None = None) -> str:
        """Render the user prompt.

        Args:
            values: Parameter values; declared defaults fill the gaps.

        Raises:
            MissingParameterError: A required parameter has no value.
            InvalidParameterTypeError: A value does not match its declared type.
            TemplateParseError: The user template has invalid syntax.
            PromptRenderError: Rendering failed.
        """
        resolved = self._resolve(values)
        return render_template(self.prompts.user, resolved, name="user prompt")

    # Serialization

    def to_document(self) -> str:
        """Serialize to ``.prompt`` YAML.

        Null values and empty collections are left out and multi-line strings
        are written as literal block scalars. Loading the result gives back an
        equivalent PromptFile.
        """
        yaml = YAML()
        yaml.indent(mapping=2, sequence=4, offset=2)
        stream = StringIO()
        yaml.dump(_to_yaml_tree(self.model_dump(by_alias=True)), stream)
        return stream.getvalue()

    def to_file(self, path: str | Path) -> None:
        """Write ``to_document()`` to ``path`` (UTF-8)."""
        Path(path).write_text(self.to_document(), encoding="utf-8")


def _parse_document(content: str) -> dict[str, Any]:
    yaml = YAML(typ="safe", pure=True)
    try:
        document = yaml.load(content)
    except YAMLError as e:
        raise PromptParseError(f"Unable to parse prompt file: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise PromptParseError(
            f"Unable to parse prompt file: expected a mapping at the top level, got {type(document).__name__}"
        )
    return document


def _to_yaml_tree(value: Any) -> Any:
    if isinstance(value, dict):
        mapping = CommentedMap()
        for key, item in value.items():
            mapping[key] = _to_yaml_tree(item)
        return mapping
    if isinstance(value, list):
        return CommentedSeq(_to_yaml_tree(item) for item in value)
    if isinstance(value, str) and "\n" in value and _fits_literal_block(value):
        return LiteralScalarString(value)
    return value


def _fits_literal_block(value: str) -> bool:
    # Literal blocks normalize line breaks and cannot escape control characters.
    return all(ch in "\n\t" or ch.isprintable() for ch in value)


__all__ = ["JSON_RESPONSE_REQUEST", "PromptFile"]
