"""Tests for PromptFile loading, rendering and serialization."""

import io
from datetime import datetime, timezone
from pathlib import Path

import pytest

from dotprompt_core.exceptions import (
    DotPromptError,
    EmptyPromptNameError,
    InvalidOutputSchemaError,
    InvalidParameterDeclarationError,
    InvalidParameterTypeError,
    MissingParameterError,
    MissingPromptsError,
    MissingUserPromptError,
    PromptParseError,
    PromptSourceNotFoundError,
    StreamNotReadableError,
    TemplateParseError,
)
from dotprompt_core.prompt_file import JSON_RESPONSE_REQUEST, OutputFormat, PromptFile

BASIC_USER_PROMPT = (
    "I am looking at going on holiday to Malta and would like to know more about it, what can you tell me?\n"
)


def _json_prompt(system: str | None, user: str) -> PromptFile:
    prompt_file = PromptFile.from_string("json", "config:\n  output:\n    format: json\nprompts:\n  user: placeholder\n")
    prompt_file.prompts.system = system
    prompt_file.prompts.user = user
    return prompt_file


class TestFromFile:
    """Test loading prompt files from disk."""

    def test_basic(self, fixtures_dir: Path) -> None:
        """Test every section of a complete prompt file is loaded."""
        prompt_file = PromptFile.from_file(fixtures_dir / "basic.prompt")

        assert prompt_file.name == "basic"
        assert prompt_file.model == "gpt-4o"
        assert prompt_file.version == 1
        assert prompt_file.config.temperature == 0.9
        assert prompt_file.config.max_tokens == 500
        assert prompt_file.config.output_format is OutputFormat.TEXT
        assert prompt_file.config.input.parameters == {"country": "string", "style?": "string"}
        assert prompt_file.config.input.defaults == {"country": "Malta"}
        assert prompt_file.prompts.system is not None
        assert prompt_file.prompts.system.startswith("You are a helpful AI assistant")
        assert prompt_file.few_shots == []

    def test_accepts_string_path(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(str(fixtures_dir / "basic.prompt"))
        assert prompt_file.name == "basic"

    def test_declared_name_is_cleaned(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "basic-fsp.prompt")
        assert prompt_file.name == "capital-cities"

    def test_few_shots(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "basic-fsp.prompt")

        assert len(prompt_file.few_shots) == 3
        assert prompt_file.few_shots[0].user == "What is the capital of France?"
        assert prompt_file.few_shots[0].response == "Paris"
        assert [pair.response for pair in prompt_file.few_shots] == ["Paris", "Berlin", "Rome"]

    def test_json_schema(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "json-schema.prompt")
        output = prompt_file.config.output

        assert output.format is OutputFormat.JSON_SCHEMA
        assert isinstance(output.json_schema, dict)
        assert output.json_schema["required"] == ["capital", "population"]
        assert '"additionalProperties":false' in output.schema_document

    def test_legacy_output_format(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "legacy-output-format.prompt")

        assert prompt_file.config.output.format is OutputFormat.JSON
        assert prompt_file.config.output_format is OutputFormat.JSON

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(PromptSourceNotFoundError, match="The specified file does not exist"):
            PromptFile.from_file(tmp_path / "missing.prompt")

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        with pytest.raises(PromptSourceNotFoundError):
            PromptFile.from_file(tmp_path)

    def test_unopenable_file(self, fixtures_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def deny(*args: object, **kwargs: object) -> None:
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("dotprompt_core.prompt_file.prompt_file.open", deny, raising=False)

        with pytest.raises(StreamNotReadableError, match="Unable to open prompt file"):
            PromptFile.from_file(fixtures_dir / "basic.prompt")

    def test_missing_prompts(self, fixtures_dir: Path) -> None:
        with pytest.raises(MissingPromptsError, match="Unable to extract prompts from prompt file"):
            PromptFile.from_file(fixtures_dir / "invalid-file.prompt")

    def test_missing_user_prompt(self, fixtures_dir: Path) -> None:
        with pytest.raises(MissingUserPromptError, match="No user prompt template was provided in the prompt file"):
            PromptFile.from_file(fixtures_dir / "missing-user-prompt.prompt")

    def test_broken_yaml(self, fixtures_dir: Path) -> None:
        """Test YAML syntax errors are reported as PromptParseError with the parser error chained."""
        with pytest.raises(PromptParseError, match="Unable to parse prompt file") as exc_info:
            PromptFile.from_file(fixtures_dir / "basic-broken.prompt")

        assert exc_info.value.__cause__ is not None

    def test_invalid_parameter_type(self, fixtures_dir: Path) -> None:
        with pytest.raises(InvalidParameterDeclarationError) as exc_info:
            PromptFile.from_file(fixtures_dir / "invalid-params.prompt")

        assert str(exc_info.value) == (
            "The provided data type for 'oops' is not a valid type, should be string, number, bool, datetime, object"
        )

    def test_errors_share_base_class(self, fixtures_dir: Path) -> None:
        for file_name in ["invalid-file.prompt", "missing-user-prompt.prompt", "basic-broken.prompt"]:
            with pytest.raises(DotPromptError):
                PromptFile.from_file(fixtures_dir / file_name)


class TestFromStream:
    """Test loading prompt files from streams."""

    def test_text_stream(self) -> None:
        stream = io.StringIO("prompts:\n  user: Hello\n")
        prompt_file = PromptFile.from_stream("From Stream", stream)

        assert prompt_file.name == "from-stream"
        assert prompt_file.prompts.user == "Hello"

    def test_binary_stream(self, fixtures_dir: Path) -> None:
        with open(fixtures_dir / "basic.prompt", "rb") as f:
            prompt_file = PromptFile.from_stream("basic", f)

        assert prompt_file.config.input.defaults == {"country": "Malta"}

    def test_utf8_bom(self) -> None:
        stream = io.BytesIO(b"\xef\xbb\xbfprompts:\n  user: H\xc3\xa9llo\n")
        assert PromptFile.from_stream("bom", stream).prompts.user == "Héllo"

    def test_closed_stream(self) -> None:
        stream = io.StringIO("prompts:\n  user: Hello\n")
        stream.close()

        with pytest.raises(StreamNotReadableError, match="Stream is not in a readable state"):
            PromptFile.from_stream("closed", stream)

    def test_write_only_stream(self, tmp_path: Path) -> None:
        with open(tmp_path / "out.prompt", "w", encoding="utf-8") as f:
            with pytest.raises(StreamNotReadableError):
                PromptFile.from_stream("write-only", f)

    def test_invalid_utf8(self) -> None:
        with pytest.raises(PromptParseError):
            PromptFile.from_stream("bad", io.BytesIO(b"prompts:\n  user: \xff\xfe\n"))

    def test_read_failure(self) -> None:
        """Test an I/O error while reading surfaces as a library error."""

        class BrokenStream(io.StringIO):
            def read(self, size: int | None = -1) -> str:
                raise OSError(5, "Input/output error")

        with pytest.raises(StreamNotReadableError, match="Unable to read prompt stream") as exc_info:
            PromptFile.from_stream("broken", BrokenStream())

        assert isinstance(exc_info.value.__cause__, OSError)


class TestFromString:
    """Test the load pipeline on inline documents."""

    def test_name_fallback(self) -> None:
        prompt_file = PromptFile.from_string("Fallback Name", "prompts:\n  user: Hello\n")
        assert prompt_file.name == "fallback-name"

    def test_declared_name_wins(self) -> None:
        prompt_file = PromptFile.from_string("fallback", "name: Declared\nprompts:\n  user: Hello\n")
        assert prompt_file.name == "declared"

    def test_empty_name_after_cleaning(self) -> None:
        with pytest.raises(EmptyPromptNameError, match=r"'\?\?\?'"):
            PromptFile.from_string("fallback", "name: '???'\nprompts:\n  user: Hello\n")

    def test_empty_fallback_name(self) -> None:
        with pytest.raises(EmptyPromptNameError):
            PromptFile.from_string("", "prompts:\n  user: Hello\n")

    def test_version(self) -> None:
        prompt_file = PromptFile.from_string("versioned", "version: 3\nprompts:\n  user: Hello\n")
        assert prompt_file.version == 3

    def test_empty_document(self) -> None:
        with pytest.raises(MissingPromptsError):
            PromptFile.from_string("empty", "")

    def test_top_level_list(self) -> None:
        with pytest.raises(PromptParseError, match="expected a mapping"):
            PromptFile.from_string("list", "- one\n- two\n")

    def test_prompts_wrong_shape(self) -> None:
        """Test model validation failures are reported as PromptParseError."""
        with pytest.raises(PromptParseError) as exc_info:
            PromptFile.from_string("shape", "prompts: just a string\n")

        assert exc_info.value.__cause__ is not None

    def test_unknown_keys_ignored(self) -> None:
        prompt_file = PromptFile.from_string("extra", "author: someone\nprompts:\n  user: Hello\n  notes: x\n")
        assert prompt_file.prompts.user == "Hello"

    def test_null_values_treated_as_absent(self) -> None:
        prompt_file = PromptFile.from_string("nulls", "model: null\nconfig: null\nfewShots: null\nprompts:\n  user: Hi\n")

        assert prompt_file.model is None
        assert prompt_file.few_shots == []
        assert prompt_file.config.output.format is OutputFormat.TEXT

    def test_bytes_content(self) -> None:
        prompt_file = PromptFile.from_string("bytes", b"prompts:\n  user: Hello\n")
        assert prompt_file.prompts.user == "Hello"

    def test_parameter_types_case_insensitive(self) -> None:
        document = "config:\n  input:\n    parameters:\n      count: Number\nprompts:\n  user: '{{ count }}'\n"
        prompt_file = PromptFile.from_string("case", document)
        assert prompt_file.get_user_prompt({"count": 3}) == "3"

    def test_invalid_schema(self) -> None:
        """Test an invalid JSON Schema is rejected at load time."""
        document = "config:\n  output:\n    format: jsonSchema\n    schema:\n      type: 12\nprompts:\n  user: Hi\n"

        with pytest.raises(InvalidOutputSchemaError) as exc_info:
            PromptFile.from_string("schema", document)

        assert exc_info.value.__cause__ is not None

    def test_schema_must_be_object(self) -> None:
        document = "config:\n  output:\n    schema:\n      - one\nprompts:\n  user: Hi\n"
        with pytest.raises(InvalidOutputSchemaError):
            PromptFile.from_string("schema", document)

    def test_empty_schema_accepted(self) -> None:
        document = "config:\n  output:\n    format: jsonSchema\n    schema: {}\nprompts:\n  user: Hi\n"
        prompt_file = PromptFile.from_string("schema", document)
        assert prompt_file.config.output.schema_document == '{"additionalProperties":false}'


class TestGetUserPrompt:
    """Test user prompt rendering."""

    def test_defaults_used(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "basic.prompt")
        assert prompt_file.get_user_prompt() == BASIC_USER_PROMPT

    def test_values_used(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "basic.prompt")
        result = prompt_file.get_user_prompt({"country": "Japan", "style": "pirate"})

        assert result == (
            "I am looking at going on holiday to Japan and would like to know more about it, what can you tell me?\n"
            "Can you answer in the style of a pirate\n"
        )

    def test_missing_required_parameter(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "required-parameters.prompt")

        with pytest.raises(MissingParameterError, match="'name'"):
            prompt_file.get_user_prompt()
        assert prompt_file.get_user_prompt({"name": "Ada"}) == "Hello Ada"

    def test_invalid_template(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "invalid-template.prompt")

        with pytest.raises(TemplateParseError, match="Unable to parse the user prompt template"):
            prompt_file.get_user_prompt({"country": "Malta"})

    def test_parameter_types(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "param-types.prompt")
        values = {
            "param1": "text",
            "param2": 42,
            "param3": True,
            "param4": datetime(2024, 5, 1, tzinfo=timezone.utc),
            "param5": {"key": "value"},
        }

        assert prompt_file.get_user_prompt(values) == "text 42 True {'key': 'value'}"

    @pytest.mark.parametrize("value", [1, -1, 2**63, 0.5, 1e300])
    def test_number_accepts_any_numeric_value(self, fixtures_dir: Path, value: float) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "param-types.prompt")
        values = {
            "param1": "text",
            "param2": value,
            "param3": False,
            "param4": datetime.now(timezone.utc),
            "param5": [1],
        }
        prompt_file.get_user_prompt(values)

    def test_number_rejects_string(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "param-types.prompt")
        values = {
            "param1": "text",
            "param2": "42",
            "param3": True,
            "param4": datetime.now(timezone.utc),
            "param5": {},
        }

        with pytest.raises(InvalidParameterTypeError, match="'param2' is not a valid numeric type"):
            prompt_file.get_user_prompt(values)

    def test_values_not_mutated(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "basic.prompt")
        values = {"style": "poet"}

        prompt_file.get_user_prompt(values)

        assert values == {"style": "poet"}


class TestGetSystemPrompt:
    """Test system prompt rendering and the JSON response request."""

    def test_text_format_unchanged(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "basic.prompt")
        assert prompt_file.get_system_prompt() == prompt_file.prompts.system

    def test_json_request_appended(self) -> None:
        prompt_file = _json_prompt("You are a helpful assistant", "List three colours")
        assert prompt_file.get_system_prompt() == f"You are a helpful assistant {JSON_RESPONSE_REQUEST}"

    def test_json_request_without_system_prompt(self) -> None:
        prompt_file = _json_prompt(None, "List three colours")
        assert prompt_file.get_system_prompt() == JSON_RESPONSE_REQUEST

    @pytest.mark.parametrize(
        ("system", "user"),
        [
            ("Always answer in JSON", "List three colours"),
            ("You are helpful", "List three colours as json"),
            ("Respond with a Json object", "List three colours"),
            ("Never use JSON format", "List three colours"),
        ],
    )
    def test_json_mentioned(self, system: str, user: str) -> None:
        """Test nothing is appended when either template mentions JSON in any case."""
        prompt_file = _json_prompt(system, user)
        assert prompt_file.get_system_prompt() == system

    def test_json_schema_format_not_nudged(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "json-schema.prompt")
        assert not prompt_file.get_system_prompt({"country": "Malta"}).endswith(JSON_RESPONSE_REQUEST)

    def test_system_prompt_rendered(self) -> None:
        document = (
            "config:\n  input:\n    parameters:\n      persona: string\n"
            "prompts:\n  system: You are a {{ persona }}\n  user: Hi\n"
        )
        prompt_file = PromptFile.from_string("persona", document)
        assert prompt_file.get_system_prompt({"persona": "pirate"}) == "You are a pirate"

    def test_system_prompt_validates_parameters(self, fixtures_dir: Path) -> None:
        prompt_file = PromptFile.from_file(fixtures_dir / "required-parameters.prompt")
        with pytest.raises(MissingParameterError):
            prompt_file.get_system_prompt()

    def test_no_system_prompt(self) -> None:
        prompt_file = PromptFile.from_string("plain", "prompts:\n  user: Hi\n")
        assert prompt_file.get_system_prompt() == ""


class TestSerialization:
    """Test writing prompt files back to YAML."""

    @pytest.mark.parametrize(
        "file_name",
        ["basic.prompt", "basic-fsp.prompt", "json-schema.prompt", "legacy-output-format.prompt", "param-types.prompt"],
    )
    def test_round_trip(self, fixtures_dir: Path, file_name: str) -> None:
        """Test loading a serialized prompt file gives an equivalent prompt file."""
        original = PromptFile.from_file(fixtures_dir / file_name)
        reloaded = PromptFile.from_string("ignored", original.to_document())

        assert reloaded.model_dump() == original.model_dump()

    @pytest.mark.parametrize(
        "template",
        ["line1\r\nline2", "line1\rline2\n", "line1\u2028line2\nline3"],
    )
    def test_round_trip_preserves_line_breaks(self, template: str) -> None:
        original = PromptFile.from_string("breaks", "prompts:\n  user: placeholder\n")
        original.prompts.user = template

        reloaded = PromptFile.from_string("ignored", original.to_document())

        assert reloaded.prompts.user == template

    def test_plain_multiline_uses_literal_block(self) -> None:
        prompt_file = PromptFile.from_string("plain", "prompts:\n  user: placeholder\n")
        prompt_file.prompts.user = "line1\nline2\n"

        assert "user: |" in prompt_file.to_document()

    def test_document_layout(self, fixtures_dir: Path) -> None:
        document = PromptFile.from_file(fixtures_dir / "basic.prompt").to_document()

        assert document.startswith("name: basic\n")
        assert "maxTokens: 500" in document
        assert "default:" in document
        assert "  user: |" in document
        assert "fewShots" not in document

    def test_legacy_format_written_as_output(self, fixtures_dir: Path) -> None:
        document = PromptFile.from_file(fixtures_dir / "legacy-output-format.prompt").to_document()

        assert "outputFormat" not in document
        assert "format: json" in document

    def test_to_file(self, fixtures_dir: Path, tmp_path: Path) -> None:
        original = PromptFile.from_file(fixtures_dir / "basic-fsp.prompt")
        target = tmp_path / "copy.prompt"

        original.to_file(target)
        reloaded = PromptFile.from_file(target)

        assert reloaded.name == "capital-cities"
        assert reloaded.model_dump() == original.model_dump()
