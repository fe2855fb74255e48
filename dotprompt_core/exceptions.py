"""Exception hierarchy for DotPrompt Core.

This module defines the exception hierarchy used throughout the DotPrompt Core library.
All exceptions inherit from DotPromptError, providing a consistent error handling interface.
Errors raised while wrapping a third-party diagnostic (YAML parser, pydantic, jsonschema,
Jinja2) are chained so the original error stays available as ``__cause__``.
"""


class DotPromptError(Exception):
    """Base exception for all DotPrompt Core errors."""


# Loading


class PromptSourceError(DotPromptError):
    """Raised when a prompt source cannot be accessed before parsing begins."""


class PromptSourceNotFoundError(PromptSourceError):
    """Raised when the prompt file does not exist."""


class StreamNotReadableError(PromptSourceError):
    """Raised when a prompt stream or file cannot be opened or read."""


class PromptParseError(DotPromptError):
    """Raised when the prompt document is not valid YAML or does not fit the prompt file model."""


class PromptStructureError(DotPromptError):
    """Base exception for prompt documents missing a mandatory section."""


class MissingPromptsError(PromptStructureError):
    """Raised when the document has no ``prompts`` section."""


class MissingUserPromptError(PromptStructureError):
    """Raised when the ``prompts`` section has no user template."""


class PromptValidationError(DotPromptError):
    """Base exception for prompt documents that parse but fail validation."""


class InvalidOutputSchemaError(PromptValidationError):
    """Raised when the output schema is not a valid JSON Schema."""


class EmptyPromptNameError(PromptValidationError):
    """Raised when the prompt name is empty after cleaning."""


class InvalidParameterDeclarationError(PromptValidationError):
    """Raised when a declared parameter uses an unknown type."""


# Rendering


class ParameterError(DotPromptError):
    """Base exception for problems with the values supplied to a prompt."""

    def __init__(self, message: str, parameter: str) -> None:
        super().__init__(message)
        self.parameter = parameter


class MissingParameterError(ParameterError):
    """Raised when a required parameter has neither a supplied value nor a default."""


class InvalidParameterTypeError(ParameterError):
    """Raised when a parameter value does not match its declared type."""

    def __init__(self, message: str, parameter: str, expected: str) -> None:
        super().__init__(message, parameter)
        self.expected = expected


class PromptRenderError(DotPromptError):
    """Raised when Jinja2 template rendering fails."""


class TemplateParseError(PromptRenderError):
    """Raised when a prompt template has invalid syntax."""


class OutputFormatError(DotPromptError):
    """Base exception for output configurations that cannot be turned into request options."""


class UnsupportedOutputFormatError(OutputFormatError):
    """Raised when the output format is not recognized."""


class MissingOutputSchemaError(OutputFormatError):
    """Raised when a JSON Schema output format is requested without a schema."""


# Registry and storage


class PromptRegistryError(DotPromptError):
    """Base exception for prompt manager errors."""


class DuplicatePromptFileError(PromptRegistryError):
    """Raised when two prompt files share the same name and version."""

    def __init__(self, message: str, name: str, version: int) -> None:
        super().__init__(message)
        self.name = name
        self.version = version


class PromptNotFoundError(PromptRegistryError):
    """Raised when no loaded prompt file matches the requested name (and version)."""

    def __init__(self, message: str, name: str, version: int | None = None) -> None:
        super().__init__(message)
        self.name = name
        self.version = version


class PromptStoreError(DotPromptError):
    """Base exception for prompt store errors."""


class InvalidStorePathError(PromptStoreError):
    """Raised when the prompt store directory does not exist."""


class MissingSaveNameError(PromptStoreError):
    """Raised when a prompt file is saved without any usable name."""
