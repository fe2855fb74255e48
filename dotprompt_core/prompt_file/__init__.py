"""Prompt file model, validation and rendering.

@public

Key components:
    PromptFile: A validated ``.prompt`` document with prompt rendering
    clean_name: Name normalization used for prompt identities
    resolve_parameters: Merge caller values with defaults and type-check them
    render_template: Sandboxed Jinja2 rendering
"""

from .naming import clean_name
from .parameters import OPTIONAL_MARKER, check_parameter_type, resolve_parameters
from .prompt_file import JSON_RESPONSE_REQUEST, PromptFile
from .templating import render_template
from .types import (
    FewShotPair,
    InputSchema,
    Output,
    OutputFormat,
    ParameterType,
    PromptConfig,
    Prompts,
)

__all__ = [
    "JSON_RESPONSE_REQUEST",
    "OPTIONAL_MARKER",
    "FewShotPair",
    "InputSchema",
    "Output",
    "OutputFormat",
    "ParameterType",
    "PromptConfig",
    "PromptFile",
    "Prompts",
    "check_parameter_type",
    "clean_name",
    "render_template",
    "resolve_parameters",
]
