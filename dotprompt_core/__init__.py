"""DotPrompt Core - versioned, validated prompt files for LLM applications.

@public

A ``.prompt`` file is a YAML document that bundles everything needed for one
kind of model request: a name and version, the target model, typed input
parameters with defaults, the expected output format (text, JSON or
JSON-Schema constrained JSON), Jinja2 system and user templates, and optional
few-shot examples.

Core Capabilities:
    - **Validation on load**: YAML syntax, required sections, JSON Schema and
      parameter declarations are all checked before a PromptFile is returned
    - **Typed parameters**: caller values are merged with defaults and
      type-checked before rendering
    - **Sandboxed templating**: prompts are rendered with Jinja2's sandbox
    - **Versioned registry**: PromptManager serves the latest or an exact
      version of every prompt in a directory
    - **OpenAI adapter**: chat messages and request options built from a prompt

Quick Start:
    >>> from dotprompt_core import PromptManager
    >>> from dotprompt_core.llm import to_chat_messages, to_completion_options
    >>>
    >>> manager = PromptManager("prompts")
    >>> prompt_file = manager.get_prompt_file("basic")
    >>> messages = to_chat_messages(prompt_file, {"country": "Japan"})
    >>> options = to_completion_options(prompt_file)

Environment Variables:
    - DOTPROMPT_PROMPTS_DIR: Default prompt directory (default: prompts)
    - DOTPROMPT_LOGGING_CONFIG: Path to a YAML logging configuration
    - DOTPROMPT_LOG_LEVEL: Log level for the library loggers
"""

from . import llm
from .exceptions import (
    DotPromptError,
    DuplicatePromptFileError,
    InvalidParameterTypeError,
    MissingParameterError,
    PromptNotFoundError,
    PromptParseError,
    PromptRenderError,
    TemplateParseError,
)
from .logging import get_logger, setup_logging
from .prompt_file import (
    FewShotPair,
    InputSchema,
    Output,
    OutputFormat,
    ParameterType,
    PromptConfig,
    PromptFile,
    Prompts,
    clean_name,
)
from .prompt_manager import PromptFileIdentifier, PromptManager
from .prompt_store import FilePromptStore, MemoryPromptStore, PromptStore
from .settings import settings

__version__ = "0.1.0"

__all__ = [
    "DotPromptError",
    "DuplicatePromptFileError",
    "FewShotPair",
    "FilePromptStore",
    "InputSchema",
    "InvalidParameterTypeError",
    "MemoryPromptStore",
    "MissingParameterError",
    "Output",
    "OutputFormat",
    "ParameterType",
    "PromptConfig",
    "PromptFile",
    "PromptFileIdentifier",
    "PromptManager",
    "PromptNotFoundError",
    "PromptParseError",
    "PromptRenderError",
    "PromptStore",
    "Prompts",
    "TemplateParseError",
    "clean_name",
    "get_logger",
    "llm",
    "settings",
    "setup_logging",
]
