"""Vulture whitelist: methods called by frameworks, not direct code."""

# Pydantic validators/serializers: called by Pydantic, not our code
from dotprompt_core.prompt_file.types import InputSchema, Output, OutputFormat, PromptConfig, PromptModel

PromptModel._drop_null_keys
PromptModel._omit_empty
InputSchema._stringify_type_names
Output._parse_format
Output._serialize_format
PromptConfig._migrate_output_format

# Enum hook: called by Python
OutputFormat._missing_

# Add more as vulture reports false positives
