"""OpenAI chat-completion adapter.

Builds the ``messages`` list and the request options for a chat completion
from a prompt file. Nothing here talks to the network; the results are meant
to be passed straight to ``client.chat.completions.create``::

    messages = to_chat_messages(prompt_file, {"country": "Japan"})
    response = client.chat.completions.create(messages=messages, **to_completion_options(prompt_file))
"""

import json
from collections.abc import Mapping
from typing import Any

from openai.types.chat import (
    ChatCompletionAssistantMessageParam,
    ChatCompletionMessageParam,
    ChatCompletionSystemMessageParam,
    ChatCompletionUserMessageParam,
)
from openai.types.shared_params import ResponseFormatJSONObject, ResponseFormatJSONSchema, ResponseFormatText

from dotprompt_core.exceptions import MissingOutputSchemaError, UnsupportedOutputFormatError
from dotprompt_core.prompt_file import OutputFormat, PromptFile

ResponseFormat = ResponseFormatText | ResponseFormatJSONObject | ResponseFormatJSONSchema


def to_chat_messages(prompt_file: PromptFile, values: Mapping[str, Any] | None = None) -> list[ChatCompletionMessageParam]:
    """Build the chat message list for a prompt file.

    Few-shot examples come first as user/assistant pairs, followed by the
    system message (only when the rendered system prompt is not empty) and
    finally the rendered user prompt.

    Args:
        prompt_file: Prompt to render.
        values: Parameter values for both templates.

    Raises:
        ParameterError: Missing or mistyped parameter values.
        PromptRenderError: A template failed to render.
    """
    values = dict(values) if values else None
    messages: list[ChatCompletionMessageParam] = []

    for few_shot in prompt_file.few_shots:
        messages.append(ChatCompletionUserMessageParam(role="user", content=few_shot.user))
        messages.append(ChatCompletionAssistantMessageParam(role="assistant", content=few_shot.response))

    if system_prompt := prompt_file.get_system_prompt(values):
        messages.append(ChatCompletionSystemMessageParam(role="system", content=system_prompt))

    messages.append(ChatCompletionUserMessageParam(role="user", content=prompt_file.get_user_prompt(values)))
    return messages


def _response_format(prompt_file: PromptFile) -> ResponseFormat:
    output = prompt_file.config.output
    match output.format:
        case OutputFormat.TEXT:
            return ResponseFormatText(type="text")
        case OutputFormat.JSON:
            return ResponseFormatJSONObject(type="json_object")
        case OutputFormat.JSON_SCHEMA:
            if not output.schema_document:
                raise MissingOutputSchemaError(
                    f"Prompt file '{prompt_file.name}' uses the jsonSchema output format but defines no schema"
                )
            return ResponseFormatJSONSchema(
                type="json_schema",
                json_schema={
                    "name": prompt_file.name,
                    "schema": json.loads(output.schema_document),
                    "strict": True,
                },
            )
        case _:
            raise UnsupportedOutputFormatError(f"Output format '{output.format}' is not supported")


def to_completion_options(prompt_file: PromptFile) -> dict[str, Any]:
    """Build chat-completion request options for a prompt file.

    Returns:
        ``response_format`` always; ``model``, ``temperature`` and
        ``max_completion_tokens`` when the prompt file sets them.

    Raises:
        MissingOutputSchemaError: jsonSchema output without a schema.
        UnsupportedOutputFormatError: Unknown output format.
    """
    config = prompt_file.config
    options: dict[str, Any] = {"response_format": _response_format(prompt_file)}

    if prompt_file.model:
        options["model"] = prompt_file.model
    if config.temperature is not None:
        options["temperature"] = config.temperature
    if config.max_tokens is not None:
        options["max_completion_tokens"] = config.max_tokens

    return options


__all__ = ["to_chat_messages", "to_completion_options"]
