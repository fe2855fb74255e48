#!/usr/bin/env python3
"""Showcase of dotprompt_core features.

This example walks through the public API:
  • Settings and logging setup
  • PromptManager over a directory of .prompt files (latest and exact versions)
  • Rendering system and user prompts with typed parameters and defaults
  • Building OpenAI chat-completion messages and request options
  • Saving a prompt file back to disk with FilePromptStore

Prerequisites:
  - A directory of .prompt files (tests/fixtures/prompts works)
  - Optional: OPENAI_API_KEY to actually send the request (--send)

Usage:
  python examples/showcase.py tests/fixtures/prompts basic --var country=Japan
  python examples/showcase.py tests/fixtures/prompts greeting --send
"""

import argparse
import json
import sys
import tempfile
from pathlib import Path

from openai import OpenAI

from dotprompt_core import DotPromptError, FilePromptStore, PromptManager, get_logger, settings, setup_logging
from dotprompt_core.llm import to_chat_messages, to_completion_options

logger = get_logger("dotprompt_core.showcase")


def parse_var(raw: str) -> tuple[str, object]:
    key, _, value = raw.partition("=")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def main() -> int:
    parser = argparse.ArgumentParser(description="dotprompt_core showcase")
    parser.add_argument("prompts_dir", type=Path, nargs="?", default=settings.prompts_dir)
    parser.add_argument("name", nargs="?", default="basic")
    parser.add_argument("--version", type=int, default=None)
    parser.add_argument("--var", type=parse_var, action="append", default=[])
    parser.add_argument("--send", action="store_true", help="Send the request with the OpenAI client")
    args = parser.parse_args()

    setup_logging(level="DEBUG")

    try:
        manager = PromptManager(args.prompts_dir)
    except DotPromptError as e:
        logger.error(f"Could not load prompts: {e}")
        return 1

    print("Loaded prompt files:")
    for entry in manager.list_prompt_file_names_with_versions():
        print(f"  {entry}")

    prompt_file = manager.get_prompt_file(args.name, args.version)
    values = dict(args.var)

    print(f"\n=== {prompt_file.name} v{prompt_file.version} ===")
    print(f"System prompt:\n{prompt_file.get_system_prompt(values)}")
    print(f"User prompt:\n{prompt_file.get_user_prompt(values)}")

    messages = to_chat_messages(prompt_file, values)
    options = to_completion_options(prompt_file)
    print("\nChat messages:")
    print(json.dumps(messages, indent=2))
    print("Request options:")
    print(json.dumps(options, indent=2))

    with tempfile.TemporaryDirectory() as tmp:
        target = FilePromptStore(tmp).save(prompt_file)
        print(f"\nSerialized document ({target.name}):\n{target.read_text(encoding='utf-8')}")

    if args.send:
        options.setdefault("model", "gpt-4o-mini")
        response = OpenAI().chat.completions.create(messages=messages, **options)
        print(f"Response:\n{response.choices[0].message.content}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
