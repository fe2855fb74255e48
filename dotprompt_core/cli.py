"""CLI tool for listing, inspecting, rendering and validating prompt files."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .exceptions import DotPromptError
from .prompt_file import PromptFile
from .prompt_manager import PromptManager
from .settings import settings


def _print_table(headers: list[str], rows: list[list[str]]) -> None:
    """Print an aligned text table."""
    if not rows:
        return
    widths = [max(len(h), *(len(row[i]) for row in rows)) for i, h in enumerate(headers)]
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths, strict=True))
    separator = "  ".join("-" * w for w in widths)
    print(header_line)
    print(separator)
    for row in rows:
        print("  ".join(val.ljust(w) for val, w in zip(row, widths, strict=True)))


def _parse_var(raw: str) -> tuple[str, Any]:
    """Parse a ``KEY=VALUE`` argument. The value is read as JSON when possible, otherwise kept as text."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got '{raw}'")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def _load_manager(directory: Path) -> PromptManager | None:
    try:
        return PromptManager(directory)
    except DotPromptError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_list(args: argparse.Namespace) -> int:
    """List the prompt files found in a directory."""
    manager = _load_manager(args.dir)
    if manager is None:
        return 1

    if not len(manager):
        print(f"No prompt files found in {args.dir}.")
        return 0

    if args.versions:
        for entry in manager.list_prompt_file_names_with_versions():
            print(entry)
        return 0

    rows: list[list[str]] = []
    for name in manager.list_prompt_file_names():
        prompt_file = manager.get_prompt_file(name)
        rows.append([name, str(prompt_file.version), prompt_file.model or "-", prompt_file.config.output.format.value])

    print(f"{len(rows)} prompt(s) found:\n")
    _print_table(["Name", "Latest", "Model", "Output"], rows)
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    """Print the serialized document of a prompt file."""
    manager = _load_manager(args.dir)
    if manager is None:
        return 1

    try:
        prompt_file = manager.get_prompt_file(args.name, args.version)
    except DotPromptError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(prompt_file.to_document(), end="")
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    """Render the system and user prompts of a prompt file."""
    manager = _load_manager(args.dir)
    if manager is None:
        return 1

    values = dict(args.var)
    try:
        prompt_file = manager.get_prompt_file(args.name, args.version)
        system_prompt = prompt_file.get_system_prompt(values)
        user_prompt = prompt_file.get_user_prompt(values)
    except DotPromptError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if system_prompt:
        print("[system]")
        print(system_prompt)
        print()
    print("[user]")
    print(user_prompt)
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    """Validate one or more prompt files."""
    failures = 0
    for path in args.paths:
        try:
            prompt_file = PromptFile.from_file(path)
        except DotPromptError as e:
            failures += 1
            print(f"FAIL  {path}: {e}")
            continue
        print(f"OK    {path} ({prompt_file.name}:{prompt_file.version})")

    if failures:
        print(f"\n{failures} of {len(args.paths)} file(s) failed validation", file=sys.stderr)
        return 1
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for prompt file operations."""
    parser = argparse.ArgumentParser(prog="dotprompt", description="Prompt file CLI")
    subparsers = parser.add_subparsers(dest="command")

    # list
    list_parser = subparsers.add_parser("list", help="List prompt files in a directory")
    list_parser.add_argument("--dir", type=Path, default=settings.prompts_dir, help="Prompt directory")
    list_parser.add_argument("--versions", action="store_true", help="List every version as name:version")

    # show
    show_parser = subparsers.add_parser("show", help="Print a prompt file document")
    show_parser.add_argument("name", help="Prompt name")
    show_parser.add_argument("--version", type=int, default=None, help="Prompt version (default: latest)")
    show_parser.add_argument("--dir", type=Path, default=settings.prompts_dir, help="Prompt directory")

    # render
    render_parser = subparsers.add_parser("render", help="Render the system and user prompts")
    render_parser.add_argument("name", help="Prompt name")
    render_parser.add_argument("--version", type=int, default=None, help="Prompt version (default: latest)")
    render_parser.add_argument(
        "--var",
        type=_parse_var,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Parameter value; parsed as JSON when possible (repeatable)",
    )
    render_parser.add_argument("--dir", type=Path, default=settings.prompts_dir, help="Prompt directory")

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate prompt files")
    validate_parser.add_argument("paths", nargs="+", type=Path, help="Prompt files to validate")

    args = parser.parse_args(argv)

    handlers = {"list": _cmd_list, "show": _cmd_show, "render": _cmd_render, "validate": _cmd_validate}
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


__all__ = ["main"]
