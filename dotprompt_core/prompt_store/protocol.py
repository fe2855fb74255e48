"""Prompt store protocol.

Defines the PromptStore protocol that every prompt source must implement.
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from dotprompt_core.prompt_file import PromptFile


@runtime_checkable
class PromptStore(Protocol):
    """Protocol for prompt file sources.

    Implementations: FilePromptStore (directory of ``.prompt`` files),
    MemoryPromptStore (testing and embedding).
    """

    def load(self) -> Iterable[PromptFile]:
        """Return every prompt file in the store. May be lazy; PromptManager drains it fully."""
        ...

    def save(self, prompt_file: PromptFile, name: str | None = None) -> None:
        """Persist a prompt file, under ``name`` when given, otherwise under its own name."""
        ...
