"""In-memory prompt store for testing.

Prompt files are kept in a list in insertion order. Not persistent: all data
is lost when the process exits.
"""

from collections.abc import Iterable, Iterator

from dotprompt_core.exceptions import MissingSaveNameError
from dotprompt_core.prompt_file import PromptFile


class MemoryPromptStore:
    """List-based prompt store for unit tests and embedded prompt sets."""

    def __init__(self, prompt_files: Iterable[PromptFile] = ()) -> None:
        self._prompt_files: list[PromptFile] = list(prompt_files)

    def load(self) -> Iterator[PromptFile]:
        """Yield stored prompt files in insertion order."""
        yield from list(self._prompt_files)

    def save(self, prompt_file: PromptFile, name: str | None = None) -> None:
        """Append a copy of the prompt file, renamed to ``name`` when given."""
        name = name or prompt_file.name
        if not name:
            raise MissingSaveNameError("A name must be provided for the prompt file")
        self._prompt_files.append(prompt_file.model_copy(update={"name": name}, deep=True))

    def __len__(self) -> int:
        return len(self._prompt_files)
