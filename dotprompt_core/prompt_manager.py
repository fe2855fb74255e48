"""Versioned registry of loaded prompt files.

@public

A PromptManager drains a prompt store once, at construction, and keeps the
result keyed by (name, version). The key set never changes afterwards, so
lookups from any number of threads need no locking.

Example:
    >>> manager = PromptManager("prompts")
    >>> latest = manager.get_prompt_file("basic")
    >>> first = manager.get_prompt_file("basic", version=1)
"""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from dotprompt_core.exceptions import DuplicatePromptFileError, PromptNotFoundError
from dotprompt_core.logging import get_logger
from dotprompt_core.prompt_file import PromptFile
from dotprompt_core.prompt_store import FilePromptStore, PromptStore

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PromptFileIdentifier:
    """Registry key for a prompt file."""

    name: str
    version: int


class PromptManager:
    """Read-only registry of prompt files, loaded from a store.

    @public

    Args:
        store: Where to load prompt files from. A PromptStore is used as-is,
               a path is wrapped in a FilePromptStore, and None means a
               FilePromptStore over ``settings.prompts_dir``.

    Raises:
        DuplicatePromptFileError: If two prompt files share a name and version.
            Nothing is registered in that case.
        InvalidStorePathError: If a directory is given (or defaulted) that does not exist.
    """

    def __init__(self, store: PromptStore | str | Path | None = None) -> None:
        if store is None or isinstance(store, (str, Path)):
            store = FilePromptStore(store)
        self._store = store

        prompt_files: dict[PromptFileIdentifier, PromptFile] = {}
        for prompt_file in store.load():
            key = PromptFileIdentifier(prompt_file.name, prompt_file.version)
            if key in prompt_files:
                raise DuplicatePromptFileError(
                    f"Unable to add prompt file with name '{prompt_file.name}' and version {prompt_file.version} "
                    "as a duplicate exists",
                    name=prompt_file.name,
                    version=prompt_file.version,
                )
            prompt_files[key] = prompt_file

        self._prompt_files = MappingProxyType(prompt_files)
        logger.info(f"Loaded {len(prompt_files)} prompt files from {type(store).__name__}")

    @property
    def store(self) -> PromptStore:
        """The store this manager was loaded from."""
        return self._store

    def get_prompt_file(self, name: str, version: int | None = None) -> PromptFile:
        """Look up a prompt file by name, and optionally by version.

        Args:
            name: Cleaned prompt name.
            version: Exact version to return. When None, the highest
                     loaded version of ``name`` is returned.

        Raises:
            PromptNotFoundError: If nothing matches.
        """
        if version is not None:
            prompt_file = self._prompt_files.get(PromptFileIdentifier(name, version))
            if prompt_file is None:
                raise PromptNotFoundError(
                    "No prompt file with that name and version has been loaded", name=name, version=version
                )
            return prompt_file

        candidates = [key for key in self._prompt_files if key.name == name]
        if not candidates:
            raise PromptNotFoundError("No prompt file with that name has been loaded", name=name)
        return self._prompt_files[max(candidates, key=lambda key: key.version)]

    def list_prompt_file_names(self) -> list[str]:
        """Distinct prompt names in ascending order."""
        return sorted({key.name for key in self._prompt_files})

    def list_prompt_file_names_with_versions(self) -> list[str]:
        """``name:version`` entries, by name ascending then version descending."""
        keys = sorted(self._prompt_files, key=lambda key: (key.name, -key.version))
        return [f"{key.name}:{key.version}" for key in keys]

    def __len__(self) -> int:
        return len(self._prompt_files)

    def __contains__(self, name: object) -> bool:
        return any(key.name == name for key in self._prompt_files)


__all__ = ["PromptFileIdentifier", "PromptManager"]
