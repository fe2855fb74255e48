"""Directory-backed prompt store.

Layout:
    {path}/{name}.prompt           <- one prompt document per file
    {path}/{subdir}/{name}.prompt  <- subdirectories are searched too

The extension is matched case-insensitively on load. Files and directories
that cannot be read are skipped with a warning; files that can be read but
fail validation raise.
"""

import os
from collections.abc import Iterator
from pathlib import Path

from dotprompt_core.exceptions import InvalidStorePathError, MissingSaveNameError
from dotprompt_core.logging import get_logger
from dotprompt_core.prompt_file import PromptFile
from dotprompt_core.settings import settings

logger = get_logger(__name__)

PROMPT_FILE_EXTENSION = ".prompt"


class FilePromptStore:
    """Loads and saves ``.prompt`` files under a directory.

    @public

    Example:
        >>> store = FilePromptStore("prompts")
        >>> names = [prompt_file.name for prompt_file in store.load()]
    """

    def __init__(self, path: str | Path | None = None) -> None:
        """Create a store over ``path``, or ``settings.prompts_dir`` when omitted.

        Raises:
            InvalidStorePathError: If the directory does not exist.
        """
        self._path = Path(path) if path is not None else settings.prompts_dir
        if not self._path.is_dir():
            raise InvalidStorePathError(f"The specified path does not exist: {self._path}")

    @property
    def path(self) -> Path:
        """Directory this store reads from and writes to."""
        return self._path

    def load(self) -> Iterator[PromptFile]:
        """Parse every ``.prompt`` file below the store directory.

        Directories and files are visited in sorted order so results are
        stable across platforms. The file name (without extension) is the
        fallback prompt name.

        Raises:
            DotPromptError: If a readable file is not a valid prompt file.
        """
        for file_path in self._iter_prompt_paths():
            if not os.access(file_path, os.R_OK):
                logger.warning(f"Skipping unreadable prompt file: {file_path}")
                continue

            logger.debug(f"Loading prompt file {file_path}")
            yield PromptFile.from_file(file_path)

    def _iter_prompt_paths(self) -> Iterator[Path]:
        def on_error(error: OSError) -> None:
            logger.warning(f"Skipping inaccessible directory: {error.filename}")

        for root, dirs, files in os.walk(self._path, onerror=on_error):
            dirs.sort()
            for file_name in sorted(files):
                if file_name.lower().endswith(PROMPT_FILE_EXTENSION):
                    yield Path(root) / file_name

    def save(self, prompt_file: PromptFile, name: str | None = None) -> Path:
        """Write a prompt file to ``{path}/{name}.prompt``.

        Args:
            prompt_file: The prompt file to write.
            name: File name to use; defaults to the prompt file's own name.
                  A trailing ``.prompt`` extension is accepted and not doubled.

        Returns:
            The path that was written.

        Raises:
            MissingSaveNameError: If neither ``name`` nor ``prompt_file.name`` is set.
        """
        name = name or prompt_file.name
        if name and name.lower().endswith(PROMPT_FILE_EXTENSION):
            name = name[: -len(PROMPT_FILE_EXTENSION)]
        if not name:
            raise MissingSaveNameError("A name must be provided for the prompt file")

        target = self._path / f"{name}{PROMPT_FILE_EXTENSION}"
        prompt_file.to_file(target)
        logger.info(f"Saved prompt file '{prompt_file.name}' to {target}")
        return target


__all__ = ["PROMPT_FILE_EXTENSION", "FilePromptStore"]
