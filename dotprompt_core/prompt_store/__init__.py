"""Prompt store protocol and backends.

@public
"""

from .file_store import PROMPT_FILE_EXTENSION, FilePromptStore
from .memory import MemoryPromptStore
from .protocol import PromptStore

__all__ = [
    "PROMPT_FILE_EXTENSION",
    "FilePromptStore",
    "MemoryPromptStore",
    "PromptStore",
]
