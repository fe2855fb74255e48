"""Core configuration settings for prompt file handling.

@public

This module provides centralized configuration management for DotPrompt Core.
Settings are loaded from environment variables with .env file support via
pydantic-settings.

Environment variables:
    DOTPROMPT_PROMPTS_DIR: Directory used by FilePromptStore() and PromptManager()
        when they are created without a path (default: "prompts")
    DOTPROMPT_TEMPLATE_CACHE_SIZE: Number of compiled templates kept in memory

Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values

Example:
    >>> from dotprompt_core.settings import settings
    >>> print(settings.prompts_dir)
    prompts

Note:
    Settings are loaded once at module import and frozen. The process must be
    restarted to pick up changes to environment variables or the .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Core configuration for DotPrompt.

    @public

    Attributes:
        prompts_dir: Default directory scanned for ``.prompt`` files.
        template_cache_size: Maximum number of parsed templates cached by the
                             renderer. Templates are keyed by their source text.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOTPROMPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    prompts_dir: Path = Path("prompts")
    template_cache_size: int = 128


settings = Settings()
"""Global settings instance for the library.

@public

Access this instance rather than creating new Settings objects.
"""
