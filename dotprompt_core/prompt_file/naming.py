"""Prompt name normalization."""

import re

# Anything other than letters, digits, spaces, hyphens and line breaks (underscore is not a letter).
_INVALID_NAME_CHARS = re.compile(r"[^\w \r\n-]|_")
_WHITESPACE_RUN = re.compile(r"[ \r\n]+")


def clean_name(name: str) -> str:
    """Convert a display name into a lower-case, hyphen-separated slug.

    Characters other than letters, digits, spaces, hyphens and line breaks are
    removed, runs of spaces and line breaks become a single hyphen, and
    leading/trailing hyphens are trimmed.

    The result may be empty; rejecting empty names is up to the caller.

    Example:
        >>> clean_name("My COOL nAMe")
        'my-cool-name'
        >>> clean_name("clean\\r\\n\\r\\nthis name")
        'clean-this-name'
    """
    cleaned = _INVALID_NAME_CHARS.sub("", name)
    cleaned = _WHITESPACE_RUN.sub("-", cleaned)
    return cleaned.strip("-").lower()


__all__ = ["clean_name"]
