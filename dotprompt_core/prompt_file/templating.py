"""Jinja2 rendering for prompt templates.

Templates are rendered in a sandboxed environment without autoescaping.
Undefined names render as empty text, so optional parameters can be tested
with ``{% if name %}`` blocks. Block tags strip their own line
(``trim_blocks``/``lstrip_blocks``) and a trailing newline in the template
is preserved.
"""

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from jinja2 import Template, TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment

from dotprompt_core.exceptions import PromptRenderError, TemplateParseError
from dotprompt_core.settings import settings

_environment = SandboxedEnvironment(
    autoescape=False,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


@lru_cache(maxsize=settings.template_cache_size)
def _compile(source: str) -> Template:
    return _environment.from_string(source)


def render_template(template: str, values: Mapping[str, Any], *, name: str = "prompt") -> str:
    """Render a template with the given values.

    Compiled templates are cached by source text. Every call renders into a
    fresh context built from a copy of ``values``.

    Args:
        template: Jinja2 template source.
        values: Names available to the template.
        name: Label used in error messages, e.g. ``"user prompt"``.

    Returns:
        The rendered text.

    Raises:
        TemplateParseError: If the template has invalid syntax.
        PromptRenderError: If evaluation fails (for example an unsafe
            attribute access blocked by the sandbox).
    """
    try:
        compiled = _compile(template)
    except TemplateSyntaxError as e:
        raise TemplateParseError(f"Unable to parse the {name} template: {e.message} (line {e.lineno})") from e

    try:
        return compiled.render(dict(values))
    except Exception as e:  # noqa: BLE001
        raise PromptRenderError(f"Template error while rendering the {name}: {e}") from e


__all__ = ["render_template"]
