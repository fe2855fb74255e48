"""Parameter resolution and type checking for prompt templates.

Values supplied by the caller are merged with the defaults declared in the
prompt file, required parameters are enforced, and every declared parameter
that ends up with a value is checked against its declared type.

Declared names may end with ``?`` to mark the parameter as optional. The
marker is not part of the name used in templates, defaults or supplied values:
``style?`` is bound as ``style``.
"""

import dataclasses
from collections.abc import Callable, Mapping, Sequence, Set
from datetime import datetime
from decimal import Decimal
from numbers import Real
from types import SimpleNamespace
from typing import Any

from pydantic import BaseModel

from dotprompt_core.exceptions import InvalidParameterTypeError, MissingParameterError

from .types import ParameterType

OPTIONAL_MARKER = "?"


def is_optional(declared_name: str) -> bool:
    """Whether a declared parameter name carries the optional marker."""
    return declared_name.endswith(OPTIONAL_MARKER)


def binding_name(declared_name: str) -> str:
    """The name a declared parameter is bound to in templates (optional marker removed)."""
    return declared_name.removesuffix(OPTIONAL_MARKER)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a number here
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_datetime(value: Any) -> bool:
    return isinstance(value, datetime) and value.utcoffset() is not None


def _is_object(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if isinstance(value, (Mapping, Sequence, Set, BaseModel, SimpleNamespace)):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


_TYPE_CHECKS: dict[ParameterType, tuple[Callable[[Any], bool], str]] = {
    ParameterType.STRING: (_is_string, "string"),
    ParameterType.NUMBER: (_is_number, "numeric type"),
    ParameterType.BOOL: (_is_bool, "boolean"),
    ParameterType.DATETIME: (_is_datetime, "timezone-aware datetime"),
    ParameterType.OBJECT: (_is_object, "object type"),
}


def check_parameter_type(name: str, value: Any, type_name: str) -> None:
    """Check a single value against a declared parameter type.

    Args:
        name: Parameter name, used in the error message.
        value: The value to check.
        type_name: Declared type name (case-insensitive).

    Raises:
        InvalidParameterTypeError: If the value does not match the type.

    Note:
        Unknown type names are ignored here; they are rejected when the
        prompt file is loaded.
    """
    parameter_type = ParameterType.parse(type_name)
    if parameter_type is None:
        return

    matches, description = _TYPE_CHECKS[parameter_type]
    if not matches(value):
        raise InvalidParameterTypeError(
            f"The value provided for '{name}' is not a valid {description}",
            parameter=name,
            expected=parameter_type.value,
        )


def resolve_parameters(
    parameters: Mapping[str, str],
    defaults: Mapping[str, Any],
    values: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge supplied values with defaults and validate them.

    The supplied mapping is copied and never modified. Keys that are not
    declared parameters are passed through unchecked so templates can use
    ad hoc values.

    Args:
        parameters: Declared parameter names mapped to type names.
        defaults: Default values keyed by binding name.
        values: Caller-supplied values, or None.

    Returns:
        A new mapping of binding names to values, ready for rendering.

    Raises:
        MissingParameterError: For the first required parameter (in declaration
            order) that has neither a supplied value nor a default.
        InvalidParameterTypeError: If a declared parameter's value has the wrong type.
    """
    resolved: dict[str, Any] = dict(values) if values else {}

    for declared_name in parameters:
        name = binding_name(declared_name)
        if name in resolved:
            continue
        if name in defaults:
            resolved[name] = defaults[name]
        elif not is_optional(declared_name):
            raise MissingParameterError(
                f"Specified values do not contain the required parameter '{name}' and no default value is provided",
                parameter=name,
            )

    for declared_name, type_name in parameters.items():
        name = binding_name(declared_name)
        if name in resolved:
            check_parameter_type(name, resolved[name], type_name)

    return resolved


__all__ = [
    "OPTIONAL_MARKER",
    "binding_name",
    "check_parameter_type",
    "is_optional",
    "resolve_parameters",
]
