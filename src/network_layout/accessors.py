"""
Accessor normalization.

Configuration fields such as node color or link distance accept either a
constant or a per-entity function, and link distance additionally accepts a
field path into the link record. Each value is classified once into an
Accessor (a small tagged variant) and resolved into a plain callable, so
per-entity evaluation never branches on the configured type.
"""

from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

from .validation import ConfigurationError


class AccessorKind(Enum):
    """How an accessor value is interpreted."""

    CONSTANT = "constant"
    FUNCTION = "function"
    PATH = "path"


_PATH_TOKEN = re.compile(r"[^.\[\]]+")


def parse_path(path: str) -> tuple[str, ...]:
    """
    Split a field path into its keys.

    Supports dotted keys and bracketed indices: ``"data.weights[0]"``
    becomes ``("data", "weights", "0")``.
    """
    keys = tuple(_PATH_TOKEN.findall(path))
    if not keys:
        raise ConfigurationError(f"Invalid field path {path!r}")
    return keys


_MISSING = object()


def get_path(obj: Any, path: Union[str, tuple[str, ...]], default: Any = None) -> Any:
    """
    Read a nested value by field path.

    Each key is tried as a mapping key, then as a sequence index, then as an
    attribute. Returns ``default`` as soon as a key cannot be resolved.
    """
    keys = parse_path(path) if isinstance(path, str) else path
    current = obj
    for key in keys:
        current = _step(current, key)
        if current is _MISSING:
            return default
    return current


def _step(obj: Any, key: str) -> Any:
    if obj is None:
        return _MISSING
    if isinstance(obj, dict):
        return obj.get(key, _MISSING)
    if isinstance(obj, (list, tuple)) and key.lstrip("-").isdigit():
        try:
            return obj[int(key)]
        except IndexError:
            return _MISSING
    # Instance fields first, so data named like a method reads as data
    fields = getattr(obj, "__dict__", None)
    if fields is not None and key in fields:
        return fields[key]
    return getattr(obj, key, _MISSING)


@dataclass(frozen=True)
class Accessor:
    """
    A classified accessor value.

    Attributes:
        kind: How ``value`` is interpreted
        value: The constant, the function, or the parsed path keys
        name: Configuration field name, used in error messages
    """

    kind: AccessorKind
    value: Any
    name: str = "accessor"

    def resolve(self) -> Callable[[Any], Any]:
        """Return a uniform ``f(entity) -> value`` callable."""
        if self.kind is AccessorKind.FUNCTION:
            return self.value
        if self.kind is AccessorKind.PATH:
            keys = self.value
            return lambda entity: get_path(entity, keys)
        constant = self.value
        return lambda _entity: constant


def classify(value: Any, name: str = "accessor", allow_path: bool = False) -> Accessor:
    """
    Classify a configuration value as a constant, function, or field path.

    Args:
        value: Configured value
        name: Field name for error messages
        allow_path: Interpret strings as field paths instead of constants

    Raises:
        ConfigurationError: If value is None
    """
    if value is None:
        raise ConfigurationError(f"{name} must not be None")
    if callable(value):
        return Accessor(AccessorKind.FUNCTION, value, name)
    if allow_path and isinstance(value, str):
        return Accessor(AccessorKind.PATH, parse_path(value), name)
    return Accessor(AccessorKind.CONSTANT, value, name)


def normalize_accessor(value: Any, name: str = "accessor") -> Callable[[Any], Any]:
    """Normalize a constant-or-function accessor into a callable."""
    return classify(value, name).resolve()


def normalize_numeric_accessor(
    value: Any, name: str = "accessor", allow_path: bool = False
) -> Callable[[Any], float]:
    """
    Normalize a numeric accessor into a callable returning a float.

    Accepts a number, a function, or (when ``allow_path``) a field path string.
    Function results and paths are checked when evaluated: a value that is
    missing or not a finite number raises ConfigurationError.

    Raises:
        ConfigurationError: If value is none of the accepted kinds
    """
    if isinstance(value, bool) or not (
        callable(value)
        or isinstance(value, numbers.Real)
        or (allow_path and isinstance(value, str))
    ):
        kinds = "number, function or field path" if allow_path else "number or function"
        raise ConfigurationError(f"{name} must be a {kinds}, got {value!r}")

    accessor = classify(value, name, allow_path=allow_path)
    if accessor.kind is AccessorKind.CONSTANT:
        constant = float(value)
        if not math.isfinite(constant):
            raise ConfigurationError(f"{name} must be finite, got {value}")
        return lambda _entity: constant

    read = accessor.resolve()
    if accessor.kind is AccessorKind.FUNCTION:
        source = "returned"
    else:
        source = f"path {'.'.join(accessor.value)!r} resolved to"

    def read_number(entity: Any) -> float:
        raw = read(entity)
        if not _is_finite_real(raw):
            raise ConfigurationError(f"{name} {source} {raw!r}, expected a number")
        return float(raw)

    return read_number


def _is_finite_real(value: Any) -> bool:
    return (
        not isinstance(value, bool)
        and isinstance(value, numbers.Real)
        and math.isfinite(value)
    )


__all__ = [
    "AccessorKind",
    "Accessor",
    "parse_path",
    "get_path",
    "classify",
    "normalize_accessor",
    "normalize_numeric_accessor",
]
