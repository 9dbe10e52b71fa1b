"""Attribute sets: the generic intermediate form of every flake reference."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping

from .errors import InvalidAttributeError

# Loosely typed attributes as produced from a parsed URL or a JSON object.
Attrs = Dict[str, Any]


def narrow_value(value: Any) -> str:
    """Demote a single attribute value to a string.

    Strings are copied verbatim. Anything else is rendered as compact JSON
    with sorted keys, so ``True`` becomes ``"true"`` and ``1`` becomes ``"1"``;
    a string is never wrapped in an extra pair of quotes.

    Raises:
        TypeError: If the value is not JSON-representable.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


def narrow_attributes(attrs: Mapping[str, Any]) -> Dict[str, str]:
    """Return a key-sorted copy of ``attrs`` with every value narrowed to str.

    Raises:
        InvalidAttributeError: If a key is not a string or a value cannot be
            rendered as JSON.
    """
    narrowed: Dict[str, str] = {}
    for key in sorted(attrs, key=str):
        if not isinstance(key, str):
            raise InvalidAttributeError(str(key), "attribute names must be strings")
        try:
            narrowed[key] = narrow_value(attrs[key])
        except (TypeError, ValueError) as exc:
            raise InvalidAttributeError(key, str(exc)) from exc
    return narrowed
