"""JSON Schema validation of resolution helper responses.

Wraps jsonschema Draft7 validation; the first error (by path) is reported.
"""

from __future__ import annotations

from typing import Any, Dict

from jsonschema import Draft7Validator

from flake_ref.errors import ResponseDecodeError

# Only the envelope is checked here. Whether ``resolved_ref`` names a known
# variant with all required fields is decided by the reference family.
RESOLVE_RESPONSE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["resolved_ref"],
    "properties": {
        "resolved_ref": {"type": "object"},
    },
}

_VALIDATOR = Draft7Validator(RESOLVE_RESPONSE_SCHEMA)


def validate_response(data: Any) -> None:
    """Validate a decoded helper response and raise on the first problem.

    Raises:
        ResponseDecodeError: If the response does not match the schema.
    """
    errs = sorted(_VALIDATOR.iter_errors(data), key=lambda e: list(e.path))
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise ResponseDecodeError(f"Invalid resolver response at '{path}': {first.message}")
