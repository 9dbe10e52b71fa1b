"""In-memory resolver for tests and embedding."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Union

from flake_ref.errors import ResolverInvocationError
from flake_ref.family import FlakeRefSource

from .base import FlakeRefResolver

RegistryEntry = Union[FlakeRefSource, Mapping[str, Any]]


class StaticRegistryResolver(FlakeRefResolver):
    """Answers resolution requests from a fixed ``id -> reference`` mapping.

    Entries may be typed references or raw JSON objects; raw objects go
    through the same reconstruction as a real helper's output, so malformed
    entries fail the same way.
    """

    def __init__(self, entries: Mapping[str, RegistryEntry]):
        self._entries: Dict[str, RegistryEntry] = dict(entries)

    def invoke(self, request_json: str) -> str:
        request = json.loads(request_json)
        ref_id = request.get("id")
        entry = self._entries.get(ref_id)
        if entry is None:
            raise ResolverInvocationError(
                f"cannot find flake 'flake:{ref_id}' in the flake registries"
            )
        resolved = entry.to_dict() if isinstance(entry, FlakeRefSource) else dict(entry)
        return json.dumps({"original_ref": request, "resolved_ref": resolved})
