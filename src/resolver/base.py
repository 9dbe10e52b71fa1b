"""Resolution protocol shared by every resolver transport."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Dict

from flake_ref.errors import (
    ConstructionError,
    FlakeRefSyntaxError,
    ReconstructionError,
    ResponseDecodeError,
    SerializationError,
    UnknownVariantError,
)
from flake_ref.family import FlakeRef, from_parsed
from flake_ref.indirect import IndirectRef

from .schema import validate_response


def decode_response(raw: str) -> Dict[str, Any]:
    """Parse and validate the helper's JSON output.

    Raises:
        ResponseDecodeError: If the output is not JSON or lacks ``resolved_ref``.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ResponseDecodeError(f"resolver returned invalid JSON: {exc}") from exc
    validate_response(data)
    return data


class FlakeRefResolver(ABC):
    """Turns indirect references into direct ones.

    Subclasses supply the transport (``invoke``); serialization, response
    validation and reconstruction are shared. Nothing is retried.
    """

    @abstractmethod
    def invoke(self, request_json: str) -> str:
        """Send a serialized indirect reference, return the raw JSON response.

        Raises:
            ResolverInvocationError: If the transport fails.
        """

    def resolve(self, ref: IndirectRef) -> FlakeRef:
        """Resolve ``ref`` to a typed reference.

        Raises:
            SerializationError: If ``ref`` cannot be serialized.
            ResolverInvocationError: If the transport fails or its response is
                not a JSON object with a ``resolved_ref`` object.
            ReconstructionError: If ``resolved_ref`` matches no known variant.
        """
        try:
            request = ref.to_json()
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"couldn't serialize {ref!r}: {exc}") from exc

        response = decode_response(self.invoke(request))

        try:
            return from_parsed(response["resolved_ref"])
        except (ConstructionError, FlakeRefSyntaxError, UnknownVariantError) as exc:
            raise ReconstructionError(f"couldn't reconstruct resolved reference: {exc}") from exc
