"""Flake references: the reference family and the indirect variant."""

from .attrs import Attrs, narrow_attributes, narrow_value
from .errors import (
    ConstructionError,
    DecodeError,
    FlakeRefError,
    FlakeRefSyntaxError,
    HelperExitError,
    HelperTimeoutError,
    InvalidAttributeError,
    InvalidSchemeError,
    InvalidTagError,
    MissingAttributeError,
    QueryParseError,
    ReconstructionError,
    ResolutionError,
    ResolverInvocationError,
    ResponseDecodeError,
    SerializationError,
    UnknownVariantError,
    UrlSyntaxError,
)
from .family import (
    FlakeRef,
    FlakeRefSource,
    from_parsed,
    parse_flake_ref,
    register_variant,
    unregister_variant,
)
from .indirect import IndirectRef, Tag

__all__ = [
    "Attrs",
    "narrow_attributes",
    "narrow_value",
    "ConstructionError",
    "DecodeError",
    "FlakeRefError",
    "FlakeRefSyntaxError",
    "HelperExitError",
    "HelperTimeoutError",
    "InvalidAttributeError",
    "InvalidSchemeError",
    "InvalidTagError",
    "MissingAttributeError",
    "QueryParseError",
    "ReconstructionError",
    "ResolutionError",
    "ResolverInvocationError",
    "ResponseDecodeError",
    "SerializationError",
    "UnknownVariantError",
    "UrlSyntaxError",
    "FlakeRef",
    "FlakeRefSource",
    "from_parsed",
    "parse_flake_ref",
    "register_variant",
    "unregister_variant",
    "IndirectRef",
    "Tag",
]
