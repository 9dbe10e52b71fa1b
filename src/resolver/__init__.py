"""Resolvers turning indirect flake references into direct ones."""

from .base import FlakeRefResolver, decode_response
from .parser_util import ParserUtilResolver
from .static import StaticRegistryResolver

__all__ = [
    "FlakeRefResolver",
    "decode_response",
    "ParserUtilResolver",
    "StaticRegistryResolver",
]
