"""The flake reference family: shared URL handling and variant dispatch.

Every variant (indirect, and whatever direct variants a caller registers)
subclasses FlakeRefSource and is registered under its ``type`` tag and its URL
scheme. ``from_parsed`` rebuilds a typed reference from a generic JSON object,
``parse_flake_ref`` from its textual form.
"""

from __future__ import annotations

import re
import urllib.parse
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Type, TypeVar

from .attrs import Attrs
from .errors import InvalidSchemeError, UnknownVariantError, UrlSyntaxError

_SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_FORBIDDEN_CHARS = re.compile(r"[\x00-\x20\x7f]")

T = TypeVar("T", bound="FlakeRefSource")


def split_url(text: str) -> urllib.parse.SplitResult:
    """Split ``text`` into URL components, keeping the scheme's original case.

    Raises:
        UrlSyntaxError: If the text is not an absolute URI.
    """
    if not isinstance(text, str):
        raise UrlSyntaxError(f"expected a string, found {type(text).__name__}")
    match = _SCHEME_PATTERN.match(text)
    if match is None:
        raise UrlSyntaxError(f"relative URL without a base: {text!r}")
    bad = _FORBIDDEN_CHARS.search(text)
    if bad is not None:
        raise UrlSyntaxError(f"invalid character {bad.group()!r} in URL {text!r}")
    try:
        parts = urllib.parse.urlsplit(text)
    except ValueError as exc:
        raise UrlSyntaxError(str(exc)) from exc
    # urlsplit lowercases the scheme; comparisons must see what was written.
    return parts._replace(scheme=match.group(1))


class FlakeRefSource(ABC):
    """Base class of every flake reference variant."""

    tag: ClassVar[Enum]

    @classmethod
    @abstractmethod
    def scheme(cls) -> str:
        """URL scheme owned by this variant (without the colon)."""

    @classmethod
    @abstractmethod
    def from_url(cls: Type[T], parts: urllib.parse.SplitResult) -> T:
        """Build the variant from URL components whose scheme already matched."""

    @classmethod
    @abstractmethod
    def from_attrs(cls: Type[T], attrs: Attrs) -> T:
        """Build the variant from a generic attribute set, consuming it."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Return the canonical JSON object for this reference."""

    @classmethod
    def parse(cls: Type[T], text: str) -> T:
        """Parse the textual form of this variant.

        Raises:
            UrlSyntaxError: If ``text`` is not a well-formed URI.
            InvalidSchemeError: If the scheme belongs to another variant.
        """
        parts = split_url(text)
        if parts.scheme != cls.scheme():
            raise InvalidSchemeError(parts.scheme, cls.scheme())
        return cls.from_url(parts)


# Alias used in signatures that accept any variant.
FlakeRef = FlakeRefSource

_VARIANTS_BY_TAG: Dict[str, Type[FlakeRefSource]] = {}
_VARIANTS_BY_SCHEME: Dict[str, Type[FlakeRefSource]] = {}


def _tag_value(cls: Type[FlakeRefSource]) -> str:
    tag = cls.tag
    return tag.value if isinstance(tag, Enum) else str(tag)


def register_variant(cls: Type[T]) -> Type[T]:
    """Class decorator adding a variant to the family."""
    _VARIANTS_BY_TAG[_tag_value(cls)] = cls
    _VARIANTS_BY_SCHEME[cls.scheme()] = cls
    return cls


def unregister_variant(cls: Type[FlakeRefSource]) -> None:
    """Remove a previously registered variant."""
    if _VARIANTS_BY_TAG.get(_tag_value(cls)) is cls:
        del _VARIANTS_BY_TAG[_tag_value(cls)]
    if _VARIANTS_BY_SCHEME.get(cls.scheme()) is cls:
        del _VARIANTS_BY_SCHEME[cls.scheme()]


def variant_for_tag(tag: Any) -> Type[FlakeRefSource]:
    """Return the variant registered for ``tag``.

    Raises:
        UnknownVariantError: If nothing is registered under that tag.
    """
    if isinstance(tag, str) and tag in _VARIANTS_BY_TAG:
        return _VARIANTS_BY_TAG[tag]
    raise UnknownVariantError(tag)


def from_parsed(data: Mapping[str, Any]) -> FlakeRefSource:
    """Rebuild a typed reference from a generic JSON object.

    The object's ``type`` field selects the variant; its ``from_attrs``
    receives a private copy of the object.

    Raises:
        UnknownVariantError: If ``data`` is not an object or its type is unknown.
        ConstructionError: If the selected variant rejects the attributes.
    """
    if not isinstance(data, Mapping):
        raise UnknownVariantError(type(data).__name__)
    variant = variant_for_tag(data.get("type"))
    return variant.from_attrs(dict(data))


def parse_flake_ref(text: str) -> FlakeRefSource:
    """Parse any registered variant from its textual form, by scheme."""
    parts = split_url(text)
    variant = _VARIANTS_BY_SCHEME.get(parts.scheme)
    if variant is None:
        expected = "|".join(sorted(_VARIANTS_BY_SCHEME))
        raise InvalidSchemeError(parts.scheme, expected)
    return variant.from_url(parts)
