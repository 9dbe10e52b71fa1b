"""Indirect flake references: ``flake:<id>[?<attributes>]``.

An indirect reference names a flake registry entry. It carries no location of
its own and has to be resolved through the registry before it can be fetched.
"""

from __future__ import annotations

import functools
import json
import urllib.parse
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping, Optional

from constants import Constants

from .attrs import Attrs, narrow_attributes
from .errors import (
    DecodeError,
    InvalidAttributeError,
    InvalidTagError,
    MissingAttributeError,
    QueryParseError,
    UrlSyntaxError,
)
from .family import FlakeRef, FlakeRefSource, register_variant

if TYPE_CHECKING:
    from resolver.base import FlakeRefResolver

# Characters kept verbatim when rendering the id as a URL path.
_ID_SAFE = "/:@!$&'()*+,;="
_RESERVED = ("id", "type")


class Tag(Enum):
    """Discriminant of the indirect variant within the reference family."""

    INDIRECT = "indirect"


def _decode_query(query: str) -> Dict[str, str]:
    if not query:
        return {}
    try:
        pairs = urllib.parse.parse_qsl(
            query, keep_blank_values=True, strict_parsing=True, errors="strict"
        )
    except ValueError as exc:
        raise QueryParseError(f"couldn't parse query: {exc}") from exc

    attributes: Dict[str, str] = {}
    for key, value in pairs:
        if key in _RESERVED:
            raise QueryParseError(f"couldn't parse query: reserved attribute '{key}'")
        if key in attributes:
            raise QueryParseError(f"couldn't parse query: duplicate attribute '{key}'")
        attributes[key] = value
    return attributes


def _encode_query(attributes: Mapping[str, str]) -> str:
    try:
        return urllib.parse.urlencode(sorted(attributes.items()))
    except (TypeError, UnicodeEncodeError):
        return ""


@register_variant
@functools.total_ordering
class IndirectRef(FlakeRefSource):
    """A registry lookup key plus optional qualifiers such as ``ref`` or ``rev``.

    Instances are immutable: ``attributes`` is a read-only, key-sorted mapping
    of strings and never contains ``id`` or ``type``.
    """

    tag: ClassVar[Tag] = Tag.INDIRECT

    def __init__(self, id: str, attributes: Optional[Mapping[str, str]] = None):  # pylint: disable=redefined-builtin
        if not isinstance(id, str) or not id:
            raise MissingAttributeError("id")
        attributes = dict(attributes or {})
        for key, value in attributes.items():
            if key in _RESERVED:
                raise InvalidAttributeError(key, "reserved attribute name")
            if not isinstance(key, str) or not isinstance(value, str):
                raise InvalidAttributeError(str(key), "attribute names and values must be strings")
        object.__setattr__(self, "_id", id)
        object.__setattr__(
            self, "_attributes", MappingProxyType({k: attributes[k] for k in sorted(attributes)})
        )

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def id(self) -> str:
        """Name of the registry entry, i.e. the part right after ``flake:``."""
        return self._id

    @property
    def type(self) -> Tag:
        """Always ``Tag.INDIRECT``."""
        return self.tag

    @property
    def attributes(self) -> Mapping[str, str]:
        """Revision, git ref etc. given alongside the id."""
        return self._attributes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndirectRef):
            return NotImplemented
        return self._id == other._id and dict(self._attributes) == dict(other._attributes)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, IndirectRef):
            return NotImplemented
        return (self._id, tuple(self._attributes.items())) < (other._id, tuple(other._attributes.items()))

    def __hash__(self) -> int:
        return hash((self.tag, self._id, tuple(self._attributes.items())))

    def __reduce__(self):
        return (type(self), (self._id, dict(self._attributes)))

    def __repr__(self) -> str:
        return f"IndirectRef(id={self._id!r}, attributes={dict(self._attributes)!r})"

    def __str__(self) -> str:
        return self.to_url()

    # ---------- attribute sets ----------

    @classmethod
    def from_attrs(cls, attrs: Attrs) -> "IndirectRef":
        """Build an indirect reference from a generic attribute set.

        ``id`` is required and must be a non-empty string. A ``type`` entry, if
        present, must be ``"indirect"``. Every other entry is narrowed to a
        string (see ``narrow_value``). The attribute set is emptied on success.

        Raises:
            MissingAttributeError: If ``id`` is absent or not a string.
            InvalidTagError: If ``type`` names another variant.
            InvalidAttributeError: If an attribute cannot be narrowed.
        """
        ref_id = attrs.get("id")
        if not isinstance(ref_id, str) or not ref_id:
            raise MissingAttributeError("id")
        if "type" in attrs and attrs["type"] not in (Tag.INDIRECT, Tag.INDIRECT.value):
            raise InvalidTagError(str(attrs["type"]), Tag.INDIRECT.value)

        attributes = narrow_attributes({k: v for k, v in attrs.items() if k not in _RESERVED})
        attrs.clear()
        return cls(ref_id, attributes)

    # ---------- URL codec ----------

    @classmethod
    def scheme(cls) -> str:
        return Constants.FLAKE_SCHEME

    @classmethod
    def from_url(cls, parts: urllib.parse.SplitResult) -> "IndirectRef":
        if parts.netloc:
            raise UrlSyntaxError(f"unexpected authority '{parts.netloc}' in indirect flake reference")
        if parts.fragment:
            raise UrlSyntaxError(f"unexpected fragment '{parts.fragment}' in indirect flake reference")
        try:
            ref_id = urllib.parse.unquote(parts.path, errors="strict")
        except UnicodeDecodeError as exc:
            raise UrlSyntaxError(f"invalid percent-encoding in '{parts.path}'") from exc
        return cls(ref_id, _decode_query(parts.query))

    def to_url(self) -> str:
        """Render ``flake:<id>`` plus the attributes as a sorted query string."""
        path = urllib.parse.quote(self._id, safe=_ID_SAFE)
        if path.startswith("//"):
            # A leading "//" would be read back as an authority.
            path = "%2F" + path[1:]
        text = f"{self.scheme()}:{path}"
        if self._attributes:
            text += "?" + _encode_query(self._attributes)
        return text

    # ---------- JSON codec ----------

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self._id, "type": self.tag.value}
        data.update(self._attributes)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IndirectRef":
        """Strictly decode the canonical JSON object.

        Unlike ``from_attrs`` nothing is narrowed: ``type`` is mandatory and
        every attribute value must already be a string.
        """
        if not isinstance(data, Mapping):
            raise DecodeError(f"expected a JSON object, found {type(data).__name__}")
        if "type" not in data:
            raise MissingAttributeError("type")
        if data["type"] != Tag.INDIRECT.value:
            raise InvalidTagError(str(data["type"]), Tag.INDIRECT.value)
        ref_id = data.get("id")
        if not isinstance(ref_id, str) or not ref_id:
            raise MissingAttributeError("id")

        attributes: Dict[str, str] = {}
        for key, value in data.items():
            if key in _RESERVED:
                continue
            if not isinstance(value, str):
                raise InvalidAttributeError(key, f"expected a string, found {type(value).__name__}")
            attributes[key] = value
        return cls(ref_id, attributes)

    @classmethod
    def from_json(cls, text: str) -> "IndirectRef":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"invalid JSON: {exc}") from exc
        return cls.from_dict(data)

    # ---------- resolution ----------

    def resolve(self, resolver: Optional["FlakeRefResolver"] = None) -> FlakeRef:
        """Resolve this reference to a direct one through the flake registry.

        Without an explicit resolver this runs ``parser-util``, which reads the
        registries configured via ``NIX_CONFIG`` / ``NIX_USER_CONF_FILES`` or
        falls back to the user's local registry.
        """
        if resolver is None:
            from resolver.parser_util import ParserUtilResolver
            resolver = ParserUtilResolver()
        return resolver.resolve(self)
