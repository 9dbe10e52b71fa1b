"""Error taxonomy for flake reference construction, parsing and resolution."""

from __future__ import annotations


class FlakeRefError(Exception):
    """Base class for every error raised by this package."""


# ---------- construction ----------


class ConstructionError(FlakeRefError):
    """A reference could not be built from the supplied attributes."""


class MissingAttributeError(ConstructionError):
    """A required attribute is absent or does not hold a usable string."""

    def __init__(self, attribute: str):
        self.attribute = attribute
        super().__init__(f"missing attribute '{attribute}'")


class InvalidTagError(ConstructionError):
    """The ``type`` discriminant does not name the expected variant."""

    def __init__(self, found: str, expected: str):
        self.found = found
        self.expected = expected
        super().__init__(f"invalid type tag (expected: '{expected}', found: '{found}')")


class InvalidAttributeError(ConstructionError):
    """An attribute holds a value the target type cannot carry."""

    def __init__(self, attribute: str, reason: str):
        self.attribute = attribute
        self.reason = reason
        super().__init__(f"invalid attribute '{attribute}': {reason}")


# ---------- syntax ----------


class FlakeRefSyntaxError(FlakeRefError):
    """Textual or JSON input is malformed."""


class UrlSyntaxError(FlakeRefSyntaxError):
    """The input is not a well-formed absolute URI."""


class InvalidSchemeError(FlakeRefSyntaxError):
    """The URI scheme does not match the scheme of the requested variant."""

    def __init__(self, found: str, expected: str):
        self.found = found
        self.expected = expected
        super().__init__(f"invalid scheme (expected: '{expected}:', found: '{found}:')")


class QueryParseError(FlakeRefSyntaxError):
    """The URI query string could not be decoded into attributes."""


class DecodeError(FlakeRefSyntaxError):
    """JSON text could not be decoded."""


# ---------- resolution ----------


class ResolutionError(FlakeRefError):
    """Resolving an indirect reference failed."""


class SerializationError(ResolutionError):
    """The reference could not be serialized for the resolver.

    Indicates a programming error; well-formed references always serialize.
    """


class ResolverInvocationError(ResolutionError):
    """The resolution helper failed or produced an unusable response."""


class HelperExitError(ResolverInvocationError):
    """The helper process exited with a non-zero status."""

    def __init__(self, returncode: int, stderr: str):
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or "no output on stderr"
        super().__init__(f"resolution helper exited with status {returncode}: {detail}")


class HelperTimeoutError(ResolverInvocationError):
    """The helper process did not finish before the deadline."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"resolution helper timed out after {timeout} seconds")


class ResponseDecodeError(ResolverInvocationError):
    """The helper output is not JSON of the expected shape."""


class ReconstructionError(ResolutionError):
    """The resolved reference does not match any known variant."""


class UnknownVariantError(ResolutionError):
    """No registered variant handles the given tag or scheme."""

    def __init__(self, tag: object):
        self.tag = tag
        super().__init__(f"unknown flake reference type: {tag!r}")
