"""Tests for the resolution protocol using in-memory transports."""

import json
from unittest.mock import MagicMock

import pytest

from flake_ref import (
    IndirectRef,
    MissingAttributeError,
    ReconstructionError,
    ResolutionError,
    ResolverInvocationError,
    ResponseDecodeError,
    SerializationError,
    UnknownVariantError,
)
from resolver import FlakeRefResolver, StaticRegistryResolver, decode_response


class _CannedResolver(FlakeRefResolver):
    """Returns a fixed response and records requests."""

    def __init__(self, response: str):
        self.response = response
        self.requests = []

    def invoke(self, request_json: str) -> str:
        self.requests.append(request_json)
        return self.response


class TestStaticRegistryResolver:
    """End-to-end resolution against an in-memory registry."""

    def test_resolves_indirect_ref(self, github_variant):
        expected = github_variant("flox", "runix")
        resolver = StaticRegistryResolver({"testref": expected})

        actual = IndirectRef.parse("flake:testref").resolve(resolver)

        assert actual == expected

    def test_missing_entry_is_protocol_error(self, github_variant):
        resolver = StaticRegistryResolver({"other": github_variant("flox", "runix")})
        with pytest.raises(ResolverInvocationError) as exc_info:
            resolver.resolve(IndirectRef("testref"))
        assert "testref" in str(exc_info.value)

    def test_resolution_is_repeatable(self, github_variant):
        resolver = StaticRegistryResolver({"testref": github_variant("flox", "runix", ref="main")})
        ref = IndirectRef("testref", {"dir": "lib"})

        first = resolver.resolve(ref)
        second = resolver.resolve(ref)

        assert first == second
        assert ref == IndirectRef("testref", {"dir": "lib"})

    def test_raw_entry_is_reconstructed(self, github_variant):
        resolver = StaticRegistryResolver(
            {"testref": {"type": "github", "owner": "flox", "repo": "runix"}}
        )
        assert resolver.resolve(IndirectRef("testref")) == github_variant("flox", "runix")

    def test_resolves_to_another_indirect_ref(self):
        resolver = StaticRegistryResolver({"alias": IndirectRef("nixpkgs", {"ref": "main"})})
        assert resolver.resolve(IndirectRef("alias")) == IndirectRef("nixpkgs", {"ref": "main"})

    def test_unknown_variant_fails_reconstruction(self):
        resolver = StaticRegistryResolver({"testref": {"type": "mercurial", "url": "x"}})
        with pytest.raises(ReconstructionError) as exc_info:
            resolver.resolve(IndirectRef("testref"))
        assert isinstance(exc_info.value.__cause__, UnknownVariantError)

    def test_missing_field_fails_reconstruction(self, github_variant):
        resolver = StaticRegistryResolver({"testref": {"type": "github", "owner": "flox"}})
        with pytest.raises(ReconstructionError) as exc_info:
            resolver.resolve(IndirectRef("testref"))
        assert isinstance(exc_info.value.__cause__, MissingAttributeError)


class TestResolveProtocol:
    """Tests for the shared serialize/invoke/decode steps."""

    def test_request_is_canonical_json(self):
        resolver = _CannedResolver(json.dumps({"resolved_ref": {"type": "indirect", "id": "x"}}))
        resolver.resolve(IndirectRef("nixpkgs", {"rev": "abc", "ref": "main"}))
        assert resolver.requests == ['{"id":"nixpkgs","type":"indirect","ref":"main","rev":"abc"}']

    @pytest.mark.parametrize(
        "response",
        [
            "not json",
            "",
            json.dumps({"original_ref": {}}),
            json.dumps({"resolved_ref": "github:flox/runix"}),
            json.dumps(["resolved_ref"]),
        ],
    )
    def test_bad_response_is_invocation_error(self, response):
        with pytest.raises(ResponseDecodeError):
            _CannedResolver(response).resolve(IndirectRef("nixpkgs"))

    def test_response_errors_are_resolution_errors(self):
        with pytest.raises(ResolutionError):
            _CannedResolver("{}").resolve(IndirectRef("nixpkgs"))

    def test_serialization_failure(self):
        ref = MagicMock()
        ref.to_json.side_effect = TypeError("not serializable")
        resolver = _CannedResolver("{}")

        with pytest.raises(SerializationError):
            resolver.resolve(ref)
        assert resolver.requests == []


class TestDecodeResponse:
    """Tests for decode_response."""

    def test_valid(self):
        data = decode_response('{"resolved_ref": {"type": "indirect", "id": "x"}, "extra": 1}')
        assert data["resolved_ref"]["id"] == "x"

    def test_names_offending_path(self):
        with pytest.raises(ResponseDecodeError) as exc_info:
            decode_response('{"resolved_ref": 3}')
        assert "resolved_ref" in str(exc_info.value)
