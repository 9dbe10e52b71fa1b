"""Tests for the reference family dispatcher."""

import pytest

from flake_ref import (
    IndirectRef,
    InvalidSchemeError,
    MissingAttributeError,
    UnknownVariantError,
    from_parsed,
    parse_flake_ref,
    register_variant,
    unregister_variant,
)
from flake_ref.family import split_url
from stub_refs import GitHubRef


class TestFromParsed:
    """Tests for rebuilding typed references from JSON objects."""

    def test_indirect(self):
        ref = from_parsed({"type": "indirect", "id": "nixpkgs", "ref": "main"})
        assert ref == IndirectRef("nixpkgs", {"ref": "main"})

    def test_input_is_not_consumed(self):
        data = {"type": "indirect", "id": "nixpkgs"}
        from_parsed(data)
        assert data == {"type": "indirect", "id": "nixpkgs"}

    def test_registered_direct_variant(self, github_variant):
        ref = from_parsed({"type": "github", "owner": "flox", "repo": "runix"})
        assert ref == github_variant("flox", "runix")

    def test_variant_errors_propagate(self, github_variant):
        with pytest.raises(MissingAttributeError) as exc_info:
            from_parsed({"type": "github", "owner": "flox"})
        assert exc_info.value.attribute == "repo"

    @pytest.mark.parametrize("data", [{"type": "svn", "url": "x"}, {"id": "nixpkgs"}, {"type": 3}])
    def test_unknown_tag(self, data):
        with pytest.raises(UnknownVariantError):
            from_parsed(data)

    def test_non_object(self):
        with pytest.raises(UnknownVariantError):
            from_parsed(["indirect"])

    def test_unregistered_variant_is_unknown(self):
        register_variant(GitHubRef)
        unregister_variant(GitHubRef)
        with pytest.raises(UnknownVariantError):
            from_parsed({"type": "github", "owner": "flox", "repo": "runix"})


class TestParseFlakeRef:
    """Tests for scheme dispatch."""

    def test_indirect(self):
        assert parse_flake_ref("flake:nixpkgs") == IndirectRef("nixpkgs")

    def test_registered_direct_variant(self, github_variant):
        assert parse_flake_ref("github:flox/runix") == github_variant("flox", "runix")

    def test_unknown_scheme(self):
        with pytest.raises(InvalidSchemeError) as exc_info:
            parse_flake_ref("svn:repo")
        assert exc_info.value.found == "svn"
        assert "flake" in exc_info.value.expected


class TestSplitUrl:
    """Tests for the shared URL splitter."""

    def test_keeps_scheme_case(self):
        assert split_url("Flake:nixpkgs").scheme == "Flake"

    def test_components(self):
        parts = split_url("flake:nixpkgs?ref=main")
        assert parts.path == "nixpkgs"
        assert parts.query == "ref=main"
