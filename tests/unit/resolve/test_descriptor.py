"""Unit tests for PackageDescriptor."""

from pathlib import Path

import pytest
from packaging.version import Version

from pkgscope.metadata.model import Dependency
from pkgscope.metadata.versions import VersionRange
from pkgscope.resolve.descriptor import PackageDescriptor


def _descriptor(name: str = "foo", version: str = "1.0", **kwargs) -> PackageDescriptor:
    fields = {
        "root_dir": Path("/pkg"),
        "files": [Path("/pkg/foo.json")],
        "dependencies": {"base": VersionRange.parse(">=4 && <5")},
    }
    fields.update(kwargs)
    return PackageDescriptor(name=name, version=Version(version), **fields)


class TestIdentity:
    def test_equal_by_name(self):
        """Two descriptors with the same name are equal whatever else differs."""
        assert _descriptor("foo", "1.0") == _descriptor("foo", "2.0", files=[])

    def test_hash_by_name(self):
        assert len({_descriptor("foo", "1.0"), _descriptor("foo", "2.0"), _descriptor("bar")}) == 2

    def test_ordered_by_name(self):
        names = [d.name for d in sorted([_descriptor("zlib"), _descriptor("aeson"), _descriptor("mtl")])]
        assert names == ["aeson", "mtl", "zlib"]
        assert _descriptor("a") <= _descriptor("a")

    def test_not_equal_to_other_types(self):
        assert _descriptor("foo") != "foo"


class TestImmutability:
    def test_mappings_read_only(self):
        descriptor = _descriptor(flags={"dev": True})
        with pytest.raises(TypeError):
            descriptor.dependencies["text"] = VersionRange.any()  # type: ignore[index]
        with pytest.raises(TypeError):
            descriptor.flags["dev"] = False  # type: ignore[index]

    def test_inputs_copied(self):
        deps = {"base": VersionRange.any()}
        descriptor = _descriptor(dependencies=deps)
        deps["text"] = VersionRange.any()
        assert "text" not in descriptor.dependencies

    def test_collections_normalised(self):
        descriptor = _descriptor(tools=[Dependency.parse("alex")], all_dependencies=["base"])
        assert isinstance(descriptor.files, frozenset)
        assert isinstance(descriptor.tools, tuple)
        assert descriptor.all_dependencies == frozenset({"base"})


class TestToDict:
    def test_serialization(self):
        descriptor = _descriptor(
            files=[Path("/pkg/src/B.hs"), Path("/pkg/foo.json")],
            dependencies={"text": VersionRange.any(), "base": VersionRange.parse(">=4 && <5")},
            tools=[Dependency.parse("happy >=1.19")],
            flags={"fast": True, "dev": False},
            all_dependencies=["text", "base"],
        )
        assert descriptor.to_dict() == {
            "name": "foo",
            "version": "1.0",
            "root_dir": "/pkg",
            "files": ["/pkg/foo.json", "/pkg/src/B.hs"],
            "dependencies": {"base": ">=4 && <5", "text": "-any"},
            "tools": ["happy >=1.19"],
            "flags": {"dev": False, "fast": True},
            "all_dependencies": ["base", "text"],
        }
