"""Unit tests for the package error taxonomy."""

from pathlib import Path

import pytest
from packaging.version import Version

from pkgscope.metadata.model import Dependency
from pkgscope.metadata.versions import VersionRange
from pkgscope.resolve.errors import (
    ConfigError,
    DependencyCycleError,
    DependencyIssuesError,
    DependencyVersionMismatchError,
    InvalidMetadataError,
    MissingDependencyError,
    MissingToolError,
    NoConfigFileError,
    NoDependenciesError,
    NoMetadataFileError,
    PackageError,
    PackageIdNotFoundError,
    PackageVersionMismatchError,
)


class TestErrorMessages:
    def test_invalid_metadata_with_path(self):
        error = InvalidMetadataError(Path("/pkg/foo.json"), "bad version")
        assert error.reason == "bad version"
        assert str(error) == "Invalid package metadata in /pkg/foo.json: bad version"

    def test_invalid_metadata_without_path(self):
        assert str(InvalidMetadataError(None, "oops")) == "Invalid package metadata: oops"

    def test_no_dependencies(self):
        assert str(NoDependenciesError(Path("/pkg/foo.json"))) == "Package declares no dependencies (/pkg/foo.json)"
        assert str(NoDependenciesError(None)) == "Package declares no dependencies"

    def test_no_metadata_file(self):
        error = NoMetadataFileError(Path("/pkg/foo.json"))
        assert error.path == Path("/pkg/foo.json")
        assert "/pkg/foo.json" in str(error)

    def test_dependency_issues_collects_errors(self):
        issues = [
            MissingDependencyError("foo", "text", VersionRange.parse(">=2")),
            DependencyCycleError("bar"),
        ]
        error = DependencyIssuesError(issues)
        assert error.errors == tuple(issues)
        assert str(error).startswith("2 dependency issue(s):")
        assert "missing 'text >=2'" in str(error)

    def test_version_mismatches(self):
        assert "registry has 1.0, found 1.1" in str(PackageVersionMismatchError("foo", Version("1.0"), Version("1.1")))
        assert "does not satisfy <2" in str(DependencyVersionMismatchError("foo", Version("2.1"), VersionRange.parse("<2")))

    def test_tool_and_package_id(self):
        assert str(MissingToolError(Dependency.parse("alex >=3"))) == "Missing build tool: alex >=3"
        assert "'foo'" in str(PackageIdNotFoundError("foo"))


@pytest.mark.parametrize(
    "error",
    [
        ConfigError("broken"),
        NoConfigFileError(),
        NoMetadataFileError(Path("x")),
        InvalidMetadataError(None, "x"),
        NoDependenciesError(None),
        DependencyCycleError("x"),
        PackageIdNotFoundError("x"),
    ],
)
def test_all_errors_are_package_errors(error):
    assert isinstance(error, PackageError)
