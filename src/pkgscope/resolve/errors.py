"""Exceptions shared by package resolution and its collaborators.

Only NoDependenciesError, InvalidMetadataError and NoMetadataFileError are
raised by this package. The remaining classes complete the taxonomy used by
callers that check dependency graphs across packages.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from packaging.version import Version

    from pkgscope.metadata.model import Dependency
    from pkgscope.metadata.versions import VersionRange


class PackageError(Exception):
    """Base class for all package resolution errors."""

    pass


class ConfigError(PackageError):
    """Raised when the project configuration cannot be read."""

    pass


class NoConfigFileError(PackageError):
    """Raised when no project configuration file exists."""

    def __init__(self) -> None:
        super().__init__("No project configuration file found")


class NoMetadataFileError(PackageError):
    """Raised when the package metadata file is missing."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"No package metadata file at {path}")


class InvalidMetadataError(PackageError):
    """Raised when the package metadata could not be parsed or is malformed."""

    def __init__(self, path: Path | None, reason: str):
        self.path = path
        self.reason = reason
        where = f" in {path}" if path is not None else ""
        super().__init__(f"Invalid package metadata{where}: {reason}")


class NoDependenciesError(PackageError):
    """Raised when a package declares no dependencies other than itself."""

    def __init__(self, path: Path | None):
        self.path = path
        where = f" ({path})" if path is not None else ""
        super().__init__(f"Package declares no dependencies{where}")


class DependencyCycleError(PackageError):
    """Raised when packages depend on each other in a cycle."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Dependency cycle detected at package '{name}'")


class MissingDependencyError(PackageError):
    """Raised when a declared dependency is not available."""

    def __init__(self, package: str, dependency: str, range: "VersionRange"):
        self.package = package
        self.dependency = dependency
        self.range = range
        super().__init__(f"Package '{package}' depends on missing '{dependency} {range}'")


class DependencyIssuesError(PackageError):
    """Several dependency problems, reported together."""

    def __init__(self, errors: Sequence[PackageError]):
        self.errors = tuple(errors)
        details = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(f"{len(self.errors)} dependency issue(s):\n{details}")


class MissingToolError(PackageError):
    """Raised when a required build tool is not installed."""

    def __init__(self, tool: "Dependency"):
        self.tool = tool
        super().__init__(f"Missing build tool: {tool}")


class PackageIdNotFoundError(PackageError):
    """Raised when the installed id of a package cannot be found."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Could not find package id for '{name}'")


class PackageVersionMismatchError(PackageError):
    """Raised when a local package version differs from the registry's."""

    def __init__(self, name: str, expected: "Version", actual: "Version"):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"Package '{name}': registry has {expected}, found {actual}")


class DependencyVersionMismatchError(PackageError):
    """Raised when a registry version falls outside a dependency's range."""

    def __init__(self, name: str, version: "Version", range: "VersionRange"):
        self.name = name
        self.version = version
        self.range = range
        super().__init__(f"Package '{name}' {version} does not satisfy {range}")
