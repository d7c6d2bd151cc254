"""
Package metadata model.

Plain immutable values shared by the condition evaluator, the dependency
aggregator and the file resolver:

- Dependency: a package name plus an acceptable version range
- ModuleName: a dotted module identifier that maps onto a relative source path
- Flag: a declared build flag and its default
- PackageMetadata: the conditional (unresolved) package description
- ResolvedPackage: the same description after every condition tree was flattened
"""

import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Dict, Iterator, List, Optional, Tuple

from packaging.version import Version

from .targets import Benchmark, BuildInfo, Executable, Library, TestSuite
from .tree import ConditionNode
from .versions import VersionRange

_DEPENDENCY = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9_\-]*)\s*(.*?)\s*$")
_MODULE_COMPONENT = re.compile(r"^[A-Z][A-Za-z0-9_']*$")


@dataclass(frozen=True)
class Dependency:
    """A dependency on a named package (or build tool) within a version range."""

    name: str
    range: VersionRange = field(default_factory=VersionRange.any)

    @classmethod
    def parse(cls, text: str) -> "Dependency":
        """Parse "name range", e.g. "base >=4 && <5" or "containers".

        Raises:
            ValueError: If the name or the range is malformed
        """
        match = _DEPENDENCY.match(text)
        if match is None:
            raise ValueError(f"Invalid dependency: {text!r}")
        name, range_text = match.groups()
        return cls(name=name, range=VersionRange.parse(range_text))

    def __str__(self) -> str:
        if self.range.is_any:
            return self.name
        return f"{self.name} {self.range}"


@dataclass(frozen=True)
class ModuleName:
    """Dotted module identifier such as ``Data.Map.Strict``."""

    components: Tuple[str, ...]

    @classmethod
    def parse(cls, text: str) -> "ModuleName":
        """Parse a dotted module name.

        Raises:
            ValueError: If any component is not a valid module identifier
        """
        components = tuple(text.strip().split("."))
        if not all(_MODULE_COMPONENT.match(c) for c in components):
            raise ValueError(f"Invalid module name: {text!r}")
        return cls(components=components)

    def to_path(self, extension: str = "") -> PurePosixPath:
        """Relative source path for this module: dots become separators."""
        *parents, leaf = self.components
        return PurePosixPath(*parents, f"{leaf}{extension}")

    def __str__(self) -> str:
        return ".".join(self.components)


@dataclass(frozen=True)
class Flag:
    """A build flag declared by the package.

    Attributes:
        name: Flag name as referenced from conditions
        default: Value used when the package configuration does not set it
        description: Free-form text
        manual: Whether the flag is meant to be set by hand only
    """

    name: str
    default: bool = True
    description: str = ""
    manual: bool = False


@dataclass(frozen=True)
class PackageMetadata:
    """Conditional package description, as produced by the metadata parser.

    Executables, test suites and benchmarks are (name, tree) pairs kept in
    declaration order.
    """

    name: str
    version: Version
    flags: Tuple[Flag, ...] = ()
    library: Optional[ConditionNode[Library]] = None
    executables: Tuple[Tuple[str, ConditionNode[Executable]], ...] = ()
    test_suites: Tuple[Tuple[str, ConditionNode[TestSuite]], ...] = ()
    benchmarks: Tuple[Tuple[str, ConditionNode[Benchmark]], ...] = ()
    data_files: Tuple[str, ...] = ()
    extra_source_files: Tuple[str, ...] = ()
    extra_tmp_files: Tuple[str, ...] = ()
    extra_doc_files: Tuple[str, ...] = ()

    def default_flags(self) -> Dict[str, bool]:
        """Flag name to default value, for every declared flag."""
        return {flag.name: flag.default for flag in self.flags}


@dataclass(frozen=True)
class ResolvedPackage:
    """Package description with every condition tree flattened for one environment."""

    name: str
    version: Version
    library: Optional[Library] = None
    executables: Tuple[Executable, ...] = ()
    test_suites: Tuple[TestSuite, ...] = ()
    benchmarks: Tuple[Benchmark, ...] = ()
    data_files: Tuple[str, ...] = ()
    extra_source_files: Tuple[str, ...] = ()
    extra_tmp_files: Tuple[str, ...] = ()
    extra_doc_files: Tuple[str, ...] = ()

    def all_build_info(self) -> List[BuildInfo]:
        """Build info of the targets that will be built.

        Order: library, executables, test suites, benchmarks. Targets marked
        not buildable are skipped, as are test suites and benchmarks that are
        not enabled.
        """
        return [info for info in self._iter_build_info() if info.buildable]

    def _iter_build_info(self) -> Iterator[BuildInfo]:
        if self.library is not None:
            yield self.library.build_info
        for exe in self.executables:
            yield exe.build_info
        for test in self.test_suites:
            if test.enabled:
                yield test.build_info
        for bench in self.benchmarks:
            if bench.enabled:
                yield bench.build_info
