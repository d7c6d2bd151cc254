"""Build targets: Library, Executable, TestSuite and Benchmark.

Each target carries a BuildInfo plus variant-specific fields. Every variant
has an explicit identity (``empty()``) and an associative ``merge`` so the
condition evaluator can fold the pieces of a tree into one value:

- list fields concatenate (left then right)
- ``buildable`` combines with AND, ``enabled`` with OR
- scalar strings keep the right-hand value when it is non-empty
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Iterable, Tuple, TypeVar, Union

if TYPE_CHECKING:
    from .model import Dependency, ModuleName


def _pick(left: str, right: str) -> str:
    return right or left


@dataclass(frozen=True)
class BuildInfo:
    """Build settings shared by every target kind.

    Attributes:
        hs_source_dirs: Source directories, relative to the package root
        other_modules: Modules compiled in but not exposed
        c_sources: C-like source files, relative to the package root
        build_depends: Library dependencies
        build_tools: Executables needed at build time
        buildable: Whether the target can be built at all
    """

    hs_source_dirs: Tuple[str, ...] = ()
    other_modules: Tuple["ModuleName", ...] = ()
    c_sources: Tuple[str, ...] = ()
    build_depends: Tuple["Dependency", ...] = ()
    build_tools: Tuple["Dependency", ...] = ()
    buildable: bool = True

    @classmethod
    def empty(cls) -> "BuildInfo":
        return cls()

    def merge(self, other: "BuildInfo") -> "BuildInfo":
        return BuildInfo(
            hs_source_dirs=self.hs_source_dirs + other.hs_source_dirs,
            other_modules=self.other_modules + other.other_modules,
            c_sources=self.c_sources + other.c_sources,
            build_depends=self.build_depends + other.build_depends,
            build_tools=self.build_tools + other.build_tools,
            buildable=self.buildable and other.buildable,
        )


@dataclass(frozen=True)
class Library:
    exposed_modules: Tuple["ModuleName", ...] = ()
    build_info: BuildInfo = field(default_factory=BuildInfo)

    @classmethod
    def empty(cls) -> "Library":
        return cls()

    def merge(self, other: "Library") -> "Library":
        return Library(
            exposed_modules=self.exposed_modules + other.exposed_modules,
            build_info=self.build_info.merge(other.build_info),
        )


@dataclass(frozen=True)
class Executable:
    name: str = ""
    main_is: str = ""
    build_info: BuildInfo = field(default_factory=BuildInfo)

    @classmethod
    def empty(cls) -> "Executable":
        return cls()

    def merge(self, other: "Executable") -> "Executable":
        return Executable(
            name=_pick(self.name, other.name),
            main_is=_pick(self.main_is, other.main_is),
            build_info=self.build_info.merge(other.build_info),
        )


@dataclass(frozen=True)
class TestSuite:
    """A test suite; ``enabled`` is stamped from the package configuration."""

    __test__ = False  # not a pytest class

    name: str = ""
    main_is: str = ""
    enabled: bool = False
    build_info: BuildInfo = field(default_factory=BuildInfo)

    @classmethod
    def empty(cls) -> "TestSuite":
        return cls()

    def merge(self, other: "TestSuite") -> "TestSuite":
        return TestSuite(
            name=_pick(self.name, other.name),
            main_is=_pick(self.main_is, other.main_is),
            enabled=self.enabled or other.enabled,
            build_info=self.build_info.merge(other.build_info),
        )


@dataclass(frozen=True)
class Benchmark:
    """A benchmark; ``enabled`` is stamped from the package configuration."""

    name: str = ""
    main_is: str = ""
    enabled: bool = False
    build_info: BuildInfo = field(default_factory=BuildInfo)

    @classmethod
    def empty(cls) -> "Benchmark":
        return cls()

    def merge(self, other: "Benchmark") -> "Benchmark":
        return Benchmark(
            name=_pick(self.name, other.name),
            main_is=_pick(self.main_is, other.main_is),
            enabled=self.enabled or other.enabled,
            build_info=self.build_info.merge(other.build_info),
        )


BuildTarget = Union[Library, Executable, TestSuite, Benchmark]
T = TypeVar("T", Library, Executable, TestSuite, Benchmark)


def with_dependencies(target: T, dependencies: Iterable["Dependency"]) -> T:
    """The identity target of the same kind, carrying only these dependencies."""
    info = replace(BuildInfo.empty(), build_depends=tuple(dependencies))
    return replace(target.empty(), build_info=info)


def set_enabled(target: T, enabled: bool) -> T:
    """Stamp the enabled bit on a test suite or benchmark; other targets pass through."""
    if isinstance(target, (TestSuite, Benchmark)):
        return replace(target, enabled=enabled)
    return target
