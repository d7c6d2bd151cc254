"""Resolved package descriptor.

A PackageDescriptor is the final, immutable result of resolving one package
for one environment. Descriptors compare, hash and sort by package name only,
so they can be collected in sets keyed by package.
"""

from dataclasses import dataclass, field
from functools import total_ordering
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Tuple

from packaging.version import Version

from pkgscope.metadata.model import Dependency
from pkgscope.metadata.versions import VersionRange


@total_ordering
@dataclass(frozen=True, eq=False)
class PackageDescriptor:
    """Everything known about a package after resolution.

    Attributes:
        name: Package name
        version: Package version
        root_dir: Absolute directory holding the metadata file
        files: Absolute paths of every file the package depends on
        dependencies: Dependency name to version range, never including the package itself
        tools: Build-tool dependencies, in target order, not deduplicated
        flags: Flag assignment the package was resolved with
        all_dependencies: Every dependency name declared by any target
    """

    name: str
    version: Version
    root_dir: Path
    files: FrozenSet[Path]
    dependencies: Mapping[str, VersionRange]
    tools: Tuple[Dependency, ...] = ()
    flags: Mapping[str, bool] = field(default_factory=dict)
    all_dependencies: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        # Read-only views so the descriptor cannot be mutated through its mappings
        object.__setattr__(self, "dependencies", MappingProxyType(dict(self.dependencies)))
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))
        object.__setattr__(self, "files", frozenset(self.files))
        object.__setattr__(self, "tools", tuple(self.tools))
        object.__setattr__(self, "all_dependencies", frozenset(self.all_dependencies))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageDescriptor):
            return NotImplemented
        return self.name == other.name

    def __lt__(self, other: "PackageDescriptor") -> bool:
        if not isinstance(other, PackageDescriptor):
            return NotImplemented
        return self.name < other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "name": self.name,
            "version": str(self.version),
            "root_dir": str(self.root_dir),
            "files": sorted(str(f) for f in self.files),
            "dependencies": {name: str(rng) for name, rng in sorted(self.dependencies.items())},
            "tools": [str(t) for t in self.tools],
            "flags": dict(sorted(self.flags.items())),
            "all_dependencies": sorted(self.all_dependencies),
        }
