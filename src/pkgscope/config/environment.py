"""Build environment a package description is resolved against.

An Environment pins the target operating system, CPU architecture, compiler
and the set of enabled flags. It is fixed for the duration of one resolution.

OS and architecture names are normalised to one canonical lowercase spelling
so that "Darwin", "macos" and "osx" all compare equal.

Environment variables:
    PKGSCOPE_OS:        Override the detected operating system
    PKGSCOPE_ARCH:      Override the detected CPU architecture
    PKGSCOPE_COMPILER:  Compiler id such as "ghc-9.6.3"
"""

import os
import platform
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Optional

from packaging.version import Version

from pkgscope.metadata.versions import parse_version

DEFAULT_COMPILER = "ghc-9.6.3"

_OS_ALIASES = {
    "darwin": "osx",
    "macos": "osx",
    "macosx": "osx",
    "win32": "windows",
    "mingw32": "windows",
    "cygwin": "windows",
    "linux2": "linux",
    "gnu/linux": "linux",
    "sunos": "solaris",
}

_ARCH_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "x86-64": "x86_64",
    "arm64": "aarch64",
    "armv8": "aarch64",
    "i686": "i386",
    "i586": "i386",
    "i486": "i386",
    "x86": "i386",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64",
}


def normalize_os(name: str) -> str:
    """Canonical spelling of an operating system name."""
    key = name.strip().lower()
    return _OS_ALIASES.get(key, key)


def normalize_arch(name: str) -> str:
    """Canonical spelling of a CPU architecture name."""
    key = name.strip().lower()
    return _ARCH_ALIASES.get(key, key)


@dataclass(frozen=True)
class CompilerId:
    """Compiler implementation (flavor) and version, e.g. ghc 9.6.3."""

    flavor: str
    version: Version

    @classmethod
    def parse(cls, text: str) -> "CompilerId":
        """Parse "flavor-version", e.g. "ghc-9.6.3".

        Raises:
            ValueError: If the text has no version part or the version is invalid
        """
        flavor, sep, version = text.strip().rpartition("-")
        if not sep or not flavor:
            raise ValueError(f"Invalid compiler id (expected flavor-version): {text!r}")
        return cls(flavor=flavor.lower(), version=parse_version(version))

    def __str__(self) -> str:
        return f"{self.flavor}-{self.version}"


@dataclass(frozen=True)
class Environment:
    """Fixed resolution environment.

    Attributes:
        os: Normalised target operating system (e.g. "linux", "osx", "windows")
        arch: Normalised target architecture (e.g. "x86_64", "aarch64")
        compiler: Compiler implementation and version
        flags: Names of the enabled build flags
    """

    os: str
    arch: str
    compiler: CompilerId
    flags: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def create(cls, os: str, arch: str, compiler: CompilerId, flags: Iterable[str] = ()) -> "Environment":
        """Build an environment, normalising the OS and architecture names."""
        return cls(os=normalize_os(os), arch=normalize_arch(arch), compiler=compiler, flags=frozenset(flags))

    @classmethod
    def host(cls, compiler: Optional[CompilerId] = None, flags: Iterable[str] = ()) -> "Environment":
        """Environment of the running machine, honouring PKGSCOPE_* overrides.

        Args:
            compiler: Compiler to resolve for; defaults to PKGSCOPE_COMPILER or DEFAULT_COMPILER
            flags: Enabled flag names
        """
        os_name = os.environ.get("PKGSCOPE_OS") or platform.system()
        arch_name = os.environ.get("PKGSCOPE_ARCH") or platform.machine()
        if compiler is None:
            compiler = CompilerId.parse(os.environ.get("PKGSCOPE_COMPILER") or DEFAULT_COMPILER)
        return cls.create(os_name, arch_name, compiler, flags)

    def with_flags(self, flags: Iterable[str]) -> "Environment":
        """Copy of this environment with a different enabled-flag set."""
        return replace(self, flags=frozenset(flags))
