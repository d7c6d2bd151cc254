"""File discovery for resolved packages.

Maps module names, literal file names and glob patterns onto absolute paths.

Module search:
    For each name, directories are tried in order and, within a directory,
    extensions in order. The first candidate that exists as a regular file
    wins. A module with no candidate on disk is dropped from the result
    without error.

Literal names:
    A literal relative path (not a module name) is already complete: it is
    joined onto the first search directory and returned unchecked.

Globs:
    Only ``*`` is a wildcard. Patterns containing it are expanded against the
    root directory (files only, filesystem listing order); ``?`` and ``[`` match
    themselves. Other patterns produce exactly one candidate, root / pattern,
    without an existence check. Patterns must be relative to the root.
"""

import glob
import logging
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import List, Protocol, Sequence, Union, runtime_checkable

from pkgscope.metadata.model import ModuleName
from pkgscope.metadata.targets import BuildInfo, Executable, Library

logger = logging.getLogger(__name__)

HASKELL_SOURCE_EXTENSIONS = (".hs", ".lhs")

SourceName = Union[ModuleName, str, PurePath]


def has_glob_magic(pattern: str) -> bool:
    """Check whether a pattern contains the ``*`` wildcard."""
    return "*" in pattern


def is_absolute_path(name: str) -> bool:
    """True for POSIX absolute paths and Windows drive or root anchored paths."""
    return bool(PurePosixPath(name).anchor or PureWindowsPath(name).anchor)


@runtime_checkable
class FileSystem(Protocol):
    """Read-only view of the filesystem used during file discovery."""

    def is_file(self, path: Path) -> bool:
        """Return True if path exists and is a regular file."""
        ...

    def glob(self, root: Path, pattern: str) -> List[Path]:
        """Return files under root matching pattern, as paths relative to root.

        Raises:
            OSError: If root cannot be listed
        """
        ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def glob(self, root: Path, pattern: str) -> List[Path]:
        if not root.is_dir():
            raise FileNotFoundError(f"Cannot expand '{pattern}': directory not found: {root}")
        # Only * is a wildcard; escape every other glob metacharacter
        literal_pattern = glob.escape(pattern).replace("[*]", "*")
        return [match.relative_to(root) for match in root.glob(literal_pattern) if match.is_file()]


class FileResolver:
    """Resolves the files a package depends on.

    Usage:
        resolver = FileResolver()
        paths = resolver.resolve_modules([root / "src", root], [ModuleName.parse("Foo.Bar")], [".hs"])
        extras = resolver.resolve_globs(root, ["README.md", "data/*.txt"])
    """

    def __init__(self, filesystem: FileSystem | None = None):
        """Initialize the resolver.

        Args:
            filesystem: Filesystem view to probe (defaults to the local disk)
        """
        self.filesystem = filesystem if filesystem is not None else LocalFileSystem()

    def resolve_modules(
        self,
        dirs: Sequence[Path],
        names: Sequence[SourceName],
        extensions: Sequence[str],
    ) -> List[Path]:
        """Resolve module names and literal file names to absolute paths.

        Args:
            dirs: Directories to search, in priority order
            names: Module names (extension search) or literal relative paths
            extensions: Extensions to try for module names, in priority order

        Returns:
            One path per resolved name, in input order; unresolved modules omitted

        Raises:
            ValueError: If dirs is empty
        """
        if not dirs:
            raise ValueError("resolve_modules needs at least one search directory")
        found: List[Path] = []
        for name in names:
            if isinstance(name, ModuleName):
                path = self._find_module(dirs, name, extensions)
                if path is None:
                    logger.debug("Module %s not found in %s", name, ", ".join(str(d) for d in dirs))
                    continue
                found.append(path)
            else:
                found.append(Path(dirs[0]) / name)
        return found

    def _find_module(self, dirs: Sequence[Path], name: ModuleName, extensions: Sequence[str]) -> Path | None:
        for directory in dirs:
            for ext in extensions:
                candidate = Path(directory) / name.to_path(ext)
                if self.filesystem.is_file(candidate):
                    return candidate
        return None

    def resolve_globs(self, root: Path, patterns: Sequence[str]) -> List[Path]:
        """Resolve file patterns relative to root into absolute paths.

        Raises:
            ValueError: If a pattern is an absolute path
            OSError: If a glob pattern cannot be expanded
        """
        found: List[Path] = []
        for pattern in patterns:
            if is_absolute_path(pattern):
                raise ValueError(f"File pattern must be relative to the package root: {pattern!r}")
            if has_glob_magic(pattern):
                matches = self.filesystem.glob(root, pattern)
                logger.debug("Pattern %s matched %d file(s)", pattern, len(matches))
                found.extend(root / match for match in matches)
            else:
                found.append(root / pattern)
        return found

    def _search_dirs(self, root: Path, build_info: BuildInfo) -> List[Path]:
        return [root / d for d in build_info.hs_source_dirs] + [root]

    def build_files(self, root: Path, build_info: BuildInfo) -> List[Path]:
        """Other modules plus C sources of one target."""
        other = self.resolve_modules(self._search_dirs(root, build_info), build_info.other_modules, HASKELL_SOURCE_EXTENSIONS)
        return other + [root / c for c in build_info.c_sources]

    def library_files(self, root: Path, library: Library) -> List[Path]:
        """All files of the library: build files, then exposed modules."""
        exposed = self.resolve_modules(self._search_dirs(root, library.build_info), library.exposed_modules, HASKELL_SOURCE_EXTENSIONS)
        return self.build_files(root, library.build_info) + exposed

    def executable_files(self, root: Path, executable: Executable) -> List[Path]:
        """All files of an executable: build files, then its main module."""
        mains = [executable.main_is] if executable.main_is else []
        main = self.resolve_modules(self._search_dirs(root, executable.build_info), mains, HASKELL_SOURCE_EXTENSIONS)
        return self.build_files(root, executable.build_info) + main
