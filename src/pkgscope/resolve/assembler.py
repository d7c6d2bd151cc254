"""Package Assembler - turns conditional metadata into a PackageDescriptor.

Resolution steps:
    1. Compute the flag assignment: package defaults overridden by the
       configuration's explicit flags. Flags assigned True are enabled.
    2. Flatten the library, every executable, test suite and benchmark
       for the environment. Test suites and benchmarks get their
       ``enabled`` bit from the configuration.
    3. Aggregate dependencies and build tools across the buildable targets
       (enabled test suites and benchmarks only).
    4. Discover the files of the library and executables, buildable or not, and expand the
       data / extra-source / extra-tmp / extra-doc patterns.
    5. Build the descriptor. The metadata file is always part of the file set.

Any failure aborts the whole resolution; no partial descriptor is returned.
"""

import logging
from pathlib import Path
from typing import List, Optional

from packaging.version import Version

from pkgscope.config.environment import Environment
from pkgscope.config.package_config import PackageConfig
from pkgscope.metadata.loader import load_metadata_file
from pkgscope.metadata.model import PackageMetadata, ResolvedPackage
from pkgscope.metadata.targets import set_enabled
from pkgscope.metadata.tree import flatten

from .dependencies import aggregate_dependencies, aggregate_tools, all_dependency_names
from .descriptor import PackageDescriptor
from .errors import NoMetadataFileError
from .files import FileResolver

logger = logging.getLogger(__name__)


def resolve_package(config: PackageConfig, metadata: PackageMetadata, env: Environment) -> ResolvedPackage:
    """Flatten every target of a package for one environment.

    The enabled-flag set of ``env`` is replaced by the flags computed from
    the package defaults and ``config``.
    """
    assignment = config.effective_flags(metadata.default_flags())
    env = env.with_flags(name for name, value in assignment.items() if value)

    library = flatten(metadata.library, env) if metadata.library is not None else None
    executables = tuple(flatten(node, env) for _, node in metadata.executables)
    test_suites = tuple(set_enabled(flatten(node, env), config.enable_tests) for _, node in metadata.test_suites)
    benchmarks = tuple(set_enabled(flatten(node, env), config.enable_benchmarks) for _, node in metadata.benchmarks)

    return ResolvedPackage(
        name=metadata.name,
        version=metadata.version,
        library=library,
        executables=executables,
        test_suites=test_suites,
        benchmarks=benchmarks,
        data_files=metadata.data_files,
        extra_source_files=metadata.extra_source_files,
        extra_tmp_files=metadata.extra_tmp_files,
        extra_doc_files=metadata.extra_doc_files,
    )


def package_files(root_dir: Path, package: ResolvedPackage, resolver: FileResolver) -> List[Path]:
    """Every file referenced by a resolved package (the metadata file excluded)."""
    files: List[Path] = []
    if package.library is not None:
        files.extend(resolver.library_files(root_dir, package.library))
    for exe in package.executables:
        files.extend(resolver.executable_files(root_dir, exe))
    files.extend(resolver.resolve_globs(root_dir, package.data_files))
    files.extend(resolver.resolve_globs(root_dir, package.extra_source_files))
    files.extend(resolver.resolve_globs(root_dir, package.extra_tmp_files))
    files.extend(resolver.resolve_globs(root_dir, package.extra_doc_files))
    return files


def assemble(
    env: Environment,
    config: PackageConfig,
    metadata: PackageMetadata,
    name: str,
    version: Version,
    root_dir: Path,
    metadata_path: Path,
    resolver: Optional[FileResolver] = None,
) -> PackageDescriptor:
    """Resolve a package into its descriptor.

    Args:
        env: Target environment (its flag set is recomputed from config)
        config: Package build configuration
        metadata: Conditional package description
        name: Package name; excluded from the dependency map
        version: Package version
        root_dir: Absolute package root
        metadata_path: Metadata file, always included in the file set
        resolver: File resolver (defaults to one backed by the local disk)

    Returns:
        The immutable package descriptor

    Raises:
        NoDependenciesError: If no dependency other than the package itself is declared
        OSError: If a glob pattern cannot be expanded
    """
    resolver = resolver if resolver is not None else FileResolver()
    resolved = resolve_package(config, metadata, env)
    build_infos = resolved.all_build_info()

    dependencies = aggregate_dependencies(build_infos, name, metadata_path)
    tools = aggregate_tools(build_infos)
    files = package_files(root_dir, resolved, resolver)

    logger.debug(
        "Resolved %s-%s: %d dependencies, %d tools, %d files",
        name,
        version,
        len(dependencies),
        len(tools),
        len(files) + 1,
    )

    return PackageDescriptor(
        name=name,
        version=version,
        root_dir=root_dir,
        files=frozenset([metadata_path, *files]),
        dependencies=dependencies,
        tools=tuple(tools),
        flags=config.effective_flags(metadata.default_flags()),
        all_dependencies=all_dependency_names(build_infos, name),
    )


def read_package(
    config: PackageConfig,
    metadata_path: Path,
    env: Optional[Environment] = None,
    resolver: Optional[FileResolver] = None,
) -> PackageDescriptor:
    """Load a JSON metadata file and resolve it.

    The package root is the directory holding the metadata file.

    Args:
        config: Package build configuration
        metadata_path: Path to the metadata file
        env: Target environment (defaults to the host environment)
        resolver: File resolver (defaults to one backed by the local disk)

    Raises:
        NoMetadataFileError: If metadata_path is not a file
        InvalidMetadataError: If the metadata cannot be loaded
        NoDependenciesError: If no dependency other than the package itself is declared
    """
    metadata_path = metadata_path.absolute()
    if not metadata_path.is_file():
        raise NoMetadataFileError(metadata_path)

    metadata = load_metadata_file(metadata_path)
    env = env if env is not None else Environment.host()
    return assemble(
        env,
        config,
        metadata,
        metadata.name,
        metadata.version,
        metadata_path.parent,
        metadata_path,
        resolver,
    )
