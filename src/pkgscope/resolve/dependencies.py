"""Dependency aggregation across the targets of one package.

Dependencies from every target are inserted into one name-keyed mapping in
target order (library, executables, test suites, benchmarks). Only targets
that will be built are passed in: see ResolvedPackage.all_build_info. A name declared
more than once keeps the range from the last target processed; ranges are
never intersected. The package's own name is removed before returning.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pkgscope.metadata.model import Dependency
from pkgscope.metadata.targets import BuildInfo
from pkgscope.metadata.versions import VersionRange

from .errors import NoDependenciesError

logger = logging.getLogger(__name__)


def aggregate_dependencies(
    build_infos: Sequence[BuildInfo],
    package_name: str,
    metadata_path: Optional[Path] = None,
) -> Dict[str, VersionRange]:
    """Merge the dependencies of all targets into one mapping.

    Args:
        build_infos: Flattened build info of the buildable targets, in target order
        package_name: Name of the package itself, excluded from the result
        metadata_path: Metadata file, reported in the error

    Returns:
        Dependency name to version range, without the package itself

    Raises:
        NoDependenciesError: If nothing remains after removing the package itself
    """
    deps: Dict[str, VersionRange] = {}
    for info in build_infos:
        for dep in info.build_depends:
            if dep.name in deps and deps[dep.name] != dep.range:
                logger.debug("Dependency %s: range %s replaced by %s", dep.name, deps[dep.name], dep.range)
            deps[dep.name] = dep.range

    if deps.pop(package_name, None) is not None:
        logger.debug("Dropped self-dependency on %s", package_name)

    if not deps:
        raise NoDependenciesError(metadata_path)
    return deps


def aggregate_tools(build_infos: Sequence[BuildInfo]) -> List[Dependency]:
    """Build-tool dependencies of all targets, concatenated without deduplication."""
    return [tool for info in build_infos for tool in info.build_tools]


def all_dependency_names(build_infos: Sequence[BuildInfo], package_name: str) -> frozenset[str]:
    """Every declared dependency name, excluding the package itself."""
    return frozenset(dep.name for info in build_infos for dep in info.build_depends if dep.name != package_name)
