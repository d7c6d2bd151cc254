"""pkgscope - resolve conditional package metadata into dependencies and files.

Public API:
    read_package: Load a JSON metadata file and resolve it
    assemble: Resolve an already-loaded PackageMetadata
    flatten: Flatten one condition tree for an Environment
    FileResolver: Module and glob file discovery
"""

__version__ = "0.1.0"

from pkgscope.config.environment import CompilerId, Environment  # noqa: E402
from pkgscope.config.package_config import PackageConfig  # noqa: E402
from pkgscope.metadata.model import Dependency, ModuleName, PackageMetadata  # noqa: E402
from pkgscope.metadata.tree import flatten  # noqa: E402
from pkgscope.resolve.assembler import assemble, read_package, resolve_package  # noqa: E402
from pkgscope.resolve.descriptor import PackageDescriptor  # noqa: E402
from pkgscope.resolve.errors import InvalidMetadataError, NoDependenciesError, PackageError  # noqa: E402
from pkgscope.resolve.files import FileResolver  # noqa: E402

__all__ = [
    "CompilerId",
    "Dependency",
    "Environment",
    "FileResolver",
    "InvalidMetadataError",
    "ModuleName",
    "NoDependenciesError",
    "PackageConfig",
    "PackageDescriptor",
    "PackageError",
    "PackageMetadata",
    "assemble",
    "flatten",
    "read_package",
    "resolve_package",
]
