"""
Build PackageMetadata from a decoded metadata document.

The document is the JSON form of a package description (see the project
README for the schema). This module turns already-decoded data into the
typed tree model; it does not tokenise any text format.

Every structural problem (wrong type, bad version, bad module name, a
condition referencing an undeclared flag) is reported as an
InvalidMetadataError at load time, so resolution itself never fails on a
well-formed tree.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple, TypeVar

from pkgscope.resolve.errors import InvalidMetadataError
from pkgscope.resolve.files import is_absolute_path

from .conditions import And, ArchRef, CompilerRef, ConditionExpr, FlagRef, Literal, Not, Or, OSRef
from .model import Dependency, Flag, ModuleName, PackageMetadata
from .targets import Benchmark, BuildInfo, Executable, Library, TestSuite
from .tree import Branch, ConditionNode
from .versions import VersionRange, parse_version

T = TypeVar("T")


class _Context:
    """Carries the declared flag names and source path through the loader."""

    def __init__(self, flags: FrozenSet[str], path: Optional[Path]):
        self.flags = flags
        self.path = path

    def error(self, reason: str) -> InvalidMetadataError:
        return InvalidMetadataError(self.path, reason)


def _str_list(ctx: _Context, data: Dict[str, Any], key: str) -> Tuple[str, ...]:
    value = data.get(key, [])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ctx.error(f"'{key}' must be a list of strings")
    return tuple(value)


def _relative_paths(ctx: _Context, data: Dict[str, Any], key: str) -> Tuple[str, ...]:
    paths = _str_list(ctx, data, key)
    for path in paths:
        if is_absolute_path(path):
            raise ctx.error(f"'{key}' entries must be relative to the package root, got {path!r}")
    return paths


def _modules(ctx: _Context, data: Dict[str, Any], key: str) -> Tuple[ModuleName, ...]:
    try:
        return tuple(ModuleName.parse(m) for m in _str_list(ctx, data, key))
    except ValueError as e:
        raise ctx.error(str(e)) from e


def _dependency(ctx: _Context, raw: Any) -> Dependency:
    try:
        if isinstance(raw, str):
            return Dependency.parse(raw)
        if isinstance(raw, dict) and isinstance(raw.get("name"), str):
            return Dependency(name=raw["name"], range=VersionRange.parse(str(raw.get("range", ""))))
    except ValueError as e:
        raise ctx.error(str(e)) from e
    raise ctx.error(f"Invalid dependency entry: {raw!r}")


def _dependencies(ctx: _Context, data: Dict[str, Any], key: str) -> Tuple[Dependency, ...]:
    raw = data.get(key, [])
    if not isinstance(raw, list):
        raise ctx.error(f"'{key}' must be a list")
    return tuple(_dependency(ctx, item) for item in raw)


def load_condition(data: Any, declared_flags: FrozenSet[str] = frozenset(), path: Optional[Path] = None) -> ConditionExpr:
    """Build a ConditionExpr from its JSON form.

    Raises:
        InvalidMetadataError: If the expression is malformed or references an undeclared flag
    """
    return _condition(_Context(declared_flags, path), data)


def _fold(ctx: _Context, op: str, raw: Any, combine: Callable[[ConditionExpr, ConditionExpr], ConditionExpr]) -> ConditionExpr:
    if not isinstance(raw, list) or len(raw) < 2:
        raise ctx.error(f"'{op}' needs a list of at least two conditions")
    exprs = [_condition(ctx, item) for item in raw]
    result = exprs[0]
    for expr in exprs[1:]:
        result = combine(result, expr)
    return result


def _condition(ctx: _Context, data: Any) -> ConditionExpr:
    if isinstance(data, bool):
        return Literal(data)
    if not isinstance(data, dict):
        raise ctx.error(f"Invalid condition: {data!r}")
    # "range" is only meaningful next to "impl"
    keys = data.keys() - {"range"} if "impl" in data else data.keys()
    if len(keys) != 1:
        raise ctx.error(f"Invalid condition: {data!r}")

    if "flag" in data:
        name = data["flag"]
        if not isinstance(name, str) or name not in ctx.flags:
            raise ctx.error(f"Condition references undeclared flag '{name}'")
        return FlagRef(name)
    if "os" in data:
        return OSRef(str(data["os"]))
    if "arch" in data:
        return ArchRef(str(data["arch"]))
    if "impl" in data:
        try:
            return CompilerRef(str(data["impl"]), VersionRange.parse(str(data.get("range", ""))))
        except ValueError as e:
            raise ctx.error(str(e)) from e
    if "not" in data:
        return Not(_condition(ctx, data["not"]))
    if "and" in data:
        return _fold(ctx, "and", data["and"], And)
    if "or" in data:
        return _fold(ctx, "or", data["or"], Or)
    raise ctx.error(f"Unknown condition: {data!r}")


def _build_info(ctx: _Context, data: Dict[str, Any]) -> BuildInfo:
    buildable = data.get("buildable", True)
    if not isinstance(buildable, bool):
        raise ctx.error("'buildable' must be a boolean")
    return BuildInfo(
        hs_source_dirs=_relative_paths(ctx, data, "hs-source-dirs"),
        other_modules=_modules(ctx, data, "other-modules"),
        c_sources=_relative_paths(ctx, data, "c-sources"),
        build_tools=_dependencies(ctx, data, "build-tools"),
        buildable=buildable,
    )


def _library(ctx: _Context, data: Dict[str, Any]) -> Library:
    return Library(exposed_modules=_modules(ctx, data, "exposed-modules"), build_info=_build_info(ctx, data))


def _named(cls: type) -> Callable[[_Context, Dict[str, Any]], Any]:
    def build(ctx: _Context, data: Dict[str, Any]) -> Any:
        main_is = data.get("main-is", "")
        if not isinstance(main_is, str):
            raise ctx.error("'main-is' must be a string")
        if is_absolute_path(main_is):
            raise ctx.error(f"'main-is' must be relative to a source directory, got {main_is!r}")
        return cls(name=data.get("name", ""), main_is=main_is, build_info=_build_info(ctx, data))

    return build


def _node(ctx: _Context, data: Any, make: Callable[[_Context, Dict[str, Any]], T]) -> ConditionNode[T]:
    """Build one tree node; dependencies become the node's direct dependencies."""
    if not isinstance(data, dict):
        raise ctx.error(f"Expected a section, got {data!r}")

    raw_branches = data.get("conditionals", [])
    if not isinstance(raw_branches, list):
        raise ctx.error("'conditionals' must be a list")

    branches: List[Branch[T]] = []
    for raw in raw_branches:
        if not isinstance(raw, dict) or "if" not in raw or "then" not in raw:
            raise ctx.error(f"Conditional needs 'if' and 'then': {raw!r}")
        otherwise = _node(ctx, raw["else"], make) if raw.get("else") is not None else None
        branches.append(Branch(condition=_condition(ctx, raw["if"]), then=_node(ctx, raw["then"], make), otherwise=otherwise))

    return ConditionNode(
        value=make(ctx, data),
        dependencies=_dependencies(ctx, data, "build-depends"),
        branches=tuple(branches),
    )


def _sections(
    ctx: _Context, data: Dict[str, Any], key: str, make: Callable[[_Context, Dict[str, Any]], T]
) -> Tuple[Tuple[str, ConditionNode[T]], ...]:
    raw = data.get(key, {})
    if not isinstance(raw, dict):
        raise ctx.error(f"'{key}' must be a mapping of name to section")
    sections = []
    for name, section in raw.items():
        if not isinstance(section, dict):
            raise ctx.error(f"Section '{name}' in '{key}' must be a mapping")
        sections.append((name, _node(ctx, {**section, "name": name}, make)))
    return tuple(sections)


def _flags(ctx: _Context, data: Dict[str, Any]) -> Tuple[Flag, ...]:
    raw = data.get("flags", [])
    if not isinstance(raw, list):
        raise ctx.error("'flags' must be a list")
    flags = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            raise ctx.error(f"Invalid flag declaration: {item!r}")
        default = item.get("default", True)
        if not isinstance(default, bool):
            raise ctx.error(f"Flag '{item['name']}' default must be a boolean")
        flags.append(
            Flag(
                name=item["name"],
                default=default,
                description=str(item.get("description", "")),
                manual=bool(item.get("manual", False)),
            )
        )
    return tuple(flags)


def load_metadata(data: Dict[str, Any], path: Optional[Path] = None) -> PackageMetadata:
    """Build a PackageMetadata from a decoded metadata document.

    Args:
        data: Decoded JSON document
        path: Source file, used in error messages

    Returns:
        The conditional package description

    Raises:
        InvalidMetadataError: If the document is malformed
    """
    if not isinstance(data, dict):
        raise InvalidMetadataError(path, "top level must be a mapping")

    ctx = _Context(frozenset(), path)
    flags = _flags(ctx, data)
    ctx = _Context(frozenset(f.name for f in flags), path)

    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ctx.error("missing package 'name'")
    try:
        version = parse_version(str(data.get("version", "")))
    except ValueError as e:
        raise ctx.error(str(e)) from e

    library = _node(ctx, data["library"], _library) if data.get("library") is not None else None

    return PackageMetadata(
        name=name,
        version=version,
        flags=flags,
        library=library,
        executables=_sections(ctx, data, "executables", _named(Executable)),
        test_suites=_sections(ctx, data, "test-suites", _named(TestSuite)),
        benchmarks=_sections(ctx, data, "benchmarks", _named(Benchmark)),
        data_files=_relative_paths(ctx, data, "data-files"),
        extra_source_files=_relative_paths(ctx, data, "extra-source-files"),
        extra_tmp_files=_relative_paths(ctx, data, "extra-tmp-files"),
        extra_doc_files=_relative_paths(ctx, data, "extra-doc-files"),
    )


def load_metadata_file(path: Path) -> PackageMetadata:
    """Read and load a JSON metadata file.

    Raises:
        OSError: If the file cannot be read
        InvalidMetadataError: If the file is not valid JSON or is malformed
    """
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidMetadataError(path, f"not valid JSON: {e}") from e
    return load_metadata(data, path)
