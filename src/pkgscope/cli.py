"""
Command-line interface for pkgscope.

This module provides the `pkgscope` tool, which resolves a package's
conditional metadata for one environment and reports its dependencies and
the files it depends on.
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from pkgscope import __version__
from pkgscope.config.environment import CompilerId, Environment
from pkgscope.config.package_config import PackageConfig, parse_flag_assignment
from pkgscope.metadata.loader import load_metadata_file
from pkgscope.output import TimedLogger, init_timer, log_error, log_header, log_summary, set_verbose
from pkgscope.resolve.assembler import assemble
from pkgscope.resolve.descriptor import PackageDescriptor
from pkgscope.resolve.errors import NoMetadataFileError, PackageError


@dataclass
class ResolveArgs:
    """Arguments for the resolve command."""

    metadata: Path
    flags: str = ""
    enable_tests: bool = False
    enable_benchmarks: bool = False
    os: Optional[str] = None
    arch: Optional[str] = None
    compiler: Optional[str] = None
    json: bool = False
    verbose: bool = False


def _environment(args: ResolveArgs) -> Environment:
    compiler = CompilerId.parse(args.compiler) if args.compiler else None
    host = Environment.host(compiler)
    return Environment.create(args.os or host.os, args.arch or host.arch, host.compiler)


def render_descriptor(descriptor: PackageDescriptor, console: Console) -> None:
    """Print a descriptor as Rich tables."""
    console.print(f"[bold]{descriptor.name}[/bold] {descriptor.version}  ({descriptor.root_dir})")

    deps = Table(title="Dependencies")
    deps.add_column("Package")
    deps.add_column("Range")
    for name, rng in sorted(descriptor.dependencies.items()):
        deps.add_row(name, str(rng))
    console.print(deps)

    if descriptor.tools:
        tools = Table(title="Build tools")
        tools.add_column("Tool")
        for tool in descriptor.tools:
            tools.add_row(str(tool))
        console.print(tools)

    if descriptor.flags:
        flags = Table(title="Flags")
        flags.add_column("Flag")
        flags.add_column("Value")
        for name, value in sorted(descriptor.flags.items()):
            flags.add_row(name, "on" if value else "off")
        console.print(flags)

    files = Table(title="Files")
    files.add_column("Path")
    for path in sorted(descriptor.files):
        try:
            files.add_row(str(path.relative_to(descriptor.root_dir)))
        except ValueError:
            files.add_row(str(path))
    console.print(files)


def resolve_command(args: ResolveArgs) -> None:
    """Resolve a package metadata file and print the result.

    Examples:
        pkgscope resolve foo.json
        pkgscope resolve foo.json --flags "dev -opt" --enable-tests
        pkgscope resolve foo.json --os windows --arch x86_64 --compiler ghc-9.4.8 --json
    """
    try:
        config = PackageConfig(
            enable_tests=args.enable_tests,
            enable_benchmarks=args.enable_benchmarks,
            flags=parse_flag_assignment(args.flags),
        )
        env = _environment(args)
        metadata_path = args.metadata.absolute()
        if not metadata_path.is_file():
            raise NoMetadataFileError(metadata_path)

        quiet = args.json
        if not quiet:
            log_header("pkgscope", __version__)

        with TimedLogger("Loading metadata", phase=(1, 2), verbose_only=quiet) as timer:
            metadata = load_metadata_file(metadata_path)
            timer.detail(f"Package: {metadata.name}-{metadata.version}")
            timer.detail(f"Environment: {env.os}/{env.arch} {env.compiler}")

        with TimedLogger("Resolving package", phase=(2, 2), verbose_only=quiet):
            descriptor = assemble(
                env,
                config,
                metadata,
                metadata.name,
                metadata.version,
                metadata_path.parent,
                metadata_path,
            )

        log_summary(
            descriptor.name,
            str(descriptor.version),
            len(descriptor.dependencies),
            len(descriptor.tools),
            len(descriptor.files),
            verbose_only=quiet,
        )

        if args.json:
            print(json.dumps(descriptor.to_dict(), indent=2))
        else:
            render_descriptor(descriptor, Console())

    except (PackageError, OSError, ValueError) as e:
        log_error(str(e))
        if args.verbose:
            import traceback

            print()
            print("Traceback:")
            print(traceback.format_exc())
        sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    """pkgscope - resolve conditional package metadata."""
    parser = argparse.ArgumentParser(
        prog="pkgscope",
        description="Resolve conditional package metadata into dependencies and files",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"pkgscope {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a package metadata file",
    )
    resolve_parser.add_argument(
        "metadata",
        type=Path,
        help="Package metadata file (JSON)",
    )
    resolve_parser.add_argument(
        "-f",
        "--flags",
        default="",
        help='Flag assignment, e.g. "dev -opt" (default: package defaults)',
    )
    resolve_parser.add_argument(
        "--enable-tests",
        action="store_true",
        help="Mark test suites as enabled",
    )
    resolve_parser.add_argument(
        "--enable-benchmarks",
        action="store_true",
        help="Mark benchmarks as enabled",
    )
    resolve_parser.add_argument(
        "--os",
        default=None,
        help="Target operating system (default: host)",
    )
    resolve_parser.add_argument(
        "--arch",
        default=None,
        help="Target architecture (default: host)",
    )
    resolve_parser.add_argument(
        "--compiler",
        default=None,
        help="Compiler id such as ghc-9.6.3 (default: $PKGSCOPE_COMPILER)",
    )
    resolve_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the descriptor as JSON",
    )
    resolve_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging and tracebacks",
    )

    parsed = parser.parse_args(argv)

    if parsed.command != "resolve":
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    init_timer(sys.stderr if parsed.json else None)
    set_verbose(parsed.verbose)

    resolve_command(
        ResolveArgs(
            metadata=parsed.metadata,
            flags=parsed.flags,
            enable_tests=parsed.enable_tests,
            enable_benchmarks=parsed.enable_benchmarks,
            os=parsed.os,
            arch=parsed.arch,
            compiler=parsed.compiler,
            json=parsed.json,
            verbose=parsed.verbose,
        )
    )


if __name__ == "__main__":
    main()
