"""Per-package build configuration supplied by the caller."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


def parse_flag_assignment(text: str) -> Dict[str, bool]:
    """Parse a flag assignment string such as "dev -opt +fast".

    A leading "-" disables a flag; a bare name or a leading "+" enables it.

    Raises:
        ValueError: If a token has no flag name
    """
    flags: Dict[str, bool] = {}
    for token in text.replace(",", " ").split():
        value = not token.startswith("-")
        name = token.lstrip("+-")
        if not name:
            raise ValueError(f"Invalid flag assignment: {token!r}")
        flags[name] = value
    return flags


@dataclass(frozen=True)
class PackageConfig:
    """Options that control how one package is resolved.

    Attributes:
        enable_tests: Whether test suites are enabled for building
        enable_benchmarks: Whether benchmarks are enabled for building
        flags: Explicit flag values; these override the package's defaults
    """

    enable_tests: bool = False
    enable_benchmarks: bool = False
    flags: Mapping[str, bool] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackageConfig":
        """
        Parse a package configuration from a dictionary.

        Accepts both snake_case and dashed keys ("enable-tests"). ``flags``
        may be a mapping of name to bool or an assignment string.

        Raises:
            ValueError: If a field has the wrong type
        """
        enable_tests = data.get("enable_tests", data.get("enable-tests", False))
        enable_benchmarks = data.get("enable_benchmarks", data.get("enable-benchmarks", False))
        if not isinstance(enable_tests, bool) or not isinstance(enable_benchmarks, bool):
            raise ValueError("enable_tests and enable_benchmarks must be booleans")

        raw_flags = data.get("flags", {})
        if isinstance(raw_flags, str):
            flags = parse_flag_assignment(raw_flags)
        elif isinstance(raw_flags, dict) and all(isinstance(v, bool) for v in raw_flags.values()):
            flags = {str(k): v for k, v in raw_flags.items()}
        else:
            raise ValueError(f"flags must be a mapping of name to bool or a string, got {raw_flags!r}")

        return cls(enable_tests=enable_tests, enable_benchmarks=enable_benchmarks, flags=flags)

    def effective_flags(self, defaults: Mapping[str, bool]) -> Dict[str, bool]:
        """Package defaults overridden by the explicit flags of this configuration."""
        merged = dict(defaults)
        merged.update(self.flags)
        return merged
