"""Version and version-range values used by package metadata.

Ranges are stored and compared, never solved: the only question this module
answers is whether a single version lies inside a range (needed to evaluate
compiler conditions). Everything else treats a VersionRange as opaque data.

Accepted range spellings:
    - PEP 440 clauses:          ">=4.2, <5", "==1.2.*"
    - Package-description form: ">=4.2 && <5", "<1 || >=2", "^>=1.4.2"
    - Unconstrained:            "", "-any", "any", "*"
"""

import re
from dataclasses import dataclass
from typing import Iterable, Tuple

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

_ANY_SPELLINGS = frozenset({"", "-any", "any", "*"})
_MAJOR_BOUND = re.compile(r"\^>=\s*([0-9][0-9.]*)")


def parse_version(text: str) -> Version:
    """Parse a version string.

    Raises:
        ValueError: If the string is not a valid version
    """
    try:
        return Version(text.strip())
    except InvalidVersion as e:
        raise ValueError(f"Invalid version: {text!r}") from e


def _expand_major_bound(match: "re.Match[str]") -> str:
    # ^>=1.4.2 means >=1.4.2 && <1.5
    lower = match.group(1).rstrip(".")
    parts = [int(p) for p in lower.split(".")]
    while len(parts) < 2:
        parts.append(0)
    upper = f"{parts[0]}.{parts[1] + 1}"
    return f">={lower},<{upper}"


def _clause_to_specifier(clause: str) -> SpecifierSet:
    clause = clause.strip()
    if clause in _ANY_SPELLINGS:
        return SpecifierSet()
    clause = _MAJOR_BOUND.sub(_expand_major_bound, clause)
    clause = clause.replace("&&", ",")
    # A bare version means an exact match
    if re.fullmatch(r"[0-9][0-9.]*", clause):
        clause = f"=={clause}"
    try:
        return SpecifierSet(clause)
    except InvalidSpecifier as e:
        raise ValueError(f"Invalid version range: {clause!r}") from e


@dataclass(frozen=True)
class VersionRange:
    """A set of acceptable versions: the union of one or more specifier sets.

    Attributes:
        alternatives: Specifier sets joined by "or"; a version is inside the
            range if any of them contains it
        text: Original spelling, kept for display
    """

    alternatives: Tuple[SpecifierSet, ...]
    text: str = ""

    @classmethod
    def any(cls) -> "VersionRange":
        """Range containing every version."""
        return cls(alternatives=(SpecifierSet(),), text="-any")

    @classmethod
    def parse(cls, text: str) -> "VersionRange":
        """Parse a range expression.

        Raises:
            ValueError: If any clause is not a valid range
        """
        stripped = text.strip()
        if stripped in _ANY_SPELLINGS:
            return cls.any()
        alternatives = tuple(_clause_to_specifier(part) for part in stripped.split("||"))
        return cls(alternatives=alternatives, text=stripped)

    @classmethod
    def union(cls, ranges: Iterable["VersionRange"]) -> "VersionRange":
        """Combine ranges into one accepting any version they accept."""
        ranges = list(ranges)
        alternatives = tuple(alt for r in ranges for alt in r.alternatives)
        return cls(alternatives=alternatives, text=" || ".join(r.text for r in ranges))

    @property
    def is_any(self) -> bool:
        return any(str(alt) == "" for alt in self.alternatives)

    def contains(self, version: Version) -> bool:
        """Check whether a version lies inside this range (pre-releases included)."""
        return any(alt.contains(version, prereleases=True) for alt in self.alternatives)

    def __contains__(self, version: Version) -> bool:
        return self.contains(version)

    def __str__(self) -> str:
        return self.text or " || ".join(str(alt) for alt in self.alternatives)
