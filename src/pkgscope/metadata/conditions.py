"""Boolean condition expressions gating branches of a metadata tree.

The variant set is closed: FlagRef, OSRef, ArchRef, CompilerRef, Not, And,
Or and Literal. Every variant is an immutable value with an ``evaluate``
method; evaluation has no side effects and both operands of And/Or are
always evaluated.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Union

from pkgscope.config.environment import normalize_arch, normalize_os

from .versions import VersionRange

if TYPE_CHECKING:
    from pkgscope.config.environment import Environment


@dataclass(frozen=True)
class FlagRef:
    """True iff the flag is in the environment's enabled set."""

    name: str

    def evaluate(self, env: "Environment") -> bool:
        return self.name in env.flags

    def variables(self) -> Iterator[str]:
        yield self.name


@dataclass(frozen=True)
class OSRef:
    """True iff the environment targets this operating system."""

    os: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "os", normalize_os(self.os))

    def evaluate(self, env: "Environment") -> bool:
        return self.os == env.os

    def variables(self) -> Iterator[str]:
        return iter(())


@dataclass(frozen=True)
class ArchRef:
    """True iff the environment targets this CPU architecture."""

    arch: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "arch", normalize_arch(self.arch))

    def evaluate(self, env: "Environment") -> bool:
        return self.arch == env.arch

    def variables(self) -> Iterator[str]:
        return iter(())


@dataclass(frozen=True)
class CompilerRef:
    """True iff the compiler flavor matches and its version lies in range."""

    flavor: str
    range: VersionRange = field(default_factory=VersionRange.any)

    def evaluate(self, env: "Environment") -> bool:
        same_flavor = self.flavor.lower() == env.compiler.flavor.lower()
        in_range = self.range.contains(env.compiler.version)
        return same_flavor and in_range

    def variables(self) -> Iterator[str]:
        return iter(())


@dataclass(frozen=True)
class Literal:
    value: bool

    def evaluate(self, env: "Environment") -> bool:
        return self.value

    def variables(self) -> Iterator[str]:
        return iter(())


@dataclass(frozen=True)
class Not:
    expr: "ConditionExpr"

    def evaluate(self, env: "Environment") -> bool:
        return not self.expr.evaluate(env)

    def variables(self) -> Iterator[str]:
        return self.expr.variables()


@dataclass(frozen=True)
class And:
    left: "ConditionExpr"
    right: "ConditionExpr"

    def evaluate(self, env: "Environment") -> bool:
        results = [self.left.evaluate(env), self.right.evaluate(env)]
        return all(results)

    def variables(self) -> Iterator[str]:
        yield from self.left.variables()
        yield from self.right.variables()


@dataclass(frozen=True)
class Or:
    left: "ConditionExpr"
    right: "ConditionExpr"

    def evaluate(self, env: "Environment") -> bool:
        results = [self.left.evaluate(env), self.right.evaluate(env)]
        return any(results)

    def variables(self) -> Iterator[str]:
        yield from self.left.variables()
        yield from self.right.variables()


ConditionExpr = Union[FlagRef, OSRef, ArchRef, CompilerRef, Literal, Not, And, Or]
