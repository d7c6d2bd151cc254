"""Unit tests for condition expressions."""

import pytest

from pkgscope.config.environment import CompilerId, Environment
from pkgscope.metadata.conditions import And, ArchRef, CompilerRef, FlagRef, Literal, Not, Or, OSRef
from pkgscope.metadata.versions import VersionRange


class _Recorder:
    """Condition that records every evaluation."""

    def __init__(self, value: bool, calls: list):
        self.value = value
        self.calls = calls

    def evaluate(self, env):
        self.calls.append(self)
        return self.value


class TestFlagRef:
    """FlagRef is true iff the flag is enabled."""

    def test_enabled_flag(self, linux_env):
        """A flag in the enabled set evaluates true."""
        env = linux_env.with_flags(["dev", "fast"])
        assert FlagRef("dev").evaluate(env)

    def test_disabled_flag(self, linux_env):
        """A flag outside the enabled set evaluates false."""
        assert not FlagRef("dev").evaluate(linux_env)

    @pytest.mark.parametrize("order", [["a", "b", "c"], ["c", "b", "a"], ["b", "c", "a"]])
    def test_independent_of_declaration_order(self, linux_env, order):
        """Membership does not depend on the order flags were given."""
        env = linux_env.with_flags(order)
        assert FlagRef("b").evaluate(env)
        assert not FlagRef("d").evaluate(env)


class TestPlatformRefs:
    """OS and architecture comparisons."""

    def test_os_match(self, linux_env):
        assert OSRef("linux").evaluate(linux_env)
        assert not OSRef("windows").evaluate(linux_env)

    def test_os_aliases_normalised(self):
        """darwin, macos and osx name the same OS."""
        env = Environment.create("Darwin", "arm64", CompilerId.parse("ghc-9.6.3"))
        assert OSRef("osx").evaluate(env)
        assert OSRef("macos").evaluate(env)

    def test_arch_match(self, linux_env):
        assert ArchRef("x86_64").evaluate(linux_env)
        assert ArchRef("amd64").evaluate(linux_env)
        assert not ArchRef("aarch64").evaluate(linux_env)


class TestCompilerRef:
    """Compiler flavor and version range."""

    def test_flavor_and_range_match(self, linux_env):
        assert CompilerRef("ghc", VersionRange.parse(">=9.4")).evaluate(linux_env)

    def test_flavor_case_insensitive(self, linux_env):
        assert CompilerRef("GHC", VersionRange.any()).evaluate(linux_env)

    def test_version_out_of_range(self, linux_env):
        assert not CompilerRef("ghc", VersionRange.parse("<9")).evaluate(linux_env)

    def test_other_flavor(self, linux_env):
        """A different implementation never matches, whatever the range."""
        assert not CompilerRef("ghcjs", VersionRange.any()).evaluate(linux_env)


class TestCombinators:
    """Not / And / Or / Literal."""

    def test_literal(self, linux_env):
        assert Literal(True).evaluate(linux_env)
        assert not Literal(False).evaluate(linux_env)

    def test_not(self, linux_env):
        assert Not(OSRef("windows")).evaluate(linux_env)

    @pytest.mark.parametrize("left,right", [(True, True), (True, False), (False, True), (False, False)])
    def test_truth_tables(self, linux_env, left, right):
        assert And(Literal(left), Literal(right)).evaluate(linux_env) == (left and right)
        assert Or(Literal(left), Literal(right)).evaluate(linux_env) == (left or right)

    def test_and_evaluates_both_operands(self, linux_env):
        """And does not short-circuit on a false left operand."""
        calls: list = []
        left, right = _Recorder(False, calls), _Recorder(True, calls)
        assert not And(left, right).evaluate(linux_env)
        assert calls == [left, right]

    def test_or_evaluates_both_operands(self, linux_env):
        """Or does not short-circuit on a true left operand."""
        calls: list = []
        left, right = _Recorder(True, calls), _Recorder(False, calls)
        assert Or(left, right).evaluate(linux_env)
        assert calls == [left, right]

    def test_variables(self):
        """variables() lists every referenced flag."""
        expr = And(FlagRef("dev"), Or(Not(FlagRef("fast")), OSRef("linux")))
        assert list(expr.variables()) == ["dev", "fast"]
