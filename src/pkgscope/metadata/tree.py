"""Conditional metadata trees and their flattening.

A ConditionNode holds a base target value, the dependencies declared
directly at that node, and a list of branches. Each branch is gated by a
ConditionExpr and has a "then" subtree and an optional "otherwise" subtree.

Flattening for a fixed Environment merges, in declaration order:

    base ⊕ deps(node) ⊕ flatten(selected subtree of branch 1) ⊕ ...

where the selected subtree is "then" when the condition holds, "otherwise"
when it does not and one exists, and nothing (the identity) otherwise.

Because merge is associative this equals a left fold over the selected nodes
visited in pre-order, which is how ``flatten`` computes it: an explicit
stack instead of recursion, so deep trees cannot hit the recursion limit.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, List, Optional, Tuple

from .conditions import ConditionExpr
from .targets import T, with_dependencies

if TYPE_CHECKING:
    from pkgscope.config.environment import Environment

    from .model import Dependency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Branch(Generic[T]):
    condition: ConditionExpr
    then: "ConditionNode[T]"
    otherwise: Optional["ConditionNode[T]"] = None

    def select(self, env: "Environment") -> Optional["ConditionNode[T]"]:
        """Subtree that applies in this environment, or None for the identity."""
        if self.condition.evaluate(env):
            return self.then
        return self.otherwise


@dataclass(frozen=True)
class ConditionNode(Generic[T]):
    """One node of a conditional tree.

    Attributes:
        value: Base target value at this node
        dependencies: Dependencies declared directly at this node
        branches: Conditional children, in declaration order
    """

    value: T
    dependencies: Tuple["Dependency", ...] = ()
    branches: Tuple[Branch[T], ...] = ()

    def basic(self) -> T:
        """Base value merged with the node's direct dependencies."""
        return self.value.merge(with_dependencies(self.value, self.dependencies))


def flatten(node: ConditionNode[T], env: "Environment") -> T:
    """Resolve a conditional tree into one concrete target for ``env``.

    Args:
        node: Root of the tree
        env: Environment conditions are evaluated against

    Returns:
        The merged target value; deterministic for a given (tree, env)
    """
    result = node.value.empty()
    stack: List[ConditionNode[T]] = [node]
    visited = 0

    while stack:
        current = stack.pop()
        visited += 1
        result = result.merge(current.basic())
        selected = [branch.select(env) for branch in current.branches]
        # Push in reverse so branches are merged in declaration order
        stack.extend(child for child in reversed(selected) if child is not None)

    logger.debug("Flattened %s tree: %d node(s) selected", type(node.value).__name__, visited)
    return result
