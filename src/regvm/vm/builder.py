"""Build VM program from regex AST.

Every node is compiled into a fragment whose jump targets are relative to
the fragment's own first instruction, so fragments can be concatenated
freely. Once the whole tree is assembled a single relocation pass adds each
instruction's index to its targets, producing absolute addresses.
"""

import logging
from typing import List

from regvm.exceptions import CompileError
from regvm.parser.ast import (
    Node,
    PrefixSuffix,
    Branch,
    Connect,
    Group,
    RepeatStar,
    RepeatPlus,
    Maybe,
    RepeatRange,
    AnyChar,
    CharClass,
    Literal,
    count_groups,
)
from regvm.vm.inst import Inst
from regvm.vm.program import Program

logger = logging.getLogger(__name__)

Fragment = List[Inst]


class ProgramBuilder:
    """Builds a VM program from a regex AST."""

    def build(self, node: Node, source: str = "") -> Program:
        """Build a program from an AST.

        Args:
            node: The root node, normally a PrefixSuffix from the parser.
            source: The pattern text, kept on the program for display.

        Returns:
            A validated Program.

        Raises:
            CompileError: If the tree is malformed.
        """
        fragment = self._compile(node)
        fragment.append(Inst.finish())

        program = Program(
            instructions=tuple(self._relocate(fragment)),
            num_groups=count_groups(node),
            source=source,
        )
        program.validate()
        logger.debug(
            "compiled %r into %d instructions", source or node, len(program)
        )
        return program

    @staticmethod
    def _relocate(fragment: Fragment) -> Fragment:
        """Turn fragment-relative targets into absolute indices."""
        return [inst.relocate(index) for index, inst in enumerate(fragment)]

    def _compile(self, node: Node) -> Fragment:
        """Compile a node into a relative fragment."""
        if isinstance(node, Literal):
            return [Inst.literal(node.char)]

        elif isinstance(node, AnyChar):
            return [Inst.any_char()]

        elif isinstance(node, CharClass):
            return [Inst.char_class(node.negated, node.members)]

        elif isinstance(node, PrefixSuffix):
            return self._compile_prefix_suffix(node)

        elif isinstance(node, Branch):
            return self._compile_branch(node)

        elif isinstance(node, Connect):
            return self._compile_connect(node)

        elif isinstance(node, Group):
            return [Inst.group_paren_l()] + self._compile(node.body) + [
                Inst.group_paren_r()
            ]

        elif isinstance(node, Maybe):
            return self._compile_maybe(node.body)

        elif isinstance(node, RepeatStar):
            return self._compile_star(node.body)

        elif isinstance(node, RepeatPlus):
            return self._compile_plus(node.body)

        elif isinstance(node, RepeatRange):
            return self._compile_range(node)

        raise CompileError(f"cannot compile node {node!r}")

    def _compile_prefix_suffix(self, node: PrefixSuffix) -> Fragment:
        fragment: Fragment = []
        if node.anchor_start:
            fragment.append(Inst.front())
        fragment.extend(self._compile(node.body))
        if node.anchor_end:
            fragment.append(Inst.back())
        return fragment

    def _compile_branch(self, node: Branch) -> Fragment:
        """Compile alternation.

        The last alternative is the base case; everything before it is
        compiled as a nested alternation tried first, so alternatives keep
        their left-to-right priority.
        """
        alternatives = node.alternatives
        if not alternatives:
            raise CompileError("Branch node has no alternatives")

        fragment = self._compile(alternatives[0])
        for alternative in alternatives[1:]:
            fragment = self._join_branch(fragment, self._compile(alternative))
        return fragment

    @staticmethod
    def _join_branch(x: Fragment, y: Fragment) -> Fragment:
        return (
            [Inst.branch(1, 2 + len(x))]
            + x
            + [Inst.jump(1 + len(y))]
            + y
        )

    def _compile_connect(self, node: Connect) -> Fragment:
        if not node.factors:
            raise CompileError("Connect node has no factors")

        fragment: Fragment = []
        for factor in node.factors:
            fragment.extend(self._compile(factor))
        return fragment

    def _compile_maybe(self, body: Node) -> Fragment:
        """Compile ? (zero or one). The body is tried before the skip."""
        body_fragment = self._compile(body)
        return [Inst.branch(1, 1 + len(body_fragment))] + body_fragment

    def _compile_star(self, body: Node) -> Fragment:
        """Compile * (zero or more). Re-entering the loop is tried first."""
        body_fragment = self._compile(body)
        size = len(body_fragment)
        return (
            [Inst.branch(1, 2 + size)]
            + body_fragment
            + [Inst.jump(-(1 + size))]
        )

    def _compile_plus(self, body: Node) -> Fragment:
        """Compile + (one or more)."""
        body_fragment = self._compile(body)
        size = len(body_fragment)
        return body_fragment + [Inst.branch(-size, 1)]

    def _compile_range(self, node: RepeatRange) -> Fragment:
        """Compile {min,max} by expanding it into copies of the body."""
        if node.min > node.max:
            raise CompileError(
                f"invalid repeat range {{{node.min},{node.max}}}: "
                f"min is greater than max"
            )
        factors: List[Node] = [node.body] * node.min
        factors.extend(Maybe(node.body) for _ in range(node.max - node.min))
        if not factors:
            # {0,0} matches the empty string
            return []
        return self._compile(Connect(factors))


def compile(ast: Node, source: str = "") -> Program:
    """Compile an AST into a VM program.

    Raises:
        CompileError: If the tree is malformed.
    """
    return ProgramBuilder().build(ast, source)
