"""Backtracking VM that runs a compiled program against text."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from regvm.config import Config
from regvm.exceptions import StepLimitExceeded
from regvm.vm.inst import OpCode, Position
from regvm.vm.program import Program

logger = logging.getLogger(__name__)

Span = Tuple[int, int]

# Open capture groups are kept as a cons list: None, or (start, rest).
# Backtrack entries hold a reference to it, so checkpoints are O(1) and a
# group closed on an abandoned path is reopened on rollback.
OpenGroups = Optional[Tuple[int, "OpenGroups"]]


@dataclass
class MatchResult:
    """Result of a successful search.

    Attributes:
        text: The searched text.
        spans: Whole-match span first, then capture spans in the order their
            groups closed.
        steps: Instructions executed by the search that produced this match.
    """

    text: str
    spans: List[Span] = field(default_factory=list)
    steps: int = 0

    @property
    def start(self) -> int:
        return self.spans[0][0]

    @property
    def end(self) -> int:
        return self.spans[0][1]

    def span(self, index: int = 0) -> Span:
        """Return the span at ``index`` (0 is the whole match)."""
        return self.spans[index]

    def group(self, index: int = 0) -> str:
        """Return the text matched at ``index`` (0 is the whole match)."""
        start, end = self.spans[index]
        return self.text[start:end]

    def groups(self) -> List[str]:
        """Return the captured texts, excluding the whole match."""
        return [self.text[start:end] for start, end in self.spans[1:]]


class Interpreter:
    """Executes a Program with depth-first backtracking.

    A BRANCH pushes a checkpoint for its alternate target and continues with
    its primary target; any failed test pops the newest checkpoint. All
    execution state lives in local variables of one call, so a single
    Interpreter (and a single Program) can serve concurrent searches.
    """

    def __init__(self, program: Program, config: Config = None):
        self.program = program
        self.config = config or Config.default()

    def search(self, text: str) -> Optional[MatchResult]:
        """Find the leftmost match in ``text``.

        Start offsets are tried in increasing order and the first offset
        that matches wins. An empty text never matches. The step budget
        applies to each start offset separately.

        Raises:
            StepLimitExceeded: If one start offset runs past the step budget.
        """
        total = 0
        for start in range(len(text)):
            spans, steps = self._execute(text, start)
            total += steps
            if spans is not None:
                logger.debug(
                    "matched at offset %d of %d chars after %d steps",
                    start,
                    len(text),
                    total,
                )
                return MatchResult(text, spans, total)
        logger.debug("no match in %d chars after %d steps", len(text), total)
        return None

    def match_at(self, text: str, start: int) -> Optional[MatchResult]:
        """Try to match starting exactly at offset ``start``."""
        spans, steps = self._execute(text, start)
        if spans is None:
            return None
        return MatchResult(text, spans, steps)

    def _execute(self, text: str, start: int) -> Tuple[Optional[List[Span]], int]:
        """Run the program from ``start``.

        Returns:
            The spans (or None) and the steps executed from this offset.
        """
        instructions = self.program.instructions
        size = len(instructions)
        end = len(text)
        limit = self.config.max_steps

        backtrack: List[Tuple[int, int, OpenGroups, int]] = []
        opened: OpenGroups = None
        closed: List[Span] = []
        pc, sp = 0, start
        steps = 0

        while True:
            if limit is not None and steps >= limit:
                logger.warning(
                    "step limit of %d reached at offset %d of %d chars",
                    limit,
                    start,
                    end,
                )
                raise StepLimitExceeded(steps)
            steps += 1

            if not 0 <= pc < size:
                return None, steps
            inst = instructions[pc]
            op = inst.op

            if op == OpCode.MATCH_CHAR:
                if sp < end and inst.char.matches(text[sp]):
                    pc += 1
                    sp += 1
                    continue

            elif op == OpCode.MATCH_POS:
                if inst.position == Position.FRONT:
                    ok = sp == 0
                else:
                    ok = sp == end
                if ok:
                    pc += 1
                    continue

            elif op == OpCode.BRANCH:
                backtrack.append((inst.y, sp, opened, len(closed)))
                pc = inst.x
                continue

            elif op == OpCode.JUMP:
                pc = inst.x
                continue

            elif op == OpCode.GROUP_PAREN_L:
                opened = (sp, opened)
                pc += 1
                continue

            elif op == OpCode.GROUP_PAREN_R:
                if opened is None:
                    return None, steps
                group_start, opened = opened
                closed.append((group_start, sp))
                pc += 1
                continue

            elif op == OpCode.FINISH:
                return [(start, sp)] + closed, steps

            # The test failed: resume from the newest checkpoint.
            if not backtrack:
                return None, steps
            pc, sp, opened, depth = backtrack.pop()
            # Drop spans closed on the abandoned path; they are never reported.
            del closed[depth:]


def search(
    program: Program, text: str, config: Config = None
) -> Optional[List[Span]]:
    """Search ``text`` for the leftmost match of ``program``.

    Returns:
        ``[(start, end), *captures]`` or None when nothing matches.

    Raises:
        StepLimitExceeded: If the configured step budget runs out.
    """
    result = Interpreter(program, config).search(text)
    if result is None:
        return None
    return result.spans
