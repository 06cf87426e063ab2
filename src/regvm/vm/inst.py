"""VM instruction definitions."""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import FrozenSet, Iterable, Optional, Tuple


class OpCode(Enum):
    """VM operation codes."""

    MATCH_CHAR = auto()  # Consume one character if it matches
    JUMP = auto()  # Unconditional jump
    BRANCH = auto()  # Try x first, backtrack to y
    MATCH_POS = auto()  # Zero-width ^ or $ assertion
    GROUP_PAREN_L = auto()  # Open a capture group
    GROUP_PAREN_R = auto()  # Close the innermost open capture group
    FINISH = auto()  # Successful match


class CharKind(Enum):
    """Kinds of single-character matchers."""

    LITERAL = auto()
    ANY = auto()
    CLASS = auto()


class Position(Enum):
    """Anchor positions checked by MATCH_POS."""

    FRONT = auto()
    BACK = auto()


@dataclass(frozen=True)
class CharMatch:
    """Operand of MATCH_CHAR.

    Attributes:
        kind: Which test to apply.
        char: The character for LITERAL.
        members: The member set for CLASS.
        negated: Whether a CLASS is negated.
    """

    kind: CharKind
    char: str = ""
    members: FrozenSet[str] = frozenset()
    negated: bool = False

    @classmethod
    def literal(cls, char: str) -> "CharMatch":
        return cls(CharKind.LITERAL, char=char)

    @classmethod
    def any(cls) -> "CharMatch":
        return cls(CharKind.ANY)

    @classmethod
    def char_class(cls, negated: bool, members: Iterable[str]) -> "CharMatch":
        return cls(CharKind.CLASS, members=frozenset(members), negated=negated)

    def matches(self, c: str) -> bool:
        """Check whether character ``c`` is accepted."""
        if self.kind == CharKind.LITERAL:
            return c == self.char
        if self.kind == CharKind.CLASS:
            return (c in self.members) != self.negated
        return True

    def __str__(self) -> str:
        if self.kind == CharKind.LITERAL:
            return f"Literal({self.char!r})"
        if self.kind == CharKind.CLASS:
            members = "".join(sorted(self.members))
            return f"CharClass({self.negated}, {members!r})"
        return "Any"


@dataclass(frozen=True)
class Inst:
    """A single VM instruction.

    Attributes:
        op: The operation code.
        char: Character matcher (for MATCH_CHAR).
        x: Jump target, or primary target (for BRANCH).
        y: Alternate target (for BRANCH).
        position: Anchor position (for MATCH_POS).
    """

    op: OpCode
    char: Optional[CharMatch] = None
    x: int = 0
    y: int = 0
    position: Optional[Position] = None

    def __str__(self) -> str:
        if self.op == OpCode.MATCH_CHAR:
            return f"MatchChar({self.char})"
        if self.op == OpCode.JUMP:
            return f"Jump({self.x})"
        if self.op == OpCode.BRANCH:
            return f"Branch({self.x}, {self.y})"
        if self.op == OpCode.MATCH_POS:
            return f"MatchPos({self.position.name.capitalize()})"
        if self.op == OpCode.GROUP_PAREN_L:
            return "GroupParenL"
        if self.op == OpCode.GROUP_PAREN_R:
            return "GroupParenR"
        return "Finish"

    @property
    def targets(self) -> Tuple[int, ...]:
        """Return the jump targets of this instruction."""
        if self.op == OpCode.JUMP:
            return (self.x,)
        if self.op == OpCode.BRANCH:
            return (self.x, self.y)
        return ()

    def relocate(self, offset: int) -> "Inst":
        """Return this instruction with ``offset`` added to its targets."""
        if self.op == OpCode.JUMP:
            return replace(self, x=self.x + offset)
        if self.op == OpCode.BRANCH:
            return replace(self, x=self.x + offset, y=self.y + offset)
        return self

    # Factory methods for common instructions
    @classmethod
    def match_char(cls, char: CharMatch) -> "Inst":
        return cls(OpCode.MATCH_CHAR, char=char)

    @classmethod
    def literal(cls, c: str) -> "Inst":
        return cls.match_char(CharMatch.literal(c))

    @classmethod
    def any_char(cls) -> "Inst":
        return cls.match_char(CharMatch.any())

    @classmethod
    def char_class(cls, negated: bool, members: Iterable[str]) -> "Inst":
        return cls.match_char(CharMatch.char_class(negated, members))

    @classmethod
    def jump(cls, target: int) -> "Inst":
        return cls(OpCode.JUMP, x=target)

    @classmethod
    def branch(cls, primary: int, alternate: int) -> "Inst":
        return cls(OpCode.BRANCH, x=primary, y=alternate)

    @classmethod
    def match_pos(cls, position: Position) -> "Inst":
        return cls(OpCode.MATCH_POS, position=position)

    @classmethod
    def front(cls) -> "Inst":
        return cls.match_pos(Position.FRONT)

    @classmethod
    def back(cls) -> "Inst":
        return cls.match_pos(Position.BACK)

    @classmethod
    def group_paren_l(cls) -> "Inst":
        return cls(OpCode.GROUP_PAREN_L)

    @classmethod
    def group_paren_r(cls) -> "Inst":
        return cls(OpCode.GROUP_PAREN_R)

    @classmethod
    def finish(cls) -> "Inst":
        return cls(OpCode.FINISH)
