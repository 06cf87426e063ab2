"""AST node definitions for regex patterns."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


class Node(ABC):
    """Base class for all AST nodes."""

    @abstractmethod
    def children(self) -> "List[Node]":
        """Return child nodes."""
        ...

    @abstractmethod
    def __repr__(self) -> str:
        ...

    def walk(self):
        """Yield this node and all descendants."""
        yield self
        for child in self.children():
            yield from child.walk()


# ============================================================================
# Top-level pattern
# ============================================================================


@dataclass
class PrefixSuffix(Node):
    """Root node of a parsed pattern.

    Attributes:
        anchor_start: Whether the pattern starts with ``^``.
        body: The top-level alternation.
        anchor_end: Whether the pattern ends with ``$``.
    """

    anchor_start: bool
    body: "Node"
    anchor_end: bool

    def children(self) -> "List[Node]":
        return [self.body]

    def __repr__(self) -> str:
        return f"PrefixSuffix({self.anchor_start}, {self.body!r}, {self.anchor_end})"


# ============================================================================
# Structural nodes
# ============================================================================


@dataclass
class Branch(Node):
    """Alternation (|). The first alternative has the highest priority.

    Attributes:
        alternatives: List of alternative patterns.
    """

    alternatives: "List[Node]"

    def children(self) -> "List[Node]":
        return self.alternatives

    def __repr__(self) -> str:
        return f"Branch({self.alternatives!r})"


@dataclass
class Connect(Node):
    """Concatenation of factors.

    Attributes:
        factors: List of nodes in sequence.
    """

    factors: "List[Node]"

    def children(self) -> "List[Node]":
        return self.factors

    def __repr__(self) -> str:
        return f"Connect({self.factors!r})"


@dataclass
class Group(Node):
    """Capturing group."""

    body: "Node"

    def children(self) -> "List[Node]":
        return [self.body]

    def __repr__(self) -> str:
        return f"Group({self.body!r})"


# ============================================================================
# Quantifiers (always greedy)
# ============================================================================


@dataclass
class RepeatStar(Node):
    """Zero or more repetition (*)."""

    body: "Node"

    def children(self) -> "List[Node]":
        return [self.body]

    def __repr__(self) -> str:
        return f"RepeatStar({self.body!r})"


@dataclass
class RepeatPlus(Node):
    """One or more repetition (+)."""

    body: "Node"

    def children(self) -> "List[Node]":
        return [self.body]

    def __repr__(self) -> str:
        return f"RepeatPlus({self.body!r})"


@dataclass
class Maybe(Node):
    """Zero or one (?)."""

    body: "Node"

    def children(self) -> "List[Node]":
        return [self.body]

    def __repr__(self) -> str:
        return f"Maybe({self.body!r})"


@dataclass
class RepeatRange(Node):
    """Bounded quantifier {min,max}.

    The parser does not check that ``min <= max``; the compiler does.

    Attributes:
        body: The pattern to repeat.
        min: Number of mandatory copies.
        max: Total number of copies, mandatory plus optional.
    """

    body: "Node"
    min: int
    max: int

    def children(self) -> "List[Node]":
        return [self.body]

    def __repr__(self) -> str:
        return f"RepeatRange({self.body!r}, {{{self.min},{self.max}}})"


# ============================================================================
# Character matching
# ============================================================================


@dataclass
class AnyChar(Node):
    """Dot (.) - matches any character."""

    def children(self) -> "List[Node]":
        return []

    def __repr__(self) -> str:
        return "AnyChar()"


@dataclass
class CharClass(Node):
    """Character class [...] or [^...].

    Attributes:
        negated: Whether the class is negated.
        members: The member characters, in pattern order.
    """

    negated: bool
    members: "List[str]"

    def children(self) -> "List[Node]":
        return []

    def __repr__(self) -> str:
        neg = "^" if self.negated else ""
        return f"CharClass([{neg}{''.join(self.members)!r}])"


@dataclass
class Literal(Node):
    """Single character literal."""

    char: str

    def children(self) -> "List[Node]":
        return []

    def __repr__(self) -> str:
        return f"Literal({self.char!r})"


# ============================================================================
# Helper functions
# ============================================================================


def count_groups(node: Node) -> int:
    """Count the number of capturing groups in a pattern."""
    count = 0
    for n in node.walk():
        if isinstance(n, Group):
            count += 1
    return count
