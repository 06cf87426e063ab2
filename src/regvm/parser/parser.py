"""Recursive-descent parser for regex patterns.

Grammar::

    PrefixSuffix = '^'? Branch '$'?
    Branch       = Connect ('|' Connect)*
    Connect      = Repeat+
    Repeat       = Group ('*' | '+' | '?' | '{' number ',' number '}')?
    Group        = '(' Branch ')' | '[' CharClass ']' | '.' | Literal
    Literal      = any char, with '\\' escaping the next char verbatim
"""

import logging
import string
from typing import List, Optional

from regvm.config import Config
from regvm.exceptions import ParseError
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
)

logger = logging.getLogger(__name__)

EOS = "End-Of-String"

# Characters that end a Connect when seen in lookahead position.
CONNECT_TERMINATORS = frozenset("|)$")


class Parser:
    """Parses a pattern string into an AST.

    The parser reads one character at a time with a single character of
    lookahead and stops at the first error.
    """

    def __init__(self, pattern: str, config: Config = None):
        self.pattern = pattern
        self.config = config or Config.default()
        self.pos = 0
        self.depth = 0

    def parse(self) -> PrefixSuffix:
        """Parse the whole pattern."""
        anchor_start = self._accept("^")
        body = self._parse_branch()

        anchor_end = False
        found = self._next()
        if found == "$" and self._peek() is None:
            anchor_end = True
        elif found is not None:
            raise ParseError(
                f"Syntax Error: expect {EOS} but found `{found}`", self.pos - 1
            )

        return PrefixSuffix(anchor_start, body, anchor_end)

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def _parse_branch(self) -> Branch:
        alternatives = [self._parse_connect()]
        while self._peek() == "|":
            self._expect("|")
            alternatives.append(self._parse_connect())
        return Branch(alternatives)

    def _parse_connect(self) -> Connect:
        # The first factor is mandatory, so a leading '|', ')' or '$' is
        # read as a literal by _parse_repeat.
        factors = [self._parse_repeat()]
        while not self._at_connect_end():
            factors.append(self._parse_repeat())
        return Connect(factors)

    def _parse_repeat(self) -> Node:
        group = self._parse_group()
        c = self._peek()
        if c == "*":
            self._next()
            return RepeatStar(group)
        if c == "+":
            self._next()
            return RepeatPlus(group)
        if c == "?":
            self._next()
            return Maybe(group)
        if c == "{":
            self._next()
            low = self._parse_number()
            self._expect(",")
            high = self._parse_number()
            self._expect("}")
            return RepeatRange(group, low, high)
        return group

    def _parse_group(self) -> Node:
        if self._peek() != "(":
            return self._parse_char()

        start = self.pos
        self._expect("(")
        self.depth += 1
        if self.depth > self.config.max_depth:
            raise ParseError(
                f"Syntax Error: nesting too deep, more than "
                f"{self.config.max_depth} levels of groups",
                start,
            )
        body = self._parse_branch()
        self._expect(")")
        self.depth -= 1
        return Group(body)

    def _parse_char(self) -> Node:
        c = self._peek()
        if c == "[":
            return self._parse_char_class()
        if c == ".":
            self._expect(".")
            return AnyChar()
        return Literal(self._get_char())

    def _parse_char_class(self) -> CharClass:
        self._expect("[")
        negated = self._accept("^")

        members: List[str] = []
        while self._peek() != "]":
            if self._peek() is None:
                raise ParseError(
                    "Syntax Error: unclosed char-class, `]` not found", self.pos
                )
            members.append(self._get_char())

        self._expect("]")
        return CharClass(negated, members)

    def _parse_number(self) -> int:
        """Read a run of ASCII digits. An empty run reads as 0."""
        value = 0
        while self._peek() is not None and self._peek() in string.digits:
            value = value * 10 + int(self._next())
        return value

    # ------------------------------------------------------------------
    # Character helpers
    # ------------------------------------------------------------------

    def _get_char(self) -> str:
        c = self._peek()
        if c is None:
            raise ParseError(
                f"Syntax Error: expect a character but found {EOS}", self.pos
            )
        if c == "\\":
            return self._get_escaped_char()
        return self._next()

    def _get_escaped_char(self) -> str:
        self._expect("\\")
        c = self._next()
        if c is None:
            raise ParseError(f"Syntax Error: expect char but found {EOS}", self.pos)
        return c

    def _at_connect_end(self) -> bool:
        c = self._peek()
        return c is None or c in CONNECT_TERMINATORS

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.pattern):
            return self.pattern[self.pos]
        return None

    def _next(self) -> Optional[str]:
        c = self._peek()
        if c is not None:
            self.pos += 1
        return c

    def _accept(self, expected: str) -> bool:
        if self._peek() == expected:
            self.pos += 1
            return True
        return False

    def _expect(self, expected: str) -> str:
        position = self.pos
        found = self._next()
        if found is None:
            raise ParseError(
                f"Syntax Error: expect `{expected}` but found {EOS}", position
            )
        if found != expected:
            raise ParseError(
                f"Syntax Error: expect `{expected}` but found `{found}`", position
            )
        return found


def parse(pattern: str, config: Config = None) -> PrefixSuffix:
    """Parse a regex pattern string into an AST.

    Args:
        pattern: The regex pattern string.
        config: Optional limits; see :class:`regvm.config.Config`.

    Returns:
        The root PrefixSuffix node.

    Raises:
        ParseError: If the pattern is not valid syntax.
    """
    ast = Parser(pattern, config).parse()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("parsed %r into %d nodes", pattern, sum(1 for _ in ast.walk()))
    return ast
