"""Parser tests: grammar coverage, escapes and syntax errors."""

import pytest

from regvm.config import Config
from regvm.exceptions import ParseError
from regvm.parser.parser import parse
from regvm.parser.ast import (
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


def body(pattern_str: str):
    """Parse a pattern and return the top-level Branch."""
    return parse(pattern_str).body


def seq(*factors):
    """Build a single-alternative Branch."""
    return Branch([Connect(list(factors))])


# =============================================================================
# STRUCTURE
# =============================================================================


class TestPrefixSuffix:
    """The root node records ^ and $ anchors."""

    @pytest.mark.parametrize(
        "pattern,anchor_start,anchor_end",
        [
            ("a", False, False),
            ("^a", True, False),
            ("a$", False, True),
            ("^a$", True, True),
        ],
    )
    def test_anchors(self, pattern, anchor_start, anchor_end):
        ast = parse(pattern)
        assert ast == PrefixSuffix(anchor_start, seq(Literal("a")), anchor_end)

    def test_anchors_wrap_whole_alternation(self):
        ast = parse("^a|b$")
        assert ast == PrefixSuffix(
            True,
            Branch([Connect([Literal("a")]), Connect([Literal("b")])]),
            True,
        )

    def test_leading_dollar_is_literal(self):
        assert body("$a") == seq(Literal("$"), Literal("a"))


class TestBranchAndConnect:
    def test_escaped_paren(self):
        assert body(r"a\)") == seq(Literal("a"), Literal(")"))

    @pytest.mark.parametrize(
        "pattern,expected",
        [
            (
                "a|b",
                Branch([Connect([Literal("a")]), Connect([Literal("b")])]),
            ),
            (
                "a|b|c",
                Branch(
                    [
                        Connect([Literal("a")]),
                        Connect([Literal("b")]),
                        Connect([Literal("c")]),
                    ]
                ),
            ),
            (
                "ab|cd",
                Branch(
                    [
                        Connect([Literal("a"), Literal("b")]),
                        Connect([Literal("c"), Literal("d")]),
                    ]
                ),
            ),
        ],
    )
    def test_branch(self, pattern, expected):
        assert body(pattern) == expected

    def test_connect(self):
        assert body("abcd") == seq(
            Literal("a"), Literal("b"), Literal("c"), Literal("d")
        )


# =============================================================================
# QUANTIFIERS
# =============================================================================


class TestRepeat:
    def test_star(self):
        assert body("a*b*") == seq(
            RepeatStar(Literal("a")), RepeatStar(Literal("b"))
        )

    def test_plus(self):
        assert body("ab+") == seq(Literal("a"), RepeatPlus(Literal("b")))

    def test_maybe(self):
        assert body("a?") == seq(Maybe(Literal("a")))

    def test_any_star(self):
        assert body(".*") == seq(RepeatStar(AnyChar()))

    @pytest.mark.parametrize(
        "pattern,low,high",
        [
            ("a{1,3}", 1, 3),
            ("a{0,0}", 0, 0),
            ("a{12,345}", 12, 345),
            # Missing numbers read as zero
            ("a{,3}", 0, 3),
            ("a{2,}", 2, 0),
            ("a{,}", 0, 0),
        ],
    )
    def test_range(self, pattern, low, high):
        assert body(pattern) == seq(RepeatRange(Literal("a"), low, high))

    def test_range_min_above_max_is_accepted(self):
        assert body("a{3,1}") == seq(RepeatRange(Literal("a"), 3, 1))

    def test_only_one_quantifier_per_factor(self):
        # The second '*' starts a new factor and is read as a literal.
        assert body("a**") == seq(RepeatStar(Literal("a")), Literal("*"))


# =============================================================================
# GROUPS AND ATOMS
# =============================================================================


class TestGroup:
    def test_group(self):
        assert body("(ab)") == seq(Group(seq(Literal("a"), Literal("b"))))

    def test_sequential_groups(self):
        assert body("(ab)(cd)") == seq(
            Group(seq(Literal("a"), Literal("b"))),
            Group(seq(Literal("c"), Literal("d"))),
        )

    def test_quantified_groups(self):
        assert body("(ab)+(cd)") == seq(
            RepeatPlus(Group(seq(Literal("a"), Literal("b")))),
            Group(seq(Literal("c"), Literal("d"))),
        )
        assert body("(ab)?") == seq(Maybe(Group(seq(Literal("a"), Literal("b")))))

    def test_nested_groups_counted(self):
        assert count_groups(parse("((a)(b))|(c)")) == 4


class TestCharClass:
    @pytest.mark.parametrize(
        "pattern,negated,members,name",
        [
            ("[abcd]", False, ["a", "b", "c", "d"], "plain"),
            ("[^abcd]", True, ["a", "b", "c", "d"], "negated"),
            ("[^^]", True, ["^"], "negated caret"),
            (r"[^\]\)]", True, ["]", ")"], "escaped bracket and paren"),
            ("[^|]", True, ["|"], "pipe"),
            (r"[^\\]", True, ["\\"], "escaped backslash"),
            ("[a-c]", False, ["a", "-", "c"], "no ranges"),
            ("[]", False, [], "empty"),
        ],
    )
    def test_char_class(self, pattern, negated, members, name):
        assert body(pattern) == seq(CharClass(negated, members)), name


class TestEscapes:
    @pytest.mark.parametrize("char", list("\\|*+?.()[]{}^$an"))
    def test_any_escaped_char_is_literal(self, char):
        assert body("\\" + char) == seq(Literal(char))


# =============================================================================
# ERRORS
# =============================================================================


class TestSyntaxErrors:
    @pytest.mark.parametrize(
        "pattern,message",
        [
            ("[", "Syntax Error: unclosed char-class, `]` not found"),
            ("[ab", "Syntax Error: unclosed char-class, `]` not found"),
            ("", "Syntax Error: expect a character but found End-Of-String"),
            ("a|", "Syntax Error: expect a character but found End-Of-String"),
            ("(a", "Syntax Error: expect `)` but found End-Of-String"),
            ("a{1", "Syntax Error: expect `,` but found End-Of-String"),
            ("a{1x", "Syntax Error: expect `,` but found `x`"),
            ("a{1,2", "Syntax Error: expect `}` but found End-Of-String"),
            ("a{1,2]", "Syntax Error: expect `}` but found `]`"),
            ("a\\", "Syntax Error: expect char but found End-Of-String"),
            ("a)", "Syntax Error: expect End-Of-String but found `)`"),
            ("a$b", "Syntax Error: expect End-Of-String but found `$`"),
        ],
    )
    def test_error_message(self, pattern, message):
        with pytest.raises(ParseError) as excinfo:
            parse(pattern)
        assert str(excinfo.value) == message

    def test_error_position(self):
        with pytest.raises(ParseError) as excinfo:
            parse("a{1x")
        assert excinfo.value.position == 3

    def test_nesting_limit(self):
        pattern = "(" * 5 + "a" + ")" * 5
        assert count_groups(parse(pattern, Config(max_depth=5))) == 5
        with pytest.raises(ParseError) as excinfo:
            parse("(" + pattern + ")", Config(max_depth=5))
        assert "nesting too deep" in str(excinfo.value)
        assert excinfo.value.position == 5
