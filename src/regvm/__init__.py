"""
regvm - A backtracking regular-expression engine.

Patterns are parsed into an AST, compiled into a flat bytecode program and
run by a backtracking virtual machine that reports the leftmost match and
its capture-group spans.

Example usage:
    >>> from regvm import parse, compile, search
    >>> program = compile(parse(r"hoge(.+)$"))
    >>> search(program, "hogeXXXX")
    [(0, 8), (4, 8)]

For more control:
    >>> from regvm import compile_pattern, Interpreter, Config
    >>> program = compile_pattern(r"^(a|b)+$")
    >>> Interpreter(program, Config(max_steps=10_000)).search("abba").groups()
    ['a', 'b', 'b', 'a']
"""

from regvm.config import Config
from regvm.exceptions import RegvmError, ParseError, CompileError, StepLimitExceeded
from regvm.parser.parser import parse
from regvm.vm.builder import compile, ProgramBuilder
from regvm.vm.inst import Inst, OpCode
from regvm.vm.interpreter import Interpreter, MatchResult, search
from regvm.vm.program import Program

__version__ = "0.1.0"


def compile_pattern(pattern: str, config: Config = None) -> Program:
    """Parse and compile a pattern in one step.

    Raises:
        ParseError: If the pattern is not valid syntax.
        CompileError: If the pattern cannot be compiled.
    """
    return compile(parse(pattern, config), source=pattern)


__all__ = [
    # Main API
    "parse",
    "compile",
    "search",
    "compile_pattern",
    # VM
    "Program",
    "ProgramBuilder",
    "Inst",
    "OpCode",
    "Interpreter",
    "MatchResult",
    # Configuration
    "Config",
    # Exceptions
    "RegvmError",
    "ParseError",
    "CompileError",
    "StepLimitExceeded",
    # Version
    "__version__",
]
