"""VM module for compiling and running backtracking regex programs."""

from regvm.vm.inst import Inst, OpCode, CharKind, CharMatch, Position
from regvm.vm.program import Program
from regvm.vm.builder import ProgramBuilder, compile
from regvm.vm.interpreter import Interpreter, MatchResult, search

__all__ = [
    "Inst",
    "OpCode",
    "CharKind",
    "CharMatch",
    "Position",
    "Program",
    "ProgramBuilder",
    "compile",
    "Interpreter",
    "MatchResult",
    "search",
]
