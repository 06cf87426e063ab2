"""Command-line driver: compile a pattern and run it against sample texts."""

import argparse
import logging
import sys
from typing import List, Optional

from regvm.config import Config
from regvm.exceptions import CompileError, ParseError, StepLimitExceeded
from regvm.parser.parser import parse
from regvm.vm.builder import compile
from regvm.vm.interpreter import Interpreter

RULE = "-" * 32

EXIT_OK = 0
EXIT_STEP_LIMIT = 1
EXIT_BAD_PATTERN = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regvm",
        description="Compile a regex into VM bytecode and search texts with it.",
    )
    parser.add_argument("pattern", help="the regex pattern")
    parser.add_argument("texts", nargs="*", help="texts to search")
    parser.add_argument(
        "--ast", action="store_true", help="print the parsed syntax tree"
    )
    parser.add_argument(
        "-i",
        "--instructions",
        action="store_true",
        help="print the disassembled program",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=Config.default().max_steps,
        help="VM step budget per start offset (0 or less disables it)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    max_steps = args.max_steps if args.max_steps > 0 else None
    config = Config(max_steps=max_steps)

    print(f"Pattern: {args.pattern}")
    try:
        ast = parse(args.pattern, config)
        program = compile(ast, source=args.pattern)
    except (ParseError, CompileError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_BAD_PATTERN

    if args.ast:
        print(RULE)
        print(f"AST: {ast!r}")
    if args.instructions:
        print(RULE)
        for line in program.disassemble():
            print(line)

    interpreter = Interpreter(program, config)
    for text in args.texts:
        print(RULE)
        print(f"Text: {text}")
        try:
            result = interpreter.search(text)
        except StepLimitExceeded as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_STEP_LIMIT
        print(f"Result: {result.spans if result else None}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
