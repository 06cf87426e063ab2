"""Custom exceptions for regvm."""


class RegvmError(Exception):
    """Base exception for all regvm errors."""

    pass


class ParseError(RegvmError):
    """Raised when a regex pattern cannot be parsed.

    The message is reported verbatim; the offending offset into the
    pattern is kept separately in ``position``.
    """

    def __init__(self, message: str, position: int = -1) -> None:
        self.message = message
        self.position = position
        super().__init__(message)


class CompileError(RegvmError):
    """Raised when an AST or a program is structurally invalid."""

    pass


class StepLimitExceeded(RegvmError):
    """Raised when a search runs past its step budget."""

    def __init__(self, steps: int) -> None:
        self.steps = steps
        super().__init__(f"step limit exceeded after {steps} steps")
