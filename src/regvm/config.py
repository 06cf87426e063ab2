"""Configuration for parsing and matching."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Config:
    """Limits applied by the parser and the VM.

    Attributes:
        max_steps: Maximum number of VM instructions executed from any one
            start offset of a search. None means unbounded.
        max_depth: Maximum group nesting depth accepted by the parser.
    """

    max_steps: Optional[int] = 1_000_000
    max_depth: int = 100

    def __post_init__(self) -> None:
        if self.max_steps is not None and self.max_steps < 0:
            raise ValueError("max_steps must be non-negative")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")

    @classmethod
    def default(cls) -> "Config":
        """Return the default configuration."""
        return cls()
