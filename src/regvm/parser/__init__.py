"""Regex pattern parser."""

from regvm.parser.parser import Parser, parse
from regvm.parser import ast

__all__ = [
    "Parser",
    "parse",
    "ast",
]
