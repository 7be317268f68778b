"""
Token definitions for the Kaleidoscope lexer.

Kaleidoscope has a deliberately tiny token set:
- End of input
- The two keywords, ``def`` and ``extern``
- Identifiers
- Number literals (always 64-bit floats)
- Single-character symbols (operators and punctuation)

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token types in Kaleidoscope.

    The set is closed: the lexer never produces anything else.
    """

    EOF = auto()                    # End of input

    # Keywords
    DEF = auto()                    # def
    EXTERN = auto()                 # extern

    # Primaries
    IDENTIFIER = auto()             # foo, x1, fib
    NUMBER = auto()                 # 1.0, 42, .5

    # Anything else, taken verbatim: ( ) , + - * < ; ...
    CHAR = auto()


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and debugging information.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Kaleidoscope language.

    Tokens compare by type, lexeme and value; the location is carried
    for diagnostics only.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # str for IDENTIFIER/CHAR, float for NUMBER, else None
    location: SourceLocation = field(compare=False)

    def __str__(self) -> str:
        if self.type == TokenType.EOF:
            return "EOF"
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in (TokenType.DEF, TokenType.EXTERN)

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDENTIFIER

    def is_symbol(self, char: str) -> bool:
        """Check if this token is the given single-character symbol."""
        return self.type == TokenType.CHAR and self.value == char

    def describe(self) -> str:
        """Short human-readable description used in diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        if self.type == TokenType.NUMBER:
            return f"number {self.lexeme}"
        if self.type == TokenType.CHAR:
            return f"'{self.value}'"
        return f"keyword '{self.lexeme}'"


# Reserved words, checked after an identifier has been accumulated
KEYWORDS = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
}

# Characters that end a line comment
LINE_TERMINATORS = ("\n", "\r")

COMMENT_START = "#"

# Number characters. ASCII only: str.isdigit() also admits '²' or '①',
# which float() rejects.
DIGITS = frozenset("0123456789")
DECIMAL_POINT = "."
