"""
Kaleidoscope Lexer Package

Implements the lexical analyzer (tokenizer) for the Kaleidoscope language.

Key Features:
- Pull-based: one token per call with one character of lookahead
- Works over strings and text streams
- '#' line comments
- Source location tracking for diagnostics

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, KEYWORDS
from .lexer import Lexer, tokenize_string
from .errors import Diagnostic, Severity, LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "Diagnostic",
    "LexerError",
    "Severity",
    "tokenize_string",
]
