"""
Kaleidoscope Front End Package

Lexer and parser for the Kaleidoscope language: a small
expression-oriented language whose only value type is a 64-bit float.

Architecture:
    kaleidoscope/
    ├── lexer/           # Tokenization and lexical analysis
    └── parser/          # Syntax analysis and AST generation

Code generation and the interactive driver live outside this package;
they consume the Function/Prototype trees the parser returns.

Author: xwest
License: MIT
"""

__version__ = "0.1.0-alpha"
__author__ = "xwest"
__email__ = "dev@neuralscript.org"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, LexerError
from .parser import Parser, ParseError, parse_string

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Token",
    "TokenType",
    "LexerError",
    "ParseError",
    "parse_string",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
