"""
Kaleidoscope Parser Package

Recursive descent parser with precedence climbing for binary operators.
Produces immutable ASTs with source span information.

Key Features:
- One token of lookahead, tokens pulled from the lexer on demand
- Configurable binary operator precedence table
- Structured errors with top-level recovery

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, parse_string, DEFAULT_PRECEDENCE, NO_PRECEDENCE
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser", "parse_string", "DEFAULT_PRECEDENCE", "NO_PRECEDENCE",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "ASTPrinter", "SourceSpan",
    "Expression", "NumberExpr", "VariableExpr", "BinaryExpr", "CallExpr",
    "Prototype", "Function", "Program", "TopLevelItem",
    "ANONYMOUS_FUNCTION_NAME",

    # Error handling
    "ParseError",
]
