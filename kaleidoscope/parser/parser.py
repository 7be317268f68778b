"""
Kaleidoscope Parser Implementation

Recursive descent for primaries, prototypes and definitions, with
precedence climbing for binary expressions. The parser pulls tokens from
the lexer on demand and never looks more than one token ahead.

Author: xwest
"""

from dataclasses import replace
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..lexer.lexer import Lexer
from ..lexer.errors import Diagnostic, LexerError
from ..lexer.tokens import Token, TokenType
from .ast_nodes import (
    ANONYMOUS_FUNCTION_NAME, BinaryExpr, CallExpr, Expression, Function,
    NumberExpr, Program, Prototype, SourceSpan, TopLevelItem, VariableExpr
)
from .errors import (
    ParseError, SyntaxErrorRecovery, create_unexpected_token_error,
    create_unclosed_delimiter_error, create_invalid_expression_error,
    create_malformed_prototype_error, create_unexpected_eof_error,
    create_duplicate_parameter_error, create_lexical_error, create_nesting_too_deep_error
)


# Binary operator precedence; higher binds tighter
DEFAULT_PRECEDENCE: Dict[str, int] = {
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,
}

# Precedence of anything that is not a binary operator
NO_PRECEDENCE = -1

# Symbols the grammar already uses; they can't be binary operators
RESERVED_SYMBOLS = frozenset("(),;#.")

# How deep parentheses and call arguments may nest. Each level costs a
# handful of Python frames, so this stays well under the recursion limit.
MAX_NESTING_DEPTH = 100


class Parser:
    """
    Kaleidoscope parser.

    Holds the current token as its only piece of state besides the lexer,
    so any number of parsers can run side by side.
    """

    def __init__(self, lexer: Union[Lexer, str],
                 precedences: Optional[Mapping[str, int]] = None):
        """
        Initialize parser.

        Args:
            lexer: Lexer to pull tokens from, or a source string
            precedences: Binary operator table replacing DEFAULT_PRECEDENCE

        Raises:
            ValueError: If the precedence table has an invalid entry
        """
        if isinstance(lexer, str):
            lexer = Lexer(lexer, "<string>")
        self.lexer = lexer
        self.errors: List[ParseError] = []

        # Lookahead token; pulled lazily so construction never touches the input
        self._current: Optional[Token] = None
        self._depth = 0

        self._init_parsing_tables(precedences)

    def _init_parsing_tables(self, precedences: Optional[Mapping[str, int]]):
        """Initialize operator precedence and prefix parsing tables."""

        table = DEFAULT_PRECEDENCE if precedences is None else precedences
        for operator, precedence in table.items():
            if (not isinstance(operator, str) or len(operator) != 1 or
                    operator.isalnum() or operator.isspace() or
                    operator in RESERVED_SYMBOLS):
                raise ValueError(f"Invalid binary operator: {operator!r}")
            if isinstance(precedence, bool) or not isinstance(precedence, int) or precedence <= 0:
                raise ValueError(
                    f"Precedence of {operator!r} must be a positive integer, got {precedence!r}"
                )

        # Copied so parsers never share a mutable table
        self.precedences: Dict[str, int] = dict(table)

        # Tokens that can start an expression ('(' is handled separately)
        self.prefix_parsers: Dict[TokenType, Callable[[], Expression]] = {
            TokenType.NUMBER: self._parse_number_expr,
            TokenType.IDENTIFIER: self._parse_identifier_expr,
        }

    @property
    def current_token(self) -> Token:
        """The one token of lookahead."""
        return self._peek()

    # ------------------------------------------------------------------
    # Driver-facing entry points
    # ------------------------------------------------------------------

    def parse(self) -> Program:
        """
        Parse every top-level construct in the input.

        Returns:
            Program holding the Function/Prototype roots in source order

        Raises:
            ParseError: The first error, after the whole input has been
                read; ``self.errors`` holds all of them
        """
        items: List[TopLevelItem] = []

        while True:
            recorded = len(self.errors)
            try:
                item = self.parse_top_level()
            except ParseError as e:
                # Lexical errors met while skipping ahead come after this one
                self.errors.insert(recorded, e)
                continue

            if item is None:
                break
            items.append(item)

        span = None
        if items:
            span = self._span(items[0], items[-1])
        program = Program(items, span=span)

        # If we have errors, raise the first one
        if self.errors:
            raise self.errors[0]

        return program

    def parse_top_level(self) -> Optional[TopLevelItem]:
        """
        Parse one top-level construct: a definition, an extern, or a bare
        expression. Leading ';' separators are skipped.

        A failed construct is skipped before the error is raised, so the
        next call starts on the construct after it.

        Returns:
            The parsed node, or None at end of input

        Raises:
            ParseError: If the construct is malformed
        """
        start: Optional[Token] = None
        try:
            while self._check_symbol(SyntaxErrorRecovery.SEPARATOR):
                self._advance()

            start = self._peek()
            if start.type == TokenType.EOF:
                return None
            if start.type == TokenType.DEF:
                return self.parse_definition()
            if start.type == TokenType.EXTERN:
                return self.parse_extern()
            return self.parse_top_level_expr()
        except ParseError as e:
            if not e.construct_complete:
                self.synchronize(start)
            raise

    # ------------------------------------------------------------------
    # Top-level constructs
    # ------------------------------------------------------------------

    def parse_definition(self) -> Function:
        """definition ::= 'def' prototype expression"""
        def_token = self._consume(TokenType.DEF, "'def'")
        signature = self._parse_signature()
        body = self.parse_expression()
        prototype = self._build_prototype(*signature)

        span = SourceSpan(def_token.location, self._span_end(body))
        return Function(prototype, body, span=span)

    def parse_extern(self) -> Prototype:
        """external ::= 'extern' prototype"""
        extern_token = self._consume(TokenType.EXTERN, "'extern'")
        prototype = self.parse_prototype()

        return replace(prototype, span=SourceSpan(extern_token.location, self._span_end(prototype)))

    def parse_top_level_expr(self) -> Function:
        """toplevelexpr ::= expression, wrapped in a nameless zero-argument function"""
        body = self.parse_expression()

        prototype = Prototype(ANONYMOUS_FUNCTION_NAME, (), span=body.span)
        return Function(prototype, body, span=body.span)

    def parse_prototype(self) -> Prototype:
        """prototype ::= identifier '(' identifier* ')'"""
        return self._build_prototype(*self._parse_signature())

    def _parse_signature(self) -> Tuple[Token, List[Token], Token]:
        """Read a prototype's tokens without judging the parameter names."""
        name_token = self._peek()
        if name_token.type != TokenType.IDENTIFIER:
            raise create_malformed_prototype_error(
                f"expected function name, found {name_token.describe()}",
                name_token
            )
        self._advance()

        if not self._check_symbol("("):
            raise self._error_expected("'('")
        self._advance()

        param_tokens: List[Token] = []
        while self._check(TokenType.IDENTIFIER):
            param_tokens.append(self._advance())

        if not self._check_symbol(")"):
            raise self._error_expected("')'")
        end_token = self._advance()

        return name_token, param_tokens, end_token

    @staticmethod
    def _build_prototype(name_token: Token, param_tokens: List[Token], end_token: Token) -> Prototype:
        """Raises the duplicate-parameter error once the construct has been read."""
        params: List[str] = []
        for param_token in param_tokens:
            if param_token.value in params:
                raise create_duplicate_parameter_error(param_token.value, name_token.value, param_token)
            params.append(param_token.value)

        span = SourceSpan(name_token.location, end_token.location)
        return Prototype(name_token.value, params, span=span)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        """expression ::= primary binoprhs"""
        if self._depth >= MAX_NESTING_DEPTH:
            raise create_nesting_too_deep_error(MAX_NESTING_DEPTH, self._peek())

        self._depth += 1
        try:
            left = self.parse_primary_expr()
            return self.parse_binop_rhs(0, left)
        finally:
            self._depth -= 1

    def parse_binop_rhs(self, min_precedence: int, left: Expression) -> Expression:
        """
        Fold ``left`` with following (operator, primary) pairs whose
        operator binds at least as tightly as ``min_precedence``.
        """
        while True:
            precedence = self.binary_precedence()

            # Not an operator, or one that binds too loosely: done
            if precedence < min_precedence:
                return left

            operator_token = self._advance()
            right = self.parse_primary_expr()

            # If the next operator binds tighter, it takes 'right' as its lhs
            if precedence < self.binary_precedence():
                right = self.parse_binop_rhs(precedence + 1, right)

            left = BinaryExpr(operator_token.value, left, right, span=self._span(left, right))

    def parse_primary_expr(self) -> Expression:
        """
        primary ::= number | '(' expression ')' | identifier
                  | identifier '(' (expression (',' expression)*)? ')'
        """
        token = self._peek()

        if token.is_symbol("("):
            return self._parse_paren_expr()

        prefix_parser = self.prefix_parsers.get(token.type)
        if prefix_parser is None:
            if token.type == TokenType.EOF:
                raise create_unexpected_eof_error("an expression", token)
            suggestions = None
            if (token.type == TokenType.CHAR and token.value not in self.precedences and
                    token.value not in RESERVED_SYMBOLS):
                suggestions = SyntaxErrorRecovery.suggest_operator_corrections(
                    token.value, list(self.precedences)
                )
            raise create_invalid_expression_error(
                f"expected an expression, found {token.describe()}",
                token,
                suggestions
            )

        return prefix_parser()

    def binary_precedence(self) -> int:
        """Precedence of the current token as a binary operator, or -1."""
        token = self._peek()
        if token.type != TokenType.CHAR:
            return NO_PRECEDENCE
        return self.precedences.get(token.value, NO_PRECEDENCE)

    def _parse_number_expr(self) -> NumberExpr:
        """numberexpr ::= number"""
        token = self._advance()
        return NumberExpr(token.value, span=SourceSpan(token.location, token.location))

    def _parse_paren_expr(self) -> Expression:
        """parenexpr ::= '(' expression ')'"""
        open_token = self._advance()

        try:
            expr = self.parse_expression()
        except ParseError as e:
            # Running out of input inside the parens means the '(' is unclosed
            if e.code == "P010":
                raise create_unclosed_delimiter_error("(", open_token.location, self._peek()) from e
            raise

        if not self._check_symbol(")"):
            if self._check(TokenType.EOF):
                raise create_unclosed_delimiter_error("(", open_token.location, self._peek())
            raise create_unexpected_token_error("')'", self._peek())
        self._advance()

        return expr

    def _parse_identifier_expr(self) -> Expression:
        """
        identifierexpr ::= identifier
                         | identifier '(' (expression (',' expression)*)? ')'
        """
        name_token = self._advance()

        if not self._check_symbol("("):
            return VariableExpr(name_token.value, span=SourceSpan(name_token.location, name_token.location))

        self._advance()  # Consume (

        args: List[Expression] = []
        if not self._check_symbol(")"):
            while True:
                args.append(self.parse_expression())

                if self._check_symbol(")"):
                    break
                if not self._check_symbol(","):
                    raise self._error_expected("')' or ',' in argument list")
                self._advance()

        end_token = self._advance()  # Consume )

        span = SourceSpan(name_token.location, end_token.location)
        return CallExpr(name_token.value, args, span=span)

    # ------------------------------------------------------------------
    # Utility methods
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        """Return current token without consuming, pulling it if needed."""
        if self._current is None:
            self._current = self._next_token()
        return self._current

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._peek()
        if token.type != TokenType.EOF:
            # Cleared first so a lexical error leaves the parser ready to pull again
            self._current = None
            self._current = self._next_token()
        return token

    def _next_token(self) -> Token:
        try:
            return self.lexer.next_token()
        except LexerError as e:
            raise create_lexical_error(e) from e

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._peek().type == token_type

    def _check_symbol(self, char: str) -> bool:
        """Check if current token is the symbol ``char`` without consuming."""
        return self._peek().is_symbol(char)

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise self._error_expected(expected)

    def _error_expected(self, expected: str) -> ParseError:
        current_token = self._peek()
        if current_token.type == TokenType.EOF:
            return create_unexpected_eof_error(expected, current_token)
        return create_unexpected_token_error(expected, current_token)

    def synchronize(self, start: Optional[Token] = None):
        """
        Skip tokens up to the start of the next top-level construct.

        ``start`` is the token the failed construct began with; it is
        always skipped, so recovery never stalls on it. Lexical errors
        met while skipping are recorded in ``errors``.
        """
        while True:
            try:
                token = self._peek()
                if token is start and token.type != TokenType.EOF:
                    self._advance()
                    continue
                if SyntaxErrorRecovery.is_boundary(token):
                    return
                self._advance()
            except ParseError as e:
                self.errors.append(e)

    @staticmethod
    def _span_end(node):
        return node.span.end if node.span is not None else None

    @staticmethod
    def _span(first, last) -> Optional[SourceSpan]:
        if first.span is None or last.span is None:
            return None
        return SourceSpan(first.span.start, last.span.end)

    def has_errors(self) -> bool:
        """Check if parser encountered any errors."""
        return len(self.errors) > 0

    def get_diagnostics(self) -> List[Union[ParseError, Diagnostic]]:
        """Get all diagnostics: parse errors and lexer warnings."""
        return self.errors + self.lexer.warnings


def parse_string(source: str, filename: str = "<string>",
                 precedences: Optional[Mapping[str, int]] = None) -> Program:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting
        precedences: Optional binary operator table

    Returns:
        Program AST

    Raises:
        ParseError: If parsing fails
    """
    parser = Parser(Lexer(source, filename), precedences)
    return parser.parse()
