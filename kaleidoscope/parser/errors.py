"""
Error handling for the Kaleidoscope parser.

Provides error reporting with source location information, the
top-level recovery strategy, and driver-friendly diagnostics for syntax
errors.

Author: xwest
"""

from typing import Optional, List, Union

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import LexerError, make_diagnostic


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    Contains detailed diagnostic information for error reporting, and
    the token that was found where something else was expected.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        construct_complete: bool = False
    ):
        super().__init__(message)
        self.diagnostic = make_diagnostic(
            message, location, code=code, help_text=help_text, suggestions=suggestions
        )
        self.token = token
        # True when the offending construct was read to its end, so the
        # parser is already positioned at whatever follows it
        self.construct_complete = construct_complete

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    After a failed top-level construct the parser skips ahead to a token
    that can start (or separate) the next one.
    """

    # Tokens that can begin a new top-level construct
    TOP_LEVEL_BOUNDARIES = {
        TokenType.DEF,
        TokenType.EXTERN,
        TokenType.EOF,
    }

    # Symbol that separates top-level constructs
    SEPARATOR = ";"

    @staticmethod
    def is_boundary(token: Token) -> bool:
        return (token.type in SyntaxErrorRecovery.TOP_LEVEL_BOUNDARIES or
                token.is_symbol(SyntaxErrorRecovery.SEPARATOR))

    @staticmethod
    def suggest_missing_token(expected: str) -> List[str]:
        """Suggest what token might be missing."""
        token_suggestions = {
            ")": ["Add a closing parenthesis ')'"],
            "(": ["Add an opening parenthesis '(' after the function name"],
            ",": ["Separate call arguments with ','"],
            "identifier": ["Use a name made of letters and digits, starting with a letter"],
        }

        return list(token_suggestions.get(expected, []))

    @staticmethod
    def suggest_operator_corrections(invalid_op: str, known_ops: List[str]) -> List[str]:
        """Suggest the known binary operators when an unknown one is used."""
        if not known_ops:
            return []
        return [f"'{invalid_op}' is not a binary operator; known operators are "
                + ", ".join(f"'{op}'" for op in sorted(known_ops))]


# Parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P004": "Unclosed delimiter",
    "P005": "Invalid expression",
    "P008": "Malformed function signature",
    "P010": "Unexpected end of input",
    "P013": "Duplicate parameter name",
    "P014": "Lexical error",
    "P015": "Expression nested too deeply",
}


# Helper functions for creating common parser errors

def create_unexpected_token_error(expected: Union[TokenType, str], found: Token) -> ParseError:
    """Create an error for an unexpected token."""
    if isinstance(expected, TokenType):
        expected_str = expected.name.lower()
        suggestions = SyntaxErrorRecovery.suggest_missing_token(expected_str)
    else:
        expected_str = expected
        suggestions = SyntaxErrorRecovery.suggest_missing_token(expected.strip("'"))
    found_str = found.describe()

    return ParseError(
        message=f"Expected {expected_str}, found {found_str}",
        location=found.location,
        token=found,
        code="P001",
        help_text=f"The parser expected to see {expected_str} at this position, but found {found_str} instead.",
        suggestions=suggestions
    )


def create_unclosed_delimiter_error(delimiter: str, open_location: SourceLocation,
                                    found: Token) -> ParseError:
    """Create an error for an unclosed delimiter."""
    closing_delimiters = {
        "(": ")",
    }

    closing = closing_delimiters.get(delimiter, delimiter)

    return ParseError(
        message=f"Unclosed delimiter '{delimiter}'",
        location=found.location,
        token=found,
        code="P004",
        help_text=f"The opening '{delimiter}' at {open_location} was never closed.",
        suggestions=[f"Add a closing '{closing}'", "Check for missing delimiters"]
    )


def create_invalid_expression_error(reason: str, found: Token,
                                    suggestions: Optional[List[str]] = None) -> ParseError:
    """Create an error for an invalid expression."""
    return ParseError(
        message=f"Invalid expression: {reason}",
        location=found.location,
        token=found,
        code="P005",
        help_text=reason,
        suggestions=suggestions or ["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_malformed_prototype_error(reason: str, found: Token) -> ParseError:
    """Create an error for a prototype without a usable name."""
    return ParseError(
        message=f"Malformed function signature: {reason}",
        location=found.location,
        token=found,
        code="P008",
        help_text="A prototype is a name followed by parameter names in parentheses, e.g. foo(x y).",
        suggestions=SyntaxErrorRecovery.suggest_missing_token("identifier")
    )


def create_unexpected_eof_error(expected: str, found: Token) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        location=found.location,
        token=found,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected}.",
        suggestions=[f"Add the missing {expected}", "Check for incomplete definitions"]
    )


def create_duplicate_parameter_error(name: str, function_name: str, found: Token) -> ParseError:
    """Create an error for a parameter name that appears twice in a prototype."""
    return ParseError(
        message=f"Duplicate parameter '{name}' in prototype of '{function_name}'",
        location=found.location,
        token=found,
        code="P013",
        help_text="Every parameter of a function needs a distinct name.",
        suggestions=[f"Rename or remove the second '{name}'"],
        construct_complete=True
    )


def create_lexical_error(error: LexerError) -> ParseError:
    """Wrap a lexer error so callers of the parser see a single error type."""
    diagnostic = error.diagnostic
    return ParseError(
        message=diagnostic.message,
        location=diagnostic.location,
        code="P014",
        help_text=diagnostic.help_text,
        suggestions=diagnostic.suggestions
    )


def create_nesting_too_deep_error(limit: int, found: Token) -> ParseError:
    """Create an error for parentheses or calls nested past the parser's limit."""
    return ParseError(
        message=f"Expression nested too deeply (limit is {limit})",
        location=found.location,
        token=found,
        code="P015",
        help_text="Parentheses and call arguments can only be nested so far.",
        suggestions=["Split the expression into smaller functions"]
    )
