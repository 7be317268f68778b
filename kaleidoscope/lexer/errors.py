"""
Diagnostics for the Kaleidoscope front end.

A ``Diagnostic`` is a plain record: warnings are collected as-is, errors
travel inside ``LexerError`` (and ``ParseError`` in the parser package).

Author: xwest
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from .tokens import SourceLocation


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """One message about the source, pinned to a location."""
    message: str
    location: SourceLocation
    severity: Severity = Severity.ERROR
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Tuple[str, ...] = ()

    def __str__(self) -> str:
        header = self.severity.value.upper()
        if self.code:
            header += f"[{self.code}]"
        lines = [f"{header}: {self.message}", f"  --> {self.location}"]

        if self.help_text:
            lines.append(f"  help: {self.help_text}")
        if self.suggestions:
            lines.append("  suggestions:")
            lines.extend(f"    - {suggestion}" for suggestion in self.suggestions)

        return "\n".join(lines) + "\n"


def make_diagnostic(message: str, location: SourceLocation, severity: Severity = Severity.ERROR,
                    code: Optional[str] = None, help_text: Optional[str] = None,
                    suggestions: Optional[Iterable[str]] = None) -> Diagnostic:
    """Build a Diagnostic, normalizing suggestions to a tuple."""
    return Diagnostic(message, location, severity, code, help_text, tuple(suggestions or ()))


class LexerError(Exception):
    """Raised by ``Lexer.next_token()`` when the input can't form a token."""

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


# Error codes for categorization
ERROR_CODES = {
    "L003": "Invalid numeric literal",
    "L011": "Numeric literal without leading digit",
}


def create_invalid_number_error(lexeme: str, location: SourceLocation) -> LexerError:
    """Create an error for a digit/dot run that is not a number."""
    suggestions = ["Check the numeric format"]
    if lexeme.count(".") > 1:
        suggestions.insert(0, "A number may contain at most one decimal point")

    return LexerError(make_diagnostic(
        f"Invalid numeric literal: '{lexeme}'",
        location,
        code="L003",
        help_text="Numbers are ASCII digits with at most one decimal point, e.g. 3, 3.0 or 0.5",
        suggestions=suggestions
    ))


def create_leading_dot_warning(lexeme: str, location: SourceLocation) -> Diagnostic:
    """Create a warning for a number written without a leading digit."""
    return make_diagnostic(
        f"Numeric literal '{lexeme}' has no leading digit",
        location,
        severity=Severity.WARNING,
        code="L011",
        suggestions=[f"Write it as '0{lexeme}'"]
    )
