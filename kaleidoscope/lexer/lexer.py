"""
Kaleidoscope Lexer - turns a character stream into tokens, one per call.

The lexer keeps exactly one character of lookahead (``last``) between
calls and reads its input strictly left to right, so it works the same
over an in-memory string or an interactive stream.

xwest
"""

from io import StringIO
from typing import Iterator, List, Optional, TextIO, Union

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, LINE_TERMINATORS, COMMENT_START,
    DIGITS, DECIMAL_POINT
)
from .errors import (
    Diagnostic, LexerError, create_invalid_number_error, create_leading_dot_warning
)


class Lexer:
    """
    Kaleidoscope lexical analyzer.

    ``next_token()`` is the primitive; ``tokenize()`` and iteration are
    built on top of it for callers that want the whole stream at once.
    """

    def __init__(self, source: Union[str, TextIO], filename: str = "<unknown>"):
        """
        Initialize the lexer.

        Args:
            source: Source code string, or a text stream supporting read(1)
            filename: Name of source for error reporting
        """
        self.stream: TextIO = StringIO(source) if isinstance(source, str) else source
        self.filename = filename

        # Lookahead character; None until the first read, "" once exhausted
        self.last: Optional[str] = None
        self.pos = 0
        self.line = 1
        self.column = 1

        self.errors: List[LexerError] = []
        self.warnings: List[Diagnostic] = []

    def next_token(self) -> Token:
        """
        Produce the next token from the input.

        Returns EOF on every call once the input is exhausted.

        Raises:
            LexerError: If a numeric literal cannot be converted. The bad
                text has been consumed, so the next call continues after it.
        """
        if self.last is None:
            self._advance()

        while True:
            while self.last.isspace():
                self._advance()
            if self.last != COMMENT_START:
                break
            self._skip_comment()

        location = self._location()

        if self.last == "":
            return Token(TokenType.EOF, "", None, location)

        if self.last.isalpha():
            return self._tokenize_identifier_or_keyword(location)

        if self._at_number_char():
            return self._tokenize_number(location)

        char = self.last
        self._advance()
        return Token(TokenType.CHAR, char, char, location)

    def _tokenize_identifier_or_keyword(self, location: SourceLocation) -> Token:
        """Tokenize an identifier or keyword starting at the lookahead character."""
        chars = [self.last]
        self._advance()

        while self.last.isalnum():
            chars.append(self.last)
            self._advance()

        lexeme = "".join(chars)
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        value = lexeme if token_type == TokenType.IDENTIFIER else None

        return Token(token_type, lexeme, value, location)

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """Tokenize a maximal run of digits and decimal points."""
        chars = []
        while self._at_number_char():
            chars.append(self.last)
            self._advance()

        lexeme = "".join(chars)

        try:
            value = float(lexeme)
        except ValueError:
            raise create_invalid_number_error(lexeme, location)

        if lexeme.startswith(DECIMAL_POINT):
            self.warnings.append(create_leading_dot_warning(lexeme, location))

        return Token(TokenType.NUMBER, lexeme, value, location)

    def _at_number_char(self) -> bool:
        return self.last in DIGITS or self.last == DECIMAL_POINT

    def _skip_comment(self):
        """Skip a '#' comment up to and including the end of the line."""
        while self.last != "" and self.last not in LINE_TERMINATORS:
            self._advance()
        if self.last != "":
            self._advance()

    def _advance(self):
        """Read the next character into ``last``, updating line/column."""
        if self.last == "":
            return

        if self.last is not None:
            self.pos += 1
            if self.last == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1

        self.last = self.stream.read(1)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def tokenize(self) -> List[Token]:
        """
        Tokenize the remaining input.

        Lexical errors are recorded in ``errors`` and skipped.

        Returns:
            List of tokens ending with a single EOF token. Once the input
            is exhausted that is just ``[EOF]``.
        """
        tokens: List[Token] = []
        while True:
            try:
                token = self.next_token()
            except LexerError as e:
                self.errors.append(e)
                continue

            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if lexer encountered any warnings."""
        return len(self.warnings) > 0

    def get_diagnostics(self) -> List[Union[LexerError, Diagnostic]]:
        """Get all diagnostics (errors and warnings)."""
        return self.errors + self.warnings


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens

    Raises:
        LexerError: If lexing fails
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()

    if lexer.has_errors():
        # Raise the first error encountered
        raise lexer.errors[0]

    return tokens
