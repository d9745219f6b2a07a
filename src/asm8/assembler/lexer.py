"""
Assembly Language Lexer
=======================

This module implements the lexer (tokenizer) for the 8-bit CPU assembly
language. It converts source text into a stream of tokens, each
carrying the exact span of source text it came from.

Token Types
-----------
- IDENTIFIER: Labels, mnemonics, registers
- NUMBER: Decimal, hex ($FF/0xFF), binary (%1010/0b1010), char ('A')
- STRING: Double-quoted strings ("hello")
- Delimiters: , : [ ]
- NEWLINE: End of line
- EOF: End of file

Number Formats
--------------
| Format      | Prefix   | Example   | Value |
|-------------|----------|-----------|-------|
| Decimal     | (none)   | 123       | 123   |
| Hexadecimal | $ or 0x  | $7F, 0x7F | 127   |
| Binary      | % or 0b  | %1010     | 10    |
| Character   | '        | 'A'       | 65    |

The lexer does not range-check numbers; the parser rejects values that
do not fit in a byte.

Comments
--------
A semicolon starts a comment that runs to the end of the line.

Example
-------
>>> from asm8.assembler.lexer import Lexer
>>> for token in Lexer("start: MOV AL, $41 ; load 'A'").tokenize():
...     print(token)
Token(IDENTIFIER, 'start', 1:1)
Token(COLON, ':', 1:6)
Token(IDENTIFIER, 'MOV', 1:8)
Token(IDENTIFIER, 'AL', 1:12)
Token(COMMA, ',', 1:14)
Token(NUMBER, $41, 1:16)
Token(EOF, 1:30)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator
import string

from asm8.errors import AssemblySyntaxError, InvalidNumberError, SourceRange


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for the assembly language."""

    # Structural tokens
    NEWLINE = auto()    # End of line (statement boundary)
    EOF = auto()        # End of file

    # Values
    IDENTIFIER = auto()  # Labels, mnemonics, registers
    NUMBER = auto()      # Numeric literals (all formats)
    STRING = auto()      # Double-quoted string "..."

    # Delimiters
    COMMA = auto()       # ,
    COLON = auto()       # :
    LBRACKET = auto()    # [
    RBRACKET = auto()    # ]


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source code.

    Attributes:
        type: The TokenType classification
        value: Identifier or string text, number value, or None
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        start: Offset of the first character
        end: Offset one past the last character
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | None
    line: int
    column: int
    start: int
    end: int
    filename: str

    def __repr__(self) -> str:
        if self.value is not None:
            if isinstance(self.value, int):
                return f"Token({self.type.name}, ${self.value:X}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def range(self) -> SourceRange:
        """Return the SourceRange this token spans."""
        return SourceRange(self.filename, self.line, self.column, self.start, self.end)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes assembly source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    SINGLE_CHAR_TOKENS = {
        ",": TokenType.COMMA,
        ":": TokenType.COLON,
        "[": TokenType.LBRACKET,
        "]": TokenType.RBRACKET,
    }

    ESCAPE_SEQUENCES = {
        "n": "\n",
        "r": "\r",
        "t": "\t",
        "\\": "\\",
        '"': '"',
        "'": "'",
        "0": "\0",
    }

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects, always ending with a single EOF token

        Raises:
            AssemblySyntaxError: If invalid syntax is encountered
        """
        while not self._at_end():
            if self._skip_whitespace():
                continue

            if self._skip_comment():
                continue

            yield self._scan_token()

        yield self._make_token(TokenType.EOF, None, self._line, self._column, self._pos)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Look at a character without advancing; empty string past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | None,
        start_line: int,
        start_column: int,
        start_pos: int,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=start_line,
            column=start_column,
            start=start_pos,
            end=self._pos,
            filename=self.filename,
        )

    def _current_line_text(self) -> str:
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]

    def _error(self, message: str) -> AssemblySyntaxError:
        """Create a syntax error at the current position."""
        location = SourceRange(
            self.filename, self._line, self._column, self._pos, self._pos + 1
        )
        return AssemblySyntaxError(message, location, source_line=self._current_line_text())

    def _number_error(
        self, reason: str, start_line: int, start_column: int, start_pos: int
    ) -> InvalidNumberError:
        """Create a number error spanning the literal scanned so far."""
        # Swallow the rest of the malformed word so the caret covers all of it
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._advance()
        location = SourceRange(self.filename, start_line, start_column, start_pos, self._pos)
        return InvalidNumberError(
            self.source[start_pos:self._pos],
            reason,
            location,
            source_line=self._current_line_text(),
        )

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace(self) -> bool:
        """Skip spaces, tabs and carriage returns, but not newlines."""
        skipped = False
        # '' in ' \t\r' is True, so check for end of input first
        while self._peek() and self._peek() in " \t\r":
            self._advance()
            skipped = True
        return skipped

    def _skip_comment(self) -> bool:
        if self._peek() == ";":
            while not self._at_end() and self._peek() != "\n":
                self._advance()
            return True
        return False

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        start_line = self._line
        start_column = self._column
        start_pos = self._pos

        char = self._peek()

        if char == "\n":
            self._advance()
            return self._make_token(TokenType.NEWLINE, None, start_line, start_column, start_pos)

        if char in self.IDENT_START:
            return self._scan_identifier(start_line, start_column, start_pos)

        if char.isdigit():
            return self._scan_decimal_number(start_line, start_column, start_pos)

        if char == "$":
            self._advance()
            return self._scan_digits(16, string.hexdigits, start_line, start_column, start_pos)

        if char == "%":
            self._advance()
            return self._scan_digits(2, "01", start_line, start_column, start_pos)

        if char == '"':
            return self._scan_string(start_line, start_column, start_pos)

        if char == "'":
            return self._scan_char(start_line, start_column, start_pos)

        if char in self.SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(
                self.SINGLE_CHAR_TOKENS[char], char, start_line, start_column, start_pos
            )

        raise self._error(f"unexpected character '{char}'")

    def _scan_identifier(self, start_line: int, start_column: int, start_pos: int) -> Token:
        """Scan a letter or underscore followed by letters, digits or underscores."""
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        return self._make_token(
            TokenType.IDENTIFIER, "".join(chars), start_line, start_column, start_pos
        )

    def _scan_decimal_number(self, start_line: int, start_column: int, start_pos: int) -> Token:
        """Scan a decimal number, or a 0x / 0b prefixed one."""
        if self._peek() == "0":
            next_char = self._peek(1).lower()
            if next_char == "x":
                self._advance()
                self._advance()
                return self._scan_digits(16, string.hexdigits, start_line, start_column, start_pos)
            if next_char == "b" and self._peek(2) and self._peek(2) in "01":
                self._advance()
                self._advance()
                return self._scan_digits(2, "01", start_line, start_column, start_pos)

        return self._scan_digits(10, string.digits, start_line, start_column, start_pos)

    def _scan_digits(
        self,
        base: int,
        digits: str,
        start_line: int,
        start_column: int,
        start_pos: int,
    ) -> Token:
        """Scan digits of the given base after any prefix has been consumed."""
        chars = []
        while self._peek() and self._peek() in digits:
            chars.append(self._advance())

        if not chars:
            raise self._number_error("expected digits", start_line, start_column, start_pos)

        # "12ab" or "%102" is one malformed word, not a number and a label
        if self._peek() and self._peek() in self.IDENT_CHARS:
            raise self._number_error(
                f"not a base-{base} number", start_line, start_column, start_pos
            )

        value = int("".join(chars), base)
        return self._make_token(TokenType.NUMBER, value, start_line, start_column, start_pos)

    def _scan_string(self, start_line: int, start_column: int, start_pos: int) -> Token:
        """Scan a double-quoted string literal with escape sequences."""
        self._advance()  # consume opening "

        chars = []
        while not self._at_end():
            char = self._peek()

            if char == '"':
                self._advance()
                return self._make_token(
                    TokenType.STRING, "".join(chars), start_line, start_column, start_pos
                )

            if char == "\n":
                break

            if char == "\\":
                self._advance()
                chars.append(self._scan_escape_sequence())
            else:
                chars.append(self._advance())

        raise self._error("unterminated string literal")

    def _scan_char(self, start_line: int, start_column: int, start_pos: int) -> Token:
        """Scan a single-quoted character literal into a NUMBER token."""
        self._advance()  # consume opening '

        if self._at_end() or self._peek() == "\n":
            raise self._error("unterminated character literal")

        if self._peek() == "\\":
            self._advance()
            char = self._scan_escape_sequence()
        else:
            char = self._advance()

        if self._peek() != "'":
            raise self._error("expected closing quote for character literal")
        self._advance()

        return self._make_token(TokenType.NUMBER, ord(char), start_line, start_column, start_pos)

    def _scan_escape_sequence(self) -> str:
        if self._at_end():
            raise self._error("unexpected end of input in escape sequence")

        char = self._advance()

        if char in self.ESCAPE_SEQUENCES:
            return self.ESCAPE_SEQUENCES[char]

        if char == "x":
            hex_chars = []
            for _ in range(2):
                if self._peek() and self._peek() in string.hexdigits:
                    hex_chars.append(self._advance())
                else:
                    break

            if not hex_chars:
                raise self._error("expected hexadecimal digits after \\x")

            return chr(int("".join(hex_chars), 16))

        # Unknown escape - treat as literal
        return char


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize a whole source string."""
    return list(Lexer(source, filename).tokenize())
