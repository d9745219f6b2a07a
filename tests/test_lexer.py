# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the 8-bit CPU assembler lexer/tokenizer.
#
# Test coverage includes:
#   - Number formats: decimal, hexadecimal ($, 0x), binary (%, 0b), char
#   - String literals with escape sequences
#   - Delimiters, comments and line structure
#   - Source ranges carried by tokens
#   - Error conditions
# =============================================================================

import pytest

from asm8.assembler.lexer import Lexer, TokenType
from asm8.errors import AssemblySyntaxError, InvalidNumberError


# =============================================================================
# Helper Function
# =============================================================================

def tokenize(source: str) -> list:
    """
    Helper to tokenize and filter out the trailing EOF token.

    Args:
        source: The assembly source to tokenize
    """
    return [t for t in Lexer(source, "<test>").tokenize() if t.type != TokenType.EOF]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        assert tokenize("") == []

    def test_whitespace_only(self):
        assert tokenize("   \t  \r") == []

    def test_always_ends_with_eof(self):
        tokens = list(Lexer("NOP").tokenize())
        assert tokens[-1].type == TokenType.EOF
        assert sum(1 for t in tokens if t.type == TokenType.EOF) == 1

    def test_identifier(self):
        tokens = tokenize("loop_1")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "loop_1"

    def test_identifier_keeps_case(self):
        """Labels are case-sensitive, so the lexer must not fold case."""
        tokens = tokenize("Loop")
        assert tokens[0].value == "Loop"

    def test_delimiters(self):
        tokens = tokenize("start: MOV AL, [BL]")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.COLON,
            TokenType.IDENTIFIER,
            TokenType.IDENTIFIER,
            TokenType.COMMA,
            TokenType.LBRACKET,
            TokenType.IDENTIFIER,
            TokenType.RBRACKET,
        ]

    def test_newlines_separate_lines(self):
        tokens = tokenize("NOP\nHALT")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.NEWLINE,
            TokenType.IDENTIFIER,
        ]


# =============================================================================
# Number Format Tests
# =============================================================================

class TestNumberFormats:
    """Test all supported numeric literal formats."""

    @pytest.mark.parametrize("text,value", [
        ("0", 0),
        ("42", 42),
        ("255", 255),
        ("$FF", 255),
        ("$0a", 10),
        ("0x1F", 31),
        ("0X10", 16),
        ("%1010", 10),
        ("0b11", 3),
    ])
    def test_number(self, text, value):
        tokens = tokenize(text)
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == value

    def test_large_number_is_not_range_checked(self):
        """Range checking is the parser's job."""
        tokens = tokenize("1000")
        assert tokens[0].value == 1000

    def test_char_literal(self):
        tokens = tokenize("'A'")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == 65

    def test_char_literal_escape(self):
        tokens = tokenize("'\\n'")
        assert tokens[0].value == 10

    def test_invalid_decimal(self):
        with pytest.raises(InvalidNumberError) as exc_info:
            tokenize("12ab")
        assert exc_info.value.text == "12ab"
        assert "not a base-10 number" in str(exc_info.value)

    def test_invalid_binary(self):
        with pytest.raises(InvalidNumberError) as exc_info:
            tokenize("%102")
        assert exc_info.value.text == "%102"

    def test_hex_prefix_without_digits(self):
        with pytest.raises(InvalidNumberError) as exc_info:
            tokenize("MOV AL, $")
        assert "expected digits" in str(exc_info.value)

    def test_number_error_is_syntax_error(self):
        with pytest.raises(AssemblySyntaxError):
            tokenize("0xZZ")


# =============================================================================
# String Literal Tests
# =============================================================================

class TestStringLiterals:
    """Test double-quoted string literals."""

    def test_simple_string(self):
        tokens = tokenize('"Hello"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "Hello"

    def test_empty_string(self):
        tokens = tokenize('""')
        assert tokens[0].value == ""

    def test_semicolon_inside_string(self):
        tokens = tokenize('"a;b"')
        assert tokens[0].value == "a;b"

    def test_escape_sequences(self):
        tokens = tokenize('"a\\"b\\n\\x41"')
        assert tokens[0].value == 'a"b\nA'

    def test_unterminated_string(self):
        with pytest.raises(AssemblySyntaxError, match="unterminated string"):
            tokenize('DB "oops\nNOP')


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test semicolon comments."""

    def test_full_line_comment(self):
        assert tokenize("; nothing here") == []

    def test_trailing_comment(self):
        tokens = tokenize("NOP ; do nothing")
        assert len(tokens) == 1
        assert tokens[0].value == "NOP"

    def test_comment_keeps_newline(self):
        tokens = tokenize("NOP ; first\nHALT")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.NEWLINE,
            TokenType.IDENTIFIER,
        ]


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositionTracking:
    """Test that tokens carry their exact source span."""

    def test_column_and_offsets(self):
        tokens = tokenize("  MOV AL")
        mov = tokens[0]
        assert mov.line == 1
        assert mov.column == 3
        assert (mov.start, mov.end) == (2, 5)

    def test_second_line(self):
        tokens = tokenize("NOP\n  HALT")
        halt = tokens[2]
        assert halt.line == 2
        assert halt.column == 3
        assert (halt.start, halt.end) == (6, 10)

    def test_range_property(self):
        token = next(Lexer("JMP loop", "prog.asm").tokenize())
        location = token.range
        assert location.filename == "prog.asm"
        assert str(location) == "prog.asm:1:1"
        assert (location.start, location.end) == (0, 3)

    def test_number_span_includes_prefix(self):
        tokens = tokenize("$40")
        assert (tokens[0].start, tokens[0].end) == (0, 3)


# =============================================================================
# Error Condition Tests
# =============================================================================

class TestLexerErrors:
    """Test lexer error reporting."""

    def test_unexpected_character(self):
        with pytest.raises(AssemblySyntaxError) as exc_info:
            tokenize("MOV AL, #5")
        assert "unexpected character '#'" in str(exc_info.value)
        assert exc_info.value.range.column == 9

    def test_error_quotes_source_line(self):
        with pytest.raises(AssemblySyntaxError) as exc_info:
            tokenize("NOP\nMOV AL, @")
        assert exc_info.value.source_line == "MOV AL, @"
        assert exc_info.value.range.line == 2

    def test_unterminated_char(self):
        with pytest.raises(AssemblySyntaxError):
            tokenize("'A")
