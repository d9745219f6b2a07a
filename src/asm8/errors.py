"""
asm8 Error Hierarchy
====================

This module defines the exception hierarchy for the asm8 assembler.
All exceptions inherit from Asm8Error, allowing callers (such as a
simulator front-end) to catch every assembly failure with a single
except clause.

Exception Hierarchy
-------------------
Asm8Error (base)
└── AssemblerError
    ├── AssemblySyntaxError - malformed source text
    │   ├── InvalidNumberError - malformed or out-of-range numeric literal
    │   └── InvalidLabelError - malformed label declaration
    ├── UnknownMnemonicError - mnemonic not in the instruction set
    ├── OperandCountError - wrong number of operands for a mnemonic
    ├── OperandTypeError - operand kind not accepted by a mnemonic
    ├── DuplicateLabelError - label declared more than once
    ├── AssembleEndOfMemoryError - program does not fit in 256 bytes
    └── OperandLabelNotExistError - reference to an undeclared label

Every error is fatal to the current assembly. Each one carries the
SourceRange of the offending text so the caller can highlight it.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from asm8.assembler.parser import Label, Operand, Statement


# =============================================================================
# Base Exception Class
# =============================================================================

class Asm8Error(Exception):
    """
    Base exception for all asm8 errors.

        try:
            assemble(source)
        except Asm8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Range Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceRange:
    """
    A span of source text, used for error reporting and trace display.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number of the first character (1-indexed)
        column: Column number of the first character (1-indexed)
        start: Offset of the first character in the source
        end: Offset one past the last character in the source
    """
    filename: str
    line: int
    column: int
    start: int
    end: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"

    def merge(self, other: "SourceRange") -> "SourceRange":
        """Return the range covering both self and a later range."""
        return SourceRange(self.filename, self.line, self.column, self.start, other.end)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "filename": self.filename,
            "line": self.line,
            "column": self.column,
            "start": self.start,
            "end": self.end,
        }


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Asm8Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        range: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text of the offending line (optional)
    """

    def __init__(
        self,
        message: str,
        range: Optional[SourceRange] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.range = range
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.asm:4:9: error: label 'lop' does not exist
                JMP lop
                    ^^^
            hint: did you mean 'loop'?
        """
        parts = []

        if self.range:
            parts.append(f"{self.range}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.range is not None:
            parts.append(f"    {self.source_line}")
            if self.range.column > 0:
                padding = " " * (4 + self.range.column - 1)
                # A range can run onto later lines; underline this line only
                remaining = len(self.source_line) - self.range.column + 1
                width = max(1, min(self.range.end - self.range.start, remaining))
                parts.append(f"{padding}{'^' * width}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def to_dict(self) -> dict:
        """
        Convert to a plain dictionary for a front-end to display.

        Example:
            {"name": "DuplicateLabelError",
             "message": "duplicate label 'loop'",
             "range": {"filename": "<input>", "line": 3, ...},
             "hint": "'loop' is already bound to address $00"}
        """
        return {
            "name": type(self).__name__,
            "message": self.message,
            "range": self.range.to_dict() if self.range else None,
            "hint": self.hint,
        }


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised when the lexer or parser encounters text that cannot be
    tokenized or does not fit the statement grammar.

    Examples:
        - Invalid character in source
        - Unterminated string literal
        - Missing comma between operands
        - Unclosed '[' in an address operand
    """
    pass


class InvalidNumberError(AssemblySyntaxError):
    """
    Malformed numeric literal, or a literal outside 0..255.

    Every value in this machine is a single byte, so a literal that does
    not fit in 8 bits is rejected at parse time.
    """

    def __init__(
        self,
        text: str,
        reason: str,
        range: Optional[SourceRange] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"invalid number '{text}': {reason}",
            range=range,
            source_line=source_line,
        )


class InvalidLabelError(AssemblySyntaxError):
    """
    Malformed label declaration.

    Raised when a label name collides with a register or mnemonic, when
    two labels are stacked on one statement, or when a label is not
    followed by any statement.
    """
    pass


class UnknownMnemonicError(AssemblerError):
    """Instruction keyword is not part of the instruction set."""

    def __init__(
        self,
        mnemonic: str,
        range: Optional[SourceRange] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        super().__init__(
            f"unknown instruction '{mnemonic}'",
            range=range,
            source_line=source_line,
        )


class OperandCountError(AssemblerError):
    """Instruction given the wrong number of operands."""

    def __init__(
        self,
        mnemonic: str,
        expected: list[int],
        actual: int,
        range: Optional[SourceRange] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.expected = expected
        self.actual = actual

        counts = " or ".join(str(n) for n in expected)
        super().__init__(
            f"'{mnemonic}' expects {counts} operand(s), got {actual}",
            range=range,
            source_line=source_line,
        )


class OperandTypeError(AssemblerError):
    """
    Operand kind not accepted by an instruction.

    Example:
        MOV 5, AL   ; Error: cannot move into a number
    """

    def __init__(
        self,
        mnemonic: str,
        operand_types: str,
        range: Optional[SourceRange] = None,
        source_line: Optional[str] = None,
        valid_forms: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.operand_types = operand_types
        self.valid_forms = valid_forms or []

        hint = None
        if self.valid_forms:
            hint = f"{mnemonic} supports: {'; '.join(self.valid_forms)}"

        super().__init__(
            f"'{mnemonic}' does not accept operands ({operand_types})",
            range=range,
            hint=hint,
            source_line=source_line,
        )


class DuplicateLabelError(AssemblerError):
    """
    Label declared more than once.

    Raised in pass 1 whether or not the label is ever referenced. The
    range points at the second declaration.
    """

    def __init__(
        self,
        label: "Label",
        original_address: Optional[int] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_address = original_address

        hint = None
        if original_address is not None:
            hint = f"'{label.identifier}' is already bound to address ${original_address:02X}"

        super().__init__(
            f"duplicate label '{label.identifier}'",
            range=label.range,
            hint=hint,
            source_line=source_line,
        )


class AssembleEndOfMemoryError(AssemblerError):
    """
    Program needs memory beyond address $FF.

    Only the last statement of a program may run up to or past the end
    of the 256-byte address space.
    """

    def __init__(
        self,
        statement: "Statement",
        address: int,
        source_line: Optional[str] = None,
    ):
        self.statement = statement
        self.address = address
        super().__init__(
            f"end of memory: statement ends at ${address:X}, past $FF",
            range=statement.code_range,
            hint="shorten the program or move code with ORG",
            source_line=source_line,
        )


class OperandLabelNotExistError(AssemblerError):
    """
    Operand refers to a label that is never declared.

    The assembler suggests similarly-named labels to help catch typos.
    """

    def __init__(
        self,
        operand: "Operand",
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.operand = operand
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"label '{operand.value}' does not exist",
            range=operand.range,
            hint=hint,
            source_line=source_line,
        )
