"""
Assembly Language Parser
========================

This module implements the parser for the 8-bit CPU assembly language.
It turns the lexer's token stream into an ordered list of Statement
records, one per source statement, in load order.

Statement Layout
----------------
```asm
start:  MOV AL, [$40]   ; optional label, mnemonic, operands
        JMP start
data:   DB "Hi"         ; directives are statements too
        ORG $80         ; relocates, emits nothing
```

A label on a line of its own belongs to the next statement.

Encoding
--------
Each statement carries `codes`, the exact bytes it will occupy: the
opcode followed by one byte per operand (directives have no opcode).
A label operand reserves a placeholder byte of $00 that the assembler's
second pass fills in, so `len(codes)` is already the final width.

Errors
------
Parsing stops at the first error; no partial statement list is
returned. The parser never looks at label addresses, so a label may be
used before the line that declares it.
"""

from dataclasses import dataclass, replace
from typing import NoReturn, Optional

from asm8.errors import (
    AssemblySyntaxError,
    InvalidLabelError,
    InvalidNumberError,
    OperandCountError,
    OperandTypeError,
    SourceRange,
    UnknownMnemonicError,
)
from asm8.assembler.lexer import Token, TokenType, tokenize
from asm8.cpu import (
    MAX_BYTE,
    Mnemonic,
    OperandType,
    Register,
    find_form,
    get_forms,
    get_operand_counts,
    is_register,
    is_valid_mnemonic,
)


# =============================================================================
# Statement Data Classes
# =============================================================================

@dataclass(frozen=True)
class Label:
    """
    Label declaration.

    Attributes:
        identifier: Label name, case-sensitive
        range: Source span of the name
    """
    identifier: str
    range: SourceRange


@dataclass(frozen=True)
class Instruction:
    """
    Instruction or directive keyword.

    Attributes:
        mnemonic: The keyword
        opcode: Opcode byte of the selected form, None for ORG and DB
        range: Source span of the keyword
    """
    mnemonic: Mnemonic
    opcode: Optional[int]
    range: SourceRange


@dataclass(frozen=True)
class Operand:
    """
    Typed instruction operand.

    Attributes:
        type: Operand kind
        value: Register name, number, string text or label identifier
        code: Numeric encoding; None for an unresolved label or a string
        range: Source span of the operand, brackets included
    """
    type: OperandType
    value: str | int
    code: Optional[int]
    range: SourceRange

    def encode(self) -> tuple[int, ...]:
        """Bytes this operand contributes to its statement."""
        if self.type == OperandType.STRING:
            return tuple(ord(c) for c in self.value)
        if self.code is None:
            return (0x00,)
        return (self.code,)

    def resolve(self, address: int) -> "Operand":
        """Return a copy of this label operand bound to an address."""
        return replace(self, code=address)


@dataclass(frozen=True)
class Statement:
    """
    One parsed source statement.

    Attributes:
        label: Label declared at this statement's address (optional)
        instruction: Mnemonic and opcode
        operands: Operands in source order
        codes: Bytes the statement occupies (empty for ORG)
        range: Source span from label (or mnemonic) to last operand. A
               label on its own line makes this span several lines; use
               code_range to point at the instruction itself.
    """
    label: Optional[Label]
    instruction: Instruction
    operands: tuple[Operand, ...]
    codes: tuple[int, ...]
    range: SourceRange

    @property
    def mnemonic(self) -> Mnemonic:
        return self.instruction.mnemonic

    @property
    def is_org(self) -> bool:
        return self.instruction.mnemonic == Mnemonic.ORG

    @property
    def size(self) -> int:
        return len(self.codes)

    @property
    def code_range(self) -> SourceRange:
        """Span from the mnemonic to the last operand, without the label."""
        end = self.operands[-1].range if self.operands else self.instruction.range
        return self.instruction.range.merge(end)

    def with_operands(self, operands: tuple[Operand, ...]) -> "Statement":
        """Return a copy with new operands and re-encoded codes."""
        return replace(
            self,
            operands=operands,
            codes=encode(self.instruction, operands),
        )


def encode(instruction: Instruction, operands: tuple[Operand, ...]) -> tuple[int, ...]:
    """
    Encode a statement into bytes.

    ORG emits nothing. Other statements emit their opcode (if any)
    followed by each operand's bytes.
    """
    if instruction.mnemonic == Mnemonic.ORG:
        return ()

    codes: list[int] = []
    if instruction.opcode is not None:
        codes.append(instruction.opcode)
    for operand in operands:
        codes.extend(operand.encode())
    return tuple(codes)


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Parses assembly tokens into statements.

    Usage:
        tokens = tokenize(source, filename)
        parser = Parser(tokens, source, filename)
        statements = parser.parse()
    """

    def __init__(self, tokens: list[Token], source: str = "", filename: str = "<input>"):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer, ending with EOF
            source: Original source text, used to quote lines in errors
            filename: Source filename for error reporting
        """
        self._tokens = tokens
        self._lines = [line.rstrip("\r") for line in source.split("\n")]
        self._filename = filename
        self._pos = 0

    def parse(self) -> list[Statement]:
        """
        Parse all tokens into statements.

        Returns:
            Statements in source order

        Raises:
            AssemblerError: On the first syntax or operand error
        """
        statements: list[Statement] = []
        pending_label: Optional[Label] = None

        while not self._at_end():
            if self._match(TokenType.NEWLINE):
                continue

            label = self._try_parse_label()
            if label is not None:
                if pending_label is not None:
                    raise InvalidLabelError(
                        f"label '{label.identifier}' follows label "
                        f"'{pending_label.identifier}' with no statement between them",
                        label.range,
                        source_line=self._line_text(label.range),
                    )
                pending_label = label
                if self._check(TokenType.NEWLINE, TokenType.EOF):
                    continue

            statement = self._parse_statement(pending_label)
            pending_label = None
            statements.append(statement)

            if statement.mnemonic == Mnemonic.END:
                break

        if pending_label is not None:
            raise InvalidLabelError(
                f"label '{pending_label.identifier}' is not followed by a statement",
                pending_label.range,
                source_line=self._line_text(pending_label.range),
            )

        return statements

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens) or self._current().type == TokenType.EOF

    def _current(self) -> Token:
        if self._pos >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[self._pos]

    def _peek(self, offset: int = 0) -> Token:
        pos = self._pos + offset
        if pos >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[pos]

    def _advance(self) -> Token:
        token = self._current()
        self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _match(self, *types: TokenType) -> Optional[Token]:
        if self._check(*types):
            return self._advance()
        return None

    def _line_text(self, location: SourceRange) -> Optional[str]:
        if 0 < location.line <= len(self._lines):
            return self._lines[location.line - 1]
        return None

    def _error(self, message: str, token: Optional[Token] = None) -> AssemblySyntaxError:
        token = token or self._current()
        return AssemblySyntaxError(message, token.range, source_line=self._line_text(token.range))

    def _expect_end_of_line(self) -> None:
        if not self._check(TokenType.NEWLINE, TokenType.EOF):
            raise self._error("expected ',' or end of line")

    # =========================================================================
    # Label Parsing
    # =========================================================================

    def _try_parse_label(self) -> Optional[Label]:
        """Parse 'identifier:' at the start of a line, if present."""
        if not (self._check(TokenType.IDENTIFIER) and self._peek(1).type == TokenType.COLON):
            return None

        name_token = self._advance()
        self._advance()  # consume colon
        name = name_token.value

        if is_register(name) or is_valid_mnemonic(name):
            raise InvalidLabelError(
                f"'{name}' is reserved and cannot be used as a label",
                name_token.range,
                source_line=self._line_text(name_token.range),
            )

        return Label(identifier=name, range=name_token.range)

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self, label: Optional[Label]) -> Statement:
        """Parse 'MNEMONIC operand, operand' and encode it."""
        if not self._check(TokenType.IDENTIFIER):
            raise self._error("expected instruction")

        mnemonic_token = self._advance()
        name = mnemonic_token.value.upper()
        if not is_valid_mnemonic(name):
            raise UnknownMnemonicError(
                mnemonic_token.value,
                mnemonic_token.range,
                source_line=self._line_text(mnemonic_token.range),
            )
        mnemonic = Mnemonic(name)

        operands = self._parse_operands()
        self._expect_end_of_line()

        end_range = operands[-1].range if operands else mnemonic_token.range
        code_range = mnemonic_token.range.merge(end_range)
        statement_range = label.range.merge(end_range) if label is not None else code_range

        form = find_form(mnemonic, tuple(op.type for op in operands))
        if form is None:
            self._raise_operand_error(mnemonic, operands, code_range)

        instruction = Instruction(
            mnemonic=mnemonic,
            opcode=form.opcode,
            range=mnemonic_token.range,
        )
        return Statement(
            label=label,
            instruction=instruction,
            operands=operands,
            codes=encode(instruction, operands),
            range=statement_range,
        )

    def _raise_operand_error(
        self,
        mnemonic: Mnemonic,
        operands: tuple[Operand, ...],
        code_range: SourceRange,
    ) -> NoReturn:
        counts = get_operand_counts(mnemonic)
        if len(operands) not in counts:
            raise OperandCountError(
                mnemonic.value,
                counts,
                len(operands),
                code_range,
                source_line=self._line_text(code_range),
            )

        operand_range = operands[0].range.merge(operands[-1].range)
        raise OperandTypeError(
            mnemonic.value,
            ", ".join(str(op.type) for op in operands),
            operand_range,
            source_line=self._line_text(operand_range),
            valid_forms=[form.describe(mnemonic.value) for form in get_forms(mnemonic)],
        )

    def _parse_operands(self) -> tuple[Operand, ...]:
        """Parse a comma-separated operand list up to end of line."""
        operands: list[Operand] = []
        if self._check(TokenType.NEWLINE, TokenType.EOF):
            return ()

        operands.append(self._parse_operand())
        while self._match(TokenType.COMMA):
            operands.append(self._parse_operand())
        return tuple(operands)

    def _parse_operand(self) -> Operand:
        token = self._current()

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            if is_register(token.value):
                register = Register[token.value.upper()]
                return Operand(OperandType.REGISTER, register.name, register.value, token.range)
            if is_valid_mnemonic(token.value):
                raise self._error(f"'{token.value}' is reserved and cannot be used as a label", token)
            return Operand(OperandType.LABEL, token.value, None, token.range)

        if token.type == TokenType.NUMBER:
            self._advance()
            value = self._check_byte(token)
            return Operand(OperandType.NUMBER, value, value, token.range)

        if token.type == TokenType.STRING:
            self._advance()
            for char in token.value:
                if ord(char) > MAX_BYTE:
                    raise self._error(f"character '{char}' does not fit in a byte", token)
            return Operand(OperandType.STRING, token.value, None, token.range)

        if token.type == TokenType.LBRACKET:
            return self._parse_address_operand()

        if token.type in (TokenType.NEWLINE, TokenType.EOF):
            raise self._error("expected operand")
        raise self._error(f"unexpected '{token.value}' in operand")

    def _parse_address_operand(self) -> Operand:
        """Parse '[number]' or '[register]'."""
        open_token = self._advance()
        inner = self._current()

        if inner.type == TokenType.NUMBER:
            self._advance()
            value = self._check_byte(inner)
            operand_type = OperandType.ADDRESS
            payload: str | int = value
            code = value
        elif inner.type == TokenType.IDENTIFIER and is_register(inner.value):
            self._advance()
            register = Register[inner.value.upper()]
            operand_type = OperandType.REGISTER_ADDRESS
            payload = register.name
            code = register.value
        else:
            raise self._error("expected number or register inside '[ ]'", inner)

        close_token = self._current()
        if close_token.type != TokenType.RBRACKET:
            raise self._error("expected ']'", close_token)
        self._advance()

        return Operand(operand_type, payload, code, open_token.range.merge(close_token.range))

    def _check_byte(self, token: Token) -> int:
        value = token.value
        if not 0 <= value <= MAX_BYTE:
            text = self._source_text(token)
            raise InvalidNumberError(
                text,
                "value must be between 0 and 255",
                token.range,
                source_line=self._line_text(token.range),
            )
        return value

    def _source_text(self, token: Token) -> str:
        line = self._line_text(token.range)
        if line is None:
            return str(token.value)
        return line[token.column - 1:token.column - 1 + token.end - token.start]


# =============================================================================
# Convenience Function
# =============================================================================

def parse(source: str, filename: str = "<input>") -> list[Statement]:
    """
    Parse assembly source into statements.

    Args:
        source: Whole-program source text
        filename: Name used in error locations

    Returns:
        Statements in source order

    Raises:
        AssemblerError: On the first lexical, syntax or operand error
    """
    return Parser(tokenize(source, filename), source, filename).parse()
