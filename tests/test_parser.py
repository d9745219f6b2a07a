# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for turning source text into Statement records.
#
# Test coverage includes:
#   - Operand kinds and their encoding
#   - Label declarations, including labels on their own line
#   - Directives (ORG, DB, END)
#   - Statement widths with unresolved label placeholders
#   - Syntax and operand errors
# =============================================================================

import pytest

from asm8.assembler.parser import parse
from asm8.cpu import Mnemonic, OperandType
from asm8.errors import (
    AssemblySyntaxError,
    InvalidLabelError,
    InvalidNumberError,
    OperandCountError,
    OperandTypeError,
    UnknownMnemonicError,
)


def parse_one(source: str):
    """Parse source expected to hold exactly one statement."""
    statements = parse(source, "<test>")
    assert len(statements) == 1
    return statements[0]


# =============================================================================
# Instruction Encoding Tests
# =============================================================================

class TestInstructionEncoding:
    """Test opcode selection and operand bytes."""

    def test_register_immediate(self):
        stmt = parse_one("MOV AL, 5")
        assert stmt.mnemonic == Mnemonic.MOV
        assert stmt.instruction.opcode == 0xD0
        assert [op.type for op in stmt.operands] == [OperandType.REGISTER, OperandType.NUMBER]
        assert stmt.codes == (0xD0, 0x00, 0x05)

    def test_case_insensitive_mnemonic_and_register(self):
        stmt = parse_one("mov bl, [$40]")
        assert stmt.codes == (0xD1, 0x01, 0x40)

    def test_store_to_address(self):
        assert parse_one("MOV [$80], CL").codes == (0xD2, 0x80, 0x02)

    def test_register_address(self):
        stmt = parse_one("MOV [CL], DL")
        assert stmt.operands[0].type == OperandType.REGISTER_ADDRESS
        assert stmt.codes == (0xD4, 0x02, 0x03)

    def test_register_register(self):
        assert parse_one("ADD AL, BL").codes == (0xA0, 0x00, 0x01)

    def test_register_number_form(self):
        assert parse_one("ADD AL, 1").codes == (0xB0, 0x00, 0x01)

    def test_single_register(self):
        assert parse_one("INC DL").codes == (0xA4, 0x03)

    def test_no_operands(self):
        assert parse_one("HALT").codes == (0x00,)
        assert parse_one("NOP").codes == (0xFF,)

    def test_address_operand_range_includes_brackets(self):
        stmt = parse_one("MOV AL, [$40]")
        operand = stmt.operands[1]
        assert (operand.range.start, operand.range.end) == (8, 13)


# =============================================================================
# Label Operand Tests
# =============================================================================

class TestLabelOperands:
    """Test that label operands reserve a placeholder byte."""

    def test_label_operand_is_unresolved(self):
        stmt = parse_one("JMP target")
        operand = stmt.operands[0]
        assert operand.type == OperandType.LABEL
        assert operand.value == "target"
        assert operand.code is None

    def test_placeholder_byte_sets_final_width(self):
        stmt = parse_one("JMP target")
        assert stmt.codes == (0xC0, 0x00)
        assert stmt.size == 2

    def test_label_as_immediate(self):
        stmt = parse_one("MOV AL, table")
        assert stmt.codes == (0xD0, 0x00, 0x00)

    def test_label_in_brackets_is_rejected(self):
        with pytest.raises(AssemblySyntaxError, match="inside"):
            parse("MOV AL, [table]")

    def test_mnemonic_as_operand_is_rejected(self):
        with pytest.raises(AssemblySyntaxError, match="reserved"):
            parse("JMP HALT")


# =============================================================================
# Label Declaration Tests
# =============================================================================

class TestLabelDeclarations:
    """Test label declarations."""

    def test_label_on_statement(self):
        stmt = parse_one("start: NOP")
        assert stmt.label.identifier == "start"

    def test_statement_range_starts_at_label(self):
        stmt = parse_one("start: MOV AL, 5")
        assert (stmt.range.start, stmt.range.end) == (0, 16)

    def test_label_on_own_line_attaches_to_next_statement(self):
        statements = parse("start:\n\n    NOP\n    HALT")
        assert len(statements) == 2
        assert statements[0].label.identifier == "start"
        assert statements[1].label is None

    def test_register_name_is_reserved(self):
        with pytest.raises(InvalidLabelError, match="reserved"):
            parse("AL: NOP")

    def test_mnemonic_name_is_reserved(self):
        with pytest.raises(InvalidLabelError):
            parse("mov: NOP")

    def test_two_labels_on_one_statement(self):
        with pytest.raises(InvalidLabelError):
            parse("first:\nsecond: NOP")

    def test_label_without_statement(self):
        with pytest.raises(InvalidLabelError, match="not followed"):
            parse("NOP\ndangling:")


# =============================================================================
# Directive Tests
# =============================================================================

class TestDirectives:
    """Test ORG, DB and END."""

    def test_org_emits_nothing(self):
        stmt = parse_one("ORG $10")
        assert stmt.is_org
        assert stmt.codes == ()
        assert stmt.operands[0].code == 0x10

    def test_org_rejects_label(self):
        with pytest.raises(OperandTypeError):
            parse("ORG start\nstart: NOP")

    def test_db_number(self):
        stmt = parse_one("DB 7")
        assert stmt.instruction.opcode is None
        assert stmt.codes == (0x07,)

    def test_db_string(self):
        assert parse_one('DB "Hi"').codes == (0x48, 0x69)

    def test_db_empty_string(self):
        assert parse_one('DB ""').codes == ()

    def test_db_char(self):
        assert parse_one("DB 'A'").codes == (65,)

    def test_db_label(self):
        assert parse_one("DB table").codes == (0x00,)

    def test_end_emits_halt_byte(self):
        assert parse_one("END").codes == (0x00,)

    def test_end_stops_parsing(self):
        statements = parse("NOP\nEND\nthis is not assembly")
        assert [s.mnemonic for s in statements] == [Mnemonic.NOP, Mnemonic.END]


# =============================================================================
# Parser Error Tests
# =============================================================================

class TestParserErrors:
    """Test syntax and operand errors."""

    def test_unknown_mnemonic(self):
        with pytest.raises(UnknownMnemonicError) as exc_info:
            parse("FOO AL")
        assert exc_info.value.mnemonic == "FOO"

    def test_missing_operand(self):
        with pytest.raises(OperandCountError) as exc_info:
            parse("INC")
        assert exc_info.value.expected == [1]
        assert exc_info.value.actual == 0

    def test_extra_operand(self):
        with pytest.raises(OperandCountError):
            parse("HALT AL")

    def test_wrong_operand_kind(self):
        with pytest.raises(OperandTypeError) as exc_info:
            parse("MOV 5, AL")
        assert "MOV register, number" in exc_info.value.valid_forms
        assert "supports" in exc_info.value.hint

    def test_missing_comma(self):
        with pytest.raises(AssemblySyntaxError, match="expected ','"):
            parse("MOV AL 5")

    def test_dangling_comma(self):
        with pytest.raises(AssemblySyntaxError, match="expected operand"):
            parse("MOV AL,")

    def test_unclosed_bracket(self):
        with pytest.raises(AssemblySyntaxError, match="expected ']'"):
            parse("MOV AL, [$40")

    def test_number_out_of_range(self):
        with pytest.raises(InvalidNumberError) as exc_info:
            parse("MOV AL, 256")
        assert exc_info.value.text == "256"

    def test_hex_out_of_range_quotes_source_text(self):
        with pytest.raises(InvalidNumberError) as exc_info:
            parse("DB $100")
        assert exc_info.value.text == "$100"

    def test_label_alone_is_not_an_instruction(self):
        with pytest.raises(AssemblySyntaxError, match="expected instruction"):
            parse(", NOP")

    def test_error_location(self):
        with pytest.raises(UnknownMnemonicError) as exc_info:
            parse("NOP\n  BOGUS", "prog.asm")
        message = str(exc_info.value)
        assert message.startswith("prog.asm:2:3: error: unknown instruction 'BOGUS'")
        assert "\n      BOGUS\n      ^^^^^" in message

    def test_error_after_label_on_own_line(self):
        """Errors point at the instruction, not the label line above it."""
        with pytest.raises(OperandCountError) as exc_info:
            parse("NOP\nhandler:\n        INC\n")
        error = exc_info.value
        assert error.range.line == 3
        assert error.source_line == "        INC"
        assert str(error) == (
            "<input>:3:9: error: 'INC' expects 1 operand(s), got 0\n"
            "            INC\n"
            "            ^^^"
        )

    def test_statement_range_keeps_label_line(self):
        stmt = parse("handler:\n  INC AL")[0]
        assert stmt.range.line == 1
        assert stmt.code_range.line == 2
        assert stmt.code_range.column == 3
