# =============================================================================
# test_isa.py - Instruction Set Tests
# =============================================================================
# Tests for the opcode table and its lookup functions.
# =============================================================================

import pytest

from asm8.cpu import (
    OPCODE_TABLE,
    Mnemonic,
    OperandType,
    find_form,
    get_operand_counts,
    is_register,
    is_valid_mnemonic,
)


class TestLookups:
    """Test mnemonic and register lookups."""

    @pytest.mark.parametrize("name", ["MOV", "mov", "Halt", "ORG", "db"])
    def test_valid_mnemonic(self, name):
        assert is_valid_mnemonic(name)

    @pytest.mark.parametrize("name", ["MOVE", "loop", "AL"])
    def test_invalid_mnemonic(self, name):
        assert not is_valid_mnemonic(name)

    @pytest.mark.parametrize("name", ["AL", "bl", "Cl", "DL"])
    def test_register(self, name):
        assert is_register(name)

    def test_not_register(self):
        assert not is_register("EL")

    def test_every_mnemonic_has_forms(self):
        assert set(OPCODE_TABLE) == set(Mnemonic)

    def test_operand_counts(self):
        assert get_operand_counts(Mnemonic.MOV) == [2]
        assert get_operand_counts(Mnemonic.RET) == [0]


class TestFindForm:
    """Test operand-kind matching."""

    def test_exact_match(self):
        form = find_form(Mnemonic.MOV, (OperandType.REGISTER, OperandType.ADDRESS))
        assert form.opcode == 0xD1

    def test_label_matches_number(self):
        form = find_form(Mnemonic.JMP, (OperandType.LABEL,))
        assert form.opcode == 0xC0

    def test_org_rejects_label(self):
        assert find_form(Mnemonic.ORG, (OperandType.LABEL,)) is None

    def test_no_match(self):
        assert find_form(Mnemonic.INC, (OperandType.NUMBER,)) is None

    def test_describe(self):
        form = find_form(Mnemonic.MOV, (OperandType.REGISTER_ADDRESS, OperandType.REGISTER))
        assert form.describe("MOV") == "MOV [register], register"
