"""
8-bit CPU Instruction Set Definition
====================================

This module defines the instruction set of the educational 8-bit CPU:
mnemonics, registers, operand kinds and the opcode of every legal
operand combination. Each instruction is one opcode byte followed by
one byte per operand, so the encoded width of a statement is known as
soon as it is parsed.

Operand Kinds
-------------
1. **REGISTER**: a general purpose register (AL, BL, CL, DL)
   - Example: INC AL -> $A4 $00

2. **NUMBER**: an immediate byte, or a jump/call target
   - Example: MOV AL, 5 -> $D0 $00 $05

3. **ADDRESS**: a memory location given as a literal, in brackets
   - Example: MOV AL, [$40] -> $D1 $00 $40

4. **REGISTER_ADDRESS**: a memory location held in a register
   - Example: MOV AL, [BL] -> $D3 $00 $01

5. **STRING**: a double-quoted string (DB directive only)
   - Example: DB "Hi" -> $48 $69

6. **LABEL**: a symbolic address, accepted wherever a NUMBER is
   - Example: JMP loop -> $C0 <address of loop>

Directives
----------
- ORG addr : move the assembly cursor, emits nothing
- DB value : emit raw bytes (number, label or string)
- END      : emit $00 and stop reading the source
"""

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Address Space
# =============================================================================

MEMORY_SIZE = 0x100
MAX_ADDRESS = MEMORY_SIZE - 1
MAX_BYTE = 0xFF


# =============================================================================
# Operand Kinds
# =============================================================================

class OperandType(Enum):
    """Kinds of operand recognised by the parser."""
    REGISTER = "Register"
    NUMBER = "Number"
    ADDRESS = "Address"
    REGISTER_ADDRESS = "RegisterAddress"
    STRING = "String"
    LABEL = "Label"

    def __str__(self) -> str:
        return {
            OperandType.REGISTER: "register",
            OperandType.NUMBER: "number",
            OperandType.ADDRESS: "[address]",
            OperandType.REGISTER_ADDRESS: "[register]",
            OperandType.STRING: "string",
            OperandType.LABEL: "label",
        }[self]


class Register(Enum):
    """General purpose registers, valued by their encoding."""
    AL = 0x00
    BL = 0x01
    CL = 0x02
    DL = 0x03


REGISTER_NAMES = frozenset(r.name for r in Register)


# =============================================================================
# Mnemonics
# =============================================================================

class Mnemonic(str, Enum):
    """Instruction and directive keywords."""

    # Arithmetic and logic
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    MOD = "MOD"
    INC = "INC"
    DEC = "DEC"
    AND = "AND"
    OR = "OR"
    XOR = "XOR"
    NOT = "NOT"
    ROL = "ROL"
    ROR = "ROR"
    SHL = "SHL"
    SHR = "SHR"

    # Data movement and comparison
    MOV = "MOV"
    CMP = "CMP"

    # Jumps
    JMP = "JMP"
    JZ = "JZ"
    JNZ = "JNZ"
    JS = "JS"
    JNS = "JNS"
    JO = "JO"
    JNO = "JNO"

    # Procedures and interrupts
    CALL = "CALL"
    RET = "RET"
    INT = "INT"
    IRET = "IRET"

    # Stack
    PUSH = "PUSH"
    POP = "POP"
    PUSHF = "PUSHF"
    POPF = "POPF"

    # Input/output
    IN = "IN"
    OUT = "OUT"

    # Control
    HALT = "HALT"
    STI = "STI"
    CLI = "CLI"
    CLO = "CLO"
    NOP = "NOP"

    # Directives
    ORG = "ORG"
    DB = "DB"
    END = "END"


MNEMONICS = frozenset(m.value for m in Mnemonic)


# =============================================================================
# Opcode Table
# =============================================================================

@dataclass(frozen=True)
class InstructionForm:
    """
    One legal operand combination of a mnemonic.

    Attributes:
        operands: Operand kinds in source order. LABEL is never listed
                  here; a label matches a NUMBER slot.
        opcode: Opcode byte, or None for directives that emit no opcode
    """
    operands: tuple[OperandType, ...]
    opcode: int | None

    def describe(self, mnemonic: str) -> str:
        """Render as e.g. 'MOV register, [address]'."""
        if not self.operands:
            return mnemonic
        return f"{mnemonic} " + ", ".join(str(t) for t in self.operands)


_R = OperandType.REGISTER
_N = OperandType.NUMBER
_A = OperandType.ADDRESS
_RA = OperandType.REGISTER_ADDRESS
_S = OperandType.STRING


def _forms(*pairs: tuple[tuple[OperandType, ...], int | None]) -> tuple[InstructionForm, ...]:
    return tuple(InstructionForm(operands, opcode) for operands, opcode in pairs)


OPCODE_TABLE: dict[Mnemonic, tuple[InstructionForm, ...]] = {
    Mnemonic.ADD: _forms(((_R, _R), 0xA0), ((_R, _N), 0xB0)),
    Mnemonic.SUB: _forms(((_R, _R), 0xA1), ((_R, _N), 0xB1)),
    Mnemonic.MUL: _forms(((_R, _R), 0xA2), ((_R, _N), 0xB2)),
    Mnemonic.DIV: _forms(((_R, _R), 0xA3), ((_R, _N), 0xB3)),
    Mnemonic.MOD: _forms(((_R, _R), 0xA6), ((_R, _N), 0xB6)),
    Mnemonic.AND: _forms(((_R, _R), 0xAA), ((_R, _N), 0xBA)),
    Mnemonic.OR: _forms(((_R, _R), 0xAB), ((_R, _N), 0xBB)),
    Mnemonic.XOR: _forms(((_R, _R), 0xAC), ((_R, _N), 0xBC)),
    Mnemonic.INC: _forms(((_R,), 0xA4)),
    Mnemonic.DEC: _forms(((_R,), 0xA5)),
    Mnemonic.NOT: _forms(((_R,), 0xAD)),
    Mnemonic.ROL: _forms(((_R,), 0x9A)),
    Mnemonic.ROR: _forms(((_R,), 0x9B)),
    Mnemonic.SHL: _forms(((_R,), 0x9C)),
    Mnemonic.SHR: _forms(((_R,), 0x9D)),
    Mnemonic.MOV: _forms(
        ((_R, _N), 0xD0),
        ((_R, _A), 0xD1),
        ((_A, _R), 0xD2),
        ((_R, _RA), 0xD3),
        ((_RA, _R), 0xD4),
    ),
    Mnemonic.CMP: _forms(((_R, _R), 0xDA), ((_R, _N), 0xDB), ((_R, _A), 0xDC)),
    Mnemonic.JMP: _forms(((_N,), 0xC0)),
    Mnemonic.JZ: _forms(((_N,), 0xC1)),
    Mnemonic.JNZ: _forms(((_N,), 0xC2)),
    Mnemonic.JS: _forms(((_N,), 0xC3)),
    Mnemonic.JNS: _forms(((_N,), 0xC4)),
    Mnemonic.JO: _forms(((_N,), 0xC5)),
    Mnemonic.JNO: _forms(((_N,), 0xC6)),
    Mnemonic.CALL: _forms(((_N,), 0xCA)),
    Mnemonic.RET: _forms(((), 0xCB)),
    Mnemonic.INT: _forms(((_N,), 0xCC)),
    Mnemonic.IRET: _forms(((), 0xCD)),
    Mnemonic.PUSH: _forms(((_R,), 0xE0)),
    Mnemonic.POP: _forms(((_R,), 0xE1)),
    Mnemonic.PUSHF: _forms(((), 0xEA)),
    Mnemonic.POPF: _forms(((), 0xEB)),
    Mnemonic.IN: _forms(((_N,), 0xF0)),
    Mnemonic.OUT: _forms(((_N,), 0xF1)),
    Mnemonic.HALT: _forms(((), 0x00)),
    Mnemonic.STI: _forms(((), 0xFC)),
    Mnemonic.CLI: _forms(((), 0xFD)),
    Mnemonic.CLO: _forms(((), 0xFE)),
    Mnemonic.NOP: _forms(((), 0xFF)),
    Mnemonic.ORG: _forms(((_N,), None)),
    Mnemonic.DB: _forms(((_N,), None), ((_S,), None)),
    Mnemonic.END: _forms(((), 0x00)),
}


# =============================================================================
# Lookup Functions
# =============================================================================

def is_valid_mnemonic(name: str) -> bool:
    """Check if name (any case) is an instruction or directive."""
    return name.upper() in MNEMONICS


def is_register(name: str) -> bool:
    """Check if name (any case) is a register."""
    return name.upper() in REGISTER_NAMES


def get_forms(mnemonic: Mnemonic) -> tuple[InstructionForm, ...]:
    """Return every legal operand combination of a mnemonic."""
    return OPCODE_TABLE[mnemonic]


def get_operand_counts(mnemonic: Mnemonic) -> list[int]:
    """Return the sorted distinct operand counts a mnemonic accepts."""
    return sorted({len(form.operands) for form in OPCODE_TABLE[mnemonic]})


def find_form(
    mnemonic: Mnemonic,
    operand_types: tuple[OperandType, ...],
) -> InstructionForm | None:
    """
    Find the form of a mnemonic matching the given operand kinds.

    A LABEL operand matches a NUMBER slot, except for ORG whose target
    must be known before any label has an address.

    Returns:
        The matching InstructionForm, or None if the combination is illegal
    """
    if mnemonic != Mnemonic.ORG:
        operand_types = tuple(
            OperandType.NUMBER if t == OperandType.LABEL else t
            for t in operand_types
        )
    for form in OPCODE_TABLE[mnemonic]:
        if form.operands == operand_types:
            return form
    return None
