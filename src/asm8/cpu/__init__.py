"""
asm8 CPU Package
================

Architecture definitions for the educational 8-bit CPU: the 256-byte
address space, registers, operand kinds and the opcode table. The
parser uses these to validate and encode statements; a simulator can
use the same table to decode them.

Usage:
    from asm8.cpu import Mnemonic, OperandType, find_form
"""

from asm8.cpu.isa import (
    # Address space
    MEMORY_SIZE,
    MAX_ADDRESS,
    MAX_BYTE,
    # Core types
    OperandType,
    Register,
    Mnemonic,
    InstructionForm,
    # Instruction set reference
    REGISTER_NAMES,
    MNEMONICS,
    OPCODE_TABLE,
    # Lookup functions
    is_valid_mnemonic,
    is_register,
    get_forms,
    get_operand_counts,
    find_form,
)

__all__ = [
    "MEMORY_SIZE",
    "MAX_ADDRESS",
    "MAX_BYTE",
    "OperandType",
    "Register",
    "Mnemonic",
    "InstructionForm",
    "REGISTER_NAMES",
    "MNEMONICS",
    "OPCODE_TABLE",
    "is_valid_mnemonic",
    "is_register",
    "get_forms",
    "get_operand_counts",
    "find_form",
]
