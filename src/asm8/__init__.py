"""
asm8 - Assembler Core for an Educational 8-bit CPU
==================================================

This package translates assembly source for a small 8-bit CPU into a
memory image for its 256-byte address space. It is the compilation core
of a CPU simulator: the simulator hands in source text and gets back

- an address -> byte map to load into memory (absent addresses are 0)
- an address -> statement map to trace a program counter back to source

Main Components
---------------
- **assembler**: Lexer, parser and two-pass code generator
- **cpu**: Registers, operand kinds and the opcode table
- **errors**: Exception hierarchy with source ranges
- **cli**: The asm8 command-line tool

Quick Start
-----------
    >>> from asm8 import assemble
    >>> codes, statements = assemble("MOV AL, 5\\nHALT")
    >>> codes
    {0: 208, 1: 0, 2: 5, 3: 0}

Or use the command-line tool:
    $ asm8 prog.asm -o prog.bin -l prog.lst
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from asm8.assembler import (
    Assembler,
    AssembleResult,
    Statement,
    Operand,
    Label,
    Instruction,
    assemble,
    assemble_file,
    parse,
)
from asm8.config import AssemblerConfig
from asm8.cpu import Mnemonic, OperandType, Register, MEMORY_SIZE
from asm8.errors import (
    Asm8Error,
    SourceRange,
    AssemblerError,
    AssemblySyntaxError,
    InvalidNumberError,
    InvalidLabelError,
    UnknownMnemonicError,
    OperandCountError,
    OperandTypeError,
    DuplicateLabelError,
    AssembleEndOfMemoryError,
    OperandLabelNotExistError,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "AssembleResult",
    "Statement",
    "Operand",
    "Label",
    "Instruction",
    "assemble",
    "assemble_file",
    "parse",
    "AssemblerConfig",
    # CPU
    "Mnemonic",
    "OperandType",
    "Register",
    "MEMORY_SIZE",
    # Exception hierarchy
    "Asm8Error",
    "SourceRange",
    "AssemblerError",
    "AssemblySyntaxError",
    "InvalidNumberError",
    "InvalidLabelError",
    "UnknownMnemonicError",
    "OperandCountError",
    "OperandTypeError",
    "DuplicateLabelError",
    "AssembleEndOfMemoryError",
    "OperandLabelNotExistError",
]
