"""
Assembler for the Educational 8-bit CPU
=======================================

This package converts assembly source for the 8-bit CPU into an
address -> byte memory image plus an address -> statement map that a
simulator uses to show which source line produced a byte.

Main Components
---------------
- **Lexer**: Tokenizes assembly source into tokens
- **Parser**: Parses tokens into statements with encoded bytes
- **codegen**: Two-pass label resolution and code emission
- **Assembler**: Facade that runs the pipeline and writes output files

Assembly Process
----------------
1. **Parsing (Lexer + Parser)**:
   - Tokenize source, recording the span of every token
   - Parse each line into a Statement (label, mnemonic, operands, codes)
   - Validate mnemonics and operand kinds against the opcode table

2. **Pass 1 (get_label_to_address_map)**:
   - Bind labels to addresses, honouring ORG
   - Reject duplicate labels and programs that overrun $FF

3. **Pass 2 (emit_code)**:
   - Resolve label operands into new statement copies
   - Lay out bytes and record each statement's first address

Example Usage
-------------
>>> from asm8.assembler import assemble
>>> codes, statements = assemble('''
...         ORG $10
... loop:   INC AL
...         JMP loop
... ''')
>>> sorted(codes.items())
[(16, 164), (17, 0), (18, 192), (19, 16)]
"""

from asm8.assembler.assembler import (
    AssembleResult,
    Assembler,
    assemble,
    assemble_file,
)
from asm8.assembler.codegen import (
    AddressToCodeMap,
    AddressToStatementMap,
    LabelToAddressMap,
    emit_code,
    format_hexdump,
    format_listing,
    format_symbols,
    get_label_to_address_map,
    to_memory,
)
from asm8.assembler.lexer import Lexer, Token, TokenType
from asm8.assembler.parser import (
    Instruction,
    Label,
    Operand,
    Parser,
    Statement,
    parse,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "AssembleResult",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    # Parser
    "Parser",
    "Statement",
    "Instruction",
    "Label",
    "Operand",
    "parse",
    # Code generator
    "LabelToAddressMap",
    "AddressToCodeMap",
    "AddressToStatementMap",
    "get_label_to_address_map",
    "emit_code",
    "to_memory",
    "format_listing",
    "format_symbols",
    "format_hexdump",
]
