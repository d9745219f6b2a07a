"""
8-bit CPU Assembler - Main Interface
====================================

This module provides the Assembler class and the assemble() function,
the entry points used by a simulator front-end or the asm8 CLI. They
coordinate the parser and the two-pass code generator.

Example Usage
-------------
>>> from asm8.assembler import assemble
>>> address_to_code, address_to_statement = assemble('''
...         JMP start
... data:   DB "Hi"
... start:  MOV AL, data
...         END
... ''')
>>> address_to_code[0], address_to_code[1]
(192, 4)

Stateful use, for writing output files:

>>> from asm8.assembler import Assembler
>>> asm = Assembler()
>>> result = asm.assemble_file("prog.asm")
>>> asm.write_binary("prog.bin")
>>> asm.write_listing("prog.lst")

Each call is independent: statements are parsed afresh and nothing
from a previous call affects the next.
"""

import logging
from pathlib import Path
from typing import NamedTuple, Optional

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
from asm8.assembler.parser import Statement, parse
from asm8.config import AssemblerConfig

logger = logging.getLogger(__name__)


class AssembleResult(NamedTuple):
    """
    Result of assembling a program.

    Attributes:
        address_to_code: Memory image, address -> byte
        address_to_statement: First address -> resolved statement
    """
    address_to_code: AddressToCodeMap
    address_to_statement: AddressToStatementMap


def _split_lines(source: str) -> list[str]:
    return [line.rstrip("\r") for line in source.split("\n")]


class Assembler:
    """
    Main assembler class.

    Holds the results of the most recent assembly so they can be queried
    or written to files.

    Attributes:
        config: Output settings (fill byte, hex dump width, ...)
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()
        self._reset()

    def _reset(self) -> None:
        self._lines: list[str] = []
        self._statements: list[Statement] = []
        self._labels: LabelToAddressMap = {}
        self._result: Optional[AssembleResult] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble(self, source: str, filename: str = "<input>") -> AssembleResult:
        """
        Assemble source code from a string.

        The assembly pipeline is:
        1. Parse source into statements (lexer -> parser)
        2. Pass 1: bind labels to addresses
        3. Pass 2: resolve label operands and emit bytes

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            AssembleResult (address_to_code, address_to_statement)

        Raises:
            AssemblerError: If assembly fails; no partial result is kept
        """
        self._reset()
        lines = _split_lines(source)

        statements = parse(source, filename)
        logger.debug(f"{filename}: parsed {len(statements)} statement(s)")

        labels = get_label_to_address_map(statements, lines)
        address_to_code, address_to_statement = emit_code(statements, labels, lines)

        self._lines = lines
        self._statements = statements
        self._labels = labels
        self._result = AssembleResult(address_to_code, address_to_statement)

        logger.info(f"{filename}: assembled {len(address_to_code)} byte(s)")
        return self._result

    def assemble_file(self, filepath: str | Path) -> AssembleResult:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        logger.info(f"Assembling {filepath}")
        return self.assemble(filepath.read_text(), str(filepath))

    # =========================================================================
    # Result Accessors
    # =========================================================================

    def _require_result(self) -> AssembleResult:
        """Return the last result; RuntimeError if nothing was assembled."""
        if self._result is None:
            raise RuntimeError("no program has been assembled; call assemble() first")
        return self._result

    def get_code(self) -> AddressToCodeMap:
        """Get the address -> byte map of the last assembly."""
        return dict(self._require_result().address_to_code)

    def get_memory(self) -> bytes:
        """Get the full 256-byte memory image of the last assembly."""
        return to_memory(self._require_result().address_to_code, self.config.fill_byte)

    def get_symbols(self) -> LabelToAddressMap:
        """Get the label -> address table of the last assembly."""
        self._require_result()
        return dict(self._labels)

    def get_statements(self) -> list[Statement]:
        """Get the parsed (unresolved) statements of the last assembly."""
        self._require_result()
        return list(self._statements)

    def get_listing(self) -> str:
        """Get the assembly listing with addresses, bytes and source."""
        result = self._require_result()
        return format_listing(
            result.address_to_statement,
            self._statements,
            self._lines,
            self.config.listing_bytes_per_line,
        )

    def get_hexdump(self) -> str:
        """Get a hex dump of the memory image."""
        return format_hexdump(self.get_memory(), self.config.hexdump_columns)

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_binary(self, filepath: str | Path) -> None:
        """Write the 256-byte memory image as raw binary."""
        memory = self.get_memory()
        Path(filepath).write_bytes(memory)
        logger.info(f"Wrote {len(memory)} bytes to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing file."""
        Path(filepath).write_text(self.get_listing())
        logger.info(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """Write the label table file."""
        Path(filepath).write_text(format_symbols(self.get_symbols()))
        logger.info(f"Wrote symbols to {filepath}")

    def write_hexdump(self, filepath: str | Path) -> None:
        """Write a hex dump of the memory image."""
        Path(filepath).write_text(self.get_hexdump())
        logger.info(f"Wrote hex dump to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> AssembleResult:
    """
    Assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors

    Returns:
        AssembleResult, unpackable as (address_to_code, address_to_statement)

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble(source, filename)


def assemble_file(filepath: str | Path) -> AssembleResult:
    """Convenience function to assemble a file."""
    return Assembler().assemble_file(filepath)
