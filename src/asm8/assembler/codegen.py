"""
Two-Pass Code Generator
=======================

This module turns parsed statements into a memory image for the 256-byte
address space.

Pass 1: Label Collection
------------------------
Walk the statements in order with an address cursor starting at 0:
- bind each declared label to the current address (duplicates fail)
- ORG moves the cursor to its operand
- any other statement advances the cursor by len(codes)
- a statement other than the last that ends past $FF fails

Pass 2: Code Emission
---------------------
Walk the statements again with a fresh cursor:
- ORG moves the cursor, nothing is emitted
- each label operand is replaced by a copy bound to its address
- the statement's bytes are written at cursor, cursor + 1, ...
- the (resolved) statement is recorded at its first address

Both passes use the same widths because the parser sizes `codes` to the
final encoding. Parsed statements are never modified; pass 2 builds new
resolved ones.

Output Helpers
--------------
- to_memory(): 256-byte image with unassigned addresses filled
- format_listing(): address, bytes and source text per statement
- format_symbols(): label table sorted by address
- format_hexdump(): 16 x 16 grid of the memory image
"""

import logging
from typing import Sequence

from asm8.assembler.parser import Operand, Statement
from asm8.cpu import MAX_ADDRESS, MEMORY_SIZE, OperandType
from asm8.errors import (
    AssembleEndOfMemoryError,
    DuplicateLabelError,
    OperandLabelNotExistError,
    SourceRange,
)

logger = logging.getLogger(__name__)


LabelToAddressMap = dict[str, int]
AddressToCodeMap = dict[int, int]
AddressToStatementMap = dict[int, Statement]


# =============================================================================
# Pass 1: Label Collection
# =============================================================================

def get_label_to_address_map(
    statements: Sequence[Statement],
    lines: Sequence[str] = (),
) -> LabelToAddressMap:
    """
    First pass: bind every label to the address of its statement.

    Args:
        statements: Parsed statements in load order
        lines: Source lines, used to quote the offending line in errors

    Returns:
        Mapping of label identifier to address

    Raises:
        DuplicateLabelError: If a label is declared twice
        AssembleEndOfMemoryError: If a statement before the last one
            ends past address $FF
    """
    label_to_address: LabelToAddressMap = {}
    last_index = len(statements) - 1
    address = 0

    for index, statement in enumerate(statements):
        label = statement.label
        if label is not None:
            if label.identifier in label_to_address:
                raise DuplicateLabelError(
                    label,
                    original_address=label_to_address[label.identifier],
                    source_line=_line_text(lines, label.range),
                )
            label_to_address[label.identifier] = address

        if statement.is_org:
            address = statement.operands[0].code
            logger.debug(f"Pass 1: ORG -> ${address:02X}")
            continue

        address += statement.size
        if address > MAX_ADDRESS and index != last_index:
            raise AssembleEndOfMemoryError(
                statement,
                address,
                source_line=_line_text(lines, statement.code_range),
            )

    logger.debug(f"Pass 1: {len(label_to_address)} label(s) bound")
    return label_to_address


# =============================================================================
# Pass 2: Code Emission
# =============================================================================

def emit_code(
    statements: Sequence[Statement],
    label_to_address: LabelToAddressMap,
    lines: Sequence[str] = (),
) -> tuple[AddressToCodeMap, AddressToStatementMap]:
    """
    Second pass: resolve label operands and lay out the memory image.

    Args:
        statements: Parsed statements in load order
        label_to_address: Label table from the first pass
        lines: Source lines, used to quote the offending line in errors

    Returns:
        (address -> byte, first address -> resolved statement)

    Raises:
        OperandLabelNotExistError: If an operand names an undeclared label
    """
    address_to_code: AddressToCodeMap = {}
    address_to_statement: AddressToStatementMap = {}
    address = 0

    for statement in statements:
        if statement.is_org:
            address = statement.operands[0].code
            continue

        resolved = _resolve_statement(statement, label_to_address, lines)

        for offset, code in enumerate(resolved.codes):
            target = address + offset
            if target > MAX_ADDRESS:
                # Only the final statement can get here; pass 1 rejects the rest
                logger.warning(
                    f"{resolved.range}: {resolved.size - offset} byte(s) past "
                    f"${MAX_ADDRESS:02X} left out of the memory image"
                )
                break
            address_to_code[target] = code

        address_to_statement[address] = resolved
        address += resolved.size

    logger.debug(
        f"Pass 2: emitted {len(address_to_code)} byte(s) "
        f"for {len(address_to_statement)} statement(s)"
    )
    return address_to_code, address_to_statement


def _resolve_statement(
    statement: Statement,
    label_to_address: LabelToAddressMap,
    lines: Sequence[str],
) -> Statement:
    """Return the statement with every label operand bound to its address."""
    if not any(op.type == OperandType.LABEL for op in statement.operands):
        return statement

    operands: list[Operand] = []
    for operand in statement.operands:
        if operand.type == OperandType.LABEL:
            if operand.value not in label_to_address:
                raise OperandLabelNotExistError(
                    operand,
                    source_line=_line_text(lines, operand.range),
                    similar_labels=_find_similar_labels(operand.value, label_to_address),
                )
            operand = operand.resolve(label_to_address[operand.value])
        operands.append(operand)

    return statement.with_operands(tuple(operands))


def _line_text(lines: Sequence[str], location: SourceRange) -> str | None:
    if 0 < location.line <= len(lines):
        return lines[location.line - 1]
    return None


def _find_similar_labels(name: str, labels: LabelToAddressMap) -> list[str]:
    """
    Find declared labels with names close to an unknown one.

    Catches case slips and one or two character typos.
    """
    name_lower = name.lower()
    similar = []

    for label in labels:
        label_lower = label.lower()
        if (
            label_lower == name_lower or
            abs(len(label) - len(name)) <= 1 and
            _edit_distance(name_lower, label_lower) <= 2
        ):
            similar.append(label)

    return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min(distances[j], distances[j + 1], new_distances[-1]))
        distances = new_distances
    return distances[-1]


# =============================================================================
# Output Helpers
# =============================================================================

def to_memory(address_to_code: AddressToCodeMap, fill_byte: int = 0x00) -> bytes:
    """
    Expand an address map into the full 256-byte memory image.

    Args:
        address_to_code: Emitted bytes by address
        fill_byte: Value for addresses the program does not touch
    """
    memory = bytearray([fill_byte]) * MEMORY_SIZE
    for address, code in address_to_code.items():
        memory[address] = code
    return bytes(memory)


def format_listing(
    address_to_statement: AddressToStatementMap,
    statements: Sequence[Statement],
    lines: Sequence[str],
    bytes_per_line: int = 4,
) -> str:
    """
    Format an assembly listing.

    Every statement gets one line showing its address, up to
    `bytes_per_line` of its bytes, and its source text. Longer byte runs
    (DB strings) continue on following lines. ORG lines and statements
    the memory map does not hold show no address. Bytes of a final
    statement that run past $FF are not listed; a note counts them.

    Example:
        00  D0 00 05     MOV AL, 5
        03  C0 00        JMP start
    """
    placed = {stmt.range: (address, stmt) for address, stmt in address_to_statement.items()}
    out = []

    blank = " " * (4 + bytes_per_line * 3)

    for statement in statements:
        label = statement.label
        if label is not None and label.range.line != statement.instruction.range.line:
            out.append(f"{blank} {(_line_text(lines, label.range) or '').rstrip()}")

        text = _line_text(lines, statement.instruction.range) or ""
        entry = placed.get(statement.range)

        if entry is None:
            out.append(f"{blank} {text.rstrip()}")
            continue

        address, resolved = entry
        codes = resolved.codes[:MEMORY_SIZE - address]
        dropped = resolved.size - len(codes)
        first = codes[:bytes_per_line]
        hex_codes = " ".join(f"{c:02X}" for c in first)
        out.append(f"{address:02X}  {hex_codes:<{bytes_per_line * 3}} {text.rstrip()}")

        for offset in range(bytes_per_line, len(codes), bytes_per_line):
            chunk = " ".join(f"{c:02X}" for c in codes[offset:offset + bytes_per_line])
            out.append(f"{address + offset:02X}  {chunk}")

        if dropped:
            out.append(f"{blank} ; {dropped} byte(s) past ${MAX_ADDRESS:02X} dropped")

    return "\n".join(out) + "\n"


def format_symbols(label_to_address: LabelToAddressMap) -> str:
    """Format the label table as 'name = $XX' lines, sorted by address."""
    entries = sorted(label_to_address.items(), key=lambda item: (item[1], item[0]))
    if not entries:
        return ""
    width = max(len(name) for name, _ in entries)
    return "".join(f"{name:<{width}} = ${address:02X}\n" for name, address in entries)


def format_hexdump(memory: bytes, columns: int = 16) -> str:
    """
    Format a memory image as a hex grid with an address column.

    Example (columns=16):
           00 01 02 03 ...
        00 D0 00 05 C0 ...
    """
    header = "   " + " ".join(f"{c:02X}" for c in range(columns))
    rows = [header]
    for base in range(0, len(memory), columns):
        row = " ".join(f"{b:02X}" for b in memory[base:base + columns])
        rows.append(f"{base:02X} {row}")
    return "\n".join(rows) + "\n"

