"""
asm8 - Assembler Command-Line Interface
=======================================

This module implements the command-line interface for the 8-bit CPU
assembler.

Usage Examples
--------------
Basic assembly (writes prog.bin, the 256-byte memory image):
    $ asm8 prog.asm

With output file:
    $ asm8 prog.asm -o image.bin

Generate all output files:
    $ asm8 prog.asm -o prog.bin -l prog.lst -s prog.sym -x prog.hex

Print the memory image to the terminal instead of writing files:
    $ asm8 --dump prog.asm

Verbose mode (debug logging of both passes):
    $ asm8 -v prog.asm
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from asm8 import __version__
from asm8.assembler import Assembler
from asm8.cli.errors import ExitCode, handle_cli_exception
from asm8.config import AssemblerConfig


def _parse_byte(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[int]:
    """Accept a byte in decimal, 0x hex or $ hex."""
    if value is None:
        return None
    text = value.strip()
    try:
        number = int(text[1:], 16) if text.startswith("$") else int(text, 0)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a number")
    if not 0 <= number <= 0xFF:
        raise click.BadParameter(f"'{value}' does not fit in a byte")
    return number


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output memory image (default: input.bin)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate label table file",
)
@click.option(
    "-x", "--hexdump",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate hex dump file of the memory image",
)
@click.option(
    "--dump",
    is_flag=True,
    help="Print a hex dump to stdout and write no image file",
)
@click.option(
    "--fill-byte",
    callback=_parse_byte,
    default=None,
    help="Value of unassigned memory bytes (default: 0, or ASM8_FILL_BYTE)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="asm8")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    hexdump: Optional[Path],
    dump: bool,
    fill_byte: Optional[int],
    verbose: bool,
) -> None:
    """
    Assemble 8-bit CPU source code into a 256-byte memory image.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        asm8 prog.asm               # Outputs prog.bin
        asm8 prog.asm -o out.bin    # Specify output file
        asm8 prog.asm -l prog.lst   # Also write a listing
        asm8 --dump prog.asm        # Print memory to the terminal
    """
    config = AssemblerConfig.from_env()
    if fill_byte is not None:
        config.fill_byte = fill_byte
    if verbose:
        config.log_level = "DEBUG"

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if dump and output is not None:
        click.echo("Error: --dump and -o/--output are mutually exclusive", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    asm = Assembler(config)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        if dump:
            click.echo(asm.get_hexdump(), nl=False)
        else:
            output_file = output if output is not None else input_file.with_suffix(".bin")
            asm.write_binary(output_file)
            if verbose:
                click.echo(f"Wrote memory image to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if hexdump:
            asm.write_hexdump(hexdump)
            if verbose:
                click.echo(f"Wrote hex dump to {hexdump}")

        if verbose:
            code = asm.get_code()
            click.echo(f"Assembly complete: {len(code)} bytes used of 256")
            click.echo(f"Defined {len(asm.get_symbols())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
