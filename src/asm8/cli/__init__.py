"""
asm8 Command-Line Interface
===========================

This package provides the command-line tool for asm8:

- **asm8**: assemble a source file into a 256-byte memory image

The tool is a Click-based CLI application with help text and
consistent exit codes (see asm8.cli.errors).
"""

__all__ = ["asm8"]
