"""
asm8 Configuration
==================

Output and diagnostics settings for the assembler. Configuration can
come from:
- Default values (defined here)
- Environment variables (AssemblerConfig.from_env)
- Command-line flags, which the CLI applies on top

None of these settings change the bytes a program assembles to; they
only affect how results are rendered and logged.
"""

from dataclasses import dataclass
import logging
import os


logger = logging.getLogger(__name__)


@dataclass
class AssemblerConfig:
    """
    Configuration for assembler output.

    Attributes:
        fill_byte: Value of addresses the program leaves unassigned when
                   the memory image is expanded to 256 bytes (default: $00)
        hexdump_columns: Bytes per row in hex dumps (default: 16)
        listing_bytes_per_line: Bytes shown per listing line (default: 4)
        log_level: Level name for the CLI's log output (default: "WARNING")
    """

    fill_byte: int = 0x00
    hexdump_columns: int = 16
    listing_bytes_per_line: int = 4
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            ASM8_FILL_BYTE: Fill value, decimal or 0x-prefixed hex
            ASM8_HEXDUMP_COLUMNS: Bytes per hex dump row (integer)
            ASM8_LOG_LEVEL: Logging level name (e.g., "DEBUG")

        Invalid values are ignored and the default kept.
        """
        config = cls()

        if fill := os.environ.get("ASM8_FILL_BYTE"):
            try:
                value = int(fill, 0)
                if 0 <= value <= 0xFF:
                    config.fill_byte = value
                else:
                    logger.warning(f"ASM8_FILL_BYTE={fill} is not a byte, ignored")
            except ValueError:
                logger.warning(f"ASM8_FILL_BYTE={fill} is not a number, ignored")

        if columns := os.environ.get("ASM8_HEXDUMP_COLUMNS"):
            try:
                value = int(columns)
                if value > 0:
                    config.hexdump_columns = value
            except ValueError:
                logger.warning(f"ASM8_HEXDUMP_COLUMNS={columns} is not a number, ignored")

        if level := os.environ.get("ASM8_LOG_LEVEL"):
            if level.upper() in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
                config.log_level = level.upper()

        return config
