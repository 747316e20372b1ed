"""
Pseudo Expander - Configuration
===============================

Settings shared by the Expander facade and the psexpand command.
Configuration can come from:
- Default values (defined here)
- Environment variables (ExpanderConfig.from_env)
- Command-line options, which override both

Environment variables:
    PSEXPAND_TABLE: Pseudo-op table file replacing the built-in RV32I table
    PSEXPAND_COMPACT: "1"/"true"/"yes"/"on" to prefer compact translations
    PSEXPAND_TEXT_BASE: Address of the first statement (e.g. "0x00400000")
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Start of the text segment in the usual RARS/MARS memory configuration
DEFAULT_TEXT_BASE = 0x00400000

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ExpanderConfig:
    """
    Configuration for pseudo-instruction expansion.

    Attributes:
        table_path: External pseudo-op table; None selects the built-in table
        compact: Prefer compact translations where an instruction has one
        text_base: Address assigned to the first statement of a listing
    """

    table_path: Optional[Path] = None
    compact: bool = False
    text_base: int = DEFAULT_TEXT_BASE

    @classmethod
    def from_env(cls) -> "ExpanderConfig":
        """
        Create an ExpanderConfig from environment variables.

        Invalid values are ignored (with a warning) and the default is kept.
        """
        config = cls()

        if table := os.environ.get("PSEXPAND_TABLE"):
            config.table_path = Path(table)

        if compact := os.environ.get("PSEXPAND_COMPACT"):
            config.compact = compact.strip().lower() in _TRUE_VALUES

        if text_base := os.environ.get("PSEXPAND_TEXT_BASE"):
            try:
                config.text_base = int(text_base, 0)
            except ValueError:
                logger.warning(f"Ignoring invalid PSEXPAND_TEXT_BASE value {text_base!r}")

        return config
