"""
Pseudo Expander Error Hierarchy
===============================

This module defines the exception hierarchy for the expansion engine and
its front ends. All exceptions inherit from PseudoExpanderError, so callers
can catch every engine-related error with a single except clause.

Exception Hierarchy
-------------------
PseudoExpanderError (base)
└── ExpanderError (located, with optional hint)
    ├── TableFormatError - malformed line in a pseudo-op table
    ├── UnknownMnemonicError - no pseudo-instruction with that mnemonic
    ├── OperandMismatchError - no definition accepts the operands
    ├── UndefinedSymbolError - label operand missing from the symbol table
    ├── DuplicateSymbolError - label defined twice
    └── TranslationUnavailableError - requested translation not defined

The template engine itself never raises: unresolved markers are left in
the generated text. These exceptions come from table construction, the
statement front end and misuse of the instruction queries.

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class PseudoExpanderError(Exception):
    """
    Base exception for all expansion engine errors.

        try:
            expander.expand("la t0, buffer", pc=0x00400000)
        except PseudoExpanderError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in a pseudo-op table or statement listing.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Located Errors
# =============================================================================

class ExpanderError(PseudoExpanderError):
    """
    Base exception for errors that can point at a source location.

    Attributes:
        message: The error description
        location: Where the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The offending source text (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            ops.txt:12:1: error: table line has no example form
                <TAB>addi RG1, x0, VL2
                ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class TableFormatError(ExpanderError):
    """
    Malformed line in a pseudo-op table.

    Raised while building an instruction table from text, for lines that
    cannot be split into an example form and its translations:
        - line starts with a TAB (no example form)
        - more than one COMPACT separator on a line
    """
    pass


class UnknownMnemonicError(ExpanderError):
    """
    No pseudo-instruction is defined for a mnemonic.

    Similar mnemonics from the table are offered as a hint, which catches
    most typos ("lla" for "la", "bnz" for "bnez").
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar = similar or []

        hint = None
        if self.similar:
            suggestions = ", ".join(f"'{s}'" for s in self.similar[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown pseudo-instruction '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class OperandMismatchError(ExpanderError):
    """
    None of the definitions of a mnemonic accepts the given operands.

    The hint lists the example forms that are available, e.g.
    "li t1,-100" and "li t1,10000000".
    """

    def __init__(
        self,
        mnemonic: str,
        operands: list[str],
        examples: Optional[list[str]] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.operands = list(operands)
        self.examples = examples or []

        hint = None
        if self.examples:
            hint = "valid forms: " + "; ".join(self.examples)

        shown = ", ".join(self.operands) if self.operands else "no operands"
        super().__init__(
            f"'{mnemonic}' does not accept operands ({shown})",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndefinedSymbolError(ExpanderError):
    """Reference to a label that is not in the symbol table."""

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar = similar or []

        hint = None
        if self.similar:
            suggestions = ", ".join(f"'{s}'" for s in self.similar[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateSymbolError(ExpanderError):
    """Label defined more than once in the same symbol table."""

    def __init__(
        self,
        symbol: str,
        address: Optional[int] = None,
        location: Optional[SourceLocation] = None,
    ):
        self.symbol = symbol
        self.address = address

        hint = None
        if address is not None:
            hint = f"'{symbol}' is already defined at 0x{address & 0xFFFFFFFF:08x}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
        )


class TranslationUnavailableError(ExpanderError):
    """
    The requested translation is not defined for an instruction.

    Only raised on misuse: callers are expected to check
    has_compact_translation (or the default translation) before asking for
    an expansion.
    """

    def __init__(self, mnemonic: str, compact: bool = False):
        self.mnemonic = mnemonic
        self.compact = compact
        kind = "compact" if compact else "default"
        super().__init__(f"'{mnemonic}' has no {kind} translation")
