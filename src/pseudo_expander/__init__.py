"""
Pseudo Expander - Pseudo-Instruction Expansion for RISC-V Assemblers
====================================================================

This package expands assembler pseudo-instructions (``li``, ``la``,
``call``, ``bgt``...) into the basic instructions an encoder can process.
Each pseudo-instruction is described by a recipe of template lines with
placeholder markers; expansion fills them in from the statement's operands,
its address and the symbol table.

Main Components
---------------
- **expansion**: the expansion engine
    Value splitting, template substitution, instruction definitions and
    the pseudo-instruction table

- **cli**: command-line tools (psexpand)
    Expands statements or whole listings from the terminal

Quick Start
-----------
Expand a statement:
    >>> from pseudo_expander import Expander, SymbolTable
    >>> symbols = SymbolTable.from_mapping({"main": 0x00400100})
    >>> list(Expander().expand("call main", pc=0x00400000, symbols=symbols))
    ['auipc x1, 0', 'jalr x1, x1, 256']

Or use the command-line tool:
    $ psexpand "li t0, 0x12345678"
    $ psexpand -S buffer=0x10010000 "la a0, buffer"
    $ psexpand -i program.s --pc 0x00400000

Recipe Markers
--------------
RGn, LHn, LLn, PCHn, PCLn, VHn, VLn (n = operand position) and LAB; see
pseudo_expander.expansion.templates for their meaning.
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from pseudo_expander.config import ExpanderConfig
from pseudo_expander.errors import (
    PseudoExpanderError,
    ExpanderError,
    SourceLocation,
    TableFormatError,
    UnknownMnemonicError,
    OperandMismatchError,
    UndefinedSymbolError,
    DuplicateSymbolError,
    TranslationUnavailableError,
)
from pseudo_expander.expansion import (
    Expander,
    ExpandedStatement,
    ExpansionResult,
    ExtendedInstructionSpec,
    InstructionTable,
    LabelResolver,
    OperandToken,
    ProgramContext,
    Symbol,
    SymbolTable,
    TemplateEngine,
    SplitValue,
    split_value,
    split_relative,
    build_translation_list,
)

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "ExpanderConfig",
    # Engine
    "Expander",
    "ExpandedStatement",
    "ExpansionResult",
    "ExtendedInstructionSpec",
    "InstructionTable",
    "LabelResolver",
    "OperandToken",
    "ProgramContext",
    "Symbol",
    "SymbolTable",
    "TemplateEngine",
    "SplitValue",
    "split_value",
    "split_relative",
    "build_translation_list",
    # Exception hierarchy
    "PseudoExpanderError",
    "ExpanderError",
    "SourceLocation",
    "TableFormatError",
    "UnknownMnemonicError",
    "OperandMismatchError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "TranslationUnavailableError",
]
