"""
Pseudo-Instruction Expansion
============================

This package turns pseudo-instruction statements into the basic-instruction
statements an encoder can assemble.

Main Components
---------------
- **values**: High/low splitting of 32-bit values (absolute and PC-relative)
- **symbols**: Symbol tables and LabelResolver (address -> label text)
- **recipes**: Splitting recipe text into ordered template lines
- **templates**: Placeholder parsing and the TemplateEngine
- **instruction**: ExtendedInstructionSpec and ExpansionResult
- **table**: InstructionTable (built-in and file-based pseudo-op tables)
- **statement**: Statement tokenizing and label operand resolution
- **expander**: The Expander facade

Expansion Process
-----------------
1. **Table build** (once): each definition's recipes are split into
   template lines and stored in an immutable ExtendedInstructionSpec.

2. **Form selection**: the statement is tokenized and the first table form
   whose example operands accept the statement is chosen.

3. **Substitution**: label operands are replaced by their addresses, then
   every template line is filled in from the operands, the statement's
   address and the symbol table.

Example Usage
-------------
>>> from pseudo_expander.expansion import Expander
>>> list(Expander().expand("li a0, 0x800", pc=0))
['lui a0, 1', 'addi a0, a0, -2048']
"""

from pseudo_expander.expansion.expander import ExpandedStatement, Expander, split_labels
from pseudo_expander.expansion.instruction import (
    BASIC_INSTRUCTION_LENGTH,
    ExpansionResult,
    ExtendedInstructionSpec,
)
from pseudo_expander.expansion.pseudo_ops import DEFAULT_PSEUDO_OPS
from pseudo_expander.expansion.recipes import build_translation_list
from pseudo_expander.expansion.statement import (
    OperandKind,
    operand_kind,
    resolve_operands,
    tokenize_statement,
)
from pseudo_expander.expansion.symbols import LabelResolver, Symbol, SymbolTable
from pseudo_expander.expansion.table import InstructionTable
from pseudo_expander.expansion.templates import (
    OperandToken,
    Placeholder,
    PlaceholderKind,
    ProgramContext,
    TemplateEngine,
    make_template_substitutions,
    parse_template,
    tokens_from_values,
)
from pseudo_expander.expansion.values import (
    SplitValue,
    high_part,
    low_part,
    parse_int,
    split_relative,
    split_value,
    to_int32,
)

__all__ = [
    # Facade
    "Expander",
    "ExpandedStatement",
    "split_labels",
    # Instruction definitions
    "ExtendedInstructionSpec",
    "ExpansionResult",
    "BASIC_INSTRUCTION_LENGTH",
    "InstructionTable",
    "DEFAULT_PSEUDO_OPS",
    "build_translation_list",
    # Templates
    "TemplateEngine",
    "OperandToken",
    "ProgramContext",
    "Placeholder",
    "PlaceholderKind",
    "parse_template",
    "make_template_substitutions",
    "tokens_from_values",
    # Symbols
    "Symbol",
    "SymbolTable",
    "LabelResolver",
    # Statements
    "OperandKind",
    "operand_kind",
    "tokenize_statement",
    "resolve_operands",
    # Values
    "SplitValue",
    "high_part",
    "low_part",
    "split_value",
    "split_relative",
    "parse_int",
    "to_int32",
]
