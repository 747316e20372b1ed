"""
Expander Facade
===============

High-level interface tying the pieces together: statement tokenizing,
form selection in the instruction table, label resolution and template
substitution.

Single statements:

>>> from pseudo_expander.expansion import Expander, SymbolTable
>>> symbols = SymbolTable.from_mapping({"buffer": 0x10010000})
>>> list(Expander().expand("la t0, buffer", pc=0x00400000, symbols=symbols))
['auipc t0, 64528', 'addi t0, t0, 0']

Listings, where each statement's address follows from the expanded size
of the statements before it and ``name:`` labels are defined on the way:

>>> for item in Expander().expand_lines(["loop: addi t0, t0, -1", "bnez t0, loop"]):
...     print(f"{item.address:08x}  {' / '.join(item.result)}")
00400000  addi t0, t0, -1
00400004  bne t0, x0, loop
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from pseudo_expander.config import ExpanderConfig
from pseudo_expander.errors import OperandMismatchError, UnknownMnemonicError
from pseudo_expander.expansion.instruction import (
    BASIC_INSTRUCTION_LENGTH,
    ExpansionResult,
    ExtendedInstructionSpec,
)
from pseudo_expander.expansion.statement import resolve_operands, tokenize_statement
from pseudo_expander.expansion.symbols import SymbolTable
from pseudo_expander.expansion.table import InstructionTable
from pseudo_expander.expansion.templates import ProgramContext

logger = logging.getLogger(__name__)

_LABEL_DEF_RE = re.compile(r"^\s*([A-Za-z_.$][\w.$]*)\s*:")


@dataclass(frozen=True)
class ExpandedStatement:
    """
    One source statement of a listing and what it expanded to.

    Attributes:
        address: Address of the statement
        source: Statement text without labels and comments
        result: Generated basic-instruction statements
        pseudo: False if the statement was passed through unchanged
    """
    address: int
    source: str
    result: ExpansionResult
    pseudo: bool = True


def split_labels(line: str) -> tuple[list[str], str]:
    """Separate leading ``name:`` label definitions from a source line."""
    labels = []
    while match := _LABEL_DEF_RE.match(line):
        labels.append(match.group(1))
        line = line[match.end():]
    return labels, line


class Expander:
    """
    Expands pseudo-instruction statements using an instruction table.

    Args:
        table: Instruction table; defaults to the table named by
            config.table_path, or the built-in RV32I table
        config: Expansion settings (compact preference, text base)
    """

    def __init__(
        self,
        table: Optional[InstructionTable] = None,
        config: Optional[ExpanderConfig] = None,
    ):
        self.config = config or ExpanderConfig()
        if table is None:
            if self.config.table_path is not None:
                table = InstructionTable.from_file(self.config.table_path)
            else:
                table = InstructionTable.default()
        self.table = table

    def expand(
        self,
        statement: str,
        pc: int,
        symbols: Optional[SymbolTable] = None,
        compact: Optional[bool] = None,
    ) -> ExpansionResult:
        """
        Expand one pseudo-instruction statement.

        Args:
            statement: Statement text, e.g. "li t0, 0x12345678"
            pc: Address of the statement
            symbols: Labels referenced by the statement
            compact: Prefer the compact translation; None uses the config

        Raises:
            UnknownMnemonicError: If the mnemonic is not a pseudo-instruction
            OperandMismatchError: If no form accepts the operands
            UndefinedSymbolError: If a label operand is not defined
        """
        words = tokenize_statement(statement)
        if not words:
            return ExpansionResult(())
        spec = self.table.match(words[0], words[1:])
        return self._expand_form(spec, words, pc, symbols, compact)

    def expand_lines(
        self,
        lines: Iterable[str],
        pc: Optional[int] = None,
        symbols: Optional[SymbolTable] = None,
        compact: Optional[bool] = None,
    ) -> list[ExpandedStatement]:
        """
        Expand a listing of statements.

        The first pass assigns addresses and defines ``name:`` labels in a
        table local to the listing (with ``symbols`` as its parent), so
        forward references resolve. Statements that no table form accepts
        are taken to be basic instructions and passed through unchanged.

        Args:
            lines: Source lines
            pc: Address of the first statement; None uses config.text_base
            symbols: Labels defined outside the listing
            compact: Prefer compact translations; None uses the config
        """
        address = self.config.text_base if pc is None else pc
        local = SymbolTable("<listing>", parent=symbols)
        plan = []

        for line in lines:
            labels, code = split_labels(line)
            for name in labels:
                local.add_symbol(name, address)
            words = tokenize_statement(code)
            if not words:
                continue
            spec = self._find_form(words)
            plan.append((address, " ".join(code.split("#", 1)[0].split()), words, spec))
            if spec is None:
                address += BASIC_INSTRUCTION_LENGTH
            else:
                address += spec.instruction_length(self._use_compact(spec, compact))

        expanded = []
        for address, source, words, spec in plan:
            if spec is None:
                expanded.append(
                    ExpandedStatement(address, source, ExpansionResult((source,)), pseudo=False)
                )
                continue
            result = self._expand_form(spec, words, address, local, compact)
            expanded.append(ExpandedStatement(address, source, result))
        return expanded

    def _find_form(self, words: list[str]) -> Optional[ExtendedInstructionSpec]:
        try:
            return self.table.match(words[0], words[1:])
        except (UnknownMnemonicError, OperandMismatchError):
            logger.debug(f"Passing '{' '.join(words)}' through as a basic instruction")
            return None

    def _use_compact(self, spec: ExtendedInstructionSpec, compact: Optional[bool]) -> bool:
        wanted = self.config.compact if compact is None else compact
        return wanted and spec.has_compact_translation

    def _expand_form(
        self,
        spec: ExtendedInstructionSpec,
        words: list[str],
        pc: int,
        symbols: Optional[SymbolTable],
        compact: Optional[bool],
    ) -> ExpansionResult:
        tokens = resolve_operands(words, symbols)
        context = ProgramContext(pc=pc, symbols=symbols)
        return spec.expand(tokens, context, compact=self._use_compact(spec, compact))
