"""
Pseudo-Instruction Table
========================

The instruction table is built once, before assembly starts, and is only
read afterwards. It holds every ExtendedInstructionSpec indexed by
mnemonic; a mnemonic may have several forms that differ in operand shapes.

Table File Format
-----------------
External tables use the pseudo-op file format of the MARS and RARS
simulators: one definition per line, fields separated by TAB characters.

    <example> TAB <template> [TAB <template>...] [TAB COMPACT TAB <template>...] [TAB #<description>]

- Lines that are empty, or start with ``#`` or a space, are ignored.
- ``COMPACT`` separates the default templates from the compact ones.
- A field starting with ``#`` is the description and ends the line.

For example (TABs shown as ``→``):

    la t1,label→auipc RG1, PCH2→addi RG1, RG1, PCL2→COMPACT→addi RG1, x0, LL2→#Load Address

Form Selection
--------------
``match`` returns the first form, in table order, whose example operands
accept the statement's operands:

| Example operand | Accepts                                                    |
|-----------------|------------------------------------------------------------|
| ``(`` / ``)``   | the same delimiter                                         |
| register        | a register name                                            |
| immediate       | an integer; only a 12-bit signed one if the example is one |
| label           | a label or an integer address                              |
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence, Union

from pseudo_expander.errors import (
    OperandMismatchError,
    SourceLocation,
    TableFormatError,
    UnknownMnemonicError,
)
from pseudo_expander.expansion.instruction import ExtendedInstructionSpec
from pseudo_expander.expansion.pseudo_ops import DEFAULT_PSEUDO_OPS, PseudoOpDefinition
from pseudo_expander.expansion.statement import OperandKind, find_similar, operand_kind
from pseudo_expander.expansion.values import LOW_FIELD_SIGN, parse_int

logger = logging.getLogger(__name__)

COMPACT_SEPARATOR = "COMPACT"
DESCRIPTION_PREFIX = "#"


def _fits_low_field(value: int) -> bool:
    return -LOW_FIELD_SIGN <= value < LOW_FIELD_SIGN


def operand_accepts(example: str, operand: str) -> bool:
    """True if a statement operand fits the shape of an example operand."""
    example_kind = operand_kind(example)
    kind = operand_kind(operand)

    if example_kind is OperandKind.DELIMITER:
        return operand == example
    if example_kind is OperandKind.REGISTER:
        return kind is OperandKind.REGISTER
    if example_kind is OperandKind.IMMEDIATE:
        if kind is not OperandKind.IMMEDIATE:
            return False
        if _fits_low_field(parse_int(example)):
            return _fits_low_field(parse_int(operand))
        return True
    return kind in (OperandKind.LABEL, OperandKind.IMMEDIATE)


class InstructionTable:
    """
    Read-only collection of pseudo-instruction definitions.

    Example:
        >>> table = InstructionTable.default()
        >>> spec = table.match("li", ["t0", "5000"])
        >>> spec.example
        'li t1,10000000'
    """

    def __init__(self, specs: Iterable[ExtendedInstructionSpec] = ()):
        self._specs: tuple[ExtendedInstructionSpec, ...] = tuple(specs)
        index: dict[str, list[ExtendedInstructionSpec]] = {}
        for spec in self._specs:
            index.setdefault(spec.mnemonic.lower(), []).append(spec)
        self._by_mnemonic: dict[str, tuple[ExtendedInstructionSpec, ...]] = {
            name: tuple(specs) for name, specs in index.items()
        }

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_definitions(cls, definitions: Iterable[PseudoOpDefinition]) -> "InstructionTable":
        """Build a table from (example, translation, compact, description) tuples."""
        return cls(
            ExtendedInstructionSpec.from_recipes(example, translation, compact, description)
            for example, translation, compact, description in definitions
        )

    @classmethod
    def from_text(cls, text: str, filename: str = "<input>") -> "InstructionTable":
        """
        Build a table from pseudo-op file text.

        Raises:
            TableFormatError: If a line has no example form or more than one
                COMPACT separator
        """
        specs = []
        for line_number, line in enumerate(text.splitlines(), start=1):
            if not line or line.startswith(DESCRIPTION_PREFIX) or line.startswith(" "):
                continue
            specs.append(_parse_table_line(line, SourceLocation(filename, line_number, 1)))
        logger.debug(f"Loaded {len(specs)} pseudo-instruction(s) from {filename}")
        return cls(specs)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InstructionTable":
        """Build a table from a pseudo-op file."""
        path = Path(path)
        return cls.from_text(path.read_text(encoding="utf-8"), filename=str(path))

    @classmethod
    def default(cls) -> "InstructionTable":
        """The built-in RV32I pseudo-instruction table (shared instance)."""
        return _default_table()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, mnemonic: str) -> tuple[ExtendedInstructionSpec, ...]:
        """All forms of a mnemonic; empty if it is not a pseudo-instruction."""
        return self._by_mnemonic.get(mnemonic.lower(), ())

    def lookup(self, mnemonic: str) -> tuple[ExtendedInstructionSpec, ...]:
        """
        All forms of a mnemonic.

        Raises:
            UnknownMnemonicError: If no form is defined
        """
        specs = self.get(mnemonic)
        if not specs:
            raise UnknownMnemonicError(
                mnemonic, similar=find_similar(mnemonic.lower(), self._by_mnemonic)
            )
        return specs

    def match(self, mnemonic: str, operands: Sequence[str]) -> ExtendedInstructionSpec:
        """
        The first form of a mnemonic that accepts the given operands.

        Args:
            mnemonic: Statement mnemonic
            operands: Operand tokens as written (labels not yet resolved)

        Raises:
            UnknownMnemonicError: If the mnemonic is not defined
            OperandMismatchError: If no form accepts the operands
        """
        specs = self.lookup(mnemonic)
        for spec in specs:
            examples = spec.operand_examples
            if len(examples) != len(operands):
                continue
            if all(operand_accepts(e, o) for e, o in zip(examples, operands)):
                return spec
        raise OperandMismatchError(
            mnemonic, list(operands), examples=[spec.example for spec in specs]
        )

    def mnemonics(self) -> list[str]:
        """Defined mnemonics, in table order."""
        return list(self._by_mnemonic)

    def __contains__(self, mnemonic: object) -> bool:
        return isinstance(mnemonic, str) and mnemonic.lower() in self._by_mnemonic

    def __iter__(self) -> Iterator[ExtendedInstructionSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        return f"InstructionTable({len(self._specs)} forms, {len(self._by_mnemonic)} mnemonics)"


def _parse_table_line(line: str, location: SourceLocation) -> ExtendedInstructionSpec:
    """Parse one non-comment line of a pseudo-op file."""
    if line.startswith("\t"):
        raise TableFormatError(
            "table line has no example form",
            location=location,
            source_line=line,
        )

    fields = [field for field in line.split("\t") if field]
    example = fields[0]
    templates: list[str] = []
    default_templates: Optional[list[str]] = None
    description = ""

    for field in fields[1:]:
        if field.startswith(DESCRIPTION_PREFIX):
            description = field[len(DESCRIPTION_PREFIX):]
            break
        if field.startswith(COMPACT_SEPARATOR):
            if default_templates is not None:
                column = line.rindex(COMPACT_SEPARATOR) + 1
                raise TableFormatError(
                    f"more than one {COMPACT_SEPARATOR} section for '{example}'",
                    location=SourceLocation(location.filename, location.line, column),
                    source_line=line,
                )
            default_templates = templates
            templates = []
            continue
        templates.append(field)

    if default_templates is None:
        return ExtendedInstructionSpec.from_recipes(example, "\n".join(templates), None, description)
    return ExtendedInstructionSpec.from_recipes(
        example, "\n".join(default_templates), "\n".join(templates), description
    )


@lru_cache(maxsize=None)
def _default_table() -> InstructionTable:
    return InstructionTable.from_definitions(DEFAULT_PSEUDO_OPS)
