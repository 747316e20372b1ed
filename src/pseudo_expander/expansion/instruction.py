"""
Extended (Pseudo) Instruction Definitions
=========================================

An extended instruction has no machine encoding of its own. Its definition
binds an example of its use to one or two translation recipes:

- the **default** translation, always present for a usable instruction
- an optional **compact** translation, a shorter sequence valid when data
  addresses fit the reduced addressing range, for example ``la`` as a
  single ``addi`` instead of ``lui`` + ``addi``

Basic instructions are fixed width, so the size of an expansion is known
from the recipe alone: 4 bytes per template line. The code generator relies
on this during its first pass, before any operand is resolved.

Example
-------
>>> spec = ExtendedInstructionSpec.from_recipes(
...     "li t1,10000000",
...     "lui RG1, VH2\\naddi RG1, RG1, VL2",
...     description="Load Immediate : Set t1 to 32-bit immediate",
... )
>>> spec.mnemonic, spec.instruction_length()
('li', 8)
>>> result = spec.expand(tokens_from_values(["li", "t0", "0x12345678"]), ProgramContext())
>>> list(result)
['lui t0, 74565', 'addi t0, t0, 1656']
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from pseudo_expander.errors import TranslationUnavailableError
from pseudo_expander.expansion.recipes import build_translation_list
from pseudo_expander.expansion.statement import tokenize_statement
from pseudo_expander.expansion.templates import (
    OperandToken,
    ProgramContext,
    TemplateEngine,
    tokens_from_values,
)

logger = logging.getLogger(__name__)

# Every basic instruction is one 32-bit word
BASIC_INSTRUCTION_LENGTH = 4

_engine = TemplateEngine()


# =============================================================================
# Expansion Result
# =============================================================================

@dataclass(frozen=True)
class ExpansionResult:
    """
    Basic-instruction statements generated for one pseudo-instruction.

    Attributes:
        statements: Generated statements, in emission order
    """
    statements: tuple[str, ...]

    @property
    def length(self) -> int:
        """Size in bytes of the generated code."""
        return BASIC_INSTRUCTION_LENGTH * len(self.statements)

    def __iter__(self) -> Iterator[str]:
        return iter(self.statements)

    def __len__(self) -> int:
        return len(self.statements)


# =============================================================================
# Extended Instruction Specification
# =============================================================================

@dataclass(frozen=True)
class ExtendedInstructionSpec:
    """
    Immutable definition of one pseudo-instruction form.

    Several forms may share a mnemonic (``li`` with a 12-bit and with a
    32-bit immediate); the instruction table tells them apart by their
    example operands.

    Attributes:
        example: Example use, e.g. "la t1,label". Its first word is the
            mnemonic, the rest shows the operand shapes.
        translation: Default template lines, or None if not defined
        compact_translation: Compact template lines, or None
        description: Help text
    """
    example: str
    translation: Optional[tuple[str, ...]]
    compact_translation: Optional[tuple[str, ...]] = None
    description: str = ""

    @classmethod
    def from_recipes(
        cls,
        example: str,
        translation: Optional[str],
        compact_translation: Optional[str] = None,
        description: str = "",
    ) -> "ExtendedInstructionSpec":
        """Build a definition from newline-separated recipe strings."""
        spec = cls(
            example=example,
            translation=build_translation_list(translation),
            compact_translation=build_translation_list(compact_translation),
            description=description,
        )
        if spec.translation is None:
            logger.warning(f"Pseudo-instruction '{example}' has no translation")
        return spec

    @property
    def mnemonic(self) -> str:
        """Operator name, taken from the example."""
        words = self.example.split(None, 1)
        return words[0] if words else ""

    @property
    def operand_examples(self) -> tuple[str, ...]:
        """Operand tokens of the example, as the tokenizer splits them."""
        return tuple(tokenize_statement(self.example)[1:])

    @property
    def has_compact_translation(self) -> bool:
        """True if a compact translation was supplied."""
        return self.compact_translation is not None

    @property
    def compact_instruction_length(self) -> int:
        """Byte length of the compact expansion; 0 if there is none."""
        return self.instruction_length(compact=True)

    def instruction_length(self, compact: bool = False) -> int:
        """
        Byte length of the selected expansion.

        Returns 0 if that translation is not defined.
        """
        lines = self.template_list(compact)
        if not lines:
            return 0
        return BASIC_INSTRUCTION_LENGTH * len(lines)

    def template_list(self, compact: bool = False) -> Optional[tuple[str, ...]]:
        """Template lines of the selected translation, or None."""
        return self.compact_translation if compact else self.translation

    def expand(
        self,
        tokens: Sequence[OperandToken],
        context: ProgramContext,
        compact: bool = False,
    ) -> ExpansionResult:
        """
        Expand a statement into basic-instruction statements.

        Every template line is substituted against the same tokens and
        program counter, which is the address of the pseudo-instruction.

        Args:
            tokens: Statement tokens, mnemonic first, labels already
                resolved to addresses
            context: Program counter and symbol table
            compact: Use the compact translation

        Raises:
            TranslationUnavailableError: If the selected translation is not
                defined (check has_compact_translation first)
        """
        lines = self.template_list(compact)
        if lines is None:
            raise TranslationUnavailableError(self.mnemonic, compact)

        statements = tuple(_engine.substitute(line, tokens, context) for line in lines)
        logger.debug(
            f"Expanded '{' '.join(t.value for t in tokens)}' at 0x{context.pc & 0xFFFFFFFF:08x} "
            f"into {len(statements)} statement(s)"
        )
        return ExpansionResult(statements)

    def __str__(self) -> str:
        return self.example
