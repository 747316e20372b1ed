"""
Template Substitution Engine
============================

Each line of a translation recipe is a template for one basic instruction.
Templates embed placeholder markers that refer to the operands of the
pseudo-instruction statement being expanded. Operand positions count from 1
(position 0 is the mnemonic), and parentheses count as operands while
commas do not: in ``lw t1, 100(t2)`` the operands are ``t1``, ``100``,
``(``, ``t2`` and ``)``.

Marker Language
---------------
| Marker | Replaced by                                                  |
|--------|--------------------------------------------------------------|
| RGn    | text of operand n (register name or literal), unchanged      |
| LHn    | high 20 bits of operand n's value, sign-corrected            |
| LLn    | low 12 bits of operand n's value, sign-extended              |
| PCHn   | high 20 bits of (operand n - pc), sign-corrected             |
| PCLn   | low 12 bits of (operand n - pc), sign-extended               |
| VHn    | same as LHn, used where the operand is a constant            |
| VLn    | same as LLn, used where the operand is a constant            |
| LAB    | label text for the address held by the last operand          |

``n`` is a single digit, 1 to 9.

Substitution Rules
------------------
- Every occurrence of an ``RGn`` or numeric marker is replaced.
- Numeric markers need an operand that parses as an integer. When it does
  not, the markers of that operand are left in the output untouched; the
  operands are assumed to have been validated before expansion.
- Only the first ``LAB`` in a line is replaced. A statement carries at most
  one label reference, its last operand.
- If the label cannot be found the ``LAB`` marker is left in place.

Templates are parsed once into a tuple of literal text and Placeholder
items, and the substituted text is never scanned again. An operand or
label whose own text looks like a marker is therefore emitted as-is.

Example
-------
>>> from pseudo_expander.expansion.templates import (
...     OperandToken, ProgramContext, TemplateEngine)
>>> tokens = [OperandToken(v) for v in ("li", "t1", "0x12345FFF")]
>>> engine = TemplateEngine()
>>> engine.substitute("lui RG1, VH2", tokens, ProgramContext(pc=0))
'lui t1, 74566'
>>> engine.substitute("addi RG1, RG1, VL2", tokens, ProgramContext(pc=0))
'addi t1, t1, -1'
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable, Optional, Sequence, Union

from pseudo_expander.expansion.symbols import LabelResolver, SymbolTable
from pseudo_expander.expansion.values import parse_int, split_relative, split_value

logger = logging.getLogger(__name__)


# =============================================================================
# Engine Inputs
# =============================================================================

@dataclass(frozen=True)
class OperandToken:
    """
    One token of a tokenized pseudo-instruction statement.

    Attributes:
        value: Token text. Register name, integer literal, delimiter, or
            the decimal address a label operand was resolved to.
    """
    value: str

    def __str__(self) -> str:
        return self.value


def tokens_from_values(values: Iterable[str]) -> list[OperandToken]:
    """Wrap raw token texts (mnemonic first) as OperandTokens."""
    return [OperandToken(str(v)) for v in values]


@dataclass(frozen=True)
class ProgramContext:
    """
    Per-statement context for an expansion.

    Attributes:
        pc: Address of the pseudo-instruction statement being expanded
        symbols: Symbol table for label recovery (read-only during expansion)
    """
    pc: int = 0
    symbols: Optional[SymbolTable] = None


# =============================================================================
# Placeholder Parsing
# =============================================================================

class PlaceholderKind(Enum):
    """Placeholder families, valued by their marker prefix."""
    REGISTER = "RG"
    LABEL_HIGH = "LH"
    LABEL_LOW = "LL"
    PC_HIGH = "PCH"
    PC_LOW = "PCL"
    VALUE_HIGH = "VH"
    VALUE_LOW = "VL"
    LABEL = "LAB"


HIGH_KINDS = frozenset({
    PlaceholderKind.LABEL_HIGH,
    PlaceholderKind.PC_HIGH,
    PlaceholderKind.VALUE_HIGH,
})

PC_RELATIVE_KINDS = frozenset({
    PlaceholderKind.PC_HIGH,
    PlaceholderKind.PC_LOW,
})

NUMERIC_KINDS = frozenset({
    PlaceholderKind.LABEL_HIGH,
    PlaceholderKind.LABEL_LOW,
    PlaceholderKind.PC_HIGH,
    PlaceholderKind.PC_LOW,
    PlaceholderKind.VALUE_HIGH,
    PlaceholderKind.VALUE_LOW,
})


@dataclass(frozen=True)
class Placeholder:
    """
    A marker found in a template.

    Attributes:
        kind: Placeholder family
        position: Operand position (1-9); 0 for LAB
    """
    kind: PlaceholderKind
    position: int = 0

    @property
    def text(self) -> str:
        """The marker as written in the template."""
        if self.kind is PlaceholderKind.LABEL:
            return self.kind.value
        return f"{self.kind.value}{self.position}"


Segment = Union[str, Placeholder]

_MARKER_RE = re.compile(r"(?P<kind>RG|LH|LL|PCH|PCL|VH|VL)(?P<position>[1-9])|LAB")


@lru_cache(maxsize=1024)
def parse_template(template: str) -> tuple[Segment, ...]:
    """
    Split a template line into literal text and placeholders.

    >>> [s if isinstance(s, str) else s.text for s in parse_template("addi RG1, RG1, VL2")]
    ['addi ', 'RG1', ', ', 'RG1', ', ', 'VL2']
    """
    segments: list[Segment] = []
    last = 0
    for match in _MARKER_RE.finditer(template):
        if match.start() > last:
            segments.append(template[last:match.start()])
        kind = match.group("kind")
        if kind is None:
            segments.append(Placeholder(PlaceholderKind.LABEL))
        else:
            segments.append(Placeholder(PlaceholderKind(kind), int(match.group("position"))))
        last = match.end()
    if last < len(template):
        segments.append(template[last:])
    return tuple(segments)


# =============================================================================
# Substitution
# =============================================================================

class TemplateEngine:
    """
    Produces basic-instruction statements from template lines.

    The engine holds no per-statement state and can be shared between
    threads, provided the symbol tables it is given are not being modified.
    """

    def __init__(self, resolver: Optional[LabelResolver] = None):
        self._resolver = resolver or LabelResolver()

    def substitute(
        self,
        template: str,
        tokens: Sequence[OperandToken],
        context: ProgramContext,
    ) -> str:
        """
        Fill in one template line.

        Args:
            template: Template line from a translation recipe
            tokens: Statement tokens, mnemonic at index 0
            context: Program counter and symbol table for this statement

        Returns:
            The basic-instruction statement text
        """
        values: dict[int, Optional[int]] = {}
        label_done = False
        parts: list[str] = []

        for segment in parse_template(template):
            if isinstance(segment, str):
                parts.append(segment)
            elif segment.kind is PlaceholderKind.LABEL:
                if label_done:
                    parts.append(segment.text)
                    continue
                label_done = True
                parts.append(self._render_label(segment, tokens, context))
            else:
                parts.append(self._render_operand(segment, tokens, values, context.pc))

        return "".join(parts)

    def _render_operand(
        self,
        placeholder: Placeholder,
        tokens: Sequence[OperandToken],
        values: dict[int, Optional[int]],
        pc: int,
    ) -> str:
        """Text for an RGn or numeric placeholder, or the marker itself."""
        position = placeholder.position
        if position >= len(tokens):
            return placeholder.text

        text = tokens[position].value
        if placeholder.kind is PlaceholderKind.REGISTER:
            return text

        if position not in values:
            try:
                values[position] = parse_int(text)
            except ValueError:
                values[position] = None
        value = values[position]
        if value is None:
            logger.debug(
                f"Operand {position} ({text!r}) is not numeric; "
                f"leaving {placeholder.text} unsubstituted"
            )
            return placeholder.text

        if placeholder.kind in PC_RELATIVE_KINDS:
            split = split_relative(value, pc)
        else:
            split = split_value(value)
        return str(split.high if placeholder.kind in HIGH_KINDS else split.low)

    def _render_label(
        self,
        placeholder: Placeholder,
        tokens: Sequence[OperandToken],
        context: ProgramContext,
    ) -> str:
        """Label text for the last operand, or the marker itself."""
        if len(tokens) < 2:
            return placeholder.text
        name = self._resolver.resolve(tokens[-1].value, context.symbols)
        return placeholder.text if name is None else name


_default_engine = TemplateEngine()


def make_template_substitutions(
    template: str,
    tokens: Sequence[OperandToken],
    pc: int = 0,
    symbols: Optional[SymbolTable] = None,
) -> str:
    """Substitute one template line using a shared TemplateEngine."""
    return _default_engine.substitute(template, tokens, ProgramContext(pc, symbols))
