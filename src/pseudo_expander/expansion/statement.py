"""
Statement Front End
===================

A minimal tokenizer for pseudo-instruction statements, used by the
Expander facade and the psexpand command. It produces the token list the
expansion engine expects:

- the mnemonic is token 0
- operands are split on commas and whitespace
- parentheses are separate tokens (they count as operand positions)
- ``#`` starts a comment

>>> tokenize_statement("lw t1, -100(t2)   # load")
['lw', 't1', '-100', '(', 't2', ')']

Label operands are rewritten to their decimal address by
``resolve_operands``, which is what the template engine expects to find
in the last operand of branch and jump forms.
"""

import re
from enum import Enum, auto
from typing import Iterable, Optional, Sequence

from pseudo_expander.errors import UndefinedSymbolError
from pseudo_expander.expansion.symbols import SymbolTable
from pseudo_expander.expansion.templates import OperandToken
from pseudo_expander.expansion.values import parse_int


_OPERAND_RE = re.compile(r"[()]|[^\s,()]+")

_REGISTER_RE = re.compile(
    r"^(?:x(?:[0-9]|[12][0-9]|3[01])"
    r"|zero|ra|sp|gp|tp|fp"
    r"|t[0-6]|s(?:[0-9]|1[01])|a[0-7]"
    r"|\$\w+)$"
)

DELIMITERS = frozenset({"(", ")"})


class OperandKind(Enum):
    """Shape of an operand, used to pick between definitions of a mnemonic."""
    REGISTER = auto()
    IMMEDIATE = auto()
    LABEL = auto()
    DELIMITER = auto()


def operand_kind(text: str) -> OperandKind:
    """Classify an operand token by its text."""
    if text in DELIMITERS:
        return OperandKind.DELIMITER
    if _REGISTER_RE.match(text):
        return OperandKind.REGISTER
    try:
        parse_int(text)
    except ValueError:
        return OperandKind.LABEL
    return OperandKind.IMMEDIATE


def tokenize_statement(text: str) -> list[str]:
    """
    Split a statement into its mnemonic and operand tokens.

    Returns an empty list for blank or comment-only lines.
    """
    code = text.split("#", 1)[0].strip()
    if not code:
        return []
    parts = code.split(None, 1)
    words = [parts[0]]
    if len(parts) > 1:
        words.extend(_OPERAND_RE.findall(parts[1]))
    return words


def resolve_operands(
    words: Sequence[str],
    symbols: Optional[SymbolTable] = None,
) -> list[OperandToken]:
    """
    Build operand tokens, replacing label operands with their address.

    Args:
        words: Output of tokenize_statement
        symbols: Table used to look up labels

    Raises:
        UndefinedSymbolError: If a label operand is not defined
    """
    tokens = []
    for index, word in enumerate(words):
        if index == 0 or operand_kind(word) is not OperandKind.LABEL:
            tokens.append(OperandToken(word))
            continue
        address = symbols.get_address(word) if symbols is not None else None
        if address is None:
            known = symbols.names() if symbols is not None else []
            raise UndefinedSymbolError(word, similar=find_similar(word, known))
        tokens.append(OperandToken(str(address)))
    return tokens


# =============================================================================
# Suggestions
# =============================================================================

def find_similar(name: str, candidates: Iterable[str]) -> list[str]:
    """
    Candidates that look like a typo of ``name``.

    Uses a simple edit distance heuristic; at most 3 suggestions.
    """
    name_lower = name.lower()
    similar = []

    for candidate in candidates:
        candidate_lower = candidate.lower()
        if (
            candidate_lower == name_lower or
            abs(len(candidate) - len(name)) <= 1 and
            edit_distance(name_lower, candidate_lower) <= 2
        ):
            if candidate not in similar:
                similar.append(candidate)

    return similar[:3]


def edit_distance(s1: str, s2: str) -> int:
    """Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min((
                    distances[j],
                    distances[j + 1],
                    new_distances[-1]
                )))
        distances = new_distances

    return distances[-1]
