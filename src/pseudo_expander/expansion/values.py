"""
Immediate Value Splitting
=========================

A 32-bit constant or address cannot be encoded in a single RV32I
instruction. Pseudo-instructions such as ``li`` and ``la`` therefore load it
in two steps: an upper-immediate instruction (``lui`` or ``auipc``) carrying
the high 20 bits, followed by an instruction with a 12-bit immediate
(``addi``, ``lw``, ``jalr``...) carrying the low 12 bits.

The low field is sign-extended by the second instruction. Whenever bit 11
of the value is set the low field is negative, so the high field is
pre-incremented by one to compensate:

    low(v)  = (v << 20) >> 20            ; low 12 bits, sign-extended
    high(v) = (v >> 12) + bit11(v)       ; arithmetic shift, then correction

which keeps ``high(v) * 4096 + low(v) == v`` for every 32-bit value.

Worked examples
---------------
| value        | high    | low    |
|--------------|---------|--------|
| 0            | 0       | 0      |
| 0x7FF        | 0       | 2047   |
| 0x800        | 1       | -2048  |
| -1           | 0       | -1     |
| 0x12345FFF   | 0x12346 | -1     |

The PC-relative variant applies the same arithmetic to ``value - pc``;
it backs the ``auipc`` based sequences used for position-independent
address loads.

Operand tokens reach this module as text. ``parse_int`` accepts the
assembler's integer syntax: decimal, ``0x`` hexadecimal and ``0b`` binary,
with an optional sign. Hexadecimal and binary literals of up to 32 bits
are read as two's complement words, so ``0xFFFFFFFF`` is -1.
"""

from dataclasses import dataclass


# =============================================================================
# Constants
# =============================================================================

WORD_BITS = 32
WORD_MASK = 0xFFFFFFFF
SIGN_BIT = 0x80000000

LOW_FIELD_BITS = 12
LOW_FIELD_SIGN = 1 << (LOW_FIELD_BITS - 1)   # bit 11
LOW_FIELD_MASK = (1 << LOW_FIELD_BITS) - 1

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1

_DECIMAL_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_BINARY_DIGITS = frozenset("01")


# =============================================================================
# 32-bit Arithmetic Helpers
# =============================================================================

def to_int32(value: int) -> int:
    """Wrap an integer to a signed 32-bit word (two's complement)."""
    value &= WORD_MASK
    return value - (1 << WORD_BITS) if value & SIGN_BIT else value


def parse_int(text: str) -> int:
    """
    Parse an operand token as a signed 32-bit integer.

    Args:
        text: Token text such as "42", "-100", "0x10010000" or "0b1010"

    Returns:
        The value as a signed 32-bit integer

    Raises:
        ValueError: If the text is not an integer literal, or a decimal
            literal does not fit in 32 bits
    """
    s = text.strip()
    negative = s.startswith("-")
    if s[:1] in ("+", "-"):
        s = s[1:]

    prefix = s[:2].lower()
    if prefix == "0x":
        digits, base, allowed = s[2:], 16, _HEX_DIGITS
    elif prefix == "0b":
        digits, base, allowed = s[2:], 2, _BINARY_DIGITS
    else:
        digits, base, allowed = s, 10, _DECIMAL_DIGITS

    # int() would also accept underscores and inner whitespace
    if not digits or not set(digits) <= allowed:
        raise ValueError(f"invalid integer literal: {text!r}")

    magnitude = int(digits, base)

    if base == 10:
        value = -magnitude if negative else magnitude
        if value < INT32_MIN or value > INT32_MAX:
            raise ValueError(f"integer literal out of 32-bit range: {text!r}")
        return value

    if magnitude > WORD_MASK:
        raise ValueError(f"integer literal wider than 32 bits: {text!r}")
    value = to_int32(magnitude)
    return to_int32(-value) if negative else value


# =============================================================================
# High/Low Split
# =============================================================================

@dataclass(frozen=True)
class SplitValue:
    """
    The two immediate fields of a 32-bit value.

    Attributes:
        high: Upper 20-bit field, sign-corrected (operand of lui/auipc)
        low: Lower 12-bit field, sign-extended (operand of addi, lw, jalr...)
    """
    high: int
    low: int

    def recombine(self) -> int:
        """Value the two-instruction sequence materialises."""
        return self.high * (1 << LOW_FIELD_BITS) + self.low


def low_part(value: int) -> int:
    """Low 12 bits of a 32-bit value, sign-extended: ``(v << 20) >> 20``."""
    low = to_int32(value) & LOW_FIELD_MASK
    return (low ^ LOW_FIELD_SIGN) - LOW_FIELD_SIGN


def high_part(value: int) -> int:
    """
    High 20 bits of a 32-bit value, corrected for the signed low field.

    The correction is the value of bit 11 itself, not a magnitude test:
    0x800 splits as high=1, low=-2048.
    """
    word = to_int32(value)
    correction = 1 if word & LOW_FIELD_SIGN else 0
    return (word >> LOW_FIELD_BITS) + correction


def split_value(value: int) -> SplitValue:
    """Split an absolute value into its high and low fields."""
    return SplitValue(high=high_part(value), low=low_part(value))


def split_relative(value: int, pc: int) -> SplitValue:
    """
    Split ``value - pc`` into high and low fields.

    The difference is wrapped to 32 bits before splitting, matching the
    arithmetic of the target machine.
    """
    return split_value(to_int32(value - pc))
