"""
Symbol Table and Label Resolution
=================================

Branch and jump pseudo-instructions name their target with a label, but by
the time a statement reaches the expansion engine the label operand has
already been rewritten to its numeric address. A template such as

    beq RG1, x0, LAB

needs the label text back, so that the generated statement can be parsed
again by the basic-instruction assembler. LabelResolver performs that
reverse lookup.

Symbol tables are two-level: a file-local table whose parent is the
global table. Reverse lookups try the local table first. When several
labels share an address the one defined first wins.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Union

from pseudo_expander.errors import DuplicateSymbolError
from pseudo_expander.expansion.values import parse_int, to_int32

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Symbol:
    """A label and the address it was defined at."""
    name: str
    address: int


class SymbolTable:
    """
    Label table with an optional parent (global) table.

    The expansion engine only reads from a symbol table. It must not be
    modified while an expansion that uses it is running.

    Example:
        >>> globals_ = SymbolTable.from_mapping({"main": 0x00400000})
        >>> local = SymbolTable("prog.s", parent=globals_)
        >>> _ = local.add_symbol("loop", 0x00400010)
        >>> local.get_symbol_given_address_local_or_global(0x00400000).name
        'main'
    """

    def __init__(self, name: str = "(global)", parent: Optional["SymbolTable"] = None):
        self.name = name
        self.parent = parent
        self._symbols: dict[str, Symbol] = {}

    @classmethod
    def from_mapping(cls, symbols: Mapping[str, int], name: str = "(global)") -> "SymbolTable":
        """Build a table from a name -> address mapping."""
        table = cls(name)
        for label, address in symbols.items():
            table.add_symbol(label, address)
        return table

    def add_symbol(self, name: str, address: int) -> Symbol:
        """
        Define a label.

        Raises:
            DuplicateSymbolError: If the label is already defined in this table
        """
        existing = self._symbols.get(name)
        if existing is not None:
            raise DuplicateSymbolError(name, existing.address)
        symbol = Symbol(name, to_int32(address))
        self._symbols[name] = symbol
        return symbol

    def get_address(self, name: str) -> Optional[int]:
        """Address of a label, searching the parent table if needed."""
        symbol = self._symbols.get(name)
        if symbol is not None:
            return symbol.address
        if self.parent is not None:
            return self.parent.get_address(name)
        return None

    def get_symbol_given_address(self, address: Union[int, str]) -> Optional[Symbol]:
        """
        First label defined at an address, in this table only.

        The address may be given as text, as it is held by an operand token.
        Text that is not an integer yields None.
        """
        if isinstance(address, str):
            try:
                address = parse_int(address)
            except ValueError:
                return None
        address = to_int32(address)
        for symbol in self._symbols.values():
            if symbol.address == address:
                return symbol
        return None

    def get_symbol_given_address_local_or_global(
        self, address: Union[int, str]
    ) -> Optional[Symbol]:
        """Reverse lookup in this table, then in the parent chain."""
        symbol = self.get_symbol_given_address(address)
        if symbol is None and self.parent is not None:
            return self.parent.get_symbol_given_address_local_or_global(address)
        return symbol

    def names(self) -> list[str]:
        """Every label visible from this table, local ones first."""
        names = list(self._symbols)
        if self.parent is not None:
            names.extend(n for n in self.parent.names() if n not in self._symbols)
        return names

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get_address(name) is not None

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"SymbolTable({self.name!r}, {len(self)} symbols)"


class LabelResolver:
    """Recovers label text from an address held in an operand token."""

    def resolve(self, value: str, symbols: Optional[SymbolTable]) -> Optional[str]:
        """
        Label defined at the address ``value``.

        Args:
            value: Text of the final operand token (a numeric address)
            symbols: Table to search; None means nothing can be resolved

        Returns:
            The label name, or None if no label is defined at that address
        """
        if symbols is None:
            logger.debug(f"No symbol table to resolve address {value!r}")
            return None
        symbol = symbols.get_symbol_given_address_local_or_global(value)
        if symbol is None:
            logger.debug(f"No label found at address {value!r}")
            return None
        return symbol.name
