# =============================================================================
# test_symbols.py - Symbol Table Unit Tests
# =============================================================================
# Tests for the two-level symbol table and the LabelResolver.
# =============================================================================

import pytest

from pseudo_expander.errors import DuplicateSymbolError, PseudoExpanderError
from pseudo_expander.expansion.symbols import LabelResolver, Symbol, SymbolTable


# =============================================================================
# Forward Lookups
# =============================================================================

class TestSymbolTable:
    """Test defining and looking up labels."""

    def test_add_and_get(self):
        """A defined label reports its address."""
        table = SymbolTable()
        symbol = table.add_symbol("main", 0x00400000)
        assert symbol == Symbol("main", 0x00400000)
        assert table.get_address("main") == 0x00400000

    def test_unknown_label(self):
        """Undefined labels have no address."""
        assert SymbolTable().get_address("nowhere") is None

    def test_addresses_wrapped_to_32_bits(self):
        """Addresses are stored as signed 32-bit words."""
        table = SymbolTable()
        table.add_symbol("top", 0xFFFFFFFC)
        assert table.get_address("top") == -4

    def test_duplicate_label(self):
        """Defining a label twice in one table is an error."""
        table = SymbolTable.from_mapping({"loop": 0x10})
        with pytest.raises(DuplicateSymbolError) as exc_info:
            table.add_symbol("loop", 0x20)
        assert exc_info.value.symbol == "loop"
        assert exc_info.value.address == 0x10
        assert "0x00000010" in str(exc_info.value)
        assert isinstance(exc_info.value, PseudoExpanderError)

    def test_parent_lookup(self):
        """Labels of the parent table are visible from the local one."""
        globals_ = SymbolTable.from_mapping({"main": 0x100})
        local = SymbolTable("prog.s", parent=globals_)
        assert local.get_address("main") == 0x100
        assert "main" in local
        assert len(local) == 0

    def test_local_shadows_parent(self):
        """A local definition hides a global one of the same name."""
        globals_ = SymbolTable.from_mapping({"loop": 0x100})
        local = SymbolTable("prog.s", parent=globals_)
        local.add_symbol("loop", 0x200)
        assert local.get_address("loop") == 0x200

    def test_names(self):
        """names() lists local labels first, without duplicates."""
        globals_ = SymbolTable.from_mapping({"a": 1, "b": 2})
        local = SymbolTable("prog.s", parent=globals_)
        local.add_symbol("c", 3)
        local.add_symbol("a", 4)
        assert local.names() == ["c", "a", "b"]

    def test_iteration_and_repr(self):
        """Iterating yields the table's own symbols in definition order."""
        table = SymbolTable.from_mapping({"x": 1, "y": 2}, name="data")
        assert [s.name for s in table] == ["x", "y"]
        assert repr(table) == "SymbolTable('data', 2 symbols)"

    def test_contains_rejects_non_strings(self):
        """Only label names can be members."""
        table = SymbolTable.from_mapping({"x": 1})
        assert 1 not in table


# =============================================================================
# Reverse Lookups
# =============================================================================

class TestReverseLookup:
    """Test address to label lookups."""

    def test_first_definition_wins(self):
        """When labels share an address the first one is returned."""
        table = SymbolTable()
        table.add_symbol("start", 0x00400000)
        table.add_symbol("main", 0x00400000)
        assert table.get_symbol_given_address(0x00400000).name == "start"

    def test_address_as_text(self):
        """Addresses may be given as operand text."""
        table = SymbolTable.from_mapping({"buf": 0x10010000})
        assert table.get_symbol_given_address("268500992").name == "buf"
        assert table.get_symbol_given_address("0x10010000").name == "buf"

    def test_non_numeric_text(self):
        """Text that is not an address finds nothing."""
        table = SymbolTable.from_mapping({"buf": 0})
        assert table.get_symbol_given_address("buf") is None

    def test_unsigned_address(self):
        """Unsigned and signed forms of an address are the same."""
        table = SymbolTable.from_mapping({"high": 0x80000000})
        assert table.get_symbol_given_address(0x80000000).name == "high"
        assert table.get_symbol_given_address("-2147483648").name == "high"

    def test_local_before_global(self):
        """The local table is searched before its parent."""
        globals_ = SymbolTable.from_mapping({"g": 0x40})
        local = SymbolTable("prog.s", parent=globals_)
        local.add_symbol("l", 0x40)
        assert local.get_symbol_given_address_local_or_global(0x40).name == "l"

    def test_falls_back_to_global(self):
        """Addresses unknown locally are looked up in the parent."""
        globals_ = SymbolTable.from_mapping({"g": 0x40})
        local = SymbolTable("prog.s", parent=globals_)
        assert local.get_symbol_given_address(0x40) is None
        assert local.get_symbol_given_address_local_or_global(0x40).name == "g"


# =============================================================================
# Label Resolver
# =============================================================================

class TestLabelResolver:
    """Test recovering label text for template substitution."""

    def test_resolve(self):
        """The resolver returns the label's name."""
        table = SymbolTable.from_mapping({"loop": 0x00400008})
        assert LabelResolver().resolve(str(0x00400008), table) == "loop"

    def test_no_label(self):
        """Unlabelled addresses resolve to None."""
        table = SymbolTable.from_mapping({"loop": 8})
        assert LabelResolver().resolve("12", table) is None

    def test_no_table(self):
        """Without a table nothing resolves."""
        assert LabelResolver().resolve("8", None) is None
