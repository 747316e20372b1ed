# =============================================================================
# test_templates.py - Template Substitution Unit Tests
# =============================================================================
# Tests for the placeholder parser and the TemplateEngine.
#
# Test coverage includes:
#   - Marker recognition (RGn, LHn, LLn, PCHn, PCLn, VHn, VLn, LAB)
#   - Register substitution
#   - Absolute and PC-relative numeric substitution
#   - Non-numeric operands and missing positions
#   - Label recovery (first LAB only, missing labels)
#   - No re-scanning of substituted text
# =============================================================================

import pytest

from pseudo_expander.expansion.symbols import LabelResolver, SymbolTable
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


@pytest.fixture
def engine():
    """A fresh template engine."""
    return TemplateEngine()


def texts(template):
    """Segments of a parsed template, placeholders shown as markers."""
    return [s if isinstance(s, str) else s.text for s in parse_template(template)]


# =============================================================================
# Placeholder Parsing
# =============================================================================

class TestParseTemplate:
    """Test splitting template lines into text and placeholders."""

    def test_plain_text(self):
        """A line without markers is a single literal."""
        assert parse_template("addi x0, x0, 0") == ("addi x0, x0, 0",)

    def test_empty_template(self):
        """An empty line has no segments."""
        assert parse_template("") == ()

    def test_markers_and_text(self):
        """Markers are separated from the text around them."""
        assert texts("auipc RG1, PCH2") == ["auipc ", "RG1", ", ", "PCH2"]

    @pytest.mark.parametrize("marker,kind,position", [
        ("RG1", PlaceholderKind.REGISTER, 1),
        ("LH2", PlaceholderKind.LABEL_HIGH, 2),
        ("LL3", PlaceholderKind.LABEL_LOW, 3),
        ("PCH1", PlaceholderKind.PC_HIGH, 1),
        ("PCL1", PlaceholderKind.PC_LOW, 1),
        ("VH2", PlaceholderKind.VALUE_HIGH, 2),
        ("VL9", PlaceholderKind.VALUE_LOW, 9),
        ("LAB", PlaceholderKind.LABEL, 0),
    ])
    def test_marker_kinds(self, marker, kind, position):
        """Each marker family is recognised with its position."""
        assert parse_template(marker) == (Placeholder(kind, position),)

    def test_pc_markers_not_split(self):
        """PCL2 is a PC-relative marker, not a literal P followed by CL2."""
        (placeholder,) = parse_template("PCL2")
        assert placeholder.kind is PlaceholderKind.PC_LOW

    def test_position_zero_is_text(self):
        """Position 0 is the mnemonic and never a marker."""
        assert parse_template("RG0") == ("RG0",)

    def test_single_digit_positions(self):
        """Only one digit belongs to the marker."""
        assert texts("RG12") == ["RG1", "2"]

    def test_parse_is_cached(self):
        """Parsing the same line twice returns the same tuple."""
        assert parse_template("lui RG1, VH2") is parse_template("lui RG1, VH2")


# =============================================================================
# Register Substitution
# =============================================================================

class TestRegisterSubstitution:
    """Test RGn markers."""

    def test_register_operand(self, engine):
        """RGn copies the operand text."""
        tokens = tokens_from_values(["mv", "t1", "t2"])
        assert engine.substitute("add RG1, x0, RG2", tokens, ProgramContext()) == "add t1, x0, t2"

    def test_every_occurrence_replaced(self, engine):
        """All occurrences of the same marker are replaced."""
        tokens = tokens_from_values(["m", "t0"])
        assert engine.substitute("add RG1, RG1, RG1", tokens, ProgramContext()) == "add t0, t0, t0"

    def test_literal_operand_copied(self, engine):
        """RGn also copies non-register text verbatim."""
        tokens = tokens_from_values(["m", "0x10"])
        assert engine.substitute("x RG1", tokens, ProgramContext()) == "x 0x10"

    def test_substituted_text_not_rescanned(self, engine):
        """An operand that looks like a marker is emitted as-is."""
        tokens = tokens_from_values(["m", "RG2", "t3"])
        assert engine.substitute("add RG1, RG2", tokens, ProgramContext()) == "add RG2, t3"

    def test_position_past_last_operand(self, engine):
        """Markers for missing operands are left in place."""
        tokens = tokens_from_values(["jr", "t0"])
        assert engine.substitute("jalr x0, RG3, 0", tokens, ProgramContext()) == "jalr x0, RG3, 0"


# =============================================================================
# Numeric Substitution
# =============================================================================

class TestNumericSubstitution:
    """Test absolute and PC-relative high/low markers."""

    def test_absolute_split(self, engine):
        """LHn/LLn split the operand value."""
        tokens = tokens_from_values(["la", "t1", str(0x10010800)])
        ctx = ProgramContext()
        assert engine.substitute("lui RG1, LH2", tokens, ctx) == "lui t1, 65553"
        assert engine.substitute("addi RG1, RG1, LL2", tokens, ctx) == "addi t1, t1, -2048"

    def test_value_markers_match_label_markers(self, engine):
        """VHn/VLn compute the same fields as LHn/LLn."""
        tokens = tokens_from_values(["li", "t1", "0x12345FFF"])
        ctx = ProgramContext()
        assert engine.substitute("VH2 VL2", tokens, ctx) == engine.substitute("LH2 LL2", tokens, ctx)
        assert engine.substitute("VH2 VL2", tokens, ctx) == "74566 -1"

    def test_negative_operand(self, engine):
        """Small negative values stay in the low field."""
        tokens = tokens_from_values(["li", "t1", "-100"])
        assert engine.substitute("addi RG1, x0, VL2", tokens, ProgramContext()) == "addi t1, x0, -100"

    def test_pc_relative_split(self, engine):
        """PCHn/PCLn split the distance from pc."""
        tokens = tokens_from_values(["la", "t1", str(0x10010000)])
        ctx = ProgramContext(pc=0x00400000)
        assert engine.substitute("auipc RG1, PCH2", tokens, ctx) == "auipc t1, 64528"
        assert engine.substitute("addi RG1, RG1, PCL2", tokens, ctx) == "addi t1, t1, 0"

    def test_pc_relative_backward(self, engine):
        """A target before pc gives negative fields."""
        tokens = tokens_from_values(["call", str(0x00400000)])
        ctx = ProgramContext(pc=0x00402000)
        assert engine.substitute("auipc x1, PCH1", tokens, ctx) == "auipc x1, -2"
        assert engine.substitute("jalr x1, x1, PCL1", tokens, ctx) == "jalr x1, x1, 0"

    def test_last_operand_substituted(self, engine):
        """The final operand is a valid marker position."""
        tokens = tokens_from_values(["call", str(0x00400100)])
        ctx = ProgramContext(pc=0x00400000)
        assert engine.substitute("jalr x1, x1, PCL1", tokens, ctx) == "jalr x1, x1, 256"

    def test_non_numeric_operand_left_alone(self, engine):
        """Numeric markers of a non-integer operand survive unchanged."""
        tokens = tokens_from_values(["li", "t0", "abc"])
        assert engine.substitute("lui RG1, VH2", tokens, ProgramContext()) == "lui t0, VH2"

    def test_non_numeric_operand_other_positions_substituted(self, engine):
        """A bad operand only affects its own markers."""
        tokens = tokens_from_values(["m", "a0", "zz", "5"])
        assert engine.substitute("RG1 VL2 VL3", tokens, ProgramContext()) == "a0 VL2 5"

    def test_register_operand_under_numeric_marker(self, engine):
        """A register named by a numeric marker is not a value."""
        tokens = tokens_from_values(["x", "t0"])
        assert engine.substitute("addi RG1, RG1, LL1", tokens, ProgramContext()) == "addi t0, t0, LL1"


# =============================================================================
# Label Substitution
# =============================================================================

class TestLabelSubstitution:
    """Test the LAB marker."""

    @pytest.fixture
    def symbols(self):
        return SymbolTable.from_mapping({"loop": 0x00400000, "done": 0x00400020})

    def test_label_recovered(self, engine, symbols):
        """LAB is the label at the last operand's address."""
        tokens = tokens_from_values(["beqz", "t0", str(0x00400000)])
        ctx = ProgramContext(pc=0x00400010, symbols=symbols)
        assert engine.substitute("beq RG1, x0, LAB", tokens, ctx) == "beq t0, x0, loop"

    def test_only_first_label_replaced(self, engine, symbols):
        """A second LAB in the same line is left as text."""
        tokens = tokens_from_values(["j", str(0x00400020)])
        ctx = ProgramContext(symbols=symbols)
        assert engine.substitute("LAB LAB", tokens, ctx) == "done LAB"

    def test_label_containing_marker_text(self, engine):
        """A label spelled like a marker is not substituted again."""
        symbols = SymbolTable.from_mapping({"LABEL_LAB": 0x100})
        tokens = tokens_from_values(["j", "256"])
        ctx = ProgramContext(symbols=symbols)
        assert engine.substitute("jal x0, LAB", tokens, ctx) == "jal x0, LABEL_LAB"
        assert engine.substitute("LAB LAB", tokens, ctx) == "LABEL_LAB LAB"

    def test_missing_label(self, engine, symbols):
        """LAB stays when no label is defined at the address."""
        tokens = tokens_from_values(["j", "1234"])
        ctx = ProgramContext(symbols=symbols)
        assert engine.substitute("jal x0, LAB", tokens, ctx) == "jal x0, LAB"

    def test_no_symbol_table(self, engine):
        """LAB stays when there is nothing to search."""
        tokens = tokens_from_values(["j", "0"])
        assert engine.substitute("jal x0, LAB", tokens, ProgramContext()) == "jal x0, LAB"

    def test_no_operands(self, engine, symbols):
        """A statement without operands has no label to recover."""
        tokens = tokens_from_values(["ret"])
        ctx = ProgramContext(symbols=symbols)
        assert engine.substitute("LAB", tokens, ctx) == "LAB"

    def test_custom_resolver(self):
        """The engine asks its resolver for label text."""

        class FixedResolver(LabelResolver):
            def resolve(self, value, symbols):
                return f"L{value}"

        engine = TemplateEngine(resolver=FixedResolver())
        tokens = tokens_from_values(["j", "64"])
        assert engine.substitute("jal x0, LAB", tokens, ProgramContext()) == "jal x0, L64"


# =============================================================================
# Convenience Function
# =============================================================================

class TestMakeTemplateSubstitutions:
    """Test the module-level substitution helper."""

    def test_with_pc_and_symbols(self):
        """pc and symbols are passed through to the engine."""
        symbols = SymbolTable.from_mapping({"main": 0x00400100})
        tokens = [OperandToken("tail"), OperandToken(str(0x00400100))]
        assert make_template_substitutions(
            "auipc x6, PCH1 # LAB", tokens, pc=0x00400000, symbols=symbols
        ) == "auipc x6, 0 # main"

    def test_defaults(self):
        """pc defaults to zero."""
        tokens = tokens_from_values(["la", "t1", "0x800"])
        assert make_template_substitutions("auipc RG1, PCH2", tokens) == "auipc t1, 1"
