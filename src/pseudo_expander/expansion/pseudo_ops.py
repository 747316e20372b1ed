"""
RV32I Pseudo-Instruction Definitions
====================================

The built-in pseudo-instruction set, written in the recipe language
understood by the template engine. Each entry is

    (example, translation, compact_translation, description)

where translations are newline-separated template lines and the compact
translation is None when the instruction has no reduced-range form.

Forms sharing a mnemonic are listed most specific first: the instruction
table picks the first entry whose example operands accept the statement,
so ``li t1,-100`` (12-bit immediate) must come before
``li t1,10000000`` (any 32-bit immediate).

Compact translations assume every data label lies within the first or
last 2 KiB of the address space, so its address is a valid 12-bit signed
immediate and no upper-immediate instruction is needed.

Reference
---------
- RISC-V Unprivileged ISA, "Assembly Programmer's Handbook" chapter
  (standard pseudo-instruction list)
"""

from typing import Optional

PseudoOpDefinition = tuple[str, str, Optional[str], str]


def _load_from_label(op: str) -> PseudoOpDefinition:
    return (
        f"{op} t1,label",
        f"auipc RG1, PCH2\n{op} RG1, PCL2(RG1)",
        f"{op} RG1, LL2(x0)",
        f"Load from label : {op} t1 from the address of label",
    )


def _store_to_label(op: str) -> PseudoOpDefinition:
    return (
        f"{op} t1,label,t2",
        f"auipc RG3, PCH2\n{op} RG1, PCL2(RG3)",
        f"{op} RG1, LL2(x0)",
        f"Store to label : {op} t1 at the address of label, using t2 as scratch",
    )


DEFAULT_PSEUDO_OPS: tuple[PseudoOpDefinition, ...] = (
    # =========================================================================
    # Register moves and arithmetic
    # =========================================================================
    ("nop", "addi x0, x0, 0", None, "NO OPeration"),
    ("mv t1,t2", "add RG1, x0, RG2", None, "MoVe : Set t1 to contents of t2"),
    ("not t1,t2", "xori RG1, RG2, -1", None, "Bitwise NOT : Set t1 to bitwise complement of t2"),
    ("neg t1,t2", "sub RG1, x0, RG2", None, "NEGate : Set t1 to negation of t2"),

    # =========================================================================
    # Set on condition
    # =========================================================================
    ("seqz t1,t2", "sltiu RG1, RG2, 1", None, "Set EQual to Zero : t1 = (t2 == 0)"),
    ("snez t1,t2", "sltu RG1, x0, RG2", None, "Set Not Equal to Zero : t1 = (t2 != 0)"),
    ("sltz t1,t2", "slt RG1, RG2, x0", None, "Set Less Than Zero : t1 = (t2 < 0)"),
    ("sgtz t1,t2", "slt RG1, x0, RG2", None, "Set Greater Than Zero : t1 = (t2 > 0)"),

    # =========================================================================
    # Branches against zero
    # =========================================================================
    ("beqz t1,label", "beq RG1, x0, LAB", None, "Branch if EQual Zero"),
    ("bnez t1,label", "bne RG1, x0, LAB", None, "Branch if Not Equal Zero"),
    ("bgez t1,label", "bge RG1, x0, LAB", None, "Branch if Greater than or Equal to Zero"),
    ("bltz t1,label", "blt RG1, x0, LAB", None, "Branch if Less Than Zero"),
    ("bgtz t1,label", "blt x0, RG1, LAB", None, "Branch if Greater Than Zero"),
    ("blez t1,label", "bge x0, RG1, LAB", None, "Branch if Less than or Equal to Zero"),

    # =========================================================================
    # Branches with swapped operands
    # =========================================================================
    ("bgt t1,t2,label", "blt RG2, RG1, LAB", None, "Branch if Greater Than"),
    ("ble t1,t2,label", "bge RG2, RG1, LAB", None, "Branch if Less than or Equal"),
    ("bgtu t1,t2,label", "bltu RG2, RG1, LAB", None, "Branch if Greater Than, Unsigned"),
    ("bleu t1,t2,label", "bgeu RG2, RG1, LAB", None, "Branch if Less than or Equal, Unsigned"),

    # =========================================================================
    # Jumps, calls and returns
    # =========================================================================
    ("b label", "jal x0, LAB", None, "Branch unconditionally to label"),
    ("j label", "jal x0, LAB", None, "Jump to label"),
    ("jal label", "jal x1, LAB", None, "Jump And Link to label, return address in ra"),
    ("jr t0", "jalr x0, RG1, 0", None, "Jump Register : jump to address in t0"),
    ("jalr t0", "jalr x1, RG1, 0", None, "Jump And Link Register, return address in ra"),
    ("ret", "jalr x0, x1, 0", None, "RETurn from subroutine"),
    ("call label", "auipc x1, PCH1\njalr x1, x1, PCL1", None,
     "CALL a far-away subroutine"),
    ("tail label", "auipc x6, PCH1\njalr x0, x6, PCL1", None,
     "TAIL call a far-away subroutine, clobbers t1"),

    # =========================================================================
    # Immediate and address loads
    # =========================================================================
    ("li t1,-100", "addi RG1, x0, VL2", None,
     "Load Immediate : Set t1 to 12-bit immediate (sign-extended)"),
    ("li t1,10000000", "lui RG1, VH2\naddi RG1, RG1, VL2", None,
     "Load Immediate : Set t1 to 32-bit immediate"),
    ("la t1,label", "auipc RG1, PCH2\naddi RG1, RG1, PCL2", "addi RG1, x0, LL2",
     "Load Address : Set t1 to label's address"),

    # =========================================================================
    # Loads and stores addressed by label
    # =========================================================================
    _load_from_label("lb"),
    _load_from_label("lh"),
    _load_from_label("lw"),
    _load_from_label("lbu"),
    _load_from_label("lhu"),
    _store_to_label("sb"),
    _store_to_label("sh"),
    _store_to_label("sw"),
)
