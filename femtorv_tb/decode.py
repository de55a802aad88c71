"""
RV32I instruction classification for debug output.

Only the major opcode is looked at. This is for reading logs; the harness
never executes or acts on what it decodes.
"""

from collections import namedtuple

# ---------------------------------------------------------------------------
# Opcodes and the register fields shown for each form
# ---------------------------------------------------------------------------

OP_IMM = 0x13
OP = 0x33
STORE = 0x23
BRANCH = 0x63
LUI = 0x37
AUIPC = 0x17
JAL = 0x6F
JALR = 0x67

_FORMS = {
    OP_IMM: ("I-type", ("rd", "rs1")),
    OP: ("R-type", ("rd", "rs1", "rs2")),
    STORE: ("S-type", ("rs1", "rs2")),
    BRANCH: ("B-type", ("rs1", "rs2")),
    LUI: ("LUI", ("rd",)),
    AUIPC: ("AUIPC", ("rd",)),
    JAL: ("JAL", ("rd",)),
    JALR: ("JALR", ("rd", "rs1")),
}

Decoded = namedtuple("Decoded", "kind opcode rd rs1 rs2 funct3")


def decode(word):
    """Split a word into its opcode class and register fields.

    kind is None for opcodes outside the recognized set.
    """
    opcode = word & 0x7F
    form = _FORMS.get(opcode)
    return Decoded(
        kind=form[0] if form else None,
        opcode=opcode,
        rd=(word >> 7) & 0x1F,
        rs1=(word >> 15) & 0x1F,
        rs2=(word >> 20) & 0x1F,
        funct3=(word >> 12) & 0x7,
    )


def describe(word):
    """Return a one-line description, e.g. 'Instruction: 0x00500113 (I-type, rd=x2, rs1=x0)'."""
    d = decode(word)
    if d.kind is None:
        detail = "Unknown opcode"
    else:
        fields = ", ".join(f"{name}=x{getattr(d, name)}" for name in _FORMS[d.opcode][1])
        detail = f"{d.kind}, {fields}"
    return f"Instruction: 0x{word & 0xFFFFFFFF:08x} ({detail})"
