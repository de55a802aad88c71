"""
Instruction word store tests: padding, out-of-range behavior, and
byte-lane merging writes.
"""

import pytest

from femtorv_tb.bus_model import lane_mask
from femtorv_tb.memory import MIN_WORDS, NOP, InstructionMemory


def test_pads_to_minimum_with_nop():
    mem = InstructionMemory([0x00500113, 0x00300193])
    assert len(mem) == MIN_WORDS
    assert mem.read(0) == 0x00500113
    assert mem.read(1) == 0x00300193
    assert all(w == NOP for w in mem.words()[2:])


def test_long_program_keeps_its_length():
    mem = InstructionMemory(range(2000), size=1024)
    assert len(mem) == 2000
    assert mem.read(1999) == 1999


@pytest.mark.parametrize("index", [MIN_WORDS, MIN_WORDS + 1, 0x3FFFFFFF, -1])
def test_out_of_range_read_returns_filler(index):
    mem = InstructionMemory([0xDEADBEEF])
    assert mem.read(index) == NOP


@pytest.mark.parametrize("index", [MIN_WORDS, 0x3FFFFFFF, -1])
def test_out_of_range_write_is_dropped(index):
    mem = InstructionMemory([0xDEADBEEF, 0x01234567])
    before = mem.words()
    assert mem.write(index, 0xFFFFFFFF) is False
    assert mem.words() == before
    assert len(mem) == MIN_WORDS


def test_masked_write_example():
    """Lanes 0 and 1 of 0xAABBCCDD over 0x11223344 give 0x1122CCDD."""
    mem = InstructionMemory([0x11223344])
    assert mem.write(0, 0xAABBCCDD, lane_mask(0b0011))
    assert mem.read(0) == 0x1122CCDD


@pytest.mark.parametrize("wmask", range(16))
def test_byte_merge_preserves_unselected_lanes(wmask):
    old = 0x11223344
    new = 0xAABBCCDD
    mem = InstructionMemory([0, old, 0])
    mem.write(1, new, lane_mask(wmask))
    got = mem.read(1)
    for lane in range(4):
        shift = 8 * lane
        expected = new if wmask & (1 << lane) else old
        assert (got >> shift) & 0xFF == (expected >> shift) & 0xFF, (
            f"lane {lane} with mask {wmask:04b}: got 0x{got:08X}"
        )
    # neighbors untouched
    assert mem.read(0) == 0
    assert mem.read(2) == 0


def test_values_are_truncated_to_32_bits():
    mem = InstructionMemory([0x1_0000_0013])
    assert mem.read(0) == 0x13
    mem.write(0, 0x1_FFFF_FFFF)
    assert mem.read(0) == 0xFFFFFFFF


def test_dump_formats_byte_addresses():
    mem = InstructionMemory([0x00000013, 0x00500113])
    text = mem.dump(0, 2)
    assert "0x00000000: 00000013 00500113" in text
