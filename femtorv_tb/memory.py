"""
Word-addressable instruction/data memory model for the FemtoRV32 testbench.

Little-endian (RISC-V byte order), 32-bit words. The core addresses memory
in bytes; the store is indexed by word (byte address >> 2). Lane 0 is
DATA[7:0], lane 3 is DATA[31:24].

Unmapped memory reads as the filler instruction (NOP) and writes outside the
store are dropped, so a wild address during bring-up never stops the run.
"""

NOP = 0x00000013  # addi x0, x0, 0
WORD_MASK = 0xFFFFFFFF
MIN_WORDS = 1024


class InstructionMemory:
    """Fixed-size word store with byte-lane merging writes."""

    def __init__(self, words=(), size=MIN_WORDS, filler=NOP):
        """Initialize memory from a word list, padded with the filler.

        Args:
            words: Iterable of 32-bit words loaded from index 0.
            size: Minimum number of words; a longer program keeps its length.
            filler: Word used for padding and for out-of-range reads.
        """
        self.filler = filler & WORD_MASK
        self._mem = [w & WORD_MASK for w in words]
        if len(self._mem) < size:
            self._mem.extend([self.filler] * (size - len(self._mem)))

    def __len__(self):
        return len(self._mem)

    def in_range(self, index):
        return 0 <= index < len(self._mem)

    def read(self, index):
        """Return the word at index, or the filler when out of range."""
        if not self.in_range(index):
            return self.filler
        return self._mem[index]

    def write(self, index, value, byte_mask=WORD_MASK):
        """Merge the bits of value selected by byte_mask into the word at index.

        Args:
            index: Word index.
            value: 32-bit value to write.
            byte_mask: 32-bit mask; bits that are clear keep their old value.

        Returns:
            True if the write landed, False if index was out of range.
        """
        if not self.in_range(index):
            return False
        byte_mask &= WORD_MASK
        old = self._mem[index]
        self._mem[index] = (old & ~byte_mask & WORD_MASK) | (value & byte_mask)
        return True

    def words(self):
        """Return a copy of the whole store."""
        return list(self._mem)

    def dump(self, index, count=8):
        """Return a hex dump string for debugging."""
        lines = []
        for row in range(index, index + count, 4):
            end = min(row + 4, index + count)
            hexwords = " ".join(f"{self.read(i):08X}" for i in range(row, end))
            lines.append(f"  0x{row << 2:08X}: {hexwords}")
        return "\n".join(lines)
