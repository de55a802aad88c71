"""
FemtoRV32 memory bus responder.

The FemtoRV32 bus is synchronous and single-cycle:
  - Read:  the core raises mem_rstrb with mem_addr; the responder drives
           mem_rdata with the addressed word before the next evaluation.
  - Write: the core drives mem_wmask (one bit per byte lane) with mem_addr
           and mem_wdata; the selected lanes are merged into memory.

mem_rbusy and mem_wbusy are tied low, so every request completes in the
cycle it is asserted and there is no acknowledge.

Environment knobs (debug logging of individual accesses):
  BUS_TRACE      Only log accesses inside the range below when set
  BUS_TRACE_MIN  Lowest byte address to log (default: 0)
  BUS_TRACE_MAX  Highest byte address to log (default: 0xFFFFFFFF)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .memory import WORD_MASK

log = logging.getLogger(__name__)


def lane_mask(wmask):
    """Expand a 4-bit byte-lane mask into a 32-bit bit mask.

    >>> hex(lane_mask(0b0011))
    '0xffff'
    """
    mask = 0
    for lane in range(4):
        if wmask & (1 << lane):
            mask |= 0xFF << (8 * lane)
    return mask


@dataclass(frozen=True)
class BusRequest:
    """The core's bus and fault outputs, sampled once per rising edge."""

    address: int
    read_strobe: bool
    write_mask: int
    write_data: int
    trap: bool = False
    trap_cause: int = 0

    @classmethod
    def sample(cls, core):
        return cls(
            address=int(core.mem_addr) & WORD_MASK,
            read_strobe=bool(core.mem_rstrb),
            write_mask=int(core.mem_wmask) & 0xF,
            write_data=int(core.mem_wdata) & WORD_MASK,
            trap=bool(core.trap),
            trap_cause=int(core.trap_cause),
        )

    @property
    def word_index(self):
        return self.address >> 2


@dataclass(frozen=True)
class BusResponse:
    read_data: Optional[int] = None
    wrote: bool = False
    out_of_range: bool = False


class BusModel:
    """Combinational memory responder over an InstructionMemory."""

    def __init__(self, memory):
        self.memory = memory
        self.reads = 0
        self.writes = 0
        self.out_of_range = 0
        self._trace = os.environ.get("BUS_TRACE", "0") not in ("", "0", "false", "False")
        self._trace_min = int(os.environ.get("BUS_TRACE_MIN", "0"), 0)
        self._trace_max = int(os.environ.get("BUS_TRACE_MAX", "0xFFFFFFFF"), 0)

    def _trace_enabled(self, addr):
        if not self._trace:
            return True
        return self._trace_min <= addr <= self._trace_max

    def respond(self, request):
        """Serve one sampled request against memory.

        Args:
            request: BusRequest sampled after the core settled.

        Returns:
            BusResponse. read_data is None when no read was strobed.
        """
        addr = request.address
        index = request.word_index
        read_data = None
        wrote = False
        missed = False

        if request.read_strobe:
            self.reads += 1
            read_data = self.memory.read(index)
            if self.memory.in_range(index):
                if self._trace_enabled(addr):
                    log.debug("  Memory read at 0x%x = 0x%08x", addr, read_data)
            else:
                missed = True
                if self._trace_enabled(addr):
                    log.debug("  Memory read out of bounds at 0x%x, returning NOP", addr)

        if request.write_mask:
            wrote = self.memory.write(index, request.write_data, lane_mask(request.write_mask))
            if wrote:
                self.writes += 1
                if self._trace_enabled(addr):
                    log.debug(
                        "  Memory write at 0x%x = 0x%08x (mask: 0x%x)",
                        addr,
                        request.write_data,
                        request.write_mask,
                    )
            else:
                missed = True
                if self._trace_enabled(addr):
                    log.debug("  Memory write out of bounds at 0x%x dropped", addr)

        if missed:
            self.out_of_range += 1
        return BusResponse(read_data=read_data, wrote=wrote, out_of_range=missed)
