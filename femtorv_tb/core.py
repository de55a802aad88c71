"""
Signal interface of the core under test.

The harness never looks inside the core. Anything exposing these attributes
and an eval() step can be driven: the Verilated/cocotb DUT through DutCore,
or a pure Python model in unit tests.

Inputs driven by the harness:
  - clk, reset          clock level and reset level (FemtoRV32 reset is active low)
  - mem_rdata           read data presented back to the core
  - mem_rbusy, mem_wbusy  always 0: the memory never exerts backpressure

Outputs sampled by the harness:
  - mem_addr            byte address
  - mem_rstrb           read strobe
  - mem_wdata           write data
  - mem_wmask           4-bit byte-lane write mask
  - trap, trap_cause    fault indicator and cause code
"""

from typing import Protocol

INPUTS = ("clk", "reset", "mem_rdata", "mem_rbusy", "mem_wbusy")
OUTPUTS = ("mem_addr", "mem_rstrb", "mem_wdata", "mem_wmask", "trap", "trap_cause")
SIGNALS = INPUTS + OUTPUTS


class Core(Protocol):
    clk: int
    reset: int
    mem_rdata: int
    mem_rbusy: int
    mem_wbusy: int

    mem_addr: int
    mem_rstrb: int
    mem_wdata: int
    mem_wmask: int
    trap: int
    trap_cause: int

    def eval(self):
        """Settle the core's logic after an input change."""


def init_core(core, reset_active, filler):
    """Drive every core input to its known pre-reset state."""
    core.clk = 0
    core.reset = reset_active
    core.mem_rdata = filler
    core.mem_rbusy = 0
    core.mem_wbusy = 0


def sample_signals(core):
    """Return a dict of all interface signal levels, in SIGNALS order."""
    return {name: int(getattr(core, name)) for name in SIGNALS}
