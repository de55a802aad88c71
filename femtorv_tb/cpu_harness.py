"""
FemtoRV32 cycle sequencer.

Drives the clock and reset of a core (see core.Core) and services its memory
bus on every rising edge:

  1. Reset:   toggle the clock reset_toggles times with reset held, dumping a
              trace snapshot after each toggle.
  2. Release: drive reset to its inactive level, once.
  3. Run:     until the time budget is spent or the core traps:
                flip clk, evaluate, and on the high level
                  count the edge, sample the bus, respond from memory,
                  check for a trap, log the fetched instruction;
                then dump a snapshot and advance time.

One unit of simulated time is half a clock period, so the clock is high at
every even time and the core sees one rising edge per two iterations.

Usage with a Python model:

    memory = build_memory(load_program("memory.hex"))
    result = CycleSequencer(core, memory).run()
    assert not result.trapped

The phase primitives (begin_toggle, finish_reset_toggle, release_reset,
finish_toggle) are public so that an asynchronous driver can put its own
evaluation step between them; see cocotb_core.run_on_dut.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .bus_model import BusModel, BusRequest
from .config import HarnessConfig
from .core import init_core, sample_signals
from .decode import describe
from .trace import NullTrace
from .trap import TrapEvent, TrapMonitor

log = logging.getLogger(__name__)

CLOCK_PERIOD = 2
HALF_PERIOD = CLOCK_PERIOD // 2


def clock_level(sim_time):
    """Clock level the sequencer drives at the given time."""
    return 1 if sim_time % CLOCK_PERIOD < HALF_PERIOD else 0


class SimContext:
    """All mutable state of one simulation run."""

    def __init__(self, memory, config):
        self.memory = memory
        self.config = config
        self.sim_time = 0
        self.posedges = 0
        self.clk = 0
        self.reset = config.reset_active
        self.trap: Optional[TrapEvent] = None


@dataclass(frozen=True)
class RunResult:
    posedges: int
    sim_time: int
    trap: Optional[TrapEvent]
    reads: int
    writes: int
    out_of_range: int

    @property
    def trapped(self):
        return self.trap is not None


class CycleSequencer:
    """Clock/reset driver and per-edge bus pipeline for one core."""

    def __init__(self, core, memory, config=None, trace=None, decoder=describe):
        """
        Args:
            core: Object implementing the core.Core signal interface.
            memory: InstructionMemory backing the bus.
            config: HarnessConfig (FemtoRV32 defaults when None).
            trace: TraceSink receiving one snapshot per time unit.
            decoder: Callable word -> str used to log fetched instructions,
                     or None to skip decoding.
        """
        self.core = core
        self.config = (config or HarnessConfig()).validate()
        self.ctx = SimContext(memory, self.config)
        self.trace = trace if trace is not None else NullTrace()
        self.bus = BusModel(memory)
        self.monitor = TrapMonitor()
        self.decoder = decoder if self.config.decode else None

    # ------------------------------------------------------------------
    # Phase primitives
    # ------------------------------------------------------------------

    def setup(self):
        """Drive all inputs to their pre-reset state."""
        init_core(self.core, self.config.reset_active, self.config.filler)
        self.ctx.clk = 0
        self.ctx.reset = self.config.reset_active

    def begin_toggle(self):
        """Flip the clock. The core must be evaluated before the matching finish call."""
        self.ctx.clk ^= 1
        self.core.clk = self.ctx.clk

    def finish_reset_toggle(self):
        self._dump()

    def release_reset(self):
        self.ctx.reset = self.config.reset_inactive
        self.core.reset = self.ctx.reset
        log.debug("Reset released at sim_time=%d", self.ctx.sim_time)

    def finish_toggle(self):
        """Post-evaluation half of a run-phase iteration."""
        if self.ctx.clk:
            self.on_rising_edge()
        self._dump()

    @property
    def running(self):
        return self.ctx.trap is None and self.ctx.sim_time < self.config.max_time

    def finish(self):
        self.trace.close()
        log.info("Simulation finished after %d cycles", self.ctx.posedges)
        return RunResult(
            posedges=self.ctx.posedges,
            sim_time=self.ctx.sim_time,
            trap=self.ctx.trap,
            reads=self.bus.reads,
            writes=self.bus.writes,
            out_of_range=self.bus.out_of_range,
        )

    # ------------------------------------------------------------------
    # Rising edge pipeline
    # ------------------------------------------------------------------

    def on_rising_edge(self):
        """Bus responder, then trap monitor, then decoder, for one edge.

        Returns:
            The TrapEvent if the core trapped on this edge, else None.
        """
        ctx = self.ctx
        ctx.posedges += 1
        request = BusRequest.sample(self.core)
        log.debug("Cycle %d (sim_time=%d):", ctx.posedges, ctx.sim_time)
        log.debug("  PC: 0x%x", request.address)
        log.debug("  Reset: %d", ctx.reset)
        log.debug("  mem_rstrb: %d", int(request.read_strobe))

        response = self.bus.respond(request)
        if response.read_data is not None:
            self.core.mem_rdata = response.read_data

        event = self.monitor.check(request, ctx)

        if self.decoder is not None and response.read_data is not None and not response.out_of_range:
            log.debug("  %s", self.decoder(response.read_data))
        return event

    def _dump(self):
        self.trace.dump(self.ctx.sim_time, sample_signals(self.core))
        self.ctx.sim_time += 1

    # ------------------------------------------------------------------
    # Synchronous driver
    # ------------------------------------------------------------------

    def run(self):
        """Run reset, release and the main loop against a synchronous core.

        Returns:
            RunResult. A trap ends the run early but is not an error.
        """
        self.setup()
        log.info("Starting simulation...")
        for _ in range(self.config.reset_toggles):
            self.begin_toggle()
            self.core.eval()
            self.finish_reset_toggle()
        self.release_reset()

        while self.running:
            self.begin_toggle()
            self.core.eval()
            self.finish_toggle()
        return self.finish()
