"""
cocotb adapter: run the cycle sequencer against an HDL FemtoRV32.

DutCore exposes the cocotb handles of the toplevel under the attribute names
of core.Core, so the sequencer's pipeline can sample and drive them directly.
The evaluation step is simulator time: after every clock flip the driver
awaits one Timer step, which lets the simulator settle the design before
the rising-edge pipeline samples its outputs.

Usage in a cocotb test:

    @cocotb.test()
    async def test_program(dut):
        memory = build_memory(load_program("memory.hex"))
        result = await run_on_dut(dut, memory)
        assert result.out_of_range == 0
"""

from cocotb.triggers import Timer

from .config import HarnessConfig
from .core import INPUTS, OUTPUTS, SIGNALS
from .cpu_harness import CycleSequencer


class DutCore:
    """Attribute view of a cocotb DUT handle matching core.Core."""

    def __init__(self, dut):
        self.__dict__["dut"] = dut

    def __getattr__(self, name):
        if name not in SIGNALS:
            raise AttributeError(name)
        try:
            return int(getattr(self.dut, name).value)
        except ValueError:
            # X or Z, typically before reset has propagated
            return 0

    def __setattr__(self, name, value):
        if name in INPUTS:
            getattr(self.dut, name).value = int(value)
        elif name in OUTPUTS:
            raise AttributeError(f"{name} is driven by the core")
        else:
            super().__setattr__(name, value)


async def run_on_dut(dut, memory, config=None, trace=None):
    """Reset and run a cocotb DUT, servicing its bus from memory.

    Args:
        dut: cocotb toplevel handle exposing the FemtoRV32 bus signals.
        memory: InstructionMemory backing the bus.
        config: HarnessConfig; time_step_ns sets the Timer step per half period.
        trace: Optional TraceSink (the simulator writes its own waves).

    Returns:
        RunResult from the sequencer.
    """
    config = config or HarnessConfig()
    seq = CycleSequencer(DutCore(dut), memory, config, trace=trace)
    step = config.time_step_ns

    seq.setup()
    dut._log.info("Starting simulation...")
    for _ in range(config.reset_toggles):
        seq.begin_toggle()
        await Timer(step, unit="ns")
        seq.finish_reset_toggle()
    seq.release_reset()

    while seq.running:
        seq.begin_toggle()
        await Timer(step, unit="ns")
        seq.finish_toggle()
    return seq.finish()
