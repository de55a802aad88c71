"""
cocotb entry point: load a program image and run it on the FemtoRV32 RTL.

Run through `python -m femtorv_tb` (see runner.py), or directly with a cocotb
Makefile setting COCOTB_TEST_MODULES=femtorv_tb.bench. Settings come from the
environment knobs documented in config.py.

A trap ends the run early and is reported, but the test still passes: the
harness only fails on startup errors such as a malformed program image.
"""

import cocotb

from .cocotb_core import run_on_dut
from .config import HarnessConfig, configure_logging
from .program import build_memory, load_program


@cocotb.test()
async def run_program(dut):
    """Reset the core, run until the time budget or a trap, and report."""
    config = HarnessConfig.from_env()
    configure_logging(config)
    words = load_program(config.program)
    memory = build_memory(words, min_words=config.memory_words, filler=config.filler)

    result = await run_on_dut(dut, memory, config)

    if result.trapped:
        dut._log.warning(
            "Run ended by trap 0x%x at PC 0x%x (cycle %d)",
            result.trap.cause,
            result.trap.location,
            result.trap.cycle,
        )
    dut._log.info(
        "posedges=%d reads=%d writes=%d out_of_range=%d",
        result.posedges,
        result.reads,
        result.writes,
        result.out_of_range,
    )
