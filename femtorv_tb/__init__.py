"""
FemtoRV32 memory-bus co-simulation harness.

The cocotb adapter (cocotb_core, bench) is not imported here so the
pure-Python harness can be used without a simulator.
"""

from .bus_model import BusModel, BusRequest, BusResponse, lane_mask
from .config import ConfigError, HarnessConfig
from .cpu_harness import CycleSequencer, RunResult, SimContext, clock_level
from .decode import decode, describe
from .memory import MIN_WORDS, NOP, InstructionMemory
from .program import FALLBACK_PROGRAM, ProgramImageError, build_memory, load_program, parse_program
from .trace import NullTrace, TraceRecorder
from .trap import TrapEvent, TrapMonitor

__version__ = "0.1.0"
