"""
Pure Python stand-ins for the FemtoRV32, implementing femtorv_tb.core.Core.

FetchCore fetches sequentially from address 0, one word per rising edge,
like a core that only ever executes straight-line code. ScriptedCore replays
a list of bus requests, one per rising edge after reset, and records what it
was given back. Both treat reset as active low, matching the FemtoRV32.
"""


class _ModelCore:
    def __init__(self):
        self.clk = 0
        self.reset = 0
        self.mem_rdata = 0
        self.mem_rbusy = 0
        self.mem_wbusy = 0

        self.mem_addr = 0
        self.mem_rstrb = 0
        self.mem_wdata = 0
        self.mem_wmask = 0
        self.trap = 0
        self.trap_cause = 0

        self.evals = 0
        self.edges_in_reset = 0
        self._last_clk = 0

    def eval(self):
        self.evals += 1
        rose = self.clk == 1 and self._last_clk == 0
        self._last_clk = self.clk
        if not rose:
            return
        if self.reset == 0:
            self.edges_in_reset += 1
            self._idle()
        else:
            self.on_edge()

    def _idle(self):
        self.mem_rstrb = 0
        self.mem_wmask = 0
        self.trap = 0

    def on_edge(self):
        raise NotImplementedError


class FetchCore(_ModelCore):
    """Fetches address 0, 4, 8, ... and records every word it receives."""

    def __init__(self):
        super().__init__()
        self.pc = 0
        self.fetched = []
        self._pending = False

    def _idle(self):
        super()._idle()
        self.pc = 0
        self._pending = False

    def on_edge(self):
        if self._pending:
            self.fetched.append(self.mem_rdata)
        self.mem_addr = self.pc
        self.mem_rstrb = 1
        self._pending = True
        self.pc += 4


class ScriptedCore(_ModelCore):
    """Replays per-edge bus requests.

    Each script entry is a dict of output signal values (mem_addr, mem_rstrb,
    mem_wdata, mem_wmask, trap, trap_cause); missing keys drive 0. After the
    script runs out the core idles. rdata_seen[i] is mem_rdata as observed
    at edge i, i.e. the response to edge i - 1.
    """

    def __init__(self, script):
        super().__init__()
        self.script = list(script)
        self.edge = 0
        self.rdata_seen = []

    def on_edge(self):
        self.rdata_seen.append(self.mem_rdata)
        step = self.script[self.edge] if self.edge < len(self.script) else {}
        self.edge += 1
        self.mem_addr = step.get("mem_addr", 0)
        self.mem_rstrb = step.get("mem_rstrb", 0)
        self.mem_wdata = step.get("mem_wdata", 0)
        self.mem_wmask = step.get("mem_wmask", 0)
        self.trap = step.get("trap", 0)
        self.trap_cause = step.get("trap_cause", 0)
