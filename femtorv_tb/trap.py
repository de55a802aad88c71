"""Trap detection: the core's fault output ends the run."""

import logging
from dataclasses import dataclass

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrapEvent:
    cause: int
    location: int
    cycle: int
    sim_time: int


class TrapMonitor:
    """Checks the sampled trap output once per rising edge."""

    def check(self, request, ctx):
        """Return a TrapEvent if the core signaled a fault, else None.

        The event is stored on ctx; the caller must stop the run.
        """
        if not request.trap:
            return None
        event = TrapEvent(
            cause=request.trap_cause,
            location=request.address,
            cycle=ctx.posedges,
            sim_time=ctx.sim_time,
        )
        ctx.trap = event
        log.warning("Trap occurred at cycle %d", event.cycle)
        log.warning("Trap Cause: 0x%x", event.cause)
        log.warning("Current PC: 0x%x", event.location)
        return event
