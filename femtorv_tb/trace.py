"""
Trace sinks: receive one snapshot of all core signals per simulated time unit.

When the core runs inside an HDL simulator the simulator writes the waveform
itself and NullTrace is used. TraceRecorder keeps snapshots in memory for
Python-model runs and tests.
"""

from typing import Protocol


class TraceSink(Protocol):
    def dump(self, time, signals):
        """Record the signal levels at the given time."""

    def close(self):
        """Flush and release the sink."""


class NullTrace:
    def dump(self, time, signals):
        pass

    def close(self):
        pass


class TraceRecorder:
    """In-memory trace, ordered by time."""

    def __init__(self):
        self.snapshots = []
        self.closed = False

    def dump(self, time, signals):
        if self.snapshots and time <= self.snapshots[-1][0]:
            raise ValueError(f"trace time went backwards: {time} after {self.snapshots[-1][0]}")
        self.snapshots.append((time, dict(signals)))

    def close(self):
        self.closed = True

    def times(self):
        return [t for t, _ in self.snapshots]

    def levels(self, name):
        """Return the recorded levels of one signal, in time order."""
        return [signals[name] for _, signals in self.snapshots]

    def __len__(self):
        return len(self.snapshots)
