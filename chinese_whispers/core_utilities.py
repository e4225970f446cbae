"""
Core utilities shared across the clustering modules.
"""
import time
from collections import defaultdict
from contextlib import contextmanager


class TimingStats:
    """Wall-clock durations of the clustering phases, keyed by phase name"""
    def __init__(self, enabled=True):
        self.enabled = enabled
        self.durations = defaultdict(list)
        self._running = {}

    def reset(self):
        self.durations.clear()
        self._running.clear()

    def start(self, phase):
        if self.enabled:
            self._running[phase] = time.perf_counter()

    def end(self, phase):
        """Stop the timer for `phase`; returns the elapsed seconds or None if it was not started."""
        began = self._running.pop(phase, None)
        if began is None:
            return None
        elapsed = time.perf_counter() - began
        self.durations[phase].append(elapsed)
        return elapsed

    @contextmanager
    def timed(self, phase, verbose=False):
        """Context manager timing the enclosed block as `phase`."""
        self.start(phase)
        try:
            yield
        finally:
            elapsed = self.end(phase)
            if verbose and elapsed is not None:
                print(f"  [{phase}] completed in {elapsed:.4f} seconds")

    def total(self, phase):
        return sum(self.durations.get(phase, ()))

    def report(self):
        """One line per phase, slowest first."""
        lines = ["Timing Statistics:"]
        for phase in sorted(self.durations, key=self.total, reverse=True):
            runs = self.durations[phase]
            lines.append(f"  • {phase}: {self.total(phase):.4f}s over {len(runs)} call(s)")
        return "\n".join(lines)
