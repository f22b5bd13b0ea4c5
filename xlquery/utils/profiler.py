"""Elapsed-time logging and aggregate timing for xlquery operations."""
from __future__ import annotations
from typing import Dict, List, Optional
import time
import logging
import contextlib
from dataclasses import dataclass

logger = logging.getLogger(__name__)

@dataclass
class ProfileStats:
    """Statistics for a profiled operation."""
    name: str
    calls: int = 0
    total_time: float = 0.0
    min_time: float = float('inf')
    max_time: float = 0.0

    @property
    def avg_time(self) -> float:
        return self.total_time / self.calls if self.calls > 0 else 0

class Profiler:
    """Times named operations.

    Every timed block logs its elapsed time at INFO. Aggregate statistics are
    only collected when ``enabled`` is set (``--profile``).
    """

    def __init__(self, enabled: bool = False, log: Optional[logging.Logger] = None):
        self.enabled = enabled
        self.log = log or logger
        self.stats: Dict[str, ProfileStats] = {}

    def record(self, name: str, elapsed: float) -> None:
        self.log.info("%s elapsed: %.2f ms", name, elapsed * 1000)
        if not self.enabled:
            return
        stat = self.stats.get(name)
        if stat is None:
            stat = self.stats[name] = ProfileStats(name=name)
        stat.calls += 1
        stat.total_time += elapsed
        stat.min_time = min(stat.min_time, elapsed)
        stat.max_time = max(stat.max_time, elapsed)

    @contextlib.contextmanager
    def profile(self, name: str):
        """Context manager timing a block of code."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(name, time.perf_counter() - start)

    def report(self) -> List[Dict[str, float]]:
        """Rows of aggregate statistics, slowest total first."""
        result = []
        for name, stat in sorted(self.stats.items(), key=lambda x: x[1].total_time, reverse=True):
            result.append({
                'name': name,
                'calls': stat.calls,
                'total_time': round(stat.total_time, 4),
                'avg_time': round(stat.avg_time, 4),
                'min_time': round(stat.min_time, 4),
                'max_time': round(stat.max_time, 4)
            })
        return result

    def print_report(self) -> None:
        """Print profiling statistics to the log."""
        if not self.enabled or not self.stats:
            return
        self.log.info("Performance Profile:")
        self.log.info("%-25s %10s %10s %10s %10s %10s",
                      "Operation", "Calls", "Total(s)", "Avg(s)", "Min(s)", "Max(s)")
        self.log.info("-" * 80)
        for entry in self.report():
            self.log.info("%-25s %10d %10.4f %10.4f %10.4f %10.4f",
                          entry['name'], entry['calls'], entry['total_time'],
                          entry['avg_time'], entry['min_time'], entry['max_time'])

# Global profiler instance
profiler = Profiler()
