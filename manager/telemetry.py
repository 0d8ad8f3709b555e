from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict

logger = logging.getLogger(__name__)


@dataclass
class StageStats:
    count: int = 0
    failures: int = 0
    total_seconds: float = 0.0
    min_seconds: float = float("inf")
    max_seconds: float = 0.0

    def add(self, duration: float, failed: bool) -> None:
        self.count += 1
        self.total_seconds += duration
        self.min_seconds = min(self.min_seconds, duration)
        self.max_seconds = max(self.max_seconds, duration)
        if failed:
            self.failures += 1


class PerformanceMonitor:
    """Record model-call durations and failures per stage via context manager usage.

    Only running aggregates are kept, so a monitor that lives as long as the
    process holds constant state per stage. Generation requests run in
    worker threads, so all bookkeeping is guarded by a lock.
    """

    class _StageTimer:
        def __init__(self, monitor: PerformanceMonitor, stage: str) -> None:
            self._monitor = monitor
            self._stage = stage
            self._start: float | None = None

        def __enter__(self) -> PerformanceMonitor._StageTimer:
            self._start = time.perf_counter()
            return self

        def __exit__(self, exc_type, exc, exc_tb) -> None:
            end = time.perf_counter()
            duration = end - (self._start or end)
            self._monitor._record(self._stage, duration, failed=exc is not None)
            if exc:
                logger.warning("Stage %s failed after %.2fs: %s", self._stage, duration, exc)

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stages: Dict[str, StageStats] = {}

    def track(self, stage: str) -> PerformanceMonitor._StageTimer:
        return PerformanceMonitor._StageTimer(self, stage)

    def _record(self, stage: str, duration: float, failed: bool = False) -> None:
        with self._lock:
            self._stages.setdefault(stage, StageStats()).add(duration, failed)
        logger.debug("Stage %s duration %.2fs", stage, duration)

    def summary(self) -> Dict[str, Dict[str, float]]:
        snapshot: Dict[str, Dict[str, float]] = {}
        with self._lock:
            for stage, stats in self._stages.items():
                if not stats.count:
                    continue
                snapshot[stage] = {
                    "count": stats.count,
                    "failures": stats.failures,
                    "avg_seconds": stats.total_seconds / stats.count,
                    "min_seconds": stats.min_seconds,
                    "max_seconds": stats.max_seconds,
                }
        return snapshot
