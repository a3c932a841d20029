"""Running statistics of IMU-to-motor latency."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class LatencySnapshot:
    last_us: int
    min_us: int
    max_us: int
    mean_us: float
    stddev_us: float
    sample_count: int


class LatencyStats:
    """Welford running mean and population standard deviation of latencies.

    Zero latencies mean "not measured" and are ignored. Readers get a
    consistent snapshot from any thread.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._last_us = 0
            self._min_us = 0
            self._max_us = 0
            self._count = 0
            self._mean = 0.0
            self._m2 = 0.0
            self._snapshot: LatencySnapshot | None = None

    def update(self, latency_us: int) -> None:
        """Add one sample in microseconds; zero is ignored."""
        if latency_us == 0:
            return
        with self._lock:
            self._count += 1
            self._last_us = latency_us
            if self._count == 1:
                self._min_us = latency_us
                self._max_us = latency_us
                self._mean = float(latency_us)
                self._m2 = 0.0
            else:
                self._min_us = min(self._min_us, latency_us)
                self._max_us = max(self._max_us, latency_us)
                delta = latency_us - self._mean
                self._mean += delta / self._count
                self._m2 += delta * (latency_us - self._mean)

            variance = self._m2 / self._count if self._count > 1 else 0.0
            self._snapshot = LatencySnapshot(
                last_us=self._last_us,
                min_us=self._min_us,
                max_us=self._max_us,
                mean_us=self._mean,
                stddev_us=math.sqrt(variance),
                sample_count=self._count,
            )

    def snapshot(self) -> LatencySnapshot | None:
        """Return the latest statistics, or ``None`` before any sample."""
        with self._lock:
            return self._snapshot