"""
Memory pressure sampling.

The monitor compares the memory currently available on the host with a
baseline sampled once, when the monitor is created. The baseline is never
refreshed, so the signal drifts as overall system usage changes over the
life of the process.

Sampling is a strategy injected at construction:

- MemoryMonitor.system(): psutil-backed reading of available memory.
- MemoryMonitor.unavailable(): host without memory introspection; the
  monitor then always reports pressure, so every miss considers
  scavenging.
- MemoryMonitor(sampler): any zero-argument callable returning bytes.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

import psutil

logger = logging.getLogger(__name__)

Sampler = Callable[[], float]

DEFAULT_FLOOR = 0.2


def available_memory() -> float:
    """Bytes of memory available to new allocations on this host."""
    return float(psutil.virtual_memory().available)


class MemoryMonitor:
    """Reports whether the host is short of memory relative to a baseline.

    Attributes:
        sampler: Callable returning available bytes, or None when the host
            cannot be introspected.
        baseline: Available bytes sampled at construction (infinite when
            there is no sampler).
    """

    def __init__(self, sampler: Optional[Sampler] = available_memory) -> None:
        self.sampler = sampler
        self.baseline = sampler() if sampler is not None else math.inf

    @classmethod
    def system(cls) -> MemoryMonitor:
        """Monitor backed by psutil's view of available host memory."""
        return cls(available_memory)

    @classmethod
    def unavailable(cls) -> MemoryMonitor:
        """Monitor for hosts that cannot report their memory."""
        return cls(None)

    @property
    def introspectable(self) -> bool:
        """Whether this monitor can measure host memory at all."""
        return self.sampler is not None

    def current(self) -> Optional[float]:
        """Sample available memory now, or None without a sampler."""
        if self.sampler is None:
            return None
        return self.sampler()

    def ratio(self) -> Optional[float]:
        """Current available memory as a fraction of the baseline.

        Returns:
            The ratio, or None when it cannot be computed.
        """
        current = self.current()
        if current is None or self.baseline <= 0:
            return None
        return current / self.baseline

    def low_memory(self, floor: float = DEFAULT_FLOOR) -> bool:
        """Check whether available memory has fallen below floor.

        Args:
            floor: Ratio of current to baseline memory under which the
                host counts as being under pressure.

        Returns:
            True when under pressure. Always True when the host cannot be
            introspected.
        """
        ratio = self.ratio()
        if ratio is None:
            return True
        if ratio < floor:
            logger.debug(
                f"Low memory: {ratio:.2%} of baseline (floor {floor:.0%})"
            )
            return True
        return False
