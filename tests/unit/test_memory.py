"""Unit tests for MemoryMonitor."""

import math
from unittest.mock import MagicMock, patch

from conftest import SequenceSampler

from cachestore.memory import MemoryMonitor, available_memory

# --- Sampling ---


# Test available_memory reads psutil's available figure
def test_available_memory_uses_psutil():
    with patch("cachestore.memory.psutil.virtual_memory") as virtual_memory:
        virtual_memory.return_value = MagicMock(available=4096)
        assert available_memory() == 4096.0


# Test the system monitor samples a positive baseline
def test_system_monitor_baseline_is_positive():
    monitor = MemoryMonitor.system()
    assert monitor.introspectable
    assert monitor.baseline > 0


# Test the baseline is sampled once at construction
def test_baseline_sampled_once():
    sampler = MagicMock(side_effect=[1000.0, 900.0, 800.0])
    monitor = MemoryMonitor(sampler)
    assert monitor.baseline == 1000.0
    assert monitor.current() == 900.0
    assert monitor.current() == 800.0
    assert monitor.baseline == 1000.0


# --- Pressure ---


# Test no pressure while available memory stays near the baseline
def test_low_memory_false_above_floor():
    monitor = MemoryMonitor(SequenceSampler(1000.0, 500.0))
    assert monitor.ratio() == 0.5
    assert monitor.low_memory() is False


# Test pressure once available memory drops under the floor
def test_low_memory_true_below_floor():
    monitor = MemoryMonitor(SequenceSampler(1000.0, 100.0))
    assert monitor.low_memory() is True
    assert monitor.low_memory(floor=0.05) is False


# Test a monitor without introspection always reports pressure
def test_unavailable_monitor_always_low():
    monitor = MemoryMonitor.unavailable()
    assert not monitor.introspectable
    assert math.isinf(monitor.baseline)
    assert monitor.current() is None
    assert monitor.ratio() is None
    assert monitor.low_memory() is True
    assert monitor.low_memory(floor=0.0) is True


# Test a zero baseline is treated as pressure rather than dividing by zero
def test_zero_baseline_reports_pressure():
    monitor = MemoryMonitor(lambda: 0.0)
    assert monitor.ratio() is None
    assert monitor.low_memory() is True
