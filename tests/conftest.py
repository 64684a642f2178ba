"""Shared stub storage providers and fixtures for cachestore tests."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from cachestore.memory import MemoryMonitor


class ItemProvider:
    """Async storage provider using the getItem/setItem naming style.

    Records every call in ``calls`` as (method, *args) tuples.
    """

    def __init__(self, data: Optional[dict[str, Any]] = None) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.calls: list[tuple[Any, ...]] = []

    @property
    def length(self) -> int:
        return len(self.data)

    async def getItem(self, id: str) -> Any:
        self.calls.append(("getItem", id))
        return self.data.get(id)

    async def setItem(self, id: str, value: Any) -> None:
        self.calls.append(("setItem", id, value))
        self.data[id] = value

    async def removeItem(self, id: str) -> None:
        self.calls.append(("removeItem", id))
        self.data.pop(id, None)

    async def delete(self, id: str) -> None:
        self.calls.append(("delete", id))
        self.data.pop(id, None)

    async def clear(self) -> None:
        self.calls.append(("clear",))
        self.data.clear()

    async def replace(self, id: str, value: Any) -> None:
        self.calls.append(("replace", id, value))
        self.data[id] = value

    def foo(self, suffix: str = "") -> tuple[str, Any]:
        self.calls.append(("foo", suffix))
        return ("foo" + suffix, self)

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == method]


class KeyValueProvider:
    """Synchronous provider using the get/set/delete/count naming style."""

    def __init__(self, data: Optional[dict[str, Any]] = None) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.calls: list[tuple[Any, ...]] = []

    def get(self, id: str) -> Any:
        self.calls.append(("get", id))
        return self.data.get(id)

    def set(self, id: str, value: Any) -> None:
        self.calls.append(("set", id, value))
        self.data[id] = value

    def delete(self, id: str) -> None:
        self.calls.append(("delete", id))
        self.data.pop(id, None)

    def clear(self) -> None:
        self.calls.append(("clear",))
        self.data.clear()

    def count(self) -> int:
        self.calls.append(("count",))
        return len(self.data)


class SequenceSampler:
    """Memory sampler returning queued readings, repeating the last one."""

    def __init__(self, *readings: float) -> None:
        self.readings = list(readings)

    def __call__(self) -> float:
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


@pytest.fixture
def calm_monitor() -> MemoryMonitor:
    """Monitor that never reports memory pressure."""
    return MemoryMonitor(lambda: 1000.0)


@pytest.fixture
def pressured_monitor() -> MemoryMonitor:
    """Monitor whose readings drop to 10% of the baseline after creation."""
    return MemoryMonitor(SequenceSampler(1000.0, 100.0))


@pytest.fixture
def item_provider() -> ItemProvider:
    return ItemProvider()


@pytest.fixture
def kv_provider() -> KeyValueProvider:
    return KeyValueProvider()
