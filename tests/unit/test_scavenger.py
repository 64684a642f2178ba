"""Unit tests for the hit-count-floor eviction policy."""

import pytest

from cachestore.scavenger import scavenge, select_victims
from cachestore.store import CacheRecord


def _records(**hits):
    return {
        key: CacheRecord(value=key, hits=count) for key, count in hits.items()
    }


# Test select_victims is pure and picks records under the floor
def test_select_victims_does_not_mutate():
    records = _records(a=0, b=3, c=2, d=7)
    assert select_victims(records, 3) == ["a", "c"]
    assert set(records) == {"a", "b", "c", "d"}


# Test scavenge removes exactly the records under the floor
@pytest.mark.parametrize("hit_min", [0, 1, 3, 5, 100])
def test_scavenge_eviction_law(hit_min):
    records = _records(a=0, b=1, c=3, d=4, e=10)
    before = {key: record.hits for key, record in records.items()}

    evicted = scavenge(records, hit_min)

    assert all(record.hits >= hit_min for record in records.values())
    assert all(before[key] < hit_min for key in evicted)
    assert set(evicted) | set(records) == set(before)


# Test scavenge on an empty record set
def test_scavenge_empty():
    records = {}
    assert scavenge(records, 3) == []
    assert records == {}
