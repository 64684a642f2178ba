"""Hit-count-floor eviction policy for in-memory cache records."""

from __future__ import annotations

from typing import Hashable, MutableMapping, Protocol


class HasHits(Protocol):
    hits: int


def select_victims(
    records: MutableMapping[Hashable, HasHits], hit_min: int
) -> list[Hashable]:
    """Identify records that fall below the hit floor.

    Args:
        records: Mapping of identifier to record.
        hit_min: Records with fewer hits than this are selected.

    Returns:
        Identifiers to evict, in iteration order.
    """
    return [key for key, record in records.items() if record.hits < hit_min]


def scavenge(
    records: MutableMapping[Hashable, HasHits], hit_min: int
) -> list[Hashable]:
    """Evict every record with fewer than hit_min hits, in place.

    After this returns, every remaining record has ``hits >= hit_min``.

    Returns:
        The evicted identifiers.
    """
    victims = select_victims(records, hit_min)
    for key in victims:
        del records[key]
    return victims
