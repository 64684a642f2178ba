"""
CacheStore: in-process memoization in front of a storage provider.

The store keeps a record (value plus hit counter) per identifier. Reads
are served from the records when possible and otherwise fetched from the
storage provider and memoized. Writes go through to the provider.
Records with few hits are evicted (scavenged) when the global hit counter
passes a threshold or the host runs short of memory.

Use create_cache() rather than CacheStore() directly: with a provider it
returns a Delegate, so provider methods the store does not implement stay
callable on the cache object.

Example:
    >>> cache = create_cache(backend, {"keyPath": "user.id"})
    >>> await cache.put({"user": {"id": "u1"}})
    'u1'
    >>> await cache.get("u1")
    {'user': {'id': 'u1'}}
"""

from __future__ import annotations

import asyncio
import gc
import logging
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable, Mapping, Optional, Union

from cachestore import scavenger
from cachestore.capabilities import ProviderCapabilities
from cachestore.delegate import Delegate
from cachestore.errors import MissingKeyError
from cachestore.memory import MemoryMonitor
from cachestore.options import CacheOptions

logger = logging.getLogger(__name__)

OptionsArg = Union[CacheOptions, Mapping[str, Any], None]


@dataclass
class CacheRecord:
    """One in-memory cache entry.

    Attributes:
        value: Cached payload, None until first populated.
        hits: Number of reads served from this record.
        version: Bumped by every write, so provider reads started
            before the write are not memoized.
    """

    value: Any = None
    hits: int = 0
    version: int = field(default=0, repr=False)

    @property
    def populated(self) -> bool:
        """Whether the record holds a value that can serve a read."""
        return self.value is not None


class CacheStore:
    """Memoizing cache over an optional storage provider.

    Attributes:
        provider: Storage provider, or None for a purely in-memory cache.
        options: Resolved CacheOptions.
        records: Mapping of identifier to CacheRecord.
        hits: Cumulative hits across all records since the last reset.
        monitor: Memory pressure monitor.
        capabilities: Provider methods resolved at construction.
    """

    def __init__(
        self,
        provider: Any = None,
        options: OptionsArg = None,
        monitor: Optional[MemoryMonitor] = None,
    ) -> None:
        """Initialise CacheStore.

        Args:
            provider: Object following the storage provider contract.
            options: CacheOptions, or a mapping of option names.
            monitor: Memory monitor; defaults to MemoryMonitor.system().
        """
        self.provider = provider
        self.options = CacheOptions.resolve(options)
        self.records: dict[Hashable, CacheRecord] = {}
        self.hits = 0
        self.monitor = monitor if monitor is not None else MemoryMonitor()
        self.capabilities: Optional[ProviderCapabilities] = (
            ProviderCapabilities.probe(provider)
            if provider is not None
            else None
        )
        self._inflight: dict[Hashable, asyncio.Future[Any]] = {}

    @property
    def baseline(self) -> float:
        """Available memory sampled when the store was created."""
        return self.monitor.baseline

    def __repr__(self) -> str:
        provider = (
            type(self.provider).__name__
            if self.provider is not None
            else None
        )
        return (
            f"CacheStore(provider={provider}, records={len(self.records)}, "
            f"hits={self.hits})"
        )

    # ========================================================================
    # Reads
    # ========================================================================

    async def get(self, id: Hashable) -> Any:
        """Return the value for id, fetching it from the provider on a miss.

        A hit increments the record's and the store's hit counters. Before
        a miss is served, cold records are scavenged if the global hit
        counter exceeds scavenge_threshold or memory is low.

        Args:
            id: Identifier to read.

        Returns:
            The cached or provider value; None on a miss without provider.
        """
        record = self.records.get(id)
        if record is None:
            record = self.records[id] = CacheRecord()

        if record.populated:
            record.hits += 1
            self.hits += 1
            return record.value

        if self.hits > self.options.scavenge_threshold or self.low_memory():
            self.scavenge()
            # The record being served survives its own scavenge pass
            self.records.setdefault(id, record)

        if self.capabilities is None:
            return None

        logger.debug(f"Cache miss for {id!r}, reading from provider")
        return await self._load(self.capabilities, id, record)

    async def _load(
        self,
        capabilities: ProviderCapabilities,
        id: Hashable,
        record: CacheRecord,
    ) -> Any:
        """Read id from the provider and memoize it in record."""
        version = record.version
        if not self.options.coalesce_misses:
            value = await capabilities.call("read", id)
        else:
            pending = self._inflight.get(id)
            if pending is None:
                pending = asyncio.ensure_future(capabilities.call("read", id))
                self._inflight[id] = pending
                pending.add_done_callback(
                    lambda done: self._forget_inflight(id, done)
                )
            value = await asyncio.shield(pending)

        # Only memoize into the record the read started for, if unwritten
        if self.records.get(id) is record and record.version == version:
            record.value = value
        return value

    def _forget_inflight(
        self, id: Hashable, done: asyncio.Future[Any]
    ) -> None:
        if self._inflight.get(id) is done:
            del self._inflight[id]

    def _detach_reads(self, id: Optional[Hashable] = None) -> None:
        """Stop later misses from joining reads started before a change."""
        if id is None:
            self._inflight.clear()
        else:
            self._inflight.pop(id, None)

    async def count(self) -> int:
        """Number of entries.

        With a provider this is the provider's count, which may include
        entries never read through this cache. Without one it is the
        number of in-memory records.
        """
        if self.capabilities is not None:
            return await self.capabilities.size_of()
        return len(self.records)

    async def key(self, number: int) -> Optional[Hashable]:
        """In-memory identifier at insertion position number, or None."""
        if 0 <= number < len(self.records):
            return list(self.records)[number]
        return None

    # ========================================================================
    # Writes
    # ========================================================================

    async def set(self, id: Hashable, data: Any) -> Hashable:
        """Store data under id, writing through to the provider.

        A new record is created holding data. With a provider, an already
        existing record keeps its current value; use replace() to
        overwrite it. Without a provider the record is always updated.

        Returns:
            The identifier.
        """
        record = self.records.get(id)
        if record is None:
            record = self.records[id] = CacheRecord(value=data)
        else:
            record.version += 1
        self._detach_reads(id)

        if self.capabilities is not None:
            await self.capabilities.call("write", id, data)
        else:
            record.value = data
        return id

    async def replace(self, id: Hashable, data: Any) -> Hashable:
        """Overwrite the value of an existing record.

        Unknown identifiers are ignored. When the record exists and there
        is a provider, the provider's replace() is called as well.

        Returns:
            The identifier, whether or not anything was replaced.
        """
        record = self.records.get(id)
        if record is not None:
            record.value = data
            record.version += 1
            self._detach_reads(id)
            if self.capabilities is not None:
                await self.capabilities.call("overwrite", id, data)
        return id

    async def put(self, data: Any, id: Optional[Hashable] = None) -> Hashable:
        """Store data, deriving its identifier from the key path if needed.

        Args:
            data: Value to store.
            id: Explicit identifier; when None it is read from data by
                walking options.key_path.

        Returns:
            The identifier data was stored under.

        Raises:
            MissingKeyError: If id is None and cannot be derived.
        """
        if id is None:
            id = self.derive_key(data)
        return await self.set(id, data)

    def derive_key(self, data: Any) -> Hashable:
        """Walk options.key_path through data and return the value found.

        Mappings are indexed by key and other objects by attribute.

        Raises:
            MissingKeyError: If no key path is configured or a segment
                resolves to a missing or falsy value.
        """
        key_path = self.options.key_path
        if key_path is None:
            raise MissingKeyError(None)

        node = data
        for part in self.options.key_parts:
            if isinstance(node, Mapping):
                node = node.get(part)
            else:
                node = getattr(node, part, None)
            if not node:
                raise MissingKeyError(key_path, part)
        return node

    async def delete(self, id: Hashable) -> None:
        """Evict id from memory and delete it from the provider."""
        self.flush(id)
        if self.capabilities is not None:
            await self.capabilities.call("delete", id)

    async def clear(self) -> None:
        """Clear the provider, or the in-memory records if there is none.

        With a provider, in-memory records are left as they are; call
        flush() to drop them too.
        """
        self._detach_reads()
        for record in self.records.values():
            record.version += 1
        if self.capabilities is not None:
            await self.capabilities.call("clear")
        else:
            self.records = {}

    # Storage provider aliases, so a store can back another store
    getItem = get_item = get
    setItem = set_item = set
    removeItem = remove_item = delete

    # ========================================================================
    # Maintenance
    # ========================================================================

    def flush(self, id: Optional[Hashable] = None) -> None:
        """Drop one in-memory record, or all of them.

        Never touches the provider.
        """
        if id is not None:
            self.records.pop(id, None)
        else:
            self.records = {}
        self._detach_reads(id)
        self._collect()

    def scavenge(self, hit_min: Optional[int] = None) -> int:
        """Evict every in-memory record with fewer than hit_min hits.

        Args:
            hit_min: Hit floor, defaults to options.scavenge_hit_min.

        Returns:
            Number of records evicted.
        """
        if hit_min is None:
            hit_min = self.options.scavenge_hit_min
        evicted = scavenger.scavenge(self.records, hit_min)
        logger.debug(
            f"Scavenged {len(evicted)} record(s) below {hit_min} hits, "
            f"{len(self.records)} kept"
        )
        if self.options.reset_hits_on_scavenge:
            self.hits = 0
        self._collect()
        return len(evicted)

    def low_memory(self, floor: Optional[float] = None) -> bool:
        """Whether the host is under memory pressure.

        Args:
            floor: Ratio floor, defaults to options.low_memory_floor.
        """
        if floor is None:
            floor = self.options.low_memory_floor
        return self.monitor.low_memory(floor)

    def _collect(self) -> None:
        if self.options.collect_garbage:
            gc.collect()


# "del" is a keyword, so the provider-style alias is set by name
setattr(CacheStore, "del", CacheStore.delete)


def create_cache(
    provider: Any = None,
    options: OptionsArg = None,
    *,
    monitor: Optional[MemoryMonitor] = None,
    blocked: Iterable[str] = (),
) -> Union[CacheStore, Delegate]:
    """Create a cache, delegating to provider for anything it lacks.

    Args:
        provider: Storage provider, or None for an in-memory cache.
        options: CacheOptions, or a mapping of option names.
        monitor: Memory monitor; defaults to MemoryMonitor.system().
        blocked: Provider attribute names never forwarded.

    Returns:
        The bare CacheStore without a provider, otherwise a Delegate whose
        host is the store and whose delegate is the provider.
    """
    store = CacheStore(provider, options, monitor=monitor)
    if provider is None:
        return store
    return Delegate(store, "provider", blocked)
