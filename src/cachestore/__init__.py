"""
cachestore: memoizing cache facade for asynchronous key-value backends.
"""

from cachestore.capabilities import ProviderCapabilities
from cachestore.delegate import Delegate
from cachestore.errors import CacheStoreError, CapabilityError, MissingKeyError
from cachestore.memory import MemoryMonitor
from cachestore.options import CacheOptions
from cachestore.store import CacheRecord, CacheStore, create_cache

__version__ = "0.1.0"

# Version tuple for programmatic access (major, minor, patch)
VERSION = (0, 1, 0)

__all__ = [
    "__version__",
    "VERSION",
    # Cache
    "CacheStore",
    "CacheRecord",
    "create_cache",
    "CacheOptions",
    # Supporting mechanisms
    "Delegate",
    "MemoryMonitor",
    "ProviderCapabilities",
    # Errors
    "CacheStoreError",
    "CapabilityError",
    "MissingKeyError",
]
