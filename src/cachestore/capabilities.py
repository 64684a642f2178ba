"""
Storage provider capability probing.

Providers are duck typed: any object exposing one of the method names
below for an operation can back a CacheStore. The concrete method used
for each operation is resolved once, when the store is constructed.

    Operation   Probe order
    ---------   -----------
    read        get_item, getItem, get
    write       set_item, setItem, set
    delete      remove_item, removeItem, del, delete
    clear       clear
    overwrite   replace
    size        numeric ``length`` attribute, count(), len(provider)

Provider methods may be coroutine functions or plain functions; results
are awaited only when they are awaitable.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Optional

from cachestore.errors import CapabilityError

logger = logging.getLogger(__name__)

READ_NAMES = ("get_item", "getItem", "get")
WRITE_NAMES = ("set_item", "setItem", "set")
DELETE_NAMES = ("remove_item", "removeItem", "del", "delete")
CLEAR_NAMES = ("clear",)
OVERWRITE_NAMES = ("replace",)

# Size strategies
SIZE_LENGTH = "length"
SIZE_COUNT = "count"
SIZE_LEN = "len"


def _first_callable(provider: Any, names: tuple[str, ...]) -> Optional[str]:
    """Return the first name in names that is callable on provider."""
    for name in names:
        if callable(getattr(provider, name, None)):
            return name
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


async def resolve(result: Any) -> Any:
    """Await result if the provider returned an awaitable."""
    if inspect.isawaitable(result):
        return await result
    return result


@dataclass(frozen=True)
class ProviderCapabilities:
    """Method names resolved for each operation of one provider.

    A field is None when the provider exposes no matching capability.

    Attributes:
        provider: The storage provider the names were resolved against.
        read: Method used to read a value.
        write: Method used to write a value.
        delete: Method used to delete a value.
        clear: Method used to drop every value.
        overwrite: Method used to replace an existing value.
        size: Size strategy, one of 'length', 'count' or 'len'.
    """

    provider: Any
    read: Optional[str] = None
    write: Optional[str] = None
    delete: Optional[str] = None
    clear: Optional[str] = None
    overwrite: Optional[str] = None
    size: Optional[str] = None

    @classmethod
    def probe(cls, provider: Any) -> ProviderCapabilities:
        """Inspect provider and resolve one method per operation.

        Args:
            provider: Any object following the storage provider contract.

        Returns:
            The resolved capabilities.
        """
        if _is_number(getattr(provider, "length", None)):
            size: Optional[str] = SIZE_LENGTH
        elif callable(getattr(provider, "count", None)):
            size = SIZE_COUNT
        elif hasattr(type(provider), "__len__"):
            size = SIZE_LEN
        else:
            size = None

        capabilities = cls(
            provider=provider,
            read=_first_callable(provider, READ_NAMES),
            write=_first_callable(provider, WRITE_NAMES),
            delete=_first_callable(provider, DELETE_NAMES),
            clear=_first_callable(provider, CLEAR_NAMES),
            overwrite=_first_callable(provider, OVERWRITE_NAMES),
            size=size,
        )
        logger.debug(
            f"Resolved capabilities for {type(provider).__name__}: "
            f"{capabilities.summary()}"
        )
        return capabilities

    def summary(self) -> dict[str, Optional[str]]:
        """Operation to method name mapping, for diagnostics."""
        return {
            "read": self.read,
            "write": self.write,
            "delete": self.delete,
            "clear": self.clear,
            "overwrite": self.overwrite,
            "size": self.size,
        }

    def supports(self, operation: str) -> bool:
        """Check whether the provider supports a cache operation."""
        return self.summary().get(operation) is not None

    async def call(self, operation: str, *args: Any) -> Any:
        """Invoke the provider method resolved for operation.

        Args:
            operation: One of read, write, delete, clear or overwrite.
            *args: Arguments passed through to the provider.

        Returns:
            The provider's result, awaited if necessary.

        Raises:
            CapabilityError: If the provider lacks the capability.
        """
        name = getattr(self, operation)
        if name is None:
            raise CapabilityError(operation, self.provider)
        return await resolve(getattr(self.provider, name)(*args))

    async def size_of(self) -> int:
        """Number of entries the provider reports holding.

        Raises:
            CapabilityError: If the provider cannot report its size.
        """
        if self.size == SIZE_LENGTH:
            return self.provider.length
        if self.size == SIZE_COUNT:
            return await resolve(self.provider.count())
        if self.size == SIZE_LEN:
            return len(self.provider)
        raise CapabilityError("size", self.provider)
