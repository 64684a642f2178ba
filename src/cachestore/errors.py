"""Exceptions raised by cachestore.

Failures raised by a storage provider are never wrapped: they propagate
to the caller of the cache operation unchanged.
"""

from __future__ import annotations


class CacheStoreError(Exception):
    """Base class for errors raised by the cache itself."""


class MissingKeyError(CacheStoreError, LookupError):
    """Raised by put() when no identifier can be derived from the data.

    Attributes:
        key_path: The configured dotted key path (None if unset).
        segment: The path segment that failed to resolve.
    """

    def __init__(
        self, key_path: str | None, segment: str | None = None
    ) -> None:
        self.key_path = key_path
        self.segment = segment
        if key_path is None:
            message = "No key available for put: no id given and no key_path"
        else:
            message = (
                f"No key available for put: '{segment}' of key path "
                f"'{key_path}' is missing"
            )
        super().__init__(message)


class CapabilityError(CacheStoreError, AttributeError):
    """Raised when the storage provider lacks a required capability.

    Attributes:
        operation: Cache-level operation name (read, write, delete, ...).
    """

    def __init__(self, operation: str, provider: object) -> None:
        self.operation = operation
        super().__init__(
            f"Storage provider {type(provider).__name__} has no "
            f"'{operation}' capability"
        )
