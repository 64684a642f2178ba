"""Configuration model for CacheStore.

Options are resolved once when a store is constructed. Field names are
snake_case; the camelCase names used by JavaScript-era configuration
files (``scavengeThreshold``, ``keyPath``, ...) are accepted as aliases.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator


class CacheOptions(BaseModel):
    """Options controlling memoization and eviction.

    Attributes:
        scavenge_threshold: Cumulative hit count after which the next miss
            triggers a scavenge pass.
        key_path: Dotted path used by put() to derive an identifier.
        scavenge_hit_min: Default hit floor used by scavenge().
        low_memory_floor: Default available/baseline ratio under which the
            host is considered to be under memory pressure.
        reset_hits_on_scavenge: Reset the global hit counter after each
            scavenge pass.
        coalesce_misses: Share one provider read between concurrent misses
            for the same identifier.
        collect_garbage: Run a full garbage collection after flush() and
            scavenge().

    Example:
        >>> options = CacheOptions(keyPath="user.id")
        >>> options.key_path
        'user.id'
    """

    scavenge_threshold: int = Field(
        default=10000,
        gt=0,
        alias="scavengeThreshold",
        description="Global hit count after which misses trigger scavenging",
    )
    key_path: Optional[str] = Field(
        default=None,
        alias="keyPath",
        description="Dotted attribute path used to derive ids in put()",
    )
    scavenge_hit_min: int = Field(
        default=3,
        ge=0,
        alias="scavengeHitMin",
        description="Records with fewer hits are evicted by scavenge()",
    )
    low_memory_floor: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        alias="lowMemoryFloor",
        description="Available/baseline memory ratio signalling pressure",
    )
    reset_hits_on_scavenge: bool = Field(
        default=True,
        alias="resetHitsOnScavenge",
        description="Reset the global hit counter after a scavenge pass",
    )
    coalesce_misses: bool = Field(
        default=True,
        alias="coalesceMisses",
        description="Share one provider read between concurrent misses",
    )
    collect_garbage: bool = Field(
        default=False,
        alias="collectGarbage",
        description="Run gc.collect() after flush() and scavenge()",
    )

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("scavenge_threshold", mode="before")
    @classmethod
    def default_unset_threshold(cls, v: Any) -> Any:
        """Treat a null or zero threshold as 'use the default'."""
        if v is None or v == 0:
            return 10000
        return v

    @field_validator("key_path")
    @classmethod
    def validate_key_path(cls, v: Optional[str]) -> Optional[str]:
        """Reject key paths with empty segments such as 'a..b'."""
        if v is None:
            return v
        if not v or any(not part for part in v.split(".")):
            raise ValueError(f"key_path has an empty segment: {v!r}")
        return v

    @property
    def key_parts(self) -> list[str]:
        """The key path split into its segments."""
        return self.key_path.split(".") if self.key_path else []

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CacheOptions":
        """Create options from a plain mapping of snake or camel names."""
        return cls.model_validate(dict(data))

    @classmethod
    def resolve(
        cls, options: Union["CacheOptions", Mapping[str, Any], None]
    ) -> "CacheOptions":
        """Normalise the options argument accepted by CacheStore."""
        if options is None:
            return cls()
        if isinstance(options, CacheOptions):
            return options
        return cls.from_dict(options)
