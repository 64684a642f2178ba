"""Capability delegation from a host object to one of its attributes.

A Delegate exposes the union of two surfaces: everything the host defines,
and everything the host's delegate attribute defines. The host always
wins, so a cache can reimplement part of its backend's API while the rest
of the backend's API stays reachable through the cache object.

Example:
    >>> class Backend:
    ...     def ping(self):
    ...         return "pong"
    >>> class Front:
    ...     def __init__(self):
    ...         self.backend = Backend()
    >>> Delegate(Front(), "backend").ping()
    'pong'
"""

from __future__ import annotations

from typing import Any, Iterable

_MISSING = object()


class Delegate:
    """Composite view of a host object and its delegate.

    Attribute reads resolve against the host first. Names the host does
    not define are looked up on ``getattr(host, delegate_attr)``, unless
    they are listed in ``blocked``, in which case None is returned.

    Methods fetched from the delegate are bound to the delegate, so they
    run against the backend's own state wherever they are called from.
    Attribute writes are not forwarded; write through ``.host`` instead.

    Two kinds of names never reach the delegate:

    - ``host`` and ``delegate`` are the wrapper's own properties; reach a
      provider attribute of the same name through ``.delegate``.
    - Special methods (``len()``, ``in``, iteration, ...) are looked up on
      the type and bypass attribute forwarding; call them on ``.host`` or
      ``.delegate`` explicitly.

    Attributes:
        host: The wrapped host object.
        delegate: The host's current delegate object.
    """

    __slots__ = ("_host", "_delegate_attr", "_blocked")

    def __init__(
        self,
        host: Any,
        delegate_attr: str,
        blocked: Iterable[str] = (),
    ) -> None:
        self._host = host
        self._delegate_attr = delegate_attr
        self._blocked = frozenset(blocked)

    @property
    def host(self) -> Any:
        """The host object whose attributes take precedence."""
        return self._host

    @property
    def delegate(self) -> Any:
        """The object unresolved attribute reads are forwarded to."""
        return getattr(self._host, self._delegate_attr)

    def __getattr__(self, name: str) -> Any:
        # Slots not yet assigned (copy, unpickling)
        if name in Delegate.__slots__:
            raise AttributeError(name)
        value = getattr(self._host, name, _MISSING)
        if value is not _MISSING:
            return value
        if name in self._blocked:
            return None
        value = getattr(self.delegate, name, _MISSING)
        if value is _MISSING:
            raise AttributeError(
                f"Neither {type(self._host).__name__} nor its "
                f"'{self._delegate_attr}' define '{name}'"
            )
        return value

    def __dir__(self) -> list[str]:
        forwarded = set(dir(self.delegate)) - self._blocked
        return sorted(set(dir(self._host)) | forwarded)

    def __repr__(self) -> str:
        return (
            f"Delegate({self._host!r}, {self._delegate_attr!r}, "
            f"delegate={self.delegate!r})"
        )
