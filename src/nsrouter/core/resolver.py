"""
Resolver capability interfaces.

Four small abstract capabilities describe everything the rest of the
package needs from a name-service backend:

* [HostResolve][nsrouter.core.resolver.HostResolve] -- ``resolve_host(name)``
  returns an [IpList][nsrouter.models.ip_list.IpList] (A/AAAA style).
* [Resolve][nsrouter.core.resolver.Resolve] -- ``resolve(name)`` returns an
  [Address][nsrouter.models.address.Address] (SRV style, with priorities
  and weights).
* [HostSubscribe][nsrouter.core.resolver.HostSubscribe] and
  [Subscribe][nsrouter.core.resolver.Subscribe] -- long-lived async
  iterators of updates for the same two result types.

[Resolver][nsrouter.core.resolver.Resolver] combines all four and is what
the router's suffix and fallback slots require. Backends that can't push
updates inherit its default subscriptions, which resolve once through
[StreamOnce][nsrouter.core.combinators.StreamOnce] and then never update.
Backends that only support half of the interface can be completed with
``null_service_resolver()`` / ``null_host_resolver()``.

Note:
    Resolvers should do the minimum: a DNS backend only talks DNS and leaves
    static host tables and routing to other parts of the stack.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from nsrouter.models import Address, IpList, Name

from .exceptions import InvalidNameError, NoDefaultPortError


if TYPE_CHECKING:
    from .combinators import FrozenSubscriber, NullHostResolver, NullResolver


def coerce_name(name: Name | str) -> Name:
    """Return *name* as a [Name][nsrouter.models.name.Name].

    Strings are parsed as ``host`` or ``host:port``.

    Raises:
        InvalidNameError: If the string fails validation.
        TypeError: If *name* is neither a Name nor a string.
    """
    if isinstance(name, Name):
        return name
    if isinstance(name, str):
        try:
            return Name.parse(name)
        except ValueError as e:
            raise InvalidNameError(name, str(e)) from e
    raise TypeError(f"name must be a Name or a str, got {type(name).__name__}")


def require_port(name: Name) -> int:
    """Return the default port of *name* or raise ``NoDefaultPortError``."""
    if name.default_port is None:
        raise NoDefaultPortError(name)
    return name.default_port


class HostResolve(ABC):
    """Resolves a hostname into a list of IPs."""

    @abstractmethod
    async def resolve_host(self, name: Name) -> IpList:
        """Resolve *name* (port ignored) into an IpList."""

    def null_service_resolver(self) -> NullResolver:
        """Complete this host resolver with a ``resolve`` that never finds."""
        from .combinators import NullResolver

        return NullResolver(self)

    def frozen_subscriber(self) -> FrozenSubscriber:
        """Subscribe by resolving once and never updating."""
        from .combinators import FrozenSubscriber

        return FrozenSubscriber(self)


class Resolve(ABC):
    """Resolves a service name into a prioritised, weighted Address."""

    @abstractmethod
    async def resolve(self, name: Name) -> Address:
        """Resolve *name* into an Address."""

    def null_host_resolver(self) -> NullHostResolver:
        """Complete this resolver with a ``resolve_host`` that never finds."""
        from .combinators import NullHostResolver

        return NullHostResolver(self)

    def frozen_subscriber(self) -> FrozenSubscriber:
        """Subscribe by resolving once and never updating."""
        from .combinators import FrozenSubscriber

        return FrozenSubscriber(self)


class HostSubscribe(ABC):
    """Streams IpList updates for a hostname."""

    @abstractmethod
    def subscribe_host(self, name: Name) -> AsyncIterator[IpList]:
        """Return an async iterator of IpList updates for *name*."""


class Subscribe(ABC):
    """Streams Address updates for a service name."""

    @abstractmethod
    def subscribe(self, name: Name) -> AsyncIterator[Address]:
        """Return an async iterator of Address updates for *name*.

        By convention the stream never ends: consumers treat the end of a
        name stream as a shutdown signal.
        """


class Resolver(HostResolve, Resolve, HostSubscribe, Subscribe):
    """Full resolver capability: one-shot and streaming, hosts and services.

    Subclasses must implement ``resolve`` and ``resolve_host``. The default
    subscriptions emit one result (or error) and then stay pending forever;
    override them when the backend can push updates.
    """

    def subscribe_host(self, name: Name) -> AsyncIterator[IpList]:
        from .combinators import StreamOnce

        return StreamOnce(self.resolve_host(name))

    def subscribe(self, name: Name) -> AsyncIterator[Address]:
        from .combinators import StreamOnce

        return StreamOnce(self.resolve(name))
