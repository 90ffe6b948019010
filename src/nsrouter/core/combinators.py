"""
Adapters returned by the helper methods of the resolver capabilities.

* [StreamOnce][nsrouter.core.combinators.StreamOnce] turns one pending
  resolution into a subscription that yields exactly one item and then
  waits forever.
* [FrozenSubscriber][nsrouter.core.combinators.FrozenSubscriber] makes any
  one-shot resolver subscribable through ``StreamOnce``.
* [NullResolver][nsrouter.core.combinators.NullResolver] and
  [NullHostResolver][nsrouter.core.combinators.NullHostResolver] complete a
  host-only or service-only resolver into a full
  [Resolver][nsrouter.core.resolver.Resolver] so it fits a router slot.

Warning:
    A ``StreamOnce`` never raises ``StopAsyncIteration``. Consumers that
    rely on "the stream ends" (``async for`` followed by more code) will
    hang; take the first item with ``anext()`` instead.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import AsyncIterator, Awaitable
from typing import Generic, NoReturn, TypeVar

from nsrouter.models import Address, IpList, Name

from .exceptions import NameNotFoundError
from .resolver import HostResolve, HostSubscribe, Resolve, Resolver, Subscribe


T = TypeVar("T")


async def pending_forever() -> NoReturn:
    """Wait until cancelled."""
    await asyncio.get_running_loop().create_future()
    raise AssertionError("pending_forever() future was resolved")


class StreamOnce(AsyncIterator[T], Generic[T]):
    """Async iterator that forwards one result and then never ends.

    The first ``__anext__`` waits for the wrapped awaitable and returns its
    value, or raises its exception. Every later ``__anext__`` stays pending
    until cancelled.

    The awaitable is started as a task on first use and awaited through
    ``asyncio.shield``, so a consumer that gives up waiting (for example
    with ``asyncio.wait_for``) can ask again and still get the result.

    Examples:
        ```python
        stream = StreamOnce(resolver.resolve(name))
        address = await anext(stream)   # the resolved value
        await anext(stream)             # pending forever
        ```
    """

    def __init__(self, awaitable: Awaitable[T]) -> None:
        self._awaitable: Awaitable[T] | None = awaitable
        self._task: asyncio.Future[T] | None = None
        self._finished = False

    def __aiter__(self) -> StreamOnce[T]:
        return self

    async def __anext__(self) -> T:
        if self._finished:
            await pending_forever()
        if self._task is None:
            assert self._awaitable is not None  # noqa: S101  # cleared only when finished
            self._task = asyncio.ensure_future(self._awaitable)
            self._awaitable = None
        task = self._task
        try:
            return await asyncio.shield(task)
        finally:
            if task.done():
                self._finished = True
                self._task = None

    async def aclose(self) -> None:
        """Stop the stream and cancel the wrapped resolution if it runs."""
        self._finished = True
        if self._task is not None:
            self._task.cancel()
            self._task = None
        elif inspect.iscoroutine(self._awaitable):
            self._awaitable.close()
        self._awaitable = None


class FrozenSubscriber(Resolver):
    """Resolver whose subscriptions resolve once and never update.

    Wraps a [Resolve][nsrouter.core.resolver.Resolve] and/or
    [HostResolve][nsrouter.core.resolver.HostResolve]; the half the wrapped
    object doesn't implement fails with ``NameNotFoundError``. Any native
    subscription of the wrapped object is deliberately ignored.
    """

    def __init__(self, resolver: Resolve | HostResolve) -> None:
        if not isinstance(resolver, Resolve | HostResolve):
            raise TypeError(
                f"resolver must implement Resolve or HostResolve, got {type(resolver).__name__}"
            )
        self._resolver = resolver

    @property
    def resolver(self) -> Resolve | HostResolve:
        return self._resolver

    async def resolve(self, name: Name) -> Address:
        if not isinstance(self._resolver, Resolve):
            raise NameNotFoundError(name)
        return await self._resolver.resolve(name)

    async def resolve_host(self, name: Name) -> IpList:
        if not isinstance(self._resolver, HostResolve):
            raise NameNotFoundError(name)
        return await self._resolver.resolve_host(name)

    def __repr__(self) -> str:
        return f"FrozenSubscriber({self._resolver!r})"


class NullResolver(Resolver):
    """Host resolver completed with a ``resolve`` that always fails.

    Lets a resolver that only maps hostnames to IPs sit in a router slot:
    ``resolve`` and ``subscribe`` report ``NameNotFoundError``, host
    methods are proxied (including a native ``subscribe_host``).
    """

    def __init__(self, resolver: HostResolve) -> None:
        if not isinstance(resolver, HostResolve):
            raise TypeError(f"resolver must implement HostResolve, got {type(resolver).__name__}")
        self._resolver = resolver

    async def resolve(self, name: Name) -> Address:
        raise NameNotFoundError(name)

    async def resolve_host(self, name: Name) -> IpList:
        return await self._resolver.resolve_host(name)

    def subscribe_host(self, name: Name) -> AsyncIterator[IpList]:
        if isinstance(self._resolver, HostSubscribe):
            return self._resolver.subscribe_host(name)
        return super().subscribe_host(name)

    def __repr__(self) -> str:
        return f"NullResolver({self._resolver!r})"


class NullHostResolver(Resolver):
    """Service resolver completed with a ``resolve_host`` that always fails.

    The inverse of [NullResolver][nsrouter.core.combinators.NullResolver].
    """

    def __init__(self, resolver: Resolve) -> None:
        if not isinstance(resolver, Resolve):
            raise TypeError(f"resolver must implement Resolve, got {type(resolver).__name__}")
        self._resolver = resolver

    async def resolve(self, name: Name) -> Address:
        return await self._resolver.resolve(name)

    async def resolve_host(self, name: Name) -> IpList:
        raise NameNotFoundError(name)

    def subscribe(self, name: Name) -> AsyncIterator[Address]:
        if isinstance(self._resolver, Subscribe):
            return self._resolver.subscribe(name)
        return super().subscribe(name)

    def __repr__(self) -> str:
        return f"NullHostResolver({self._resolver!r})"
