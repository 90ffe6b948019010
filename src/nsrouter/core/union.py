"""
Merge several address subscriptions into one.

[union_stream()][nsrouter.core.union.union_stream] takes N independent
``AsyncIterator[Address]`` subscriptions (typically one per name in a
list of names) and returns a [Union][nsrouter.core.union.Union] that yields
the union of the latest value of every input each time any input updates.
Values are merged with
[union_addresses()][nsrouter.models.address.union_addresses], so the
result is a single priority level with weight ``0``.

Note:
    An input that ends keeps contributing its last known value and is
    simply not polled again. When every input has ended the union stays
    pending forever, like every other name stream.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable

from nsrouter.models import Address, union_addresses

from .combinators import pending_forever


class Union(AsyncIterator[Address]):
    """Async iterator over the union of several address subscriptions.

    Keeps one "last known Address" slot per input, initially empty. Each
    ``__anext__`` waits until at least one input produced a new value,
    stores every value produced meanwhile, and returns the union of all
    non-empty slots.

    An exception from any input is raised once from ``__anext__``; the
    union is then finished (remaining inputs are cancelled and further
    ``__anext__`` calls wait forever). Subscribe again to retry.

    The slot buffer belongs to the task iterating the union; a single
    Union must not be iterated from several tasks at once.
    """

    def __init__(self, streams: Iterable[AsyncIterator[Address]]) -> None:
        self._streams: list[AsyncIterator[Address]] = list(streams)
        self._buffer: list[Address | None] = [None] * len(self._streams)
        self._ended: list[bool] = [False] * len(self._streams)
        self._pending: dict[asyncio.Future[Address], int] = {}
        self._finished = False

    def __aiter__(self) -> Union:
        return self

    @property
    def buffer(self) -> tuple[Address | None, ...]:
        """Last known value of every input (``None`` until it emits)."""
        return tuple(self._buffer)

    def _arm(self) -> None:
        armed = set(self._pending.values())
        for index, stream in enumerate(self._streams):
            if not self._ended[index] and index not in armed:
                self._pending[asyncio.ensure_future(anext(stream))] = index

    async def __anext__(self) -> Address:
        if self._finished:
            await pending_forever()
        while True:
            self._arm()
            if not self._pending:
                # Every input has ended
                await pending_forever()
            done, _ = await asyncio.wait(self._pending, return_when=asyncio.FIRST_COMPLETED)
            changed = False
            for task in sorted(done, key=self._pending.__getitem__):
                index = self._pending.pop(task)
                try:
                    self._buffer[index] = task.result()
                except StopAsyncIteration:
                    self._ended[index] = True
                    continue
                except Exception:
                    self._finish()
                    raise
                changed = True
            if changed:
                return union_addresses(addr for addr in self._buffer if addr is not None)

    def _finish(self) -> None:
        self._finished = True
        for task in self._pending:
            task.cancel()
        self._pending.clear()

    async def aclose(self) -> None:
        """Cancel pending polls and close every input that supports it."""
        tasks = list(self._pending)
        self._finish()
        # Inputs can only be closed once their cancelled polls have unwound
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        for stream in self._streams:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()


def union_stream(streams: Iterable[AsyncIterator[Address]]) -> Union:
    """Return a stream of the union of the latest addresses of *streams*.

    Weights and priorities of the inputs are discarded; see
    [union_addresses()][nsrouter.models.address.union_addresses].
    """
    return Union(streams)
