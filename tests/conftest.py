"""
Pytest configuration and shared fixtures for nsrouter tests.

Provides:
- Deterministic random generators for weighted selection
- Sample Name / Address / IpList values
- ``StubResolver``: a scriptable Resolver that records calls
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import AsyncIterator
from typing import Any

import pytest

from nsrouter.core import NameNotFoundError, Resolver
from nsrouter.models import Address, IpList, Name


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Helpers
# ============================================================================


class StubResolver(Resolver):
    """Resolver answering from fixed tables and recording every call.

    Missing entries raise ``NameNotFoundError``; a table value that is an
    exception instance is raised instead of returned.
    """

    def __init__(
        self,
        addresses: dict[str, Any] | None = None,
        hosts: dict[str, Any] | None = None,
        label: str = "stub",
    ) -> None:
        self.addresses = addresses or {}
        self.hosts = hosts or {}
        self.label = label
        self.calls: list[tuple[str, Name]] = []

    async def resolve(self, name: Name) -> Address:
        self.calls.append(("resolve", name))
        value = self.addresses.get(name.host)
        if value is None:
            raise NameNotFoundError(name)
        if isinstance(value, BaseException):
            raise value
        return value

    async def resolve_host(self, name: Name) -> IpList:
        self.calls.append(("resolve_host", name))
        value = self.hosts.get(name.host)
        if value is None:
            raise NameNotFoundError(name)
        if isinstance(value, BaseException):
            raise value
        return value

    def __repr__(self) -> str:
        return f"StubResolver({self.label})"


class QueueStream(AsyncIterator[Address]):
    """Async iterator fed manually through an ``asyncio.Queue``.

    Put an Address to emit it, an exception to raise it, or ``None`` to end
    the stream.
    """

    def __init__(self) -> None:
        self.queue: asyncio.Queue[Any] = asyncio.Queue()
        self.closed = False

    def __aiter__(self) -> QueueStream:
        return self

    async def __anext__(self) -> Address:
        item = await self.queue.get()
        if item is None:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item

    async def aclose(self) -> None:
        self.closed = True


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def rng() -> random.Random:
    """Seeded random generator for reproducible weighted picks."""
    return random.Random(12345)


@pytest.fixture
def sample_name() -> Name:
    return Name.parse("db.service.consul:5432")


@pytest.fixture
def sample_address() -> Address:
    return Address.parse_list(["127.0.0.1:80", "127.0.0.2:80"])


@pytest.fixture
def sample_ip_list() -> IpList:
    return IpList.parse_list(["10.0.0.1", "2001:db8::1"])


@pytest.fixture
def stub_resolver() -> StubResolver:
    return StubResolver(
        addresses={"db.service.consul": Address.parse_list(["10.0.0.5:5432"])},
        hosts={"db.service.consul": IpList.parse_list(["10.0.0.5"])},
    )


@pytest.fixture
def make_stub() -> type[StubResolver]:
    """Factory for ``StubResolver`` instances with custom tables."""
    return StubResolver


@pytest.fixture
def make_stream() -> type[QueueStream]:
    """Factory for manually fed ``QueueStream`` subscriptions."""
    return QueueStream
