"""
Unit tests for resolvers.mem module.

Tests:
- MemResolver host table, resolve() and resolve_host()
- StaticStream single value then pending forever
"""

import asyncio
from ipaddress import IPv4Address, IPv6Address

import pytest

from nsrouter.core import NameNotFoundError, NoDefaultPortError
from nsrouter.models import Address, IpList, Name, SocketAddress
from nsrouter.resolvers import MemResolver, StaticStream


@pytest.fixture
def mem() -> MemResolver:
    resolver = MemResolver()
    resolver.add_host("localhost", "127.0.0.1")
    resolver.add_host("ip6-localhost", IPv6Address("::1"))
    return resolver


# =============================================================================
# MemResolver
# =============================================================================


class TestMemResolverTable:
    """Tests for the host table."""

    def test_contains_name(self, mem: MemResolver) -> None:
        assert mem.contains_name("localhost") is True
        assert mem.contains_name("example.org") is False

    def test_get(self, mem: MemResolver) -> None:
        assert mem.get("localhost") == IPv4Address("127.0.0.1")
        assert mem.get("example.org") is None

    def test_len(self, mem: MemResolver) -> None:
        assert len(mem) == 2

    def test_later_registration_wins(self, mem: MemResolver) -> None:
        mem.add_host("localhost", "127.0.0.2")
        assert mem.get("localhost") == IPv4Address("127.0.0.2")

    def test_invalid_ip_string(self) -> None:
        with pytest.raises(ValueError):
            MemResolver().add_host("localhost", "not-an-ip")

    def test_invalid_ip_type(self) -> None:
        with pytest.raises(TypeError):
            MemResolver().add_host("localhost", 2130706433)  # type: ignore[arg-type]


class TestMemResolverResolve:
    """Tests for MemResolver resolution."""

    async def test_resolve_with_port(self, mem: MemResolver) -> None:
        result = await mem.resolve(Name.parse("localhost:8080"))
        assert result == Address.from_ip("127.0.0.1", 8080)

    async def test_resolve_ipv6(self, mem: MemResolver) -> None:
        result = await mem.resolve(Name.parse("ip6-localhost:443"))
        assert result.pick_one() == SocketAddress(IPv6Address("::1"), 443)

    async def test_resolve_requires_port(self, mem: MemResolver) -> None:
        with pytest.raises(NoDefaultPortError):
            await mem.resolve(Name("localhost"))

    async def test_resolve_unknown(self, mem: MemResolver) -> None:
        with pytest.raises(NameNotFoundError):
            await mem.resolve(Name.parse("example.org:80"))

    async def test_resolve_host(self, mem: MemResolver) -> None:
        assert await mem.resolve_host(Name("localhost")) == IpList((IPv4Address("127.0.0.1"),))

    async def test_resolve_host_unknown(self, mem: MemResolver) -> None:
        with pytest.raises(NameNotFoundError):
            await mem.resolve_host(Name("example.org"))

    async def test_trailing_dot_not_folded(self, mem: MemResolver) -> None:
        with pytest.raises(NameNotFoundError):
            await mem.resolve_host(Name("localhost."))

    async def test_subscribe_once(self, mem: MemResolver) -> None:
        stream = mem.subscribe(Name.parse("localhost:80"))
        assert await anext(stream) == Address.from_ip("127.0.0.1", 80)
        with pytest.raises(TimeoutError):
            await asyncio.wait_for(anext(stream), timeout=0.05)


# =============================================================================
# StaticStream
# =============================================================================


class TestStaticStream:
    """Tests for StaticStream."""

    async def test_socket_address(self) -> None:
        stream = StaticStream(SocketAddress.parse("127.0.0.1:7879"))
        first = await anext(stream)
        assert list(first.addresses_at(0)) == [SocketAddress.parse("127.0.0.1:7879")]
        with pytest.raises(TimeoutError):
            await asyncio.wait_for(anext(stream), timeout=0.05)

    async def test_address(self) -> None:
        address = Address.parse_list(["10.0.0.1:80", "10.0.0.2:80"])
        assert await anext(StaticStream(address)) is address

    async def test_iterable_of_socket_addresses(self) -> None:
        stream = StaticStream([SocketAddress.parse("10.0.0.1:80"), SocketAddress.parse("[::1]:80")])
        assert len((await anext(stream)).at(0)) == 2

    async def test_async_iteration(self) -> None:
        stream = StaticStream(SocketAddress.parse("127.0.0.1:80"))
        async for value in stream:
            assert value.pick_one() == SocketAddress.parse("127.0.0.1:80")
            break
