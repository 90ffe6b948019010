"""
In-memory resolvers and streams.

[MemResolver][nsrouter.resolvers.mem.MemResolver] resolves names from a
plain host table. It backs the router's exact-name entries and is handy in
tests or for built-in names such as ``localhost``.

[StaticStream][nsrouter.resolvers.mem.StaticStream] is a subscription that
yields one fixed Address and then never updates; use it where a
``resolver.subscribe(...)`` stream is expected but the address is known.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from ipaddress import IPv4Address, IPv6Address, ip_address

from nsrouter.core.combinators import pending_forever
from nsrouter.core.exceptions import NameNotFoundError
from nsrouter.core.resolver import Resolver, require_port
from nsrouter.models import Address, IpList, Name, SocketAddress
from nsrouter.models.address import IPAddress


class MemResolver(Resolver):
    """Resolver answering from an in-memory ``host -> IP`` table.

    Hosts are matched verbatim (no port, no trailing-dot folding).
    ``resolve`` requires the name to carry a default port and returns a
    single-entry Address; ``resolve_host`` returns a one-element IpList.

    Examples:
        ```python
        mem = MemResolver()
        mem.add_host("localhost", "127.0.0.1")
        await mem.resolve(Name.parse("localhost:80"))  # 127.0.0.1:80
        ```
    """

    def __init__(self) -> None:
        self._names: dict[str, IPAddress] = {}

    def add_host(self, name: str, address: str | IPv4Address | IPv6Address) -> None:
        """Register *name* (a bare host) as resolving to *address*.

        Raises:
            ValueError: If *address* is a string that isn't an IP address.
        """
        if isinstance(address, str):
            address = ip_address(address)
        elif not isinstance(address, IPv4Address | IPv6Address):
            raise TypeError(f"address must be an IP address, got {type(address).__name__}")
        self._names[name] = address

    def contains_name(self, name: str) -> bool:
        return name in self._names

    def get(self, name: str) -> IPAddress | None:
        return self._names.get(name)

    async def resolve(self, name: Name) -> Address:
        port = require_port(name)
        ip = self._names.get(name.host)
        if ip is None:
            raise NameNotFoundError(name)
        return Address.from_ip(ip, port)

    async def resolve_host(self, name: Name) -> IpList:
        ip = self._names.get(name.host)
        if ip is None:
            raise NameNotFoundError(name)
        return IpList((ip,))

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"MemResolver({len(self._names)} hosts)"


class StaticStream(AsyncIterator[Address]):
    """Subscription that yields one fixed Address and then waits forever.

    Accepts an [Address][nsrouter.models.address.Address], a single
    [SocketAddress][nsrouter.models.address.SocketAddress] or an iterable
    of socket addresses (one priority level, weight 0).
    """

    def __init__(self, address: Address | SocketAddress | Iterable[SocketAddress]) -> None:
        if isinstance(address, Address):
            self._address: Address | None = address
        elif isinstance(address, SocketAddress):
            self._address = Address.from_socket_address(address)
        else:
            self._address = Address.from_addresses(address)

    def __aiter__(self) -> StaticStream:
        return self

    async def __anext__(self) -> Address:
        if self._address is None:
            await pending_forever()
        address, self._address = self._address, None
        return address
