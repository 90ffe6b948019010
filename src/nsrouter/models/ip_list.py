"""
List of IP addresses returned by host (A/AAAA) resolution.

[IpList][nsrouter.models.ip_list.IpList] plays the role of
[Address][nsrouter.models.address.Address] for resolvers that only know
hostnames: no ports, no priorities, no weights. Combine it with a port via
[with_port()][nsrouter.models.ip_list.IpList.with_port] to get an Address.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Self

from ._validation import validate_instance
from .address import DEFAULT_RNG, Address, IPAddress, SocketAddress


@dataclass(frozen=True, slots=True)
class IpList:
    """Immutable, ordered list of IP addresses.

    Attributes:
        ips: The resolved addresses in the order the backend returned them.
    """

    ips: tuple[IPAddress, ...] = ()

    def __post_init__(self) -> None:
        ips = tuple(self.ips)
        for ip in ips:
            validate_instance(ip, (IPv4Address, IPv6Address), "ip")
        object.__setattr__(self, "ips", ips)

    @classmethod
    def parse_list(cls, values: Iterable[str]) -> Self:
        """Parse IP strings into an IpList.

        Raises:
            ValueError: If any item is not a valid IP address.
        """
        return cls(tuple(ip_address(value) for value in values))

    def pick_one(self, rng: random.Random | None = None) -> IPAddress | None:
        """Pick one IP uniformly, or ``None`` if the list is empty."""
        if not self.ips:
            return None
        return (DEFAULT_RNG if rng is None else rng).choice(self.ips)

    def with_port(self, port: int) -> Address:
        """Attach *port* to every IP, giving a single-level Address."""
        return Address.from_addresses(SocketAddress(ip, port) for ip in self.ips)

    def __iter__(self) -> Iterator[IPAddress]:
        return iter(self.ips)

    def __len__(self) -> int:
        return len(self.ips)
