"""
Prioritised, weighted socket addresses returned by name resolution.

An [Address][nsrouter.models.address.Address] is an ordered sequence of
priority levels. Level 0 holds the preferred endpoints; lower levels are
fallbacks. Each level is a [WeightedSet][nsrouter.models.address.WeightedSet]
of ``(weight, SocketAddress)`` pairs, where the weight drives the random
distribution of [pick_one()][nsrouter.models.address.WeightedSet.pick_one].

Addresses are immutable, so a resolver can cache one and hand the same
object to any number of consumers. New values are assembled with
[AddressBuilder][nsrouter.models.address.AddressBuilder] or one of the
``Address.from_*`` factories.

Note:
    Random selection never touches the global ``random`` module state. Pass
    a seeded ``random.Random`` as ``rng`` for reproducible picks, or reseed
    the process-wide [DEFAULT_RNG][nsrouter.models.address.DEFAULT_RNG]
    with [seed_default_rng()][nsrouter.models.address.seed_default_rng].

See Also:
    [nsrouter.models.ip_list.IpList][nsrouter.models.ip_list.IpList]: The
        port-less counterpart returned by host resolution.
    [nsrouter.core.union][nsrouter.core.union]: Stream merge built on
        [union_addresses()][nsrouter.models.address.union_addresses].
"""

from __future__ import annotations

import random
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Self

from ._validation import validate_instance, validate_port, validate_weight


IPAddress = IPv4Address | IPv6Address
Weight = int
WeightedPair = tuple[Weight, "SocketAddress"]

# Process-wide generator used when callers don't inject their own.
DEFAULT_RNG = random.Random()  # noqa: S311


def seed_default_rng(seed: int | str | bytes | None) -> None:
    """Reseed the process-wide generator used by ``pick_one()``."""
    DEFAULT_RNG.seed(seed)


@dataclass(frozen=True, slots=True)
class SocketAddress:
    """An IP address and a port, the unit stored inside an Address.

    Attributes:
        ip: IPv4 or IPv6 address.
        port: Port number (0-65535).

    Examples:
        ```python
        SocketAddress.parse("127.0.0.1:80")   # SocketAddress(ip=IPv4Address('127.0.0.1'), port=80)
        str(SocketAddress.parse("[::1]:443"))  # '[::1]:443'
        ```
    """

    ip: IPAddress
    port: int

    def __post_init__(self) -> None:
        if isinstance(self.ip, str):
            object.__setattr__(self, "ip", ip_address(self.ip))
        validate_instance(self.ip, (IPv4Address, IPv6Address), "ip")
        validate_port(self.port, "port")

    @classmethod
    def parse(cls, value: str) -> Self:
        """Parse ``a.b.c.d:port`` or ``[v6]:port``.

        Raises:
            ValueError: If the string is not a valid socket address.
        """
        host, sep, port_text = value.strip().rpartition(":")
        if not sep or not port_text.isdigit():
            raise ValueError(f"Invalid socket address: {value!r}")
        if host.startswith("[") and host.endswith("]"):
            ip = ip_address(host[1:-1])
            if ip.version != 6:
                raise ValueError(f"Invalid socket address: {value!r}")
        else:
            ip = ip_address(host)
            if ip.version != 4:
                raise ValueError(f"IPv6 socket address must be bracketed: {value!r}")
        return cls(ip, int(port_text))

    def to_tuple(self) -> tuple[str, int]:
        """Return ``(host, port)`` suitable for ``asyncio.open_connection``."""
        return (str(self.ip), self.port)

    def __str__(self) -> str:
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


def _pick_weighted(
    entries: tuple[WeightedPair, ...], rng: random.Random | None
) -> SocketAddress | None:
    if not entries:
        return None
    rng = DEFAULT_RNG if rng is None else rng
    total = sum(weight for weight, _ in entries)
    if total == 0:
        # All addresses are equal
        return rng.choice(entries)[1]
    n = rng.randrange(total)
    for weight, addr in entries:
        if n < weight:
            return addr
        n -= weight
    raise AssertionError(f"weighted pick fell through: total={total}")


@dataclass(frozen=True, slots=True, eq=False)
class WeightedSet:
    """Addresses sharing one priority level, each with a selection weight.

    Equality is order-independent: two sets are equal when they hold the
    same multiset of ``(weight, address)`` pairs.
    """

    entries: tuple[WeightedPair, ...] = ()

    def pick_one(self, rng: random.Random | None = None) -> SocketAddress | None:
        """Select one address according to the weights.

        If every weight is zero, all entries are equally likely. Otherwise
        an entry with weight ``w`` is returned with probability
        ``w / total``; zero-weight entries are then never picked.

        Args:
            rng: Random source. Defaults to
                [DEFAULT_RNG][nsrouter.models.address.DEFAULT_RNG].

        Returns:
            The chosen address, or ``None`` if the set is empty.
        """
        return _pick_weighted(self.entries, rng)

    def addresses(self) -> Iterator[SocketAddress]:
        """Iterate over the addresses, discarding weights."""
        return (addr for _, addr in self.entries)

    def items(self) -> Iterator[WeightedPair]:
        """Iterate over ``(weight, address)`` pairs in stored order."""
        return iter(self.entries)

    def compare_addresses(
        self, other: WeightedSet
    ) -> tuple[list[SocketAddress], list[SocketAddress]]:
        """Find which addresses were removed and which were added.

        Weights are ignored. Both lists keep first-seen order and contain
        no duplicates.

        Args:
            other: The newer set.

        Returns:
            ``(removed, added)``: addresses only in ``self`` and addresses
            only in ``other``.
        """
        mine = dict.fromkeys(self.addresses())
        theirs = dict.fromkeys(other.addresses())
        removed = [addr for addr in mine if addr not in theirs]
        added = [addr for addr in theirs if addr not in mine]
        return removed, added

    def __iter__(self) -> Iterator[SocketAddress]:
        return self.addresses()

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, item: object) -> bool:
        return any(addr == item for _, addr in self.entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightedSet):
            return NotImplemented
        return len(self.entries) == len(other.entries) and Counter(self.entries) == Counter(
            other.entries
        )

    def __hash__(self) -> int:
        return hash(frozenset(Counter(self.entries).items()))


@dataclass(frozen=True, slots=True, eq=False)
class Address:
    """Immutable result of service resolution.

    Holds priority levels from highest (index 0) to lowest. Build one with
    [AddressBuilder][nsrouter.models.address.AddressBuilder] when a backend
    reports priorities and weights, or with the ``from_*`` factories for the
    common single-level case (every weight ``0``).

    Attributes:
        levels: Priority levels, each a tuple of ``(weight, SocketAddress)``.

    Examples:
        ```python
        addr = Address.parse_list(["127.0.0.1:80", "10.0.0.1:80"])
        addr.pick_one()             # one of the two, uniformly
        [str(a) for a in addr.at(0)]  # ['127.0.0.1:80', '10.0.0.1:80']
        addr.at(5)                  # WeightedSet(entries=())
        ```
    """

    levels: tuple[tuple[WeightedPair, ...], ...] = ()
    _sets: tuple[WeightedSet, ...] = field(default=(), init=False, repr=False)

    def __post_init__(self) -> None:
        levels = tuple(tuple(level) for level in self.levels)
        for level in levels:
            for pair in level:
                weight, addr = pair
                validate_weight(weight, "weight")
                validate_instance(addr, SocketAddress, "address")
        object.__setattr__(self, "levels", levels)
        object.__setattr__(self, "_sets", tuple(WeightedSet(level) for level in levels))

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls) -> Self:
        """Return an address with no priority levels."""
        return cls(())

    @classmethod
    def from_socket_address(cls, addr: SocketAddress) -> Self:
        """Wrap a single socket address (weight 0)."""
        return cls((((0, addr),),))

    @classmethod
    def from_ip(cls, ip: IPAddress | str, port: int) -> Self:
        """Wrap a single IP and port (weight 0)."""
        return cls.from_socket_address(SocketAddress(ip_address(ip), port))

    @classmethod
    def from_addresses(cls, addresses: Iterable[SocketAddress]) -> Self:
        """Put all *addresses* in a single level with weight 0 (no level if empty)."""
        level = tuple((0, addr) for addr in addresses)
        return cls((level,) if level else ())

    @classmethod
    def parse_list(cls, values: Iterable[str]) -> Self:
        """Parse socket address strings into a single-level address.

        Mostly useful in tests and static configuration.

        Raises:
            ValueError: If any item is not a valid socket address.
        """
        return cls.from_addresses(SocketAddress.parse(value) for value in values)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def pick_one(self, rng: random.Random | None = None) -> SocketAddress | None:
        """Select one address from the highest priority level.

        The choice is stateless: it can't know that level 0 is unreachable,
        so falling back to lower levels is left to the caller.

        Returns:
            The chosen address, or ``None`` if the address is empty.
        """
        return self.at(0).pick_one(rng)

    def at(self, priority: int) -> WeightedSet:
        """Return the set at *priority*, or an empty set if there is none.

        Original priority values are not kept; levels are contiguous and
        ``at(0)`` is always the highest priority present.
        """
        if 0 <= priority < len(self._sets):
            return self._sets[priority]
        return WeightedSet()

    def addresses_at(self, priority: int) -> Iterator[SocketAddress]:
        """Iterate over the addresses at *priority*, discarding weights."""
        return self.at(priority).addresses()

    def __iter__(self) -> Iterator[WeightedSet]:
        return iter(self._sets)

    def __len__(self) -> int:
        return len(self._sets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return len(self._sets) == len(other._sets) and all(
            mine == theirs for mine, theirs in zip(self._sets, other._sets, strict=True)
        )

    def __hash__(self) -> int:
        return hash(self._sets)


class AddressBuilder:
    """Incrementally assemble an [Address][nsrouter.models.address.Address].

    Each call to [add_addresses()][nsrouter.models.address.AddressBuilder.add_addresses]
    appends a new level with lower priority than every level added before.
    All addresses of one priority must therefore be added in a single call.

    Examples:
        ```python
        addr = (
            AddressBuilder()
            .add_addresses([(10, SocketAddress.parse("10.0.0.1:80"))])
            .add_addresses([(0, SocketAddress.parse("10.0.1.1:80"))])
            .build()
        )
        len(addr)  # 2
        ```
    """

    def __init__(self) -> None:
        self._levels: list[tuple[WeightedPair, ...]] = []

    def add_addresses(self, items: Iterable[WeightedPair]) -> Self:
        """Append one priority level made of ``(weight, address)`` pairs."""
        self._levels.append(tuple(items))
        return self

    def build(self) -> Address:
        """Finish building; empty levels are dropped."""
        return Address(tuple(level for level in self._levels if level))


def union_addresses(addresses: Iterable[Address]) -> Address:
    """Merge the highest-priority addresses of several Address values.

    The result has a single level containing every input's level-0
    addresses, deduplicated in first-seen order. Priorities and weights of
    the inputs are discarded and every entry gets weight ``0`` (equal
    probability).

    Args:
        addresses: Address values to merge.

    Returns:
        A single-level Address (empty if no input had any address).
    """
    seen: dict[SocketAddress, None] = {}
    for address in addresses:
        seen.update(dict.fromkeys(address.addresses_at(0)))
    return Address.from_addresses(seen)
