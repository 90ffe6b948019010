"""Pure frozen dataclasses with zero I/O for names and resolved addresses.

The models layer is the foundation of the package. It has **no
dependencies** on any other nsrouter package -- only the Python standard
library. Every model uses ``@dataclass(frozen=True, slots=True)`` so values
can be cached and shared between tasks without copying.

Validation happens in ``__post_init__`` so invalid instances never escape
the constructor. Models raise plain ``ValueError`` / ``TypeError``; the
resolver layer translates name failures into
[InvalidNameError][nsrouter.core.exceptions.InvalidNameError].

Attributes:
    Name: Validated hostname with an optional default port.
    SocketAddress: IP address plus port.
    Address: Prioritised, weighted socket addresses with random selection,
        diffing and equality.
    WeightedSet: One priority level of an Address.
    AddressBuilder: Appends one priority level per call.
    IpList: Port-less IP list returned by host resolution.
    union_addresses: Merge the top level of several addresses.

See Also:
    [nsrouter.models.name][]: Name grammar and parsing.
    [nsrouter.models.address][]: Address, WeightedSet and weighted picks.
    [nsrouter.models.ip_list][]: IpList.
"""

from .address import (
    DEFAULT_RNG,
    Address,
    AddressBuilder,
    SocketAddress,
    WeightedSet,
    seed_default_rng,
    union_addresses,
)
from .ip_list import IpList
from .name import Name


__all__ = [
    "DEFAULT_RNG",
    "Address",
    "AddressBuilder",
    "IpList",
    "Name",
    "SocketAddress",
    "WeightedSet",
    "seed_default_rng",
    "union_addresses",
]
