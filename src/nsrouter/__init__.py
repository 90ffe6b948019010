r"""nsrouter -- Abstract name-service resolution and routing.

Applications ask for a [Name][nsrouter.models.name.Name] and receive an
[Address][nsrouter.models.address.Address]: socket addresses grouped by
priority and weight, once or as a stream of updates. A
[Router][nsrouter.resolvers.router.Router] decides per name which backend
answers (static hosts, DNS, the system resolver, another router).

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
             resolvers         Router, in-memory resolver
             /       \
          core       utils     Capabilities, combinators | DNS backends
             \       /
              models           Pure frozen value types (zero I/O)
```

Attributes:
    models: Name, SocketAddress, Address, WeightedSet, IpList.
    core: Resolver capabilities, StreamOnce and adapters, Union, exceptions,
        logging, metrics.
    utils: System and DNS backends.
    resolvers: MemResolver, StaticStream, Router and its configuration.

Note:
    For lightweight usage, import directly from subpackages::

        from nsrouter.models import Name
        from nsrouter.resolvers import RouterBuilder

    Top-level imports (``from nsrouter import Router``) use lazy loading
    and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("nsrouter")

__all__ = [
    "Address",
    "AddressBuilder",
    "DnsResolver",
    "IpList",
    "Logger",
    "MemResolver",
    "Name",
    "NameServiceError",
    "Resolver",
    "Router",
    "RouterBuilder",
    "RouterConfig",
    "SocketAddress",
    "StaticStream",
    "StreamOnce",
    "SystemResolver",
    "union_stream",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "Address": ("nsrouter.models", "Address"),
    "AddressBuilder": ("nsrouter.models", "AddressBuilder"),
    "IpList": ("nsrouter.models", "IpList"),
    "Name": ("nsrouter.models", "Name"),
    "SocketAddress": ("nsrouter.models", "SocketAddress"),
    "Logger": ("nsrouter.core", "Logger"),
    "NameServiceError": ("nsrouter.core", "NameServiceError"),
    "Resolver": ("nsrouter.core", "Resolver"),
    "StreamOnce": ("nsrouter.core", "StreamOnce"),
    "union_stream": ("nsrouter.core", "union_stream"),
    "DnsResolver": ("nsrouter.utils", "DnsResolver"),
    "SystemResolver": ("nsrouter.utils", "SystemResolver"),
    "MemResolver": ("nsrouter.resolvers", "MemResolver"),
    "Router": ("nsrouter.resolvers", "Router"),
    "RouterBuilder": ("nsrouter.resolvers", "RouterBuilder"),
    "RouterConfig": ("nsrouter.resolvers", "RouterConfig"),
    "StaticStream": ("nsrouter.resolvers", "StaticStream"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'nsrouter' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
