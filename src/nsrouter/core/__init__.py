"""Core layer: resolver capabilities, stream combinators and infrastructure.

Sits between ``nsrouter.models`` and the concrete resolvers. It depends only
on the models layer and is depended upon by ``nsrouter.resolvers`` and
``nsrouter.utils``.

Attributes:
    Resolver: Combined capability (``resolve``, ``resolve_host``,
        ``subscribe``, ``subscribe_host``) required by router slots. See
        [Resolver][nsrouter.core.resolver.Resolver].
    StreamOnce: One-shot resolution exposed as a never-ending subscription.
    FrozenSubscriber, NullResolver, NullHostResolver: Adapters completing
        partial resolvers. See [nsrouter.core.combinators][].
    Union: Merge of several address subscriptions. See
        [union_stream()][nsrouter.core.union.union_stream].
    Logger: Structured logger supporting key=value and JSON output modes.
    ROUTED_REQUESTS_TOTAL: Prometheus counter of routing decisions.
    load_yaml: Safe YAML loading for router configuration files.

Examples:
    ```python
    from nsrouter.core import Resolver, StreamOnce
    from nsrouter.models import Address, IpList, Name

    class Static(Resolver):
        async def resolve(self, name: Name) -> Address:
            return Address.parse_list(["10.0.0.1:80"])

        async def resolve_host(self, name: Name) -> IpList:
            return IpList.parse_list(["10.0.0.1"])
    ```
"""

from .combinators import (
    FrozenSubscriber,
    NullHostResolver,
    NullResolver,
    StreamOnce,
    pending_forever,
)
from .exceptions import (
    ConfigurationError,
    InvalidNameError,
    NameNotFoundError,
    NameServiceError,
    NoDefaultPortError,
    ResolutionError,
    TemporaryError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .metrics import ROUTED_REQUESTS_TOTAL, record_route
from .resolver import (
    HostResolve,
    HostSubscribe,
    Resolve,
    Resolver,
    Subscribe,
    coerce_name,
    require_port,
)
from .union import Union, union_stream
from .yaml import load_yaml


__all__ = [
    "ROUTED_REQUESTS_TOTAL",
    "ConfigurationError",
    "FrozenSubscriber",
    "HostResolve",
    "HostSubscribe",
    "InvalidNameError",
    "Logger",
    "NameNotFoundError",
    "NameServiceError",
    "NoDefaultPortError",
    "NullHostResolver",
    "NullResolver",
    "ResolutionError",
    "Resolve",
    "Resolver",
    "StreamOnce",
    "StructuredFormatter",
    "Subscribe",
    "TemporaryError",
    "Union",
    "coerce_name",
    "format_kv_pairs",
    "load_yaml",
    "pending_forever",
    "record_route",
    "require_port",
    "union_stream",
]
