"""
Name router: picks, per name, which resolver answers.

A [Router][nsrouter.resolvers.router.Router] is a static dispatch table
built once with a [RouterBuilder][nsrouter.resolvers.router.RouterBuilder]
(or from a [RouterConfig][nsrouter.resolvers.configs.RouterConfig]). Given a
name it tries, in order:

1. an exact host entry, answered from memory with the name's default port;
2. the whole host registered as a suffix;
3. each shorter suffix, scanning dot positions left to right, so the
   longest registered suffix wins;
4. the fallback resolver, if any.

Anything else fails with
[NameNotFoundError][nsrouter.core.exceptions.NameNotFoundError]. Once a
resolver is chosen its errors propagate unchanged: there is no retry on a
later tier.

The router is itself a full [Resolver][nsrouter.core.resolver.Resolver], so
routers can be nested inside other routers' suffix slots.

Examples:
    ```python
    router = (
        RouterBuilder()
        .add_ip("localhost", "127.0.0.1")
        .add_suffix("consul", DnsResolver(nameservers=["127.0.0.1"], port=8600))
        .add_default(SystemResolver())
        .build()
    )
    address = await router.resolve("web.service.consul")
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from ipaddress import IPv4Address, IPv6Address, ip_address
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, NoReturn, Self

from pydantic import ValidationError

from nsrouter.core.combinators import StreamOnce
from nsrouter.core.exceptions import ConfigurationError, NameNotFoundError
from nsrouter.core.logger import Logger
from nsrouter.core.metrics import record_route
from nsrouter.core.resolver import Resolver, coerce_name
from nsrouter.core.yaml import load_yaml
from nsrouter.utils.dns import build_backend

from .configs import RouterConfig
from .mem import MemResolver


if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping
    from pathlib import Path

    from nsrouter.models import Address, IpList, Name
    from nsrouter.models.address import IPAddress


class RouteKind(StrEnum):
    """Which tier of the router answered a name."""

    EXACT = "exact"
    SUFFIX = "suffix"
    FALLBACK = "fallback"
    UNROUTED = "unrouted"


@dataclass(frozen=True, slots=True)
class Route:
    """A routing decision.

    Attributes:
        kind: The tier that matched.
        resolver: The resolver that will answer, ``None`` when unrouted.
        suffix: The matching suffix for ``SUFFIX`` routes.
    """

    kind: RouteKind
    resolver: Resolver | None = None
    suffix: str | None = None


async def _not_found(name: Name) -> NoReturn:
    raise NameNotFoundError(name)


class Router(Resolver):
    """Read-only dispatch table resolving names through other resolvers.

    Instances are created by
    [RouterBuilder.build()][nsrouter.resolvers.router.RouterBuilder.build];
    the tables are never modified afterwards, so one router may be shared
    by any number of tasks.

    All public methods accept a [Name][nsrouter.models.name.Name] or a
    ``"host[:port]"`` string. Strings that fail validation raise
    [InvalidNameError][nsrouter.core.exceptions.InvalidNameError].

    Note:
        Hosts are matched exactly as written: the fully qualified
        ``"localhost."`` does not match an exact entry for ``"localhost"``.
    """

    def __init__(
        self,
        names: MemResolver,
        suffixes: Mapping[str, Resolver],
        fallback: Resolver | None = None,
    ) -> None:
        self._names = names
        self._suffixes: Mapping[str, Resolver] = MappingProxyType(dict(suffixes))
        self._fallback = fallback
        self._logger = Logger("nsrouter.router")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: RouterConfig) -> Router:
        """Build a router from a validated configuration."""
        return RouterBuilder.from_config(config).build()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Router:
        """Build a router from a configuration dictionary.

        Raises:
            ConfigurationError: If *data* fails validation.
        """
        try:
            config = RouterConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"invalid router configuration: {e}") from e
        return cls.from_config(config)

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> Router:
        """Build a router from a YAML configuration file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the YAML is malformed or fails validation.
        """
        return cls.from_dict(load_yaml(config_path))

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def names(self) -> MemResolver:
        return self._names

    @property
    def suffixes(self) -> Mapping[str, Resolver]:
        return self._suffixes

    @property
    def fallback(self) -> Resolver | None:
        return self._fallback

    def route(self, name: Name | str) -> Route:
        """Return the routing decision for *name* without resolving it."""
        host = coerce_name(name).host
        if self._names.contains_name(host):
            return Route(RouteKind.EXACT, self._names)
        resolver = self._suffixes.get(host)
        if resolver is not None:
            return Route(RouteKind.SUFFIX, resolver, host)
        pos = host.find(".")
        while pos >= 0:
            suffix = host[pos + 1 :]
            resolver = self._suffixes.get(suffix)
            if resolver is not None:
                return Route(RouteKind.SUFFIX, resolver, suffix)
            pos = host.find(".", pos + 1)
        if self._fallback is not None:
            return Route(RouteKind.FALLBACK, self._fallback)
        return Route(RouteKind.UNROUTED)

    def _dispatch(self, method: str, name: Name) -> Route:
        route = self.route(name)
        record_route(method, route.kind)
        self._logger.debug(
            "route_selected", method=method, name=str(name), route=route.kind, suffix=route.suffix
        )
        return route

    # -------------------------------------------------------------------------
    # Resolver interface
    # -------------------------------------------------------------------------

    async def resolve(self, name: Name | str) -> Address:
        name = coerce_name(name)
        resolver = self._dispatch("resolve", name).resolver
        if resolver is None:
            raise NameNotFoundError(name)
        return await resolver.resolve(name)

    async def resolve_host(self, name: Name | str) -> IpList:
        name = coerce_name(name)
        resolver = self._dispatch("resolve_host", name).resolver
        if resolver is None:
            raise NameNotFoundError(name)
        return await resolver.resolve_host(name)

    def subscribe(self, name: Name | str) -> AsyncIterator[Address]:
        name = coerce_name(name)
        resolver = self._dispatch("subscribe", name).resolver
        if resolver is None:
            return StreamOnce(_not_found(name))
        return resolver.subscribe(name)

    def subscribe_host(self, name: Name | str) -> AsyncIterator[IpList]:
        name = coerce_name(name)
        resolver = self._dispatch("subscribe_host", name).resolver
        if resolver is None:
            return StreamOnce(_not_found(name))
        return resolver.subscribe_host(name)

    def __repr__(self) -> str:
        return (
            f"Router(names={len(self._names)}, suffixes={sorted(self._suffixes)}, "
            f"fallback={self._fallback!r})"
        )


class RouterBuilder:
    """Mutable builder for [Router][nsrouter.resolvers.router.Router].

    Every method returns the builder so calls can be chained. The builder
    may keep being used after ``build()``; routers already built are not
    affected.
    """

    def __init__(self) -> None:
        self._hosts: dict[str, IPAddress] = {}
        self._suffixes: dict[str, Resolver] = {}
        self._fallback: Resolver | None = None

    @classmethod
    def from_config(cls, config: RouterConfig) -> Self:
        """Create a builder populated from *config*, instantiating backends."""
        builder = cls()
        for host, ip in config.hosts.items():
            builder.add_ip(host, ip)
        for suffix, backend in config.suffixes.items():
            builder.add_suffix(suffix, build_backend(backend))
        if config.default is not None:
            builder.add_default(build_backend(config.default))
        return builder

    def add_ip(self, host: str, ip: str | IPv4Address | IPv6Address) -> Self:
        """Resolve *host* (matched exactly) to *ip*.

        Raises:
            ValueError: If *ip* is a string that isn't an IP address.
        """
        self._hosts[host] = ip_address(ip) if isinstance(ip, str) else ip
        return self

    def add_suffix(self, suffix: str, resolver: Resolver) -> Self:
        """Route names equal to or ending in ``.<suffix>`` to *resolver*.

        Registering the same suffix again replaces the earlier resolver.

        Raises:
            ValueError: If *suffix* is empty or starts with a dot.
            TypeError: If *resolver* is not a full Resolver.
        """
        if not suffix:
            raise ValueError("suffix must not be empty")
        if suffix.startswith("."):
            raise ValueError(f"suffix must be specified without leading dot: {suffix!r}")
        if not isinstance(resolver, Resolver):
            raise TypeError(
                f"resolver must be a Resolver, got {type(resolver).__name__}; "
                "complete partial resolvers with null_service_resolver(), "
                "null_host_resolver() or frozen_subscriber()"
            )
        self._suffixes[suffix] = resolver
        return self

    def add_default(self, resolver: Resolver) -> Self:
        """Use *resolver* for names matching no host or suffix."""
        if not isinstance(resolver, Resolver):
            raise TypeError(f"resolver must be a Resolver, got {type(resolver).__name__}")
        self._fallback = resolver
        return self

    def build(self) -> Router:
        """Freeze the current tables into a new Router."""
        names = MemResolver()
        for host, ip in self._hosts.items():
            names.add_host(host, ip)
        return Router(names, self._suffixes, self._fallback)
