"""DNS resolution backends for the router.

Provides two [Resolver][nsrouter.core.resolver.Resolver] implementations
that plug into router suffix and fallback slots:

* [SystemResolver][nsrouter.utils.dns.SystemResolver] uses the operating
  system resolver (``socket.getaddrinfo``), delegated to a thread with
  ``asyncio.to_thread`` so the event loop is never blocked.
* [DnsResolver][nsrouter.utils.dns.DnsResolver] talks DNS directly through
  the ``dnspython`` async resolver and additionally understands SRV records,
  mapping SRV priorities and weights onto
  [Address][nsrouter.models.address.Address] priority levels.

Both backends resolve once per request. Their subscriptions are the
``StreamOnce`` defaults inherited from ``Resolver``.

Note:
    Backends only talk to their name service. Static host tables and
    suffix dispatch are the job of
    [Router][nsrouter.resolvers.router.Router].

See Also:
    [build_backend][nsrouter.utils.dns.build_backend]: Instantiates a backend
        from its pydantic configuration model.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from collections import defaultdict
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import TYPE_CHECKING, Annotated, Literal, cast

import dns.asyncresolver
import dns.exception
import dns.resolver
from pydantic import BaseModel, Field, IPvAnyAddress

from nsrouter.core.exceptions import NameNotFoundError, TemporaryError
from nsrouter.core.resolver import Resolver, require_port
from nsrouter.models import Address, AddressBuilder, IpList, Name, SocketAddress


if TYPE_CHECKING:
    from collections.abc import Iterable

    from dns.rdtypes.IN.A import A
    from dns.rdtypes.IN.AAAA import AAAA
    from dns.rdtypes.IN.SRV import SRV


logger = logging.getLogger("nsrouter.utils.dns")

DEFAULT_TIMEOUT = 5.0

#: ``getaddrinfo`` error codes meaning "this name has no address".
_NOT_FOUND_CODES: frozenset[int] = frozenset(
    code
    for code in (socket.EAI_NONAME, getattr(socket, "EAI_NODATA", None))
    if code is not None
)


# =============================================================================
# Configuration
# =============================================================================


class SystemResolverConfig(BaseModel):
    """Configuration for [SystemResolver][nsrouter.utils.dns.SystemResolver]."""

    kind: Literal["system"] = "system"
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0.0,
        description="Maximum seconds to wait for one getaddrinfo call",
    )


class DnsResolverConfig(BaseModel):
    """Configuration for [DnsResolver][nsrouter.utils.dns.DnsResolver].

    An empty ``nameservers`` list means "use the system configuration"
    (``/etc/resolv.conf`` on Unix).
    """

    kind: Literal["dns"] = "dns"
    nameservers: list[IPvAnyAddress] = Field(
        default_factory=list,
        description="Nameserver IPs to query instead of the system configuration",
    )
    port: int = Field(
        default=53, ge=1, le=65535, description="Port of the configured nameservers"
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0.0,
        description="Total seconds allowed for one query, retries included",
    )
    search_ipv6: bool = Field(
        default=True,
        description="Also query AAAA records for host resolution",
    )


BackendConfig = Annotated[
    SystemResolverConfig | DnsResolverConfig,
    Field(discriminator="kind"),
]


# =============================================================================
# System resolver
# =============================================================================


class SystemResolver(Resolver):
    """Resolver backed by the operating system's ``getaddrinfo``.

    ``resolve_host`` returns every distinct IP the system reports, in the
    order reported. ``resolve`` needs the name to carry a default port since
    the system resolver has no notion of services.

    Errors:
        * ``EAI_NONAME`` / ``EAI_NODATA`` map to
          [NameNotFoundError][nsrouter.core.exceptions.NameNotFoundError].
        * Any other ``OSError`` and timeouts map to
          [TemporaryError][nsrouter.core.exceptions.TemporaryError].
    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    async def resolve_host(self, name: Name) -> IpList:
        try:
            infos = await asyncio.wait_for(
                asyncio.to_thread(socket.getaddrinfo, name.host, None, 0, socket.SOCK_STREAM),
                timeout=self._timeout,
            )
        except socket.gaierror as e:
            if e.errno in _NOT_FOUND_CODES:
                raise NameNotFoundError(name) from e
            raise TemporaryError(e) from e
        except TimeoutError as e:
            logger.debug("getaddrinfo timed out for %s after %.1fs", name.host, self._timeout)
            raise TemporaryError(e) from e
        except OSError as e:
            raise TemporaryError(e) from e

        ips = dict.fromkeys(ip_address(info[4][0]) for info in infos)
        if not ips:
            raise NameNotFoundError(name)
        logger.debug("system resolved %s to %d address(es)", name.host, len(ips))
        return IpList(tuple(ips))

    async def resolve(self, name: Name) -> Address:
        port = require_port(name)
        return (await self.resolve_host(name)).with_port(port)

    def __repr__(self) -> str:
        return f"SystemResolver(timeout={self._timeout})"


# =============================================================================
# DNS resolver
# =============================================================================


class DnsResolver(Resolver):
    """Resolver that queries DNS directly using ``dnspython``.

    ``resolve_host`` looks up A records, and AAAA records when
    ``search_ipv6`` is enabled; one address family failing does not hide the
    other. ``resolve`` returns the host IPs at the default port when the
    name carries one, otherwise it looks the name up as an SRV record
    (e.g. ``_http._tcp.example.org``) and builds a prioritised Address: SRV
    targets with the lowest priority value form level 0, and SRV weights
    become selection weights.

    Errors:
        * ``NXDOMAIN`` and ``NoAnswer`` map to
          [NameNotFoundError][nsrouter.core.exceptions.NameNotFoundError].
        * Any other DNS failure (timeouts, no reachable nameserver) maps to
          [TemporaryError][nsrouter.core.exceptions.TemporaryError].
    """

    def __init__(
        self,
        *,
        nameservers: Iterable[str | IPv4Address | IPv6Address] = (),
        port: int = 53,
        timeout: float = DEFAULT_TIMEOUT,
        search_ipv6: bool = True,
    ) -> None:
        self._nameservers = tuple(str(server) for server in nameservers)
        self._port = port
        self._resolver = dns.asyncresolver.Resolver(configure=not self._nameservers)
        # The port is bound to each nameserver when the list is assigned
        self._resolver.port = port
        if self._nameservers:
            self._resolver.nameservers = list(self._nameservers)
        self._resolver.timeout = timeout
        self._resolver.lifetime = timeout
        self._search_ipv6 = search_ipv6

    @property
    def nameservers(self) -> tuple[str, ...]:
        """Configured nameservers; empty when using the system configuration."""
        return self._nameservers

    @property
    def port(self) -> int:
        return self._port

    @property
    def search_ipv6(self) -> bool:
        return self._search_ipv6

    async def _query(self, name: Name, host: str, rdtype: str) -> dns.resolver.Answer:
        try:
            return await self._resolver.resolve(host, rdtype)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer) as e:
            raise NameNotFoundError(name) from e
        except dns.exception.DNSException as e:
            logger.debug("%s query for %s failed: %s", rdtype, host, e)
            raise TemporaryError(e) from e

    async def _lookup_ips(self, name: Name, host: str) -> list[IPv4Address | IPv6Address]:
        ips: list[IPv4Address | IPv6Address] = []
        errors: list[Exception] = []

        try:
            answer = await self._query(name, host, "A")
            ips.extend(ip_address(cast("A", rdata).address) for rdata in answer)
        except (NameNotFoundError, TemporaryError) as e:
            errors.append(e)

        if self._search_ipv6:
            try:
                answer = await self._query(name, host, "AAAA")
                ips.extend(ip_address(cast("AAAA", rdata).address) for rdata in answer)
            except (NameNotFoundError, TemporaryError) as e:
                errors.append(e)

        if ips:
            return list(dict.fromkeys(ips))
        # Nothing found: a temporary failure wins over "not found"
        for error in errors:
            if isinstance(error, TemporaryError):
                raise error
        raise NameNotFoundError(name)

    async def resolve_host(self, name: Name) -> IpList:
        return IpList(tuple(await self._lookup_ips(name, name.host)))

    async def resolve(self, name: Name) -> Address:
        if name.default_port is not None:
            return (await self.resolve_host(name)).with_port(name.default_port)
        return await self._resolve_srv(name)

    async def _resolve_srv(self, name: Name) -> Address:
        answer = await self._query(name, name.host, "SRV")
        levels: dict[int, list[tuple[int, SocketAddress]]] = defaultdict(list)
        for rdata in answer:
            record = cast("SRV", rdata)
            target = record.target.to_text()
            # A target of "." means the service is decidedly not available
            if target == ".":
                continue
            try:
                ips = await self._lookup_ips(name, target)
            except NameNotFoundError:
                logger.debug("srv target %s of %s has no address", target, name.host)
                continue
            levels[record.priority].extend(
                (record.weight, SocketAddress(ip, record.port)) for ip in ips
            )

        if not levels:
            raise NameNotFoundError(name)
        builder = AddressBuilder()
        for priority in sorted(levels):
            builder.add_addresses(levels[priority])
        return builder.build()

    def __repr__(self) -> str:
        return (
            f"DnsResolver(nameservers={list(self._nameservers)!r}, "
            f"port={self._port}, search_ipv6={self._search_ipv6})"
        )


def build_backend(config: SystemResolverConfig | DnsResolverConfig) -> Resolver:
    """Instantiate the backend described by *config*."""
    if isinstance(config, SystemResolverConfig):
        return SystemResolver(timeout=config.timeout)
    if isinstance(config, DnsResolverConfig):
        return DnsResolver(
            nameservers=config.nameservers,
            port=config.port,
            timeout=config.timeout,
            search_ipv6=config.search_ipv6,
        )
    raise TypeError(f"unsupported backend config: {type(config).__name__}")
