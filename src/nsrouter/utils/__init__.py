"""Name-service backends that plug into router slots.

Attributes:
    SystemResolver: Operating system resolver (``getaddrinfo``).
    DnsResolver: Direct DNS resolver with SRV support (``dnspython``).
    build_backend: Instantiate a backend from its configuration model.
"""

from .dns import (
    BackendConfig,
    DnsResolver,
    DnsResolverConfig,
    SystemResolver,
    SystemResolverConfig,
    build_backend,
)


__all__ = [
    "BackendConfig",
    "DnsResolver",
    "DnsResolverConfig",
    "SystemResolver",
    "SystemResolverConfig",
    "build_backend",
]
