"""Concrete resolvers: in-memory tables and the name router.

Attributes:
    Router: Static dispatch table choosing which resolver answers a name.
        See [Router][nsrouter.resolvers.router.Router].
    RouterBuilder: Mutable builder producing read-only routers.
    RouterConfig: pydantic model describing a router, usually loaded from
        YAML with [Router.from_yaml()][nsrouter.resolvers.router.Router.from_yaml].
    MemResolver: Resolves names from an in-memory host table.
    StaticStream: Subscription yielding one fixed Address.
"""

from .configs import RouterConfig
from .mem import MemResolver, StaticStream
from .router import Route, RouteKind, Router, RouterBuilder


__all__ = [
    "MemResolver",
    "Route",
    "RouteKind",
    "Router",
    "RouterBuilder",
    "RouterConfig",
    "StaticStream",
]
