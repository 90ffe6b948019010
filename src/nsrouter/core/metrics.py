"""
Prometheus metrics for routing decisions.

Module-level metric objects are process-wide singletons (thread-safe, as
provided by ``prometheus_client``). The
[Router][nsrouter.resolvers.router.Router] records one sample per request it
routes; exposing the default registry (HTTP endpoint, push gateway) is left
to the embedding application.

Architecture:
    ROUTED_REQUESTS_TOTAL: Requests per method (``resolve``, ``resolve_host``,
        ``subscribe``, ``subscribe_host``) and route kind (``exact``,
        ``suffix``, ``fallback``, ``unrouted``).
"""

from __future__ import annotations

from prometheus_client import Counter


ROUTED_REQUESTS_TOTAL = Counter(
    "nsrouter_routed_requests_total",
    "Name resolution requests dispatched by the router",
    ["method", "route"],
)


def record_route(method: str, route: str) -> None:
    """Count one routed request."""
    ROUTED_REQUESTS_TOTAL.labels(method=method, route=route).inc()
