"""Router configuration models.

A router configuration is usually loaded from YAML:

```yaml
hosts:
  localhost: 127.0.0.1
suffixes:
  consul:
    kind: dns
    nameservers: [127.0.0.1]
    port: 8600
  internal.example.org:
    kind: system
default:
  kind: system
  timeout: 2.0
```

See Also:
    [RouterBuilder.from_config][nsrouter.resolvers.router.RouterBuilder.from_config]:
        Builds a router from a validated configuration.
    [BackendConfig][nsrouter.utils.dns.BackendConfig]: The discriminated
        union of backend configurations used for suffixes and the default.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress, field_validator

from nsrouter.models import Name
from nsrouter.utils.dns import BackendConfig


class RouterConfig(BaseModel):
    """Static routing table: exact hosts, suffix backends and a fallback.

    Attributes:
        hosts: Exact host names resolved to a fixed IP.
        suffixes: Domain suffixes (without leading dot) mapped to the
            backend that resolves names under them.
        default: Backend used when neither a host nor a suffix matches.
            Without one, unmatched names fail with ``NameNotFoundError``.
    """

    model_config = ConfigDict(extra="forbid")

    hosts: dict[str, IPvAnyAddress] = Field(
        default_factory=dict,
        description="Exact host names and the IP each one resolves to",
    )
    suffixes: dict[str, BackendConfig] = Field(
        default_factory=dict,
        description="Domain suffix (no leading dot) to backend configuration",
    )
    default: BackendConfig | None = Field(
        default=None,
        description="Fallback backend for names matching no host or suffix",
    )

    @field_validator("hosts")
    @classmethod
    def hosts_are_names(cls, v: dict[str, IPvAnyAddress]) -> dict[str, IPvAnyAddress]:
        for host in v:
            Name.check_host(host)
        return v

    @field_validator("suffixes")
    @classmethod
    def suffixes_are_domains(cls, v: dict[str, BackendConfig]) -> dict[str, BackendConfig]:
        for suffix in v:
            if not suffix:
                raise ValueError("suffix must not be empty")
            if suffix.startswith("."):
                raise ValueError(f"suffix must not start with a dot: {suffix!r}")
            Name.check_host(suffix)
        return v
