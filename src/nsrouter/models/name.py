"""
Validated service name with an optional default port.

A [Name][nsrouter.models.name.Name] is what applications hand to a resolver:
a hostname restricted to a conservative grammar, optionally followed by
``:port``. Names are immutable and hashable, so they can be used as cache and
routing keys and passed between tasks without copying.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import ClassVar

from ._validation import PORT_MAX, validate_instance, validate_port


DOT_ERROR = "name can't start with dot and can't have subsequent dots"
CHAR_ERROR = (
    "only ascii numbers and letters, dash `-`, underscore `_` and dot `.` "
    "are supported in names"
)
DASH_ERROR = "any part of name can't start or end with dash"


@total_ordering
@dataclass(frozen=True, slots=True)
class Name:
    """Immutable, validated hostname with an optional default port.

    The host is a dot-separated sequence of labels. Every label must be
    non-empty, contain only lower-case ASCII letters, digits, ``-`` and
    ``_``, and must not start or end with ``-``. A single trailing dot is
    allowed and means the name is fully qualified (no search domain should
    be appended); it is preserved as written.

    Attributes:
        host: The validated hostname.
        default_port: Port used when the resolver can only produce IPs,
            or ``None`` when the name carries no port.

    Raises:
        ValueError: If the host violates the grammar or the port is out of
            range. The message is the human-readable reason.
        TypeError: If the fields have the wrong types.

    Examples:
        ```python
        name = Name.parse("consul.service.consul:8500")
        name.host          # 'consul.service.consul'
        name.default_port  # 8500
        str(name)          # 'consul.service.consul:8500'
        ```
    """

    host: str
    default_port: int | None = None

    _LABEL_RE: ClassVar[re.Pattern[str]] = re.compile(r"[a-z0-9_-]+")

    def __post_init__(self) -> None:
        validate_instance(self.host, str, "host")
        if self.default_port is not None:
            validate_port(self.default_port, "default_port")
        self.check_host(self.host)

    @classmethod
    def check_host(cls, host: str) -> None:
        """Validate *host* against the name grammar.

        Raises:
            ValueError: With one of the module-level reason strings.
        """
        # The dot at the end is allowed (means don't add search domain)
        if host.endswith("."):
            host = host[:-1]
        for label in host.split("."):
            if not label:
                raise ValueError(DOT_ERROR)
            if not cls._LABEL_RE.fullmatch(label):
                raise ValueError(CHAR_ERROR)
            if label.startswith("-") or label.endswith("-"):
                raise ValueError(DASH_ERROR)

    @classmethod
    def parse(cls, value: str) -> Name:
        """Parse ``host`` or ``host:port`` into a Name.

        Args:
            value: The textual name.

        Returns:
            A validated Name.

        Raises:
            ValueError: If the host or the port is invalid.
        """
        validate_instance(value, str, "name")
        host, sep, port_text = value.rpartition(":")
        if not sep:
            return cls(value)
        if not port_text.isascii() or not port_text.isdigit():
            raise ValueError(f"default port number is invalid: {port_text!r} is not a number")
        port = int(port_text)
        if port > PORT_MAX:
            raise ValueError(f"default port number is invalid: {port} is out of range")
        return cls(host, port)

    @property
    def is_fully_qualified(self) -> bool:
        """Return True if the host ends with the root dot."""
        return self.host.endswith(".")

    def with_port(self, port: int) -> Name:
        """Return a copy of this name carrying *port* as its default port."""
        return Name(self.host, port)

    def _sort_key(self) -> tuple[str, int]:
        return (self.host, -1 if self.default_port is None else self.default_port)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        if self.default_port is None:
            return self.host
        return f"{self.host}:{self.default_port}"
