"""nsrouter exception hierarchy.

Provides typed exceptions for every resolution outcome so callers can tell
permanent failures (fix the input) from transient ones (retry after a
backoff of their choosing) without inspecting messages.

Exception hierarchy:

```text
NameServiceError (base -- never raised directly)
├── ConfigurationError       -- router config validation, bad YAML
└── ResolutionError          -- outcome of resolve/subscribe
    ├── InvalidNameError     -- permanent: name fails the grammar / bad port
    ├── NameNotFoundError    -- permanent: nothing routed or nothing found
    ├── NoDefaultPortError   -- permanent: address needed but name has no port
    └── TemporaryError       -- transient: backend failure, retry later
```

Errors travel as the exception of the awaited call or of a subscription's
``__anext__``. A subscription that raised is finished; subscribe again to
retry.

See Also:
    [Router][nsrouter.resolvers.router.Router]: Raises
        [NameNotFoundError][nsrouter.core.exceptions.NameNotFoundError] when
        no route matches and passes backend errors through untouched.
    [coerce_name()][nsrouter.core.resolver.coerce_name]: Raises
        [InvalidNameError][nsrouter.core.exceptions.InvalidNameError].
"""

from __future__ import annotations

import errno
from typing import ClassVar


class NameServiceError(Exception):
    """Base exception for all nsrouter errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(NameServiceError):
    """Invalid or missing router configuration (YAML, dict, CLI flags).

    See Also:
        [Router.from_dict()][nsrouter.resolvers.router.Router.from_dict]:
            Wraps pydantic validation errors into this exception.
    """


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class ResolutionError(NameServiceError):
    """Base for all resolution outcomes.

    Attributes:
        is_permanent: True when retrying with the same input can't succeed.
        errno_code: ``errno`` value used by
            [to_os_error()][nsrouter.core.exceptions.ResolutionError.to_os_error].
    """

    is_permanent: ClassVar[bool] = True
    errno_code: ClassVar[int] = errno.EIO

    def to_os_error(self) -> OSError:
        """Wrap the error into an ``OSError`` for socket-style callers."""
        return OSError(self.errno_code, str(self))


class InvalidNameError(ResolutionError, ValueError):
    """The name failed validation before resolution.

    Permanent: the name in the input or configuration is wrong. Some
    resolvers have stricter requirements than the shared grammar, so using
    another resolver may also help.

    Attributes:
        name: The offending name as given.
        reason: Why it was rejected.
    """

    errno_code = errno.EINVAL

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"name {name!r} is invalid: {reason}")


class NameNotFoundError(ResolutionError):
    """The name is valid but no resolver produced an address for it."""

    errno_code = errno.ENOENT

    def __init__(self, name: object | None = None) -> None:
        self.name = name
        super().__init__("name not found" if name is None else f"name not found: {name}")


class NoDefaultPortError(ResolutionError):
    """A full address was requested for a name without a port.

    Raised by resolvers that can only map hostnames to IPs.
    """

    errno_code = errno.ENOENT

    def __init__(self, name: object | None = None) -> None:
        self.name = name
        message = (
            "the resolver can only resolve hostname to an IP address, "
            "so port must be specified to get full address"
        )
        super().__init__(message if name is None else f"{message}: {name}")


class TemporaryError(ResolutionError):
    """The backend failed in a way that may go away on retry.

    Wraps the underlying exception (network error, timeout, server
    failure). Raise it with ``raise TemporaryError(exc) from exc`` so the
    original traceback is kept.

    Attributes:
        cause: The wrapped backend exception.
    """

    is_permanent = False
    errno_code = errno.EAGAIN

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"temporary name resolution error: {cause}")
