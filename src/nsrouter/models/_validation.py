"""Shared validation helpers for frozen dataclass models.

Private module, not part of the public API. Used exclusively by
``__post_init__`` methods and factory classmethods in sibling model modules
to enforce runtime type and range constraints.
"""

from __future__ import annotations

from typing import Any


PORT_MAX: int = 65535


def validate_instance(value: Any, expected: type | tuple[type, ...], name: str) -> None:
    """Raise ``TypeError`` if *value* is not an instance of *expected*."""
    if not isinstance(value, expected):
        names = (
            " or ".join(t.__name__ for t in expected)
            if isinstance(expected, tuple)
            else expected.__name__
        )
        article = "an" if names[0] in "AEIOUaeiou" else "a"
        raise TypeError(f"{name} must be {article} {names}, got {type(value).__name__}")


def validate_int(value: Any, name: str) -> None:
    """Raise ``TypeError`` if *value* is not an ``int`` (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


def validate_port(value: Any, name: str) -> None:
    """Raise if *value* is not an ``int`` in the 16-bit port range."""
    validate_int(value, name)
    if not 0 <= value <= PORT_MAX:
        raise ValueError(f"{name} must be between 0 and {PORT_MAX}, got {value}")


def validate_weight(value: Any, name: str) -> None:
    """Raise if *value* is not a non-negative ``int``."""
    validate_int(value, name)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
