"""
Unit tests for core.exceptions module.

Tests:
- Exception hierarchy
- Messages and stored attributes
- Permanence flags and OSError conversion
"""

import errno

import pytest

from nsrouter.core.exceptions import (
    ConfigurationError,
    InvalidNameError,
    NameNotFoundError,
    NameServiceError,
    NoDefaultPortError,
    ResolutionError,
    TemporaryError,
)
from nsrouter.models import Name


class TestHierarchy:
    """Tests for the exception class hierarchy."""

    @pytest.mark.parametrize(
        "exc_class",
        [InvalidNameError, NameNotFoundError, NoDefaultPortError, TemporaryError],
    )
    def test_resolution_errors(self, exc_class: type[Exception]) -> None:
        assert issubclass(exc_class, ResolutionError)
        assert issubclass(exc_class, NameServiceError)

    def test_configuration_error_is_not_resolution_error(self) -> None:
        assert issubclass(ConfigurationError, NameServiceError)
        assert not issubclass(ConfigurationError, ResolutionError)

    def test_invalid_name_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            raise InvalidNameError("bad..name", "reason")


class TestMessages:
    """Tests for exception messages and attributes."""

    def test_invalid_name(self) -> None:
        exc = InvalidNameError("a..b", "no empty labels")
        assert exc.name == "a..b"
        assert exc.reason == "no empty labels"
        assert str(exc) == "name 'a..b' is invalid: no empty labels"

    def test_name_not_found_without_name(self) -> None:
        assert str(NameNotFoundError()) == "name not found"

    def test_name_not_found_with_name(self) -> None:
        exc = NameNotFoundError(Name.parse("foo.bar:80"))
        assert str(exc) == "name not found: foo.bar:80"
        assert exc.name == Name.parse("foo.bar:80")

    def test_no_default_port(self) -> None:
        exc = NoDefaultPortError(Name("localhost"))
        assert "port must be specified" in str(exc)
        assert str(exc).endswith(": localhost")

    def test_temporary_error_keeps_cause(self) -> None:
        cause = TimeoutError("timed out")
        exc = TemporaryError(cause)
        assert exc.cause is cause
        assert str(exc) == "temporary name resolution error: timed out"


class TestPermanence:
    """Tests for is_permanent and to_os_error()."""

    def test_permanent_errors(self) -> None:
        assert InvalidNameError("x", "y").is_permanent is True
        assert NameNotFoundError().is_permanent is True
        assert NoDefaultPortError().is_permanent is True

    def test_temporary_error_is_not_permanent(self) -> None:
        assert TemporaryError(OSError()).is_permanent is False

    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (InvalidNameError("x", "y"), errno.EINVAL),
            (NameNotFoundError(), errno.ENOENT),
            (NoDefaultPortError(), errno.ENOENT),
            (TemporaryError(OSError("boom")), errno.EAGAIN),
        ],
    )
    def test_to_os_error(self, exc: ResolutionError, code: int) -> None:
        os_error = exc.to_os_error()
        assert isinstance(os_error, OSError)
        assert os_error.errno == code
        assert os_error.strerror == str(exc)
