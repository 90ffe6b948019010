"""
Structured logging with key=value and JSON output support.

Wraps the standard library ``logging`` module so resolution events can be
logged as an event name plus fields::

    route_selected name=db.service.consul:5432 route=suffix suffix=consul

Values containing spaces, equals signs or quotes are escaped and wrapped in
double quotes, and long values are truncated.

[StructuredFormatter][nsrouter.core.logger.StructuredFormatter] reads the
fields from the ``structured_kv`` extra attached by
[Logger][nsrouter.core.logger.Logger]. Installed on the root handler it
gives the same ``level name message key=value`` layout to plain
``logging.getLogger()`` calls made by the backends in ``nsrouter.utils``.

Examples:
    ```python
    from nsrouter.core.logger import Logger

    logger = Logger("nsrouter.router")
    logger.debug("route_selected", name="localhost:80", route="exact")

    json_logger = Logger("nsrouter.router", json_output=True)
    json_logger.info("router_built", suffixes=2)
    # {"timestamp": "...", "level": "info", "logger": "nsrouter.router", ...}
    ```
"""

import datetime
import json
import logging
from typing import Any, ClassVar


_TRUNCATED = "...<truncated {} chars>"


def _truncate(value: str, max_value_length: int | None) -> str:
    if max_value_length and len(value) > max_value_length:
        return value[:max_value_length] + _TRUNCATED.format(len(value) - max_value_length)
    return value


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Format a dictionary as space-separated key=value pairs.

    Args:
        kwargs: Key-value pairs to format.
        max_value_length: Maximum characters per value before truncation.
            Pass None to disable truncation.
        prefix: String prepended to the output (default: single space).

    Returns:
        Formatted string, e.g. ``' host=localhost reason="no route"'``, or an
        empty string if *kwargs* is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for key, value in kwargs.items():
        text = _truncate(str(value), max_value_length)
        # Quote anything that would break naive key=value splitting
        if not text or any(c in text for c in " =\"'"):
            escaped = text.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'{key}="{escaped}"')
        else:
            parts.append(f"{key}={text}")
    return prefix + " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Render every record as ``level logger message key=value ...``."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        fields: dict[str, Any] = getattr(record, "structured_kv", {})
        if fields:
            line += format_kv_pairs(fields)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class Logger:
    """Structured logger that turns keyword arguments into fields.

    Mirrors the standard logging methods (``debug`` ... ``exception``), each
    taking an event name and arbitrary keyword fields.

    Examples:
        ```python
        logger = Logger("nsrouter.router")
        logger.info("router_built", exact=1, suffixes=2, fallback=True)
        ```
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
    ) -> None:
        """Initialize a structured logger.

        Args:
            name: Name passed to ``logging.getLogger``.
            json_output: If True, emit one JSON object per record instead of
                key=value pairs.
            max_value_length: Maximum character length of a single value
                before truncation. Defaults to 1000.
        """
        if max_value_length is None:
            max_value_length = self._DEFAULT_MAX_VALUE_LENGTH
        self._logger = logging.getLogger(name)
        self._json_output = json_output
        self._max_value_length = max_value_length

    @property
    def name(self) -> str:
        return self._logger.name

    def is_enabled_for(self, level: int) -> bool:
        """Return True if a record at *level* would be emitted."""
        return self._logger.isEnabledFor(level)

    def _format_json(self, msg: str, level: str, kwargs: dict[str, Any]) -> str:
        record = {
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
            "level": level,
            "logger": self._logger.name,
            "message": msg,
            **kwargs,
        }
        return json.dumps(record, default=str)

    def _make_extra(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if not kwargs:
            return {}
        # Pre-truncate so the formatter receives clean data
        fields: dict[str, Any] = {}
        for key, value in kwargs.items():
            text = str(value)
            truncated = _truncate(text, self._max_value_length)
            fields[key] = value if truncated is text else truncated
        return {"structured_kv": fields}

    def _log(self, level: int, msg: str, kwargs: dict[str, Any], *, exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if self._json_output:
            name = "error" if exc_info else logging.getLevelName(level).lower()
            self._logger.log(level, self._format_json(msg, name, kwargs), exc_info=exc_info)
        else:
            self._logger.log(level, msg, extra=self._make_extra(kwargs), exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log a DEBUG level event."""
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log an INFO level event."""
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log a WARNING level event."""
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level event."""
        self._log(logging.ERROR, msg, kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        """Log a CRITICAL level event."""
        self._log(logging.CRITICAL, msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level event with the current exception traceback."""
        self._log(logging.ERROR, msg, kwargs, exc_info=True)
