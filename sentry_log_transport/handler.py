# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Bridge from the standard logging module to SentryTransport."""

import logging
from typing import Any

from .severity import SentrySeverity
from .transport import SentryTransport

# stdlib level names mapped onto the transport's level vocabulary
STDLIB_LEVEL_NAMES = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "critical",
}

HANDLER_LEVELS_MAP = {"critical": SentrySeverity.FATAL.value}

IGNORED_LOGGERS = ("sentry_sdk", "sentry_log_transport")

# Attributes every LogRecord carries; anything else came in through extra=.
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def level_name_for(record: logging.LogRecord) -> str:
    """Return the transport level name for a stdlib record."""
    return STDLIB_LEVEL_NAMES.get(record.levelname, record.levelname.lower())


def record_to_info(record: logging.LogRecord) -> dict[str, Any]:
    """Convert a stdlib LogRecord into a transport record mapping.

    Args:
        record: The stdlib log record

    Returns:
        Mapping with message, logger, any extra= fields and, when the record
        carries exception info, the exception under "exception"
    """
    info: dict[str, Any] = {
        "message": record.getMessage(),
        "logger": record.name,
    }
    for key, value in record.__dict__.items():
        if key not in _RECORD_ATTRIBUTES:
            info[key] = value

    if record.exc_info and record.exc_info[1] is not None:
        info["exception"] = record.exc_info[1]
    return info


def _is_ignored(logger_name: str) -> bool:
    return any(
        logger_name == name or logger_name.startswith(name + ".")
        for name in IGNORED_LOGGERS
    )


class SentryLogHandler(logging.Handler):
    """logging.Handler that forwards records through a SentryTransport.

    CRITICAL records map to the fatal severity unless levels_map says
    otherwise. Records emitted by sentry_sdk or by this package are ignored.

    Example:
        >>> handler = SentryLogHandler(sentry={"dsn": "https://...@sentry.io/1"})
        >>> logging.getLogger().addHandler(handler)
        >>> logging.getLogger("api").error("boom", extra={"tags": {"service": "api"}})
    """

    def __init__(
        self,
        transport: SentryTransport | None = None,
        level: int = logging.NOTSET,
        **options: Any,
    ):
        """Initialize the handler.

        Args:
            transport: Existing transport to use; one is built from options
                when None
            level: Minimum stdlib level handled
            **options: SentryTransport options (ignored when transport is given)
        """
        super().__init__(level=level)
        if transport is None:
            levels_map = dict(HANDLER_LEVELS_MAP)
            levels_map.update(options.pop("levels_map", None) or {})
            transport = SentryTransport(levels_map=levels_map, **options)
        self.transport = transport

    def emit(self, record: logging.LogRecord) -> None:
        if _is_ignored(record.name):
            return
        try:
            self.transport.log(record_to_info(record), level=level_name_for(record))
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.acquire()
        try:
            self.transport.reporter.flush()
        finally:
            self.release()

    def close(self) -> None:
        try:
            if not self.transport.ended:
                self.transport.close()
        finally:
            super().close()
