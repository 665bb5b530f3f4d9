# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Sentry Log Transport.

Forwards structured log records to Sentry, mapping log levels onto Sentry
severities and reporting error-level records as exceptions and everything
else as messages.

Example:
    >>> from sentry_log_transport import create_transport
    >>>
    >>> transport = create_transport(levels_map={"warn": "info"})
    >>> transport.log({"message": "disk low", "level": "warn", "tags": {"host": "db1"}})
    >>>
    >>> # Or attach it to the standard logging module
    >>> import logging
    >>> from sentry_log_transport import SentryLogHandler
    >>> logging.getLogger().addHandler(SentryLogHandler(transport=transport))
"""

from typing import Any

from .config import RemoteConfig, TransportOptions
from .errors import ExtendedError
from .handler import SentryLogHandler
from .reporter import RemoteReporter, ScopeUpdate
from .severity import DEFAULT_LEVELS_MAP, SentrySeverity, SeverityMapper
from .silent_reporter import SilentRemoteReporter
from .translator import RecordTranslator, TranslatorAction
from .transport import SentryTransport

__version__ = "0.1.0"


def _build_sentry() -> RemoteReporter:
    from .sentry_reporter import SentryRemoteReporter

    return SentryRemoteReporter()


def _build_silent() -> RemoteReporter:
    return SilentRemoteReporter()


_REPORTERS = {
    "sentry": _build_sentry,
    "silent": _build_silent,
}


def create_remote_reporter(reporter_type: str = "sentry") -> RemoteReporter:
    """Create a remote reporter based on type.

    Args:
        reporter_type: Type of reporter ("sentry", "silent")

    Returns:
        RemoteReporter instance

    Raises:
        ValueError: If reporter_type is unknown
    """
    try:
        builder = _REPORTERS[reporter_type]
    except KeyError:
        raise ValueError(
            f"Unknown reporter type: {reporter_type}. "
            f"Must be one of: {', '.join(_REPORTERS)}"
        ) from None
    return builder()


def create_transport(reporter_type: str = "sentry", **options: Any) -> SentryTransport:
    """Create a transport backed by the given reporter type.

    Args:
        reporter_type: Type of reporter ("sentry", "silent")
        **options: TransportOptions values

    Returns:
        SentryTransport instance
    """
    return SentryTransport(reporter=create_remote_reporter(reporter_type), **options)


__all__ = [
    # Version
    "__version__",
    # Transport
    "SentryTransport",
    "SentryLogHandler",
    "create_transport",
    # Translation
    "RecordTranslator",
    "TranslatorAction",
    "SeverityMapper",
    "SentrySeverity",
    "DEFAULT_LEVELS_MAP",
    "ExtendedError",
    # Reporters
    "RemoteReporter",
    "ScopeUpdate",
    "SilentRemoteReporter",
    "create_remote_reporter",
    # Configuration
    "RemoteConfig",
    "TransportOptions",
]
