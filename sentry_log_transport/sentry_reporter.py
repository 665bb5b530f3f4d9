# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Sentry implementation of the remote reporter."""

import logging
from typing import Any, Mapping

import sentry_sdk

from .errors import ExtendedError
from .reporter import RemoteReporter, ScopeUpdate

logger = logging.getLogger(__name__)


class SentryRemoteReporter(RemoteReporter):
    """Remote reporter backed by the sentry-sdk package.

    Scope updates are applied to Sentry's current scope, so tags, extras and
    user context set for one record remain visible to the next one unless the
    update asks for the scope to be cleared.

    Example:
        reporter = SentryRemoteReporter()
        reporter.init({"dsn": "https://...@sentry.io/..."})
        reporter.capture_message("disk low", "warning", ScopeUpdate())
    """

    def __init__(self):
        """Initialize Sentry remote reporter."""
        self._initialized = False

    @property
    def initialized(self) -> bool:
        """Whether init() has been called on this reporter."""
        return self._initialized

    @property
    def client(self) -> Any:
        """The sentry_sdk module."""
        return sentry_sdk

    def init(self, options: dict[str, Any]) -> None:
        """Initialize the Sentry SDK.

        Args:
            options: Keyword arguments for sentry_sdk.init
        """
        logger.debug(
            "Initializing Sentry client (environment=%s, server_name=%s)",
            options.get("environment"),
            options.get("server_name"),
        )
        sentry_sdk.init(**options)
        self._initialized = True

    def _apply_scope(self, update: ScopeUpdate) -> None:
        scope = sentry_sdk.get_current_scope()
        if update.clear:
            scope.clear()

        if update.tags is not None:
            for key, value in update.tags.items():
                scope.set_tag(key, value)

        for key, value in update.extras.items():
            scope.set_extra(key, value)

        if update.user is not None:
            scope.set_user(dict(update.user))

    def capture_exception(
        self,
        error: BaseException,
        scope: ScopeUpdate,
        tags: Any = None,
        level: str | None = None,
    ) -> None:
        """Apply the scope update and capture an exception.

        For an ExtendedError the event's exception type is the record's name
        and a string stack is attached as the "stack" context.

        Args:
            error: The exception to report
            scope: Scope changes to apply before capturing
            tags: Tags passed with this event; ignored unless a mapping
            level: Sentry severity for this event
        """
        self._apply_scope(scope)
        # sentry_sdk merges per-call tags with dict.update, so only mappings are forwarded
        event_tags = dict(tags) if isinstance(tags, Mapping) else None

        if not isinstance(error, ExtendedError):
            sentry_sdk.capture_exception(error, tags=event_tags, level=level)
            return

        # Synthesized errors report the record's name and stack on a forked scope.
        with sentry_sdk.new_scope() as event_scope:
            event_scope.add_event_processor(_extended_error_processor(error))
            if error.stack is not None:
                event_scope.set_context("stack", {"raw": error.stack})
            sentry_sdk.capture_exception(error, tags=event_tags, level=level)

    def capture_message(
        self,
        message: Any,
        level: str | None,
        scope: ScopeUpdate,
    ) -> None:
        """Apply the scope update and capture a plain message.

        Args:
            message: The message to capture
            level: Sentry severity, passed through even when None
            scope: Scope changes to apply before capturing
        """
        self._apply_scope(scope)
        sentry_sdk.capture_message(message, level=level)

    def flush(self, timeout: float | None = None) -> None:
        """Flush pending Sentry events.

        Args:
            timeout: Optional upper bound in seconds
        """
        logger.debug("Flushing Sentry client")
        sentry_sdk.flush(timeout=timeout)


def _extended_error_processor(error: ExtendedError):
    """Build an event processor that reports error.name as the exception type."""

    def processor(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any]:
        values = event.get("exception", {}).get("values") or []
        if values:
            values[-1]["type"] = str(error.name)
        return event

    return processor
