# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Log transport that forwards records to Sentry."""

import asyncio
import logging
from dataclasses import fields
from typing import Any, Callable, Mapping

from .config import TransportOptions
from .notifier import DeferredNotifier
from .reporter import RemoteReporter
from .severity import SeverityMapper
from .translator import RecordTranslator, TranslatorAction

logger = logging.getLogger(__name__)

LOGGED_EVENT = "logged"
FINISH_EVENT = "finish"


class SentryTransport:
    """Transport receiving structured log records one at a time.

    Each record is translated into Sentry scope updates and a single capture
    call. Listeners registered for the "logged" event are notified for every
    record, including suppressed ones, after the log() call has returned.

    Example:
        >>> transport = SentryTransport(sentry={"dsn": "https://...@sentry.io/1"})
        >>> transport.log({"message": "disk low", "level": "warn"})
        >>> await transport.end()
    """

    def __init__(
        self,
        options: TransportOptions | Mapping[str, Any] | None = None,
        reporter: RemoteReporter | None = None,
        **kwargs: Any,
    ):
        """Initialize the transport.

        Args:
            options: TransportOptions or a plain mapping of option values
            reporter: Remote reporter to use (Sentry when None)
            **kwargs: Option values, merged over options

        Raises:
            ValueError: If unknown option names are given
        """
        if not isinstance(options, TransportOptions):
            values = dict(options or {})
            values.update(kwargs)
            options = TransportOptions.from_dict(values)
        elif kwargs:
            values = {f.name: getattr(options, f.name) for f in fields(options)}
            values.update(kwargs)
            options = TransportOptions.from_dict(values)

        if reporter is None:
            from .sentry_reporter import SentryRemoteReporter

            reporter = SentryRemoteReporter()

        self.options = options
        self.silent = bool(options.silent)
        self._reporter = reporter
        self._severity_mapper = SeverityMapper(options.levels_map)
        self._translator = RecordTranslator(
            reporter,
            severity_mapper=self._severity_mapper,
            auto_clear_scope=options.clears_scope,
        )
        self._notifier = DeferredNotifier()
        self._listeners: dict[str, list[Callable[..., Any]]] = {}
        self._depth = 0
        self.ended = False

        if options.skip_sentry_init:
            logger.debug("Skipping remote client initialization")
        else:
            remote_config = options.remote_config.with_defaults()
            reporter.init(remote_config.to_init_kwargs())

    @property
    def sentry(self) -> Any:
        """Read-only handle to the underlying remote client."""
        return self._reporter.client

    @property
    def reporter(self) -> RemoteReporter:
        return self._reporter

    @property
    def levels_map(self) -> dict[str, str]:
        """Effective level name to Sentry severity map."""
        return self._severity_mapper.levels_map

    @property
    def auto_clear_scope(self) -> bool:
        return self._translator.auto_clear_scope

    def on(self, event: str, listener: Callable[..., Any]) -> "SentryTransport":
        """Register a listener for an event ("logged" or "finish")."""
        self._listeners.setdefault(event, []).append(listener)
        return self

    def off(self, event: str, listener: Callable[..., Any]) -> "SentryTransport":
        """Remove a previously registered listener."""
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)
        return self

    def emit(self, event: str, *args: Any) -> None:
        """Call every listener registered for the event, in order."""
        for listener in list(self._listeners.get(event, [])):
            listener(*args)

    def log(
        self,
        info: Mapping[str, Any],
        callback: Callable[[], Any] | None = None,
        level: str | None = None,
    ) -> TranslatorAction:
        """Forward one log record.

        "logged" listeners never run before the completion callback. Inside a
        running event loop they run on a later loop iteration, after log has
        returned. Without a loop they run before log returns, once the
        outermost log call has finished translating its record.

        Args:
            info: Log record mapping
            callback: Completion callback, invoked once the record is handled
            level: Log-framework level name; read from info["level"] when
                not given

        Returns:
            The action taken for the record
        """
        self._notifier.post(self.emit, LOGGED_EVENT, info)

        self._depth += 1
        try:
            action = self._translator.translate(info, silent=self.silent, level=level)
            if callback is not None:
                callback()
            return action
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._notifier.drain()

    async def end(self) -> "SentryTransport":
        """Flush the remote client, then signal that the transport has ended.

        The flush has no timeout of its own; wrap the call in
        asyncio.wait_for when shutdown must be bounded.
        """
        await asyncio.to_thread(self._reporter.flush)
        self._finish()
        return self

    def close(self, timeout: float | None = None) -> None:
        """Synchronous counterpart of end() for callers without an event loop.

        Args:
            timeout: Optional flush timeout in seconds
        """
        self._reporter.flush(timeout)
        self._finish()

    def _finish(self) -> None:
        self.ended = True
        logger.debug("Sentry transport ended")
        self.emit(FINISH_EVENT)
