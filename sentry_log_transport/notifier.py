# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Deferred, FIFO delivery of transport notifications."""

import asyncio
import logging
from collections import deque
from typing import Any, Callable

logger = logging.getLogger(__name__)


class DeferredNotifier:
    """Posts callbacks to run after the current operation has returned.

    Inside a running asyncio event loop callbacks are scheduled with
    loop.call_soon. Without a loop they are queued and run by drain(), which
    the owner calls once its outermost operation has finished. Either way
    callbacks run in the order they were posted.
    """

    def __init__(self):
        self._pending: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._draining = False

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for drain()."""
        return len(self._pending)

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule a callback.

        Args:
            callback: Callable to run later
            *args: Positional arguments for the callback
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            loop.call_soon(self._run, callback, args)
        else:
            self._pending.append((callback, args))

    def drain(self) -> None:
        """Run queued callbacks, including any posted while draining."""
        if self._draining:
            return
        self._draining = True
        try:
            while self._pending:
                callback, args = self._pending.popleft()
                self._run(callback, args)
        finally:
            self._draining = False

    @staticmethod
    def _run(callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        try:
            callback(*args)
        except Exception:
            logger.warning("Notification listener %r failed", callback, exc_info=True)
