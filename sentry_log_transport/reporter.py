# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Abstract remote reporter interface and the per-record scope update."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class ScopeUpdate:
    """Scope changes that accompany a single capture call.

    The translator accumulates tags, extras and user context here and hands
    the whole value to the reporter together with the capture call.

    Attributes:
        clear: Clear the reporter's scope before applying the update
        tags: Tags to set, or None to leave tags untouched
        extras: Extra fields to set (always applied, possibly empty)
        user: User context to set, or None to leave it untouched
    """
    clear: bool = True
    tags: Mapping[str, Any] | None = None
    extras: dict[str, Any] = field(default_factory=dict)
    user: Mapping[str, Any] | None = None


class RemoteReporter(ABC):
    """Abstract base class for the remote error-tracking client.

    Implementations own initialization, network transport and flushing. The
    reporting scope they hold persists between capture calls unless a
    ScopeUpdate asks for it to be cleared.
    """

    @abstractmethod
    def init(self, options: dict[str, Any]) -> None:
        """Initialize the remote client.

        Args:
            options: Client options with defaults already applied
        """
        pass

    @abstractmethod
    def capture_exception(
        self,
        error: BaseException,
        scope: ScopeUpdate,
        tags: Any = None,
        level: str | None = None,
    ) -> None:
        """Apply the scope update and capture an exception.

        Args:
            error: The exception to report
            scope: Scope changes to apply before capturing
            tags: Tags passed directly with this capture call
            level: Sentry severity for this event
        """
        pass

    @abstractmethod
    def capture_message(
        self,
        message: Any,
        level: str | None,
        scope: ScopeUpdate,
    ) -> None:
        """Apply the scope update and capture a plain message.

        Args:
            message: The message to capture (passed through unvalidated)
            level: Sentry severity, None when the log level had no mapping
            scope: Scope changes to apply before capturing
        """
        pass

    @abstractmethod
    def flush(self, timeout: float | None = None) -> None:
        """Block until pending events have been sent.

        Args:
            timeout: Optional upper bound in seconds
        """
        pass

    @property
    @abstractmethod
    def client(self) -> Any:
        """Underlying client handle for advanced callers."""
        pass
