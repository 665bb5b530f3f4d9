# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Silent remote reporter implementation for testing."""

from typing import Any

from .reporter import RemoteReporter, ScopeUpdate


class SilentRemoteReporter(RemoteReporter):
    """Remote reporter that records calls in memory instead of sending them.

    It keeps a persistent scope the same way Sentry does, so tests can verify
    scope clearing and leakage between records without network access.
    Every capture stores a snapshot of the scope as it was at capture time.
    """

    def __init__(self):
        """Initialize silent remote reporter."""
        self.init_options: dict[str, Any] | None = None
        self.scope: dict[str, Any] = _empty_scope()
        self.reported_errors: list[dict[str, Any]] = []
        self.captured_messages: list[dict[str, Any]] = []
        self.flush_count = 0

    @property
    def initialized(self) -> bool:
        """Whether init() has been called on this reporter."""
        return self.init_options is not None

    @property
    def client(self) -> Any:
        return self

    def init(self, options: dict[str, Any]) -> None:
        self.init_options = dict(options)

    def _apply_scope(self, update: ScopeUpdate) -> None:
        if update.clear:
            self.scope = _empty_scope()
        if update.tags is not None:
            self.scope["tags"].update(update.tags)
        self.scope["extras"].update(update.extras)
        if update.user is not None:
            self.scope["user"] = dict(update.user)

    def _snapshot(self) -> dict[str, Any]:
        return {
            "tags": dict(self.scope["tags"]),
            "extras": dict(self.scope["extras"]),
            "user": dict(self.scope["user"]) if self.scope["user"] is not None else None,
        }

    def capture_exception(
        self,
        error: BaseException,
        scope: ScopeUpdate,
        tags: Any = None,
        level: str | None = None,
    ) -> None:
        """Record an exception capture.

        Args:
            error: The exception to report
            scope: Scope changes to apply before capturing
            tags: Tags passed directly with this capture call
            level: Sentry severity for this event
        """
        self._apply_scope(scope)
        self.reported_errors.append({
            "error": error,
            "error_type": type(error).__name__,
            "error_message": str(error),
            "context": {"tags": tags, "level": level},
            "scope": self._snapshot(),
        })

    def capture_message(
        self,
        message: Any,
        level: str | None,
        scope: ScopeUpdate,
    ) -> None:
        """Record a message capture.

        Args:
            message: The message to capture
            level: Sentry severity (may be None)
            scope: Scope changes to apply before capturing
        """
        self._apply_scope(scope)
        self.captured_messages.append({
            "message": message,
            "level": level,
            "scope": self._snapshot(),
        })

    def flush(self, timeout: float | None = None) -> None:
        self.flush_count += 1

    def get_errors(self, error_type: str | None = None) -> list[dict[str, Any]]:
        """Get all reported errors, optionally filtered by type.

        Args:
            error_type: Optional error type to filter by

        Returns:
            List of reported error dictionaries
        """
        if error_type:
            return [e for e in self.reported_errors if e["error_type"] == error_type]
        return self.reported_errors

    def get_messages(self, level: str | None = None) -> list[dict[str, Any]]:
        """Get all captured messages, optionally filtered by level.

        Args:
            level: Optional level to filter by

        Returns:
            List of captured message dictionaries
        """
        if level:
            return [m for m in self.captured_messages if m["level"] == level]
        return self.captured_messages

    def has_errors(self) -> bool:
        return len(self.reported_errors) > 0

    def has_messages(self, level: str | None = None) -> bool:
        if level:
            return any(m["level"] == level for m in self.captured_messages)
        return len(self.captured_messages) > 0


def _empty_scope() -> dict[str, Any]:
    return {"tags": {}, "extras": {}, "user": None}
