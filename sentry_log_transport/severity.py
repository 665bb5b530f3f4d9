# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Mapping from log-framework level names to Sentry severity levels."""

from enum import Enum
from typing import Mapping


class SentrySeverity(str, Enum):
    """Severity vocabulary understood by Sentry."""

    DEBUG = "debug"
    LOG = "log"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


DEFAULT_LEVELS_MAP: dict[str, str] = {
    "silly": SentrySeverity.DEBUG.value,
    "verbose": SentrySeverity.DEBUG.value,
    "info": SentrySeverity.INFO.value,
    "debug": SentrySeverity.DEBUG.value,
    "warn": SentrySeverity.WARNING.value,
    "error": SentrySeverity.ERROR.value,
}

EXCEPTION_SEVERITIES = frozenset({SentrySeverity.ERROR.value, SentrySeverity.FATAL.value})


def is_exception_severity(severity: str | None) -> bool:
    """Return True if records at this severity are reported as exceptions."""
    return severity in EXCEPTION_SEVERITIES


class SeverityMapper:
    """Resolves log level names to Sentry severities.

    The map starts from DEFAULT_LEVELS_MAP and every key of the custom map
    overrides or extends it. Values are not validated: whatever string the
    caller supplies is handed to Sentry unchanged.

    Example:
        mapper = SeverityMapper({"error": "fatal"})
        mapper.resolve("error")  # "fatal"
        mapper.resolve("warn")   # "warning"
    """

    def __init__(self, custom: Mapping[str, str] | None = None):
        """Initialize the mapper.

        Args:
            custom: Optional overlay applied on top of the default map
        """
        self._levels_map = self.build(custom)

    @staticmethod
    def build(custom: Mapping[str, str] | None = None) -> dict[str, str]:
        """Build a severity map from the defaults and an optional overlay.

        Args:
            custom: Optional mapping of level name to Sentry severity

        Returns:
            New dictionary; the defaults are never mutated
        """
        levels_map = dict(DEFAULT_LEVELS_MAP)
        if custom:
            for level_name, severity in custom.items():
                levels_map[level_name] = _severity_value(severity)
        return levels_map

    @property
    def levels_map(self) -> dict[str, str]:
        """Copy of the effective severity map."""
        return dict(self._levels_map)

    def resolve(self, level_name: str | None) -> str | None:
        """Resolve a level name to a Sentry severity.

        Args:
            level_name: Log-framework level name (case-sensitive)

        Returns:
            Sentry severity, or None when the level has no mapping
        """
        if not isinstance(level_name, str):
            return None
        return self._levels_map.get(level_name)


def _severity_value(severity):
    # Accept SentrySeverity members as well as plain strings.
    if isinstance(severity, SentrySeverity):
        return severity.value
    return severity
