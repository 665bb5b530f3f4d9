# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Translation of a single log record into remote reporter calls."""

from enum import Enum
from typing import Any, Mapping

from .errors import to_error
from .reporter import RemoteReporter, ScopeUpdate
from .severity import SeverityMapper, is_exception_severity

LEVEL_FIELD = "level"

# Fields that never travel as extras.
RESERVED_FIELDS = frozenset({"message", "tags", "user", LEVEL_FIELD, "name", "stack"})


class TranslatorAction(str, Enum):
    """Outcome of translating one record."""

    SUPPRESSED = "suppressed"
    MESSAGE_CAPTURED = "message_captured"
    EXCEPTION_CAPTURED = "exception_captured"


def build_extras(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return the record's free-form fields.

    Args:
        record: Log record mapping

    Returns:
        Every field except message, tags, user, level, name and stack
    """
    return {key: value for key, value in record.items() if key not in RESERVED_FIELDS}


def _mapping_or_none(value: Any) -> Mapping[str, Any] | None:
    if isinstance(value, Mapping):
        return value
    return None


class RecordTranslator:
    """Turns log records into scope updates and capture calls.

    Records at the error and fatal severities are captured as exceptions,
    everything else (including records whose level has no mapping) as
    messages. The translator itself holds no state besides the severity map;
    the reporting scope belongs to the reporter.
    """

    def __init__(
        self,
        reporter: RemoteReporter,
        severity_mapper: SeverityMapper | None = None,
        auto_clear_scope: bool = True,
    ):
        """Initialize the translator.

        Args:
            reporter: Remote reporter receiving the capture calls
            severity_mapper: Severity resolution (defaults only when None)
            auto_clear_scope: Clear the reporter's scope before each record
        """
        self.reporter = reporter
        self.severity_mapper = severity_mapper or SeverityMapper()
        self.auto_clear_scope = auto_clear_scope

    def build_scope(self, record: Mapping[str, Any]) -> ScopeUpdate:
        """Collect the scope changes for one record."""
        return ScopeUpdate(
            clear=self.auto_clear_scope,
            tags=_mapping_or_none(record.get("tags")),
            extras=build_extras(record),
            user=_mapping_or_none(record.get("user")),
        )

    def translate(
        self,
        record: Mapping[str, Any],
        silent: bool = False,
        level: str | None = None,
    ) -> TranslatorAction:
        """Translate one record into reporter calls.

        Args:
            record: Log record mapping
            silent: Skip all remote calls
            level: Log-framework level name; read from the record's level
                field when not given

        Returns:
            The action taken for the record
        """
        if silent:
            return TranslatorAction.SUPPRESSED

        level_name = level if level is not None else record.get(LEVEL_FIELD)
        severity = self.severity_mapper.resolve(level_name)
        scope = self.build_scope(record)

        if is_exception_severity(severity):
            self.reporter.capture_exception(
                to_error(record),
                scope=scope,
                tags=record.get("tags"),
                level=severity,
            )
            return TranslatorAction.EXCEPTION_CAPTURED

        # An unmapped level is forwarded as None rather than defaulted.
        self.reporter.capture_message(record.get("message"), level=severity, scope=scope)
        return TranslatorAction.MESSAGE_CAPTURED
